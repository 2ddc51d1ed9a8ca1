import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

PACKAGE_VERSION = os.getenv("GENAI_SERVER_VERSION", "0.1.0")

LOG_LEVEL_FROM_ENV = os.getenv("LOG_LEVEL", "INFO").upper()

# Generative Language API
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_API_VERSION = "v1beta"

# HTTP client (seconds)
API_TIMEOUT = int(os.getenv("API_TIMEOUT", "600"))
READ_TIMEOUT = float(os.getenv("READ_TIMEOUT", "60.0"))
MAX_CONNECTIONS = int(os.getenv("MAX_CONNECTIONS", "200"))


@dataclass(frozen=True)
class ServerDefaults:
    """
    Endpoint defaults used when RequestOptions does not override them.
    Passed explicitly to URL builders so tests can point at alternate hosts.
    """
    base_url: str = DEFAULT_BASE_URL
    api_version: str = DEFAULT_API_VERSION

    @classmethod
    def from_env(cls) -> "ServerDefaults":
        return cls(
            base_url=os.getenv("GOOGLE_API_BASE_URL", DEFAULT_BASE_URL),
            api_version=os.getenv("GOOGLE_API_VERSION", DEFAULT_API_VERSION),
        )
