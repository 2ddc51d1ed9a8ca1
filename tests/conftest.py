import pytest

from genai_server.core.config import ServerDefaults
from tests.common import RecordingFetch


@pytest.fixture
def defaults() -> ServerDefaults:
    return ServerDefaults(base_url="https://example.test", api_version="v9")


@pytest.fixture
def recording_fetch() -> RecordingFetch:
    return RecordingFetch()


@pytest.fixture(autouse=True)
def clean_endpoint_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GOOGLE_API_BASE_URL", raising=False)
    monkeypatch.delenv("GOOGLE_API_VERSION", raising=False)
