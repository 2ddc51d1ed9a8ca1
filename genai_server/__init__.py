"""
GenAI server request builder.

Builds and dispatches REST requests for the Generative Language API
cachedContents and files resources.
"""

from .core.config import (
    PACKAGE_VERSION,
    DEFAULT_BASE_URL,
    DEFAULT_API_VERSION,
    ServerDefaults,
)
from .core.errors import (
    GenerativeAIError,
    GenerativeAIRequestInputError,
    GenerativeAIFetchError,
    GenerativeAIAbortError,
)
from .core.http_client import RequestInit, fetch, get_http_client, close_http_client
from .core.logging_utils import setup_logging
from .core.request import get_client_headers, make_request
from .core.signals import AbortController, AbortError, AbortSignal
from .models import RequestOptions, RpcTask
from .services import CacheManager, FileManager
from .services.requests import (
    ServerRequestUrl,
    CachedContentUrl,
    FilesRequestUrl,
    get_headers,
    get_signal,
    make_server_request,
    TASK_TO_METHOD,
)

__version__ = PACKAGE_VERSION

__all__ = [
    "PACKAGE_VERSION",
    "DEFAULT_BASE_URL",
    "DEFAULT_API_VERSION",
    "ServerDefaults",
    "GenerativeAIError",
    "GenerativeAIRequestInputError",
    "GenerativeAIFetchError",
    "GenerativeAIAbortError",
    "RequestInit",
    "fetch",
    "get_http_client",
    "close_http_client",
    "setup_logging",
    "get_client_headers",
    "make_request",
    "AbortController",
    "AbortError",
    "AbortSignal",
    "RequestOptions",
    "RpcTask",
    "CacheManager",
    "FileManager",
    "ServerRequestUrl",
    "CachedContentUrl",
    "FilesRequestUrl",
    "get_headers",
    "get_signal",
    "make_server_request",
    "TASK_TO_METHOD",
]
