"""
Server request building package.

URL builders, header builder and dispatcher for the cachedContents and
files resources.
"""

from .urls import ServerRequestUrl, CachedContentUrl, FilesRequestUrl
from .headers import get_headers, API_KEY_HEADER, API_CLIENT_HEADER
from .dispatch import make_server_request, get_signal, TASK_TO_METHOD

__all__ = [
    "ServerRequestUrl",
    "CachedContentUrl",
    "FilesRequestUrl",
    "get_headers",
    "API_KEY_HEADER",
    "API_CLIENT_HEADER",
    "make_server_request",
    "get_signal",
    "TASK_TO_METHOD",
]
