"""
Headers builder for server requests.

Every request carries:
  - x-goog-api-client: client identification (plus RequestOptions.api_client)
  - x-goog-api-key: <api_key>
Caller headers from RequestOptions.custom_headers are merged after those and
may not use either reserved name.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

import httpx

from ...core.errors import GenerativeAIRequestInputError
from ...core.request import get_client_headers
from .urls import ServerRequestUrl

logger = logging.getLogger("GenAIServer.Services.Requests.Headers")

API_KEY_HEADER = "x-goog-api-key"
API_CLIENT_HEADER = "x-goog-api-client"

# RFC 9110 token
_HEADER_NAME_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_FORBIDDEN_VALUE_CHARS = ("\r", "\n", "\0")


def _coerce_value(value: Any) -> Any:
    # 数字按字符串处理，与 fetch Headers 一致
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _to_headers(custom_headers: Any) -> httpx.Headers:
    if isinstance(custom_headers, httpx.Headers):
        headers = custom_headers
    elif isinstance(custom_headers, Mapping):
        headers = httpx.Headers({k: _coerce_value(v) for k, v in custom_headers.items()})
    elif isinstance(custom_headers, (str, bytes)):
        raise TypeError(f"expected a mapping or a sequence of pairs, got {type(custom_headers).__name__}")
    else:
        headers = httpx.Headers([(k, _coerce_value(v)) for k, v in custom_headers])

    for header_name, header_value in headers.multi_items():
        if not _HEADER_NAME_RE.fullmatch(header_name):
            raise ValueError(f"invalid header name {header_name!r}")
        if any(c in header_value for c in _FORBIDDEN_VALUE_CHARS):
            raise ValueError(f"invalid value for header {header_name!r}")
    return headers


def get_headers(url: ServerRequestUrl) -> httpx.Headers:
    raw_headers = url.request_options.custom_headers if url.request_options else None

    custom_headers = None
    if raw_headers:
        try:
            custom_headers = _to_headers(raw_headers)
        except (TypeError, ValueError) as e:
            raise GenerativeAIRequestInputError(
                f"unable to convert customHeaders value {raw_headers!r} to Headers: {e}"
            ) from e

    header_items = [
        (API_CLIENT_HEADER, get_client_headers(url.request_options)),
        (API_KEY_HEADER, url.api_key),
    ]

    if custom_headers:
        for header_name, header_value in custom_headers.multi_items():
            if header_name == API_KEY_HEADER:
                raise GenerativeAIRequestInputError(f"Cannot set reserved header name {header_name}")
            elif header_name == API_CLIENT_HEADER:
                raise GenerativeAIRequestInputError(
                    f"Header name {header_name} can only be set using the apiClient field"
                )
            header_items.append((header_name, header_value))
        logger.debug(f"Merged {len(header_items) - 2} custom header(s) for {url!r}")

    return httpx.Headers(header_items)
