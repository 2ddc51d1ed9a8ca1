"""
Generic request dispatch shared by all server resources.

make_request() hands a built request to a transport function and turns
transport failures and non-success responses into GenerativeAIError subclasses.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

import httpx
import orjson

from .config import PACKAGE_VERSION
from .errors import GenerativeAIAbortError, GenerativeAIError, GenerativeAIFetchError
from .http_client import FetchFn, RequestInit, fetch
from .signals import AbortError

if TYPE_CHECKING:
    from ..models.api_models import RequestOptions

logger = logging.getLogger("GenAIServer.Core.Request")

CLIENT_LIBRARY_NAME = "genai-server-py"


def get_client_headers(request_options: Optional["RequestOptions"] = None) -> str:
    client_header = f"{CLIENT_LIBRARY_NAME}/{PACKAGE_VERSION}"
    if request_options is not None and request_options.api_client:
        client_header += f" {request_options.api_client}"
    return client_header


async def make_request(url: str, init: RequestInit, fetch_fn: FetchFn = fetch) -> httpx.Response:
    try:
        response = await fetch_fn(url, init)
    except AbortError as e:
        raise GenerativeAIAbortError(f"Request aborted when fetching {url}: {e}") from e
    except GenerativeAIError:
        raise
    except (httpx.HTTPError, OSError) as e:
        raise GenerativeAIError(f"Error fetching from {url}: {e}") from e

    if not response.is_success:
        message, error_details = _parse_error_body(response)
        raise GenerativeAIFetchError(
            f"Error fetching from {url}: [{response.status_code} {response.reason_phrase}] {message}",
            status=response.status_code,
            status_text=response.reason_phrase,
            error_details=error_details,
        )
    return response


def _parse_error_body(response: httpx.Response) -> Tuple[str, Optional[List[Any]]]:
    """Extract `error.message` / `error.details` from a JSON error body."""
    message = response.reason_phrase
    error_details = None
    try:
        body = orjson.loads(response.content)
    except orjson.JSONDecodeError:
        logger.debug(f"Non-JSON error body with status {response.status_code}")
        return message, error_details

    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return message, error_details

    message = error.get("message") or message
    if error.get("details"):
        error_details = error["details"]
        message += f" {orjson.dumps(error_details).decode()}"
    return message, error_details
