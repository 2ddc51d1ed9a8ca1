# -*- coding: utf-8 -*-
"""
Dispatch of server requests (cachedContents, files).

- HTTP method looked up from the task
- Cancellation signal built from RequestOptions.timeout / RequestOptions.signal
- Request handed to make_request() with an injectable transport
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from ...core.http_client import FetchFn, RequestBody, RequestInit, fetch
from ...core.logging_utils import mask_api_key
from ...core.request import make_request
from ...core.signals import AbortController, AbortSignal
from ...models.api_models import RequestOptions, RpcTask
from .urls import ServerRequestUrl

logger = logging.getLogger("GenAIServer.Services.Requests.Dispatch")

TASK_TO_METHOD: Dict[RpcTask, str] = {
    RpcTask.UPLOAD: "POST",
    RpcTask.LIST: "GET",
    RpcTask.GET: "GET",
    RpcTask.DELETE: "DELETE",
    RpcTask.UPDATE: "PATCH",
    RpcTask.CREATE: "POST",
}


async def make_server_request(
    url: ServerRequestUrl,
    headers: httpx.Headers,
    body: Optional[RequestBody] = None,
    fetch_fn: FetchFn = fetch,
) -> httpx.Response:
    init = RequestInit(method=TASK_TO_METHOD[url.task], headers=headers)

    if body:
        init.body = body

    signal = get_signal(url.request_options)
    if signal is not None:
        init.signal = signal

    logger.info(f"{init.method} {str(url).split('?')[0]} (key={mask_api_key(url.api_key)})")
    try:
        return await make_request(str(url), init, fetch_fn)
    finally:
        if signal is not None:
            signal.close()


def get_signal(request_options: Optional[RequestOptions] = None) -> Optional[AbortSignal]:
    """
    Build an AbortSignal from RequestOptions.timeout (milliseconds) and
    RequestOptions.signal. It fires on whichever happens first.
    Returns None when neither is set. Must be called inside a running event loop
    when a timeout is set.
    """
    if request_options is None:
        return None

    timeout = request_options.timeout
    has_timeout = timeout is not None and timeout >= 0
    if request_options.signal is None and not has_timeout:
        return None

    controller = AbortController()
    if has_timeout:
        controller.abort_after(timeout / 1000, reason=f"Request timed out after {timeout:g} ms")
    if request_options.signal is not None:
        controller.follow(request_options.signal)
    return controller.signal
