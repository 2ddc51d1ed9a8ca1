"""
全局 HTTP 客户端管理模块
提供复用的 httpx.AsyncClient 实例，以及默认的 fetch 传输函数
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

import httpx

from .config import API_TIMEOUT, READ_TIMEOUT, MAX_CONNECTIONS
from .signals import AbortError, AbortSignal

logger = logging.getLogger("GenAIServer.Core.HTTPClient")

RequestBody = Union[bytes, str]


@dataclass
class RequestInit:
    """Request descriptor handed to a transport function."""
    method: str
    headers: httpx.Headers
    body: Optional[RequestBody] = None
    signal: Optional[AbortSignal] = None


FetchFn = Callable[[str, RequestInit], Awaitable[httpx.Response]]

# 全局客户端实例
_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    """
    获取全局复用的 HTTP 客户端

    配置说明：
    - limits: 连接池限制
    - timeout: API_TIMEOUT 为总体超时，READ_TIMEOUT 为读取超时
    - http2: 启用 HTTP/2 支持（如果服务端支持）
    """
    global _http_client

    if _http_client is None or _http_client.is_closed:
        logger.info("Initializing global HTTP client with connection pooling")
        _http_client = httpx.AsyncClient(
            limits=httpx.Limits(
                max_connections=MAX_CONNECTIONS,
                max_keepalive_connections=50,
                keepalive_expiry=120.0
            ),
            timeout=httpx.Timeout(API_TIMEOUT, read=READ_TIMEOUT),
            follow_redirects=True,
            http2=True
        )

    return _http_client


async def close_http_client():
    """
    关闭全局 HTTP 客户端（应用关闭时调用）
    """
    global _http_client

    if _http_client is not None:
        logger.info("Closing global HTTP client")
        await _http_client.aclose()
        _http_client = None


async def fetch(url: str, init: RequestInit, client: Optional[httpx.AsyncClient] = None) -> httpx.Response:
    """
    Default transport. Sends one request and returns the response.

    When init.signal is set the send is raced against the signal; if the signal
    fires first the in-flight send is cancelled and AbortError is raised.
    For such requests the client's read timeout is lifted; the signal is the deadline.
    """
    http_client = client or get_http_client()

    signal = init.signal
    if signal is None:
        request = http_client.build_request(init.method, url, headers=init.headers, content=init.body)
        return await http_client.send(request)

    signal.throw_if_aborted()

    request = http_client.build_request(
        init.method,
        url,
        headers=init.headers,
        content=init.body,
        timeout=signal_owned_timeout(http_client.timeout),
    )
    send_task = asyncio.ensure_future(http_client.send(request))
    abort_task = asyncio.ensure_future(signal.wait())
    try:
        done, _ = await asyncio.wait({send_task, abort_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (send_task, abort_task):
            if not task.done():
                task.cancel()

    if send_task in done:
        return send_task.result()

    logger.info(f"Aborting {init.method} {url.split('?')[0]}: {signal.reason}")
    await asyncio.gather(send_task, return_exceptions=True)
    raise AbortError(signal.reason)


def signal_owned_timeout(timeout: httpx.Timeout) -> httpx.Timeout:
    """Keep connect/write/pool limits, drop the read limit."""
    return httpx.Timeout(connect=timeout.connect, read=None, write=timeout.write, pool=timeout.pool)
