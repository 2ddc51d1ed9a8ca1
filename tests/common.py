from typing import Any, List, Optional, Tuple

import httpx
import orjson

from genai_server.core.http_client import RequestInit


class RecordingFetch:
    """Transport stub recording every (url, init) pair it receives."""

    def __init__(self, response: Optional[httpx.Response] = None):
        self.response = response or httpx.Response(200, content=b"{}")
        self.calls: List[Tuple[str, RequestInit]] = []

    async def __call__(self, url: str, init: RequestInit) -> httpx.Response:
        self.calls.append((url, init))
        return self.response

    @property
    def last_call(self) -> Tuple[str, RequestInit]:
        return self.calls[-1]


def json_response(status_code: int, payload: Any) -> httpx.Response:
    return httpx.Response(status_code, content=orjson.dumps(payload))
