import asyncio

import httpx
import pytest

from genai_server.core.config import ServerDefaults
from genai_server.core.errors import (
    GenerativeAIAbortError,
    GenerativeAIError,
    GenerativeAIFetchError,
)
from genai_server.core.http_client import RequestInit
from genai_server.core.signals import AbortController, AbortError
from genai_server.models import RequestOptions, RpcTask
from genai_server.services.requests import (
    TASK_TO_METHOD,
    CachedContentUrl,
    FilesRequestUrl,
    get_headers,
    make_server_request,
)
from tests.common import RecordingFetch, json_response


@pytest.mark.parametrize(
    "task, method",
    [
        (RpcTask.UPLOAD, "POST"),
        (RpcTask.LIST, "GET"),
        (RpcTask.GET, "GET"),
        (RpcTask.DELETE, "DELETE"),
        (RpcTask.UPDATE, "PATCH"),
        (RpcTask.CREATE, "POST"),
    ],
)
def test_task_to_method(task: RpcTask, method: str) -> None:
    # then
    assert TASK_TO_METHOD[task] == method


@pytest.mark.asyncio
async def test_make_server_request_forwards_to_transport(
    defaults: ServerDefaults, recording_fetch: RecordingFetch
) -> None:
    # given
    url = FilesRequestUrl(RpcTask.GET, "my-api-key", defaults=defaults)
    url.append_path("abc")
    headers = get_headers(url)

    # when
    result = await make_server_request(url, headers, fetch_fn=recording_fetch)

    # then
    assert result is recording_fetch.response
    assert len(recording_fetch.calls) == 1
    called_url, init = recording_fetch.last_call
    assert called_url == "https://example.test/v9/files/abc"
    assert init.method == "GET"
    assert init.headers is headers
    assert init.headers["x-goog-api-key"] == "my-api-key"
    assert init.body is None
    assert init.signal is None


@pytest.mark.asyncio
async def test_make_server_request_attaches_body(
    defaults: ServerDefaults, recording_fetch: RecordingFetch
) -> None:
    # given
    url = CachedContentUrl(RpcTask.CREATE, "k", defaults=defaults)

    # when
    _ = await make_server_request(url, get_headers(url), b'{"model":"models/x"}', recording_fetch)

    # then
    _, init = recording_fetch.last_call
    assert init.method == "POST"
    assert init.body == b'{"model":"models/x"}'


@pytest.mark.asyncio
async def test_make_server_request_skips_empty_body(
    defaults: ServerDefaults, recording_fetch: RecordingFetch
) -> None:
    # given
    url = CachedContentUrl(RpcTask.UPDATE, "k", defaults=defaults)

    # when
    _ = await make_server_request(url, get_headers(url), "", recording_fetch)

    # then
    _, init = recording_fetch.last_call
    assert init.method == "PATCH"
    assert init.body is None


@pytest.mark.asyncio
async def test_make_server_request_attaches_signal_and_releases_timer(
    defaults: ServerDefaults, recording_fetch: RecordingFetch
) -> None:
    # given
    url = CachedContentUrl(RpcTask.LIST, "k", RequestOptions(timeout=20), defaults)

    # when
    _ = await make_server_request(url, get_headers(url), fetch_fn=recording_fetch)
    await asyncio.sleep(0.05)

    # then
    _, init = recording_fetch.last_call
    assert init.signal is not None
    assert init.signal.aborted is False


@pytest.mark.asyncio
async def test_make_server_request_attaches_external_signal(
    defaults: ServerDefaults, recording_fetch: RecordingFetch
) -> None:
    # given
    external = AbortController()
    url = CachedContentUrl(RpcTask.DELETE, "k", RequestOptions(signal=external.signal), defaults)
    url.append_path("c1")

    # when
    _ = await make_server_request(url, get_headers(url), fetch_fn=recording_fetch)

    # then
    called_url, init = recording_fetch.last_call
    assert called_url == "https://example.test/v9/cachedContents/c1"
    assert init.method == "DELETE"
    assert init.signal is not None


@pytest.mark.asyncio
async def test_make_server_request_when_server_returns_error(defaults: ServerDefaults) -> None:
    # given
    details = [{"@type": "type.googleapis.com/google.rpc.ErrorInfo", "reason": "API_KEY_INVALID"}]
    fetch_fn = RecordingFetch(
        json_response(400, {"error": {"code": 400, "message": "API key not valid.", "details": details}})
    )
    url = FilesRequestUrl(RpcTask.LIST, "bad-key", defaults=defaults)

    # when
    with pytest.raises(GenerativeAIFetchError) as error:
        _ = await make_server_request(url, get_headers(url), fetch_fn=fetch_fn)

    # then
    assert error.value.status == 400
    assert error.value.status_text == "Bad Request"
    assert error.value.error_details == details
    assert str(error.value).startswith(
        "Error fetching from https://example.test/v9/files: [400 Bad Request] API key not valid."
    )


@pytest.mark.asyncio
async def test_make_server_request_when_transport_is_aborted(defaults: ServerDefaults) -> None:
    # given
    async def aborted_fetch(url: str, init: RequestInit) -> httpx.Response:
        raise AbortError("Request timed out after 5 ms")

    url = FilesRequestUrl(RpcTask.GET, "k", defaults=defaults)

    # when
    with pytest.raises(GenerativeAIAbortError) as error:
        _ = await make_server_request(url, get_headers(url), fetch_fn=aborted_fetch)

    # then
    assert "Request aborted when fetching https://example.test/v9/files" in str(error.value)
    assert isinstance(error.value.__cause__, AbortError)


@pytest.mark.asyncio
async def test_make_server_request_when_transport_fails(defaults: ServerDefaults) -> None:
    # given
    async def failing_fetch(url: str, init: RequestInit) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    url = FilesRequestUrl(RpcTask.GET, "k", defaults=defaults)

    # when
    with pytest.raises(GenerativeAIError) as error:
        _ = await make_server_request(url, get_headers(url), fetch_fn=failing_fetch)

    # then
    assert type(error.value) is GenerativeAIError
    assert str(error.value) == "Error fetching from https://example.test/v9/files: connection refused"
