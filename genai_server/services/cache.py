# -*- coding: utf-8 -*-
"""
cachedContents resource: create, list, get, update and delete cached content.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

import orjson

from ..core.config import ServerDefaults
from ..core.errors import GenerativeAIRequestInputError
from ..core.http_client import FetchFn, fetch
from ..models.api_models import RequestOptions, RpcTask, merge_request_options
from .requests import CachedContentUrl, get_headers, make_server_request

logger = logging.getLogger("GenAIServer.Services.Cache")

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class CacheManager:
    def __init__(
        self,
        api_key: str,
        request_options: Optional[RequestOptions] = None,
        fetch_fn: FetchFn = fetch,
        defaults: Optional[ServerDefaults] = None,
    ):
        self.api_key = api_key
        self.request_options = request_options
        self.fetch_fn = fetch_fn
        self.defaults = defaults

    def _url(self, task: RpcTask, request_options: Optional[RequestOptions]) -> CachedContentUrl:
        return CachedContentUrl(
            task,
            self.api_key,
            merge_request_options(self.request_options, request_options),
            self.defaults,
        )

    async def create(
        self,
        cached_content: Dict[str, Any],
        ttl_seconds: Optional[int] = None,
        request_options: Optional[RequestOptions] = None,
    ) -> Dict[str, Any]:
        """
        Create cached content. `cached_content` uses the REST field names
        (model, contents, systemInstruction, tools, ttl / expireTime, displayName).
        """
        payload = _with_ttl(cached_content, ttl_seconds)
        if "ttl" in payload and "expireTime" in payload:
            raise GenerativeAIRequestInputError(
                "You cannot specify both `ttl` and `expireTime` when creating a cache. `expireTime` takes precedence."
            )
        model = payload.get("model")
        if not model:
            raise GenerativeAIRequestInputError("Cached content must contain a `model` field.")
        if "/" not in model:
            payload["model"] = f"models/{model}"

        url = self._url(RpcTask.CREATE, request_options)
        headers = get_headers(url)
        headers["Content-Type"] = "application/json"
        logger.info(f"Creating cached content for {payload['model']}. Payload keys: {list(payload.keys())}")
        response = await make_server_request(url, headers, orjson.dumps(payload), self.fetch_fn)
        return orjson.loads(response.content)

    async def list(
        self,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        request_options: Optional[RequestOptions] = None,
    ) -> Dict[str, Any]:
        url = self._url(RpcTask.LIST, request_options)
        if page_size:
            url.append_param("pageSize", str(page_size))
        if page_token:
            url.append_param("pageToken", page_token)
        headers = get_headers(url)
        response = await make_server_request(url, headers, fetch_fn=self.fetch_fn)
        return orjson.loads(response.content)

    async def get(self, name: str, request_options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        url = self._url(RpcTask.GET, request_options)
        url.append_path(parse_cache_name(name))
        headers = get_headers(url)
        response = await make_server_request(url, headers, fetch_fn=self.fetch_fn)
        return orjson.loads(response.content)

    async def update(
        self,
        name: str,
        cached_content: Dict[str, Any],
        ttl_seconds: Optional[int] = None,
        update_mask: Optional[List[str]] = None,
        request_options: Optional[RequestOptions] = None,
    ) -> Dict[str, Any]:
        payload = _with_ttl(cached_content, ttl_seconds)

        url = self._url(RpcTask.UPDATE, request_options)
        url.append_path(parse_cache_name(name))
        if update_mask:
            url.append_param("updateMask", ",".join(camel_to_snake(field) for field in update_mask))
        headers = get_headers(url)
        headers["Content-Type"] = "application/json"
        response = await make_server_request(url, headers, orjson.dumps(payload), self.fetch_fn)
        return orjson.loads(response.content)

    async def delete(self, name: str, request_options: Optional[RequestOptions] = None) -> None:
        url = self._url(RpcTask.DELETE, request_options)
        url.append_path(parse_cache_name(name))
        headers = get_headers(url)
        await make_server_request(url, headers, fetch_fn=self.fetch_fn)


def _with_ttl(cached_content: Dict[str, Any], ttl_seconds: Optional[int]) -> Dict[str, Any]:
    payload = dict(cached_content)
    if ttl_seconds is not None:
        payload["ttl"] = f"{ttl_seconds}s"
    return payload


def parse_cache_name(name: str) -> str:
    """Accept 'cachedContents/{id}' or '{id}' and return the bare id."""
    if name and name.startswith("cachedContents/"):
        name = name.split("cachedContents/")[1]
    if not name:
        raise GenerativeAIRequestInputError(
            f"Invalid name {name!r}. Must be in the format 'cachedContents/name' or 'name'"
        )
    return name


def camel_to_snake(field: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", field).lower()
