# -*- coding: utf-8 -*-
"""
URL builders for server resources (cachedContents, files).

- {baseUrl}/{apiVersion}/cachedContents
- {baseUrl}/{apiVersion}/files
- {baseUrl}/upload/{apiVersion}/files (file uploads)
"""

from __future__ import annotations

from typing import Optional

import httpx

from ...core.config import ServerDefaults
from ...models.api_models import RequestOptions, RpcTask


class ServerRequestUrl:
    """Task, API key, options and the URL being built for one outgoing call."""

    def __init__(
        self,
        task: RpcTask,
        api_key: str,
        request_options: Optional[RequestOptions] = None,
        defaults: Optional[ServerDefaults] = None,
    ):
        self.task = task
        self.api_key = api_key
        self.request_options = request_options
        self.defaults = defaults or ServerDefaults.from_env()
        self._url: httpx.URL

    def _init_url(self, *path_parts: str) -> None:
        options = self.request_options
        api_version = (options and options.api_version) or self.defaults.api_version
        base_url = (options and options.base_url) or self.defaults.base_url

        initial_url = base_url
        for part in path_parts:
            initial_url += f"/{part.format(api_version=api_version)}"

        url = httpx.URL(initial_url)
        if not url.scheme or not url.host:
            raise httpx.InvalidURL(f"Invalid absolute URL: {initial_url!r}")
        self._url = url

    @property
    def url(self) -> httpx.URL:
        return self._url

    def append_path(self, path: str) -> None:
        self._url = self._url.copy_with(path=f"{self._url.path}/{path}")

    def append_param(self, key: str, value: str) -> None:
        self._url = self._url.copy_add_param(key, value)

    def __str__(self) -> str:
        return str(self._url)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(task={self.task.name}, url={str(self._url).split('?')[0]!r})"


class CachedContentUrl(ServerRequestUrl):
    def __init__(
        self,
        task: RpcTask,
        api_key: str,
        request_options: Optional[RequestOptions] = None,
        defaults: Optional[ServerDefaults] = None,
    ):
        super().__init__(task, api_key, request_options, defaults)
        self._init_url("{api_version}", "cachedContents")


class FilesRequestUrl(ServerRequestUrl):
    def __init__(
        self,
        task: RpcTask,
        api_key: str,
        request_options: Optional[RequestOptions] = None,
        defaults: Optional[ServerDefaults] = None,
    ):
        super().__init__(task, api_key, request_options, defaults)
        if self.task == RpcTask.UPLOAD:
            self._init_url("upload", "{api_version}", "files")
        else:
            self._init_url("{api_version}", "files")
