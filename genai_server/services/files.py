# -*- coding: utf-8 -*-
"""
Files resource: upload, list, get and delete files.
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import os
import uuid
from typing import Any, Dict, Optional

import orjson

from ..core.config import ServerDefaults
from ..core.errors import GenerativeAIRequestInputError
from ..core.http_client import FetchFn, fetch
from ..models.api_models import RequestOptions, RpcTask, merge_request_options
from .requests import FilesRequestUrl, get_headers, make_server_request

logger = logging.getLogger("GenAIServer.Services.Files")


class FileManager:
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

    def _url(self, task: RpcTask, request_options: Optional[RequestOptions]) -> FilesRequestUrl:
        return FilesRequestUrl(
            task,
            self.api_key,
            merge_request_options(self.request_options, request_options),
            self.defaults,
        )

    async def upload_file(
        self,
        data: bytes,
        mime_type: str,
        display_name: Optional[str] = None,
        name: Optional[str] = None,
        request_options: Optional[RequestOptions] = None,
    ) -> Dict[str, Any]:
        """
        Upload raw bytes as a multipart/related request:
        part 1 is the JSON file metadata, part 2 the file content.
        """
        if not mime_type:
            raise GenerativeAIRequestInputError("Must provide a mime_type.")

        url = self._url(RpcTask.UPLOAD, request_options)
        headers = get_headers(url)
        boundary = uuid.uuid4().hex
        headers["X-Goog-Upload-Protocol"] = "multipart"
        headers["Content-Type"] = f"multipart/related; boundary={boundary}"

        file_metadata: Dict[str, Any] = {"mimeType": mime_type}
        if display_name:
            file_metadata["displayName"] = display_name
        if name:
            file_metadata["name"] = name if "/" in name else f"files/{name}"

        body = encode_multipart_related(boundary, {"file": file_metadata}, data, mime_type)
        logger.info(f"Uploading {len(data)} bytes ({mime_type}) as {file_metadata.get('name', '<generated>')}")
        response = await make_server_request(url, headers, body, self.fetch_fn)
        return orjson.loads(response.content)

    async def upload_file_from_path(
        self,
        file_path: str,
        mime_type: Optional[str] = None,
        display_name: Optional[str] = None,
        name: Optional[str] = None,
        request_options: Optional[RequestOptions] = None,
    ) -> Dict[str, Any]:
        mime_type = mime_type or mimetypes.guess_type(file_path)[0]
        if not mime_type:
            raise GenerativeAIRequestInputError(f"Could not guess a mime type for {file_path}; pass mime_type.")
        data = await asyncio.to_thread(_read_file_bytes, file_path)
        return await self.upload_file(
            data,
            mime_type,
            display_name=display_name or os.path.basename(file_path),
            name=name,
            request_options=request_options,
        )

    async def list_files(
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

    async def get_file(self, file_id: str, request_options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        url = self._url(RpcTask.GET, request_options)
        url.append_path(parse_file_id(file_id))
        headers = get_headers(url)
        response = await make_server_request(url, headers, fetch_fn=self.fetch_fn)
        return orjson.loads(response.content)

    async def delete_file(self, file_id: str, request_options: Optional[RequestOptions] = None) -> None:
        url = self._url(RpcTask.DELETE, request_options)
        url.append_path(parse_file_id(file_id))
        headers = get_headers(url)
        await make_server_request(url, headers, fetch_fn=self.fetch_fn)


def parse_file_id(file_id: str) -> str:
    """Accept 'files/{id}' or '{id}' and return the bare id."""
    if file_id and file_id.startswith("files/"):
        file_id = file_id.split("files/")[1]
    if not file_id:
        raise GenerativeAIRequestInputError(
            f"Invalid fileId {file_id!r}. Must be in the format 'files/filename' or 'filename'"
        )
    return file_id


def _read_file_bytes(file_path: str) -> bytes:
    with open(file_path, "rb") as f:
        return f.read()


def encode_multipart_related(boundary: str, metadata: Dict[str, Any], data: bytes, mime_type: str) -> bytes:
    crlf = "\r\n"
    head = (
        f"--{boundary}{crlf}"
        f"Content-Type: application/json; charset=utf-8{crlf}{crlf}"
    ).encode("utf-8")
    head += orjson.dumps(metadata)
    head += f"{crlf}--{boundary}{crlf}Content-Type: {mime_type}{crlf}{crlf}".encode("utf-8")
    tail = f"{crlf}--{boundary}--".encode("utf-8")
    return head + data + tail
