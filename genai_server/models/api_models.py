from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..core.signals import AbortSignal


class RpcTask(str, Enum):
    UPLOAD = "upload"
    LIST = "list"
    GET = "get"
    DELETE = "delete"
    UPDATE = "update"
    CREATE = "create"


class RequestOptions(BaseModel):
    """
    Per-request configuration.

    - timeout: milliseconds before the request is aborted
    - custom_headers: httpx.Headers, a mapping, or a sequence of (name, value) pairs
    - signal: external AbortSignal; aborting it aborts the request
    """
    api_version: Optional[str] = Field(None, alias="apiVersion")
    base_url: Optional[str] = Field(None, alias="baseUrl")
    api_client: Optional[str] = Field(None, alias="apiClient")
    custom_headers: Optional[Any] = Field(None, alias="customHeaders")
    timeout: Optional[float] = None
    signal: Optional[AbortSignal] = None
    model_config = {"populate_by_name": True, "arbitrary_types_allowed": True}

    def merged_with(self, other: Optional["RequestOptions"]) -> "RequestOptions":
        """Return a copy where fields explicitly set on `other` win."""
        if other is None:
            return self
        return self.model_copy(update={name: getattr(other, name) for name in other.model_fields_set})


def merge_request_options(
    base: Optional[RequestOptions], override: Optional[RequestOptions]
) -> Optional[RequestOptions]:
    if base is None:
        return override
    return base.merged_with(override)
