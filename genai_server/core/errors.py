"""
Error types raised by the GenAI server request layer.
"""

from __future__ import annotations

from typing import Any, List, Optional


class GenerativeAIError(Exception):
    """Base error; also wraps unexpected transport failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GenerativeAIRequestInputError(GenerativeAIError):
    """Invalid caller input, raised before any request is dispatched."""


class GenerativeAIFetchError(GenerativeAIError):
    """The server answered with a non-success status."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        status_text: Optional[str] = None,
        error_details: Optional[List[Any]] = None,
    ):
        super().__init__(message)
        self.status = status
        self.status_text = status_text
        self.error_details = error_details


class GenerativeAIAbortError(GenerativeAIError):
    """The request's cancellation signal fired while it was in flight."""
