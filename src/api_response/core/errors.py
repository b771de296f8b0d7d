from __future__ import annotations

from typing import Mapping, Optional, Sequence


class BodyUnavailableError(OSError):
    """Raised when a transport response has no body stream to read."""


class ResponseDecodeError(ValueError):
    """Raised when a response body cannot be decoded into the requested shape."""

    def __init__(self, message: str, body: str, cause: Exception):
        super().__init__(message)
        self.body = body
        self.cause = cause


class HttpStatusError(Exception):
    """Raised by the client when the server answers with an error status."""

    def __init__(
        self,
        status_code: int,
        headers: Optional[Mapping[str, Sequence[str]]] = None,
        body: Optional[str] = None,
        url: str = "",
    ):
        super().__init__(f"HTTP error {status_code} for {url or 'request'}")
        self.status_code = status_code
        self.headers = headers or {}
        self.body = body
        self.url = url
