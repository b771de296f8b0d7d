from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Dict, List, Mapping, Optional, Protocol

import requests
import urllib3


class ConnectorResponse(Protocol):
    """Protocol for transport responses handed to the decoder."""

    @property
    def status_code(self) -> int: ...

    @property
    def url(self) -> str: ...

    def all_headers(self) -> Mapping[str, List[str]]: ...

    def body_stream(self) -> Optional[BinaryIO]: ...

    def close(self) -> None: ...


@dataclass
class BytesConnectorResponse:
    """Transport response backed by an in-memory body."""

    status_code: int
    body: Optional[bytes] = b""
    headers: Dict[str, List[str]] = field(default_factory=dict)
    url: str = ""
    _consumed: bool = field(default=False, init=False, repr=False)

    def all_headers(self) -> Mapping[str, List[str]]:
        return self.headers

    def body_stream(self) -> Optional[BinaryIO]:
        """Hand out the body stream. Only one call may succeed."""
        if self._consumed:
            raise OSError("response body stream was already consumed")
        self._consumed = True
        if self.body is None:
            return None
        return io.BytesIO(self.body)

    def close(self) -> None:
        pass


class _RawBodyStream(io.RawIOBase):
    """Readable view over a streamed requests body that releases the connection on close."""

    def __init__(self, response: requests.Response, on_close: Callable[[], None]):
        self._response = response
        self._on_close = on_close

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        try:
            data = self._response.raw.read(len(b), decode_content=True)
        except (urllib3.exceptions.HTTPError, requests.RequestException) as e:
            raise OSError(f"failed to read response body from {self._response.url}: {e}") from e
        n = len(data)
        b[:n] = data
        return n

    def close(self) -> None:
        if not self.closed:
            self._on_close()
        super().close()


class RequestsConnectorResponse:
    """Transport response wrapping a requests.Response fetched with stream=True."""

    def __init__(self, response: requests.Response):
        self._response = response
        self._headers = self._collect_headers(response)
        self._consumed = False
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def url(self) -> str:
        return self._response.url or ""

    def all_headers(self) -> Mapping[str, List[str]]:
        return self._headers

    def body_stream(self) -> Optional[BinaryIO]:
        if self._consumed:
            raise OSError("response body stream was already consumed")
        self._consumed = True
        if self._response.raw is None:
            return None
        return io.BufferedReader(_RawBodyStream(self._response, self.close))

    def close(self) -> None:
        """Release the underlying connection. Safe to call more than once."""
        if not self._closed:
            self._closed = True
            self._response.close()

    @staticmethod
    def _collect_headers(response: requests.Response) -> Dict[str, List[str]]:
        # urllib3 keeps repeated fields apart; requests joins them with ", "
        raw_headers = getattr(response.raw, "headers", None)
        if raw_headers is not None and hasattr(raw_headers, "getlist"):
            return {name: list(raw_headers.getlist(name)) for name in raw_headers.keys()}
        return {name: [value] for name, value in response.headers.items()}
