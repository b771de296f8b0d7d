from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Generic, Mapping, Optional, Sequence, TypeVar

from api_response.http.connector import ConnectorResponse

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class DecodedResponse(Generic[T]):
    """Status code, headers and decoded body of one HTTP response."""

    status_code: int
    all_headers: Mapping[str, Sequence[str]]
    body: Optional[T] = None

    @classmethod
    def from_connector(cls, connector_response: ConnectorResponse, body: Optional[T]) -> DecodedResponse[T]:
        """Wrap a decoded body together with the transport response metadata."""
        return cls(
            status_code=connector_response.status_code,
            all_headers=connector_response.all_headers(),
            body=body,
        )

    def with_body(self, body: Optional[U]) -> DecodedResponse[U]:
        """Same status code and header mapping, different body."""
        return dataclasses.replace(self, body=body)

    def headers(self, name: str) -> Sequence[str]:
        """All values of a header field, empty if the field is not set."""
        return self.all_headers.get(name) or []

    def header(self, name: str) -> Optional[str]:
        """
        First value of a header field.

        Args:
            name: Header field name, matched case-sensitively.

        Returns:
            The first value, or None if the header isn't set.
        """
        values = self.all_headers.get(name)
        if values:
            return values[0]
        return None
