from __future__ import annotations

from typing import Optional

from api_response.core.errors import BodyUnavailableError
from api_response.http.connector import ConnectorResponse
from api_response.utils.logging import get_logger

log = get_logger("api_response.body")


def get_body_as_string(connector_response: ConnectorResponse) -> str:
    """
    Read the whole response body and decode it as UTF-8.

    The stream is closed on every exit path. Malformed byte sequences are
    replaced rather than raised.

    Raises:
        BodyUnavailableError: the transport has no body stream.
        OSError: reading the stream failed.
    """
    stream = connector_response.body_stream()
    if stream is None:
        raise BodyUnavailableError(f"no body stream for response from {connector_response.url or 'unknown url'}")
    with stream:
        return stream.read().decode("utf-8", errors="replace")


def get_body_as_string_or_none(connector_response: ConnectorResponse) -> Optional[str]:
    """Best-effort variant of get_body_as_string for diagnostics. Never raises on I/O failure."""
    try:
        return get_body_as_string(connector_response)
    except BodyUnavailableError:
        log.debug("No body stream available (status=%s)", connector_response.status_code)
    except OSError as e:
        log.debug("Failed to read body (status=%s): %s", connector_response.status_code, e)
    return None
