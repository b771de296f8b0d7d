"""
Decode-time context.

Field validators that depend on response metadata (relative links, paging
headers) read the originating transport response from the pydantic
validation context instead of from any global state.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Optional
from urllib.parse import urljoin

from pydantic import AfterValidator, ValidationInfo

from api_response.http.connector import ConnectorResponse

CONNECTOR_RESPONSE_KEY = "connector_response"


def decode_context(connector_response: Optional[ConnectorResponse]) -> Dict[str, Any]:
    """Build the validation context passed to the structural decoder."""
    return {CONNECTOR_RESPONSE_KEY: connector_response}


def connector_response_from(info: ValidationInfo) -> Optional[ConnectorResponse]:
    """Return the injected transport response, or None when decoding without one."""
    if not isinstance(info.context, dict):
        return None
    return info.context.get(CONNECTOR_RESPONSE_KEY)


def _resolve_against_response(value: str, info: ValidationInfo) -> str:
    response = connector_response_from(info)
    if response is None or not response.url:
        return value
    return urljoin(response.url, value)


# A URL field that may be sent relative to the resource that returned it
ResolvedUrl = Annotated[str, AfterValidator(_resolve_against_response)]
