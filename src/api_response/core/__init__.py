from api_response.core.body import get_body_as_string, get_body_as_string_or_none
from api_response.core.context import CONNECTOR_RESPONSE_KEY, ResolvedUrl, connector_response_from, decode_context
from api_response.core.decoder import parse_body, parse_body_into
from api_response.core.errors import BodyUnavailableError, HttpStatusError, ResponseDecodeError

__all__ = [
    "BodyUnavailableError",
    "CONNECTOR_RESPONSE_KEY",
    "HttpStatusError",
    "ResolvedUrl",
    "ResponseDecodeError",
    "connector_response_from",
    "decode_context",
    "get_body_as_string",
    "get_body_as_string_or_none",
    "parse_body",
    "parse_body_into",
]
