from __future__ import annotations

from contextlib import closing
from dataclasses import replace
from typing import Optional, Protocol, Type, TypeVar
from urllib.parse import urljoin

import requests
from pydantic import BaseModel

from api_response.config_models import ClientConfig
from api_response.core.body import get_body_as_string_or_none
from api_response.core.decoder import parse_body, parse_body_into
from api_response.core.errors import HttpStatusError
from api_response.core.models import RequestSpec
from api_response.http.connector import ConnectorResponse, RequestsConnectorResponse
from api_response.http.response import DecodedResponse
from api_response.utils.logging import get_logger

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class Connector(Protocol):
    """Protocol for transports that turn a request into a transport response."""

    def send(self, req: RequestSpec) -> ConnectorResponse: ...


class RequestsConnector:
    """Connector using the requests library. The body is left unread on the wire."""

    def __init__(self, timeout_s: float = 30, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.timeout_s = timeout_s

    def send(self, req: RequestSpec) -> RequestsConnectorResponse:
        r = self.session.request(
            method=req.method,
            url=req.url,
            headers=req.headers,
            params=req.params,
            json=req.body if isinstance(req.body, (dict, list)) else None,
            data=None if isinstance(req.body, (dict, list)) else req.body,
            timeout=self.timeout_s,
            stream=True,
        )
        return RequestsConnectorResponse(r)


class ApiClient:
    """Sends requests through a connector and decodes the responses."""

    def __init__(self, connector: Connector, base_url: str = "", default_headers: Optional[dict] = None):
        self.connector = connector
        self.base_url = base_url
        self.default_headers = default_headers or {}
        self.log = get_logger("api_response.http")

    @classmethod
    def from_config(cls, config: ClientConfig) -> ApiClient:
        return cls(
            RequestsConnector(timeout_s=config.timeout_s),
            base_url=config.base_url,
            default_headers=config.headers,
        )

    def fetch(self, req: RequestSpec, type_: Type[T]) -> DecodedResponse[T]:
        """Send a request and decode the body into a new ``type_`` value."""
        with closing(self._send(req)) as connector_response:
            return DecodedResponse.from_connector(connector_response, parse_body(connector_response, type_))

    def refresh(self, req: RequestSpec, instance: M) -> DecodedResponse[M]:
        """Send a request and merge the body into ``instance``, keeping its identity."""
        with closing(self._send(req)) as connector_response:
            return DecodedResponse.from_connector(connector_response, parse_body_into(connector_response, instance))

    def _send(self, req: RequestSpec) -> ConnectorResponse:
        req = replace(
            req,
            url=urljoin(self.base_url, req.url) if self.base_url else req.url,
            headers={**self.default_headers, **req.headers},
        )
        self.log.debug("%s %s", req.method, req.url)
        connector_response = self.connector.send(req)

        if connector_response.status_code >= 400:
            with closing(connector_response):
                body = get_body_as_string_or_none(connector_response)
            self.log.warning("HTTP %s from %s", connector_response.status_code, req.url)
            raise HttpStatusError(
                connector_response.status_code,
                headers=connector_response.all_headers(),
                body=body,
                url=req.url,
            )
        return connector_response
