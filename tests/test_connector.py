"""
Tests for the transport responses handed to the decoder.
"""

import io
import unittest
from unittest.mock import Mock

import requests
import urllib3
from urllib3 import HTTPResponse as Urllib3Response

from api_response.core.body import get_body_as_string
from api_response.http.connector import BytesConnectorResponse, RequestsConnectorResponse


def streamed_response(body=b"", headers=None, status=200, url="https://api.example.com/items"):
    """Build a requests.Response backed by a real urllib3 raw body, as with stream=True."""
    raw = Urllib3Response(
        body=io.BytesIO(body),
        headers=headers or {},
        status=status,
        preload_content=False,
    )
    response = requests.Response()
    response.status_code = status
    response.raw = raw
    response.url = url
    response.headers = requests.structures.CaseInsensitiveDict(raw.headers)
    return response


class TestBytesConnectorResponse(unittest.TestCase):
    """In-memory transport response."""

    def test_body_stream_handed_out_once(self):
        response = BytesConnectorResponse(200, b"data")
        self.assertEqual(response.body_stream().read(), b"data")
        with self.assertRaises(OSError):
            response.body_stream()

    def test_none_body_has_no_stream(self):
        self.assertIsNone(BytesConnectorResponse(200, None).body_stream())

    def test_close_leaves_unread_body(self):
        response = BytesConnectorResponse(200, b"data")
        response.close()
        self.assertEqual(response.body_stream().read(), b"data")


class TestRequestsConnectorResponse(unittest.TestCase):
    """Transport response over requests with stream=True."""

    def test_status_and_url(self):
        response = RequestsConnectorResponse(streamed_response(status=201))
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.url, "https://api.example.com/items")

    def test_multi_valued_headers_kept_apart(self):
        headers = urllib3.HTTPHeaderDict()
        headers.add("Set-Cookie", "a=1")
        headers.add("Set-Cookie", "b=2")
        headers.add("ETag", "abc123")
        response = RequestsConnectorResponse(streamed_response(headers=headers))

        self.assertEqual(response.all_headers()["Set-Cookie"], ["a=1", "b=2"])
        self.assertEqual(response.all_headers()["ETag"], ["abc123"])

    def test_body_read_and_connection_released(self):
        raw_response = streamed_response(body='{"name":"octo"}'.encode("utf-8"))
        raw_response.close = Mock()
        response = RequestsConnectorResponse(raw_response)

        self.assertEqual(get_body_as_string(response), '{"name":"octo"}')
        raw_response.close.assert_called_once()

    def test_body_stream_single_use(self):
        response = RequestsConnectorResponse(streamed_response(body=b"x"))
        response.body_stream().close()
        with self.assertRaises(OSError):
            response.body_stream()

    def test_close_is_idempotent(self):
        raw_response = streamed_response(body=b"x")
        raw_response.close = Mock()
        response = RequestsConnectorResponse(raw_response)

        response.close()
        response.close()
        raw_response.close.assert_called_once()

    def test_close_after_body_read_does_not_close_twice(self):
        raw_response = streamed_response(body=b"x")
        raw_response.close = Mock()
        response = RequestsConnectorResponse(raw_response)

        get_body_as_string(response)
        response.close()
        raw_response.close.assert_called_once()

    def test_read_failure_becomes_oserror(self):
        raw_response = streamed_response()
        raw_response.raw = Mock()
        raw_response.raw.headers = {}
        raw_response.raw.read.side_effect = urllib3.exceptions.ProtocolError("connection broken")
        response = RequestsConnectorResponse(raw_response)

        with self.assertRaises(OSError):
            get_body_as_string(response)


if __name__ == "__main__":
    unittest.main()
