"""
Tests for the DecodedResponse value type.
"""

import dataclasses
import unittest

from api_response.http.connector import BytesConnectorResponse
from api_response.http.response import DecodedResponse


class TestDecodedResponse(unittest.TestCase):
    """Accessors, immutability and rewrapping."""

    def setUp(self):
        self.headers = {"ETag": ["abc123"], "Set-Cookie": ["a=1", "b=2"], "X-Empty": []}
        self.response = DecodedResponse(status_code=200, all_headers=self.headers, body={"id": 42})

    def test_header_returns_first_value(self):
        self.assertEqual(self.response.header("ETag"), "abc123")
        self.assertEqual(self.response.header("Set-Cookie"), "a=1")

    def test_header_missing_is_none(self):
        self.assertIsNone(self.response.header("Missing"))
        self.assertIsNone(self.response.header("X-Empty"))

    def test_header_lookup_is_case_sensitive(self):
        self.assertIsNone(self.response.header("etag"))

    def test_headers_returns_all_values(self):
        self.assertEqual(list(self.response.headers("Set-Cookie")), ["a=1", "b=2"])

    def test_headers_missing_is_empty(self):
        self.assertEqual(list(self.response.headers("Missing")), [])

    def test_header_matches_first_of_headers(self):
        for name in ("ETag", "Set-Cookie", "X-Empty", "Missing"):
            values = self.response.headers(name)
            expected = values[0] if values else None
            self.assertEqual(self.response.header(name), expected)

    def test_is_immutable(self):
        with self.assertRaises(dataclasses.FrozenInstanceError):
            self.response.status_code = 500

    def test_with_body_keeps_status_and_shared_headers(self):
        rewrapped = self.response.with_body(["post", "processed"])
        self.assertEqual(rewrapped.status_code, 200)
        self.assertIs(rewrapped.all_headers, self.response.all_headers)
        self.assertEqual(rewrapped.body, ["post", "processed"])
        self.assertEqual(self.response.body, {"id": 42})

    def test_with_body_none(self):
        self.assertIsNone(self.response.with_body(None).body)

    def test_from_connector_shares_headers(self):
        raw = BytesConnectorResponse(204, None, headers=self.headers)
        response = DecodedResponse.from_connector(raw, [])
        self.assertEqual(response.status_code, 204)
        self.assertIs(response.all_headers, self.headers)
        self.assertEqual(response.body, [])


if __name__ == "__main__":
    unittest.main()
