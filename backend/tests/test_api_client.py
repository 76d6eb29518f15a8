from __future__ import annotations

import unittest
from unittest import mock

import requests

from frontend.api_client import ApiError, api_call


class TestApiCall(unittest.TestCase):
    def test_unreachable_backend_raises_api_error(self) -> None:
        with mock.patch("frontend.api_client.requests.request", side_effect=requests.ConnectionError("refused")):
            with self.assertRaises(ApiError) as ctx:
                api_call("http://127.0.0.1:9", "GET", "/auth/me")
        self.assertIn("Backend not reachable", str(ctx.exception))

    def test_timeout_raises_api_error(self) -> None:
        with mock.patch("frontend.api_client.requests.request", side_effect=requests.Timeout("slow")):
            with self.assertRaises(ApiError):
                api_call("http://127.0.0.1:9", "POST", "/jobs/1/checkout")

    def test_error_status_uses_message_from_body(self) -> None:
        resp = mock.Mock(ok=False, status_code=409)
        resp.json.return_value = {"message": "This job is already being run", "error": "conflict"}
        with mock.patch("frontend.api_client.requests.request", return_value=resp):
            with self.assertRaises(ApiError) as ctx:
                api_call("http://api", "POST", "/jobs/1/checkout")
        self.assertEqual(str(ctx.exception), "This job is already being run")

    def test_success_returns_json(self) -> None:
        resp = mock.Mock(ok=True, status_code=200)
        resp.json.return_value = [{"id": "1"}]
        with mock.patch("frontend.api_client.requests.request", return_value=resp) as req:
            self.assertEqual(api_call("http://api", "GET", "/jobs"), [{"id": "1"}])
        req.assert_called_once_with("GET", "http://api/jobs", json=None, headers={}, timeout=30)


if __name__ == "__main__":
    unittest.main()
