"""
Unit tests for multitarget.core.http.client.
"""

import requests

from multitarget import __version__
from multitarget.core.http import RawContentClient


def fake_response(mocker, status_code, text=""):
    response = mocker.Mock()
    response.status_code = status_code
    response.text = text
    return response


class TestRawContentClient:
    def test_user_agent_and_timeout(self):
        client = RawContentClient(timeout=7)

        assert client.timeout == 7
        assert client.session.headers["User-Agent"] == f"multitarget/{__version__}"
        client.close()

    def test_ok_returns_text(self, mocker):
        client = RawContentClient(timeout=3)
        get = mocker.patch.object(
            client.session, "get", return_value=fake_response(mocker, 200, "[package]\n")
        )

        assert client.get_text("https://example.com/Cargo.toml") == "[package]\n"
        get.assert_called_once_with("https://example.com/Cargo.toml", timeout=3)

    def test_not_found_returns_none(self, mocker):
        client = RawContentClient()
        mocker.patch.object(client.session, "get", return_value=fake_response(mocker, 404, "404"))

        assert client.get_text("https://example.com/missing") is None

    def test_other_success_codes_return_none(self, mocker):
        client = RawContentClient()
        mocker.patch.object(client.session, "get", return_value=fake_response(mocker, 204))

        assert client.get_text("https://example.com/empty") is None

    def test_transport_error_returns_none(self, mocker):
        client = RawContentClient()
        mocker.patch.object(
            client.session, "get", side_effect=requests.ConnectionError("unreachable")
        )

        assert client.get_text("https://example.com/x") is None

    def test_context_manager_closes_session(self, mocker):
        with RawContentClient() as client:
            close = mocker.patch.object(client.session, "close")

        close.assert_called_once()
