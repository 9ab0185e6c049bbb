"""Tests for the HTTP fetcher."""

from __future__ import annotations

import pytest
import requests

from reelvault.config import HttpSettings
from reelvault.services.fetcher import HttpFetcher
from reelvault.shared.errors import ErrorCode, NetworkError


@pytest.fixture
def session() -> requests.Session:
    return requests.Session()


def make_response(mocker, status_code: int, text: str = ""):
    response = mocker.Mock(spec=requests.Response)
    response.status_code = status_code
    response.text = text
    return response


class TestSessionSetup:
    def test_default_locale_headers(self, session: requests.Session) -> None:
        HttpFetcher(session=session)

        assert session.headers["Accept-Language"] == "en-US,en;q=0.9"
        assert "Firefox" in session.headers["User-Agent"]
        assert session.cookies.get("lc-main") == "en_US"

    def test_german_locale(self, session: requests.Session) -> None:
        HttpFetcher(HttpSettings(locale="de"), session=session)

        assert session.headers["Accept-Language"].startswith("de-DE")
        assert session.cookies.get("lc-main") == "de_DE"


class TestUrls:
    def test_title_url(self) -> None:
        assert HttpFetcher().title_url("tt0368226") == "https://www.imdb.com/title/tt0368226/"

    def test_italian_title_url_uses_locale_prefix(self) -> None:
        fetcher = HttpFetcher(HttpSettings(locale="it"))

        assert fetcher.title_url("tt0368226") == "https://www.imdb.com/it/title/tt0368226/"

    def test_suggestion_url(self) -> None:
        url = HttpFetcher().suggestion_url("the%20room")

        assert url == "https://v3.sg.media-imdb.com/suggestion/x/the%20room.json?includeVideos=0"


class TestFetchText:
    def test_ok_returns_body(self, session: requests.Session, mocker) -> None:
        get = mocker.patch.object(session, "get", return_value=make_response(mocker, 200, "<html/>"))

        assert HttpFetcher(session=session).fetch_text("https://example.test/") == "<html/>"
        get.assert_called_once_with("https://example.test/", timeout=10.0)

    def test_no_content_returns_empty_string(self, session: requests.Session, mocker) -> None:
        mocker.patch.object(session, "get", return_value=make_response(mocker, 204, "ignored"))

        assert HttpFetcher(session=session).fetch_text("https://example.test/") == ""

    @pytest.mark.parametrize("status_code", [404, 503])
    def test_error_status_raises(self, session: requests.Session, mocker, status_code: int) -> None:
        mocker.patch.object(session, "get", return_value=make_response(mocker, status_code))

        with pytest.raises(NetworkError) as exc_info:
            HttpFetcher(session=session).fetch_text("https://example.test/")

        assert exc_info.value.code == ErrorCode.API_REQUEST_FAILED

    def test_transport_failure_raises(self, session: requests.Session, mocker) -> None:
        mocker.patch.object(session, "get", side_effect=requests.exceptions.ConnectionError("refused"))

        with pytest.raises(NetworkError) as exc_info:
            HttpFetcher(session=session).fetch_text("https://example.test/")

        assert exc_info.value.code == ErrorCode.NETWORK_ERROR
        assert isinstance(exc_info.value.original_error, requests.exceptions.ConnectionError)
