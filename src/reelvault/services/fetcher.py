"""HTTP fetcher for IMDb pages and the suggestion endpoint."""

from __future__ import annotations

import logging

import requests

from reelvault.config.models.http_settings import HttpSettings
from reelvault.shared.constants import IMDbConfig
from reelvault.shared.errors import ErrorCode, ErrorContext, NetworkError

logger = logging.getLogger(__name__)

_HTTP_OK = 200
_HTTP_CLIENT_ERROR = 400


class HttpFetcher:
    """Fetches documents with a locale-aware ``requests`` session.

    No retry or backoff: a transport failure or an error status is reported
    once as :class:`NetworkError`.

    Args:
        settings: HTTP settings (locale, timeout, user agent, endpoints).
        session: Optional pre-configured session, mainly for tests.
    """

    def __init__(
        self,
        settings: HttpSettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings or HttpSettings()
        self.session = session or requests.Session()

        locale = self.settings.locale
        self.session.headers.update(
            {
                "User-Agent": self.settings.user_agent,
                "Accept-Language": IMDbConfig.ACCEPT_LANGUAGE.get(
                    locale,
                    IMDbConfig.ACCEPT_LANGUAGE[IMDbConfig.DEFAULT_LOCALE],
                ),
            },
        )
        cookie = IMDbConfig.LOCALE_COOKIE.get(locale)
        if cookie:
            self.session.cookies.set(IMDbConfig.LOCALE_COOKIE_NAME, cookie)

    def suggestion_url(self, query: str) -> str:
        return self.settings.suggestion_url.format(query=query)

    def title_url(self, imdb_id: str) -> str:
        path = IMDbConfig.TITLE_PATH.format(imdb_id=imdb_id)
        base = self.settings.base_url.rstrip("/") + "/"
        if self.settings.locale in IMDbConfig.LOCALE_REALMS:
            return f"{base}{self.settings.locale}/{path}"
        return f"{base}{path}"

    def fetch_text(self, url: str) -> str:
        """GET ``url`` and return its body.

        Returns:
            The response text for a 200 response, an empty string for other
            non-error statuses (e.g. 204).

        Raises:
            NetworkError: On connection failure, timeout or a 4xx/5xx status.
        """
        context = ErrorContext(operation="fetch_text", additional_data={"url": url})
        try:
            response = self.session.get(url, timeout=self.settings.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning("Network error fetching %s: %s", url, e)
            raise NetworkError(
                ErrorCode.NETWORK_ERROR,
                f"Failed to fetch {url}: {e!s}",
                context,
                original_error=e,
            ) from e

        if response.status_code >= _HTTP_CLIENT_ERROR:
            raise NetworkError(
                ErrorCode.API_REQUEST_FAILED,
                f"Request to {url} failed with status {response.status_code}",
                ErrorContext(
                    operation="fetch_text",
                    additional_data={"url": url, "status_code": response.status_code},
                ),
            )

        if response.status_code != _HTTP_OK:
            logger.debug("Unexpected status %d for %s", response.status_code, url)
            return ""
        return response.text


__all__ = ["HttpFetcher"]
