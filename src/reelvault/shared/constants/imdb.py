"""IMDb endpoints, identifier shape and search payload keys."""

from __future__ import annotations


class IMDbConfig:
    """IMDb endpoint configuration."""

    BASE_URL = "https://www.imdb.com/"
    SUGGESTION_URL = "https://v3.sg.media-imdb.com/suggestion/x/{query}.json?includeVideos=0"
    TITLE_PATH = "title/{imdb_id}/"

    # Two-letter prefix followed by 7 or 8 digits
    TITLE_ID_PATTERN = r"^tt\d{7,8}$"

    DEFAULT_LOCALE = "en"
    DEFAULT_TIMEOUT = 10.0
    DEFAULT_USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:133.0) Gecko/20100101 Firefox/133.0"
    )

    # Locales served from a dedicated path prefix on title pages
    LOCALE_REALMS = ("it",)

    ACCEPT_LANGUAGE = {
        "en": "en-US,en;q=0.9",
        "es": "es-ES,es;q=0.9,en-US;q=0.5,en;q=0.3",
        "fr": "fr-FR,fr;q=0.9,en-US;q=0.5,en;q=0.3",
        "de": "de-DE,de;q=0.9,en-US;q=0.5,en;q=0.3",
        "it": "it-IT,it;q=0.9,en-US;q=0.5,en;q=0.3",
        "pt": "pt-BR,pt;q=0.9,en-US;q=0.5,en;q=0.3",
        "hi": "hi-IN,hi;q=0.9,en-US;q=0.5,en;q=0.3",
    }

    # Value of the "lc-main" cookie per locale
    LOCALE_COOKIE = {
        "en": "en_US",
        "de": "de_DE",
        "fr": "fr_FR",
        "es": "es_ES",
        "it": "it_IT",
        "pt": "pt_BR",
        "hi": "hi_IN",
    }
    LOCALE_COOKIE_NAME = "lc-main"


class TitleCategory:
    """Category tags understood by the resolver."""

    MOVIE = "movie"
    TV_SERIES = "tvSeries"
    TV_MINI_SERIES = "tvMiniSeries"

    NARROWABLE = (MOVIE, TV_SERIES)
    SERIES = (TV_SERIES, TV_MINI_SERIES)


class SuggestionKeys:
    """Short keys used by the suggestion endpoint payload."""

    RESULTS = "d"
    ID = "id"
    TITLE = "l"
    IMAGE = "i"
    IMAGE_URL = "imageUrl"
    YEAR = "y"
    TYPE = "q"
    CATEGORY = "qid"
    STARRING = "s"
    RANK = "rank"


class MatchingConfig:
    """Edit-distance confidence scoring."""

    MAX_CONFIDENCE = 100
    DISTANCE_PENALTY = 5
    MIN_CONFIDENCE = 75
    YEAR_TOLERANCE = 1


__all__ = ["IMDbConfig", "MatchingConfig", "SuggestionKeys", "TitleCategory"]
