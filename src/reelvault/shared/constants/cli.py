"""CLI command names, defaults and help strings."""


class CLICommands:
    """Command names registered on the Typer app."""

    LOOKUP = "lookup"
    SEARCH = "search"
    RESOLVE = "resolve"
    CACHE_STATS = "cache-stats"
    CACHE_CLEAR = "cache-clear"


class CLIDefaults:
    """Default values for CLI options."""

    VERSION = "0.1.0"
    CATEGORY = "movie"
    EXIT_SUCCESS = 0
    EXIT_ERROR = 1
    EXIT_NO_MATCH = 2


class CLIHelp:
    """Help strings."""

    APP_NAME = "reelvault"
    APP_DESCRIPTION = "Resolve, fetch and cache IMDb titles."
    APP_STYLE = "rich"
    VERSION_TEXT = "ReelVault v{version}"

    LOOKUP_HELP = "Fetch a title by IMDb identifier (e.g. tt0068646)."
    SEARCH_HELP = "List the raw search candidates for a query."
    RESOLVE_HELP = "Resolve a free-text query to a single IMDb identifier."
    CACHE_STATS_HELP = "Show compression statistics for a cached key."
    CACHE_CLEAR_HELP = "Remove every cached entry."

    JSON_HELP = "Output results in JSON format"
    CATEGORY_HELP = "Category to narrow to: movie or tvSeries"
    YEAR_HELP = "Release year; candidates within one year are accepted"
    FIRST_HELP = "Take the first candidate of the category without scoring"
    NO_CACHE_HELP = "Bypass the persistent cache"
    CONFIG_HELP = "Path to a TOML configuration file"
