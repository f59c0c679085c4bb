"""Custom exceptions for feedindex."""


class FeedIndexError(Exception):
    """Base exception for all feedindex errors."""

    pass


class ConfigError(FeedIndexError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class QueryError(FeedIndexError):
    """Errors raised while evaluating an index query."""

    pass


class InvalidYearRangeError(QueryError):
    """Year label is neither "YYYY" nor "YYYY-YYYY"."""

    def __init__(self, label: object) -> None:
        self.label = label
        super().__init__(f"Invalid year range: {label!r}")


class UnknownGroupingError(QueryError):
    """Grouping or available-value lookup for an unregistered field."""

    def __init__(self, field: str, supported: tuple[str, ...] = ()) -> None:
        self.field = field
        self.supported = supported
        message = f"Unsupported grouping field: {field!r}"
        if supported:
            message += f" (expected one of: {', '.join(supported)})"
        super().__init__(message)


class EpisodeLoadError(FeedIndexError):
    """Episode descriptor file could not be read."""

    pass
