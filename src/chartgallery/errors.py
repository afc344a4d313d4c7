"""Exception types raised by chart mutators."""


class ChartError(Exception):
    """Base class for all chart errors."""


class ValidationError(ChartError, ValueError):
    """A property value was rejected before any state was written."""

    def __init__(self, prop: str, message: str) -> None:
        super().__init__(f"Invalid value for '{prop}': {message}")
        self.prop = prop


class ChartIndexError(ChartError, IndexError):
    """A line, series or axis position does not exist."""
