"""Error types for the map stitching pipeline."""


class MapStitchError(Exception):
    """Base exception for stitching failures.

    Args:
        code: Stable error code, useful for logs and tests.
        details: Optional human readable details.
    """

    exit_code = 1

    def __init__(self, code: str, details: str = "") -> None:
        super().__init__(code)
        self.code = code
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.details}"
        return self.code


class ConfigError(MapStitchError):
    """Raised when the configuration file cannot be read or parsed."""

    exit_code = 1


class PlanningError(MapStitchError):
    """Raised when the viewport cannot be partitioned into requests."""

    exit_code = 2


class QueryError(MapStitchError):
    """Raised when provider query options are malformed."""

    exit_code = 2


class FetchError(MapStitchError):
    """Raised when any tile could not be downloaded or decoded."""

    exit_code = 3


class CompositeError(MapStitchError):
    """Raised when a fetched tile does not fit the planned layout."""

    exit_code = 2


class OutputError(MapStitchError):
    """Raised when the output image cannot be written."""

    exit_code = 3
