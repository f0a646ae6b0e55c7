"""Exception types raised by the radar."""


class RadarError(Exception):
    """Base class for radar errors."""


class GenerationError(RadarError):
    """Raised when the external generator call fails or times out."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class InvalidResultError(RadarError):
    """Raised when generator output cannot be turned into a non-empty record list."""


class ScanInProgressError(RadarError):
    """Raised when a scan is requested while another one is running."""
