# src/sheets/errors.py
"""Errors raised by the Google Sheets client."""


class SheetsError(Exception):
    """Base class for every remote store failure."""


class ConfigurationError(SheetsError):
    """Script URL or sheet id missing; raised before any network attempt."""

    def __init__(self, message: str = "Google Sheets not configured"):
        super().__init__(message)


class TransportError(SheetsError):
    """Network failure or an HTTP status outside 2xx."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

    @classmethod
    def from_status(cls, status_code: int) -> "TransportError":
        return cls(f"HTTP error! status: {status_code}", status_code=status_code)


class RemoteError(SheetsError):
    """The endpoint answered with an ``{"error": ...}`` body."""


class RequestTimeoutError(SheetsError):
    """No callback response arrived within the timeout."""

    def __init__(self, timeout: float):
        super().__init__(f"Request timed out after {timeout:g} seconds")
        self.timeout = timeout
