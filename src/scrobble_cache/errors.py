"""Exceptions raised by the proxy endpoints."""


class ScrobbleCacheError(Exception):
    """Base exception for the service."""


class UpstreamError(ScrobbleCacheError):
    """An upstream API call failed or returned unusable data.

    Rendered to the client as ``{"error": message}`` with ``status_code``.
    """

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)
