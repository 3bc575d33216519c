from __future__ import annotations


class GrinfiError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(GrinfiError):
    """A required setting (API key, shared secret, port) is missing or invalid."""


class GrinfiAPIError(GrinfiError):
    """
    The Grinfi API answered with a non-2xx status (other than 204).

    The message embeds the status code and the raw response body so the tool
    caller sees exactly what upstream said.
    """

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"Grinfi API error {status}: {body}")
        self.status = status
        self.body = body
