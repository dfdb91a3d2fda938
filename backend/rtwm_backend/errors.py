"""Failure kinds for outbound probe requests."""

from __future__ import annotations


class FetchError(Exception):
    """Base class for any outbound call that produced no usable result."""

    kind = "FetchError"

    def __init__(self, url: str, message: str = "") -> None:
        self.url = url
        self.message = message
        super().__init__(f"{self.kind} fetching {url}" + (f": {message}" if message else ""))


class FetchTimeout(FetchError):
    kind = "Timeout"


class NetworkError(FetchError):
    kind = "NetworkError"


class MalformedResponse(FetchError):
    kind = "MalformedResponse"
