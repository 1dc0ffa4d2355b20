"""Errors raised while splitting a URI. All of them are ValueErrors."""

from typing import Any, Self


class URISyntaxError(ValueError):
    """Base class. value holds the offending text."""

    reason: str = "invalid URI"

    def __init__(self: Self, value: Any) -> None:
        super().__init__(f"{self.reason}: {value!r}")
        self.value: Any = value


class InvalidCharacters(URISyntaxError):
    reason = "the URI contains control characters"


class InvalidScheme(URISyntaxError):
    reason = "the URI scheme is empty"


class InvalidHostname(URISyntaxError):
    reason = "the hostname is malformed"


class InvalidHost(URISyntaxError):
    reason = "the host is invalid"


class InvalidPort(URISyntaxError):
    reason = "the port is not a number"


class InvalidPath(URISyntaxError):
    reason = "the first path segment of a scheme-less URI contains a colon"
