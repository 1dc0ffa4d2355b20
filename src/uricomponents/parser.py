"""uricomponents.parser
Split a URI string into its raw RFC 3986 components.
Nothing is decoded, normalized or resolved here.
"""

import dataclasses
import ipaddress
import logging
import re

from typing import Any, Callable, Self
from urllib.parse import unquote

import idna

from .exceptions import (
    InvalidCharacters,
    InvalidHost,
    InvalidHostname,
    InvalidPath,
    InvalidPort,
    InvalidScheme,
)

_logger: logging.Logger = logging.getLogger(__name__)

# Each of these ABNF rules is from RFC 3986 or 5234.

# ALPHA = %x41-5A / %x61-7A
_ALPHA: str = r"[A-Za-z]"

# DIGIT = %x30-39
_DIGIT: str = r"[0-9]"

# HEXDIG = DIGIT / "A" / "B" / "C" / "D" / "E" / "F"
# (matched case-insensitively, like the rest of the reg-name grammar)
_HEXDIG: str = r"[0-9A-Fa-f]"

# unreserved = ALPHA / DIGIT / "-" / "." / "_" / "~"
# "." is left out here: it separates labels below.
_UNRESERVED: str = rf"(?:{_ALPHA}|{_DIGIT}|[-_~])"

# sub-delims = "!" / "$" / "&" / "'" / "(" / ")" / "*" / "+" / "," / ";" / "="
_SUB_DELIMS: str = r"[!$&'()*+,;=]"

# pct-encoded = "%" HEXDIG HEXDIG
_PCT_ENCODED: str = rf"%{_HEXDIG}{_HEXDIG}"

# reg-name = *( unreserved / pct-encoded / sub-delims )
_REG_NAME: str = rf"(?:{_UNRESERVED}|{_SUB_DELIMS}|{_PCT_ENCODED})*"

# dot separated reg-name labels with an optional trailing dot
_REG_NAME_PAT: re.Pattern[str] = re.compile(rf"(?:{_REG_NAME}\.)*{_REG_NAME}\.?")

# gen-delims = ":" / "/" / "?" / "#" / "[" / "]" / "@"  (plus space)
_GEN_DELIMS_PAT: re.Pattern[str] = re.compile(r"[:/?#\[\]@ ]")

# Stricter than RFC 3986 "scheme": digits are not accepted.
_SCHEME_PAT: re.Pattern[str] = re.compile(rf"{_ALPHA}(?:{_ALPHA}|[+.\-])*")

# port = *DIGIT  (an empty port never reaches this pattern)
_PORT_PAT: re.Pattern[str] = re.compile(rf"{_DIGIT}+")

_CONTROL_CHARS_PAT: re.Pattern[str] = re.compile(r"[\x00-\x1f\x7f]")

# A zone id may not contain any of these once decoded (RFC 6874 section 2).
_ZONE_ID_FORBIDDEN: frozenset[str] = frozenset("?#@[]")

# fe80::/10
_LINK_LOCAL_PREFIX: str = "1111111010"


@dataclasses.dataclass(frozen=True)
class URIComponents:
    """The raw components of a URI. None means absent, "" means present and empty."""

    scheme: str | None = None
    user: str | None = None
    password: str | None = None
    host: str | None = None
    port: int | None = None
    path: str = ""
    query: str | None = None
    fragment: str | None = None

    def as_dict(self: Self) -> dict[str, Any]:
        """The components keyed by their RFC names ("pass" rather than "password")."""
        return {
            "scheme": self.scheme,
            "user": self.user,
            "pass": self.password,
            "host": self.host,
            "port": self.port,
            "path": self.path,
            "query": self.query,
            "fragment": self.fragment,
        }


# Inputs made only of delimiters, which need no parsing at all.
_SIMPLE_URIS: dict[str, URIComponents] = {
    "": URIComponents(),
    "#": URIComponents(fragment=""),
    "?": URIComponents(query=""),
    "?#": URIComponents(query="", fragment=""),
    "/": URIComponents(path="/"),
    "//": URIComponents(host=""),
}


def _split_once(string: str, delimiter: str) -> tuple[str, str | None]:
    """Split at the first delimiter. The second item is None when the delimiter is missing,
    and "" when the delimiter is the last character.
    """
    head, sep, tail = string.partition(delimiter)
    if len(sep) == 0:
        return head, None
    return head, tail


def idna_to_ascii(host: str) -> str | None:
    """Non-transitional UTS 46 ToASCII. Returns None if host has no ASCII-compatible encoding."""
    try:
        return idna.encode(host, uts46=True, transitional=False).decode("ascii")
    except idna.IDNAError:
        return None


class Parser:
    """RFC 3986 URI parser.

    Every method is a pure function of its arguments, so a single instance
    can be shared freely. The only thing an instance holds is the IDNA
    conversion used to accept internationalized registered names.
    """

    def __init__(self: Self, idna_to_ascii: Callable[[str], str | None] = idna_to_ascii) -> None:
        self._idna_to_ascii: Callable[[str], str | None] = idna_to_ascii

    def __call__(self: Self, uri: str) -> URIComponents:
        return self.parse(uri)

    def is_scheme(self: Self, scheme: str) -> bool:
        """RFC 3986 section 3.1, without digits. The empty string is accepted."""
        return len(scheme) == 0 or _SCHEME_PAT.fullmatch(scheme) is not None

    def is_host(self: Self, host: str) -> bool:
        """RFC 3986 section 3.2.2"""
        return len(host) == 0 or self.is_ipv6_host(host) or self.is_registered_name(host)

    def is_port(self: Self, port: Any) -> bool:
        """RFC 3986 section 3.2.3. None and "" mean "no port" and are valid."""
        if port is None or port == "":
            return True
        return _PORT_PAT.fullmatch(str(port)) is not None

    def is_ipv6_host(self: Self, ipv6: str) -> bool:
        """An IPv6 literal, optionally carrying a zone id (RFC 6874).
        A zone id is only allowed on link-local addresses.
        """
        if not (ipv6.startswith("[") and ipv6.endswith("]")):
            return False
        ipv6 = ipv6[1:-1]

        address, percent, _ = ipv6.partition("%")
        if len(percent) == 0:
            return _ipv6_address(ipv6) is not None

        scope: str = unquote(ipv6[len(address) :])
        if any(c in _ZONE_ID_FORBIDDEN for c in scope):
            return False

        parsed: ipaddress.IPv6Address | None = _ipv6_address(address)
        if parsed is None:
            return False
        return f"{int(parsed):0128b}".startswith(_LINK_LOCAL_PREFIX)

    def is_registered_name(self: Self, host: str) -> bool:
        """reg-name, falling back on IDNA for internationalized names."""
        if _REG_NAME_PAT.fullmatch(host) is not None:
            return True

        if _GEN_DELIMS_PAT.search(host) is not None:
            return False

        return bool(self._idna_to_ascii(host))

    def filter_port(self: Self, port: Any) -> int | None:
        """Returns port as an int, or None if no port was given.
        No range check is made.
        """
        if port is None or port is False or port == "":
            return None

        if _PORT_PAT.fullmatch(str(port)) is None:
            _logger.debug("rejecting port %r", port)
            raise InvalidPort(port)

        return int(port)

    def parse(self: Self, uri: str) -> URIComponents:
        """Split uri into its components.

        The result differs from urllib.parse.urlsplit in a few ways:
        - An absent component is None, while a component that is present but empty is "".
        - The path is never None.
        - Nothing is lowercased, decoded or normalized. Scheme-specific rules
          (e.g. http requiring a host) are the caller's business.

        parse("http://foo@test.example.com:42?query#") gives
        URIComponents(scheme="http", user="foo", password=None, host="test.example.com",
                      port=42, path="", query="query", fragment="")
        """
        if not isinstance(uri, str):
            raise TypeError(f"uri must be str, not {type(uri).__name__}")

        if _CONTROL_CHARS_PAT.search(uri) is not None:
            _logger.debug("rejecting %r: control characters", uri)
            raise InvalidCharacters(uri)

        simple: URIComponents | None = _SIMPLE_URIS.get(uri)
        if simple is not None:
            return simple

        first_char: str = uri[0]

        # Fragment only
        if first_char == "#":
            return URIComponents(fragment=uri[1:])

        # Query and maybe a fragment
        if first_char == "?":
            query, fragment = _split_once(uri[1:], "#")
            return URIComponents(query=query, fragment=fragment)

        # No scheme, but an authority
        if uri.startswith("//"):
            _logger.debug("parsing %r as a network-path reference", uri)
            return self._parse_scheme_specific_part(uri)

        # Path, query and fragment only
        if first_char == "/" or ":" not in uri:
            _logger.debug("parsing %r as a path reference", uri)
            return self._parse_path_query_and_fragment(uri)

        _logger.debug("parsing %r as a possible scheme", uri)
        return self._fallback_parser(uri)

    def _parse_scheme_specific_part(self: Self, uri: str, scheme: str | None = None) -> URIComponents:
        """Parse "//" authority path-abempty [ "?" query ] [ "#" fragment ]
        e.g. //user:pass@host:42/path?query#fragment
        """
        # Right to left: fragment, then query, then path. What is left is the authority.
        remaining_uri, fragment = _split_once(uri[2:], "#")
        remaining_uri, query = _split_once(remaining_uri, "?")
        path: str = ""
        remaining_uri, path_rest = _split_once(remaining_uri, "/")
        if path_rest is not None:
            path = f"/{path_rest}"

        if len(remaining_uri) == 0:
            return URIComponents(scheme=scheme, host="", path=path, query=query, fragment=fragment)

        # authority = [ userinfo "@" ] host [ ":" port ]
        user: str | None = None
        password: str | None = None
        user_info, hostname = _split_once(remaining_uri, "@")
        if hostname is None:
            hostname = user_info
        else:
            user, password = _split_once(user_info, ":")

        host, port = self._parse_hostname(hostname)
        return URIComponents(
            scheme=scheme,
            user=user,
            password=password,
            host=host,
            port=port,
            path=path,
            query=query,
            fragment=fragment,
        )

    def _parse_hostname(self: Self, hostname: str) -> tuple[str, int | None]:
        if "[" not in hostname:
            host, port = _split_once(hostname, ":")
            return self._filter_host(host), self.filter_port(port)

        delimiter_offset: int = hostname.find("]") + 1
        if delimiter_offset == 0:
            _logger.debug("rejecting hostname %r: unterminated IP literal", hostname)
            raise InvalidHostname(hostname)
        if delimiter_offset < len(hostname) and hostname[delimiter_offset] != ":":
            _logger.debug("rejecting hostname %r: junk after IP literal", hostname)
            raise InvalidHostname(hostname)

        return (
            self._filter_host(hostname[:delimiter_offset]),
            self.filter_port(hostname[delimiter_offset + 1 :]),
        )

    def _filter_host(self: Self, host: str) -> str:
        if self.is_host(host):
            return host
        _logger.debug("rejecting host %r", host)
        raise InvalidHost(host)

    def _parse_path_query_and_fragment(self: Self, uri: str) -> URIComponents:
        """Parse a reference with neither scheme nor authority:
        path [ "?" query ] [ "#" fragment ]
        e.g. path?q#f, /path, /pa:th#f
        """
        # path-noscheme: a colon in the first segment would read as a scheme delimiter.
        colon: int = uri.find(":")
        if colon != -1 and "/" not in uri[:colon]:
            _logger.debug("rejecting %r: colon in first path segment", uri)
            raise InvalidPath(uri)

        remaining_uri, fragment = _split_once(uri, "#")
        path, query = _split_once(remaining_uri, "?")
        return URIComponents(path=path, query=query, fragment=fragment)

    def _fallback_parser(self: Self, uri: str) -> URIComponents:
        """Parse a URI whose first colon may or may not end a scheme.
        e.g. email:johndoe@example.com?subject=Hello%20World!
        """
        scheme, remaining_uri = _split_once(uri, ":")
        if len(scheme) == 0:
            _logger.debug("rejecting %r: empty scheme", uri)
            raise InvalidScheme(uri)

        # Not a scheme, so the colon belongs to a path-noscheme.
        if not self.is_scheme(scheme):
            return self._parse_path_query_and_fragment(uri)

        # The dispatcher only sends strings with a colon, so remaining_uri is never None.
        assert remaining_uri is not None

        if len(remaining_uri) == 0:
            return URIComponents(scheme=scheme)

        if remaining_uri == "//":
            return URIComponents(scheme=scheme, host="")

        if remaining_uri.startswith("//"):
            return self._parse_scheme_specific_part(remaining_uri, scheme=scheme)

        remaining_uri, fragment = _split_once(remaining_uri, "#")
        path, query = _split_once(remaining_uri, "?")
        return URIComponents(scheme=scheme, path=path, query=query, fragment=fragment)


def _ipv6_address(address: str) -> ipaddress.IPv6Address | None:
    try:
        return ipaddress.IPv6Address(address)
    except ipaddress.AddressValueError:
        return None


_default_parser: Parser = Parser()


def parse(uri: str) -> URIComponents:
    """Split uri into its RFC 3986 components. See Parser.parse."""
    return _default_parser.parse(uri)


def is_scheme(scheme: str) -> bool:
    return _default_parser.is_scheme(scheme)


def is_host(host: str) -> bool:
    return _default_parser.is_host(host)


def is_port(port: Any) -> bool:
    return _default_parser.is_port(port)
