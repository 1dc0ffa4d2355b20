"""Tests for the standalone component validators."""

import pytest

from uricomponents import InvalidPort, Parser, idna_to_ascii, is_host, is_port, is_scheme


class TestIsScheme:
    @pytest.mark.parametrize("scheme", ["", "http", "HTTP", "svn+ssh", "a.b-c", "x"])
    def test_valid(self, scheme):
        assert is_scheme(scheme)

    @pytest.mark.parametrize("scheme", ["h2", "1http", "+a", "-", "ht tp", "http:"])
    def test_invalid(self, scheme):
        assert not is_scheme(scheme)


class TestIsHost:
    @pytest.mark.parametrize(
        "host",
        [
            "",
            "example.com",
            "example.com.",
            "EXAMPLE.COM",
            "a..b",
            "ex%2Dample",
            "ex%2dample",
            "sub_domain~x!$&'()*+,;=",
            "127.0.0.1",
            "[::1]",
            "[::ffff:192.0.2.1]",
            "[fe80::1%25eth0]",
            "bücher.example",
        ],
    )
    def test_valid(self, host):
        assert is_host(host)

    @pytest.mark.parametrize(
        "host",
        [
            "exa mple.com",
            "host:80",
            "user@host",
            "a/b",
            "[::1",
            "::1",
            "[2001:db8::1%25eth0]",
            "%zz",
        ],
    )
    def test_invalid(self, host):
        assert not is_host(host)


class TestIsPort:
    @pytest.mark.parametrize("port", [None, "", "0", "80", "0080", 443])
    def test_valid(self, port):
        assert is_port(port)

    @pytest.mark.parametrize("port", ["8a", "-1", "+1", " 80", "80 "])
    def test_invalid(self, port):
        assert not is_port(port)


class TestIsIpv6Host:
    def setup_method(self):
        self.parser = Parser()

    def test_link_local_zone_id(self):
        assert self.parser.is_ipv6_host("[fe80::1%25eth0]")

    def test_global_zone_id(self):
        assert not self.parser.is_ipv6_host("[2001:db8::1%25eth0]")

    def test_link_local_prefix_upper_bound(self):
        assert self.parser.is_ipv6_host("[febf::1%25eth0]")
        assert not self.parser.is_ipv6_host("[fec0::1%25eth0]")

    def test_without_zone_id(self):
        assert self.parser.is_ipv6_host("[2001:db8::1]")
        assert self.parser.is_ipv6_host("[fe80::1]")

    def test_zone_id_with_forbidden_character(self):
        assert not self.parser.is_ipv6_host("[fe80::1%25a%5Bb]")
        assert not self.parser.is_ipv6_host("[fe80::1%25a@b]")

    def test_brackets_are_required(self):
        assert not self.parser.is_ipv6_host("::1")
        assert not self.parser.is_ipv6_host("[::1")

    def test_empty_literal(self):
        assert not self.parser.is_ipv6_host("[]")

    def test_invalid_address_with_zone_id(self):
        assert not self.parser.is_ipv6_host("[fe80::g%25eth0]")


class TestIsRegisteredName:
    def test_idna_fallback_is_injectable(self):
        assert Parser().is_registered_name("bücher.example")
        assert not Parser(idna_to_ascii=lambda host: None).is_registered_name("bücher.example")

    def test_injected_idna_is_not_asked_about_delimiters(self):
        calls = []

        def to_ascii(host):
            calls.append(host)
            return host

        parser = Parser(idna_to_ascii=to_ascii)
        assert not parser.is_registered_name("bü cher")
        assert parser.is_registered_name("bücher")
        assert calls == ["bücher"]

    def test_ascii_names_skip_idna(self):
        assert Parser(idna_to_ascii=lambda host: None).is_registered_name("example.com")


class TestIdnaToAscii:
    def test_converts(self):
        assert idna_to_ascii("bücher.example") == "xn--bcher-kva.example"

    def test_failure_is_none(self):
        assert idna_to_ascii("%zz") is None


class TestFilterPort:
    def setup_method(self):
        self.parser = Parser()

    @pytest.mark.parametrize("port", [None, "", False])
    def test_no_port(self, port):
        assert self.parser.filter_port(port) is None

    def test_digits(self):
        assert self.parser.filter_port("0042") == 42

    def test_int(self):
        assert self.parser.filter_port(8080) == 8080

    def test_no_range_check(self):
        assert self.parser.filter_port("70000") == 70000

    @pytest.mark.parametrize("port", ["abc", "-1", "4 2"])
    def test_invalid(self, port):
        with pytest.raises(InvalidPort) as excinfo:
            self.parser.filter_port(port)
        assert excinfo.value.value == port
