"""Unit tests for CIDR block expansion."""

from __future__ import annotations

import ipaddress

import pytest

from smartdns_web.core.exceptions import InvalidRangeError
from smartdns_web.features.acl.expander import (
    canonical_cidr,
    expand,
    parse_host,
    usable_count,
)


@pytest.mark.unit
class TestExpand:
    """Tests for expand()."""

    def test_slash_30_drops_network_and_broadcast(self):
        """A /30 yields its two middle addresses."""
        result = expand("10.0.0.0/30")

        assert result.addresses == ["10.0.0.1", "10.0.0.2"]
        assert result.usable_count == 2

    def test_slash_24_has_254_hosts(self):
        """A /24 yields .1 through .254."""
        result = expand("192.168.1.0/24")

        assert result.usable_count == 254
        assert result.addresses[0] == "192.168.1.1"
        assert result.addresses[-1] == "192.168.1.254"

    @pytest.mark.parametrize(
        ("cidr", "expected"),
        [
            ("10.0.0.7/32", ["10.0.0.7"]),
            ("10.0.0.6/31", ["10.0.0.6", "10.0.0.7"]),
            ("2001:db8::1/128", ["2001:db8::1"]),
        ],
    )
    def test_tiny_blocks_are_not_trimmed(self, cidr, expected):
        """Blocks of one or two addresses are returned whole."""
        assert expand(cidr).addresses == expected

    def test_addresses_are_ascending_distinct_and_inside(self):
        """Every address is unique, sorted and inside the block."""
        network = ipaddress.ip_network("172.16.4.0/26")
        addresses = expand(str(network)).addresses
        parsed = [ipaddress.ip_address(a) for a in addresses]

        assert parsed == sorted(parsed)
        assert len(set(parsed)) == len(parsed)
        assert all(a in network for a in parsed)

    def test_host_bits_are_masked(self):
        """10.0.0.5/30 expands like 10.0.0.4/30."""
        assert expand("10.0.0.5/30").addresses == expand("10.0.0.4/30").addresses

    def test_ipv6_block(self):
        """IPv6 blocks expand with the same trimming rule."""
        result = expand("2001:db8::/126")

        assert result.addresses == ["2001:db8::1", "2001:db8::2"]

    @pytest.mark.parametrize(
        "cidr",
        ["", "10.0.0.0", "10.0.0.0/33", "10.0.0.300/24", "not-an-ip/24", "10.0.0.0/x"],
    )
    def test_invalid_cidr_raises(self, cidr):
        """Malformed input raises InvalidRangeError."""
        with pytest.raises(InvalidRangeError) as exc_info:
            expand(cidr)

        assert exc_info.value.status_code == 422
        assert exc_info.value.type == "invalid-range"


@pytest.mark.unit
class TestCanonicalCidr:
    """Tests for canonical_cidr() and usable_count()."""

    def test_masks_host_bits(self):
        """The canonical form carries the network address."""
        assert canonical_cidr("10.0.0.5/24") == "10.0.0.0/24"

    def test_strips_whitespace(self):
        assert canonical_cidr(" 10.1.0.0/16 ") == "10.1.0.0/16"

    @pytest.mark.parametrize(
        ("cidr", "count"),
        [("10.0.0.0/24", 254), ("10.0.0.0/30", 2), ("10.0.0.0/31", 2), ("10.0.0.1/32", 1)],
    )
    def test_usable_count_matches_expand(self, cidr, count):
        """usable_count() agrees with the length of expand()."""
        assert usable_count(cidr) == count
        assert len(expand(cidr).addresses) == count

    def test_usable_count_of_large_block(self):
        """Large blocks are counted without building the address list."""
        assert usable_count("10.0.0.0/8") == 2**24 - 2


@pytest.mark.unit
class TestParseHost:
    """Tests for parse_host()."""

    def test_returns_canonical_text(self):
        assert parse_host("2001:0db8:0000::0001") == "2001:db8::1"

    def test_rejects_cidr(self):
        """A block is not a host address."""
        with pytest.raises(InvalidRangeError):
            parse_host("10.0.0.0/24")
