"""Store of trusted proxy networks."""
from __future__ import annotations

import ipaddress
import logging
from typing import Iterable, Optional, Union

from trusted_proxies.utils.exceptions import InvalidTrustSpecification, TrustStoreFrozenError

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
NetworkRange = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def normalize_address(address: IPAddress) -> IPAddress:
    """Collapse an IPv4-mapped IPv6 address (``::ffff:a.b.c.d``) to IPv4."""
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        return address.ipv4_mapped
    return address


def normalize_network(network: NetworkRange) -> NetworkRange:
    """Collapse an IPv4-mapped IPv6 network to the equivalent IPv4 network."""
    if isinstance(network, ipaddress.IPv6Network) and network.prefixlen >= 96:
        mapped = network.network_address.ipv4_mapped
        if mapped is not None:
            return ipaddress.IPv4Network((mapped, network.prefixlen - 96))
    return network


def usable_address(address: IPAddress) -> Optional[IPAddress]:
    """Normalize an address object, or return None if it cannot identify a client."""
    # Zone-scoped IPv6 (fe80::1%eth0) is not a routable client address
    if getattr(address, "scope_id", None):
        return None
    return normalize_address(address)


def parse_address(value: str) -> Optional[IPAddress]:
    """Parse a single IP address, returning None when it is not one."""
    try:
        address = ipaddress.ip_address(value)
    except ValueError:
        return None
    return usable_address(address)


def network_from_spec(spec: str) -> NetworkRange:
    """
    Parse a trusted proxy entry into a network range.

    Accepts a CIDR range (``192.168.10.0/24``) or a bare address, which becomes
    an exact-match range of the full address width (/32 or /128). Host bits
    set in a CIDR range are masked off. The prefix must be a decimal length;
    dotted netmasks and hostmasks (``10.0.0.0/255.0.0.0``) are rejected.

    Raises:
        InvalidTrustSpecification: if the entry is neither form
    """
    text = spec.strip() if isinstance(spec, str) else spec
    if not isinstance(text, str) or not text:
        raise InvalidTrustSpecification(str(spec))

    if "/" in text:
        prefix = text.partition("/")[2]
        if not (prefix.isascii() and prefix.isdigit()):
            raise InvalidTrustSpecification(spec)
        try:
            return normalize_network(ipaddress.ip_network(text, strict=False))
        except ValueError as e:
            raise InvalidTrustSpecification(spec) from e

    address = parse_address(text)
    if address is None:
        raise InvalidTrustSpecification(spec)
    return ipaddress.ip_network(f"{address}/{address.max_prefixlen}")


class TrustStore:
    """
    Ordered, append-only collection of trusted proxy networks.

    Entries passed to the constructor, ``add_many`` or ``from_specs`` skip
    blanks; ``add_trusted`` itself rejects an empty entry.

    Populate it with ``add_trusted`` during setup, then ``freeze`` it before
    evaluations begin. A frozen store is read-only and safe to share between
    threads; adding to an unfrozen store while another thread evaluates
    against it is not supported.
    """

    def __init__(self, specs: Optional[Iterable[str]] = None):
        self._networks: list[NetworkRange] | tuple[NetworkRange, ...] = []
        if specs:
            self.add_many(specs)

    @classmethod
    def from_specs(cls, specs: Iterable[str], strict: bool = True) -> "TrustStore":
        """
        Build a store from configured entries.

        Blank entries are ignored. With ``strict`` a malformed entry raises
        InvalidTrustSpecification; otherwise it is logged and skipped.
        """
        store = cls()
        for spec in specs:
            if not spec or not spec.strip():
                continue
            try:
                store.add_trusted(spec)
            except InvalidTrustSpecification as e:
                if strict:
                    raise
                logger.warning(f"Ignoring trusted proxy entry {e.spec!r}: {e.detail}")
        logger.info(f"Loaded {len(store)} trusted proxy network(s)")
        return store

    @property
    def frozen(self) -> bool:
        return isinstance(self._networks, tuple)

    @property
    def networks(self) -> tuple[NetworkRange, ...]:
        return tuple(self._networks)

    def add_trusted(self, spec: str) -> NetworkRange:
        """Add a trusted IP or CIDR range and return the stored network."""
        if self.frozen:
            raise TrustStoreFrozenError()
        network = network_from_spec(spec)
        self._networks.append(network)
        return network

    def add_many(self, specs: Iterable[str]) -> None:
        """Add every entry, skipping blank ones."""
        for spec in specs:
            if not spec or not spec.strip():
                continue
            self.add_trusted(spec)

    def freeze(self) -> "TrustStore":
        """Make the store read-only. Safe to call more than once."""
        if not self.frozen:
            self._networks = tuple(self._networks)
        return self

    def is_trusted(self, address: Union[str, IPAddress, None]) -> Optional[NetworkRange]:
        """Return the first network containing ``address``, or None."""
        if address is None:
            return None
        if isinstance(address, str):
            address = parse_address(address.strip())
        else:
            address = usable_address(address)
        if address is None:
            return None

        for network in self._networks:
            # Mixed-version containment is always False.
            if network.version == address.version and address in network:
                return network
        return None

    def __contains__(self, address) -> bool:
        return self.is_trusted(address) is not None

    def __len__(self) -> int:
        return len(self._networks)

    def __repr__(self) -> str:
        return f"TrustStore({[str(n) for n in self._networks]!r}, frozen={self.frozen})"
