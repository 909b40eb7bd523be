"""Deduce the client IP from a forwarding header and the connection peer."""
from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass
from typing import Optional, Union

from trusted_proxies.services.trust_store import (
    IPAddress,
    NetworkRange,
    TrustStore,
    parse_address,
    usable_address,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddressCandidate:
    """One hop of a forwarding chain, parsed or not."""
    raw: str
    address: Optional[IPAddress] = None

    @classmethod
    def parse(cls, value: str) -> "AddressCandidate":
        text = value.strip()
        return cls(raw=text, address=parse_address(text))

    @classmethod
    def from_peer(cls, peer: Union[str, IPAddress, None]) -> "AddressCandidate":
        if peer is None:
            return cls(raw="")
        if isinstance(peer, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
            return cls(raw=str(peer), address=usable_address(peer))
        return cls.parse(str(peer))

    @property
    def is_valid(self) -> bool:
        return self.address is not None

    def __str__(self) -> str:
        return str(self.address) if self.address is not None else self.raw


@dataclass(frozen=True)
class ChainResult:
    """
    Outcome of one evaluation.

    ``hops`` is the trust-truncated chain in walk order: the peer first, then
    each hop further from the server, ending with the deduced client.
    ``trusted_by`` holds, per hop, the network that vouched for it (None for
    the final hop unless the whole chain was trusted).
    """
    hops: tuple[AddressCandidate, ...]
    trusted_by: tuple[Optional[NetworkRange], ...]

    @property
    def client(self) -> AddressCandidate:
        return self.hops[-1]

    @property
    def peer(self) -> AddressCandidate:
        return self.hops[0]

    def oldest_first(self) -> tuple[AddressCandidate, ...]:
        return tuple(reversed(self.hops))

    def as_strings(self) -> list[str]:
        return [str(hop) for hop in self.hops]


class ChainEvaluator:
    """
    Walks a forwarding chain backward from the peer, trusting hops only while
    they belong to the trust store.

    Creating an evaluator freezes its store.
    """

    def __init__(self, store: TrustStore):
        self.store = store.freeze()

    @staticmethod
    def parse_header(header: Optional[str]) -> list[AddressCandidate]:
        """
        Split a comma-separated forwarding header into candidates.

        An empty or all-whitespace header yields no candidates. Any other
        segment that is not an IP address (including an empty one between
        commas) keeps its position as an unparseable candidate.
        """
        if header is None:
            return []
        items = header.split(",")
        if len(items) == 1 and not items[0].strip():
            return []
        return [AddressCandidate.parse(item) for item in items]

    def evaluate(self, peer: Union[str, IPAddress, None], header: Optional[str]) -> ChainResult:
        """
        Return the trust-truncated chain for one request.

        The peer is always included. Walking from the peer toward the oldest
        header entry, each hop is recorded; the walk stops after recording an
        unparseable or untrusted hop, or when the header is exhausted.
        """
        chain = self.parse_header(header)
        chain.append(AddressCandidate.from_peer(peer))

        hops = []
        trusted_by = []
        for candidate in reversed(chain):
            hops.append(candidate)
            if not candidate.is_valid:
                trusted_by.append(None)
                break
            network = self.store.is_trusted(candidate.address)
            trusted_by.append(network)
            if network is None:
                break

        return ChainResult(hops=tuple(hops), trusted_by=tuple(trusted_by))

    def deduce_client(self, peer: Union[str, IPAddress, None], header: Optional[str]) -> AddressCandidate:
        """Return the deduced client hop: the first untrusted one, or the oldest seen."""
        return self.evaluate(peer, header).client
