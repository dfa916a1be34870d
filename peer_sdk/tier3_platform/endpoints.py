"""
peer_sdk.tier3_platform.endpoints
───────────────────────────────────
Point-in-time view of a Kubernetes Endpoints object.

The API models leave every list optional: the object itself (service not
found), its `subsets`, and each subset's `addresses` / `not_ready_addresses`.
EndpointsSnapshot turns all of those into empty tuples at construction so
the resolver never has to check for None.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SubsetAddresses:
    ready: tuple[str, ...] = ()
    not_ready: tuple[str, ...] = ()

    @classmethod
    def from_subset(cls, subset: Any) -> SubsetAddresses:
        return cls(
            ready=_ips(getattr(subset, "addresses", None)),
            not_ready=_ips(getattr(subset, "not_ready_addresses", None)),
        )


@dataclass(frozen=True)
class EndpointsSnapshot:
    subsets: tuple[SubsetAddresses, ...] = field(default_factory=tuple)

    @classmethod
    def from_endpoints(cls, endpoints: Any | None) -> EndpointsSnapshot:
        """Build from a V1Endpoints (or None when the service was not found)."""
        if endpoints is None:
            return cls()
        subsets = getattr(endpoints, "subsets", None) or ()
        return cls(tuple(SubsetAddresses.from_subset(s) for s in subsets))

    def ready_addresses(self) -> list[str]:
        return [ip for subset in self.subsets for ip in subset.ready]

    def not_ready_addresses(self) -> list[str]:
        return [ip for subset in self.subsets for ip in subset.not_ready]

    def addresses(self) -> list[str]:
        """Ready addresses first, then not-ready, each in subset order."""
        return self.ready_addresses() + self.not_ready_addresses()


def _ips(addresses: Iterable[Any] | None) -> tuple[str, ...]:
    if not addresses:
        return ()
    return tuple(address.ip for address in addresses)


__all__ = ["EndpointsSnapshot", "SubsetAddresses"]
