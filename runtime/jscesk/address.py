"""
Address space: opaque storage-location identities.

Addresses are handed out by an Allocator owned by one machine session, so two
machines never share a counter. Address 0 is reserved for the null value and
is never allocated.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Address:
    """Storage slot identity"""
    value: int

    def __repr__(self) -> str:
        return f"Address({self.value})"


NULL_ADDRESS = Address(0)


class Allocator:
    """Monotonic address source for one session"""

    def __init__(self):
        self._last = 0

    def fresh(self) -> Address:
        """Allocate the next unused address"""
        self._last += 1
        return Address(self._last)

    def reset(self):
        """Forget every allocation (start of a new run)"""
        self._last = 0

    @property
    def allocated(self) -> int:
        return self._last


__all__ = ['Address', 'NULL_ADDRESS', 'Allocator']
