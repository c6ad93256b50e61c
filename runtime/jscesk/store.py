"""
Store: address -> value mapping with copy-on-write versions.

Every declaration, assignment and argument binding produces a new Store
version through `Store.extend`; older versions stay valid, which is what the
CESK formalism needs to explore more than one execution branch. `_extend`
mutates in place and is only used on a version nobody else holds yet: the
global store during bootstrap, or a statement's private scratch copy.
"""

from typing import Dict, Iterator

from .address import Address, NULL_ADDRESS
from .errors import E_BAD_WRITE, error
from .values import Null, Undefined, Value


class Store:
    """One version of the machine store"""

    def __init__(self):
        self._store: Dict[int, Value] = {}

    def get(self, addr: Address) -> Value:
        """Read an address; unbound reads yield Undefined"""
        if addr.value == NULL_ADDRESS.value:
            return Null()
        return self._store.get(addr.value, Undefined())

    def set(self, addr: Address, val: Value):
        """Overwrite an existing binding in place"""
        if addr.value == NULL_ADDRESS.value:
            error(E_BAD_WRITE, "can't set NullPointer's value")
        if addr.value not in self._store:
            error(E_BAD_WRITE, "set() of addr not in store")
        self._store[addr.value] = val

    def _extend(self, addr: Address, val: Value):
        # in-place; bootstrap and private scratch copies only
        if addr.value == NULL_ADDRESS.value:
            error(E_BAD_WRITE, "can't set NullPointer's value")
        self._store[addr.value] = val

    @staticmethod
    def clone(store: "Store") -> "Store":
        """Independent copy of every binding"""
        rv = Store()
        rv._store = dict(store._store)
        return rv

    @staticmethod
    def extend(store: "Store", addr: Address, val: Value) -> "Store":
        """New version equal to `store` except at `addr`"""
        rv = Store.clone(store)
        rv._extend(addr, val)
        return rv

    def addresses(self) -> Iterator[Address]:
        for key in sorted(self._store):
            yield Address(key)

    def __contains__(self, addr: Address) -> bool:
        return addr.value in self._store

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        lines = [f"  {addr.value} -> {self.get(addr)!r}" for addr in self.addresses()]
        return "Store(\n" + "\n".join(lines) + "\n)"


__all__ = ['Store']
