"""
Environment frames: parent-linked name -> address maps.

A block pushes a child frame of the current one. A function call builds a
fresh root frame whose parent is the frame the function captured when it was
defined, never the caller's; that is what makes free variables resolve
lexically.
"""

from typing import Dict, List, Optional, Union

from .address import Address, Allocator
from .errors import E_UNRESOLVED, error


# Sentinel returned by get_offset(..., must_exist=False) on a miss.
NOT_FOUND = None


class Environment:
    """One lexical scope"""

    def __init__(self, allocator: Allocator, parent: Optional["Environment"] = None):
        self._allocator = allocator
        self._parent = parent
        self._offsets: Dict[str, Address] = {}

    @property
    def parent(self) -> Optional["Environment"]:
        return self._parent

    @property
    def allocator(self) -> Allocator:
        return self._allocator

    def push(self) -> "Environment":
        """Child frame for a nested block"""
        return Environment(self._allocator, self)

    def get_offset(self, name: str, must_exist: bool = True) -> Union[Address, None]:
        """Resolve `name` along the parent chain"""
        fr = self
        while fr is not None:
            if name in fr._offsets:
                return fr._offsets[name]
            fr = fr._parent
        if must_exist:
            error(E_UNRESOLVED, f"could not find {name}")
        return NOT_FOUND

    def set_offset(self, name: str, addr: Address):
        self._offsets[name] = addr

    def offset(self, name: str) -> Address:
        """Frame-local address for `name`, allocated on first use"""
        if name in self._offsets:
            return self._offsets[name]
        rv = self._allocator.fresh()
        self._offsets[name] = rv
        return rv

    def names(self) -> List[str]:
        return list(self._offsets)

    def depth(self) -> int:
        n = 0
        fr = self._parent
        while fr is not None:
            n += 1
            fr = fr._parent
        return n

    def __contains__(self, name: str) -> bool:
        return name in self._offsets

    def __repr__(self) -> str:
        parts = []
        fr = self
        while fr is not None:
            parts.append(", ".join(f"{k} = {v!r}" for k, v in fr._offsets.items()))
            fr = fr._parent
        return "Environment(" + " | ".join(parts) + ")"


__all__ = ['Environment', 'NOT_FOUND']
