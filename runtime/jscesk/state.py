"""
Machine state: the (node, frame, store, continuation) snapshot.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .environment import Environment
from .errors import E_UNREACHABLE, error


@dataclass(frozen=True)
class State:
    """One CESK configuration"""
    node: Any
    frame: Optional[Environment]
    store: Any
    kont: Any

    def __post_init__(self):
        if self.node is None or not hasattr(self.node, 'kind'):
            error(E_UNREACHABLE, "State.node must be an ast node")

    @property
    def done(self) -> bool:
        return self.node.done

    def __repr__(self) -> str:
        return f"State({self.node.kind})"


__all__ = ['State']
