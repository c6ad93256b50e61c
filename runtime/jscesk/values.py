"""
Concrete value model.

Evaluation produces either one of these values or an Address (a reference)
that still has to be dereferenced through the store.
"""

from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Optional

from .address import Address
from .environment import Environment, NOT_FOUND
from .errors import unimplemented

logger = logging.getLogger("jscesk.values")


class Value:
    """Base class of every concrete value"""

    @property
    def payload(self) -> Any:
        """Raw host value handed to builtin callbacks"""
        return self


# ============================================================================
# Primitives
# ============================================================================

@dataclass(frozen=True)
class Boolean(Value):
    value: bool

    @property
    def payload(self) -> bool:
        return self.value

    def __repr__(self) -> str:
        return f"Boolean({'true' if self.value else 'false'})"


TRUE = Boolean(True)
FALSE = Boolean(False)


@dataclass(frozen=True)
class Number(Value):
    value: float

    def __post_init__(self):
        object.__setattr__(self, 'value', float(self.value))

    @property
    def payload(self) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"Number({self.value!r})"


@dataclass(frozen=True)
class String(Value):
    value: str

    @property
    def payload(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"String({self.value!r})"


@dataclass(frozen=True, eq=False)
class Symbol(Value):
    description: str = ""

    def __repr__(self) -> str:
        return f"Symbol({self.description})"


@dataclass(frozen=True)
class Null(Value):

    @property
    def payload(self) -> None:
        return None

    def __repr__(self) -> str:
        return "Null()"


@dataclass(frozen=True)
class Undefined(Value):

    def __repr__(self) -> str:
        return "Undefined()"


# ============================================================================
# References
# ============================================================================

@dataclass(eq=False)
class Object(Value):
    """Object with a prototype link and a private property frame"""
    proto: Address
    env: Environment

    @classmethod
    def create(cls, proto_addr: Address, store, allocator) -> "Object":
        proto = store.get(proto_addr)
        parent = proto.env if isinstance(proto, Object) else None
        obj = cls(proto=proto_addr, env=Environment(allocator, parent))
        obj.env.set_offset("__proto__", proto_addr)
        return obj

    def get(self, key: Value) -> Address:
        # own property or one found along the prototype frames
        name = key.payload
        off = self.env.get_offset(name, must_exist=False)
        if off is not NOT_FOUND:
            return off
        # declare on read: the property becomes an own slot
        return self.env.offset(name)

    def set(self, key: Value, value):
        if isinstance(value, Address):
            self.env.set_offset(key.payload, value)
        else:
            logger.debug("unimplemented functionality: Object.set(%r, %r)", key, value)

    def __repr__(self) -> str:
        return "Object"


@dataclass(eq=False)
class Function(Value):
    """Closure: function node plus the frame it was defined in"""
    node: Any
    frame: Environment

    @property
    def name(self) -> str:
        return getattr(self.node, 'name', None) or "anon"

    @property
    def params(self):
        return self.node.params

    @property
    def body(self):
        return self.node.body

    def __repr__(self) -> str:
        return f"Function {self.name}"


@dataclass(eq=False)
class BuiltinFunction(Value):
    """Host callable exposed to programs"""
    arity: int
    callback: Callable[..., Any]
    name: Optional[str] = field(default=None)

    def __repr__(self) -> str:
        return f"BuiltinFunction({self.arity}, {self.name or self.callback.__name__})"


# ============================================================================
# Host conversion
# ============================================================================

def to_value(native: Any) -> Value:
    """Lift a builtin's host result into a Value"""
    if isinstance(native, Value):
        return native
    if native is None:
        return Undefined()
    if isinstance(native, bool):
        return Boolean(native)
    if isinstance(native, (int, float)):
        return Number(native)
    if isinstance(native, str):
        return String(native)
    return unimplemented(f"host value {native!r}")


__all__ = [
    'Value', 'Boolean', 'TRUE', 'FALSE', 'Number', 'String', 'Symbol',
    'Null', 'Undefined', 'Object', 'Function', 'BuiltinFunction', 'to_value',
]
