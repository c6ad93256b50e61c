"""
Global bootstrap: the bindings every program starts with.

Installed with the in-place `Store._extend`, before any State exists.
"""

import sys
from typing import Any, TextIO

from .abstract_ops import number_to_string
from .address import NULL_ADDRESS
from .environment import Environment
from .errors import unimplemented
from .store import Store
from .values import (
    BuiltinFunction, Function, Object, String, Symbol, Undefined,
)


OBJECT_PROTOTYPE = "%ObjectPrototype%"


def display(payload: Any) -> str:
    """How `print` shows a builtin argument"""
    if payload is None:
        return "null"
    if isinstance(payload, bool):
        return "true" if payload else "false"
    if isinstance(payload, float):
        return number_to_string(payload)
    if isinstance(payload, str):
        return payload
    if isinstance(payload, Undefined):
        return "undefined"
    if isinstance(payload, Object):
        return "[object Object]"
    if isinstance(payload, Function):
        return f"function {payload.name}"
    if isinstance(payload, BuiltinFunction):
        return f"function {payload.name or 'builtin'}"
    if isinstance(payload, Symbol):
        return f"Symbol({payload.description})"
    return str(payload)


def init_es6_env(frame: Environment, store: Store, out: TextIO = None):
    """Populate the global frame and store"""
    out = out if out is not None else sys.stdout

    def _print(*args):
        print(" ".join(display(a) for a in args), file=out)

    def _has_own_property(*args):
        unimplemented("builtin-hasOwnProperty")

    def _to_string(*args):
        print("[object Object]", file=out)

    store._extend(frame.offset("print"), BuiltinFunction(1, _print, "print"))
    store._extend(frame.offset("undefined"), Undefined())

    object_prototype = Object.create(NULL_ADDRESS, store, frame.allocator)
    store._extend(frame.offset(OBJECT_PROTOTYPE), object_prototype)

    for key, builtin in (
        ("hasOwnProperty", BuiltinFunction(1, _has_own_property, "hasOwnProperty")),
        ("toString", BuiltinFunction(1, _to_string, "toString")),
    ):
        addr = frame.allocator.fresh()
        store._extend(addr, builtin)
        object_prototype.set(String(key), addr)


__all__ = ['OBJECT_PROTOTYPE', 'display', 'init_es6_env']
