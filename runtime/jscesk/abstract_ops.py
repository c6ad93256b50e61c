"""
Abstract operations of the target language, over concrete values.

Each function is pure and total over the value kinds the subset supports;
anything else is an unsupported-construct failure. Section numbers are those
of ECMA-262, 6th edition.
"""

import logging
import math
from typing import Optional, Union

from .address import Address
from .errors import E_BAD_WRITE, error, unimplemented
from .values import (
    Boolean, BuiltinFunction, FALSE, Function, Null, Number, Object, String,
    Symbol, TRUE, Undefined, Value,
)

logger = logging.getLogger("jscesk.abstract_ops")

PRIMITIVES = (Undefined, Null, Boolean, Number, String, Symbol)
OBJECTS = (Object, Function, BuiltinFunction)


# ============================================================================
# References (6.2.3)
# ============================================================================

def get_value(ref: Union[Address, Value], store) -> Value:
    """Dereference an address; values pass through unchanged"""
    if isinstance(ref, Address):
        return store.get(ref)
    return ref


def put_value(ref: Union[Address, Value], val: Value, store):
    """Write through a reference into `store` (in place)"""
    if isinstance(ref, Address):
        store._extend(ref, val)
        return
    error(E_BAD_WRITE, "PutValue passed non-ref first arg")


# ============================================================================
# Type conversion (7.1)
# ============================================================================

def to_primitive(input: Value, preferred_type: Optional[str] = None) -> Value:
    """7.1.1 ToPrimitive"""
    if isinstance(input, PRIMITIVES):
        return input
    if isinstance(input, OBJECTS):
        hint = preferred_type or "default"
        exotic_to_prim = get_method(input, "@@toPrimitive")
        if not isinstance(exotic_to_prim, Undefined):
            # user-defined conversion hooks are not modelled
            unimplemented("ToPrimitive via @@toPrimitive")
        if hint == "default":
            hint = "number"
        return ordinary_to_primitive(input, hint)
    return unimplemented(f"ToPrimitive {input!r}")


def get_method(obj: Value, key: str) -> Value:
    """7.3.9 GetMethod, stubbed: no object carries conversion methods"""
    return Undefined()


def ordinary_to_primitive(input: Value, hint: str) -> Value:
    """7.1.1.1 OrdinaryToPrimitive; objects do not convert yet"""
    return unimplemented("OrdinaryToPrimitive")


def to_boolean(val: Value, inverted: bool = False) -> Boolean:
    """7.1.2 ToBoolean

    With `inverted` set, Number and String follow the variant table where
    zero, NaN and the empty string are true.
    """
    if isinstance(val, Boolean):
        return val
    if isinstance(val, (Undefined, Null)):
        return FALSE
    if isinstance(val, Number):
        falsy = math.isnan(val.value) or val.value == 0
        return TRUE if falsy == inverted else FALSE
    if isinstance(val, String):
        falsy = val.value == ""
        return TRUE if falsy == inverted else FALSE
    if isinstance(val, OBJECTS) or isinstance(val, Symbol):
        return TRUE
    return unimplemented("ToBoolean")


def to_number(val: Value) -> Number:
    """7.1.3 ToNumber"""
    if isinstance(val, Undefined):
        return Number(math.nan)
    if isinstance(val, Null):
        return Number(0)
    if isinstance(val, Boolean):
        return Number(1 if val.value else 0)
    if isinstance(val, Number):
        return val
    return unimplemented("missing ToNumber() support")


def number_to_string(n: float) -> str:
    """7.1.12.1 for the cases the subset produces"""
    if math.isnan(n):
        return "NaN"
    if math.isinf(n):
        return "Infinity" if n > 0 else "-Infinity"
    if n == 0:
        return "0"
    if n.is_integer() and abs(n) < 1e21:
        return str(int(n))
    return repr(n)


def to_string(argument: Value) -> String:
    """7.1.12 ToString"""
    if isinstance(argument, OBJECTS):
        return unimplemented("ToString(Object)")
    if isinstance(argument, Symbol):
        return unimplemented("ToString(Symbol)")
    if isinstance(argument, String):
        return argument
    if isinstance(argument, Number):
        return String(number_to_string(argument.value))
    if isinstance(argument, Boolean):
        return String("true" if argument.value else "false")
    if isinstance(argument, Null):
        return String("null")
    return String("undefined")


# ============================================================================
# Numeric operators (12.6, 12.7)
# ============================================================================

def divide(x: float, y: float) -> float:
    if y == 0:
        if x == 0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)
    return x / y


def remainder(x: float, y: float) -> float:
    if math.isnan(x) or math.isnan(y) or math.isinf(x) or y == 0:
        return math.nan
    if math.isinf(y):
        return x
    return math.fmod(x, y)


# ============================================================================
# Comparison (7.2)
# ============================================================================

def abstract_relational_comparison(x: Value, y: Value, left_first: bool) -> Value:
    """7.2.11; returns Boolean, or Undefined when either side is NaN"""
    if left_first:
        px = to_primitive(x)
        py = to_primitive(y)
    else:
        py = to_primitive(y)
        px = to_primitive(x)
    if isinstance(px, String) and isinstance(py, String):
        if px.value.startswith(py.value):
            return FALSE
        if py.value.startswith(px.value):
            return TRUE
        for m, n in zip(px.value, py.value):
            if m != n:
                return TRUE if ord(m) < ord(n) else FALSE
    nx = to_number(px)
    ny = to_number(py)
    if math.isnan(nx.value) or math.isnan(ny.value):
        return Undefined()
    # signed zeros and infinities order correctly under float comparison
    return TRUE if nx.value < ny.value else FALSE


def abstract_equality_comparison(x: Value, y: Value) -> Boolean:
    """7.2.12 Abstract Equality Comparison

    Incomplete: always reports inequality. None of the coercing cases
    (null/undefined, number/string, boolean, object-to-primitive) are
    implemented yet.
    """
    logger.debug("abstract equality is stubbed: %r == %r -> false", x, y)
    return FALSE


def strict_equality_comparison(x: Value, y: Value) -> Boolean:
    """7.2.13 Strict Equality Comparison"""
    logger.debug("comparing %r with %r", x, y)
    if type(x) is not type(y):
        return FALSE
    if isinstance(x, (Undefined, Null)):
        return TRUE
    if isinstance(x, Number):
        if math.isnan(x.value) or math.isnan(y.value):
            return FALSE
        # +0 and -0 compare equal
        return TRUE if x.value == y.value else FALSE
    if isinstance(x, (String, Boolean)):
        return TRUE if x.value == y.value else FALSE
    return TRUE if x is y else FALSE


__all__ = [
    'get_value', 'put_value',
    'to_primitive', 'get_method', 'ordinary_to_primitive',
    'to_boolean', 'to_number', 'to_string', 'number_to_string',
    'divide', 'remainder',
    'abstract_relational_comparison', 'abstract_equality_comparison',
    'strict_equality_comparison',
]
