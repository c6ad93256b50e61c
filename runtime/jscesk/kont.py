"""
Continuation stack.

The stack is a singly linked chain of immutable frames ending in exactly one
HaltKont. Four control events travel down it:

- apply(value)      a function returned; consumed by AssignKont
- leave_scope()     control fell off a block; consumed by LeaveScopeKont
- leave_handler()   control fell off a protected block; consumed by HandlerKont
- handle(thrown)    a value was thrown; consumed by HandlerKont

Each event has one dispatcher function that walks the chain until it finds a
frame that accepts it. Frames skipped on the way are discarded, which is how a
return or throw unwinds every scope it crosses.
"""

from dataclasses import dataclass
import logging
from typing import Any, List, Optional

from .environment import Environment
from .errors import E_UNREACHABLE, error
from .nodes import CatchClause, Done
from .state import State
from .store import Store
from .values import Undefined, Value

logger = logging.getLogger("jscesk.kont")


# ============================================================================
# Frames
# ============================================================================

@dataclass(frozen=True, eq=False)
class AssignKont:
    """Pending call: bind the return value and resume in the caller"""
    name: Optional[str]
    stmt: Any
    frame: Environment
    next: Any
    # resolved target for `x = f()` style calls
    address: Any = None

    def __repr__(self) -> str:
        return "AssignKont"


@dataclass(frozen=True, eq=False)
class LeaveScopeKont:
    """Pending block exit: restore `frame` and resume at `stmt`"""
    stmt: Any
    frame: Environment
    next: Any

    def __repr__(self) -> str:
        return "LeaveScopeKont"


@dataclass(frozen=True, eq=False)
class HandlerKont:
    """Installed catch clause; `resume` is the statement after the try"""
    catch_clause: CatchClause
    frame: Environment
    resume: Any
    next: Any

    def __repr__(self) -> str:
        return "HandlerKont"


@dataclass(frozen=True, eq=False)
class HaltKont:
    """Bottom of every chain"""
    next: Any = None

    def __repr__(self) -> str:
        return "HaltKont"


# ============================================================================
# Event dispatch
# ============================================================================

def apply(kont, value: Value, store: Store) -> State:
    """Deliver a function's return value"""
    k = kont
    while True:
        if isinstance(k, AssignKont):
            if k.name:
                store_ = Store.extend(store, k.frame.offset(k.name), value)
            elif k.address is not None:
                store_ = Store.extend(store, k.address, value)
            else:
                store_ = store
            return State(k.stmt, k.frame, store_, k.next)
        if isinstance(k, HaltKont):
            return error(E_UNREACHABLE, "HaltKont.apply")
        k = k.next


def leave_scope(kont, store: Store) -> State:
    """Fall off the end of a block"""
    k = kont
    while True:
        if isinstance(k, LeaveScopeKont):
            if k.stmt is None:
                # end of a function body without a return
                return apply(k.next, Undefined(), store)
            return State(k.stmt, k.frame, store, k.next)
        if isinstance(k, HaltKont):
            return error(E_UNREACHABLE, "HaltKont.leaveScope")
        k = k.next


def leave_handler(kont, store: Store) -> State:
    """Fall off the end of a protected block"""
    k = kont
    while True:
        if isinstance(k, HandlerKont):
            return State(k.resume, k.frame, store, k.next)
        if isinstance(k, HaltKont):
            return error(E_UNREACHABLE, "HaltKont.leaveHandler")
        k = k.next


def handle(kont, thrown: Value, store: Store) -> State:
    """Dispatch a thrown value to the nearest handler"""
    k = kont
    while True:
        if isinstance(k, HandlerKont):
            return _enter_catch(k, thrown, store)
        if isinstance(k, HaltKont):
            logger.warning("unhandled exception! %r", thrown)
            return State(Done(-1, None, uncaught=thrown), None, store, None)
        k = k.next


def _enter_catch(k: HandlerKont, thrown: Value, store: Store) -> State:
    clause = k.catch_clause
    if not clause.body.body:
        return State(k.resume, k.frame, store, k.next)
    frame_ = k.frame.push()
    store_ = Store.extend(store, frame_.offset(clause.param.name), thrown)
    kont_ = LeaveScopeKont(k.resume, k.frame, k.next)
    return State(clause.body.body[0], frame_, store_, kont_)


# ============================================================================
# Inspection
# ============================================================================

def kont_stack(kont) -> List[str]:
    names = []
    k = kont
    while k is not None:
        names.append(repr(k))
        k = k.next
    return names


def depth(kont) -> int:
    return len(kont_stack(kont))


__all__ = [
    'AssignKont', 'LeaveScopeKont', 'HandlerKont', 'HaltKont',
    'apply', 'leave_scope', 'leave_handler', 'handle',
    'kont_stack', 'depth',
]
