"""
jscesk Errors - Fatal Failure Kinds

The machine has exactly two ways to fail, and both abort the run:

- Unsupported construct: a node kind or operator outside the modelled subset.
- Semantic violation: unresolved identifier, call on a non-function, write to
  an unbound or protected address, or reaching a state that correct control
  linking makes unreachable.

A language-level `throw` is NOT one of these. It travels down the continuation
chain and, when uncaught, ends the run gracefully through the Halt frame.
"""

import logging

logger = logging.getLogger("jscesk.errors")


# ============================================================================
# Error Codes
# ============================================================================

E_UNSUPPORTED = "E_UNSUPPORTED"
E_UNRESOLVED = "E_UNRESOLVED"
E_NOT_CALLABLE = "E_NOT_CALLABLE"
E_BAD_WRITE = "E_BAD_WRITE"
E_UNREACHABLE = "E_UNREACHABLE"
E_TYPE = "E_TYPE"
E_PARSE = "E_PARSE"


# ============================================================================
# Exceptions
# ============================================================================

class JSCESKError(Exception):
    """Base exception for fatal machine failures"""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class UnsupportedError(JSCESKError):
    """A construct or operator this subset does not model"""
    def __init__(self, message: str):
        super().__init__(E_UNSUPPORTED, message)


class SemanticError(JSCESKError):
    """A violation of the machine's own invariants"""
    pass


# ============================================================================
# Raising helpers
# ============================================================================

def unimplemented(what: str):
    """Abort on functionality the subset deliberately leaves out."""
    logger.error("unimplemented functionality: %s", what)
    raise UnsupportedError(what)


def error(code: str, message: str):
    """Abort on a semantic violation."""
    logger.error("ERROR: %s", message)
    raise SemanticError(code, message)


__all__ = [
    'E_UNSUPPORTED', 'E_UNRESOLVED', 'E_NOT_CALLABLE', 'E_BAD_WRITE',
    'E_UNREACHABLE', 'E_TYPE', 'E_PARSE',
    'JSCESKError', 'UnsupportedError', 'SemanticError',
    'unimplemented', 'error',
]
