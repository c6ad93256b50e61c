"""
Parser and trace collaborators.

The machine consumes ESTree-shaped trees. `parse` produces them with esprima;
hand-built trees made of plain dicts are accepted everywhere too, which is
what `field` is for.
"""

from typing import Any, List, Optional

import esprima
from esprima.error_handler import Error as EsprimaError

from .errors import E_PARSE, JSCESKError


def parse(source: str) -> Any:
    """Parse a script into an ESTree Program (with source ranges)"""
    try:
        return esprima.parseScript(source, {"range": True})
    except EsprimaError as e:
        raise JSCESKError(E_PARSE, str(e)) from e


def field(raw: Any, name: str, default: Any = None) -> Any:
    """Read a field from an esprima node or a dict node"""
    if raw is None:
        return default
    if isinstance(raw, dict):
        return raw.get(name, default)
    value = getattr(raw, name, default)
    return default if value is None else value


def kind_of(raw: Any) -> Optional[str]:
    return field(raw, "type")


def catch_clauses(raw_try: Any) -> List[Any]:
    """Catch clauses of a TryStatement, old (`handlers`) or new (`handler`) shape"""
    handlers = field(raw_try, "handlers")
    if handlers:
        return list(handlers)
    handler = field(raw_try, "handler")
    return [handler] if handler is not None else []


def span_of(raw: Any) -> Optional[tuple]:
    rng = field(raw, "range")
    if rng is None:
        return None
    return (rng[0], rng[1])


def render(node: Any, source: Optional[str]) -> str:
    """Source text of a wrapped node, for trace output"""
    span = getattr(node, 'span', None)
    if source is not None and span is not None:
        text = source[span[0]:span[1]]
        return " ".join(text.split())
    return node.kind


__all__ = ['parse', 'field', 'kind_of', 'catch_clauses', 'span_of', 'render']
