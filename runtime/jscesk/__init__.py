"""
jscesk - CESK Machine Interpreter for a JavaScript Subset

This package steps a restricted JavaScript program through explicit
(Control, Environment, Store, Kontinuation) states:

**Front End:**
- frontend: esprima parsing and raw-tree access
- nodes: typed statement/expression variants and control linking

**Machine:**
- state: the four-part configuration
- kont: continuation frames and control-event dispatch
- machine: step, eval, the call protocol and the driver

**Runtime Model:**
- address / store / environment: allocation, persistent store, frames
- values: Boolean, Number, String, Symbol, Null, Undefined, Object, closures
- abstract_ops: coercions and comparisons
- intrinsics: global bootstrap (print, undefined, %ObjectPrototype%)

Version: 0.3.0
"""

__version__ = '0.3.0'

# ============================================================================
# Errors and Configuration
# ============================================================================

from .errors import (
    E_UNSUPPORTED, E_UNRESOLVED, E_NOT_CALLABLE, E_BAD_WRITE,
    E_UNREACHABLE, E_TYPE, E_PARSE,
    JSCESKError, UnsupportedError, SemanticError,
)
from .config import MachineConfig, configure_logging

# ============================================================================
# Runtime Model
# ============================================================================

from .address import Address, Allocator, NULL_ADDRESS
from .store import Store
from .environment import Environment
from .values import (
    Value, Boolean, TRUE, FALSE, Number, String, Symbol, Null, Undefined,
    Object, Function, BuiltinFunction,
)

# ============================================================================
# Machine
# ============================================================================

from .frontend import parse
from .nodes import NodeBuilder, assign_next
from .state import State
from .machine import Machine, RunResult, run_source

# ============================================================================
# Exports
# ============================================================================

__all__ = [
    # Version
    '__version__',

    # Errors
    'JSCESKError', 'UnsupportedError', 'SemanticError',
    'E_UNSUPPORTED', 'E_UNRESOLVED', 'E_NOT_CALLABLE', 'E_BAD_WRITE',
    'E_UNREACHABLE', 'E_TYPE', 'E_PARSE',

    # Configuration
    'MachineConfig', 'configure_logging',

    # Runtime model
    'Address', 'Allocator', 'NULL_ADDRESS', 'Store', 'Environment',
    'Value', 'Boolean', 'TRUE', 'FALSE', 'Number', 'String', 'Symbol',
    'Null', 'Undefined', 'Object', 'Function', 'BuiltinFunction',

    # Machine
    'parse', 'NodeBuilder', 'assign_next', 'State',
    'Machine', 'RunResult', 'run_source',
]
