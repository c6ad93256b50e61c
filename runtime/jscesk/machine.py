"""
jscesk Machine - Step and Eval

The transition function of the CESK machine and the loop that drives it.

Architecture:
- step(state): one statement transition, (node, frame, store, kont) -> State
- eval(expr, ...): expression evaluation; yields a Value, an Address (a
  reference still to be dereferenced), or a State when a call was entered
- _call(...): the call protocol shared by call statements, call-initialised
  declarations and `x = f()` assignments
- run(source): parse, wrap, link, bootstrap, then step until Done

Statements never modify a store version they were handed. Anything an
expression writes (assignment, object literal slots) goes into a private
scratch clone that becomes the next state's store.
"""

from dataclasses import dataclass
import logging
from typing import Any, List, Optional, TextIO, Union

from .abstract_ops import (
    abstract_equality_comparison, abstract_relational_comparison, divide,
    get_value, put_value, remainder, strict_equality_comparison, to_boolean,
    to_number, to_primitive, to_string,
)
from .address import Address, Allocator
from .config import MachineConfig
from .environment import Environment
from .errors import (
    E_BAD_WRITE, E_NOT_CALLABLE, E_TYPE, E_UNREACHABLE, error, unimplemented,
)
from .frontend import parse, render
from .intrinsics import OBJECT_PROTOTYPE, init_es6_env
from .kont import (
    AssignKont, HaltKont, HandlerKont, LeaveScopeKont, apply, handle,
    kont_stack, leave_handler, leave_scope,
)
from .nodes import (
    ArrayExpression, AssignmentExpression, BinaryExpression, BlockStatement,
    CallExpression, Done, EmptyStatement, ExpressionStatement,
    FunctionDeclaration, FunctionExpression, HandlerExit, Identifier,
    IfStatement, Literal, LogicalExpression, MemberExpression, NodeBuilder,
    ObjectExpression, Program, ReturnStatement, ScopeExit, ThrowStatement,
    TryStatement, UnaryExpression, VariableDeclaration, WhileStatement,
    assign_next, dump_statements, to_anf,
)
from .state import State
from .store import Store
from .values import (
    BuiltinFunction, FALSE, Function, Null, Number, Object, String, TRUE,
    Undefined, Value, to_value,
)

logger = logging.getLogger("jscesk.machine")


# ============================================================================
# Run result
# ============================================================================

@dataclass
class RunResult:
    """Outcome of driving a program to Done"""
    state_count: int
    store: Store
    global_frame: Environment
    final_state: State
    uncaught: Optional[Value] = None

    def lookup(self, name: str) -> Value:
        """Value bound to a global name in the final store"""
        return self.store.get(self.global_frame.get_offset(name))


# ============================================================================
# Machine
# ============================================================================

class Machine:
    """One interpretation session"""

    def __init__(self, config: Optional[MachineConfig] = None, out: Optional[TextIO] = None):
        self.config = config or MachineConfig()
        self.allocator = Allocator()
        self.out = out
        self.source: Optional[str] = None
        self.global_frame: Optional[Environment] = None

    # ---- setup -------------------------------------------------------------

    def load(self, program: Any) -> Program:
        """Parse (if given text), wrap and link a program"""
        if isinstance(program, str):
            self.source = program
            raw = parse(program)
        else:
            raw = program
        top = NodeBuilder(self.source).wrap(raw)
        if not isinstance(top, Program):
            error(E_TYPE, f"expected a Program, got {top!r}")
        assign_next(top, Done(-1, None))
        top = to_anf(top)
        if self.config.dump_statements:
            dump_statements(top, self.source)
        return top

    def bootstrap(self):
        """Fresh global frame, store and Halt continuation"""
        self.allocator.reset()
        store0 = Store()
        fp0 = Environment(self.allocator)
        init_es6_env(fp0, store0, self.out)
        self.global_frame = fp0
        return fp0, store0, HaltKont()

    def initial_state(self, program: Program) -> State:
        fp0, store0, halt = self.bootstrap()
        return State(program, fp0, store0, halt)

    # ---- driver ------------------------------------------------------------

    def iter_states(self, state: State):
        """Yield every state up to and including the Done state"""
        yield state
        while not state.done:
            state = self.step(state)
            yield state

    def run(self, program: Any) -> RunResult:
        """Run a program (source text or parsed tree) to completion"""
        state = self.initial_state(self.load(program))
        count = 0
        for state in self.iter_states(state):
            count += 1
        return RunResult(
            state_count=count,
            store=state.store,
            global_frame=self.global_frame,
            final_state=state,
            uncaught=state.node.uncaught,
        )

    # ---- statements --------------------------------------------------------

    def step(self, state: State) -> State:
        """One transition"""
        node, fp, store, kont = state.node, state.frame, state.store, state.kont
        if self.config.debug:
            logger.debug("State.next called, current stmt = %s [%s], kont stack = %s",
                         node.kind, render(node, self.source), " ".join(kont_stack(kont)))

        if isinstance(node, (Program, EmptyStatement)):
            return State(node.next, fp, store, kont)

        elif isinstance(node, BlockStatement):
            if not node.body:
                return State(node.next, fp, store, kont)
            kont_ = LeaveScopeKont(node.exit.next, fp, kont)
            return State(node.next, fp.push(), store, kont_)

        elif isinstance(node, ScopeExit):
            return leave_scope(kont, store)

        elif isinstance(node, HandlerExit):
            return leave_handler(kont, store)

        elif isinstance(node, FunctionDeclaration):
            store_ = Store.extend(store, fp.offset(node.name), Function(node, fp))
            return State(node.next, fp, store_, kont)

        elif isinstance(node, VariableDeclaration):
            return self._step_declaration(node, fp, store, kont)

        elif isinstance(node, ExpressionStatement):
            store_ = Store.clone(store)
            val = self.eval(node.expression, fp, store_, kont, node.next)
            if isinstance(val, State):
                return val
            return State(node.next, fp, store_, kont)

        elif isinstance(node, IfStatement):
            store_ = Store.clone(store)
            test = self._truthy(self._value(node.test, fp, store_))
            if test.value:
                return State(node.consequent, fp, store_, kont)
            elif node.alternate is not None:
                return State(node.alternate, fp, store_, kont)
            return State(node.next, fp, store_, kont)

        elif isinstance(node, WhileStatement):
            store_ = Store.clone(store)
            test = self._truthy(self._value(node.test, fp, store_))
            if test.value:
                return State(node.body, fp, store_, kont)
            return State(node.next, fp, store_, kont)

        elif isinstance(node, ReturnStatement):
            store_ = Store.clone(store)
            if node.argument is None:
                return apply(kont, Undefined(), store_)
            return apply(kont, self._value(node.argument, fp, store_), store_)

        elif isinstance(node, ThrowStatement):
            store_ = Store.clone(store)
            return handle(kont, self._value(node.argument, fp, store_), store_)

        elif isinstance(node, TryStatement):
            if not node.block.body:
                return State(node.next, fp, store, kont)
            kont_ = HandlerKont(node.handler, fp, node.handler_exit.next, kont)
            kont_ = LeaveScopeKont(node.handler_exit, fp, kont_)
            return State(node.next, fp.push(), store, kont_)

        elif isinstance(node, Done):
            return error(E_UNREACHABLE, "shouldn't reach here")

        return unimplemented(f"{node.kind}.step")

    def _step_declaration(self, node: VariableDeclaration, fp, store, kont) -> State:
        store_ = Store.clone(store)
        first = node.declarations[0]
        if isinstance(first.init, CallExpression):
            if len(node.declarations) > 1:
                unimplemented("call initializer in a multi-declarator declaration")
            return self._call(first.init, first.name, None, node.next, fp, store_, kont)

        for decl in node.declarations:
            if decl.init is None:
                val = Undefined()
            else:
                val = self._value(decl.init, fp, store_)
            logger.debug("%s %s = %r", node.declaration_kind, decl.name, val)
            store_._extend(fp.offset(decl.name), val)
        return State(node.next, fp, store_, kont)

    # ---- expressions -------------------------------------------------------

    def eval(self, expr, fp: Environment, store: Store, kont=None, resume=None) -> Union[Value, Address, State]:
        """Evaluate an expression against `store` (which it may write)

        `kont` and `resume` are only supplied in statement position, where a
        call may hand control to the callee.
        """
        if isinstance(expr, Identifier):
            return fp.get_offset(expr.name)

        elif isinstance(expr, Literal):
            return self._literal(expr)

        elif isinstance(expr, FunctionExpression):
            return Function(expr, fp)

        elif isinstance(expr, ObjectExpression):
            obj = Object.create(fp.get_offset(OBJECT_PROTOTYPE), store, self.allocator)
            for prop in expr.properties:
                val = self._value(prop.value, fp, store)
                store._extend(obj.env.offset(prop.key), val)
            return obj

        elif isinstance(expr, ArrayExpression):
            return unimplemented("ArrayExpression.eval")

        elif isinstance(expr, MemberExpression):
            oval = self._value(expr.object, fp, store)
            if not isinstance(oval, Object):
                error(E_TYPE, "member expression with lhs not an object")
            key = to_string(to_primitive(self._value(expr.property, fp, store)))
            return oval.get(key)

        elif isinstance(expr, BinaryExpression):
            lval = self._value(expr.left, fp, store)
            rval = self._value(expr.right, fp, store)
            return self._binary(expr.operator, lval, rval)

        elif isinstance(expr, UnaryExpression):
            return self._unary(expr.operator, self._value(expr.argument, fp, store))

        elif isinstance(expr, LogicalExpression):
            # no short circuit: both sides are always evaluated
            self._truthy(self._value(expr.left, fp, store))
            self._truthy(self._value(expr.right, fp, store))
            return unimplemented(f"unrecognized logical operation: {expr.operator}")

        elif isinstance(expr, AssignmentExpression):
            if expr.operator != '=':
                unimplemented(f"assignment operator {expr.operator}")
            lref = self.eval(expr.left, fp, store)
            if isinstance(expr.right, CallExpression):
                if kont is None:
                    error(E_TYPE, "call result used in expression position")
                if not isinstance(lref, Address):
                    error(E_BAD_WRITE, "PutValue passed non-ref first arg")
                return self._call(expr.right, None, lref, resume, fp, store, kont)
            rval = self._value(expr.right, fp, store)
            put_value(lref, rval, store)
            return rval

        elif isinstance(expr, CallExpression):
            if kont is None:
                error(E_TYPE, "call result used in expression position")
            return self._call(expr, None, None, resume, fp, store, kont)

        return unimplemented(f"{expr.kind}.eval")

    def _value(self, expr, fp: Environment, store: Store) -> Value:
        return get_value(self.eval(expr, fp, store), store)

    def _truthy(self, val: Value):
        return to_boolean(val, self.config.inverted_truthiness)

    def _literal(self, expr: Literal) -> Value:
        v = expr.value
        if isinstance(v, bool):
            return TRUE if v else FALSE
        if v is None:
            return Null()
        if isinstance(v, (int, float)):
            return Number(v)
        if isinstance(v, str):
            return String(v)
        return unimplemented("Literal.eval")

    def _unary(self, op: str, val: Value) -> Value:
        if op == '!':
            return FALSE if self._truthy(val).value else TRUE
        elif op == '-':
            return Number(-to_number(val).value)
        elif op == '+':
            return to_number(val)
        elif op == 'void':
            return Undefined()
        return unimplemented(f"unrecognized unary operation: {op}")

    def _binary(self, op: str, lval: Value, rval: Value) -> Value:
        if op == '+':
            lprim = to_primitive(lval)
            rprim = to_primitive(rval)
            if isinstance(lprim, String) or isinstance(rprim, String):
                return String(to_string(lprim).value + to_string(rprim).value)
            return Number(to_number(lprim).value + to_number(rprim).value)

        elif op in ('-', '*', '/', '%'):
            lnum = to_number(lval).value
            rnum = to_number(rval).value
            if op == '-':
                return Number(lnum - rnum)
            elif op == '*':
                return Number(lnum * rnum)
            elif op == '/':
                return Number(divide(lnum, rnum))
            return Number(remainder(lnum, rnum))

        elif op == '<':
            r = abstract_relational_comparison(lval, rval, True)
            return FALSE if isinstance(r, Undefined) else r
        elif op == '>':
            r = abstract_relational_comparison(rval, lval, False)
            return FALSE if isinstance(r, Undefined) else r
        elif op == '<=':
            r = abstract_relational_comparison(rval, lval, False)
            return FALSE if isinstance(r, Undefined) or r.value else TRUE
        elif op == '>=':
            r = abstract_relational_comparison(lval, rval, True)
            return FALSE if isinstance(r, Undefined) or r.value else TRUE

        elif op == '==':
            return abstract_equality_comparison(lval, rval)
        elif op == '!=':
            return FALSE if abstract_equality_comparison(lval, rval).value else TRUE
        elif op == '===':
            return strict_equality_comparison(lval, rval)
        elif op == '!==':
            return FALSE if strict_equality_comparison(lval, rval).value else TRUE

        return unimplemented(f"unrecognized binary operation: {op}")

    # ---- calls -------------------------------------------------------------

    def _call(self, call: CallExpression, name: Optional[str], address: Optional[Address],
              resume, fp: Environment, store: Store, kont) -> State:
        """Enter a callee; its return value is bound to `name` or `address`"""
        callee = self._value(call.callee, fp, store)

        if isinstance(callee, BuiltinFunction):
            js_args = [self._value(arg, fp, store).payload for arg in call.arguments]
            result = to_value(callee.callback(*js_args))
            kont_ = AssignKont(name, resume, fp, kont, address)
            return apply(kont_, result, store)

        elif isinstance(callee, Function):
            logger.debug("calling JS function %r in context of %r", callee, callee.frame)
            args = [self._value(arg, fp, store) for arg in call.arguments]
            fp_ = Environment(self.allocator, callee.frame)
            store_ = Store.clone(store)
            for n, param in enumerate(callee.params):
                store_._extend(fp_.offset(param.name), args[n] if n < len(args) else Undefined())
            kont_ = AssignKont(name, resume, fp, kont, address)
            if not callee.body.body:
                return apply(kont_, Undefined(), store_)
            return State(callee.body, fp_, store_, kont_)

        logger.debug("not callable: %r", callee)
        return error(E_NOT_CALLABLE, "callee is not a function")


def run_source(source: str, config: Optional[MachineConfig] = None, out: Optional[TextIO] = None) -> RunResult:
    """
    Run a program (convenience function)

    Args:
        source: program text
        config: machine configuration (default: MachineConfig())
        out: stream `print` writes to (default: sys.stdout)

    Returns:
        RunResult with the final store and global frame

    Example:
        >>> run_source('let x = 1 + 2;').lookup('x')
        Number(3.0)
    """
    return Machine(config, out).run(source)


__all__ = ['Machine', 'RunResult', 'run_source']
