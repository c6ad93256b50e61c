"""
AST node layer: wrapping and control linking.

`NodeBuilder.wrap` turns a parsed ESTree tree into one node object per syntax
node, each variant carrying only the fields valid for its kind. It is a
partial function: every kind outside the modelled subset is rejected on the
spot.

`assign_next` then gives every statement its control successor in a single
pass. Blocks and try statements do not get extra statements spliced into
their bodies; instead each owns an exit point (`ScopeExit`, `HandlerExit`)
that its last statement flows into, and which pops the continuation frame the
construct registered on entry.
"""

from dataclasses import dataclass, field as dc_field
import logging
from typing import Any, ClassVar, List, Optional

from .errors import unimplemented
from .frontend import catch_clauses, field, kind_of, render, span_of

logger = logging.getLogger("jscesk.nodes")


# Kinds the subset rejects outright.
UNSUPPORTED_KINDS = frozenset([
    'ArrayPattern', 'ArrowFunctionExpression', 'AssignmentPattern',
    'AwaitExpression', 'BreakStatement', 'ClassBody', 'ClassDeclaration',
    'ClassExpression', 'ClassHeritage', 'ComprehensionBlock',
    'ComprehensionExpression', 'ComputedPropertyKey', 'ConditionalExpression',
    'ContinueStatement', 'DebuggerStatement', 'DoWhileStatement',
    'ExportAllDeclaration', 'ExportBatchSpecifier', 'ExportDeclaration',
    'ExportDefaultDeclaration', 'ExportNamedDeclaration', 'ExportSpecifier',
    'ForInStatement', 'ForOfStatement', 'ForStatement', 'Import',
    'ImportDeclaration', 'ImportDefaultSpecifier', 'ImportNamespaceSpecifier',
    'ImportSpecifier', 'LabeledStatement', 'MetaProperty', 'MethodDefinition',
    'ModuleDeclaration', 'NewExpression', 'ObjectPattern', 'RestElement',
    'SequenceExpression', 'SpreadElement', 'Super', 'SwitchCase',
    'SwitchStatement', 'TaggedTemplateExpression', 'TemplateElement',
    'TemplateLiteral', 'ThisExpression', 'UpdateExpression', 'WithStatement',
    'YieldExpression',
])


# ============================================================================
# Node variants
# ============================================================================

@dataclass(eq=False, repr=False)
class Node:
    """Base wrapper: sequence id plus the raw parser node"""
    astid: int
    raw: Any

    kind: ClassVar[str] = "Node"
    done: ClassVar[bool] = False
    # control successor; assigned by assign_next
    next: Optional["Node"] = dc_field(default=None, init=False)

    @property
    def span(self) -> Optional[tuple]:
        return span_of(self.raw)

    def __repr__(self) -> str:
        return f"{self.kind}#{self.astid}"


class Statement(Node):
    pass


class Expression(Node):
    pass


# ---- statements ------------------------------------------------------------

@dataclass(eq=False, repr=False)
class ScopeExit(Statement):
    """End of a block: pops the LeaveScope frame pushed on entry"""
    kind: ClassVar[str] = "LeaveScope"


@dataclass(eq=False, repr=False)
class HandlerExit(Statement):
    """End of a protected block: pops the Handler frame"""
    kind: ClassVar[str] = "LeaveHandler"


@dataclass(eq=False, repr=False)
class Program(Statement):
    body: List[Statement]
    kind: ClassVar[str] = "Program"


@dataclass(eq=False, repr=False)
class BlockStatement(Statement):
    body: List[Statement]
    exit: Optional[ScopeExit]
    kind: ClassVar[str] = "BlockStatement"


@dataclass(eq=False, repr=False)
class EmptyStatement(Statement):
    kind: ClassVar[str] = "EmptyStatement"


@dataclass(eq=False, repr=False)
class ExpressionStatement(Statement):
    expression: Expression
    kind: ClassVar[str] = "ExpressionStatement"


@dataclass(eq=False, repr=False)
class VariableDeclarator(Node):
    id: "Identifier"
    init: Optional[Expression]
    kind: ClassVar[str] = "VariableDeclarator"

    @property
    def name(self) -> str:
        return self.id.name


@dataclass(eq=False, repr=False)
class VariableDeclaration(Statement):
    declarations: List[VariableDeclarator]
    declaration_kind: str
    kind: ClassVar[str] = "VariableDeclaration"


@dataclass(eq=False, repr=False)
class FunctionDeclaration(Statement):
    id: "Identifier"
    params: List["Identifier"]
    body: BlockStatement
    kind: ClassVar[str] = "FunctionDeclaration"

    @property
    def name(self) -> str:
        return self.id.name


@dataclass(eq=False, repr=False)
class ReturnStatement(Statement):
    argument: Optional[Expression]
    kind: ClassVar[str] = "ReturnStatement"


@dataclass(eq=False, repr=False)
class IfStatement(Statement):
    test: Expression
    consequent: Statement
    alternate: Optional[Statement]
    kind: ClassVar[str] = "IfStatement"


@dataclass(eq=False, repr=False)
class WhileStatement(Statement):
    test: Expression
    body: Statement
    kind: ClassVar[str] = "WhileStatement"


@dataclass(eq=False, repr=False)
class ThrowStatement(Statement):
    argument: Expression
    kind: ClassVar[str] = "ThrowStatement"


@dataclass(eq=False, repr=False)
class CatchClause(Node):
    param: "Identifier"
    body: BlockStatement
    kind: ClassVar[str] = "CatchClause"


@dataclass(eq=False, repr=False)
class TryStatement(Statement):
    block: BlockStatement
    handlers: List[CatchClause]
    handler_exit: HandlerExit
    kind: ClassVar[str] = "TryStatement"

    @property
    def handler(self) -> CatchClause:
        return self.handlers[0]


@dataclass(eq=False, repr=False)
class Done(Statement):
    """Terminal sentinel; `uncaught` holds a value thrown past Halt"""
    uncaught: Any = None
    kind: ClassVar[str] = "Done"
    done: ClassVar[bool] = True


# ---- expressions -----------------------------------------------------------

@dataclass(eq=False, repr=False)
class Identifier(Expression):
    name: str
    kind: ClassVar[str] = "Identifier"


@dataclass(eq=False, repr=False)
class Literal(Expression):
    value: Any
    kind: ClassVar[str] = "Literal"


@dataclass(eq=False, repr=False)
class BinaryExpression(Expression):
    operator: str
    left: Expression
    right: Expression
    kind: ClassVar[str] = "BinaryExpression"


@dataclass(eq=False, repr=False)
class UnaryExpression(Expression):
    operator: str
    argument: Expression
    kind: ClassVar[str] = "UnaryExpression"


@dataclass(eq=False, repr=False)
class LogicalExpression(Expression):
    operator: str
    left: Expression
    right: Expression
    kind: ClassVar[str] = "LogicalExpression"


@dataclass(eq=False, repr=False)
class AssignmentExpression(Expression):
    operator: str
    left: Expression
    right: Expression
    kind: ClassVar[str] = "AssignmentExpression"


@dataclass(eq=False, repr=False)
class CallExpression(Expression):
    callee: Expression
    arguments: List[Expression]
    kind: ClassVar[str] = "CallExpression"


@dataclass(eq=False, repr=False)
class MemberExpression(Expression):
    object: Expression
    property: Expression
    # as written in the source; evaluation always treats it as computed
    computed: bool
    kind: ClassVar[str] = "MemberExpression"


@dataclass(eq=False, repr=False)
class Property(Node):
    key: str
    value: Expression
    kind: ClassVar[str] = "Property"


@dataclass(eq=False, repr=False)
class ObjectExpression(Expression):
    properties: List[Property]
    kind: ClassVar[str] = "ObjectExpression"


@dataclass(eq=False, repr=False)
class ArrayExpression(Expression):
    elements: List[Optional[Expression]]
    kind: ClassVar[str] = "ArrayExpression"


@dataclass(eq=False, repr=False)
class FunctionExpression(Expression):
    id: Optional[Identifier]
    params: List[Identifier]
    body: BlockStatement
    kind: ClassVar[str] = "FunctionExpression"

    @property
    def name(self) -> Optional[str]:
        return self.id.name if self.id is not None else None


# ============================================================================
# Wrapping
# ============================================================================

class NodeBuilder:
    """Builds the node layer for one parsed tree"""

    def __init__(self, source: Optional[str] = None):
        self.source = source
        self._astnum = 0

    def _id(self) -> int:
        n = self._astnum
        self._astnum += 1
        return n

    def wrap_all(self, raws) -> List[Any]:
        return [self.wrap(r) for r in (raws or [])]

    def wrap(self, raw: Any) -> Any:
        """Wrap one raw node (None passes through)"""
        if raw is None:
            return None
        kind = kind_of(raw)

        if kind == 'Program':
            return Program(self._id(), raw, self.wrap_all(field(raw, 'body')))

        elif kind == 'BlockStatement':
            astid = self._id()
            body = self.wrap_all(field(raw, 'body'))
            exit = ScopeExit(self._id(), None) if body else None
            return BlockStatement(astid, raw, body, exit)

        elif kind == 'EmptyStatement':
            return EmptyStatement(self._id(), raw)

        elif kind == 'ExpressionStatement':
            astid = self._id()
            return ExpressionStatement(astid, raw, self.wrap(field(raw, 'expression')))

        elif kind == 'VariableDeclaration':
            astid = self._id()
            return VariableDeclaration(astid, raw, self.wrap_all(field(raw, 'declarations')),
                                       field(raw, 'kind', 'var'))

        elif kind == 'VariableDeclarator':
            astid = self._id()
            target = self.wrap(field(raw, 'id'))
            if not isinstance(target, Identifier):
                unimplemented(f"declarator target {target.kind}")
            return VariableDeclarator(astid, raw, target, self.wrap(field(raw, 'init')))

        elif kind == 'FunctionDeclaration':
            self._check_plain_function(raw)
            astid = self._id()
            return FunctionDeclaration(astid, raw, self.wrap(field(raw, 'id')),
                                       self._params(raw), self.wrap(field(raw, 'body')))

        elif kind == 'FunctionExpression':
            self._check_plain_function(raw)
            astid = self._id()
            node = FunctionExpression(astid, raw, self.wrap(field(raw, 'id')),
                                      self._params(raw), self.wrap(field(raw, 'body')))
            # nothing links expressions, so the body is linked here
            assign_next(node.body, None)
            return node

        elif kind == 'ReturnStatement':
            astid = self._id()
            return ReturnStatement(astid, raw, self.wrap(field(raw, 'argument')))

        elif kind == 'IfStatement':
            astid = self._id()
            return IfStatement(astid, raw, self.wrap(field(raw, 'test')),
                               self.wrap(field(raw, 'consequent')),
                               self.wrap(field(raw, 'alternate')))

        elif kind == 'WhileStatement':
            astid = self._id()
            return WhileStatement(astid, raw, self.wrap(field(raw, 'test')),
                                  self.wrap(field(raw, 'body')))

        elif kind == 'ThrowStatement':
            astid = self._id()
            return ThrowStatement(astid, raw, self.wrap(field(raw, 'argument')))

        elif kind == 'TryStatement':
            return self._wrap_try(raw)

        elif kind == 'CatchClause':
            astid = self._id()
            param = self.wrap(field(raw, 'param'))
            if not isinstance(param, Identifier):
                unimplemented("catch clause without a simple parameter")
            return CatchClause(astid, raw, param, self.wrap(field(raw, 'body')))

        elif kind == 'Identifier':
            return Identifier(self._id(), raw, field(raw, 'name'))

        elif kind == 'Literal':
            if field(raw, 'regex') is not None:
                unimplemented("regular expression literal")
            return Literal(self._id(), raw, field(raw, 'value'))

        elif kind == 'BinaryExpression':
            astid = self._id()
            return BinaryExpression(astid, raw, field(raw, 'operator'),
                                    self.wrap(field(raw, 'left')),
                                    self.wrap(field(raw, 'right')))

        elif kind == 'UnaryExpression':
            astid = self._id()
            return UnaryExpression(astid, raw, field(raw, 'operator'),
                                   self.wrap(field(raw, 'argument')))

        elif kind == 'LogicalExpression':
            astid = self._id()
            return LogicalExpression(astid, raw, field(raw, 'operator'),
                                     self.wrap(field(raw, 'left')),
                                     self.wrap(field(raw, 'right')))

        elif kind == 'AssignmentExpression':
            astid = self._id()
            left = self.wrap(field(raw, 'left'))
            if isinstance(left, MemberExpression) and left.computed:
                unimplemented("computed member write")
            return AssignmentExpression(astid, raw, field(raw, 'operator'), left,
                                        self.wrap(field(raw, 'right')))

        elif kind == 'CallExpression':
            astid = self._id()
            return CallExpression(astid, raw, self.wrap(field(raw, 'callee')),
                                  self.wrap_all(field(raw, 'arguments')))

        elif kind == 'MemberExpression':
            return self._wrap_member(raw)

        elif kind == 'ObjectExpression':
            astid = self._id()
            return ObjectExpression(astid, raw, self.wrap_all(field(raw, 'properties')))

        elif kind == 'Property':
            return self._wrap_property(raw)

        elif kind == 'ArrayExpression':
            astid = self._id()
            return ArrayExpression(astid, raw, self.wrap_all(field(raw, 'elements')))

        elif kind in UNSUPPORTED_KINDS:
            return unimplemented(kind)

        return unimplemented(str(kind))

    def _check_plain_function(self, raw):
        if field(raw, 'generator'):
            unimplemented("generator function")
        if field(raw, 'async'):
            unimplemented("async function")

    def _params(self, raw) -> List[Identifier]:
        params = self.wrap_all(field(raw, 'params'))
        for p in params:
            if not isinstance(p, Identifier):
                unimplemented(f"function parameter {p.kind}")
        return params

    def _wrap_try(self, raw) -> TryStatement:
        astid = self._id()
        if field(raw, 'finalizer') is not None:
            unimplemented("finally clause")
        block = self.wrap(field(raw, 'block'))
        handlers = self.wrap_all(catch_clauses(raw))
        if not handlers:
            unimplemented("try statement without catch")
        return TryStatement(astid, raw, block, handlers, HandlerExit(self._id(), None))

    def _wrap_member(self, raw) -> MemberExpression:
        # foo.bar becomes foo['bar']
        astid = self._id()
        obj = self.wrap(field(raw, 'object'))
        computed = bool(field(raw, 'computed', False))
        prop_raw = field(raw, 'property')
        if not computed and kind_of(prop_raw) == 'Identifier':
            name = field(prop_raw, 'name')
            prop = Literal(self._id(), prop_raw, name)
        else:
            prop = self.wrap(prop_raw)
        return MemberExpression(astid, raw, obj, prop, computed)

    def _wrap_property(self, raw) -> Property:
        astid = self._id()
        if field(raw, 'computed') or field(raw, 'method') or field(raw, 'kind', 'init') != 'init':
            unimplemented("Property")
        key = field(raw, 'key')
        if kind_of(key) == 'Identifier':
            name = field(key, 'name')
        elif kind_of(key) == 'Literal':
            name = str(field(key, 'value'))
        else:
            return unimplemented(f"property key {kind_of(key)}")
        return Property(astid, raw, name, self.wrap(field(raw, 'value')))


def wrap(raw: Any, source: Optional[str] = None) -> Any:
    """Wrap a parsed tree with a fresh builder"""
    return NodeBuilder(source).wrap(raw)


# ============================================================================
# Control linking
# ============================================================================

def assign_next(stmt: Any, succ: Optional[Node]):
    """Link `stmt` (and everything nested in it) to continue at `succ`"""
    if isinstance(stmt, (Program, BlockStatement)):
        if stmt.body:
            nxt = succ
            if isinstance(stmt, BlockStatement):
                stmt.exit.next = succ
                nxt = stmt.exit
            for s in reversed(stmt.body):
                assign_next(s, nxt)
                nxt = s
            stmt.next = stmt.body[0]
        else:
            stmt.next = succ

    elif isinstance(stmt, IfStatement):
        assign_next(stmt.consequent, succ)
        if stmt.alternate is not None:
            assign_next(stmt.alternate, succ)
        stmt.next = succ

    elif isinstance(stmt, WhileStatement):
        assign_next(stmt.body, stmt)
        stmt.next = succ

    elif isinstance(stmt, FunctionDeclaration):
        assign_next(stmt.body, None)
        stmt.next = succ

    elif isinstance(stmt, (ReturnStatement, ThrowStatement)):
        stmt.next = None

    elif isinstance(stmt, TryStatement):
        assign_next(stmt.handler.body, succ)
        assign_next(stmt.block, stmt.handler_exit)
        stmt.handler_exit.next = succ
        stmt.next = stmt.block.body[0] if stmt.block.body else succ

    elif isinstance(stmt, Node) and stmt.kind in ('BreakStatement', 'ContinueStatement'):
        unimplemented("we don't handle break/continue yet")

    else:
        stmt.next = succ


def to_anf(program: Program) -> Program:
    # A-normalization is not implemented; call arguments must already be simple
    return program


# ============================================================================
# Diagnostics
# ============================================================================

def dump_statements(node: Any, source: Optional[str] = None, indent: int = 0):
    """Log the linked statement tree at DEBUG level"""
    if node is None or not logger.isEnabledFor(logging.DEBUG):
        return
    pad = " " * indent
    nxt = repr(node.next) if node.next is not None else "-"
    if isinstance(node, (ExpressionStatement, VariableDeclaration, ReturnStatement, ThrowStatement)):
        logger.debug("%s%s: %s %s -> %s", pad, node.astid, node.kind, render(node, source), nxt)
    else:
        logger.debug("%s%s: %s -> %s", pad, node.astid, node.kind, nxt)

    if isinstance(node, (Program, BlockStatement)):
        for s in node.body:
            dump_statements(s, source, indent + 2)
    elif isinstance(node, IfStatement):
        logger.debug("%s  then:", pad)
        dump_statements(node.consequent, source, indent + 2)
        if node.alternate is not None:
            logger.debug("%s  else:", pad)
            dump_statements(node.alternate, source, indent + 2)
    elif isinstance(node, (WhileStatement, FunctionDeclaration)):
        dump_statements(node.body, source, indent + 2)
    elif isinstance(node, TryStatement):
        dump_statements(node.block, source, indent + 2)
        logger.debug("%s  catch:", pad)
        dump_statements(node.handler.body, source, indent + 2)


__all__ = [
    'Node', 'Statement', 'Expression', 'ScopeExit', 'HandlerExit',
    'Program', 'BlockStatement', 'EmptyStatement', 'ExpressionStatement',
    'VariableDeclaration', 'VariableDeclarator', 'FunctionDeclaration',
    'ReturnStatement', 'IfStatement', 'WhileStatement', 'ThrowStatement',
    'TryStatement', 'CatchClause', 'Done',
    'Identifier', 'Literal', 'BinaryExpression', 'UnaryExpression',
    'LogicalExpression', 'AssignmentExpression', 'CallExpression',
    'MemberExpression', 'Property', 'ObjectExpression', 'ArrayExpression',
    'FunctionExpression',
    'UNSUPPORTED_KINDS', 'NodeBuilder', 'wrap', 'assign_next', 'to_anf',
    'dump_statements',
]
