"""
Test suite for continuation frames and control-event dispatch
"""

import pytest

from jscesk.errors import E_UNREACHABLE, SemanticError
from jscesk.frontend import parse
from jscesk.kont import (
    AssignKont, HaltKont, HandlerKont, LeaveScopeKont, apply, depth, handle,
    kont_stack, leave_handler, leave_scope,
)
from jscesk.nodes import Done, EmptyStatement, wrap
from jscesk.values import Number, String, Undefined


def stmt(n=0):
    return EmptyStatement(n, None)


def catch_clause(source="try { a; } catch (e) { b; }"):
    return wrap(parse(source)).body[0].handler


class TestApply:
    """Test delivering return values"""

    def test_binds_name_in_caller_frame(self, frame, store):
        resume = stmt()
        k = AssignKont("result", resume, frame, HaltKont())
        state = apply(k, Number(3), store)
        assert state.node is resume
        assert state.frame is frame
        assert state.store.get(frame.get_offset("result")) == Number(3)
        assert isinstance(state.kont, HaltKont)

    def test_does_not_mutate_input_store(self, frame, store):
        k = AssignKont("result", stmt(), frame, HaltKont())
        apply(k, Number(3), store)
        assert len(store) == 0

    def test_binds_address(self, frame, store, allocator):
        addr = allocator.fresh()
        k = AssignKont(None, stmt(), frame, HaltKont(), addr)
        state = apply(k, String("v"), store)
        assert state.store.get(addr) == String("v")

    def test_discards_without_target(self, frame, store):
        k = AssignKont(None, stmt(), frame, HaltKont())
        state = apply(k, Number(1), store)
        assert state.store is store

    def test_unwinds_scopes(self, frame, store):
        resume = stmt()
        k = AssignKont("r", resume, frame, HaltKont())
        k = LeaveScopeKont(stmt(1), frame.push(), k)
        k = LeaveScopeKont(stmt(2), frame.push(), k)
        state = apply(k, Number(1), store)
        assert state.node is resume

    def test_halt_is_unreachable(self, store):
        with pytest.raises(SemanticError) as exc:
            apply(HaltKont(), Number(1), store)
        assert exc.value.code == E_UNREACHABLE


class TestLeaveScope:
    """Test block exits"""

    def test_restores_frame(self, frame, store):
        resume = stmt()
        k = LeaveScopeKont(resume, frame, HaltKont())
        state = leave_scope(k, store)
        assert state.node is resume
        assert state.frame is frame
        assert isinstance(state.kont, HaltKont)

    def test_function_end_returns_undefined(self, frame, store):
        resume = stmt()
        k = AssignKont("r", resume, frame, HaltKont())
        k = LeaveScopeKont(None, frame.push(), k)
        state = leave_scope(k, store)
        assert state.node is resume
        assert isinstance(state.store.get(frame.get_offset("r")), Undefined)

    def test_halt_is_unreachable(self, store):
        with pytest.raises(SemanticError):
            leave_scope(HaltKont(), store)


class TestHandlers:
    """Test leave_handler and handle"""

    def test_leave_handler_resumes_after_try(self, frame, store):
        resume = stmt()
        k = HandlerKont(catch_clause(), frame, resume, HaltKont())
        state = leave_handler(k, store)
        assert state.node is resume
        assert isinstance(state.kont, HaltKont)

    def test_leave_handler_halt(self, store):
        with pytest.raises(SemanticError):
            leave_handler(HaltKont(), store)

    def test_handle_enters_catch(self, frame, store):
        clause = catch_clause()
        resume = stmt()
        k = HandlerKont(clause, frame, resume, HaltKont())
        k = LeaveScopeKont(stmt(1), frame.push(), k)
        state = handle(k, Number(7), store)
        assert state.node is clause.body.body[0]
        assert state.frame.parent is frame
        assert state.store.get(state.frame.get_offset("e")) == Number(7)
        assert isinstance(state.kont, LeaveScopeKont)
        assert state.kont.stmt is resume
        assert isinstance(state.kont.next, HaltKont)

    def test_handle_empty_catch_resumes(self, frame, store):
        clause = catch_clause("try { a; } catch (e) {}")
        resume = stmt()
        k = HandlerKont(clause, frame, resume, HaltKont())
        state = handle(k, Number(7), store)
        assert state.node is resume

    def test_uncaught_reaches_done(self, store, caplog):
        state = handle(HaltKont(), String("boom"), store)
        assert isinstance(state.node, Done)
        assert state.done
        assert state.node.uncaught == String("boom")
        assert "unhandled exception!" in caplog.text


class TestInspection:
    """Test continuation stack rendering"""

    def test_stack(self, frame):
        k = LeaveScopeKont(stmt(), frame, AssignKont("x", stmt(), frame, HaltKont()))
        assert kont_stack(k) == ["LeaveScopeKont", "AssignKont", "HaltKont"]
        assert depth(k) == 3
