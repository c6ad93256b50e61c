"""
Test suite for the address space and the persistent store
Verifies extension leaves older versions untouched
"""

import pytest

from jscesk.address import Address, Allocator, NULL_ADDRESS
from jscesk.errors import E_BAD_WRITE, SemanticError
from jscesk.store import Store
from jscesk.values import Null, Number, String, Undefined


class TestAllocator:
    """Test address allocation"""

    def test_first_address_is_one(self, allocator):
        assert allocator.fresh() == Address(1)

    def test_addresses_are_distinct(self, allocator):
        seen = {allocator.fresh() for _ in range(50)}
        assert len(seen) == 50
        assert NULL_ADDRESS not in seen

    def test_reset(self, allocator):
        allocator.fresh()
        allocator.fresh()
        assert allocator.allocated == 2
        allocator.reset()
        assert allocator.fresh() == Address(1)

    def test_sessions_are_independent(self):
        a, b = Allocator(), Allocator()
        a.fresh()
        a.fresh()
        assert b.fresh() == Address(1)


class TestStoreRead:
    """Test Store.get"""

    def test_null_address_reads_null(self, store):
        assert isinstance(store.get(NULL_ADDRESS), Null)

    def test_unbound_reads_undefined(self, store):
        assert isinstance(store.get(Address(42)), Undefined)


class TestStoreExtend:
    """Test the persistent extend operation"""

    def test_extend_binds(self, store, allocator):
        addr = allocator.fresh()
        store_ = Store.extend(store, addr, Number(7))
        assert store_.get(addr) == Number(7)

    def test_extend_leaves_old_version(self, store, allocator):
        a, b = allocator.fresh(), allocator.fresh()
        store._extend(a, Number(1))
        store_ = Store.extend(store, b, Number(2))
        assert store_.get(a) == store.get(a) == Number(1)
        assert isinstance(store.get(b), Undefined)

    def test_extend_overwrite_is_new_version(self, store, allocator):
        a = allocator.fresh()
        v1 = Store.extend(store, a, String("old"))
        v2 = Store.extend(v1, a, String("new"))
        assert v1.get(a) == String("old")
        assert v2.get(a) == String("new")

    def test_extend_every_other_address_unchanged(self, store, allocator):
        addrs = [allocator.fresh() for _ in range(10)]
        for n, addr in enumerate(addrs):
            store._extend(addr, Number(n))
        store_ = Store.extend(store, addrs[3], Number(99))
        for addr in addrs:
            if addr != addrs[3]:
                assert store_.get(addr) == store.get(addr)

    def test_extend_null_address_fails(self, store):
        with pytest.raises(SemanticError) as exc:
            Store.extend(store, NULL_ADDRESS, Number(1))
        assert exc.value.code == E_BAD_WRITE

    def test_clone_is_independent(self, store, allocator):
        a = allocator.fresh()
        copy = Store.clone(store)
        copy._extend(a, Number(3))
        assert a in copy
        assert a not in store
        assert len(store) == 0


class TestStoreSet:
    """Test in-place overwrite"""

    def test_set_existing(self, store, allocator):
        a = allocator.fresh()
        store._extend(a, Number(1))
        store.set(a, Number(2))
        assert store.get(a) == Number(2)

    def test_set_unbound_is_bad_write(self, store):
        with pytest.raises(SemanticError) as exc:
            store.set(Address(5), Number(1))
        assert exc.value.code == E_BAD_WRITE
        assert "not in store" in str(exc.value)

    def test_set_null_address(self, store):
        with pytest.raises(SemanticError) as exc:
            store.set(NULL_ADDRESS, Number(1))
        assert exc.value.code == E_BAD_WRITE
        assert "NullPointer" in str(exc.value)


class TestStoreInspection:
    """Test address listing and rendering"""

    def test_addresses_sorted(self, store):
        store._extend(Address(3), Number(3))
        store._extend(Address(1), Number(1))
        assert list(store.addresses()) == [Address(1), Address(3)]

    def test_repr_lists_bindings(self, store):
        store._extend(Address(2), String("b"))
        assert "2 -> String('b')" in repr(store)
