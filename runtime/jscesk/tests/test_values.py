"""
Test suite for the value model
"""

import pytest

from jscesk.address import NULL_ADDRESS
from jscesk.errors import E_UNSUPPORTED, UnsupportedError
from jscesk.values import (
    Boolean, BuiltinFunction, FALSE, Null, Number, Object, String, TRUE,
    Undefined, to_value,
)


class TestPrimitives:
    """Test primitive construction and payloads"""

    def test_number_is_float(self):
        n = Number(3)
        assert isinstance(n.value, float)
        assert n == Number(3.0)

    def test_boolean_singletons(self):
        assert TRUE == Boolean(True)
        assert FALSE.payload is False

    def test_null_payload(self):
        assert Null().payload is None

    def test_undefined_payload_is_itself(self):
        u = Undefined()
        assert u.payload is u


class TestToValue:
    """Test lifting builtin results"""

    @pytest.mark.parametrize("native,expected", [
        (None, Undefined()),
        (True, TRUE),
        (4, Number(4)),
        (2.5, Number(2.5)),
        ("hi", String("hi")),
    ])
    def test_lift(self, native, expected):
        assert to_value(native) == expected

    def test_value_passes_through(self):
        s = String("x")
        assert to_value(s) is s

    def test_unknown_host_value(self):
        with pytest.raises(UnsupportedError) as exc:
            to_value(object())
        assert exc.value.code == E_UNSUPPORTED


class TestObject:
    """Test objects and prototype frames"""

    def test_create_binds_proto(self, store, allocator):
        obj = Object.create(NULL_ADDRESS, store, allocator)
        assert obj.env.get_offset("__proto__") == NULL_ADDRESS
        assert obj.env.parent is None

    def test_prototype_property_visible(self, store, allocator):
        proto = Object.create(NULL_ADDRESS, store, allocator)
        proto_addr = allocator.fresh()
        store._extend(proto_addr, proto)
        method_addr = allocator.fresh()
        store._extend(method_addr, Number(1))
        proto.set(String("m"), method_addr)

        obj = Object.create(proto_addr, store, allocator)
        assert obj.get(String("m")) == method_addr
        assert obj.env.parent is proto.env

    def test_get_declares_missing_property(self, store, allocator):
        obj = Object.create(NULL_ADDRESS, store, allocator)
        addr = obj.get(String("missing"))
        assert obj.get(String("missing")) == addr
        assert isinstance(store.get(addr), Undefined)

    def test_set_non_address_ignored(self, store, allocator):
        obj = Object.create(NULL_ADDRESS, store, allocator)
        obj.set(String("k"), Number(1))
        assert "k" not in obj.env


class TestBuiltinFunction:
    """Test builtin wrappers"""

    def test_repr_uses_name(self):
        fn = BuiltinFunction(1, lambda x: x, "ident")
        assert repr(fn) == "BuiltinFunction(1, ident)"
