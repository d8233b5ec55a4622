# =============================================================================
# test_symbols.py - Symbol Table Tests
# =============================================================================

import pytest

from pagasm.assembler.symbols import SymbolTable
from pagasm.errors import DuplicateSymbolError, SourceLocation


class TestReferences:
    """Test reference id allocation."""

    def test_ids_are_dense(self):
        symbols = SymbolTable()
        assert symbols.add_reference("a") == 0
        assert symbols.add_reference("b") == 1
        assert symbols.add_reference("c") == 2
        assert len(symbols) == 3

    def test_add_reference_idempotent(self):
        symbols = SymbolTable()
        ref = symbols.add_reference("loop")
        assert symbols.add_reference("loop") == ref
        assert len(symbols) == 1

    def test_names_are_case_sensitive(self):
        symbols = SymbolTable()
        assert symbols.add_reference("x") != symbols.add_reference("X")

    def test_new_reference_unresolved(self):
        symbols = SymbolTable()
        ref = symbols.add_reference("later")
        assert symbols.resolve(ref) is None
        assert symbols.unresolved() == ["later"]

    def test_name_of(self):
        symbols = SymbolTable()
        ref = symbols.add_reference("target")
        assert symbols.name_of(ref) == "target"

    def test_resolve_unknown_id(self):
        assert SymbolTable().resolve(5) is None


class TestLabels:
    """Test label binding."""

    def test_label_after_forward_reference(self):
        """A forward reference shares the id of the later definition."""
        symbols = SymbolTable()
        ref = symbols.add_reference("target")
        assert symbols.add_label("target", 0o105) == ref
        assert symbols.resolve(ref) == 0o105

    def test_duplicate_label_rejected(self):
        symbols = SymbolTable()
        symbols.add_label("foo", 1)
        location = SourceLocation("t.asm", 9)
        with pytest.raises(DuplicateSymbolError) as exc_info:
            symbols.add_label("foo", 2, location=location)
        assert exc_info.value.symbol == "foo"
        assert exc_info.value.location == location

    def test_duplicate_keeps_first_binding(self):
        symbols = SymbolTable()
        ref = symbols.add_label("foo", 1)
        with pytest.raises(DuplicateSymbolError):
            symbols.add_label("foo", 2)
        assert symbols.resolve(ref) == 1

    def test_top_address_is_valid(self):
        """0xFFFF is an ordinary address, not an unresolved marker."""
        symbols = SymbolTable()
        ref = symbols.add_label("last", 0xFFFF)
        assert symbols.resolve(ref) == 0xFFFF
        with pytest.raises(DuplicateSymbolError):
            symbols.add_label("last", 0)

    def test_resolved_in_first_appearance_order(self):
        symbols = SymbolTable()
        symbols.add_reference("b")
        symbols.add_label("a", 3)
        symbols.add_label("b", 7)
        symbols.add_reference("c")
        assert list(symbols.resolved().items()) == [("b", 7), ("a", 3)]
        assert list(symbols.items()) == [("b", 7), ("a", 3), ("c", None)]
