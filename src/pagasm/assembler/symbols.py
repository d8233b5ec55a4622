"""
Symbol Table
============

Maps label names to stable reference ids, and reference ids to resolved
addresses.

A reference id is allocated the first time a name is seen, whether as a
label definition or as an operand, and is shared by every later use of
that name. Operands therefore carry only the id, and the second pass looks
the address up once all labels have been bound.

Ids are dense and contiguous: id ``n`` is the ``n``-th distinct name seen,
and always indexes a slot in the address list. An unbound slot holds
``None``, so every 16-bit value, 0xFFFF included, is a valid address.
"""

from typing import Iterator, Optional

from pagasm.errors import DuplicateSymbolError, SourceLocation


class SymbolTable:
    """
    Label table for one assembly run.

    Populated during pass 1, read-only during pass 2.

    Usage:
        symbols = SymbolTable()
        ref = symbols.add_reference("loop")    # forward use
        symbols.add_label("loop", 0o100)       # definition
        symbols.resolve(ref)                   # -> 0o100
    """

    def __init__(self):
        self._ids: dict[str, int] = {}
        self._names: list[str] = []
        self._addresses: list[Optional[int]] = []

    def add_reference(self, name: str) -> int:
        """
        Return the reference id for a name, allocating one if needed.

        Args:
            name: Label name (case-sensitive)

        Returns:
            The id shared by all uses of this name
        """
        ref_id = self._ids.get(name)
        if ref_id is None:
            ref_id = len(self._names)
            self._ids[name] = ref_id
            self._names.append(name)
            self._addresses.append(None)
        return ref_id

    def add_label(self, name: str, address: int,
                  location: Optional[SourceLocation] = None) -> int:
        """
        Bind a label to an address.

        Args:
            name: Label name
            address: Location counter value at the definition
            location: Source position, used for the error on rebinding

        Returns:
            The label's reference id

        Raises:
            DuplicateSymbolError: If the label is already bound. The
                existing binding is left unchanged.
        """
        ref_id = self.add_reference(name)
        if self._addresses[ref_id] is not None:
            raise DuplicateSymbolError(name, location=location)
        self._addresses[ref_id] = address
        return ref_id

    def resolve(self, ref_id: int) -> Optional[int]:
        """Return the address bound to a reference id, or None if unbound."""
        if 0 <= ref_id < len(self._addresses):
            return self._addresses[ref_id]
        return None

    def name_of(self, ref_id: int) -> str:
        """Return the label name for a reference id."""
        return self._names[ref_id]

    def items(self) -> Iterator[tuple[str, Optional[int]]]:
        """Iterate (name, address-or-None) pairs in id order."""
        return zip(self._names, self._addresses)

    def resolved(self) -> dict[str, int]:
        """Return all bound labels, in order of first appearance."""
        return {name: addr for name, addr in self.items() if addr is not None}

    def unresolved(self) -> list[str]:
        """Return names that were referenced but never defined."""
        return [name for name, addr in self.items() if addr is None]

    def __contains__(self, name: str) -> bool:
        return name in self._ids

    def __len__(self) -> int:
        return len(self._names)
