"""
pagasm - Assembler for a Paged Accumulator Machine
==================================================

This package provides a two-pass assembler for a small, paged,
accumulator-based computer with 16-bit words and 64-word pages. Source
files are translated into a listing of octal instruction words.

Main Components
---------------
- **assembler**: Lexer, parser, symbol table, code generator and the
  two-pass driver
- **cli**: The ``pagasm`` command

Quick Start
-----------
Assemble a program:
    >>> from pagasm import Assembler
    >>> asm = Assembler()
    >>> if asm.assemble_file("fib.asm"):
    ...     print(asm.get_listing())
    ... else:
    ...     print(asm.get_error_report())

Or use the command-line tool:
    $ pagasm fib.asm
    $ pagasm -o fib.lst -s fib.sym fib.asm
    $ pagasm < fib.asm

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from pagasm.assembler import Assembler, SymbolTable
from pagasm.errors import (
    PagasmError,
    AssemblerError,
    SourceLocation,
    SourceEncodingError,
    InvalidInstructionError,
    InvalidAddressingError,
    InvalidLabelError,
    DuplicateSymbolError,
    UnresolvedReferenceError,
    MissingRightBracketError,
    ArgumentTooLargeError,
    BranchTargetOutOfRangeError,
    LocationUnreachableError,
)

__all__ = [
    # Version info
    "__version__",
    # Assembler
    "Assembler",
    "SymbolTable",
    # Exception hierarchy
    "PagasmError",
    "AssemblerError",
    "SourceLocation",
    "SourceEncodingError",
    "InvalidInstructionError",
    "InvalidAddressingError",
    "InvalidLabelError",
    "DuplicateSymbolError",
    "UnresolvedReferenceError",
    "MissingRightBracketError",
    "ArgumentTooLargeError",
    "BranchTargetOutOfRangeError",
    "LocationUnreachableError",
]
