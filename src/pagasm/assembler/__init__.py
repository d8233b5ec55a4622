"""
Paged Accumulator Machine Assembler
===================================

This package provides a two-pass assembler for a small, paged,
accumulator-based 16-bit machine. It turns mnemonic source into a
human-readable listing of encoded instruction words.

Main Components
---------------
- **Assembler**: Drives the two passes and collects results
- **Parser**: Parses one source line into an Opcode
- **SymbolTable**: Label names, reference ids and addresses
- **CodeGenerator**: Validates addressing and encodes instruction words
- **lexer**: Numeric literal and identifier recognition

Assembly Process
----------------
1. **Parsing (Parser)**:
   - Strip comments, bind labels, select addressing modes
   - Track the location counter, applying ORG

2. **Code Generation (CodeGenerator)**:
   - Resolve forward references
   - Narrow current-page operands on page zero to zero-page modes
   - Reject operands that are too large or on an unreachable page

Example Usage
-------------
>>> from pagasm.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_string("x: wrd 7\\n   lda x")
True
>>> print(asm.get_listing())
0000: 0007 ; WRD @0007
0001: 2500 ; LDA @00

Source Syntax
-------------
- ``[label:] MNEMONIC [operand] ; comment``
- Numbers: ``@17`` octal, ``$f`` hex, ``15`` decimal
- Operands: ``x``, ``#x``, ``[x]``, ``A+x`` (jumps only)
"""

from pagasm.assembler.assembler import Assembler, assemble, assemble_file
from pagasm.assembler.codegen import CodeGenerator, ListingEntry
from pagasm.assembler.lexer import (
    Literal,
    Operand,
    Reference,
    is_identifier,
    parse_number,
    parse_operand,
)
from pagasm.assembler.opcodes import (
    Addressing,
    Instruction,
    ADDRESSING_CODES,
    INSTRUCTION_CODES,
    JUMP_INSTRUCTIONS,
    PSEUDO_INSTRUCTIONS,
    MNEMONICS,
)
from pagasm.assembler.parser import Line, Opcode, Parser, parse_line
from pagasm.assembler.symbols import SymbolTable

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Lexer
    "Literal",
    "Reference",
    "Operand",
    "is_identifier",
    "parse_number",
    "parse_operand",
    # Parser
    "Parser",
    "Opcode",
    "Line",
    "parse_line",
    # Symbols
    "SymbolTable",
    # Code generator
    "CodeGenerator",
    "ListingEntry",
    # Opcodes
    "Addressing",
    "Instruction",
    "ADDRESSING_CODES",
    "INSTRUCTION_CODES",
    "JUMP_INSTRUCTIONS",
    "PSEUDO_INSTRUCTIONS",
    "MNEMONICS",
]
