"""
Assembly Language Parser
========================

This module turns one source line into a structured Opcode. Lines have
the form:

```asm
[label:] MNEMONIC [operand]
```

Comments (from ';' to end of line) are removed by the driver before a
line reaches the parser.

Addressing Mode Detection
-------------------------
The parser determines addressing modes by examining the operand syntax:

| Syntax  | Non-jump     | Jump                  | Example     |
|---------|--------------|-----------------------|-------------|
| (none)  | Immediate 0  | Immediate 0           | HLT         |
| #value  | Immediate    | Immediate             | LDA #1      |
| [value] | Indirect     | Indirect current page | JMP [ptr]   |
| A+value | (error)      | Accumulator           | JMP A+4     |
| value   | Current page | Direct                | STA x       |

ORG and WRD always use Assembler addressing, whatever the operand looks
like.

Note: Current page vs zero page is determined during code generation
when the value is known. The parser marks these as CURRENT_PAGE or
INDIRECT_CURRENT_PAGE.
"""

from dataclasses import dataclass
from typing import Optional

from pagasm.errors import (
    InvalidAddressingError,
    InvalidInstructionError,
    InvalidLabelError,
    MissingRightBracketError,
    SourceLocation,
)
from pagasm.assembler.lexer import Literal, Operand, is_identifier, parse_operand
from pagasm.assembler.opcodes import Addressing, Instruction, is_jump, is_pseudo, lookup_instruction
from pagasm.assembler.symbols import SymbolTable


# =============================================================================
# Statement Data Classes
# =============================================================================

@dataclass(frozen=True)
class Opcode:
    """
    A parsed, not yet validated operation.

    Attributes:
        instruction: The instruction or pseudo-operation
        operand: Literal value or symbol reference
        addressing: Addressing mode (possibly provisional)
    """
    instruction: Instruction
    operand: Operand
    addressing: Addressing


@dataclass(frozen=True)
class Line:
    """
    A retained source line, ready for encoding.

    Attributes:
        number: Source line number (1-indexed)
        address: Location counter value when the line was assembled
        opcode: The parsed operation
    """
    number: int
    address: int
    opcode: Opcode


# =============================================================================
# Parser Implementation
# =============================================================================

class Parser:
    """
    Parses source lines into Opcodes.

    Label definitions and operand identifiers are recorded in the shared
    symbol table as a side effect of parsing.

    Usage:
        symbols = SymbolTable()
        parser = Parser(symbols, "prog.asm")
        opcode = parser.parse_line("loop: LDA #1", address=0o100, line_number=3)
    """

    def __init__(self, symbols: SymbolTable, filename: str = "<input>"):
        """
        Initialize the parser.

        Args:
            symbols: Symbol table to populate
            filename: Source filename for error reporting
        """
        self._symbols = symbols
        self._filename = filename

    def parse_line(self, text: str, address: int, line_number: int = 0) -> Opcode:
        """
        Parse one comment-stripped, non-empty source line.

        Args:
            text: Line text without comment
            address: Current location counter, bound to any label on the line
            line_number: Source line number for error reporting

        Returns:
            The parsed Opcode

        Raises:
            AssemblerError: On any syntax or symbol error
        """
        location = SourceLocation(self._filename, line_number)
        tokens = text.split()

        # Label definition
        if tokens and tokens[0].endswith(":"):
            self._define_label(tokens.pop(0)[:-1], address, location)

        if not tokens:
            raise InvalidInstructionError("", location=location)

        mnemonic = tokens[0]
        instruction = lookup_instruction(mnemonic)
        if instruction is None:
            raise InvalidInstructionError(mnemonic, location=location)

        if len(tokens) < 2:
            addressing = Addressing.ASSEMBLER if is_pseudo(instruction) else Addressing.IMMEDIATE
            return Opcode(instruction, Literal(0), addressing)

        return self._parse_operand(instruction, tokens[1], location)

    def _define_label(self, name: str, address: int, location: SourceLocation) -> None:
        """Bind a label to the current address."""
        if not is_identifier(name):
            raise InvalidLabelError(name, location=location)
        self._symbols.add_label(name, address, location=location)

    def _parse_operand(self, instruction: Instruction, token: str,
                       location: SourceLocation) -> Opcode:
        """Select the addressing mode from operand syntax and parse the value."""
        jump = is_jump(instruction)

        if is_pseudo(instruction):
            # Full-word value
            addressing = Addressing.ASSEMBLER
            text = token
        elif token.startswith("["):
            if not token.endswith("]"):
                raise MissingRightBracketError(token, location=location)
            addressing = Addressing.INDIRECT_CURRENT_PAGE if jump else Addressing.INDIRECT
            text = token[1:-1]
        elif token.startswith("#"):
            addressing = Addressing.IMMEDIATE
            text = token[1:]
        elif token.startswith(("A+", "a+")):
            if not jump:
                raise InvalidAddressingError(instruction.name, location=location)
            addressing = Addressing.ACCUMULATOR
            text = token[2:]
        else:
            # Direct/current page, possibly narrowed to zero page once resolved
            addressing = Addressing.DIRECT if jump else Addressing.CURRENT_PAGE
            text = token

        operand = parse_operand(text, self._symbols, location)
        return Opcode(instruction, operand, addressing)


def strip_comment(text: str) -> str:
    """Remove a ';' comment and surrounding whitespace from a source line."""
    return text.split(";", 1)[0].strip()


def parse_line(text: str, address: int, symbols: SymbolTable,
               line_number: int = 0, filename: str = "<input>") -> Optional[Opcode]:
    """
    Convenience function to parse a single raw source line.

    Returns:
        The Opcode, or None if the line is blank or only a comment
    """
    text = strip_comment(text)
    if not text:
        return None
    return Parser(symbols, filename).parse_line(text, address, line_number)
