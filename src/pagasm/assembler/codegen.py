"""
Code Generator
==============

This module encodes parsed Lines into instruction words. It is the
second pass of the assembler:

- Resolve symbol references using the now complete symbol table
- Validate operand ranges and page reachability
- Narrow provisional current-page modes to zero page where possible
- Compute the final 16-bit word and its listing line

Page Rules
----------
A page is 64 words; ``page(x) = x >> 6``. An instruction's 6-bit operand
field can only address its own page or, for modes with a zero-page
variant, page zero:

| Mode                  | Page 0 operand      | Other page operand    |
|-----------------------|---------------------|-----------------------|
| CURRENT_PAGE          | -> ZERO_PAGE        | must be current page  |
| INDIRECT              | must be current pg. | must be current page  |
| INDIRECT_CURRENT_PAGE | -> INDIRECT_ZERO_PG | must be current page  |
| DIRECT                | must be current pg. | must be current page  |

Immediate and accumulator operands must fit in 6 bits.

Listing Format
--------------
```
0100: 2401 ; LDA #01
0101: 3000 ; STA @00
```
"""

from dataclasses import dataclass
from pathlib import Path
import logging

from pagasm.errors import (
    ArgumentTooLargeError,
    AssemblerError,
    BranchTargetOutOfRangeError,
    ErrorCollector,
    LocationUnreachableError,
    SourceLocation,
    UnresolvedReferenceError,
)
from pagasm.assembler.lexer import Literal
from pagasm.assembler.opcodes import (
    ADDRESSING_CODES,
    INSTRUCTION_CODES,
    MAX_SHORT_OPERAND,
    OPERAND_MASK,
    Addressing,
    Instruction,
    page_of,
)
from pagasm.assembler.parser import Line
from pagasm.assembler.symbols import SymbolTable

logger = logging.getLogger(__name__)


# =============================================================================
# Listing Entry
# =============================================================================

@dataclass(frozen=True)
class ListingEntry:
    """
    One encoded word and the information needed to list it.

    Attributes:
        line: Source line number
        address: Address the word is assembled at
        word: Encoded 16-bit word
        instruction: Instruction or WRD
        addressing: Final (narrowed) addressing mode
        value: Resolved operand value
    """
    line: int
    address: int
    word: int
    instruction: Instruction
    addressing: Addressing
    value: int

    def format_operand(self) -> str:
        """Render the operand the way the addressing mode is written."""
        mode = self.addressing
        if mode == Addressing.IMMEDIATE:
            return f"#{self.value:02}"
        if mode == Addressing.ACCUMULATOR:
            return f"A+{self.value:02o}"
        if mode == Addressing.ZERO_PAGE:
            return f"@{self.value:02o}"
        if mode in (Addressing.INDIRECT, Addressing.INDIRECT_CURRENT_PAGE):
            return f"[@{self.value:04o}]"
        if mode == Addressing.INDIRECT_ZERO_PAGE:
            return f"[@{self.value:02o}]"
        return f"@{self.value:04o}"

    def __str__(self) -> str:
        return f"{self.address:04o}: {self.word:04o} ; {self.instruction} {self.format_operand()}"


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Encodes Lines against a populated symbol table.

    Encoding a line is a pure function of the Line and the symbol table:
    the stored Line is never modified, and encoding it again gives the
    same entry.

    Usage:
        codegen = CodeGenerator(symbols, "prog.asm")
        codegen.generate(lines)
        print(codegen.get_listing())
    """

    def __init__(self, symbols: SymbolTable, filename: str = "<input>"):
        """
        Initialize the code generator.

        Args:
            symbols: Symbol table populated by pass 1
            filename: Source filename for error reporting
        """
        self._symbols = symbols
        self._filename = filename
        self._entries: list[ListingEntry] = []
        self._errors = ErrorCollector()

    # =========================================================================
    # Public Interface
    # =========================================================================

    def generate(self, lines: list[Line]) -> list[ListingEntry]:
        """
        Encode every line, collecting errors without stopping.

        Args:
            lines: Lines retained by pass 1, in source order

        Returns:
            Listing entries for the lines that encoded successfully
        """
        self._entries = []
        self._errors.clear()

        for line in lines:
            try:
                self._entries.append(self.encode_line(line))
            except AssemblerError as e:
                self._errors.add(e)

        logger.debug(
            "pass 2: encoded %d of %d lines", len(self._entries), len(lines)
        )
        return self._entries

    def encode_line(self, line: Line) -> ListingEntry:
        """
        Resolve, validate and encode a single line.

        Raises:
            UnresolvedReferenceError: If the operand names an unbound label
            ArgumentTooLargeError: Immediate/accumulator operand above 63
            LocationUnreachableError: Data operand on another page
            BranchTargetOutOfRangeError: Jump target on another page
        """
        location = SourceLocation(self._filename, line.number)
        op = line.opcode
        value = self._resolve_operand(line, location)
        addressing = self._check_addressing(op.addressing, value, line.address, location)

        if addressing != op.addressing:
            logger.debug("line %d: %s narrowed to %s", line.number, op.addressing, addressing)

        if addressing == Addressing.ASSEMBLER:
            word = value
        else:
            word = INSTRUCTION_CODES[op.instruction] + ADDRESSING_CODES[addressing] + (value & OPERAND_MASK)

        return ListingEntry(
            line=line.number,
            address=line.address,
            word=word,
            instruction=op.instruction,
            addressing=addressing,
            value=value,
        )

    def get_entries(self) -> list[ListingEntry]:
        """Return the entries produced by the last generate() call."""
        return list(self._entries)

    def get_listing(self) -> str:
        """Return the listing, one line per encoded word."""
        return "\n".join(str(entry) for entry in self._entries)

    def write_listing(self, filepath: str | Path) -> None:
        """Write the listing to a file."""
        with open(filepath, "w") as f:
            for entry in self._entries:
                f.write(f"{entry}\n")

    def has_errors(self) -> bool:
        """Check if any errors occurred during encoding."""
        return self._errors.has_errors()

    def get_errors(self) -> list[AssemblerError]:
        """Return encoding errors in line order."""
        return list(self._errors.errors)

    # =========================================================================
    # Resolution and Validation
    # =========================================================================

    def _resolve_operand(self, line: Line, location: SourceLocation) -> int:
        """Return the operand's concrete value."""
        operand = line.opcode.operand
        if isinstance(operand, Literal):
            return operand.value

        address = self._symbols.resolve(operand.ref_id)
        if address is None:
            raise UnresolvedReferenceError(
                self._symbols.name_of(operand.ref_id), location=location
            )
        return address

    def _check_addressing(self, addressing: Addressing, value: int, address: int,
                          location: SourceLocation) -> Addressing:
        """
        Validate an operand against its addressing mode.

        Returns:
            The final addressing mode, narrowed to zero page if applicable
        """
        same_page = page_of(value) == page_of(address)

        if addressing in (Addressing.IMMEDIATE, Addressing.ACCUMULATOR):
            if value > MAX_SHORT_OPERAND:
                raise ArgumentTooLargeError(value, location=location)

        elif addressing == Addressing.CURRENT_PAGE:
            if page_of(value) == 0:
                return Addressing.ZERO_PAGE
            if not same_page:
                raise LocationUnreachableError(value, location=location)

        elif addressing == Addressing.INDIRECT:
            if not same_page:
                raise LocationUnreachableError(value, location=location)

        elif addressing == Addressing.INDIRECT_CURRENT_PAGE:
            if page_of(value) == 0:
                return Addressing.INDIRECT_ZERO_PAGE
            if not same_page:
                raise BranchTargetOutOfRangeError(value, location=location)

        elif addressing == Addressing.DIRECT:
            if not same_page:
                raise BranchTargetOutOfRangeError(value, location=location)

        return addressing
