"""
pagasm Error Hierarchy
======================

This module defines the exception hierarchy for the assembler. All
exceptions inherit from PagasmError, allowing callers to catch every
assembler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
PagasmError (base)
├── SourceEncodingError (source text is not valid UTF-8)
└── AssemblerError (per-line assembly failures)
    ├── InvalidInstructionError - unknown mnemonic
    ├── InvalidAddressingError - addressing mode not allowed for instruction
    ├── InvalidLabelError - operand or label is neither number nor identifier
    ├── DuplicateSymbolError - label bound more than once
    ├── UnresolvedReferenceError - label used but never defined
    ├── MissingRightBracketError - indirect operand without closing ']'
    ├── ArgumentTooLargeError - immediate/accumulator operand above 63
    ├── BranchTargetOutOfRangeError - jump target on another page
    └── LocationUnreachableError - data address on another page

The per-line taxonomy is closed: every diagnostic the assembler can emit
is one of the AssemblerError classes above. None of them is fatal; the
driver records each one against its source line and moves on to the next
line. SourceEncodingError is raised instead, before any line is parsed.

Error messages follow this format:
    source(line): Error description.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class PagasmError(Exception):
    """
    Base exception for all pagasm errors.

        try:
            asm.assemble_file("program.asm")
        except PagasmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a line in a source stream for error reporting.

    Attributes:
        filename: Name of the source file (or "<stdin>" for standard input)
        line: Line number (1-indexed)
    """
    filename: str
    line: int

    def __str__(self) -> str:
        """Format as 'filename(line)' for diagnostics."""
        return f"{self.filename}({self.line})"


# =============================================================================
# Source Input Exceptions
# =============================================================================

class SourceEncodingError(PagasmError):
    """
    Source bytes are not valid UTF-8.

    The whole source is decoded before pass 1 starts, so this is raised
    with no line parsed and no symbol bound.

    Attributes:
        filename: Name of the source (or "<stdin>")
        offset: Byte offset of the first undecodable byte
        byte: Value of that byte
    """

    def __init__(self, filename: str, offset: int, byte: int):
        self.filename = filename
        self.offset = offset
        self.byte = byte
        super().__init__(
            f"{filename}: Error Cannot decode source as UTF-8 "
            f"(byte ${byte:02X} at offset {offset})."
        )

    @classmethod
    def from_decode_error(cls, filename: str, error: UnicodeDecodeError) -> "SourceEncodingError":
        """Build from the UnicodeDecodeError raised by bytes.decode()."""
        return cls(filename, error.start, error.object[error.start])


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(PagasmError):
    """
    Base exception for all per-line assembly errors.

    Attributes:
        message: The error description, without location or punctuation
        location: Where in the source the error occurred (optional)
    """

    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error as a single diagnostic line.

        Example output:
            fib.asm(12): Error Branch target @0200 out of range.
        """
        if self.location:
            return f"{self.location}: Error {self.message}."
        return f"Error {self.message}."


class InvalidInstructionError(AssemblerError):
    """
    Unknown mnemonic.

    Raised when the mnemonic position of a line holds something that is
    not one of the seventeen three-letter instruction names, or when a
    label is not followed by any mnemonic at all.
    """

    def __init__(self, mnemonic: str = "", location: Optional[SourceLocation] = None):
        self.mnemonic = mnemonic
        super().__init__("Invalid instruction", location=location)


class InvalidAddressingError(AssemblerError):
    """
    Addressing mode not permitted for the instruction.

    Accumulator-relative operands (A+x) are only meaningful for jumps.

    Example:
        LDA A+3   ; Error: LDA cannot use accumulator addressing
    """

    def __init__(self, mnemonic: str = "", location: Optional[SourceLocation] = None):
        self.mnemonic = mnemonic
        super().__init__("Invalid addressing mode", location=location)


class InvalidLabelError(AssemblerError):
    """
    Token is neither a numeric literal nor a valid identifier.

    Examples:
        - LDA 9zz      (starts with a digit but is not a number)
        - LDA @78      (8 is not an octal digit)
        - 1abc: NOP    (label text is not an identifier)
    """

    def __init__(self, token: str = "", location: Optional[SourceLocation] = None):
        self.token = token
        super().__init__("Invalid label", location=location)


class DuplicateSymbolError(AssemblerError):
    """
    Label defined more than once.

    The first binding is kept; the second definition is reported and
    otherwise ignored.
    """

    def __init__(self, symbol: str, location: Optional[SourceLocation] = None):
        self.symbol = symbol
        super().__init__("Duplicate symbol", location=location)


class UnresolvedReferenceError(AssemblerError):
    """
    Reference to a label that was never defined.

    Raised during the second pass, once every label definition has been
    seen and the name still has no address.
    """

    def __init__(self, symbol: str = "", location: Optional[SourceLocation] = None):
        self.symbol = symbol
        super().__init__("Unresolved reference", location=location)


class MissingRightBracketError(AssemblerError):
    """Indirect operand opened with '[' but not closed with ']'."""

    def __init__(self, token: str = "", location: Optional[SourceLocation] = None):
        self.token = token
        super().__init__("Missing ']'", location=location)


class OperandValueError(AssemblerError):
    """
    Base for errors about a resolved operand value.

    Attributes:
        value: The offending 16-bit value (rendered in octal)
    """

    description = ""

    def __init__(self, value: int, location: Optional[SourceLocation] = None):
        self.value = value
        super().__init__(self.description.format(value=value), location=location)


class ArgumentTooLargeError(OperandValueError):
    """
    Immediate or accumulator-relative operand does not fit in 6 bits.

    Example:
        LDA #64   ; Error: Argument @0100 too large
    """

    description = "Argument @{value:04o} too large"


class BranchTargetOutOfRangeError(OperandValueError):
    """
    Jump target is not on the same page as the jump.

    Direct and indirect jumps can only reach the current page (and, for
    indirect jumps, page zero). To reach another page, jump through a
    pointer word stored on page zero:

            JMP [far_ptr]
        far_ptr: WRD far_target   ; on page zero
    """

    description = "Branch target @{value:04o} out of range"


class LocationUnreachableError(OperandValueError):
    """
    Data address is not on the current page (or page zero).

    Example:
            ORG @100
            STA [@7777]   ; Error: Location @7777 unreachable
    """

    description = "Location @{value:04o} unreachable"


# =============================================================================
# Error Collection for Multiple Error Reporting
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The assembler uses this to continue processing after encountering
    an error, collecting all errors before reporting them together.
    This helps users fix multiple issues without repeated assembly runs.
    There is no error limit: every line is always attempted.

    Example:
        collector = ErrorCollector()

        try:
            ...
        except AssemblerError as e:
            collector.add(e)

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self):
        self.errors: list[AssemblerError] = []

    def add(self, error: AssemblerError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """
        Format all errors for display, one diagnostic per line.

        Returns:
            Newline-joined diagnostics, in the order they were collected
        """
        return "\n".join(str(error) for error in self.errors)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()
