"""
Assembler - Main Interface
==========================

This module provides the Assembler class, which drives the two passes
over a source stream and collects the listing and diagnostics.

Pass 1 (Parsing)
----------------
- Strip comments and skip blank lines
- Parse each line, binding labels to the location counter
- Apply ORG to move the location counter
- Retain every other operation as a Line and advance the counter

Pass 2 (Encoding)
-----------------
- Resolve label references
- Validate and narrow addressing modes
- Produce one listing entry per retained Line

Errors on one line never stop the pass; each is recorded and the next
line is processed. If pass 1 reports any error, pass 2 is skipped.

Example Usage
-------------
>>> from pagasm.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_string('''
...         org @100
... start:  lda #1
...         jmp start
... ''')
True
>>> print(asm.get_listing())
0100: 2601 ; LDA #01
0101: 4200 ; JMP @0100

Command-Line Usage
------------------
    $ pagasm fib.asm
    $ pagasm < fib.asm
"""

from pathlib import Path
from typing import Iterable
import logging

from pagasm.errors import AssemblerError, ErrorCollector, SourceEncodingError
from pagasm.assembler.codegen import CodeGenerator, ListingEntry
from pagasm.assembler.lexer import Literal
from pagasm.assembler.opcodes import WORD_MASK, Instruction
from pagasm.assembler.parser import Line, Parser, strip_comment
from pagasm.assembler.symbols import SymbolTable

logger = logging.getLogger(__name__)

STDIN_NAME = "<stdin>"


class Assembler:
    """
    Two-pass assembler.

    Each call to one of the assemble methods is an independent run with a
    fresh symbol table. Results stay available until the next run.

    Attributes:
        verbose: If True, log progress at INFO instead of DEBUG
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            verbose: Report pass summaries at INFO level
        """
        self._verbose = verbose
        self._reset(STDIN_NAME)

    def _reset(self, filename: str) -> None:
        self._filename = filename
        self._symbols = SymbolTable()
        self._lines: list[Line] = []
        self._codegen = CodeGenerator(self._symbols, filename)
        self._errors = ErrorCollector()

    def _log(self, message: str, *args) -> None:
        logger.log(logging.INFO if self._verbose else logging.DEBUG, message, *args)

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_lines(self, lines: Iterable[str], filename: str = STDIN_NAME) -> bool:
        """
        Assemble a stream of source lines.

        The stream is consumed once, in order. It may be an open file, a
        list of strings, or any other iterable of text lines.

        Args:
            lines: Source lines, with or without trailing newlines
            filename: Source name used in diagnostics

        Returns:
            True if every line parsed and encoded without error
        """
        self._reset(filename)

        self._pass1(lines)
        self._log(
            "%s: pass 1 retained %d lines, %d symbols, %d errors",
            filename, len(self._lines), len(self._symbols), self._errors.error_count(),
        )

        # Encoding is skipped entirely when parsing failed
        if self._errors.has_errors():
            return False

        undefined = self._symbols.unresolved()
        if undefined:
            logger.debug("undefined symbols: %s", ", ".join(undefined))

        entries = self._codegen.generate(self._lines)
        for error in self._codegen.get_errors():
            self._errors.add(error)

        self._log(
            "%s: pass 2 encoded %d words, %d errors",
            filename, len(entries), self._errors.error_count(),
        )
        return not self._errors.has_errors()

    def assemble_string(self, source: str, filename: str = "<input>") -> bool:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for diagnostics

        Returns:
            True if assembly succeeded
        """
        return self.assemble_lines(source.splitlines(), filename)

    def assemble_bytes(self, data: bytes, filename: str = STDIN_NAME) -> bool:
        """
        Assemble UTF-8 encoded source bytes.

        The whole input is decoded before pass 1 starts.

        Args:
            data: Raw source, as read from a file or standard input
            filename: Source name used in diagnostics

        Returns:
            True if assembly succeeded

        Raises:
            SourceEncodingError: If the bytes are not valid UTF-8; no line
                is assembled in that case
        """
        self._reset(filename)
        try:
            source = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SourceEncodingError.from_decode_error(filename, e) from e
        return self.assemble_string(source, filename)

    def assemble_file(self, filepath: str | Path) -> bool:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            True if assembly succeeded

        Raises:
            OSError: If the file cannot be opened or read
            SourceEncodingError: If the file is not valid UTF-8

        No line is assembled when either is raised.
        """
        filepath = Path(filepath)
        self._log("Assembling %s", filepath)
        return self.assemble_bytes(filepath.read_bytes(), str(filepath))

    # =========================================================================
    # Pass 1
    # =========================================================================

    def _pass1(self, lines: Iterable[str]) -> None:
        """Parse all lines, assigning addresses and recording labels."""
        parser = Parser(self._symbols, self._filename)
        address = 0

        for number, raw in enumerate(lines, start=1):
            text = strip_comment(raw)
            if not text:
                continue

            try:
                opcode = parser.parse_line(text, address, number)
            except AssemblerError as e:
                self._errors.add(e)
                continue

            if opcode.instruction == Instruction.ORG:
                # Only a literal ORG moves the counter; forward references are not supported
                if isinstance(opcode.operand, Literal):
                    address = opcode.operand.value
            else:
                self._lines.append(Line(number, address, opcode))
                address = (address + 1) & WORD_MASK

    # =========================================================================
    # Results
    # =========================================================================

    def get_lines(self) -> list[Line]:
        """Return the Lines retained by pass 1."""
        return list(self._lines)

    def get_entries(self) -> list[ListingEntry]:
        """Return the encoded listing entries, in source order."""
        return self._codegen.get_entries()

    def get_listing(self) -> str:
        """
        Get the listing as a string.

        Returns:
            One line per encoded word, without a trailing newline
        """
        return self._codegen.get_listing()

    def get_symbols(self) -> dict[str, int]:
        """
        Get the symbol table.

        Returns:
            Dictionary mapping defined label names to addresses
        """
        return self._symbols.resolved()

    def get_symbol_table(self) -> SymbolTable:
        """Return the SymbolTable from the last run."""
        return self._symbols

    def write_listing(self, filepath: str | Path) -> None:
        """Write the listing file."""
        self._codegen.write_listing(filepath)
        self._log("Wrote listing to %s", filepath)

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address (one per line, octal, definition order)
        """
        with open(filepath, "w") as f:
            f.write("; Symbol table\n")
            f.write(f"; Generated by pagasm from {self._filename}\n")
            for name, address in self.get_symbols().items():
                f.write(f"{name} @{address:04o}\n")
        self._log("Wrote symbols to %s", filepath)

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        """Check if the last run produced errors."""
        return self._errors.has_errors()

    def get_errors(self) -> list[AssemblerError]:
        """Return all errors from the last run, pass 1 errors first."""
        return list(self._errors.errors)

    def get_error_report(self) -> str:
        """Get the diagnostics, one per line."""
        return self._errors.report()


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> Assembler:
    """
    Convenience function to assemble source code.

    Returns:
        The Assembler, for access to the listing and diagnostics
    """
    asm = Assembler()
    asm.assemble_string(source, filename)
    return asm


def assemble_file(filepath: str | Path, verbose: bool = False) -> Assembler:
    """
    Convenience function to assemble a file.

    Raises:
        OSError: If the file cannot be read
        SourceEncodingError: If the file is not valid UTF-8
    """
    asm = Assembler(verbose=verbose)
    asm.assemble_file(filepath)
    return asm
