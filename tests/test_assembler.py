# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end tests for the two-pass driver: source text in, listing and
# diagnostics out.
#
# Test coverage includes:
#   - Complete program assembly (fib.asm sample)
#   - Location counter and ORG handling
#   - Forward references and page rules
#   - Error reporting with line numbers
#   - File input and output files
# =============================================================================

import io
from pathlib import Path

import pytest

from pagasm.assembler import Assembler, assemble, assemble_file
from pagasm.errors import (
    ArgumentTooLargeError,
    BranchTargetOutOfRangeError,
    DuplicateSymbolError,
    InvalidInstructionError,
    LocationUnreachableError,
    SourceEncodingError,
    UnresolvedReferenceError,
)

DATA_DIR = Path(__file__).parent / "data"

FIB_LISTING = """\
0000: 0000 ; WRD @0000
0001: 0000 ; WRD @0000
0100: 2601 ; LDA #01
0101: 3100 ; STA @00
0102: 3101 ; STA @01
0103: 3501 ; OUT @01
0104: 0100 ; ADD @00
0105: 5200 ; JPN @0100
0106: 6501 ; SWP @01
0107: 6500 ; SWP @00
0110: 2501 ; LDA @01
0111: 4203 ; JMP @0103"""


# =============================================================================
# Full Assembly Pipeline Tests
# =============================================================================

class TestFullPipeline:
    """Test the complete assembly pipeline from source to listing."""

    def test_minimal_program(self):
        asm = Assembler()
        assert asm.assemble_string("HLT")
        assert asm.get_listing() == "0000: 7600 ; HLT #00"

    def test_fib_sample(self):
        asm = Assembler()
        assert asm.assemble_file(DATA_DIR / "fib.asm")
        assert asm.get_listing() == FIB_LISTING
        assert not asm.has_errors()
        assert asm.get_error_report() == ""

    def test_fib_symbols(self):
        asm = assemble_file(DATA_DIR / "fib.asm")
        assert asm.get_symbols() == {"x": 0, "y": 1, "start": 0o100, "loop": 0o103}

    def test_one_word_per_retained_line(self):
        """Every non-ORG, non-blank, non-comment line produces exactly one word."""
        source = """
            ; header comment

            wrd 5
            org @200
            lda #1
            add x      ; comment
            x: wrd 3
            org @300
            hlt
        """
        asm = Assembler()
        assert asm.assemble_string(source)
        assert len(asm.get_entries()) == 5
        assert len(asm.get_lines()) == 5

    def test_empty_source(self):
        asm = Assembler()
        assert asm.assemble_string("")
        assert asm.get_listing() == ""

    def test_only_comments(self):
        asm = Assembler()
        assert asm.assemble_string("; nothing\n   \n\t; still nothing")
        assert asm.get_entries() == []


# =============================================================================
# Location Counter Tests
# =============================================================================

class TestLocationCounter:
    """Test address assignment and ORG."""

    def test_org_sets_next_address(self):
        asm = Assembler()
        assert asm.assemble_string("NOP\nNOP\nORG @100\nNOP\nNOP")
        listing = asm.get_listing().splitlines()
        assert listing[2].startswith("0100: ")
        assert listing[3].startswith("0101: ")

    def test_org_not_listed(self):
        asm = Assembler()
        asm.assemble_string("ORG @100\nHLT")
        assert [str(e) for e in asm.get_entries()] == ["0100: 7600 ; HLT #00"]

    def test_org_with_label_operand_ignored(self):
        """ORG only moves the counter for literal operands."""
        asm = Assembler()
        assert asm.assemble_string("x: NOP\nORG x\nNOP")
        assert [line.address for line in asm.get_lines()] == [0, 1]

    def test_wrd_occupies_one_word(self):
        asm = Assembler()
        assert asm.assemble_string("WRD 1\nlabel: NOP")
        assert asm.get_symbols()["label"] == 1

    def test_counter_wraps_at_16_bits(self):
        asm = Assembler()
        assert asm.assemble_string("ORG $FFFF\nlast: WRD last\nWRD 0")
        assert [line.address for line in asm.get_lines()] == [0xFFFF, 0]
        assert asm.get_entries()[0].word == 0xFFFF

    def test_line_numbers_count_blank_lines(self):
        asm = Assembler()
        asm.assemble_string("; comment\n\nNOP")
        assert asm.get_lines()[0].number == 3


# =============================================================================
# Symbol and Reference Tests
# =============================================================================

class TestReferences:
    """Test label definitions and forward references."""

    def test_forward_reference_same_page(self):
        asm = Assembler()
        assert asm.assemble_string("JMP target\nNOP\ntarget: HLT")
        entry = asm.get_entries()[0]
        assert entry.value == 2
        assert str(entry) == "0000: 4202 ; JMP @0002"

    def test_forward_reference_other_page(self):
        asm = Assembler()
        assert not asm.assemble_string("JMP target\nORG @100\ntarget: HLT")
        errors = asm.get_errors()
        assert len(errors) == 1
        assert isinstance(errors[0], BranchTargetOutOfRangeError)
        assert errors[0].value == 0o100
        assert errors[0].location.line == 1

    def test_wrd_holds_label_address(self):
        asm = Assembler()
        assert asm.assemble_string("ptr: WRD target\ntarget: HLT")
        assert asm.get_entries()[0].word == 1

    def test_duplicate_label(self):
        asm = Assembler()
        assert not asm.assemble_string("foo: NOP\nfoo: HLT")
        errors = asm.get_errors()
        assert len(errors) == 1
        assert isinstance(errors[0], DuplicateSymbolError)
        assert errors[0].location.line == 2
        assert asm.get_symbols() == {"foo": 0}

    def test_unresolved_reference(self):
        asm = Assembler()
        assert not asm.assemble_string("JMP nowhere", filename="prog.asm")
        assert asm.get_error_report() == "prog.asm(1): Error Unresolved reference."
        assert isinstance(asm.get_errors()[0], UnresolvedReferenceError)

    def test_zero_page_variable(self):
        asm = Assembler()
        assert asm.assemble_string("counter: WRD\nORG @100\nLDA counter")
        assert str(asm.get_entries()[1]) == "0100: 2500 ; LDA @00"


# =============================================================================
# Error Handling Tests
# =============================================================================

class TestErrorHandling:
    """Test diagnostics and the pass 1 / pass 2 split."""

    def test_immediate_boundary(self):
        asm = Assembler()
        assert asm.assemble_string("LDA #63")
        assert not asm.assemble_string("LDA #64")
        error = asm.get_errors()[0]
        assert isinstance(error, ArgumentTooLargeError)
        assert error.value == 64

    def test_indirect_unreachable(self):
        asm = Assembler()
        assert not asm.assemble_string("ORG @100\nSTA [@7777]")
        error = asm.get_errors()[0]
        assert isinstance(error, LocationUnreachableError)
        assert error.value == 0o7777
        assert asm.get_error_report() == "<input>(2): Error Location @7777 unreachable."

    def test_encode_errors_do_not_stop_other_lines(self):
        asm = Assembler()
        assert not asm.assemble_string("LDA #64\nNOP\nLDA #99\nHLT")
        assert [e.line for e in asm.get_entries()] == [2, 4]
        assert [e.location.line for e in asm.get_errors()] == [1, 3]

    def test_parse_errors_collected(self):
        asm = Assembler()
        assert not asm.assemble_string("FOO\nNOP\nBAR x\nLDA [y")
        report = asm.get_error_report().splitlines()
        assert report == [
            "<input>(1): Error Invalid instruction.",
            "<input>(3): Error Invalid instruction.",
            "<input>(4): Error Missing ']'.",
        ]

    def test_parse_error_skips_encoding(self):
        """Encoding errors are not reported when parsing failed."""
        asm = Assembler()
        assert not asm.assemble_string("FOO\nLDA #64")
        errors = asm.get_errors()
        assert len(errors) == 1
        assert isinstance(errors[0], InvalidInstructionError)
        assert asm.get_entries() == []

    def test_new_run_resets_state(self):
        asm = Assembler()
        assert not asm.assemble_string("foo: NOP\nfoo: NOP")
        assert asm.assemble_string("foo: NOP")
        assert not asm.has_errors()
        assert asm.get_symbols() == {"foo": 0}


# =============================================================================
# File I/O Tests
# =============================================================================

class TestFileIO:
    """Test file input and output."""

    def test_assemble_lines_from_stream(self):
        asm = Assembler()
        assert not asm.assemble_lines(io.StringIO("NOP\nXYZ\n"))
        assert asm.get_error_report() == "<stdin>(2): Error Invalid instruction."

    def test_assemble_from_file(self, tmp_path):
        source = tmp_path / "prog.asm"
        source.write_text("start: LDA #1\n  JMP start\n")
        asm = Assembler()
        assert asm.assemble_file(source)
        assert asm.get_listing() == "0000: 2601 ; LDA #01\n0001: 4200 ; JMP @0000"

    def test_diagnostics_use_file_path(self, tmp_path):
        source = tmp_path / "bad.asm"
        source.write_text("nop\nbad\n")
        asm = Assembler()
        assert not asm.assemble_file(source)
        assert asm.get_error_report() == f"{source}(2): Error Invalid instruction."

    def test_missing_file(self, tmp_path):
        asm = Assembler()
        with pytest.raises(OSError):
            asm.assemble_file(tmp_path / "missing.asm")

    def test_assemble_bytes(self):
        asm = Assembler()
        assert asm.assemble_bytes("x: WRD 1 ; café\n".encode("utf-8"))
        assert asm.get_listing() == "0000: 0001 ; WRD @0001"

    def test_undecodable_file_parses_nothing(self, tmp_path):
        source = tmp_path / "latin1.asm"
        source.write_bytes(b"start: NOP\nLDA #1 ; caf\xe9\nHLT\n")
        asm = assemble("old: HLT")
        with pytest.raises(SourceEncodingError) as excinfo:
            asm.assemble_file(source)
        assert excinfo.value.offset == 23
        assert excinfo.value.byte == 0xE9
        assert str(excinfo.value) == (
            f"{source}: Error Cannot decode source as UTF-8 (byte $E9 at offset 23)."
        )
        assert asm.get_lines() == []
        assert asm.get_symbols() == {}
        assert not asm.has_errors()

    def test_write_listing(self, tmp_path):
        asm = assemble("NOP\nHLT")
        path = tmp_path / "out.lst"
        asm.write_listing(path)
        assert path.read_text() == "0000: 6200 ; NOP #00\n0001: 7600 ; HLT #00\n"

    def test_write_symbols(self, tmp_path):
        asm = assemble("b: NOP\na: JMP b\nJMP c", filename="prog.asm")
        path = tmp_path / "out.sym"
        asm.write_symbols(path)
        lines = path.read_text().splitlines()
        assert lines[0].startswith(";")
        assert lines[2:] == ["b @0000", "a @0001"]
