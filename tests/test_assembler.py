# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end integration tests for the DCPU-16 assembler.
# These tests verify the full pipeline from source text to machine words.
#
# Test coverage includes:
#   - Instruction word packing for basic and single-operand instructions
#   - Label definitions and forward/backward references
#   - Error reporting with line numbers
#   - Output byte order, listing and symbol files
# =============================================================================

import struct

import pytest

from dcpu16_asm.assembler import Assembler, assemble, assemble_file
from dcpu16_asm.errors import (
    AssemblerError,
    InvalidInstructionError,
    MissingOperandSeparatorError,
    MissingOperandError,
    InvalidLiteralError,
    ExpectedRegisterError,
    UndefinedLabelError,
)


def words_of(source: str) -> list[int]:
    """Assemble source and return the machine words."""
    asm = Assembler()
    asm.assemble_string(source)
    return asm.get_words()


# =============================================================================
# Instruction Packing Tests
# =============================================================================

class TestInstructionPacking:
    """Test the words produced for single instructions."""

    def test_set_register_short_literal(self):
        """set a, 1 packs everything into one word."""
        assert words_of("set a, 1") == [0x8401]

    def test_set_register_long_literal(self):
        """A long literal follows the instruction word."""
        assert words_of("set a, 0x30") == [0x7C01, 0x0030]

    def test_register_to_register(self):
        """Operand a lands in bits 4-9 and operand b in bits 10-15."""
        assert words_of("set b, a") == [0x0011]
        assert words_of("add x, j") == [0x1C32]

    def test_every_basic_opcode(self):
        """Each basic mnemonic puts its opcode in the low four bits."""
        mnemonics = ["set", "add", "sub", "mul", "div", "mod", "shl", "shr",
                     "and", "bor", "xor", "ife", "ifn", "ifg", "ifb"]
        for opcode, mnemonic in enumerate(mnemonics, start=1):
            assert words_of(f"{mnemonic} a, a") == [opcode]

    def test_extra_words_in_operand_order(self):
        """Operand a's extra word precedes operand b's."""
        assert words_of("set [0x1000], 0x20") == [0x7DE1, 0x1000, 0x0020]

    def test_offset_indirect(self):
        """[literal+register] emits the offset as an extra word."""
        assert words_of("set [0x2000+i], [a]") == [0x2161, 0x2000]

    def test_zero_extra_word_kept(self):
        """An extra word of zero is still emitted."""
        assert words_of("set a, [0]") == [0x7801, 0x0000]
        assert words_of("set [0+b], 1") == [0x8511, 0x0000]

    def test_case_insensitive(self):
        """Mnemonics and operands are case-insensitive."""
        assert words_of("SET A, 1") == [0x8401]
        assert words_of("Set [0X10+B], PC") == [0x7111, 0x0010]

    def test_jsr_register(self):
        """jsr packs the opcode as-is and the operand in the top six bits."""
        assert words_of("jsr a") == [0x0010]

    def test_jsr_short_literal(self):
        """jsr with a short literal."""
        assert words_of("jsr 5") == [0x9410]

    def test_jsr_long_literal(self):
        """jsr with a long literal emits the value after the word."""
        assert words_of("jsr 0x100") == [0x7C10, 0x0100]


# =============================================================================
# Source Format Tests
# =============================================================================

class TestSourceFormat:
    """Test comments, whitespace and line handling."""

    def test_comments_and_blank_lines(self):
        """Comments and blank lines produce nothing."""
        source = """
            ; only a comment

            set a, 1 ; trailing comment
        """
        assert words_of(source) == [0x8401]

    def test_line_terminators(self):
        """Lines may keep their terminators when streamed."""
        asm = Assembler()
        asm.assemble_lines(["set a, 1\r\n", "set b, 2\n"])
        assert asm.get_words() == [0x8401, 0x8811]

    def test_empty_source(self):
        """An empty program assembles to an empty image."""
        assert assemble("") == b""
        assert assemble("; nothing\n\n") == b""


# =============================================================================
# Label Tests
# =============================================================================

class TestLabels:
    """Test label definitions and references."""

    def test_backward_reference(self):
        """A label defined on its own line before use resolves to 0."""
        source = ":start\n set a, 5\n set b, start"
        assert words_of(source) == [0x9401, 0x7C11, 0x0000]

    def test_forward_reference(self):
        """A forward reference is patched with the defining line's address."""
        source = """
            set pc, end
            set a, 0x30
        :end set b, a
        """
        assert words_of(source) == [0x7DC1, 0x0004, 0x7C01, 0x0030, 0x0011]

    def test_label_on_instruction_line(self):
        """A label may share its line with an instruction."""
        asm = Assembler()
        asm.assemble_string(":loop add a, 1\n set pc, loop")
        assert asm.get_words() == [0x8402, 0x7DC1, 0x0000]
        assert asm.get_symbols() == {"loop": 0}

    def test_label_only_line_at_end(self):
        """A trailing label marks the address after the last word."""
        assert words_of("set pc, done\n:done") == [0x7DC1, 0x0002]

    def test_multiple_references(self):
        """Every reference to a label receives the same address."""
        source = """
            ife a, 0
            set pc, target
            ifn b, 0
            set pc, target
            jsr target
        :target set a, 0
        """
        words = words_of(source)
        assert words == [0x800C, 0x7DC1, 0x0008, 0x801D, 0x7DC1, 0x0008,
                         0x7C10, 0x0008, 0x8001]

    def test_label_after_long_operand(self):
        """A label in operand b lands after operand a's extra word."""
        source = """
            set [0x1000], value
        :value set a, 1
        """
        assert words_of(source) == [0x7DE1, 0x1000, 0x0003, 0x8401]

    def test_label_in_both_operands(self):
        """Two label references fill consecutive extra words."""
        source = """
            set first, second
        :first set a, 1
        :second set a, 2
        """
        assert words_of(source) == [0x7DF1, 0x0003, 0x0004, 0x8401, 0x8801]

    def test_redefinition_last_wins(self):
        """A redefined label resolves to its last definition."""
        source = """
        :again set a, 1
        :again set a, 2
            set pc, again
        """
        assert words_of(source) == [0x8401, 0x8801, 0x7DC1, 0x0001]

    def test_undefined_label(self):
        """An undefined label fails with no line number."""
        asm = Assembler()
        with pytest.raises(UndefinedLabelError) as exc_info:
            asm.assemble_string("set a, 1\nset pc, nowhere")
        assert exc_info.value.label == "nowhere"
        assert exc_info.value.location is None

    def test_label_case_mismatch(self):
        """Upper-case label definitions cannot be referenced."""
        with pytest.raises(UndefinedLabelError) as exc_info:
            assemble(":Loop set a, 1\nset pc, Loop")
        assert exc_info.value.label == "loop"
        assert "Loop" in exc_info.value.similar_labels


# =============================================================================
# Error Handling Tests
# =============================================================================

class TestErrorHandling:
    """Test error reporting."""

    def test_invalid_instruction(self):
        """Unknown mnemonics report the line number."""
        with pytest.raises(InvalidInstructionError) as exc_info:
            assemble("set a, 1\nfoo a, b")
        error = exc_info.value
        assert error.mnemonic == "foo"
        assert error.location.line == 2
        assert str(error).startswith("<input>:2: error: invalid instruction 'foo'")
        assert "foo a, b" in str(error)

    def test_missing_comma(self):
        """A basic instruction without a comma fails."""
        with pytest.raises(MissingOperandSeparatorError) as exc_info:
            assemble("set a")
        assert "expected two comma-separated operands" in str(exc_info.value)
        assert exc_info.value.location.line == 1

    def test_extra_operand(self):
        """A basic instruction with three operands fails."""
        with pytest.raises(MissingOperandSeparatorError):
            assemble("set a, b, c")

    def test_empty_operand(self):
        """An empty operand position fails."""
        with pytest.raises(MissingOperandError):
            assemble("set a,")
        with pytest.raises(MissingOperandError):
            assemble("jsr")

    def test_expected_register(self):
        """A malformed offset register reports its line."""
        with pytest.raises(ExpectedRegisterError) as exc_info:
            assemble("set a, 1\n\nset [5+bb], a")
        assert exc_info.value.location.line == 3

    def test_invalid_literal(self):
        """Bracketed labels are invalid literals."""
        with pytest.raises(InvalidLiteralError):
            assemble("set a, [data]")

    def test_all_errors_are_assembler_errors(self):
        """Every failure derives from AssemblerError."""
        for source in ("foo", "set a", "set a, [x+5]", "set a, [q]", "jsr nowhere"):
            with pytest.raises(AssemblerError):
                assemble(source)

    def test_invalid_byte_order(self):
        """Unknown byte orders are rejected."""
        with pytest.raises(ValueError):
            Assembler(byte_order="middle")


# =============================================================================
# Output Tests
# =============================================================================

class TestOutput:
    """Test serialized output and auxiliary files."""

    def test_little_endian(self):
        """Little-endian output puts the low byte first."""
        assert assemble("set a, 1", byte_order="little") == b"\x01\x84"

    def test_big_endian(self):
        """Big-endian output puts the high byte first."""
        assert assemble("set a, 0x30", byte_order="big") == b"\x7c\x01\x00\x30"

    def test_native_endian(self):
        """The default uses the machine's byte order."""
        assert assemble("set a, 1") == struct.pack("=H", 0x8401)

    def test_listing(self):
        """The listing shows addresses, resolved words and source."""
        asm = Assembler()
        asm.assemble_string("set a, 0x30\n:end set pc, end")
        listing = asm.get_listing()
        assert "0000  7C01 0030" in listing
        assert "0002  7DC1 0002" in listing
        assert ":end set pc, end" in listing

    def test_symbol_text(self):
        """Symbols are listed by address."""
        asm = Assembler()
        asm.assemble_string(":b_label set a, 1\n:a_label set a, 2")
        assert asm.get_symbol_text() == "b_label = 0x0000\na_label = 0x0001\n"

    def test_write_files(self, tmp_path):
        """write_binary, write_listing and write_symbols create files."""
        asm = Assembler(byte_order="big")
        asm.assemble_string(":start set a, 1")
        asm.write_binary(tmp_path / "out.bin")
        asm.write_listing(tmp_path / "out.lst")
        asm.write_symbols(tmp_path / "out.sym")
        assert (tmp_path / "out.bin").read_bytes() == b"\x84\x01"
        assert "8401" in (tmp_path / "out.lst").read_text()
        assert (tmp_path / "out.sym").read_text() == "start = 0x0000\n"

    def test_assemble_file(self, tmp_path):
        """Files are assembled with their name in error messages."""
        source = tmp_path / "prog.dasm"
        source.write_text("set a, 1\nset b, 2\n")
        assert assemble_file(source, byte_order="little") == b"\x01\x84\x11\x88"

        bad = tmp_path / "bad.dasm"
        bad.write_text("nop\n")
        with pytest.raises(InvalidInstructionError) as exc_info:
            assemble_file(bad)
        assert str(exc_info.value).startswith(f"{bad}:1: error:")

    def test_assemble_file_undecodable_comment(self, tmp_path):
        """Bytes that are not UTF-8 do not stop a file from assembling."""
        source = tmp_path / "latin1.dasm"
        source.write_bytes(b"set a, 1 ; caf\xe9\n")
        assert assemble_file(source, byte_order="little") == b"\x01\x84"

    def test_reuse_resets_state(self):
        """A second run starts from an empty buffer and label table."""
        asm = Assembler()
        asm.assemble_string(":a_label set a, 1")
        asm.assemble_string("set b, 2")
        assert asm.get_words() == [0x8811]
        assert asm.get_symbols() == {}
