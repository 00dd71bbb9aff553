"""
DCPU-16 Assembler - Main Interface
==================================

This module provides the Assembler class, which turns DCPU-16 assembly
source into a packed image of 16-bit machine words in a single pass.

Source Format
-------------
One instruction per line, optionally preceded by a label definition::

    ; comments run from ';' to the end of the line
    :loop   set a, 0x30        ; label, mnemonic, operands
            ife [0x1000+i], 0
            set pc, loop       ; labels may be used before or after
    :end                       ; a label may stand on its own line

Mnemonics are case-insensitive. Operands are lower-cased before encoding,
while label definitions keep their case, so only lower-case labels can be
referenced.

Assembly Process
----------------
Each line is encoded and emitted as soon as it is read. A label that is
not yet defined is emitted as a placeholder word and queued in the label
table. When the input ends, every queued slot is patched with its label's
address; an undefined label aborts the run and no output is produced.

Example Usage
-------------
>>> from dcpu16_asm.assembler import Assembler
>>> asm = Assembler(byte_order="little")
>>> code = asm.assemble_string('''
... :start set a, 5
...        set pc, start
... ''')
>>> [hex(w) for w in asm.get_words()]
['0x9401', '0x7dc1', '0x0']
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from dcpu16_asm.assembler.buffer import BYTE_ORDERS, CodeBuffer
from dcpu16_asm.assembler.labels import LabelTable
from dcpu16_asm.assembler.opcodes import (
    OPCODES,
    NEXT_WORD_LITERAL,
    LABEL_PLACEHOLDER,
    is_basic_opcode,
    pack_basic,
    pack_single,
)
from dcpu16_asm.assembler.operands import Operand, encode_operand
from dcpu16_asm.errors import (
    InvalidInstructionError,
    MissingOperandSeparatorError,
    SourceLocation,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Listing Information
# =============================================================================

@dataclass
class ListingLine:
    """
    One listing entry: a source line and the words it produced.

    Attributes:
        line: Source line number (1-based)
        address: Word address of the first emitted word
        size: Number of words emitted by the line
        source: Source text, without the line terminator
    """
    line: int
    address: int
    size: int
    source: str


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    Single-pass DCPU-16 assembler.

    The assembler owns the code buffer and label table of one run.
    ``assemble_lines`` (and the string/file wrappers) resets them, feeds
    every line through ``assemble_line`` and resolves labels at the end.
    Lines may also be fed one at a time, followed by ``finish()``.

    Attributes:
        byte_order: Byte order of the serialized image
    """

    def __init__(self, byte_order: str = "native"):
        """
        Initialize the assembler.

        Args:
            byte_order: "native" (default), "little" or "big"
        """
        if byte_order not in BYTE_ORDERS:
            raise ValueError(
                f"unknown byte order '{byte_order}'. "
                f"Valid byte orders: {', '.join(BYTE_ORDERS)}"
            )
        self._byte_order = byte_order
        self._code = CodeBuffer()
        self._labels = LabelTable()
        self._listing: list[ListingLine] = []
        self._filename = "<input>"

    def reset(self, filename: str = "<input>") -> None:
        """Discard all state from a previous run."""
        self._code.clear()
        self._labels.clear()
        self._listing.clear()
        self._filename = filename

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_lines(self, lines: Iterable[str], filename: str = "<input>") -> bytes:
        """
        Assemble a stream of source lines.

        Args:
            lines: Source lines, with or without line terminators
            filename: Name used in error messages

        Returns:
            The assembled image as bytes

        Raises:
            AssemblerError: On the first error; nothing is returned
        """
        self.reset(filename)

        for lineno, line in enumerate(lines, start=1):
            self.assemble_line(line, lineno)

        self.finish()
        return self.get_code()

    def assemble_string(self, source: str, filename: str = "<input>") -> bytes:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            The assembled image as bytes
        """
        return self.assemble_lines(source.splitlines(), filename)

    def assemble_file(self, filepath: str | Path) -> bytes:
        """
        Assemble source code from a file, reading it line by line.

        Args:
            filepath: Path to assembly source file

        Returns:
            The assembled image as bytes

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)

        logger.info(f"Assembling {filepath}")

        with filepath.open("r", encoding="utf-8", errors="replace") as source:
            return self.assemble_lines(source, str(filepath))

    def finish(self) -> int:
        """
        Resolve all label references once the input is exhausted.

        Returns:
            Number of patched words

        Raises:
            UndefinedLabelError: If a referenced label was never defined
        """
        patched = self._labels.resolve_all(self._code)

        logger.info(f"Resolved {patched} label references, {len(self._code)} words")

        return patched

    def assemble_line(self, line: str, lineno: int) -> None:
        """
        Assemble one source line and append its words to the code buffer.

        Args:
            line: Source text
            lineno: Line number (1-based) for error messages

        Raises:
            AssemblerError: If the line cannot be assembled
        """
        source = line.rstrip("\r\n")
        text = source.split(";", 1)[0].strip()
        if not text:
            return

        location = SourceLocation(self._filename, lineno)
        address = len(self._code)

        if text.startswith(":"):
            label, text = _split_first(text)
            self._labels.define(label[1:], address, line=lineno)
            if not text:
                self._listing.append(ListingLine(lineno, address, 0, source))
                return

        mnemonic, operand_text = _split_first(text)
        mnemonic = mnemonic.lower()

        if mnemonic not in OPCODES:
            raise InvalidInstructionError(mnemonic, location=location, source_line=source)
        opcode = OPCODES[mnemonic]

        if is_basic_opcode(opcode):
            texts = operand_text.split(",")
            if len(texts) != 2:
                raise MissingOperandSeparatorError(location=location, source_line=source)
        else:
            texts = [operand_text]

        tokens = [t.strip().lower() for t in texts]
        operands = self._resolve_operands(
            tokens,
            [self._encode(t, location, source) for t in tokens],
            address,
        )

        if is_basic_opcode(opcode):
            word = pack_basic(opcode, operands[0].code, operands[1].code)
        else:
            word = pack_single(opcode, operands[0].code)

        self._code.emit(word)
        for operand in operands:
            if operand.extra_word is not None:
                self._code.emit(operand.extra_word)

        size = len(self._code) - address
        self._listing.append(ListingLine(lineno, address, size, source))
        logger.debug(f"{location}: {mnemonic} -> {size} word(s) at 0x{address:04X}")

    # =========================================================================
    # Operand Handling
    # =========================================================================

    def _encode(self, token: str, location: SourceLocation, source: str) -> Operand:
        """Encode an operand, raising the failure with the line's location."""
        result = encode_operand(token)
        if not result.ok:
            failure = result.failure
            raise failure.error_type(failure.reason, location=location, source_line=source)
        return result.operand

    def _resolve_operands(
        self,
        tokens: list[str],
        operands: list[Operand],
        address: int,
    ) -> list[Operand]:
        """
        Queue label references and replace them with next-word literals.

        The extra words follow the instruction word in operand order, so
        each label's fixup site is the slot its own extra word lands in.
        """
        site = address + 1
        resolved = []
        for token, operand in zip(tokens, operands):
            if operand.is_label_reference:
                self._labels.reference(token, site)
                operand = Operand(NEXT_WORD_LITERAL, LABEL_PLACEHOLDER)
            if operand.extra_word is not None:
                site += 1
            resolved.append(operand)
        return resolved

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_words(self) -> list[int]:
        """Return the assembled machine words."""
        return self._code.words()

    def get_code(self) -> bytes:
        """Return the assembled image in the configured byte order."""
        return self._code.to_bytes(self._byte_order)

    def get_symbols(self) -> dict[str, int]:
        """
        Get the label table.

        Returns:
            Dictionary mapping label names to word addresses
        """
        return self._labels.symbols()

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Each line shows the source line number, the word address, the
        emitted words and the source text. Label references show their
        resolved values once ``finish()`` has run.
        """
        lines = []
        for entry in self._listing:
            words = " ".join(
                f"{self._code[address]:04X}"
                for address in range(entry.address, entry.address + entry.size)
            )
            lines.append(
                f"{entry.line:5d}  {entry.address:04X}  {words:<14}  {entry.source}".rstrip()
            )
        return "\n".join(lines) + "\n" if lines else ""

    def get_symbol_text(self) -> str:
        """Format the label table as ``name = 0xADDR`` lines sorted by address."""
        symbols = sorted(self.get_symbols().items(), key=lambda item: (item[1], item[0]))
        return "".join(f"{name} = 0x{address:04X}\n" for name, address in symbols)

    def write_binary(self, filepath: str | Path) -> None:
        """
        Write the assembled image to a file.

        Args:
            filepath: Output file path
        """
        code = self.get_code()
        Path(filepath).write_bytes(code)

        logger.info(f"Wrote {len(code)} bytes to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing file."""
        Path(filepath).write_text(self.get_listing(), encoding="utf-8")

        logger.info(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """Write the symbol file."""
        Path(filepath).write_text(self.get_symbol_text(), encoding="utf-8")

        logger.info(f"Wrote symbols to {filepath}")


# =============================================================================
# Helpers
# =============================================================================

def _split_first(text: str) -> tuple[str, str]:
    """Split off the first whitespace-delimited token: (token, rest)."""
    parts = text.split(None, 1)
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1]


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>", byte_order: str = "native") -> bytes:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors
        byte_order: "native", "little" or "big"

    Returns:
        The assembled image

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(byte_order=byte_order)
    return asm.assemble_string(source, filename)


def assemble_file(filepath: str | Path, byte_order: str = "native") -> bytes:
    """
    Convenience function to assemble a file.

    Args:
        filepath: Path to source file
        byte_order: "native", "little" or "big"

    Returns:
        The assembled image

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(byte_order=byte_order)
    return asm.assemble_file(filepath)
