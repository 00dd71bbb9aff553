"""
dcpu16-asm - Assembler for the DCPU-16
======================================

This package provides a single-pass assembler for the DCPU-16, a 16-bit
word-addressed CPU. Assembly source is read line by line, encoded into
16-bit machine words, and written out as a raw binary image once every
label reference has been resolved.

Main Components
---------------
- **assembler**: Literal parsing, operand encoding, label fixups and the
  line assembler
- **cli**: The ``dasm`` command-line tool

Quick Start
-----------
Assemble a program:
    >>> from dcpu16_asm import Assembler
    >>> asm = Assembler(byte_order="little")
    >>> code = asm.assemble_file("hello.dasm")
    >>> asm.write_binary("hello.bin")

Or use the command-line tool:
    $ dasm hello.dasm -o hello.bin
    $ dasm < hello.dasm > hello.bin
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from dcpu16_asm.assembler import Assembler, assemble, assemble_file
from dcpu16_asm.errors import (
    Dcpu16Error,
    AssemblerError,
    SourceLocation,
    InvalidInstructionError,
    MissingOperandSeparatorError,
    MissingOperandError,
    InvalidLiteralError,
    ExpectedRegisterError,
    UndefinedLabelError,
)

__all__ = [
    "__version__",
    "Assembler",
    "assemble",
    "assemble_file",
    "Dcpu16Error",
    "AssemblerError",
    "SourceLocation",
    "InvalidInstructionError",
    "MissingOperandSeparatorError",
    "MissingOperandError",
    "InvalidLiteralError",
    "ExpectedRegisterError",
    "UndefinedLabelError",
]
