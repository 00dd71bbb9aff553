"""
DCPU-16 Assembler
=================

This package provides a single-pass assembler for the DCPU-16, a 16-bit
word-addressed CPU. It converts assembly source text into a packed image
of machine words.

Main Components
---------------
- **Assembler**: Reads source lines, emits instruction words and resolves
  labels once the input is exhausted
- **encode_operand**: Classifies an operand into an operand code and an
  optional extra word
- **LabelTable**: Label definitions and pending fixup sites
- **CodeBuffer**: The growing image of 16-bit words
- **parse_literal**: Decimal and 0x-prefixed hexadecimal literals

Example Usage
-------------
>>> from dcpu16_asm.assembler import Assembler
>>> asm = Assembler()
>>> code = asm.assemble_string('''
... :loop   add a, 1
...         set pc, loop
... ''')
>>> asm.get_symbols()
{'loop': 0}

Supported Features
------------------
- Basic instructions: SET, ADD, SUB, MUL, DIV, MOD, SHL, SHR, AND, BOR,
  XOR, IFE, IFN, IFG, IFB
- JSR
- Registers, [register], [literal+register], [literal], pop/peek/push,
  sp, pc, o
- Short literals (0-31) embedded in the instruction word
- Labels, referenced before or after their definition
- Listing and symbol file generation
"""

from dcpu16_asm.assembler.assembler import Assembler, ListingLine, assemble, assemble_file
from dcpu16_asm.assembler.buffer import CodeBuffer, BYTE_ORDERS
from dcpu16_asm.assembler.labels import LabelTable, LabelEntry
from dcpu16_asm.assembler.literals import parse_literal
from dcpu16_asm.assembler.operands import (
    Operand,
    EncodeResult,
    EncodeFailure,
    encode_operand,
)
from dcpu16_asm.assembler.opcodes import (
    OPCODES,
    REGISTER_CODES,
    pack_basic,
    pack_single,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "ListingLine",
    "assemble",
    "assemble_file",
    # Code buffer
    "CodeBuffer",
    "BYTE_ORDERS",
    # Labels
    "LabelTable",
    "LabelEntry",
    # Literals and operands
    "parse_literal",
    "Operand",
    "EncodeResult",
    "EncodeFailure",
    "encode_operand",
    # Instruction set
    "OPCODES",
    "REGISTER_CODES",
    "pack_basic",
    "pack_single",
]
