"""
DCPU-16 Instruction Set Definition
==================================

This module defines the fixed tables of the DCPU-16 instruction set as
understood by the assembler: the mnemonic/opcode table, the register
symbol table, the operand codes for every addressing mode, and the two
instruction word layouts.

Instruction Word Layouts
------------------------
Basic (two-operand) instructions::

    bbbbbb aaaaaa oooo
    |      |      +---- opcode (4 bits)
    |      +----------- operand a code (6 bits)
    +------------------ operand b code (6 bits)

Single-operand instructions (JSR)::

    aaaaaa oooooooooo
    |      +---- opcode, packed as-is (10 bits)
    +----------- operand a code (6 bits)

The JSR opcode (0x10) is wider than the 4-bit basic field and is packed
without shifting, so it spills into the low bit of the 6-bit field that
follows. This matches the words the assembler has always produced.

Operand Codes
-------------
| Code        | Meaning                                   | Extra word |
|-------------|-------------------------------------------|------------|
| 0x00-0x07   | register (a, b, c, x, y, z, i, j)         | no         |
| 0x08-0x0f   | [register]                                | no         |
| 0x10-0x17   | [next word + register]                    | yes        |
| 0x18-0x1d   | pop, peek, push, sp, pc, o                | no         |
| 0x1e        | [next word]                               | yes        |
| 0x1f        | next word (literal)                       | yes        |
| 0x20-0x3f   | literal 0x00-0x1f                         | no         |

All tables are read-only mappings built once at import time.
"""

from types import MappingProxyType


# =============================================================================
# Operand Codes
# =============================================================================

# Largest value that fits the 6-bit operand field
MAX_OPERAND_CODE = 0x3F

# Largest register code usable as the base of an offset-indirect operand
MAX_DIRECT_REGISTER = 0x07

OFFSET_INDIRECT_BASE = 0x10   # [next word + register]
INDIRECT_LITERAL = 0x1E       # [next word]
NEXT_WORD_LITERAL = 0x1F      # next word, used as-is
SMALL_LITERAL_BASE = 0x20     # literal embedded in the operand field
SMALL_LITERAL_MAX = 0x1F

# Returned for label references; deliberately above MAX_OPERAND_CODE so the
# line assembler can tell that the value is still unresolved.
LABEL_REFERENCE = 0x40

# Written into a fixup site until the label address is known
LABEL_PLACEHOLDER = 0x00FF

WORD_MASK = 0xFFFF


# =============================================================================
# Register Symbol Table
# =============================================================================

REGISTER_CODES = MappingProxyType({
    "a": 0x00,
    "b": 0x01,
    "c": 0x02,
    "x": 0x03,
    "y": 0x04,
    "z": 0x05,
    "i": 0x06,
    "j": 0x07,
    "[a]": 0x08,
    "[b]": 0x09,
    "[c]": 0x0A,
    "[x]": 0x0B,
    "[y]": 0x0C,
    "[z]": 0x0D,
    "[i]": 0x0E,
    "[j]": 0x0F,
    "pop": 0x18,
    "peek": 0x19,
    "push": 0x1A,
    "sp": 0x1B,
    "pc": 0x1C,
    "o": 0x1D,
})


# =============================================================================
# Opcode Table
# =============================================================================

OPCODES = MappingProxyType({
    "set": 0x01,
    "add": 0x02,
    "sub": 0x03,
    "mul": 0x04,
    "div": 0x05,
    "mod": 0x06,
    "shl": 0x07,
    "shr": 0x08,
    "and": 0x09,
    "bor": 0x0A,
    "xor": 0x0B,
    "ife": 0x0C,
    "ifn": 0x0D,
    "ifg": 0x0E,
    "ifb": 0x0F,
    "jsr": 0x10,
})

BASIC_OPCODE_MAX = 0x0F


# =============================================================================
# Lookup and Packing Helpers
# =============================================================================

def is_basic_opcode(opcode: int) -> bool:
    """Return True if the opcode uses the two-operand word layout."""
    return 0 < opcode <= BASIC_OPCODE_MAX


def pack_basic(opcode: int, a: int, b: int) -> int:
    """Pack a two-operand instruction word."""
    return (opcode | (a << 4) | (b << 10)) & WORD_MASK


def pack_single(opcode: int, a: int) -> int:
    """Pack a single-operand instruction word."""
    return (opcode | (a << 10)) & WORD_MASK
