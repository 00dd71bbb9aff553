"""
Numeric Literal Parsing
=======================

Literals are unsigned 16-bit values written either in decimal or in
hexadecimal with a ``0x`` prefix:

| Format      | Prefix | Example | Value |
|-------------|--------|---------|-------|
| Decimal     | (none) | 123     | 123   |
| Hexadecimal | 0x     | 0x7f    | 127   |

A text that is not a literal is not an error here. ``parse_literal``
returns None and the operand encoder goes on to try the text as a label.
"""

import re
from typing import Optional


_HEX_LITERAL = re.compile(r"0[xX]([0-9a-fA-F]+)")
_DEC_LITERAL = re.compile(r"[0-9]+")

LITERAL_MAX = 0xFFFF


def parse_literal(text: str) -> Optional[int]:
    """
    Parse a 16-bit unsigned literal.

    Args:
        text: Numeral text; surrounding whitespace is ignored

    Returns:
        The value, or None if the text is not a well-formed literal in
        the range 0 to 65535
    """
    text = text.strip()

    match = _HEX_LITERAL.fullmatch(text)
    if match:
        value = int(match.group(1), 16)
    elif _DEC_LITERAL.fullmatch(text):
        value = int(text)
    else:
        return None

    if value > LITERAL_MAX:
        return None
    return value
