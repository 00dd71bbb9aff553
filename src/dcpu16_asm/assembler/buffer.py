"""
Code Buffer
===========

The growing program image: an ordered list of 16-bit words, appended to
by the line assembler and patched once by the label fixup pass.
"""

import struct
import sys

from dcpu16_asm.assembler.opcodes import WORD_MASK


# struct prefixes for the supported output byte orders
BYTE_ORDERS = {
    "native": "=",
    "little": "<",
    "big": ">",
}


class CodeBuffer:
    """
    Ordered sequence of 16-bit machine words.

    Usage:
        buf = CodeBuffer()
        address = buf.emit(0x7C01)
        buf.emit(0x0030)
        data = buf.to_bytes("little")
    """

    def __init__(self) -> None:
        self._words: list[int] = []

    def __len__(self) -> int:
        return len(self._words)

    def __getitem__(self, index: int) -> int:
        return self._words[index]

    def emit(self, word: int) -> int:
        """Append a word and return the address it was written to."""
        self._words.append(word & WORD_MASK)
        return len(self._words) - 1

    def patch(self, address: int, word: int) -> None:
        """Overwrite an already emitted word."""
        self._words[address] = word & WORD_MASK

    def clear(self) -> None:
        self._words.clear()

    def words(self) -> list[int]:
        """Return a copy of the emitted words."""
        return list(self._words)

    def to_bytes(self, byte_order: str = "native") -> bytes:
        """
        Serialize the buffer.

        Args:
            byte_order: "native", "little" or "big"

        Returns:
            Two bytes per word in the requested byte order
        """
        try:
            prefix = BYTE_ORDERS[byte_order]
        except KeyError:
            raise ValueError(
                f"unknown byte order '{byte_order}'. "
                f"Valid byte orders: {', '.join(BYTE_ORDERS)}"
            ) from None
        return struct.pack(f"{prefix}{len(self._words)}H", *self._words)


def native_byte_order() -> str:
    """Name of the byte order used for "native" output on this machine."""
    return sys.byteorder
