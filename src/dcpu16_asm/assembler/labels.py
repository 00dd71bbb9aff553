"""
Label Table and Fixup Engine
============================

Tracks where each label is defined and every code buffer slot that refers
to it. Labels may be used before or after their definition; all slots are
patched in one pass once the whole source has been read, when no further
definition can change an address.

Label names are case-sensitive.
"""

import difflib
import logging
from dataclasses import dataclass, field
from typing import Optional

from dcpu16_asm.assembler.buffer import CodeBuffer
from dcpu16_asm.errors import UndefinedLabelError


logger = logging.getLogger(__name__)


@dataclass
class LabelEntry:
    """
    Label table entry.

    Attributes:
        name: Label name
        address: Word address of the definition (None until defined)
        fixup_sites: Code buffer indices waiting for the address
        line: Source line of the definition (1-based), if known
    """
    name: str
    address: Optional[int] = None
    fixup_sites: list[int] = field(default_factory=list)
    line: Optional[int] = None

    @property
    def is_defined(self) -> bool:
        return self.address is not None


class LabelTable:
    """
    Label definitions and pending references for one assembly run.

    Usage:
        labels = LabelTable()
        labels.reference("loop", site=1)
        labels.define("loop", address=4)
        labels.resolve_all(buffer)
    """

    def __init__(self) -> None:
        self._entries: dict[str, LabelEntry] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str) -> Optional[LabelEntry]:
        return self._entries.get(name)

    def clear(self) -> None:
        self._entries.clear()

    def _entry(self, name: str) -> LabelEntry:
        entry = self._entries.get(name)
        if entry is None:
            entry = self._entries[name] = LabelEntry(name)
        return entry

    def define(self, name: str, address: int, line: Optional[int] = None) -> None:
        """
        Record the address of a label.

        Redefinition is allowed; the last definition wins.
        """
        entry = self._entry(name)
        if entry.is_defined:
            logger.debug(
                f"Label '{name}' redefined: 0x{entry.address:04X} -> 0x{address:04X}"
            )
        entry.address = address
        entry.line = line
        logger.debug(f"Defined label '{name}' at 0x{address:04X}")

    def reference(self, name: str, site: int) -> None:
        """Queue a code buffer slot to receive the address of a label."""
        self._entry(name).fixup_sites.append(site)

    def symbols(self) -> dict[str, int]:
        """Return a mapping of defined label names to addresses."""
        return {
            name: entry.address
            for name, entry in self._entries.items()
            if entry.is_defined
        }

    def resolve_all(self, buffer: CodeBuffer) -> int:
        """
        Patch every fixup site with its label address.

        Args:
            buffer: The code buffer the fixup sites index into

        Returns:
            Number of patched sites

        Raises:
            UndefinedLabelError: If a referenced label was never defined
        """
        for entry in self._entries.values():
            if not entry.is_defined:
                similar = difflib.get_close_matches(entry.name, list(self.symbols()))
                raise UndefinedLabelError(entry.name, similar_labels=similar)

        patched = 0
        for entry in self._entries.values():
            for site in entry.fixup_sites:
                buffer.patch(site, entry.address)
                patched += 1

        logger.debug(f"Resolved {patched} label references across {len(self)} labels")
        return patched
