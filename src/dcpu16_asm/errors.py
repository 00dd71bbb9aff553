"""
DCPU-16 Assembler Error Hierarchy
=================================

This module defines the exception hierarchy for the assembler. All
exceptions inherit from Dcpu16Error, allowing callers to catch every
assembler failure with a single except clause if desired.

Exception Hierarchy
-------------------
Dcpu16Error (base)
└── AssemblerError (assembler-related)
    ├── InvalidInstructionError - mnemonic not in the opcode table
    ├── MissingOperandSeparatorError - basic instruction without two operands
    ├── MissingOperandError - empty operand text
    ├── InvalidLiteralError - malformed or out-of-range literal
    ├── ExpectedRegisterError - bad register in [literal+register]
    └── UndefinedLabelError - label referenced but never defined

Every error is fatal. Per-line errors carry the source location of the
offending line; the undefined-label error is detected after the whole
input has been consumed and carries no location.

Error messages follow this format:
    filename:line: error: description
        source_line_text
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Dcpu16Error(Exception):
    """
    Base exception for all DCPU-16 assembler errors.

        try:
            assembler.assemble_file("program.dasm")
        except Dcpu16Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Location of a source line for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
    """
    filename: str
    line: int

    def __str__(self) -> str:
        """Format as 'filename:line' for error messages."""
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(Dcpu16Error):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            hello.dasm:3: error: invalid instruction 'sett'
                sett a, 1
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class InvalidInstructionError(AssemblerError):
    """
    Mnemonic is not part of the instruction set.

    Example:
        sett a, 1   ; Error: no such instruction
    """

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        message = f"invalid instruction '{mnemonic}'" if mnemonic else "invalid instruction"
        super().__init__(message, location=location, source_line=source_line)


class MissingOperandSeparatorError(AssemblerError):
    """
    A basic instruction was not given exactly two comma-separated operands.

    Examples:
        set a        ; no comma
        set a, b, c  ; one operand too many
    """

    def __init__(
        self,
        message: str = "expected two comma-separated operands",
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(message, location=location, source_line=source_line)


class MissingOperandError(AssemblerError):
    """An operand position was left empty (e.g. ``set a,``)."""
    pass


class InvalidLiteralError(AssemblerError):
    """
    A literal required by an addressing mode is malformed or out of range.

    Literals are unsigned decimal or 0x-prefixed hexadecimal values in the
    range 0 to 65535. Bracketed forms do not accept label names.
    """
    pass


class ExpectedRegisterError(AssemblerError):
    """
    The register part of a [literal+register] operand is not a register.

    Only the eight general purpose registers (a, b, c, x, y, z, i, j) are
    valid in the offset position.
    """
    pass


class UndefinedLabelError(AssemblerError):
    """
    Reference to a label that never received a definition.

    Raised once, after the whole input has been consumed, so it carries no
    source location. Similarly named labels are offered as a hint, which
    helps with typos and with the case-sensitivity of label names.
    """

    def __init__(
        self,
        label: str,
        hint: Optional[str] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.label = label
        self.similar_labels = similar_labels or []

        if not hint and self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(f"undefined label '{label}'", hint=hint)
