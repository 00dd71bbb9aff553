"""
DCPU-16 Operand Encoder
=======================

Classifies one operand token into an operand code and an optional extra
word. Tokens are expected trimmed and lower-cased.

Resolution order (first match wins):

1. Register table: ``a``, ``[b]``, ``pop``, ``sp`` ...
2. Bracketed forms: ``[literal+register]`` and ``[literal]``
3. Unbracketed literal: inline for 0-31, next word otherwise
4. Anything else: a label reference, resolved at the end of assembly

Encoding never raises. Failures come back inside the ``EncodeResult``
together with the exception type the line assembler should raise, so the
caller can attach the line number.
"""

from dataclasses import dataclass
from typing import Optional

from dcpu16_asm.assembler.literals import parse_literal
from dcpu16_asm.assembler.opcodes import (
    REGISTER_CODES,
    MAX_DIRECT_REGISTER,
    OFFSET_INDIRECT_BASE,
    INDIRECT_LITERAL,
    NEXT_WORD_LITERAL,
    SMALL_LITERAL_BASE,
    SMALL_LITERAL_MAX,
    MAX_OPERAND_CODE,
    LABEL_REFERENCE,
    LABEL_PLACEHOLDER,
)
from dcpu16_asm.errors import (
    AssemblerError,
    ExpectedRegisterError,
    InvalidLiteralError,
    MissingOperandError,
)


# =============================================================================
# Operand Types
# =============================================================================

@dataclass(frozen=True)
class Operand:
    """
    An encoded operand.

    Attributes:
        code: Operand field value (addressing mode)
        extra_word: Word emitted after the instruction word, if the
                    addressing mode needs one
    """
    code: int
    extra_word: Optional[int] = None

    @property
    def is_label_reference(self) -> bool:
        """True while the operand still refers to an unresolved label."""
        return self.code > MAX_OPERAND_CODE


@dataclass(frozen=True)
class EncodeFailure:
    """
    Why an operand could not be encoded.

    Attributes:
        error_type: AssemblerError subclass the caller should raise
        reason: Human-readable message
    """
    error_type: type[AssemblerError]
    reason: str


@dataclass(frozen=True)
class EncodeResult:
    """Either an encoded operand or the reason encoding failed."""
    operand: Optional[Operand] = None
    failure: Optional[EncodeFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def _success(code: int, extra_word: Optional[int] = None) -> EncodeResult:
    return EncodeResult(operand=Operand(code, extra_word))


def _failure(error_type: type[AssemblerError], reason: str) -> EncodeResult:
    return EncodeResult(failure=EncodeFailure(error_type, reason))


# =============================================================================
# Encoder
# =============================================================================

def encode_operand(token: str) -> EncodeResult:
    """
    Encode a single operand token.

    Args:
        token: Trimmed, lower-cased operand text

    Returns:
        EncodeResult holding the Operand on success. Label references
        succeed with code LABEL_REFERENCE and a placeholder extra word.
    """
    if not token:
        return _failure(MissingOperandError, "expected operand")

    code = REGISTER_CODES.get(token)
    if code is not None:
        return _success(code)

    if token.startswith("[") and token.endswith("]") and len(token) >= 2:
        return _encode_bracketed(token[1:-1])

    value = parse_literal(token)
    if value is not None:
        if value <= SMALL_LITERAL_MAX:
            return _success(SMALL_LITERAL_BASE + value)
        return _success(NEXT_WORD_LITERAL, value)

    return _success(LABEL_REFERENCE, LABEL_PLACEHOLDER)


def _encode_bracketed(inner: str) -> EncodeResult:
    """Encode the contents of a [literal+register] or [literal] operand."""
    literal_text, plus, register_text = inner.partition("+")

    if plus:
        register_text = register_text.strip()
        register = REGISTER_CODES.get(register_text)
        if (len(register_text) != 1 or register is None
                or register > MAX_DIRECT_REGISTER):
            return _failure(
                ExpectedRegisterError,
                f"expected register, got '{register_text}'",
            )
        value = parse_literal(literal_text)
        if value is None:
            return _failure(
                InvalidLiteralError,
                f"invalid literal '{literal_text.strip()}'",
            )
        return _success(OFFSET_INDIRECT_BASE + register, value)

    value = parse_literal(inner)
    if value is None:
        return _failure(InvalidLiteralError, f"invalid literal '{inner.strip()}'")
    return _success(INDIRECT_LITERAL, value)
