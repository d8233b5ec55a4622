"""
Operand Lexer
=============

This module recognises the two kinds of operand token the assembler
accepts: numeric literals and identifiers.

Number Formats
--------------
| Format  | Base        | Example |
|---------|-------------|---------|
| @nnn    | Octal       | @7777   |
| $nnn    | Hexadecimal | $FFF    |
| nnn     | Decimal     | 4095    |

Numbers must fit in a 16-bit word. A token that is not a valid number
(bad digit, empty, out of range) falls through to identifier parsing.

Identifiers
-----------
Identifiers start with a letter or underscore, followed by letters,
digits, or underscores. They are case-sensitive.
"""

from dataclasses import dataclass
from typing import Optional, Union

from pagasm.errors import InvalidLabelError, SourceLocation
from pagasm.assembler.opcodes import WORD_MASK
from pagasm.assembler.symbols import SymbolTable


OCTAL_DIGITS = "01234567"
DECIMAL_DIGITS = "0123456789"
HEX_DIGITS = "0123456789abcdefABCDEF"

# Prefix character -> (base, valid digits)
NUMBER_PREFIXES = {
    "@": (8, OCTAL_DIGITS),
    "$": (16, HEX_DIGITS),
}


# =============================================================================
# Operand Values
# =============================================================================

@dataclass(frozen=True)
class Literal:
    """Operand whose value is known at parse time."""
    value: int


@dataclass(frozen=True)
class Reference:
    """Operand naming a label; resolved through the symbol table in pass 2."""
    ref_id: int


Operand = Union[Literal, Reference]


# =============================================================================
# Lexing Functions
# =============================================================================

def parse_number(token: str) -> Optional[int]:
    """
    Parse a numeric literal.

    Args:
        token: Text such as "@17", "$3f" or "42"

    Returns:
        The value, or None if the token is not a valid 16-bit number
    """
    base, digits = NUMBER_PREFIXES.get(token[:1], (10, DECIMAL_DIGITS))
    text = token[1:] if base != 10 else token

    # Note: Must check for non-empty string first because '' in digits is True
    if not text or any(char not in digits for char in text):
        return None

    value = int(text, base)
    if value > WORD_MASK:
        return None
    return value


def is_identifier(token: str) -> bool:
    """Check whether a token is a valid identifier."""
    if not token:
        return False
    first, rest = token[0], token[1:]
    if not (first.isalpha() or first == "_"):
        return False
    return all(char.isalnum() or char == "_" for char in rest)


def parse_operand(token: str, symbols: SymbolTable,
                  location: Optional[SourceLocation] = None) -> Operand:
    """
    Parse an operand token into a literal or a symbol reference.

    Identifiers are registered in the symbol table, so the first use of a
    forward label allocates its reference id.

    Args:
        token: Operand text with any addressing prefix already removed
        symbols: Symbol table for identifier registration
        location: Source position for error reporting

    Returns:
        Literal or Reference

    Raises:
        InvalidLabelError: If the token is neither a number nor an identifier
    """
    value = parse_number(token)
    if value is not None:
        return Literal(value)
    if is_identifier(token):
        return Reference(symbols.add_reference(token))
    raise InvalidLabelError(token, location=location)
