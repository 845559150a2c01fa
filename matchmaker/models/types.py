"""Shared type definitions for intent and settlement models.

Amounts are ledger integers (u64) and rates are exact rationals kept in
their canonical string form; neither ever passes through a float.
"""

from decimal import Decimal
from fractions import Fraction
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from matchmaker.safe_int import AMOUNT_MAX


def validate_amount(value: Any) -> int:
    """Validate that a value is a ledger amount.

    Args:
        value: Value to validate (int or decimal integer string)

    Returns:
        The amount as int

    Raises:
        ValueError: If value is not an integer within [0, 2^64-1]
    """
    if isinstance(value, bool) or not isinstance(value, int | str):
        raise ValueError(f"Amount must be int or decimal string, got {type(value).__name__}")

    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Amount must be a decimal integer string: '{value}'") from err

    if value < 0:
        raise ValueError(f"Amount cannot be negative: {value}")
    if value > AMOUNT_MAX:
        raise ValueError(f"Amount overflow: {value} > 2^64-1")
    return value


def parse_rate(value: Any) -> Fraction:
    """Parse an exact positive rate.

    Accepts ints, Fractions, Decimals and strings such as "2", "3/2" or
    "0.75". Floats are rejected because their binary value is not the
    rate the owner wrote down.

    Raises:
        ValueError: If value is not a positive exact rational
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise ValueError(f"Rate must be exact, got {type(value).__name__}")

    if isinstance(value, Fraction):
        rate = value
    elif isinstance(value, int):
        rate = Fraction(value)
    elif isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Rate must be finite: {value}")
        rate = Fraction(value)
    elif isinstance(value, str):
        try:
            rate = Fraction(value.strip())
        except (ValueError, ZeroDivisionError) as err:
            raise ValueError(f"Rate must be a rational string: '{value}'") from err
    else:
        raise ValueError(f"Rate must be str, int or Fraction, got {type(value).__name__}")

    if rate <= 0:
        raise ValueError(f"Rate must be positive: {value}")
    return rate


def validate_rate(value: Any) -> str:
    """Validate a rate and return its canonical "num/den" form."""
    return str(parse_rate(value))


# Owner or token address (bech32-style identifiers, opaque to the core)
Address = Annotated[str, Field(min_length=1, max_length=128, pattern=r"^[A-Za-z0-9_.:\-]+$")]

# Ledger amount (u64)
Amount = Annotated[
    int,
    BeforeValidator(validate_amount),
    Field(description="Ledger amount, unsigned 64-bit integer"),
]

# Exact positive rational rate, canonical "num/den" string
Rate = Annotated[
    str,
    BeforeValidator(validate_rate),
    Field(description="Exact rational rate, e.g. '3/2'"),
]

# Arbitrary hex bytes (intent ids, signatures)
HexBytes = Annotated[str, Field(pattern=r"^(0x)?[a-fA-F0-9]*$")]
