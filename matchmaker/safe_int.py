"""Checked integer arithmetic for ledger amounts.

Ledger amounts are unsigned 64-bit integers, but the amount solver
multiplies them by rate numerators and denominators around a ring, so
intermediate values routinely exceed that range. SafeInt lets them grow
and checks the things that must never happen silently:
- Dividing by zero raises DivisionByZero
- Subtracting below zero raises Underflow
- Leaving the u64 range is caught by to_amount()

Usage pattern:
    from matchmaker.safe_int import S

    volume = (S(max_sell) * S(den)) // S(num)
    return volume.to_amount()
"""

from __future__ import annotations

AMOUNT_MAX = 2**64 - 1


class SafeIntError(ArithmeticError):
    """Raised by SafeInt instead of producing a wrong amount."""

    pass


class DivisionByZero(SafeIntError):
    """Divisor was zero."""

    pass


class Underflow(SafeIntError):
    """Difference would be negative."""

    pass


class AmountOverflow(SafeIntError):
    """Value is outside [0, AMOUNT_MAX]."""

    pass


class SafeInt:
    """Integer wrapper with checked subtraction and division.

    Attributes:
        value: Wrapped integer
    """

    __slots__ = ("_n",)

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            value = value._n
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt wraps int only, not {type(value).__name__}")
        self._n = value

    @property
    def value(self) -> int:
        return self._n

    def __repr__(self) -> str:
        return f"S({self._n})"

    def __hash__(self) -> int:
        return hash(self._n)

    def __int__(self) -> int:
        return self._n

    def __bool__(self) -> bool:
        return bool(self._n)

    # Arithmetic

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._n + _as_int(other))

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Checked subtraction.

        Raises:
            Underflow: If other > self
        """
        rhs = _as_int(other)
        if rhs > self._n:
            raise Underflow(f"{self._n} - {rhs} is negative")
        return SafeInt(self._n - rhs)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._n * _as_int(other))

    __rmul__ = __mul__

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Division rounding toward negative infinity.

        Raises:
            DivisionByZero: If other is zero
        """
        return SafeInt(self._n // _divisor(other, self._n))

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Division rounding toward positive infinity.

        Raises:
            DivisionByZero: If other is zero
        """
        return SafeInt(-(-self._n // _divisor(other, self._n)))

    def min(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(min(self._n, _as_int(other)))

    def max(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(max(self._n, _as_int(other)))

    # Comparison

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt | int):
            return self._n == _as_int(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._n < _as_int(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._n <= _as_int(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._n > _as_int(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._n >= _as_int(other)

    def to_amount(self) -> int:
        """Unwrap as a ledger amount.

        Raises:
            AmountOverflow: If the value does not fit in a u64
        """
        if not 0 <= self._n <= AMOUNT_MAX:
            raise AmountOverflow(f"{self._n} is not a valid amount (0..2^64-1)")
        return self._n


def _as_int(x: SafeInt | int) -> int:
    return x._n if isinstance(x, SafeInt) else x


def _divisor(x: SafeInt | int, dividend: int) -> int:
    d = _as_int(x)
    if d == 0:
        raise DivisionByZero(f"{dividend} divided by zero")
    return d


S = SafeInt
