"""Tests for SafeInt safe arithmetic wrapper."""

import pytest

from matchmaker.safe_int import (
    AMOUNT_MAX,
    AmountOverflow,
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_from_large(self):
        """Intermediate values may exceed the amount range."""
        assert SafeInt(10**50).value == 10**50

    def test_from_invalid_type_raises(self):
        """SafeInt rejects non-integers, bools included."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for checked arithmetic."""

    def test_add_and_mul(self):
        assert S(3) + S(4) == 7
        assert S(3) * 4 == 12
        assert 4 * S(3) == 12

    def test_sub(self):
        assert S(10) - S(4) == 6

    def test_sub_underflow_raises(self):
        with pytest.raises(Underflow):
            S(4) - S(10)

    def test_floordiv_rounds_down(self):
        assert S(10) // S(3) == 3

    def test_ceiling_div_rounds_up(self):
        assert S(10).ceiling_div(S(3)) == 4
        assert S(9).ceiling_div(3) == 3
        assert S(0).ceiling_div(7) == 0

    def test_division_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            S(1) // S(0)
        with pytest.raises(DivisionByZero):
            S(1).ceiling_div(0)

    def test_errors_are_arithmetic_errors(self):
        """All SafeInt errors share a base class."""
        assert issubclass(DivisionByZero, SafeIntError)
        assert issubclass(Underflow, SafeIntError)
        assert issubclass(AmountOverflow, SafeIntError)
        assert issubclass(SafeIntError, ArithmeticError)


class TestSafeIntComparison:
    """Tests for comparisons and helpers."""

    def test_comparisons_with_int_and_safeint(self):
        assert S(1) < S(2)
        assert S(2) <= 2
        assert S(3) > 2
        assert S(3) >= S(3)
        assert S(5) == S(5)

    def test_min_max(self):
        assert S(3).min(S(5)) == 3
        assert S(3).max(5) == 5

    def test_bool_and_int(self):
        assert not S(0)
        assert S(1)
        assert int(S(7)) == 7


class TestToAmount:
    """Tests for the ledger range check."""

    def test_max_amount(self):
        assert S(AMOUNT_MAX).to_amount() == 2**64 - 1

    def test_overflow_raises(self):
        with pytest.raises(AmountOverflow):
            S(AMOUNT_MAX + 1).to_amount()

    def test_negative_raises(self):
        with pytest.raises(AmountOverflow):
            S(-1).to_amount()
