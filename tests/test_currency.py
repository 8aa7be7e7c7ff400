"""
Test suite for currency module

Tests Money arithmetic, rounding and input coercion.
All monetary calculations must use Decimal precision.
"""

import pytest
from decimal import Decimal

from basic_banking.currency import Money, decimal_from_string, to_money


class TestMoney:
    """Test Money class operations"""

    def test_money_creation(self):
        """Test Money object creation and rounding to cents"""
        money = Money(Decimal('100.50'))
        assert money.amount == Decimal('100.50')

        money_rounded = Money(Decimal('100.555'))
        assert money_rounded.amount == Decimal('100.56')  # Rounded half up

        assert Money(Decimal('2.005')).amount == Decimal('2.01')

    @pytest.mark.parametrize("value", [
        Decimal('NaN'), Decimal('Infinity'), Decimal('-Infinity'),
        float('nan'), float('inf'), float('-inf'),
    ])
    def test_non_finite_amounts_rejected(self, value):
        """Test that Money cannot hold NaN or infinity"""
        with pytest.raises(ValueError, match="must be finite"):
            Money(value)

    def test_float_input_does_not_drift(self):
        """Test that float input goes through str() and keeps exact cents"""
        total = Money.zero()
        for _ in range(10):
            total = total + Money(0.1)
        assert total == Money(Decimal('1.00'))

    def test_money_arithmetic(self):
        """Test Money arithmetic operations"""
        money1 = Money(Decimal('100.50'))
        money2 = Money(Decimal('50.25'))

        assert (money1 + money2).amount == Decimal('150.75')
        assert (money1 - money2).amount == Decimal('50.25')
        assert (money1 * Decimal('2')).amount == Decimal('201.00')
        assert (money1 * '0.05').amount == Decimal('5.03')
        assert (-money1).amount == Decimal('-100.50')
        assert abs(Money(Decimal('-50.00'))).amount == Decimal('50.00')

    def test_money_comparison(self):
        """Test Money comparison operations"""
        money1 = Money(Decimal('100.00'))
        money2 = Money(Decimal('50.00'))
        money3 = Money(Decimal('100'))

        assert money1 == money3
        assert money1 != money2
        assert money1 > money2
        assert money2 < money1
        assert money1 >= money3
        assert money1 <= money3
        assert money1 != Decimal('100.00')
        assert hash(money1) == hash(money3)

    def test_money_state_checks(self):
        """Test Money state checking methods"""
        zero_money = Money(Decimal('0.00'))
        positive_money = Money(Decimal('100.50'))
        negative_money = Money(Decimal('-50.25'))

        assert zero_money.is_zero()
        assert not positive_money.is_zero()

        assert positive_money.is_positive()
        assert not zero_money.is_positive()

        assert negative_money.is_negative()
        assert not zero_money.is_negative()

    def test_money_string_formatting(self):
        """Test Money string representation"""
        assert Money(Decimal('1234.5')).to_string() == "$1,234.50"
        assert Money(Decimal('0')).to_string() == "$0.00"
        assert Money(Decimal('-12.3')).to_string() == "-$12.30"
        assert Money(Decimal('7')).to_string("€") == "€7.00"
        assert str(Money(Decimal('1234567.89'))) == "$1,234,567.89"


class TestConversions:
    """Test decimal_from_string and to_money"""

    def test_decimal_from_string(self):
        """Test parsing of formatted amounts"""
        assert decimal_from_string("123.45") == Decimal('123.45')
        assert decimal_from_string("$1,234.50") == Decimal('1234.50')
        assert decimal_from_string("  -10 ") == Decimal('-10')

    def test_decimal_from_string_invalid(self):
        """Test that unparseable strings are rejected"""
        with pytest.raises(ValueError):
            decimal_from_string("")

        with pytest.raises(ValueError, match="Cannot convert"):
            decimal_from_string("abc")

    def test_decimal_from_string_keeps_exponent(self):
        """Test that scientific notation is parsed, not mangled"""
        assert decimal_from_string("1e5") == Decimal('100000')
        assert decimal_from_string("2.5E2") == Decimal('250')
        assert to_money("1e5") == Money(Decimal('100000'))

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity", "inf", "sNaN"])
    def test_decimal_from_string_rejects_non_finite(self, value):
        """Test that NaN and infinities are not amounts"""
        with pytest.raises(ValueError):
            decimal_from_string(value)

    def test_to_money(self):
        """Test coercion of the supported input types"""
        money = Money(Decimal('10.00'))
        assert to_money(money) is money
        assert to_money(10) == money
        assert to_money("10") == money
        assert to_money(Decimal('10.001')) == money
        assert to_money(10.0) == money

    def test_to_money_rejects_other_types(self):
        """Test that non-monetary values are rejected"""
        with pytest.raises(ValueError):
            to_money(True)

        with pytest.raises(ValueError):
            to_money(None)

        with pytest.raises(ValueError):
            to_money([10])
