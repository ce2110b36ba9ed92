"""
Test suite for money module

Tests Money arithmetic, allocation, comparison, construction and the
mutable handle. Amounts are minor units (cents for USD).
"""

import json
import pytest
from dataclasses import FrozenInstanceError
from decimal import Decimal

from moneykit.config import reload_config
from moneykit.currency import Currency
from moneykit.exceptions import (
    CurrencyMismatch, DivisionByZero, InvalidRoundingMode, UnexpectedAmount
)
from moneykit.money import Money, MutableMoney
from moneykit.rounding import RoundingMode


USD = Currency.lookup('USD')
TRY = Currency.lookup('TRY')


class TestMoneyConstruction:
    """Test the accepted construction inputs"""
    
    def test_integer_amount(self):
        """Test integer minor units are kept exactly"""
        money = Money(100, USD)
        assert money.amount == Decimal('100')
        assert money.currency == USD
    
    def test_float_amount_has_no_binary_error(self):
        """Test floats go through their decimal text"""
        assert Money(1.1, USD).amount == Decimal('1.1')
        assert Money(0.08, USD).amount == Decimal('0.08')
    
    def test_currency_given_as_code(self):
        """Test currency can be passed as ISO code"""
        assert Money(100, 'usd').currency is USD
    
    def test_convert_whole_units(self):
        """Test convert=True multiplies by the subunit"""
        converted = Money(100, USD, True)
        plain = Money(100, USD)
        
        assert converted.amount == 10000
        assert converted != plain
    
    def test_convert_for_zero_precision_currency(self):
        """Test convert=True is a no-op scale for subunit 1"""
        assert Money(100, 'JPY', convert=True).amount == 100
    
    def test_convert_flag_and_method_coexist(self):
        """Test the construction flag leaves the convert method in place"""
        assert callable(Money.convert)
        assert callable(MutableMoney.convert)
        
        handle = MutableMoney(1.5, USD, convert=True)
        assert handle.amount == Decimal('150')
        assert handle.convert(TRY, 2) is handle
        assert handle.amount == 300
        assert handle.currency == TRY
    
    def test_amount_from_money(self):
        """Test another Money instance's amount is reused"""
        money1 = Money(1000, USD)
        money2 = Money(money1, USD)
        
        assert money1 == money2
    
    def test_amount_from_mutable_money(self):
        """Test a mutable handle is accepted as amount"""
        handle = Money(250, USD).mutable()
        assert Money(handle, USD) == Money(250, USD)
    
    def test_amount_from_producer(self):
        """Test zero-argument callables are invoked once"""
        calls = []
        
        def producer():
            calls.append(1)
            return 1
        
        assert Money(producer, USD) == Money(1, USD)
        assert len(calls) == 1
    
    def test_producer_returning_text(self):
        """Test producer results are parsed like direct inputs"""
        assert Money(lambda: '1.5', USD).amount == Decimal('1.5')
    
    def test_producer_returning_producer(self):
        """Test nested producers are rejected"""
        with pytest.raises(UnexpectedAmount):
            Money(lambda: (lambda: 1), USD)
    
    def test_string_amounts(self):
        """Test numeric text parses like the equivalent number"""
        assert Money('1', USD) == Money(1, USD)
        assert Money('1.1', USD) == Money(1.1, USD)
        assert Money('1.1', USD).amount == Money(1.1, USD).amount
    
    def test_string_with_symbol_and_separators(self):
        """Test currency symbol and thousands separators are stripped"""
        assert Money('$1,234.56', USD).amount == Decimal('1234.56')
        assert Money('₺1.548,48', TRY).amount == Decimal('1548.48')
    
    def test_string_with_exception(self):
        """Test non-numeric text is rejected"""
        with pytest.raises(UnexpectedAmount, match='Invalid amount "foo"'):
            Money('foo', USD)
    
    def test_invalid_amount_types(self):
        """Test values of unsupported kinds are rejected"""
        for invalid in (None, True, [1], float('nan'), float('inf'), object()):
            with pytest.raises(UnexpectedAmount):
                Money(invalid, USD)
    
    def test_invalid_currency_type(self):
        """Test currency must be a Currency or a code"""
        with pytest.raises(TypeError):
            Money(1, 840)
    
    def test_money_is_frozen(self):
        """Test Money cannot be modified"""
        money = Money(1, USD)
        with pytest.raises(FrozenInstanceError):
            money.amount = Decimal('5')


class TestMoneyArithmetic:
    """Test arithmetic operations and their rounding"""
    
    def test_addition(self):
        """Test adding Money of the same currency"""
        m1 = Money(1100.101, USD)
        m2 = Money(1100.021, USD)
        total = m1.add(m2)
        
        assert total == Money(2200.12, USD)
        assert total != m1
        assert total != m2
        assert m1.amount == Decimal('1100.101')
    
    def test_addition_of_number(self):
        """Test adding a plain number of minor units"""
        assert Money(100, USD).add(50) == Money(150, USD)
        assert Money(100, USD).add(Decimal('0.005')) == Money(Decimal('100.01'), USD)
    
    def test_addition_different_currencies(self):
        """Test adding across currencies raises"""
        with pytest.raises(CurrencyMismatch, match='Different currencies'):
            Money(100, USD).add(Money(100, TRY))
    
    def test_addition_of_non_number(self):
        """Test non-numeric operands are rejected"""
        with pytest.raises(TypeError):
            Money(100, USD).add('5')
    
    def test_subtraction(self):
        """Test subtracting Money of the same currency"""
        m1 = Money(100.10, USD)
        m2 = Money(100.02, USD)
        diff = m1.subtract(m2)
        
        assert diff == Money(0.08, USD)
        assert diff is not m1
        assert diff is not m2
    
    def test_subtraction_different_currencies(self):
        """Test subtracting across currencies raises"""
        with pytest.raises(CurrencyMismatch):
            Money(100, USD).subtract(Money(100, TRY))
    
    def test_add_then_subtract_restores_value(self):
        """Test add(x).subtract(x) is the identity"""
        money = Money(Decimal('12345.67'), USD)
        for operand in (0, 1, 99, Decimal('0.01'), -250, Money(333, USD)):
            assert money.add(operand).subtract(operand) == money
    
    def test_multiply(self):
        """Test multiplying by a number"""
        m1 = Money(15, USD)
        m2 = Money(1, USD)
        
        assert m2.multiply(15) == m1
        assert m2.multiply(10) != m1
    
    def test_division(self):
        """Test dividing by a number"""
        m1 = Money(2, USD)
        m2 = Money(10, USD)
        
        assert m2.divide(5) == m1
        assert m2.divide(2) != m1
    
    def test_division_by_zero(self):
        """Test dividing by zero raises"""
        with pytest.raises(DivisionByZero, match='Division by zero'):
            Money(100, USD).divide(0)
        
        with pytest.raises(ZeroDivisionError):
            Money(100, USD).divide(Decimal('0.0'))
    
    def test_division_rounds_to_precision(self):
        """Test results are rounded to currency precision"""
        assert Money(10, USD).divide(3).amount == Decimal('3.33')
        assert Money(20, USD).divide(3).amount == Decimal('6.67')
    
    def test_conversion(self):
        """Test conversion relabels and scales by the ratio"""
        m1 = Money(100, USD)
        m2 = Money(350, TRY)
        
        assert m1.convert(TRY, 3.5) == m2
        assert m1.currency == USD
    
    def test_conversion_uses_target_precision(self):
        """Test conversion rounds with the target currency precision"""
        converted = Money(1000, USD).convert('JPY', Decimal('1.2345'))
        assert converted.amount == Decimal('1235')
        assert converted.currency.code == 'JPY'
    
    def test_amounts_beyond_default_decimal_precision(self):
        """Test amounts wider than the default 28-digit Decimal context"""
        big = Money(10 ** 27, USD)
        
        assert big.add(1).amount == Decimal(10 ** 27 + 1)
        assert big.value() == Decimal(10 ** 25)
        assert big.mutable().subtract(1).amount == Decimal(10 ** 27 - 1)
    
    def test_non_finite_results(self):
        """Test NaN and infinite results raise UnexpectedAmount"""
        with pytest.raises(UnexpectedAmount):
            Money(100, USD).multiply(Decimal('NaN'))
        with pytest.raises(UnexpectedAmount):
            Money(100, USD).multiply(Decimal('Infinity'))
    
    def test_rounding_modes_in_arithmetic(self):
        """Test callers can override the rounding mode"""
        money = Money(1, USD)
        multiplier = Decimal('0.125')
        
        assert money.multiply(multiplier).amount == Decimal('0.13')
        assert money.multiply(multiplier, RoundingMode.HALF_UP).amount == Decimal('0.13')
        assert money.multiply(multiplier, RoundingMode.HALF_DOWN).amount == Decimal('0.12')
        assert money.multiply(multiplier, RoundingMode.HALF_EVEN).amount == Decimal('0.12')
        assert money.multiply(multiplier, RoundingMode.HALF_ODD).amount == Decimal('0.13')
        assert money.multiply(multiplier, 'half_even').amount == Decimal('0.12')
    
    def test_invalid_rounding_mode_in_arithmetic(self):
        """Test an undefined rounding mode raises"""
        with pytest.raises(InvalidRoundingMode):
            Money(1, USD).add(1, rounding_mode=5)
    
    def test_negative_and_absolute(self):
        """Test sign helpers"""
        assert Money(5, USD).negative() == Money(-5, USD)
        assert Money(-5, USD).absolute() == Money(5, USD)


class TestMoneyOperators:
    """Test Python operator support"""
    
    def test_operators(self):
        """Test operators return new Money values"""
        money = Money(100, USD)
        
        assert money + Money(50, USD) == Money(150, USD)
        assert money - Money(50, USD) == Money(50, USD)
        assert money * 3 == Money(300, USD)
        assert 3 * money == Money(300, USD)
        assert money / 4 == Money(25, USD)
        assert -money == Money(-100, USD)
        assert abs(Money(-100, USD)) == money
        assert 250 - money == Money(150, USD)
    
    def test_sum(self):
        """Test sum() over Money values"""
        parts = [Money(1, USD), Money(2, USD), Money(3, USD)]
        assert sum(parts) == Money(6, USD)
    
    def test_operator_currency_mismatch(self):
        """Test operators check currencies"""
        with pytest.raises(CurrencyMismatch):
            Money(1, USD) + Money(1, TRY)
        
        with pytest.raises(CurrencyMismatch):
            Money(1, USD) < Money(1, TRY)
    
    def test_unsupported_operands(self):
        """Test Money / Money and Money * Money are not defined"""
        with pytest.raises(TypeError):
            Money(1, USD) / Money(1, USD)
        
        with pytest.raises(TypeError):
            Money(1, USD) * Money(1, USD)
        
        with pytest.raises(TypeError):
            Money(1, USD) + '1'
    
    def test_operators_do_not_mutate_handles(self):
        """Test operators on a mutable handle produce immutable Money"""
        handle = Money(100, USD).mutable()
        result = handle + 1
        
        assert isinstance(result, Money)
        assert not result.is_mutable()
        assert handle.amount == 100
    
    def test_hashing(self):
        """Test equal Money values hash alike"""
        assert len({Money(1, USD), Money(1.0, USD), Money(Decimal('1.00'), USD)}) == 1
        assert len({Money(1, USD), Money(1, TRY)}) == 2
    
    def test_equality_with_other_types(self):
        """Test Money never equals plain numbers"""
        assert Money(1, USD) != 1
        assert Money(1, USD) != Money(1, TRY)


class TestMutableMoney:
    """Test the mutable handle"""
    
    def test_addition_mutable(self):
        """Test add updates the handle in place"""
        money1 = Money(1100.101, USD).mutable()
        money2 = Money(1100.021, USD)
        
        result = money1.add(money2)
        
        assert result is money1
        assert money1 == Money(2200.12, USD)
        assert money2 == Money(1100.021, USD)
    
    def test_subtraction_mutable(self):
        """Test subtract updates the handle in place"""
        money1 = Money(100.10, USD).mutable()
        money1.subtract(Money(100.02, USD))
        
        assert money1.amount == Decimal('0.08')
    
    def test_multiply_mutable(self):
        """Test multiply updates the handle in place"""
        money1 = Money(15, USD)
        money2 = Money(1, USD).mutable()
        
        money2.multiply(15)
        
        assert money2.equals(money1)
        assert money2.is_mutable()
    
    def test_division_mutable(self):
        """Test divide updates the handle in place"""
        money1 = Money(2, USD)
        money2 = Money(10, USD).mutable()
        
        money2.divide(5)
        
        assert money2.equals(money1)
    
    def test_conversion_mutable(self):
        """Test convert relabels the handle"""
        handle = Money(100, USD).mutable()
        handle.convert(TRY, 3.5)
        
        assert handle.currency == TRY
        assert handle.amount == 350
    
    def test_failed_operations_do_not_mutate(self):
        """Test validation happens before mutation"""
        handle = Money(10, USD).mutable()
        
        with pytest.raises(DivisionByZero):
            handle.divide(0)
        with pytest.raises(CurrencyMismatch):
            handle.add(Money(1, TRY))
        with pytest.raises(InvalidRoundingMode):
            handle.add(1, rounding_mode=9)
        
        assert handle.amount == 10
        assert handle.currency == USD
    
    def test_making_mutable(self):
        """Test switching between variants"""
        money = Money(1000, USD).immutable()
        
        assert not money.is_mutable()
        assert money.mutable().is_mutable()
        assert isinstance(money.mutable(), MutableMoney)
    
    def test_immutable_snapshot(self):
        """Test immutable() copies the current value"""
        handle = Money(1000, USD).mutable()
        snapshot = handle.immutable()
        handle.add(1)
        
        assert isinstance(snapshot, Money)
        assert snapshot.amount == 1000
        assert handle.amount == 1001
        assert handle.is_mutable()
    
    def test_mutable_is_new_handle(self):
        """Test mutable() never changes the original Money"""
        money = Money(1000, USD)
        handle = money.mutable()
        handle.add(5)
        
        assert money.amount == 1000
        assert handle.mutable() is handle
    
    def test_mutable_money_is_unhashable(self):
        """Test handles cannot be used as dict keys"""
        with pytest.raises(TypeError):
            hash(Money(1, USD).mutable())
    
    def test_direct_construction(self):
        """Test MutableMoney accepts the same inputs as Money"""
        handle = MutableMoney('1.5', 'USD', convert=True)
        assert handle.amount == Decimal('150.0')


class TestAllocation:
    """Test loss-free proportional allocation"""
    
    def test_allocate(self):
        """Test equal ratios hand the remainder to the first parts"""
        part1, part2, part3 = Money(100, USD).allocate([1, 1, 1])
        assert part1 == Money(34, USD)
        assert part2 == Money(33, USD)
        assert part3 == Money(33, USD)
        
        part1, part2, part3 = Money(101, USD).allocate([1, 1, 1])
        assert part1 == Money(34, USD)
        assert part2 == Money(34, USD)
        assert part3 == Money(33, USD)
    
    def test_allocate_where_order_is_important(self):
        """Test the remainder follows ratio order, not largest remainder"""
        money = Money(5, USD)
        
        part1, part2 = money.allocate([3, 7])
        assert part1 == Money(2, USD)
        assert part2 == Money(3, USD)
        
        part1, part2 = money.allocate([7, 3])
        assert part1 == Money(4, USD)
        assert part2 == Money(1, USD)
    
    def test_allocate_sums_to_original(self):
        """Test the parts always add up exactly"""
        cases = [
            (1001, [1, 2, 3, 4]),
            (99, [0.3, 0.3, 0.4]),
            (7, [1] * 10),
            (123457, [Decimal('33.3'), Decimal('66.7')]),
            (-5, [1, 1]),
            (Decimal('10.5'), [1, 1]),
        ]
        for amount, ratios in cases:
            money = Money(amount, USD)
            parts = money.allocate(ratios)
            
            assert len(parts) == len(ratios)
            assert sum(part.amount for part in parts) == money.amount
    
    def test_allocate_negative_amount(self):
        """Test negative amounts floor away from zero first"""
        parts = Money(-5, USD).allocate([1, 1])
        assert [part.amount for part in parts] == [Decimal('-2'), Decimal('-3')]
    
    def test_allocate_parts_are_immutable(self):
        """Test allocation of a handle yields immutable Money"""
        parts = Money(10, USD).mutable().allocate([1, 1])
        assert all(isinstance(part, Money) for part in parts)
    
    def test_allocate_invalid_ratios(self):
        """Test empty, negative and zero-sum ratios raise"""
        money = Money(100, USD)
        
        with pytest.raises(ValueError, match='empty'):
            money.allocate([])
        with pytest.raises(ValueError, match='negative'):
            money.allocate([-1, 2])
        with pytest.raises(DivisionByZero):
            money.allocate([0, 0])
    
    def test_allocate_to(self):
        """Test splitting into equal parts"""
        parts = Money(100, USD).allocate_to(3)
        assert [part.amount for part in parts] == [34, 33, 33]
        
        with pytest.raises(ValueError):
            Money(100, USD).allocate_to(0)


class TestComparison:
    """Test comparison helpers"""
    
    def test_comparison(self):
        """Test compare and derived predicates"""
        m1 = Money(50, USD)
        m2 = Money(100, USD)
        m3 = Money(200, USD)
        
        assert m2.compare(m3) == -1
        assert m2.compare(m1) == 1
        assert m2.compare(m2) == 0
        
        assert m2.equals(m2)
        assert not m3.equals(m2)
        
        assert m3.greater_than(m2)
        assert not m2.greater_than(m3)
        
        assert m2.greater_than_or_equal(m2)
        assert not m2.greater_than_or_equal(m3)
        
        assert m2.less_than(m3)
        assert not m3.less_than(m2)
        
        assert m2.less_than_or_equal(m2)
        assert not m3.less_than_or_equal(m2)
        
        assert m1 < m2 <= m2 < m3
        assert m3 > m2 >= m2 > m1
    
    def test_comparison_with_different_currencies(self):
        """Test comparing across currencies raises"""
        with pytest.raises(CurrencyMismatch):
            Money(100, USD).compare(Money(100, TRY))
    
    def test_comparators(self):
        """Test sign predicates"""
        assert Money(0, USD).is_zero()
        assert Money(-1, USD).is_negative()
        assert Money(1, USD).is_positive()
        assert not Money(1, USD).is_zero()
        assert not Money(1, USD).is_negative()
        assert not Money(-1, USD).is_positive()
    
    def test_same_currency(self):
        """Test currency identity check"""
        money = Money(100, USD)
        
        assert money.is_same_currency(Money(100, USD))
        assert not money.is_same_currency(Money(100, TRY))


class TestAccessorsAndSerialization:
    """Test getters and dict/JSON output"""
    
    def test_getters(self):
        """Test amount, value and currency accessors"""
        money = Money(100, USD)
        
        assert money.get_amount() == 100
        assert money.value() == 1
        assert money.currency == Currency.lookup('USD')
    
    def test_rounded_amount(self):
        """Test amount rounded to currency precision"""
        money = Money(1000.213, USD)
        
        assert money.amount_rounded() == Decimal('1000.21')
        assert money.get_amount(rounded=True) == Decimal('1000.21')
    
    def test_rounded_amount_with_invalid_mode(self):
        """Test round() validates the mode"""
        with pytest.raises(InvalidRoundingMode, match='Rounding mode should be'):
            Money(1000.213, USD).round(2, 5)
    
    def test_rounded_accessors_ignore_configured_mode(self, monkeypatch):
        """Test amount_rounded and value always round half-up"""
        monkeypatch.setenv('MONEYKIT_DEFAULT_ROUNDING_MODE', 'HALF_DOWN')
        reload_config()
        try:
            money = Money(Decimal('100.5'), USD)
            
            assert money.amount_rounded() == Decimal('100.50')
            assert Money(Decimal('1000.215'), USD).amount_rounded() == Decimal('1000.22')
            assert money.value() == Decimal('1.01')
            assert money.round(Decimal('1000.215')) == Decimal('1000.21')
        finally:
            monkeypatch.delenv('MONEYKIT_DEFAULT_ROUNDING_MODE')
            reload_config()
    
    def test_value_rounds_major_units(self):
        """Test value is amount / subunit at currency precision"""
        assert Money(154848.25895, USD).value() == Decimal('1548.48')
        assert Money(12345, 'JPY').value() == Decimal('12345')
        assert Money(12345, 'KWD').value() == Decimal('12.345')
    
    def test_to_dict(self):
        """Test dict structure embeds the currency record"""
        data = Money(100, USD).to_dict()
        
        assert data['amount'] == 100
        assert data['value'] == 1
        assert data['currency']['USD']['symbol'] == '$'
    
    def test_to_json(self):
        """Test JSON output writes Decimals as strings"""
        data = json.loads(Money(100, USD).to_json())
        
        assert data['amount'] == '100'
        assert data['value'] == '1.00'
        assert data['currency']['USD']['iso_code'] == 840
    
    def test_repr(self):
        """Test repr names the variant"""
        assert repr(Money(100, USD)) == 'Money(100, USD)'
        assert repr(Money(100, USD).mutable()) == 'MutableMoney(100, USD)'


if __name__ == "__main__":
    pytest.main([__file__])
