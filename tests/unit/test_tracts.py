"""Unit tests for full-payment tract allocation"""

from decimal import Decimal
from coop_ledger.domain.tracts import is_full_payment, split_full_payment, to_money


def test_split_full_payment_equal_split():
    """Test payment evenly divisible across tracts"""
    allocations = split_full_payment(Decimal("900.00"), 3)

    assert len(allocations) == 3
    assert [a.tract_number for a in allocations] == [1, 2, 3]
    assert all(a.amount == Decimal("300.00") for a in allocations)


def test_split_full_payment_rounding():
    """Test last tract absorbs the cents remainder"""
    allocations = split_full_payment(Decimal("1000.00"), 3)

    assert allocations[0].amount == Decimal("333.33")
    assert allocations[1].amount == Decimal("333.33")
    assert allocations[2].amount == Decimal("333.34")
    assert sum(a.amount for a in allocations) == Decimal("1000.00")


def test_split_full_payment_follows_catalog_size():
    """Test split count comes from the number of tracts, not a constant"""
    allocations = split_full_payment(Decimal("1000.00"), 4)

    assert len(allocations) == 4
    assert sum(a.amount for a in allocations) == Decimal("1000.00")


def test_split_full_payment_zero_amount():
    assert split_full_payment(Decimal("0"), 3) == []
    assert split_full_payment(Decimal("900.00"), 0) == []


def test_is_full_payment_threshold():
    """Test the required total is the inclusive threshold"""
    required = Decimal("900.00")

    assert is_full_payment(Decimal("900.00"), required, None) is True
    assert is_full_payment(Decimal("1200.00"), required, None) is True
    assert is_full_payment(Decimal("899.99"), required, None) is False


def test_is_full_payment_requires_no_tract():
    assert is_full_payment(Decimal("900.00"), Decimal("900.00"), 1) is False


def test_is_full_payment_without_catalog():
    """Test an empty catalog never triggers a full payment"""
    assert is_full_payment(Decimal("900.00"), Decimal("0.00"), None) is False


def test_to_money_quantizes():
    assert to_money(300) == Decimal("300.00")
    assert to_money("299.999") == Decimal("300.00")
    assert to_money(Decimal("12.5")) == Decimal("12.50")
