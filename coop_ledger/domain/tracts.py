"""Allocation of a lump contribution across a fiscal year's tracts"""

from decimal import Decimal, ROUND_DOWN
from typing import List
from coop_ledger.domain.models import TractAllocation

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Coerce an amount to a two-place Decimal"""
    return Decimal(str(value)).quantize(CENT)


def split_full_payment(amount: Decimal, num_tracts: int) -> List[TractAllocation]:
    """
    Divide a full payment evenly across tracts 1..num_tracts.

    Requirements:
    - Equal per-tract share at cent precision
    - Last tract absorbs the rounding remainder so the shares sum to the amount
    - Tracts are numbered in ascending order

    Args:
        amount: Total amount paid
        num_tracts: Number of tracts defined for the fiscal year

    Returns:
        List of TractAllocation objects, one per tract

    Example:
        ₡900.00 over 3 → [300.00, 300.00, 300.00]
        ₡1000.00 over 3 → [333.33, 333.33, 333.34]
    """
    amount = to_money(amount)
    if amount <= 0 or num_tracts <= 0:
        return []

    base_amount = (amount / num_tracts).quantize(CENT, rounding=ROUND_DOWN)
    remainder = amount - base_amount * num_tracts

    allocations = []
    for i in range(num_tracts):
        share = base_amount + (remainder if i == num_tracts - 1 else Decimal("0.00"))
        allocations.append(TractAllocation(tract_number=i + 1, amount=share))

    return allocations


def is_full_payment(amount: Decimal, required_total: Decimal, tract_number: int | None) -> bool:
    """A payment with no tract that covers every tract's required amount"""
    return tract_number is None and required_total > 0 and to_money(amount) >= required_total
