"""
change_calculator.py — Greedy Change Calculation

Picks the largest usable denomination first, as many times as stock and the
remaining amount allow, then moves on to the next smaller one. There is no
backtracking: with a non-canonical stock (e.g. {25: 1, 10: 3} for 30) the scan
can fail although a combination exists. That failure is part of the contract;
this is not an exhaustive coin-change search.
"""

import logging
from typing import List, Mapping, Optional

log = logging.getLogger(__name__)


def calculate_change(amount: int, available: Mapping[int, int]) -> Optional[List[int]]:
    """
    Computes the coins that make up `amount` from the `available` stock.

    Args:
        amount (int): Amount to return, in cents. Must not be negative.
        available (Mapping[int, int]): Denomination -> coin count. Not modified.

    Returns:
        List[int]: Face values in descending order summing to `amount`,
            or None if the greedy scan cannot reach the amount exactly.

    Raises:
        ValueError: If `amount` is negative.
    """
    if amount < 0:
        raise ValueError(f"Change amount must not be negative: {amount}")
    if amount == 0:
        return []
    if not available:
        return None

    coins_desc = ", ".join(f"{value}x{count}" for value, count in sorted(available.items(), reverse=True))
    log.debug(f"Calculating change for {amount} with available coins: {coins_desc}")

    result: List[int] = []
    remaining = amount
    for value in sorted(available, reverse=True):
        if value <= 0:
            continue
        count = min(available[value], remaining // value)
        if count <= 0:
            continue
        result.extend([value] * count)
        remaining -= value * count

    if remaining != 0:
        return None
    return result
