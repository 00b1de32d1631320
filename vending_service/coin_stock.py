"""
coin_stock.py — The Machine's Coin Reserve

CoinStock is the only owner of the denomination -> count ledger. Change is
always computed against the current ledger by the greedy calculator, so a
successful can_make_change() is followed by a successful make_change() as long
as nothing touches the ledger in between.
"""

import logging
from collections import Counter
from threading import RLock
from typing import Dict, List, Mapping, Optional

from .change_calculator import calculate_change

log = logging.getLogger(__name__)


class CoinStock:
    """
    Counts of physical coins per denomination.

    Counts never go below zero. All operations take an internal lock so that
    make_change() is atomic with respect to other callers of the same stock.
    """

    def __init__(self, initial: Optional[Mapping[int, int]] = None):
        self._coins: Dict[int, int] = {}
        self._lock = RLock()
        for value, quantity in (initial or {}).items():
            self.add_coins(value, quantity)

    def add_coins(self, denomination: int, quantity: int) -> None:
        """Adds coins to the reserve. Quantities of zero or less are ignored."""
        if quantity <= 0:
            return
        with self._lock:
            self._coins[denomination] = self._coins.get(denomination, 0) + quantity

    def get_coin_count(self, denomination: int) -> int:
        with self._lock:
            return self._coins.get(denomination, 0)

    def get_all_coins(self) -> Dict[int, int]:
        """Returns a copy of the ledger."""
        with self._lock:
            return dict(self._coins)

    def total_value(self) -> int:
        with self._lock:
            return sum(value * count for value, count in self._coins.items())

    def can_make_change(self, amount: int) -> bool:
        """Read-only probe: True if make_change(amount) would succeed right now."""
        with self._lock:
            return calculate_change(amount, self._coins) is not None

    def make_change(self, amount: int) -> Optional[List[int]]:
        """
        Removes the coins for `amount` from the reserve.

        Args:
            amount (int): Amount to dispense, in cents.

        Returns:
            List[int]: The dispensed face values, or None if the amount cannot
                be made. On None the ledger is left untouched.
        """
        with self._lock:
            coins = calculate_change(amount, self._coins)
            if coins is None:
                log.info(f"Cannot make change for {amount} from {self._coins}")
                return None

            for value, used in Counter(coins).items():
                self._coins[value] -= used
            return coins
