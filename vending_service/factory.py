"""
factory.py — Ready-to-use Machine Construction

Builds a machine the way it leaves the depot: standard catalog, a coin stock
filled with the change denominations, and an optional transaction log sink.
"""

from typing import Optional

from .coin_stock import CoinStock
from .config import INITIAL_COIN_COUNT
from .denominations import CHANGE_FACE_VALUES
from .inventory import InMemoryInventory, Inventory
from .machine import VendingMachine
from .transaction_log import TransactionLogSink


def create_coin_stock(coin_count: int = INITIAL_COIN_COUNT) -> CoinStock:
    """Coin stock with `coin_count` coins of each of 200, 100, 50, 20 and 10 cents."""
    stock = CoinStock()
    for face_value in CHANGE_FACE_VALUES:
        stock.add_coins(face_value, coin_count)
    return stock


def create_vending_machine(inventory: Optional[Inventory] = None,
                           logger: Optional[TransactionLogSink] = None,
                           coin_count: int = INITIAL_COIN_COUNT) -> VendingMachine:
    """
    Creates a stocked machine.

    Args:
        inventory (Inventory, optional): Defaults to the standard InMemoryInventory.
        logger (TransactionLogSink, optional): Event sink, e.g. a TransactionLogger
            or a TransactionEventPublisher.
        coin_count (int): Coins loaded per change denomination.

    Returns:
        VendingMachine: The configured machine.
    """
    return VendingMachine(
        inventory=inventory if inventory is not None else InMemoryInventory(),
        coin_stock=create_coin_stock(coin_count),
        logger=logger,
    )
