from unittest import mock

import pytest

from vending_service.coin_stock import CoinStock
from vending_service.factory import create_coin_stock
from vending_service.inventory import InMemoryInventory
from vending_service.machine import VendingMachine
from vending_service.transaction_log import TransactionLogger, TransactionLogSink

SESSION_ID = "session-test"


@pytest.fixture
def inventory():
    return InMemoryInventory()


@pytest.fixture
def coin_stock():
    return create_coin_stock(10)


@pytest.fixture
def journal():
    return TransactionLogger()


@pytest.fixture
def machine(inventory, coin_stock, journal):
    return VendingMachine(inventory, coin_stock, logger=journal, session_id_factory=lambda: SESSION_ID)


@pytest.fixture
def sink():
    return mock.create_autospec(TransactionLogSink, instance=True)


@pytest.fixture
def spied_machine(inventory, coin_stock, sink):
    return VendingMachine(inventory, coin_stock, logger=sink, session_id_factory=lambda: SESSION_ID)


@pytest.fixture
def empty_stock():
    return CoinStock()
