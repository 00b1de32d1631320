import logging

import pytest

from vending_service.errors import InsufficientMoneyError
from vending_service.factory import create_coin_stock, create_vending_machine
from vending_service.inventory import InMemoryInventory
from vending_service.logging_config import get_logger, setup_logging
from vending_service.models import Product
from vending_service.transaction_log import JsonLinesLogStore, TransactionLogger


def test_coin_stock_is_loaded_with_change_denominations():
    stock = create_coin_stock(10)
    assert stock.get_all_coins() == {200: 10, 100: 10, 50: 10, 20: 10, 10: 10}


def test_default_machine():
    machine = create_vending_machine()
    assert machine.get_coin_stock().get_coin_count(50) == 10
    assert len(machine.get_products()) == 6
    assert machine.get_logger() is None
    assert machine.get_total_inserted() == 0


def test_machine_with_custom_inventory_and_logger():
    inventory = InMemoryInventory(products={"X1": Product(name="Gum", price=30, category="Candy")},
                                  stock={"X1": 2})
    journal = TransactionLogger()
    machine = create_vending_machine(inventory=inventory, logger=journal, coin_count=1)

    machine.select_product("X1")
    machine.insert_money(50)
    result = machine.complete_purchase()

    assert result.change_coins == [20]
    assert inventory.get_stock("X1") == 1
    assert machine.get_coin_stock().get_coin_count(20) == 0
    assert journal.get_sales_total() == 30


def test_end_to_end_session(tmp_path):
    journal = TransactionLogger(JsonLinesLogStore(str(tmp_path / "tx.jsonl")))
    machine = create_vending_machine(logger=journal)

    machine.insert_money(100)
    machine.select_product("A1")
    with pytest.raises(InsufficientMoneyError):
        machine.complete_purchase()
    machine.insert_money(50)
    machine.complete_purchase()
    machine.restock("A1", 2)

    assert [event.type for event in journal.get_all_logs()] == ["ERROR", "SALE", "RESTOCK"]
    assert machine.get_products()[0].stock == 6


def test_setup_logging_quiets_pika(tmp_path):
    setup_logging(str(tmp_path / "service.log"))
    assert logging.getLogger("pika").level == logging.WARNING
    assert get_logger("vending_service.machine") is logging.getLogger("vending_service.machine")
