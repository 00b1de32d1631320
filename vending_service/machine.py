"""
machine.py — Vending Transaction Orchestration

This module contains the transaction logic of a single coin-operated machine.
It sequences money insertion, product selection, purchase and refund against
two independent resources, the product Inventory and the CoinStock.

Transaction Overview:
1. insert_money() accumulates credit.
2. select_product() picks a product (any order relative to step 1).
3. complete_purchase() validates, then commits change, stock and credit.
4. refund_money() returns all remaining credit in coins.

Every check runs before anything is mutated, so a failed operation leaves the
machine exactly as it was and can simply be retried. All mutating operations
hold the machine lock for their whole check-then-commit sequence; events are
sent to the transaction log after the lock is released.
"""

import logging
import time
import uuid
from threading import RLock
from typing import Any, Callable, Dict, List, Optional

from .coin_stock import CoinStock
from .errors import (CannotMakeChangeError, InsufficientMoneyError, OutOfStockError,
                     ProductNotFoundError, VendingError)
from .inventory import InMemoryInventory, Inventory
from .models import Product, ProductDisplay, PurchaseResult, RefundResult
from .transaction_log import TransactionLogSink

log = logging.getLogger(__name__)

CANNOT_MAKE_CHANGE_MESSAGE = "Cannot provide change - exact payment required"


def generate_session_id() -> str:
    return f"session-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


class VendingMachine:
    """
    A single-session vending machine.

    Args:
        inventory (Inventory, optional): Product catalog and stock. Defaults to
            an InMemoryInventory with the standard catalog.
        coin_stock (CoinStock, optional): Coins available for change. Defaults
            to an empty stock.
        logger (TransactionLogSink, optional): Receives sale, error and restock
            events. Without one, nothing is reported.
        session_id_factory (callable, optional): Produces the session id once,
            at construction. The id stays the same for the machine's lifetime.
    """

    def __init__(self, inventory: Optional[Inventory] = None, coin_stock: Optional[CoinStock] = None,
                 logger: Optional[TransactionLogSink] = None,
                 session_id_factory: Callable[[], str] = generate_session_id):
        self.inventory = inventory if inventory is not None else InMemoryInventory()
        self._coin_stock = coin_stock if coin_stock is not None else CoinStock()
        self._logger = logger
        self._session_id = session_id_factory()
        self._lock = RLock()

        self._total_inserted = 0
        self._selected_product: Optional[Product] = None
        self._selected_code: Optional[str] = None

        self._log_prefix = f"[Session: {self._session_id}]"

    # --- Operations ---

    def insert_money(self, amount: int) -> None:
        """
        Adds `amount` cents to the credit.

        Raises:
            InsufficientMoneyError: If `amount` is zero or negative.
        """
        try:
            if amount <= 0:
                raise InsufficientMoneyError(
                    "Invalid amount. Please insert a positive amount.",
                    {"action": "insertMoney", "amount": amount, "reason": "Invalid amount - must be positive"},
                )
            with self._lock:
                self._total_inserted += amount
                total = self._total_inserted
        except VendingError as e:
            self._report_error(e)
            raise

        log.info(f"{self._log_prefix} Inserted {amount}, credit is now {total}.")

    def select_product(self, code: str) -> Product:
        """
        Makes `code` the current selection.

        Returns:
            Product: The selected product (name, price, category).

        Raises:
            ProductNotFoundError: If the inventory does not know `code`.
        """
        try:
            with self._lock:
                product = self.inventory.get_product(code)
                if product is None:
                    raise ProductNotFoundError("Product not found", {"productCode": code, "action": "selectProduct"})
                self._selected_product = product
                self._selected_code = code
        except VendingError as e:
            self._report_error(e)
            raise

        log.info(f"{self._log_prefix} Selected {code} ({product.name}, {product.price}).")
        return product

    def complete_purchase(self) -> PurchaseResult:
        """
        Sells the selected product.

        Preconditions are checked in this order, and the first one that fails
        raises without changing any state:
            1. A product is selected.
            2. The inventory has stock for it.
            3. The credit covers the price.
            4. The coin stock can return the exact change, if any is due.

        On success the change is taken from the coin stock, one unit is removed
        from the inventory, the price and the dispensed change are deducted
        from the credit and the selection is cleared.

        Returns:
            PurchaseResult: Change, product name and change coins. Its
                remaining_credit is always 0, since no credit is carried over.

        Raises:
            ProductNotFoundError: No product selected.
            OutOfStockError: The selected product is sold out.
            InsufficientMoneyError: Credit is below the price.
            CannotMakeChangeError: The change cannot be paid out from the coin stock.
        """
        try:
            with self._lock:
                product, code = self._selected_product, self._selected_code
                if product is None or code is None:
                    raise ProductNotFoundError(
                        "No product selected",
                        {"action": "completePurchase", "reason": "No product selected"},
                    )

                if not self.inventory.has_stock(code):
                    raise OutOfStockError("Out of stock", {"productCode": code, "productName": product.name})

                if self._total_inserted < product.price:
                    raise InsufficientMoneyError(
                        "Insufficient money",
                        {
                            "productCode": code,
                            "productPrice": product.price,
                            "amountInserted": self._total_inserted,
                            "shortfall": product.price - self._total_inserted,
                        },
                    )

                change_needed = self._total_inserted - product.price
                change_coins: Optional[List[int]] = []
                if change_needed > 0:
                    if self._coin_stock.can_make_change(change_needed):
                        # Still None if the stock was changed behind the machine's back
                        change_coins = self._coin_stock.make_change(change_needed)
                    else:
                        change_coins = None
                    if change_coins is None:
                        raise CannotMakeChangeError(
                            CANNOT_MAKE_CHANGE_MESSAGE,
                            {
                                "productCode": code,
                                "changeNeeded": change_needed,
                                "availableCoins": self._available_coins(),
                            },
                        )

                self.inventory.remove_item(code)
                amount_paid = self._total_inserted
                # Dispensed change is paid out of the credit as well
                self._total_inserted -= product.price + change_needed
                remaining_credit = self._total_inserted
                self._selected_product = None
                self._selected_code = None
        except VendingError as e:
            self._report_error(e)
            raise

        log.info(f"{self._log_prefix} Sold {code} for {product.price}, change {change_needed} {change_coins}.")
        logger = self._logger
        if logger is not None:
            self._notify(
                logger.log_sale,
                product_code=code,
                product_name=product.name,
                price=product.price,
                amount_paid=amount_paid,
                change=change_needed,
                change_coins=change_coins,
            )
        return PurchaseResult(
            change=change_needed,
            remaining_credit=remaining_credit,
            product_dispensed=product.name,
            change_coins=change_coins,
        )

    def refund_money(self) -> RefundResult:
        """
        Returns the whole credit in coins.

        If the coin stock cannot pay out the credit exactly, the credit stays
        on the machine.

        Raises:
            InsufficientMoneyError: There is no credit.
            CannotMakeChangeError: The credit cannot be paid out from the coin stock.
        """
        try:
            with self._lock:
                if self._total_inserted <= 0:
                    raise InsufficientMoneyError(
                        "No credit to refund",
                        {"action": "refundMoney", "reason": "No credit to refund"},
                    )

                coins = self._coin_stock.make_change(self._total_inserted)
                if coins is None:
                    raise CannotMakeChangeError(
                        CANNOT_MAKE_CHANGE_MESSAGE,
                        {
                            "action": "refundMoney",
                            "amountToRefund": self._total_inserted,
                            "availableCoins": self._available_coins(),
                        },
                    )

                refunded = self._total_inserted
                self._total_inserted = 0
        except VendingError as e:
            self._report_error(e)
            raise

        log.info(f"{self._log_prefix} Refunded {refunded} as {coins}.")
        return RefundResult(refunded_amount=refunded, change_coins=coins)

    def restock(self, code: str, quantity: int) -> int:
        """
        Adds `quantity` units of an existing product and logs a RESTOCK event.

        Returns:
            int: The new stock level.

        Raises:
            ValueError: If `quantity` is not positive.
            ProductNotFoundError: If the inventory does not know `code`.
        """
        if quantity <= 0:
            raise ValueError(f"Restock quantity must be positive: {quantity}")

        try:
            with self._lock:
                if self.inventory.get_product(code) is None:
                    raise ProductNotFoundError("Product not found", {"productCode": code, "action": "restock"})
                self.inventory.add_stock(code, quantity)
                new_stock = self.inventory.get_stock(code)
        except VendingError as e:
            self._report_error(e)
            raise

        log.info(f"{self._log_prefix} Restocked {code} by {quantity}, now {new_stock}.")
        logger = self._logger
        if logger is not None:
            self._notify(logger.log_restock, product_code=code, quantity_added=quantity, new_stock=new_stock)
        return new_stock

    # --- Accessors ---

    def get_total_inserted(self) -> int:
        return self._total_inserted

    def get_selected_product(self) -> Optional[Product]:
        return self._selected_product

    def get_products(self) -> List[ProductDisplay]:
        return self.inventory.list_products()

    def get_coin_stock(self) -> CoinStock:
        return self._coin_stock

    def get_current_session_id(self) -> str:
        return self._session_id

    def get_logger(self) -> Optional[TransactionLogSink]:
        return self._logger

    def set_logger(self, logger: Optional[TransactionLogSink]) -> None:
        self._logger = logger

    # --- Internals ---

    def _available_coins(self) -> Dict[str, int]:
        return {str(value): count for value, count in self._coin_stock.get_all_coins().items()}

    def _report_error(self, error: VendingError) -> None:
        log.warning(f"{self._log_prefix} {error.error_type.value}: {error} {error.context}")
        logger = self._logger
        if logger is not None:
            self._notify(logger.log_error, error_type=error.error_type, context=error.context)

    def _notify(self, send: Callable[..., None], **event: Any) -> None:
        """Calls a logger method with the session id. Logger failures are logged and dropped."""
        try:
            send(session_id=self._session_id, **event)
        except Exception as e:
            log.error(f"{self._log_prefix} Transaction log call {send!r} failed: {e}", exc_info=True)
