"""
inventory.py — Product Catalog and Stock

The machine only talks to the Inventory interface. InMemoryInventory is the
default implementation, seeded with the standard six-slot catalog.
"""

from abc import ABC, abstractmethod
from threading import Lock
from typing import Dict, List, Optional

from .models import Product, ProductDisplay


class Inventory(ABC):
    """Catalog and stock levels the machine sells from."""

    @abstractmethod
    def has_stock(self, code: str) -> bool:
        ...

    @abstractmethod
    def get_stock(self, code: str) -> int:
        ...

    @abstractmethod
    def remove_item(self, code: str) -> None:
        """Decrements stock by one; no-op when the stock is already zero."""

    @abstractmethod
    def add_stock(self, code: str, quantity: int) -> None:
        ...

    @abstractmethod
    def get_product(self, code: str) -> Optional[Product]:
        ...

    @abstractmethod
    def list_products(self) -> List[ProductDisplay]:
        ...


DEFAULT_CATALOG: Dict[str, Product] = {
    "A1": Product(name="Coca Cola", price=150, category="Soda"),
    "A2": Product(name="Pepsi", price=140, category="Soda"),
    "B1": Product(name="Snickers", price=120, category="Candy"),
    "B2": Product(name="Mars Bar", price=130, category="Candy"),
    "C1": Product(name="Water Bottle", price=100, category="Water"),
    "C2": Product(name="Orange Juice", price=160, category="Juice"),
}

DEFAULT_STOCK = 5


class InMemoryInventory(Inventory):
    """
    Dictionary-backed inventory.

    Args:
        products (dict, optional): code -> Product. Defaults to DEFAULT_CATALOG.
        stock (dict, optional): code -> units. Codes missing here start at
            DEFAULT_STOCK when the catalog is the default one, else at zero.
    """

    def __init__(self, products: Optional[Dict[str, Product]] = None,
                 stock: Optional[Dict[str, int]] = None):
        self._lock = Lock()
        self._products: Dict[str, Product] = dict(DEFAULT_CATALOG if products is None else products)
        initial = DEFAULT_STOCK if products is None else 0
        self._stock: Dict[str, int] = {code: initial for code in self._products}
        for code, units in (stock or {}).items():
            self._stock[code] = max(0, units)

    def add_product(self, code: str, product: Product, stock: int = 0) -> None:
        with self._lock:
            self._products[code] = product
            self._stock[code] = max(0, stock)

    def has_stock(self, code: str) -> bool:
        return self.get_stock(code) > 0

    def get_stock(self, code: str) -> int:
        with self._lock:
            return self._stock.get(code, 0)

    def remove_item(self, code: str) -> None:
        with self._lock:
            current = self._stock.get(code, 0)
            if current > 0:
                self._stock[code] = current - 1

    def add_stock(self, code: str, quantity: int) -> None:
        if quantity <= 0:
            return
        with self._lock:
            self._stock[code] = self._stock.get(code, 0) + quantity

    def get_product(self, code: str) -> Optional[Product]:
        with self._lock:
            return self._products.get(code)

    def list_products(self) -> List[ProductDisplay]:
        with self._lock:
            return [
                ProductDisplay(
                    code=code,
                    name=product.name,
                    price=product.price,
                    category=product.category,
                    stock=self._stock.get(code, 0),
                )
                for code, product in self._products.items()
            ]
