"""
errors.py — Error Taxonomy for Vending Transactions

Every failed operation raises one of the four recoverable error kinds below.
Each exception carries its kind and the structured context that is also
forwarded to the transaction log.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(str, Enum):
    INSUFFICIENT_MONEY = "INSUFFICIENT_MONEY"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    CANNOT_MAKE_CHANGE = "CANNOT_MAKE_CHANGE"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"


class VendingError(Exception):
    """
    Base class for all transaction failures.

    Attributes:
        error_type (ErrorType): The kind of failure.
        context (dict): Structured details about the failed operation.
    """
    error_type: ErrorType

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = dict(context or {})


class InsufficientMoneyError(VendingError):
    error_type = ErrorType.INSUFFICIENT_MONEY


class OutOfStockError(VendingError):
    error_type = ErrorType.OUT_OF_STOCK


class CannotMakeChangeError(VendingError):
    error_type = ErrorType.CANNOT_MAKE_CHANGE


class ProductNotFoundError(VendingError):
    error_type = ErrorType.PRODUCT_NOT_FOUND
