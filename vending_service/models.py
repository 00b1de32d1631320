"""
models.py — Data Models for the Vending Service

This module defines the data structures exchanged between the machine, its
inventory and its transaction log. It uses Pydantic models to ensure type
safety and validation of prices, stock levels and logged events.

Models:
    - Product: A catalog entry (name, price, category).
    - ProductDisplay: A catalog entry together with its code and stock level.
    - PurchaseResult / RefundResult: Successful operation outcomes.
    - SaleLog / ErrorLog / RestockLog: Structured transaction events.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from .errors import ErrorType


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Product(BaseModel):
    """
    A product offered by the machine.

    Attributes:
        name (str): Display name.
        price (int): Price in cents. Must be greater than zero.
        category (str): Free-form category, e.g. 'Soda'.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    price: int = Field(..., gt=0)
    category: str


class ProductDisplay(BaseModel):
    code: str
    name: str
    price: int = Field(..., gt=0)
    category: str
    stock: int = Field(..., ge=0)


class PurchaseResult(BaseModel):
    """
    Outcome of a completed purchase.

    Attributes:
        change (int): Change returned, in cents.
        remaining_credit (int): Credit left on the machine after the sale. Always 0:
            the price and the dispensed change together use up the whole credit.
        product_dispensed (str): Name of the dispensed product.
        change_coins (List[int]): Face values of the coins returned.
    """
    success: bool = True
    change: int
    remaining_credit: int
    product_dispensed: str
    change_coins: List[int] = Field(default_factory=list)


class RefundResult(BaseModel):
    success: bool = True
    refunded_amount: int
    change_coins: List[int]


# --- Transaction events ---

class _LogEvent(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    timestamp: datetime = Field(default_factory=utc_now)
    session_id: Optional[str] = None


class SaleLog(_LogEvent):
    type: Literal["SALE"] = "SALE"
    product_code: str
    product_name: str
    price: int
    amount_paid: int
    change: int
    change_coins: List[int]


class ErrorLog(_LogEvent):
    type: Literal["ERROR"] = "ERROR"
    error_type: ErrorType
    context: Dict[str, Any] = Field(default_factory=dict)


class RestockLog(_LogEvent):
    type: Literal["RESTOCK"] = "RESTOCK"
    product_code: str
    quantity_added: int
    new_stock: int


TransactionLog = Annotated[Union[SaleLog, ErrorLog, RestockLog], Field(discriminator="type")]

transaction_log_adapter = TypeAdapter(TransactionLog)


def parse_transaction_log(raw: Union[str, bytes]) -> TransactionLog:
    """
    Parses one JSON-encoded event into its model.

    Raises:
        pydantic.ValidationError: If the payload is not a valid event.
    """
    return transaction_log_adapter.validate_json(raw)


def dump_transaction_log(event: TransactionLog) -> str:
    return event.model_dump_json(by_alias=True)
