"""
transaction_log.py — Transaction Event Logging

The machine reports sales, failures and restocks to a TransactionLogSink it
receives at construction. Where events end up is decided by the sink:

    • TransactionLogger keeps a queryable journal backed by a LogStore
      (in memory or a JSON-lines file) and notifies in-process listeners.
    • clients.TransactionEventPublisher forwards events to RabbitMQ.
"""

import logging
import os
from abc import ABC, abstractmethod
from collections import Counter
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from .errors import ErrorType
from .models import (ErrorLog, RestockLog, SaleLog, TransactionLog, dump_transaction_log,
                     parse_transaction_log, utc_now)

log = logging.getLogger(__name__)

Listener = Callable[[TransactionLog], None]


class TransactionLogSink(ABC):
    """
    Receiver of the machine's domain events.

    Subclasses implement emit(); the log_* helpers build and timestamp the event.
    """

    def log_sale(self, *, product_code: str, product_name: str, price: int, amount_paid: int,
                 change: int, change_coins: Sequence[int], session_id: Optional[str] = None) -> None:
        self.emit(SaleLog(
            product_code=product_code,
            product_name=product_name,
            price=price,
            amount_paid=amount_paid,
            change=change,
            change_coins=list(change_coins),
            session_id=session_id,
        ))

    def log_error(self, *, error_type: ErrorType, context: Dict[str, Any],
                  session_id: Optional[str] = None) -> None:
        self.emit(ErrorLog(error_type=error_type, context=context, session_id=session_id))

    def log_restock(self, *, product_code: str, quantity_added: int, new_stock: int,
                    session_id: Optional[str] = None) -> None:
        self.emit(RestockLog(
            product_code=product_code,
            quantity_added=quantity_added,
            new_stock=new_stock,
            session_id=session_id,
        ))

    @abstractmethod
    def emit(self, event: TransactionLog) -> None:
        ...


# --- Persistence port ---

class LogStore(ABC):
    @abstractmethod
    def load(self) -> List[TransactionLog]:
        ...

    @abstractmethod
    def append(self, event: TransactionLog) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class InMemoryLogStore(LogStore):
    def __init__(self):
        self._events: List[TransactionLog] = []

    def load(self) -> List[TransactionLog]:
        return list(self._events)

    def append(self, event: TransactionLog) -> None:
        self._events.append(event)

    def clear(self) -> None:
        self._events.clear()


class JsonLinesLogStore(LogStore):
    """
    Stores one JSON event per line.

    Lines that cannot be decoded or parsed, such as a line torn by a crash
    during append, are skipped with a warning. The file itself is never
    rewritten on load.
    """

    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[TransactionLog]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "rb") as f:
                lines = f.readlines()
        except OSError as e:
            log.warning(f"Failed to read transaction log {self.path}: {e}")
            return []

        events: List[TransactionLog] = []
        for number, raw in enumerate(lines, start=1):
            if not raw.strip():
                continue
            try:
                events.append(parse_transaction_log(raw.decode("utf-8")))
            except (UnicodeDecodeError, ValidationError) as e:
                log.warning(f"Skipping unreadable line {number} of {self.path}: {e}")
        return events

    def append(self, event: TransactionLog) -> None:
        with open(self.path, "a+b") as f:
            # Terminate a torn last line so the new event starts on its own line
            if f.seek(0, os.SEEK_END) > 0:
                f.seek(-1, os.SEEK_END)
                if f.read(1) != b"\n":
                    f.write(b"\n")
            f.write(dump_transaction_log(event).encode("utf-8") + b"\n")

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)


# --- Journal ---

class TransactionLogger(TransactionLogSink):
    """
    Queryable transaction journal.

    Args:
        store (LogStore, optional): Where events are persisted. Defaults to
            an InMemoryLogStore. Existing events are loaded on construction.
    """

    def __init__(self, store: Optional[LogStore] = None):
        self.store = store or InMemoryLogStore()
        self._logs: List[TransactionLog] = self.store.load()
        self._listeners: List[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        """Registers a callback invoked with every new event."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def emit(self, event: TransactionLog) -> None:
        self._logs.append(event)
        self.store.append(event)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                log.error(f"Transaction log listener {listener!r} failed: {e}", exc_info=True)

    def get_all_logs(self) -> List[TransactionLog]:
        return list(self._logs)

    def get_logs_by_type(self, log_type: str) -> List[TransactionLog]:
        return [event for event in self._logs if event.type == log_type]

    def get_logs_by_date(self, date: str) -> List[TransactionLog]:
        """
        Events whose ISO timestamp starts with `date`.

        Args:
            date (str): A date prefix such as '2026-10-17' or '2026-10'.
        """
        return [event for event in self._logs if event.timestamp.isoformat().startswith(date)]

    def get_todays_logs(self) -> List[TransactionLog]:
        return self.get_logs_by_date(_today())

    def get_sales_total(self, date: Optional[str] = None) -> int:
        logs = self.get_logs_by_date(date) if date else self._logs
        return sum(event.price for event in logs if event.type == "SALE")

    def get_error_count(self, error_type: Optional[ErrorType] = None) -> int:
        errors = self.get_logs_by_type("ERROR")
        if error_type is None:
            return len(errors)
        return sum(1 for event in errors if event.error_type == error_type)

    def get_most_popular_product(self) -> Optional[Dict[str, Any]]:
        """
        The product sold most often.

        Returns:
            dict: {'product_code', 'product_name', 'count'}, or None without sales.
                Ties go to the product that sold first.
        """
        sales = self.get_logs_by_type("SALE")
        if not sales:
            return None
        counts = Counter(sale.product_code for sale in sales)
        names = {}
        for sale in sales:
            names.setdefault(sale.product_code, sale.product_name)
        code = max(counts, key=counts.get)
        return {"product_code": code, "product_name": names[code], "count": counts[code]}

    def get_todays_revenue(self) -> int:
        return self.get_sales_total(_today())

    def get_todays_sales_count(self) -> int:
        return sum(1 for event in self.get_todays_logs() if event.type == "SALE")

    def get_todays_error_count(self) -> int:
        return sum(1 for event in self.get_todays_logs() if event.type == "ERROR")

    def clear_logs(self) -> None:
        self._logs = []
        self.store.clear()


def _today() -> str:
    return utc_now().date().isoformat()
