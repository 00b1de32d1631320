"""
worker.py — Transaction Journal Worker

Process entry point that drains the RabbitMQ transaction queue into the
JSON-lines journal. Machines publish through TransactionEventPublisher; this
worker is the only writer of TRANSACTION_LOG_FILE.

Run with:
    vending-transaction-worker
    python -m vending_service.worker
"""

from .clients import start_transaction_event_listener
from .config import RABBITMQ_HOST, TRANSACTION_LOG_FILE, TRANSACTION_QUEUE
from .logging_config import get_logger, setup_logging
from .transaction_log import JsonLinesLogStore


def main():
    setup_logging()
    log = get_logger(__name__)
    log.info(f"Transaction worker starting: {RABBITMQ_HOST}/{TRANSACTION_QUEUE} -> {TRANSACTION_LOG_FILE}")

    start_transaction_event_listener(JsonLinesLogStore(TRANSACTION_LOG_FILE), host=RABBITMQ_HOST,
                                     queue=TRANSACTION_QUEUE)
    log.info("Transaction worker stopped.")


if __name__ == "__main__":
    main()
