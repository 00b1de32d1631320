"""
clients.py — RabbitMQ Transport for Transaction Events

This module connects the machine's transaction log port to a message broker:
- TransactionEventPublisher: a TransactionLogSink that publishes every event
  to the transaction queue, so the machine never writes to storage itself.
- start_transaction_event_listener: a consumer loop that takes events off the
  queue and appends them to a durable LogStore.
Each part encapsulates its connection handling and error logging.
"""

import functools
import logging
import time
from typing import Optional

import pika
from pydantic import ValidationError

from .config import RABBITMQ_HOST, RABBITMQ_PASSWORD, RABBITMQ_USER, TRANSACTION_QUEUE
from .models import TransactionLog, dump_transaction_log, parse_transaction_log
from .transaction_log import LogStore, TransactionLogSink

log = logging.getLogger(__name__)


def get_mq_connection(host: str = RABBITMQ_HOST, heartbeat: Optional[int] = None):
    """
    Establishes and returns a connection to the RabbitMQ message broker.

    Raises:
        pika.exceptions.AMQPConnectionError: If the broker is unavailable.
    """
    credentials = pika.PlainCredentials(RABBITMQ_USER, RABBITMQ_PASSWORD)
    return pika.BlockingConnection(
        pika.ConnectionParameters(host=host, credentials=credentials, heartbeat=heartbeat)
    )


# --- Publisher ---
class TransactionEventPublisher(TransactionLogSink):
    """
    Publishes sale, error and restock events to RabbitMQ.

    Messages are JSON with camelCase keys and are marked persistent.
    """
    def __init__(self, host: str = RABBITMQ_HOST, queue: str = TRANSACTION_QUEUE):
        """Opens the connection and declares the transaction queue."""
        self.host = host
        self.queue = queue
        self.connection = None
        self.channel = None
        self._connect()

    def _connect(self):
        """
        Raises:
            pika.exceptions.AMQPConnectionError: If the connection fails.
        """
        try:
            self.connection = get_mq_connection(self.host, heartbeat=60)
            self.channel = self.connection.channel()
            self.channel.queue_declare(queue=self.queue, durable=True)
            log.info(f"Transaction publisher connected to RabbitMQ queue '{self.queue}'.")
        except pika.exceptions.AMQPConnectionError as e:
            log.critical(f"Cannot connect to RabbitMQ at {self.host}: {e}")
            raise

    def emit(self, event: TransactionLog) -> None:
        """
        Sends one event to the queue, reconnecting first if the connection dropped.

        Raises:
            pika.exceptions.AMQPError: If publishing fails.
        """
        if not self.connection or self.connection.is_closed:
            self._connect()

        try:
            self.channel.basic_publish(
                exchange='',
                routing_key=self.queue,
                body=dump_transaction_log(event),
                properties=pika.BasicProperties(delivery_mode=2)  # persistent
            )
        except pika.exceptions.AMQPError as e:
            log.error(f"[Session: {event.session_id}] Failed to publish {event.type} event: {e}")
            raise
        log.info(f"[Session: {event.session_id}] {event.type} event published.")

    def close(self):
        if self.connection and self.connection.is_open:
            self.connection.close()


# --- Listener ---
def handle_transaction_message(store: LogStore, ch, method, properties, body):
    """
    Stores one queued event.

    Valid events are appended to `store` and acknowledged; payloads that do not
    parse as an event are rejected without requeue (dead-lettered if configured).
    """
    try:
        event = parse_transaction_log(body)
    except ValidationError as e:
        log.error(f"[TX-LOG] Invalid transaction message received: {body!r} ({e.error_count()} errors)")
        ch.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
        return

    store.append(event)
    log.info(f"[TX-LOG][Session: {event.session_id}] Stored {event.type} event.")
    ch.basic_ack(delivery_tag=method.delivery_tag)


def start_transaction_event_listener(store: LogStore, host: str = RABBITMQ_HOST,
                                     queue: str = TRANSACTION_QUEUE, retry_delay: float = 10):
    """
    Consumes the transaction queue forever, writing every event to `store`.

    Intended to run in a daemon thread or its own process (see worker.py).
    On connection loss, or any other error such as a failing store, it
    restarts after `retry_delay` seconds; Ctrl+C stops it.
    """
    log.info("Transaction event listener starting...")
    callback = functools.partial(handle_transaction_message, store)
    while True:
        try:
            connection = get_mq_connection(host)
            channel = connection.channel()
            channel.queue_declare(queue=queue, durable=True)

            log.info("[TX-LOG] Listener is active.")
            channel.basic_consume(queue=queue, on_message_callback=callback)
            channel.start_consuming()
        except pika.exceptions.AMQPConnectionError:
            log.warning(f"Transaction listener: lost connection to RabbitMQ. Reconnecting in {retry_delay}s...")
            time.sleep(retry_delay)
        except KeyboardInterrupt:
            break
        except Exception as e:
            log.error(f"Transaction listener: unexpected error: {e}. Restarting in {retry_delay}s.", exc_info=True)
            time.sleep(retry_delay)
