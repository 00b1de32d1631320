"""
config.py — Environment Settings for the Vending Service

All values are read once at import time. Defaults target a local
development machine with a RabbitMQ broker on localhost.
"""

import os

# RabbitMQ (transaction event transport)
RABBITMQ_HOST = os.environ.get("RABBITMQ_HOST", "localhost")
RABBITMQ_USER = os.environ.get("RABBITMQ_USER", "vending")
RABBITMQ_PASSWORD = os.environ.get("RABBITMQ_PASSWORD", "vending")
TRANSACTION_QUEUE = os.environ.get("TRANSACTION_QUEUE", "vending.transactions")

# Log destinations
SERVICE_LOG_FILE = os.environ.get("SERVICE_LOG_FILE", "vending_service.log")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
TRANSACTION_LOG_FILE = os.environ.get("TRANSACTION_LOG_FILE", "transactions.jsonl")

# Coins of each change denomination loaded into a freshly built machine
INITIAL_COIN_COUNT = int(os.environ.get("INITIAL_COIN_COUNT", "10"))
