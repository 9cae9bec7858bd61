"""Transaction id context shared by the formatter, filter and middleware."""

import logging
import uuid
from contextvars import ContextVar

_transaction_id: ContextVar[str | None] = ContextVar("transaction_id", default=None)


def generate_transaction_id() -> str:
    """Generate a short id used to correlate the log lines of one request."""
    return uuid.uuid4().hex[:8]


def get_transaction_id() -> str:
    """Get the current transaction ID or generate a new one."""
    txn_id = _transaction_id.get()
    if txn_id is None:
        txn_id = generate_transaction_id()
        _transaction_id.set(txn_id)
    return txn_id


def set_transaction_id(txn_id: str) -> None:
    """Set the transaction ID for the current context."""
    _transaction_id.set(txn_id)


class TransactionIdFilter(logging.Filter):
    """Logging filter that adds transaction ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.transaction_id = get_transaction_id()
        return True
