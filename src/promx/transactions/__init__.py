"""Transaction history persistence -- SQLite database manager and typed read/write store."""

from promx.transactions.database import TransactionDatabase
from promx.transactions.store import TransactionHistoryStore

__all__ = ["TransactionDatabase", "TransactionHistoryStore"]
