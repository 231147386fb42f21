"""Read/write access to the transaction history table.

Reads use a fixed column projection (date, profit, loss, fee,
walletaddress); rows map 1:1 to TransactionRecord with no pagination
and no filtering. A failed read is logged and returns an empty history
rather than an error page.
"""

import aiosqlite

from promx.logging import get_logger
from promx.models import TransactionRecord
from promx.transactions.database import TransactionDatabase

logger = get_logger(__name__)

HISTORY_COLUMNS = ("date", "profit", "loss", "fee", "walletaddress")


def _text(value: object) -> str:
    return "" if value is None else str(value)


class TransactionHistoryStore:
    """Typed access to the transaction history table.

    All SQL goes through self._database.db (the aiosqlite Connection).
    """

    def __init__(self, database: TransactionDatabase) -> None:
        self._database = database

    async def fetch_history(self) -> list[TransactionRecord]:
        """Return every transaction row in insertion order, or [] on failure."""
        columns = ", ".join(HISTORY_COLUMNS)
        try:
            cursor = await self._database.db.execute(
                f"SELECT {columns} FROM {self._database.table} ORDER BY id ASC"
            )
            rows = await cursor.fetchall()
        except (aiosqlite.Error, RuntimeError) as e:
            logger.error("transaction_history_fetch_failed", error=str(e))
            return []

        return [
            TransactionRecord(
                date=_text(row[0]),
                profit=_text(row[1]),
                loss=_text(row[2]),
                fee=_text(row[3]),
                wallet_address=_text(row[4]),
            )
            for row in rows
        ]

    async def insert_transaction(self, record: TransactionRecord) -> int:
        """Append one transaction and return its row id."""
        cursor = await self._database.db.execute(
            f"INSERT INTO {self._database.table} "
            "(date, profit, loss, fee, walletaddress) VALUES (?, ?, ?, ?, ?)",
            (record.date, record.profit, record.loss, record.fee, record.wallet_address),
        )
        await self._database.db.commit()
        logger.debug("transaction_inserted", row_id=cursor.lastrowid)
        return cursor.lastrowid
