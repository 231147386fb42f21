"""aiosqlite connection holder for the transaction history table.

The table name is configurable, so it is validated as a plain identifier
before being formatted into DDL and queries. The schema revision is kept
in SQLite's ``user_version`` pragma.
"""

import os
import re
from typing import Self

import aiosqlite

from promx.logging import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 1

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_HISTORY_DDL = """
CREATE TABLE IF NOT EXISTS {table} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    profit TEXT,
    loss TEXT,
    fee TEXT,
    walletaddress TEXT
)
"""


def validate_table_name(table: str) -> str:
    """Return ``table`` unchanged if it is a bare SQL identifier, else raise ValueError."""
    if not _IDENTIFIER_RE.match(table):
        raise ValueError(f"Invalid table name: {table!r}")
    return table


class TransactionDatabase:
    """Owns the aiosqlite connection used by TransactionHistoryStore.

    Usage:
        async with TransactionDatabase("data/transactions.db") as database:
            history = await TransactionHistoryStore(database).fetch_history()
    """

    def __init__(
        self,
        db_path: str = "data/transactions.db",
        table: str = "transaction_history",
    ) -> None:
        self._db_path = db_path
        self._table = validate_table_name(table)
        self._conn: aiosqlite.Connection | None = None

    @property
    def table(self) -> str:
        return self._table

    @property
    def db(self) -> aiosqlite.Connection:
        """The open connection; RuntimeError until connect() has run."""
        if self._conn is None:
            raise RuntimeError("Transaction database not connected. Call connect() first.")
        return self._conn

    async def connect(self) -> None:
        """Open the database file (creating its directory) and ensure the history table."""
        parent = os.path.dirname(self._db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

        conn = await aiosqlite.connect(self._db_path)
        if self._db_path != ":memory:":
            # Readers are not blocked while a seeding script writes
            await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(_HISTORY_DDL.format(table=self._table))

        cursor = await conn.execute("PRAGMA user_version")
        (version,) = await cursor.fetchone()
        if version < SCHEMA_VERSION:
            await conn.execute(f"PRAGMA user_version={SCHEMA_VERSION}")
        await conn.commit()

        self._conn = conn
        logger.info(
            "transaction_db_connected",
            db_path=self._db_path,
            table=self._table,
            schema_version=max(version, SCHEMA_VERSION),
        )

    async def close(self) -> None:
        if self._conn is None:
            return
        await self._conn.close()
        self._conn = None
        logger.info("transaction_db_closed", db_path=self._db_path)

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        await self.close()
