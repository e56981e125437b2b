"""SQLite journal store for TradeJournal."""

import logging
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from tradejournal.models import TradeRecord, parse_record

logger = logging.getLogger(__name__)

_TRADE_COLUMNS = [
    "id",
    "date",
    "outcome",
    "direction",
    "stop_loss_distance",
    "take_profit_distance",
    "realized_risk_multiple",
    "consolidation_range_size",
    "activation_time",
    "stop_sweep_notes",
    "general_notes",
]


class StorageError(Exception):
    """Raised when the journal database cannot be written."""


def new_trade_id() -> str:
    """Generate a fresh record identifier."""
    return uuid.uuid4().hex


class JournalStore:
    """SQLite-backed storage for the trade record collection.

    Reads never fail: an unreadable database or a malformed row is
    logged and treated as missing data.
    """

    REQUIRED_TABLES = [
        "trades",
        "attachments",
    ]

    def __init__(self, db_path: Path):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        try:
            conn = self._get_connection()
        except sqlite3.Error as e:
            logger.error("Could not open journal database %s: %s", self.db_path, e)
            return

        try:
            cursor = conn.cursor()

            # Trades table, one row per journal entry
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    id TEXT PRIMARY KEY,
                    date TEXT NOT NULL,
                    outcome TEXT NOT NULL,
                    direction TEXT,
                    stop_loss_distance REAL,
                    take_profit_distance REAL,
                    realized_risk_multiple REAL,
                    consolidation_range_size REAL,
                    activation_time TEXT,
                    stop_sweep_notes TEXT,
                    general_notes TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL
                )
            """)

            # Attachments table, images stored as data URIs
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS attachments (
                    trade_id TEXT NOT NULL,
                    label TEXT NOT NULL,
                    data TEXT NOT NULL,
                    PRIMARY KEY (trade_id, label)
                )
            """)

            conn.commit()
        except sqlite3.DatabaseError as e:
            logger.error("Journal database %s is unreadable: %s", self.db_path, e)
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Trades ====================

    def add_trade(self, record: TradeRecord) -> None:
        """Store a new record with its attachments.

        Args:
            record: Record to store.

        Raises:
            ValueError: If a record with the same id already exists.
            StorageError: If the database cannot be written.
        """
        values = {column: getattr(record, column, None) for column in _TRADE_COLUMNS}
        values["date"] = record.date.isoformat()
        values["outcome"] = record.outcome.value
        if values["direction"] is not None:
            values["direction"] = values["direction"].value

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                INSERT INTO trades ({", ".join(_TRADE_COLUMNS)}, created_at)
                VALUES ({", ".join("?" for _ in _TRADE_COLUMNS)}, ?)
                """,
                (*[values[column] for column in _TRADE_COLUMNS], datetime.now().isoformat()),
            )
            for label, data in record.attachments.items():
                cursor.execute(
                    "INSERT INTO attachments (trade_id, label, data) VALUES (?, ?, ?)",
                    (record.id, label.value, data),
                )
            conn.commit()
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise ValueError(f"Trade {record.id} already exists") from e
        except sqlite3.DatabaseError as e:
            logger.error("Could not store trade %s in %s: %s", record.id, self.db_path, e)
            raise StorageError(f"Journal database {self.db_path} is unreadable: {e}") from e
        finally:
            conn.close()

        logger.debug("Stored trade %s (%s)", record.id, record.outcome.value)

    def delete_trade(self, trade_id: str) -> bool:
        """Delete a record and its attachments.

        Args:
            trade_id: Identifier of the record.

        Returns:
            True if a record was deleted.

        Raises:
            StorageError: If the database cannot be written.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM attachments WHERE trade_id = ?", (trade_id,))
            cursor.execute("DELETE FROM trades WHERE id = ?", (trade_id,))
            deleted = cursor.rowcount > 0
            conn.commit()
        except sqlite3.DatabaseError as e:
            logger.error("Could not delete trade %s from %s: %s", trade_id, self.db_path, e)
            raise StorageError(f"Journal database {self.db_path} is unreadable: {e}") from e
        finally:
            conn.close()

        if deleted:
            logger.debug("Deleted trade %s", trade_id)
        return deleted

    def get_trades(self) -> list[TradeRecord]:
        """Load the whole journal, newest first.

        Returns:
            Every readable record. Returns an empty list if the database
            cannot be read.
        """
        try:
            conn = self._get_connection()
        except sqlite3.Error as e:
            logger.error("Could not open journal database %s: %s", self.db_path, e)
            return []

        try:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {", ".join(_TRADE_COLUMNS)}
                FROM trades
                ORDER BY date DESC, created_at DESC
                """
            )
            rows = cursor.fetchall()
            cursor.execute("SELECT trade_id, label, data FROM attachments")
            attachments: dict[str, dict[str, str]] = {}
            for row in cursor.fetchall():
                attachments.setdefault(row["trade_id"], {})[row["label"]] = row["data"]
        except sqlite3.DatabaseError as e:
            logger.error("Journal database %s is unreadable: %s", self.db_path, e)
            return []
        finally:
            conn.close()

        records = []
        for row in rows:
            record = self._row_to_record(dict(row), attachments.get(row["id"], {}))
            if record is not None:
                records.append(record)
        return records

    def get_trade(self, trade_id: str) -> Optional[TradeRecord]:
        """Get a single record by id."""
        for record in self.get_trades():
            if record.id == trade_id:
                return record
        return None

    def count(self) -> int:
        """Number of readable records in the journal."""
        return len(self.get_trades())

    @staticmethod
    def _row_to_record(row: dict, attachments: dict[str, str]) -> Optional[TradeRecord]:
        data = {key: value for key, value in row.items() if value is not None}
        data["attachments"] = attachments
        try:
            return parse_record(data)
        except ValidationError as e:
            logger.warning("Skipping malformed trade %s: %s", row.get("id"), e)
            return None
