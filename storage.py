from __future__ import annotations

import json
import logging
import os
import sqlite3
import time
from pathlib import Path
from typing import Iterable

from models import Config, Customer, Quote, Rates

logger = logging.getLogger(__name__)


def _get_db_path() -> Path:
    """Get database path from environment variable or default location."""
    if env_path := os.environ.get("QUOTER_DB"):
        return Path(env_path)
    return Path(__file__).parent / "data" / "quoter.db"


DB_PATH = _get_db_path()


def get_connection() -> sqlite3.Connection:
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db():
    """Create tables if they don't exist."""
    conn = get_connection()
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS quotes (
            id TEXT PRIMARY KEY,
            quote_number TEXT NOT NULL,
            status TEXT NOT NULL,
            last_modified INTEGER NOT NULL,
            data TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS customers (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            data TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS technicians (
            name TEXT PRIMARY KEY
        );

        CREATE TABLE IF NOT EXISTS config (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_quotes_modified ON quotes(last_modified);
    """)
    conn.commit()
    conn.close()


def _now_ms() -> int:
    return int(time.time() * 1000)


# --- Quote Functions ---


def _row_to_quote(row: sqlite3.Row) -> Quote:
    return Quote.from_dict(json.loads(row["data"]))


def _upsert_quote(conn: sqlite3.Connection, quote: Quote) -> None:
    conn.execute(
        """
        INSERT OR REPLACE INTO quotes (id, quote_number, status, last_modified, data)
        VALUES (?, ?, ?, ?, ?)
        """,
        (
            quote.id,
            quote.quote_number,
            quote.status,
            quote.last_modified,
            json.dumps(quote.to_dict()),
        ),
    )


def save_quote(quote: Quote, touch: bool = True) -> None:
    """Insert or update a quote, stamping lastModified unless told not to."""
    if touch:
        quote.last_modified = _now_ms()
    conn = get_connection()
    _upsert_quote(conn, quote)
    conn.commit()
    conn.close()
    logger.debug("Saved quote %s (%s)", quote.quote_number, quote.id)


def get_quote(quote_id: str) -> Quote | None:
    """Get a single quote by ID."""
    conn = get_connection()
    row = conn.execute("SELECT * FROM quotes WHERE id = ?", (quote_id,)).fetchone()
    conn.close()
    return _row_to_quote(row) if row else None


def get_all_quotes() -> list[Quote]:
    """Get all quotes, most recently modified first."""
    conn = get_connection()
    rows = conn.execute("SELECT * FROM quotes ORDER BY last_modified DESC, quote_number DESC").fetchall()
    conn.close()
    return [_row_to_quote(row) for row in rows]


def delete_quote(quote_id: str) -> None:
    conn = get_connection()
    conn.execute("DELETE FROM quotes WHERE id = ?", (quote_id,))
    conn.commit()
    conn.close()
    logger.info("Deleted quote %s", quote_id)


def import_quotes(documents: Iterable[dict]) -> int:
    """Bulk upsert quote documents. Documents without an id are skipped."""
    conn = get_connection()
    count = 0
    try:
        for doc in documents:
            if not isinstance(doc, dict) or not doc.get("id"):
                logger.warning("Skipping quote document without an id")
                continue
            _upsert_quote(conn, Quote.from_dict(doc))
            count += 1
        conn.commit()
    finally:
        # Uncommitted rows are rolled back, so a failed import writes nothing
        conn.close()
    logger.info("Imported %d quotes", count)
    return count


# --- Customer Functions ---


def save_customer(customer: Customer) -> None:
    conn = get_connection()
    conn.execute(
        "INSERT OR REPLACE INTO customers (id, name, data) VALUES (?, ?, ?)",
        (customer.id, customer.name, json.dumps(customer.to_dict())),
    )
    conn.commit()
    conn.close()


def get_customer(customer_id: str) -> Customer | None:
    conn = get_connection()
    row = conn.execute("SELECT * FROM customers WHERE id = ?", (customer_id,)).fetchone()
    conn.close()
    return Customer.from_dict(json.loads(row["data"])) if row else None


def get_all_customers() -> list[Customer]:
    """Get all customers ordered by name."""
    conn = get_connection()
    rows = conn.execute("SELECT * FROM customers ORDER BY name").fetchall()
    conn.close()
    return [Customer.from_dict(json.loads(row["data"])) for row in rows]


def delete_customer(customer_id: str) -> None:
    conn = get_connection()
    conn.execute("DELETE FROM customers WHERE id = ?", (customer_id,))
    conn.commit()
    conn.close()


# --- Technician Functions ---


def get_technicians() -> list[str]:
    conn = get_connection()
    rows = conn.execute("SELECT name FROM technicians ORDER BY name").fetchall()
    conn.close()
    return [row["name"] for row in rows]


def save_technician(name: str) -> None:
    """Add a technician name if not already saved."""
    conn = get_connection()
    conn.execute("INSERT OR IGNORE INTO technicians (name) VALUES (?)", (name,))
    conn.commit()
    conn.close()


def delete_technician(name: str) -> None:
    conn = get_connection()
    conn.execute("DELETE FROM technicians WHERE name = ?", (name,))
    conn.commit()
    conn.close()


def replace_technicians(names: Iterable[str]) -> None:
    conn = get_connection()
    conn.execute("DELETE FROM technicians")
    conn.executemany(
        "INSERT OR IGNORE INTO technicians (name) VALUES (?)",
        [(str(n),) for n in names],
    )
    conn.commit()
    conn.close()


# --- Config Functions ---


def _get_value(key: str) -> str | None:
    conn = get_connection()
    row = conn.execute("SELECT value FROM config WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else None


def _set_value(key: str, value: str) -> None:
    conn = get_connection()
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)", (key, value))
    conn.commit()
    conn.close()


def get_default_rates() -> Rates:
    """Load the rates new quotes start with."""
    value = _get_value("default_rates")
    if not value:
        return Rates()
    return Rates.from_dict(json.loads(value))


def save_default_rates(rates: Rates) -> None:
    _set_value("default_rates", json.dumps(rates.to_dict()))


def get_config() -> Config:
    """Load config from database."""
    conn = get_connection()
    rows = conn.execute("SELECT key, value FROM config").fetchall()
    conn.close()

    config = Config()
    for row in rows:
        if row["key"] == "currency":
            config.currency = row["value"]
        elif row["key"] == "holiday_subdiv":
            config.holiday_subdiv = row["value"]

    return config


def save_config(config: Config):
    """Save config to database."""
    conn = get_connection()
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("currency", config.currency))
    conn.execute("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
                 ("holiday_subdiv", config.holiday_subdiv))
    conn.commit()
    conn.close()
