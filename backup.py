#!/usr/bin/env python3
"""Export and restore quoter data as a JSON backup."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

import storage
from models import Rates

logger = logging.getLogger(__name__)


class BackupError(ValueError):
    """Raised when a backup file cannot be read."""


def backup_filename(now: datetime | None = None) -> str:
    now = now or datetime.now()
    timestamp = now.strftime("%Y-%m-%dT%H-%M-%S")
    return f"{now.date().isoformat()}_ServiceQuoterBackup_{timestamp}.json"


def build_state(now: datetime | None = None) -> dict:
    """Collect everything that goes into a backup."""
    now = now or datetime.now()
    return {
        "savedQuotes": [q.to_dict() for q in storage.get_all_quotes()],
        "savedCustomers": [c.to_dict() for c in storage.get_all_customers()],
        "savedDefaultRates": storage.get_default_rates().to_dict(),
        "savedTechnicians": storage.get_technicians(),
        "exportDate": now.isoformat(),
    }


def export_state(path: Path | None = None, directory: Path | None = None) -> Path:
    """Write a backup file and return where it went."""
    now = datetime.now()
    if path is None:
        path = (directory or Path.cwd()) / backup_filename(now)

    with open(path, "w") as f:
        json.dump(build_state(now), f, indent=2)

    logger.info("Backup written to %s", path)
    return path


def import_state(text: str) -> int:
    """Restore quotes, default rates and technicians from backup JSON.

    Customers in the backup are left alone so an old backup cannot overwrite
    the shared customer list. Returns the number of quotes imported.
    """
    try:
        state = json.loads(text)
    except json.JSONDecodeError as e:
        raise BackupError(f"Backup is not valid JSON: {e}") from e

    if not isinstance(state, dict):
        raise BackupError("Backup must be a JSON object")

    count = 0
    quotes = state.get("savedQuotes")
    if isinstance(quotes, list):
        try:
            count = storage.import_quotes(quotes)
        except (OverflowError, TypeError, ValueError) as e:
            raise BackupError(f"Backup contains a quote that cannot be stored: {e}") from e

    rates = state.get("savedDefaultRates")
    if isinstance(rates, dict):
        storage.save_default_rates(Rates.from_dict(rates))

    technicians = state.get("savedTechnicians")
    if isinstance(technicians, list):
        storage.replace_technicians(technicians)

    return count


def import_file(path: Path) -> int:
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise BackupError(f"Cannot read backup {path}: {e}") from e
    return import_state(text)


if __name__ == "__main__":
    import sys

    storage.init_db()
    if len(sys.argv) > 1:
        try:
            imported = import_file(Path(sys.argv[1]))
        except BackupError as e:
            print(f"Restore failed: {e}")
            sys.exit(1)
        print(f"Imported {imported} quotes")
    else:
        print(f"Backup written to {export_state()}")
