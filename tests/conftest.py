"""Shared fixtures for tests."""

from __future__ import annotations

import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Generator

import pytest

# Set up test database before importing storage
_test_db_fd, _test_db_path = tempfile.mkstemp(suffix=".db")
os.environ["QUOTER_DB"] = _test_db_path


@pytest.fixture(scope="session", autouse=True)
def setup_test_db() -> Generator[Path, None, None]:
    """Set up a test database for the entire test session."""
    import storage

    storage.DB_PATH = Path(_test_db_path)
    storage.init_db()

    yield Path(_test_db_path)

    # Cleanup
    os.close(_test_db_fd)
    os.unlink(_test_db_path)


@pytest.fixture
def temp_database(tmp_path, monkeypatch):
    """Point storage at a fresh database for one test."""
    import storage

    monkeypatch.setattr(storage, "DB_PATH", tmp_path / "test_quoter.db")
    storage.init_db()

    yield storage


@pytest.fixture
def rates():
    """Default rates: 160 normal, 190 overtime, 210 weekend, 235 public holiday."""
    from models import Rates

    return Rates()


@pytest.fixture
def weekday_shift():
    """A standard 06:00-18:00 weekday shift with half an hour travel each way."""
    from models import Shift

    return Shift(
        id=1,
        date=date(2026, 1, 27),
        day_type="weekday",
        start_time="06:00",
        finish_time="18:00",
        travel_in=0.5,
        travel_out=0.5,
        tech="Tech 1",
    )


@pytest.fixture
def sample_quote():
    """A draft quote with a weekday shift, a weekend shift and some extras."""
    from models import ExtraItem, InternalExpense, JobDetails, Quote, Rates, Shift

    rates = Rates(travel_charge_ex_brisbane=50.0)
    return Quote(
        id="quote-1",
        quote_number="0007",
        status="draft",
        rates=rates,
        job_details=JobDetails(
            customer="Acme Mining",
            job_no="J1234",
            location="Mackay",
            technicians=["Tech 1", "Tech 2"],
            reporting_time=2.0,
        ),
        shifts=[
            Shift(
                id=1,
                date=date(2026, 1, 23),
                day_type="weekday",
                start_time="06:00",
                finish_time="18:00",
                travel_in=0.5,
                travel_out=0.5,
                tech="Tech 1",
            ),
            Shift(
                id=2,
                date=date(2026, 1, 24),
                day_type="weekend",
                start_time="06:00",
                finish_time="16:00",
                travel_in=1.0,
                travel_out=1.0,
                vehicle=True,
                tech="Tech 2",
            ),
        ],
        extras=[
            ExtraItem(id=1, description="Accommodation", cost=0.0),
            ExtraItem(id=2, description="Parts", cost=100.0),
        ],
        internal_expenses=[InternalExpense(id="e1", description="Flights", cost=300.0)],
    )
