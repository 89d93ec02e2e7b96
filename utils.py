"""Utility functions for quote dates, tax years and money."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from models import PUBLIC_HOLIDAY, WEEKDAY, WEEKEND, DayType


def get_au_holidays(year: int, subdiv: str = "QLD") -> dict[date, str]:
    """Get Australian public holidays for a state in a given year."""
    import holidays
    au_holidays = holidays.Australia(years=year, subdiv=subdiv)  # type: ignore[attr-defined]
    return {d: name for d, name in au_holidays.items()}


def day_type_for_date(d: date, subdiv: str = "QLD") -> DayType:
    """Work out the billing day type for a date."""
    if d in get_au_holidays(d.year, subdiv):
        return PUBLIC_HOLIDAY
    # Saturday = 5, Sunday = 6
    if d.weekday() >= 5:
        return WEEKEND
    return WEEKDAY


def format_money(value: float) -> str:
    """Format a dollar amount like $1,234.50 (negative as -$1,234.50)."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_hours(value: float) -> str:
    return f"{value:.2f}"


DAY_TYPE_LABELS = {
    WEEKDAY: "Weekday",
    WEEKEND: "Weekend",
    PUBLIC_HOLIDAY: "Public Holiday",
}


# --- Australian tax year (1 July - 30 June) ---


@dataclass(frozen=True)
class TaxYear:
    start_year: int  # e.g. 2024 for FY 2024-25
    end_year: int
    label: str
    start_date: date
    end_date: date


def create_tax_year(start_year: int) -> TaxYear:
    end_year = start_year + 1
    return TaxYear(
        start_year=start_year,
        end_year=end_year,
        label=f"FY {start_year}-{str(end_year)[-2:]}",
        start_date=date(start_year, 7, 1),
        end_date=date(end_year, 6, 30),
    )


def get_tax_year_for_date(d: date) -> TaxYear:
    """Get the tax year a date falls in. July onwards starts a new year."""
    start_year = d.year if d.month >= 7 else d.year - 1
    return create_tax_year(start_year)


def get_current_tax_year() -> TaxYear:
    return get_tax_year_for_date(date.today())


def get_tax_years_from_dates(dates: Iterable[date]) -> list[TaxYear]:
    """Distinct tax years covering the dates, most recent first."""
    years = {get_tax_year_for_date(d).start_year for d in dates}
    if not years:
        return [get_current_tax_year()]
    return [create_tax_year(y) for y in sorted(years, reverse=True)]


def is_date_in_tax_year(d: date, tax_year: TaxYear) -> bool:
    return tax_year.start_date <= d <= tax_year.end_date


def get_months_in_tax_year(tax_year: TaxYear) -> list[date]:
    """First day of each month in the tax year, July to June."""
    months = []
    year, month = tax_year.start_year, 7
    for _ in range(12):
        months.append(date(year, month, 1))
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return months
