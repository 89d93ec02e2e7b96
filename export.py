"""Excel export of a quote's timesheet and totals."""

from __future__ import annotations

import logging
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font

import quote as quotes
from models import Quote
from utils import DAY_TYPE_LABELS

logger = logging.getLogger(__name__)

HEADER_FONT = Font(bold=True)

TIMESHEET_HEADERS = [
    "Date", "Tech", "Day Type", "Night", "Start", "Finish",
    "Travel In", "Travel Out",
    "Travel In NT", "Travel In OT", "Site NT", "Site OT", "Travel Out NT", "Travel Out OT",
    "Total Hours", "Site Hours", "Vehicle", "Per Diem", "Cost",
]


def _write_timesheet(ws, quote: Quote) -> None:
    for col, header in enumerate(TIMESHEET_HEADERS, start=1):
        ws.cell(row=1, column=col, value=header).font = HEADER_FONT

    for row, (shift, result) in enumerate(quotes.shift_results(quote), start=2):
        b = result.breakdown
        values = [
            shift.date.isoformat() if shift.date else "",
            shift.tech,
            DAY_TYPE_LABELS.get(shift.day_type, shift.day_type),
            "Y" if shift.is_night_shift else "",
            shift.start_time,
            shift.finish_time,
            shift.travel_in,
            shift.travel_out,
            b.travel_in_nt, b.travel_in_ot,
            b.site_nt, b.site_ot,
            b.travel_out_nt, b.travel_out_ot,
            b.total_hours,
            round(b.site_hours, 2),
            "Y" if shift.vehicle else "",
            "Y" if shift.per_diem else "",
            round(result.cost, 2),
        ]
        for col, value in enumerate(values, start=1):
            ws.cell(row=row, column=col, value=value)


def _write_summary(ws, quote: Quote) -> None:
    details = quote.job_details
    normal, penalty = quotes.labour_costs(quote)
    vehicles, per_diems = quotes.allowance_counts(quote)

    rows: list[tuple[str, object]] = [
        ("Quote", quote.quote_number),
        ("Customer", details.customer),
        ("Job No", details.job_no),
        ("Location", details.location),
        ("Status", quote.status),
        ("", None),
        ("Total Hours", round(quotes.total_hours(quote), 2)),
        ("NT Hours", round(quotes.total_nt_hours(quote), 2)),
        ("OT Hours", round(quotes.total_ot_hours(quote), 2)),
        ("", None),
        ("Labour (Normal)", round(normal, 2)),
        ("Labour (Overtime)", round(penalty, 2)),
        ("Vehicle Allowances", round(vehicles * quote.rates.vehicle, 2)),
        ("Per Diems", round(per_diems * quote.rates.per_diem, 2)),
        ("Reporting Time", round(quotes.reporting_cost(quote), 2)),
        ("Travel Charge", round(quotes.travel_charge_cost(quote), 2)),
    ]
    for extra in quote.extras:
        if extra.cost:
            rows.append((extra.description or "Extra Item", round(extra.cost, 2)))
    rows.append(("Total", round(quotes.total_cost(quote), 2)))

    for row, (label, value) in enumerate(rows, start=1):
        cell = ws.cell(row=row, column=1, value=label or None)
        cell.font = HEADER_FONT
        ws.cell(row=row, column=2, value=value)


def export_quote_xlsx(quote: Quote, path: str | Path) -> Path:
    """Write a workbook with Timesheet and Summary sheets."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Timesheet"
    _write_timesheet(ws, quote)
    _write_summary(wb.create_sheet("Summary"), quote)

    path = Path(path)
    wb.save(path)
    logger.info("Exported quote %s to %s", quote.quote_number, path)
    return path
