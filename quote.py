"""Quote level totals and editing rules."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Iterable

from logic import calculate_shift_breakdown, round2
from models import (
    PUBLIC_HOLIDAY,
    WEEKDAY,
    WEEKEND,
    CalculatedShift,
    Customer,
    ExtraItem,
    InternalExpense,
    JobDetails,
    Quote,
    Rates,
    Shift,
    Status,
    to_number,
)
from utils import day_type_for_date, format_money


class QuoteLockedError(Exception):
    """Raised when editing a quote that has been quoted or closed."""


LOCKED_STATUSES = ("quoted", "closed")


def default_shift(tech: str = "Tech 1", on: date | None = None) -> Shift:
    return Shift(
        id=1,
        date=on or date.today(),
        day_type=WEEKDAY,
        start_time="06:00",
        finish_time="18:00",
        travel_in=0.5,
        travel_out=0.5,
        tech=tech,
    )


def next_quote_number(quotes: Iterable[Quote]) -> str:
    """Next quote number after the highest numeric one, padded to 4 digits."""
    highest = 0
    for q in quotes:
        try:
            num = int(q.quote_number or "0")
        except ValueError:
            continue
        highest = max(highest, num)
    return str(highest + 1).zfill(4)


def new_quote(existing: Iterable[Quote], default_rates: Rates | None = None) -> Quote:
    return Quote(
        id=str(uuid.uuid4()),
        quote_number=next_quote_number(existing),
        status="draft",
        rates=replace(default_rates) if default_rates else Rates(),
        job_details=JobDetails(),
        shifts=[default_shift()],
        extras=[ExtraItem(id=1, description="Accommodation", cost=0.0)],
    )


def is_locked(quote: Quote) -> bool:
    return quote.status in LOCKED_STATUSES


def _check_unlocked(quote: Quote) -> None:
    if is_locked(quote):
        raise QuoteLockedError(f"Quote {quote.quote_number} is {quote.status}")


# --- Calculations ---


def shift_results(quote: Quote) -> list[tuple[Shift, CalculatedShift]]:
    return [(s, calculate_shift_breakdown(s, quote.rates)) for s in quote.shifts]


def reporting_cost(quote: Quote) -> float:
    return to_number(quote.job_details.reporting_time) * to_number(quote.rates.office_reporting)


def travel_charge_cost(quote: Quote) -> float:
    return to_number(quote.rates.travel_charge_ex_brisbane) * len(quote.job_details.technicians)


def extras_cost(quote: Quote) -> float:
    return sum(to_number(e.cost) for e in quote.extras)


def total_cost(quote: Quote) -> float:
    """Invoice total: shifts, extras, reporting time and travel charge."""
    shifts = sum(result.cost for _, result in shift_results(quote))
    return shifts + extras_cost(quote) + reporting_cost(quote) + travel_charge_cost(quote)


def total_hours(quote: Quote) -> float:
    return sum(result.breakdown.total_hours for _, result in shift_results(quote))


def total_nt_hours(quote: Quote) -> float:
    return sum(result.breakdown.nt_hours for _, result in shift_results(quote))


def total_ot_hours(quote: Quote) -> float:
    return sum(result.breakdown.ot_hours for _, result in shift_results(quote))


def labour_costs(quote: Quote) -> tuple[float, float]:
    """Split shift labour into (normal, penalty) dollars for the invoice.

    Weekday day shifts put their NT buckets at the site normal rate. Every
    other hour is penalty time at the rate for its day type, so the two
    figures plus allowances add up to the shift costs.
    """
    rates = quote.rates
    normal = 0.0
    penalty = 0.0
    for shift, result in shift_results(quote):
        b = result.breakdown
        nt = round2(b.travel_in_nt) + round2(b.site_nt) + round2(b.travel_out_nt)
        ot = round2(b.travel_in_ot) + round2(b.site_ot) + round2(b.travel_out_ot)
        if shift.day_type == PUBLIC_HOLIDAY:
            penalty += (nt + ot) * to_number(rates.public_holiday)
        elif shift.day_type == WEEKEND:
            penalty += (nt + ot) * to_number(rates.weekend)
        else:
            normal += nt * to_number(rates.site_normal)
            penalty += ot * to_number(rates.site_overtime)
    return normal, penalty


def allowance_counts(quote: Quote) -> tuple[int, int]:
    """(vehicle days, per diem nights)."""
    vehicles = sum(1 for s in quote.shifts if s.vehicle)
    per_diems = sum(1 for s in quote.shifts if s.per_diem)
    return vehicles, per_diems


@dataclass
class Profitability:
    revenue: float
    labour_hours: float
    internal_labour_cost: float
    internal_expenses: float
    total_internal_cost: float
    gross_profit: float
    gross_margin: float  # percent


def profitability(quote: Quote) -> Profitability:
    revenue = total_cost(quote)
    hours = total_nt_hours(quote) + total_ot_hours(quote)
    labour = hours * to_number(quote.rates.cost_of_labour)
    expenses = sum(to_number(e.cost) for e in quote.internal_expenses)
    internal = labour + expenses
    profit = revenue - internal
    return Profitability(
        revenue=revenue,
        labour_hours=hours,
        internal_labour_cost=labour,
        internal_expenses=expenses,
        total_internal_cost=internal,
        gross_profit=profit,
        gross_margin=(profit / revenue) * 100 if revenue > 0 else 0.0,
    )


# --- Editing ---


def set_status(quote: Quote, status: Status) -> None:
    """Change status, capturing the quoted amount the first time it is quoted."""
    if status == "quoted" and quote.status != "quoted" and not quote.job_details.original_quote_amount:
        quote.job_details.original_quote_amount = total_cost(quote)
    quote.status = status


def add_shift(quote: Quote, subdiv: str = "QLD") -> Shift:
    """Append a shift on the day after the last one, copying its times and tech."""
    _check_unlocked(quote)
    new_id = max((s.id for s in quote.shifts), default=0) + 1
    last = quote.shifts[-1] if quote.shifts else None

    if last and last.date:
        new_date = last.date + timedelta(days=1)
    else:
        new_date = date.today()

    if last:
        tech = last.tech
    else:
        tech = quote.job_details.technicians[0] if quote.job_details.technicians else "Tech 1"

    shift = Shift(
        id=new_id,
        date=new_date,
        day_type=day_type_for_date(new_date, subdiv),
        start_time=last.start_time if last else "06:00",
        finish_time=last.finish_time if last else "18:00",
        travel_in=0.5,
        travel_out=0.5,
        tech=tech,
    )
    quote.shifts.append(shift)
    return shift


def update_shift(quote: Quote, shift_id: int, **changes) -> Shift | None:
    _check_unlocked(quote)
    for i, s in enumerate(quote.shifts):
        if s.id == shift_id:
            quote.shifts[i] = replace(s, **changes)
            return quote.shifts[i]
    return None


def remove_shift(quote: Quote, shift_id: int) -> None:
    _check_unlocked(quote)
    quote.shifts = [s for s in quote.shifts if s.id != shift_id]


def add_extra(quote: Quote, description: str = "", cost: float = 0.0) -> ExtraItem:
    _check_unlocked(quote)
    extra = ExtraItem(
        id=max((e.id for e in quote.extras), default=0) + 1,
        description=description,
        cost=cost,
    )
    quote.extras.append(extra)
    return extra


def update_extra(quote: Quote, extra_id: int, **changes) -> ExtraItem | None:
    _check_unlocked(quote)
    for i, e in enumerate(quote.extras):
        if e.id == extra_id:
            quote.extras[i] = replace(e, **changes)
            return quote.extras[i]
    return None


def remove_extra(quote: Quote, extra_id: int) -> None:
    _check_unlocked(quote)
    quote.extras = [e for e in quote.extras if e.id != extra_id]


def add_internal_expense(quote: Quote, description: str = "", cost: float = 0.0) -> InternalExpense:
    """Add an internal cost. Allowed on locked quotes."""
    expense = InternalExpense(id=str(uuid.uuid4()), description=description, cost=cost)
    quote.internal_expenses.append(expense)
    return expense


def update_internal_expense(quote: Quote, expense_id: str, **changes) -> InternalExpense | None:
    for i, e in enumerate(quote.internal_expenses):
        if e.id == expense_id:
            quote.internal_expenses[i] = replace(e, **changes)
            return quote.internal_expenses[i]
    return None


def remove_internal_expense(quote: Quote, expense_id: str) -> None:
    quote.internal_expenses = [e for e in quote.internal_expenses if e.id != expense_id]


def update_job_details(quote: Quote, details: JobDetails) -> None:
    """Apply edited job details.

    Technicians are matched by position, so a changed name at the same
    position is a rename and every shift assigned to the old name follows it.
    Renames touch shifts and are refused on a locked quote.
    """
    old = quote.job_details.technicians
    renames = {
        old[i]: name
        for i, name in enumerate(details.technicians[:len(old)])
        if name != old[i]
    }
    if renames:
        _check_unlocked(quote)
        for s in quote.shifts:
            # All renames apply at once, so swapped names work
            if s.tech in renames:
                s.tech = renames[s.tech]
    quote.job_details = replace(details, technicians=list(details.technicians))


def apply_customer(quote: Quote, customer: Customer) -> None:
    """Use a saved customer's name and rates on the quote."""
    quote.job_details.customer = customer.name
    quote.rates = replace(customer.rates)


def customer_from_quote(quote: Quote, existing: Customer | None = None) -> Customer:
    """Customer record holding the quote's customer name and rates.

    An existing customer keeps its id, contacts and notes.
    """
    name = quote.job_details.customer.strip()
    if existing:
        return replace(existing, name=name, rates=replace(quote.rates))
    return Customer(id=str(uuid.uuid4()), name=name, rates=replace(quote.rates))


# --- Text output ---


def invoice_text(quote: Quote) -> str:
    """Draft invoice details for the admin team."""
    details = quote.job_details
    rates = quote.rates
    total = total_cost(quote)

    compare_amount = details.po_amount or details.original_quote_amount or 0.0
    variance = total - compare_amount
    has_variance = compare_amount > 0 and abs(variance) > 0.01

    body = (
        f"Hi Admin,\n\nSee draft invoice details for {details.job_no} - {details.customer}.\n\n"
        f"Total to Invoice: {format_money(total)}\n"
    )

    if has_variance:
        compare_label = "PO" if details.po_amount else "original quote"
        direction = "higher" if variance > 0 else "lower"
        body += (
            f"\nNote: The final value is {format_money(abs(variance))} {direction} "
            f"than the {compare_label} of {format_money(compare_amount)}."
        )
        if details.variance_reason:
            body += f"\nReason: {details.variance_reason}"
        body += "\n"

    normal, penalty = labour_costs(quote)
    body += "\n---\nFinancial Breakdown:\n"
    body += f"Labor (Normal): {format_money(normal)}\n"
    body += f"Labor (Overtime): {format_money(penalty)}\n"

    vehicles, per_diems = allowance_counts(quote)
    if vehicles:
        body += f"Vehicle Allowances: {format_money(vehicles * rates.vehicle)}\n"
    if per_diems:
        body += f"Per Diems: {format_money(per_diems * rates.per_diem)}\n"
    if reporting_cost(quote) > 0:
        body += f"Reporting Time: {format_money(reporting_cost(quote))}\n"
    if travel_charge_cost(quote) > 0:
        body += f"Travel Charge: {format_money(travel_charge_cost(quote))}\n"

    for extra in quote.extras:
        if to_number(extra.cost) > 0:
            body += f"{extra.description}: {format_money(extra.cost)}\n"

    body += f"\nTotal: {format_money(total)}"

    if details.external_link:
        body += f"\n\nLink to Xero Quote: {details.external_link}"
    if details.admin_comments:
        body += f"\n\nComments: {details.admin_comments}"

    return body
