"""Shift cost calculation.

Every hour quantity is rounded to 2 decimal places before it is multiplied
by a rate or added to another bucket. Rounding only the final cost gives
different invoice totals when travel hours are fractional.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from models import (
    PUBLIC_HOLIDAY,
    WEEKDAY,
    WEEKEND,
    CalculatedShift,
    Rates,
    Shift,
    ShiftBreakdown,
    to_number,
)

NT_LIMIT = 7.5


def round2(value: float) -> float:
    """Round half up to 2 decimal places on the float value."""
    scaled = value * 100
    if not math.isfinite(scaled):
        # Too large to carry cents
        return value
    return math.floor(scaled + 0.5) / 100


def _clock_hours(val: str) -> float:
    """Hours past midnight for HH:MM. Anything that is not a clock time is 0."""
    parts = str(val).split(":")
    try:
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 else 0
    except ValueError:
        return 0.0
    if not (0 <= hours <= 24 and 0 <= minutes < 60):
        return 0.0
    return hours + minutes / 60


def get_duration(start_time: str | None, finish_time: str | None) -> float:
    """Hours between two HH:MM clock times, wrapping once past midnight."""
    if not start_time or not finish_time:
        return 0.0

    diff = _clock_hours(finish_time) - _clock_hours(start_time)
    if diff < 0:
        diff += 24

    return float(Decimal(diff).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _split(hours: float, consumed: float) -> tuple[float, float]:
    """Split a phase into (normal, overtime) given hours already consumed."""
    nt = max(0.0, min(hours, NT_LIMIT - consumed))
    return nt, hours - nt


def calculate_shift_breakdown(shift: Shift, rates: Rates) -> CalculatedShift:
    travel_in = to_number(shift.travel_in)
    travel_out = to_number(shift.travel_out)

    total_duration = get_duration(shift.start_time, shift.finish_time)
    site_hours = max(0.0, total_duration - (travel_in + travel_out))

    breakdown = ShiftBreakdown(total_hours=total_duration, site_hours=site_hours)
    cost = 0.0

    if shift.day_type == WEEKDAY:
        if shift.is_night_shift:
            # Night shifts ignore the normal time cap
            breakdown.travel_in_ot = round2(travel_in)
            breakdown.site_ot = round2(site_hours)
            breakdown.travel_out_ot = round2(travel_out)

            total_ot = round2(travel_in) + round2(site_hours) + round2(travel_out)
            cost += total_ot * to_number(rates.site_overtime)
        else:
            # Normal time is consumed in order: travel in, site, travel out
            consumed = 0.0

            travel_in_nt, travel_in_ot = _split(travel_in, consumed)
            consumed += travel_in

            site_nt, site_ot = _split(site_hours, consumed)
            consumed += site_hours

            travel_out_nt, travel_out_ot = _split(travel_out, consumed)

            breakdown.travel_in_nt = round2(travel_in_nt)
            breakdown.travel_in_ot = round2(travel_in_ot)
            breakdown.site_nt = round2(site_nt)
            breakdown.site_ot = round2(site_ot)
            breakdown.travel_out_nt = round2(travel_out_nt)
            breakdown.travel_out_ot = round2(travel_out_ot)

            total_nt = round2(travel_in_nt) + round2(site_nt) + round2(travel_out_nt)
            total_ot = round2(travel_in_ot) + round2(site_ot) + round2(travel_out_ot)

            cost += total_nt * to_number(rates.site_normal)
            cost += total_ot * to_number(rates.site_overtime)

    elif shift.day_type == WEEKEND:
        breakdown.site_nt = round2(site_hours)
        breakdown.travel_in_ot = round2(travel_in)
        breakdown.travel_out_ot = round2(travel_out)

        total = round2(site_hours) + round2(travel_in) + round2(travel_out)
        cost += total * to_number(rates.weekend)

    elif shift.day_type == PUBLIC_HOLIDAY:
        breakdown.site_nt = round2(site_hours)
        breakdown.travel_in_nt = round2(travel_in)
        breakdown.travel_out_nt = round2(travel_out)

        total = round2(site_hours) + round2(travel_in) + round2(travel_out)
        cost += total * to_number(rates.public_holiday)

    if shift.vehicle:
        cost += to_number(rates.vehicle)
    if shift.per_diem:
        cost += to_number(rates.per_diem)

    return CalculatedShift(cost=cost, breakdown=breakdown)
