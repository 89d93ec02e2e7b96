"""Custom widgets for the quoter application."""

from __future__ import annotations

from textual.widgets import Static
from rich.text import Text

import quote as quotes
from models import Quote
from utils import format_money


class QuoteHeader(Static):
    """Shows quote number and customer on the left, status on the right."""

    WIDTH = 74

    def update_display(self, quote: Quote):
        details = quote.job_details
        title = f"QUOTE {quote.quote_number}"
        if details.customer:
            title += f": {details.customer}"
        if details.job_no:
            title += f" ({details.job_no})"

        status = quote.status.upper()
        if quotes.is_locked(quote):
            status += " [locked]"

        text = Text()
        text.append(title, style="bold")

        spacing = self.WIDTH - len(title) - len(status)
        text.append(" " * spacing if spacing > 0 else "  ")
        text.append(status, style="bold")

        self.update(text)


class QuoteSummary(Static):
    """Shows the money and hours breakdown for a quote."""

    def update_display(self, quote: Quote):
        normal, penalty = quotes.labour_costs(quote)
        vehicles, per_diems = quotes.allowance_counts(quote)
        rates = quote.rates
        nt_hours = quotes.total_nt_hours(quote)
        ot_hours = quotes.total_ot_hours(quote)

        lines = [
            ("Labour (Normal)", normal, f"{nt_hours:>6.2f}h"),
            ("Labour (Overtime)", penalty, f"{ot_hours:>6.2f}h"),
            ("Vehicle", vehicles * rates.vehicle, f"{vehicles:>6}x"),
            ("Per Diem", per_diems * rates.per_diem, f"{per_diems:>6}x"),
            ("Reporting", quotes.reporting_cost(quote), f"{quote.job_details.reporting_time:>6g}h"),
            ("Travel Charge", quotes.travel_charge_cost(quote), ""),
            ("Extras", quotes.extras_cost(quote), f"{len(quote.extras):>6}x"),
        ]

        text = Text()
        for label, amount, qty in lines:
            line = f"{label:>30}  {qty:>8}  {format_money(amount):>12}\n"
            # Dim lines that contribute nothing
            text.append(line, style="dim" if amount == 0 else "")

        total = quotes.total_cost(quote)
        text.append(f"{'TOTAL':>30}  {'':>8}  {format_money(total):>12}", style="bold")

        profit = quotes.profitability(quote)
        text.append(
            f"\n{'Gross profit':>30}  {profit.gross_margin:>7.1f}%  {format_money(profit.gross_profit):>12}",
            style="dim" if profit.revenue == 0 else "",
        )

        self.update(text)
