"""Tests for quote.py - totals, status rules and editing."""

from dataclasses import replace
from datetime import date

import pytest

import quote as quotes
from models import Contact, Customer, JobDetails, Quote, Rates, Shift


class TestNewQuote:
    """Tests for creating quotes."""

    def test_next_quote_number(self):
        existing = [Quote(id=str(i), quote_number=n) for i, n in enumerate(["0003", "0010", "abc", ""])]
        assert quotes.next_quote_number(existing) == "0011"

    def test_first_quote_number(self):
        assert quotes.next_quote_number([]) == "0001"

    def test_new_quote_defaults(self):
        quote = quotes.new_quote([])

        assert quote.quote_number == "0001"
        assert quote.status == "draft"
        assert len(quote.shifts) == 1
        assert quote.shifts[0].start_time == "06:00"
        assert quote.extras[0].description == "Accommodation"
        assert quote.id

    def test_new_quote_copies_default_rates(self):
        defaults = Rates(site_normal=150.0)
        quote = quotes.new_quote([], defaults)

        assert quote.rates.site_normal == 150.0
        quote.rates.site_normal = 1.0
        assert defaults.site_normal == 150.0


class TestTotals:
    """Tests for quote totals."""

    def test_total_cost(self, sample_quote):
        """Shifts 2055 + 2220, extras 100, reporting 320, travel charge 100."""
        assert quotes.total_cost(sample_quote) == pytest.approx(4795.0)

    def test_component_costs(self, sample_quote):
        assert quotes.extras_cost(sample_quote) == 100.0
        assert quotes.reporting_cost(sample_quote) == 320.0
        assert quotes.travel_charge_cost(sample_quote) == 100.0

    def test_hours(self, sample_quote):
        assert quotes.total_hours(sample_quote) == 22.0
        assert quotes.total_nt_hours(sample_quote) == pytest.approx(15.5)
        assert quotes.total_ot_hours(sample_quote) == pytest.approx(6.5)

    def test_empty_quote_total(self):
        assert quotes.total_cost(Quote(id="q", job_details=JobDetails(technicians=[]))) == 0

    def test_labour_costs_split(self, sample_quote):
        normal, penalty = quotes.labour_costs(sample_quote)

        assert normal == pytest.approx(1200.0)
        assert penalty == pytest.approx(855.0 + 2100.0)

    def test_labour_costs_match_shift_costs(self, sample_quote):
        """Normal + penalty + allowances equals the sum of shift costs."""
        normal, penalty = quotes.labour_costs(sample_quote)
        vehicles, per_diems = quotes.allowance_counts(sample_quote)
        rates = sample_quote.rates
        shifts_total = sum(r.cost for _, r in quotes.shift_results(sample_quote))

        assert normal + penalty + vehicles * rates.vehicle + per_diems * rates.per_diem == pytest.approx(shifts_total)

    def test_public_holiday_is_penalty(self):
        quote = Quote(
            id="q",
            shifts=[Shift(id=1, day_type="publicHoliday", start_time="06:00", finish_time="16:00")],
        )
        normal, penalty = quotes.labour_costs(quote)

        assert normal == 0
        assert penalty == pytest.approx(10 * 235.0)

    def test_allowance_counts(self, sample_quote):
        assert quotes.allowance_counts(sample_quote) == (1, 0)


class TestProfitability:
    """Tests for internal profitability figures."""

    def test_profitability(self, sample_quote):
        result = quotes.profitability(sample_quote)

        assert result.revenue == pytest.approx(4795.0)
        assert result.labour_hours == pytest.approx(22.0)
        assert result.internal_labour_cost == pytest.approx(2200.0)
        assert result.internal_expenses == 300.0
        assert result.gross_profit == pytest.approx(2295.0)
        assert result.gross_margin == pytest.approx(2295.0 / 4795.0 * 100)

    def test_zero_revenue_margin(self):
        result = quotes.profitability(Quote(id="q", job_details=JobDetails(technicians=[])))
        assert result.gross_margin == 0.0


class TestStatus:
    """Tests for status changes and locking."""

    def test_quoting_captures_amount(self, sample_quote):
        quotes.set_status(sample_quote, "quoted")

        assert sample_quote.status == "quoted"
        assert sample_quote.job_details.original_quote_amount == pytest.approx(4795.0)

    def test_existing_amount_not_overwritten(self, sample_quote):
        sample_quote.job_details.original_quote_amount = 4000.0
        quotes.set_status(sample_quote, "quoted")

        assert sample_quote.job_details.original_quote_amount == 4000.0

    def test_other_status_does_not_capture(self, sample_quote):
        quotes.set_status(sample_quote, "invoice")
        assert sample_quote.job_details.original_quote_amount is None

    @pytest.mark.parametrize("status,locked", [
        ("draft", False),
        ("quoted", True),
        ("invoice", False),
        ("closed", True),
    ])
    def test_is_locked(self, sample_quote, status, locked):
        sample_quote.status = status
        assert quotes.is_locked(sample_quote) is locked

    def test_locked_quote_rejects_edits(self, sample_quote):
        sample_quote.status = "closed"

        with pytest.raises(quotes.QuoteLockedError):
            quotes.add_shift(sample_quote)
        with pytest.raises(quotes.QuoteLockedError):
            quotes.update_shift(sample_quote, 1, tech="Someone")
        with pytest.raises(quotes.QuoteLockedError):
            quotes.remove_shift(sample_quote, 1)
        with pytest.raises(quotes.QuoteLockedError):
            quotes.add_extra(sample_quote, "Parts", 10.0)
        assert len(sample_quote.shifts) == 2


class TestShiftEditing:
    """Tests for adding, updating and removing shifts."""

    def test_add_shift_next_day(self, sample_quote):
        """The day after a Saturday is a Sunday."""
        shift = quotes.add_shift(sample_quote)

        assert shift.id == 3
        assert shift.date == date(2026, 1, 25)
        assert shift.day_type == "weekend"
        assert shift.tech == "Tech 2"
        assert shift.start_time == "06:00"
        assert shift.finish_time == "16:00"
        assert sample_quote.shifts[-1] is shift

    def test_add_shift_public_holiday(self, sample_quote):
        """26 January is Australia Day."""
        quotes.add_shift(sample_quote)
        shift = quotes.add_shift(sample_quote)

        assert shift.date == date(2026, 1, 26)
        assert shift.day_type == "publicHoliday"

    def test_add_shift_weekday(self, sample_quote):
        sample_quote.shifts[-1].date = date(2026, 1, 26)
        shift = quotes.add_shift(sample_quote)

        assert shift.date == date(2026, 1, 27)
        assert shift.day_type == "weekday"

    def test_add_shift_to_empty_quote(self, sample_quote):
        sample_quote.shifts = []
        shift = quotes.add_shift(sample_quote)

        assert shift.id == 1
        assert shift.tech == "Tech 1"
        assert shift.date is not None

    def test_update_shift(self, sample_quote):
        updated = quotes.update_shift(sample_quote, 1, is_night_shift=True)

        assert updated is not None
        assert sample_quote.shifts[0].is_night_shift is True

    def test_update_missing_shift(self, sample_quote):
        assert quotes.update_shift(sample_quote, 99, vehicle=True) is None

    def test_remove_shift(self, sample_quote):
        quotes.remove_shift(sample_quote, 1)
        assert [s.id for s in sample_quote.shifts] == [2]


class TestExtras:
    """Tests for extra line items."""

    def test_add_extra(self, sample_quote):
        extra = quotes.add_extra(sample_quote, "Freight", 45.5)

        assert extra.id == 3
        assert quotes.extras_cost(sample_quote) == pytest.approx(145.5)

    def test_update_extra(self, sample_quote):
        quotes.update_extra(sample_quote, 1, cost=250.0)
        assert sample_quote.extras[0].cost == 250.0

    def test_remove_extra(self, sample_quote):
        quotes.remove_extra(sample_quote, 2)
        assert quotes.extras_cost(sample_quote) == 0


class TestUpdateJobDetails:
    """Tests for applying edited job details."""

    def _details(self, quote, technicians):
        return replace(quote.job_details, technicians=technicians)

    def test_rename_updates_shifts(self, sample_quote):
        quotes.update_job_details(sample_quote, self._details(sample_quote, ["Alice", "Tech 2"]))

        assert sample_quote.job_details.technicians == ["Alice", "Tech 2"]
        assert sample_quote.shifts[0].tech == "Alice"
        assert sample_quote.shifts[1].tech == "Tech 2"

    def test_swapped_names_follow_shifts(self, sample_quote):
        quotes.update_job_details(sample_quote, self._details(sample_quote, ["Tech 2", "Tech 1"]))

        assert sample_quote.shifts[0].tech == "Tech 2"
        assert sample_quote.shifts[1].tech == "Tech 1"

    def test_added_technician_leaves_shifts(self, sample_quote):
        quotes.update_job_details(sample_quote, self._details(sample_quote, ["Tech 1", "Tech 2", "Tech 3"]))

        assert sample_quote.job_details.technicians == ["Tech 1", "Tech 2", "Tech 3"]
        assert [s.tech for s in sample_quote.shifts] == ["Tech 1", "Tech 2"]

    def test_technician_list_is_copied(self, sample_quote):
        names = ["Tech 1", "Tech 2"]
        quotes.update_job_details(sample_quote, self._details(sample_quote, names))
        names.append("Tech 3")

        assert sample_quote.job_details.technicians == ["Tech 1", "Tech 2"]

    def test_locked_quote_refuses_rename(self, sample_quote):
        sample_quote.status = "quoted"

        with pytest.raises(quotes.QuoteLockedError):
            quotes.update_job_details(sample_quote, self._details(sample_quote, ["Alice", "Tech 2"]))
        assert sample_quote.job_details.technicians == ["Tech 1", "Tech 2"]
        assert sample_quote.shifts[0].tech == "Tech 1"

    def test_locked_quote_accepts_other_details(self, sample_quote):
        sample_quote.status = "closed"
        details = replace(sample_quote.job_details, po_amount=5000.0, variance_reason="Extra day")

        quotes.update_job_details(sample_quote, details)

        assert sample_quote.job_details.po_amount == 5000.0
        assert sample_quote.job_details.variance_reason == "Extra day"


class TestInternalExpenses:
    """Tests for internal costs used in profitability."""

    def test_add_expense(self, sample_quote):
        expense = quotes.add_internal_expense(sample_quote, "Hire car", 120.0)

        assert isinstance(expense.id, str)
        assert expense.id and expense.id != "e1"
        assert quotes.profitability(sample_quote).internal_expenses == pytest.approx(420.0)

    def test_ids_are_unique(self, sample_quote):
        a = quotes.add_internal_expense(sample_quote)
        b = quotes.add_internal_expense(sample_quote)
        assert a.id != b.id

    def test_update_expense(self, sample_quote):
        updated = quotes.update_internal_expense(sample_quote, "e1", cost=450.0)

        assert updated.cost == 450.0
        assert sample_quote.internal_expenses[0].description == "Flights"
        assert quotes.profitability(sample_quote).internal_expenses == pytest.approx(450.0)

    def test_update_missing_expense(self, sample_quote):
        assert quotes.update_internal_expense(sample_quote, "nope", cost=1.0) is None

    def test_remove_expense(self, sample_quote):
        quotes.remove_internal_expense(sample_quote, "e1")

        assert sample_quote.internal_expenses == []
        assert quotes.profitability(sample_quote).internal_expenses == 0

    def test_allowed_on_locked_quote(self, sample_quote):
        sample_quote.status = "closed"

        expense = quotes.add_internal_expense(sample_quote, "Freight", 80.0)
        quotes.update_internal_expense(sample_quote, expense.id, cost=90.0)
        quotes.remove_internal_expense(sample_quote, "e1")

        assert [e.cost for e in sample_quote.internal_expenses] == [90.0]

    def test_expenses_do_not_change_total(self, sample_quote):
        before = quotes.total_cost(sample_quote)
        quotes.add_internal_expense(sample_quote, "Hire car", 120.0)
        assert quotes.total_cost(sample_quote) == before


class TestCustomers:
    """Tests for copying rates between customers and quotes."""

    def test_apply_customer(self, sample_quote):
        customer = Customer(id="c1", name="Bravo Energy", rates=Rates(site_normal=175.0))

        quotes.apply_customer(sample_quote, customer)

        assert sample_quote.job_details.customer == "Bravo Energy"
        assert sample_quote.rates.site_normal == 175.0
        assert sample_quote.rates is not customer.rates

    def test_applied_rates_are_a_copy(self, sample_quote):
        customer = Customer(id="c1", name="Bravo Energy")
        quotes.apply_customer(sample_quote, customer)

        sample_quote.rates.weekend = 1.0
        assert customer.rates.weekend == 210.0

    def test_new_customer_from_quote(self, sample_quote):
        customer = quotes.customer_from_quote(sample_quote)

        assert customer.id
        assert customer.name == "Acme Mining"
        assert customer.rates == sample_quote.rates
        assert customer.rates is not sample_quote.rates

    def test_existing_customer_keeps_details(self, sample_quote):
        existing = Customer(
            id="c1",
            name="acme mining",
            contacts=[Contact(name="Sam", phone="0400 000 000")],
            customer_notes="Site induction needed",
        )
        sample_quote.rates.site_normal = 180.0

        customer = quotes.customer_from_quote(sample_quote, existing)

        assert customer.id == "c1"
        assert customer.name == "Acme Mining"
        assert customer.contacts == existing.contacts
        assert customer.customer_notes == "Site induction needed"
        assert customer.rates.site_normal == 180.0


class TestInvoiceText:
    """Tests for the draft invoice email."""

    def test_breakdown_lines(self, sample_quote):
        text = quotes.invoice_text(sample_quote)

        assert "J1234 - Acme Mining" in text
        assert "Total to Invoice: $4,795.00" in text
        assert "Labor (Normal): $1,200.00" in text
        assert "Labor (Overtime): $2,955.00" in text
        assert "Vehicle Allowances: $120.00" in text
        assert "Reporting Time: $320.00" in text
        assert "Travel Charge: $100.00" in text
        assert "Parts: $100.00" in text

    def test_zero_lines_left_out(self, sample_quote):
        text = quotes.invoice_text(sample_quote)

        assert "Accommodation" not in text
        assert "Per Diems" not in text
        assert "Note:" not in text

    def test_variance_against_po(self, sample_quote):
        sample_quote.job_details.po_amount = 5000.0
        sample_quote.job_details.variance_reason = "Finished early"
        text = quotes.invoice_text(sample_quote)

        assert "The final value is $205.00 lower than the PO of $5,000.00." in text
        assert "Reason: Finished early" in text

    def test_variance_against_original_quote(self, sample_quote):
        sample_quote.job_details.original_quote_amount = 4000.0
        text = quotes.invoice_text(sample_quote)

        assert "$795.00 higher than the original quote of $4,000.00" in text

    def test_links_and_comments(self, sample_quote):
        sample_quote.job_details.external_link = "https://example.com/q/7"
        sample_quote.job_details.admin_comments = "Send to site manager"
        text = quotes.invoice_text(sample_quote)

        assert "Link to Xero Quote: https://example.com/q/7" in text
        assert "Comments: Send to site manager" in text
