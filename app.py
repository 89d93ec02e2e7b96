#!/usr/bin/env python3
"""Service quoter TUI application."""

from __future__ import annotations

from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.coordinate import Coordinate
from textual.widgets import DataTable, Footer, Static
from rich.text import Text

import backup
import export
import quote as quotes
import storage
from logic import calculate_shift_breakdown
from models import STATUSES, Customer, JobDetails, Quote, Rates, Shift
from quote import QuoteLockedError
from screens import (
    ConfirmScreen,
    CustomerSelectScreen,
    EditJobScreen,
    EditRatesScreen,
    EditShiftScreen,
    ExpensesScreen,
    ExtrasScreen,
)
from utils import format_money
from widgets import QuoteHeader, QuoteSummary

DAY_TYPE_SHORT = {"weekday": "Wkday", "weekend": "Wkend", "publicHoliday": "P/H"}


class QuoterApp(App):
    """Main quoter application."""

    CSS = """
    Screen {
        background: $surface;
    }

    #list-header, #quote-header {
        height: auto;
        background: $primary;
        color: $text;
        padding: 0 1;
        text-style: bold;
    }

    #list-table, #shift-table {
        height: 1fr;
        margin: 1 2;
    }

    #quote-summary {
        height: auto;
        padding: 1 2;
        color: $text;
    }

    .hidden {
        display: none;
    }

    DataTable {
        height: 100%;
    }

    DataTable > .datatable--cursor {
        background: $secondary;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("n", "new_quote", "New"),
        Binding("a", "add_shift", "Add shift"),
        Binding("e", "edit_shift", "Edit"),
        Binding("d", "delete", "Delete"),
        Binding("j", "edit_job", "Job"),
        Binding("c", "select_customer", "Customer"),
        Binding("C", "save_customer", "Save customer", show=False),
        Binding("t", "edit_extras", "Extras"),
        Binding("p", "edit_expenses", "Costs"),
        Binding("r", "edit_rates", "Rates"),
        Binding("R", "save_default_rates", "Default rates", show=False),
        Binding("s", "cycle_status", "Status"),
        Binding("i", "copy_invoice", "Invoice"),
        Binding("x", "export_xlsx", "Export"),
        Binding("b", "backup", "Backup"),
        Binding("escape", "back_to_list", "Back"),
    ]

    QUOTE_ACTIONS = (
        "add_shift", "edit_shift", "edit_job", "select_customer", "save_customer",
        "edit_extras", "edit_expenses", "edit_rates", "save_default_rates",
        "cycle_status", "copy_invoice", "export_xlsx", "back_to_list",
    )

    def __init__(self):
        super().__init__()
        storage.init_db()

        # View mode: "list" or "quote"
        self.view_mode = "list"
        self.config = storage.get_config()
        self.quotes: list[Quote] = []
        self.quote: Quote | None = None

    def compose(self) -> ComposeResult:
        # Quote list widgets
        yield Static(id="list-header")
        yield Container(DataTable(id="list-table"), id="list-table-container")
        # Single quote widgets (hidden by default)
        yield QuoteHeader(id="quote-header", classes="hidden")
        yield Container(DataTable(id="shift-table"), id="shift-table-container", classes="hidden")
        yield QuoteSummary(id="quote-summary", classes="hidden")
        yield Footer()

    def on_mount(self):
        self._setup_list_table()
        self._setup_shift_table()
        self._load_quotes()
        self._set_view_mode("list")

    def _setup_list_table(self):
        table = self.query_one("#list-table", DataTable)
        table.cursor_type = "row"
        table.add_column("No", width=6)
        table.add_column("Customer", width=20)
        table.add_column("Job", width=10)
        table.add_column("Location", width=16)
        table.add_column("Status", width=8)
        table.add_column("Shifts", width=6)
        table.add_column("Total", width=12)

    def _setup_shift_table(self):
        table = self.query_one("#shift-table", DataTable)
        table.cursor_type = "row"
        table.add_column("Date", width=10)
        table.add_column("Tech", width=10)
        table.add_column("Day", width=5)
        table.add_column("Start", width=5)
        table.add_column("Finish", width=6)
        table.add_column("T.In", width=5)
        table.add_column("Site", width=5)
        table.add_column("T.Out", width=5)
        table.add_column("NT", width=5)
        table.add_column("OT", width=5)
        table.add_column("Veh", width=3)
        table.add_column("P/D", width=3)
        table.add_column("Cost", width=11)

    def _load_quotes(self):
        self.quotes = storage.get_all_quotes()

    # --- Display ---

    def _refresh_display(self):
        if self.view_mode == "list":
            self._refresh_list_display()
        else:
            self._refresh_quote_display()

    def _refresh_list_display(self):
        header = self.query_one("#list-header", Static)
        header.update(Text(f"QUOTES ({len(self.quotes)})", style="bold"))

        table = self.query_one("#list-table", DataTable)
        table.clear()
        for q in self.quotes:
            details = q.job_details
            status_style = "dim" if q.status == "closed" else ""
            table.add_row(
                q.quote_number,
                details.customer or Text("-", style="dim"),
                details.job_no,
                details.location,
                Text(q.status, style=status_style),
                str(len(q.shifts)),
                Text(format_money(quotes.total_cost(q)), justify="right"),
                key=q.id,
            )

    def _refresh_quote_display(self):
        if not self.quote:
            return
        self.query_one("#quote-header", QuoteHeader).update_display(self.quote)
        self.query_one("#quote-summary", QuoteSummary).update_display(self.quote)

        table = self.query_one("#shift-table", DataTable)
        cursor_row = table.cursor_row
        table.clear()
        for shift in self.quote.shifts:
            result = calculate_shift_breakdown(shift, self.quote.rates)
            b = result.breakdown
            night = shift.is_night_shift and shift.day_type == "weekday"
            table.add_row(
                shift.date.strftime("%a %d/%m") if shift.date else "",
                shift.tech,
                Text(DAY_TYPE_SHORT.get(shift.day_type, "?") + ("*" if night else "")),
                shift.start_time,
                shift.finish_time,
                f"{shift.travel_in:g}",
                f"{b.site_hours:.2f}",
                f"{shift.travel_out:g}",
                Text(f"{b.nt_hours:.2f}", style="dim" if b.nt_hours == 0 else ""),
                Text(f"{b.ot_hours:.2f}", style="dim" if b.ot_hours == 0 else ""),
                "Y" if shift.vehicle else "",
                "Y" if shift.per_diem else "",
                Text(format_money(result.cost), justify="right"),
                key=str(shift.id),
            )
        if table.row_count:
            table.move_cursor(row=min(cursor_row, table.row_count - 1))

    def _set_view_mode(self, mode: str):
        """Switch between the quote list and a single quote."""
        self.view_mode = mode

        list_widgets = ["#list-header", "#list-table-container"]
        quote_widgets = ["#quote-header", "#shift-table-container", "#quote-summary"]

        for widget_id in list_widgets:
            widget = self.query_one(widget_id)
            if mode == "list":
                widget.remove_class("hidden")
            else:
                widget.add_class("hidden")

        for widget_id in quote_widgets:
            widget = self.query_one(widget_id)
            if mode == "quote":
                widget.remove_class("hidden")
            else:
                widget.add_class("hidden")

        self.refresh_bindings()
        self._refresh_display()

        if mode == "list":
            self.query_one("#list-table", DataTable).focus()
        else:
            self.query_one("#shift-table", DataTable).focus()

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Check if an action is available based on current view mode."""
        if action in self.QUOTE_ACTIONS:
            return True if self.view_mode == "quote" else None
        if action == "new_quote":
            return True if self.view_mode == "list" else None
        return True

    # --- Helpers ---

    def _selected_key(self, table_id: str) -> str | None:
        table = self.query_one(table_id, DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(Coordinate(table.cursor_row, 0)).row_key
        return str(row_key.value) if row_key else None

    def _selected_shift(self) -> Shift | None:
        key = self._selected_key("#shift-table")
        if not self.quote or key is None:
            return None
        return next((s for s in self.quote.shifts if str(s.id) == key), None)

    def _save_current(self) -> None:
        """Persist the open quote and refresh."""
        if not self.quote:
            return
        storage.save_quote(self.quote)
        self._load_quotes()
        self._refresh_display()

    def _open_quote(self, quote_id: str) -> None:
        quote = storage.get_quote(quote_id)
        if not quote:
            self.notify("Quote not found", severity="error")
            return
        self.quote = quote
        self._set_view_mode("quote")

    def _find_quote(self, quote_id: str) -> Quote | None:
        return next((q for q in self.quotes if q.id == quote_id), None)

    # --- Actions ---

    def action_new_quote(self):
        quote = quotes.new_quote(self.quotes, storage.get_default_rates())
        storage.save_quote(quote)
        self._load_quotes()
        self.notify(f"Created quote {quote.quote_number}")
        self.quote = quote
        self._set_view_mode("quote")

    def action_back_to_list(self):
        if self.view_mode != "quote":
            return
        self.quote = None
        self._load_quotes()
        self._set_view_mode("list")

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Enter opens a quote from the list, or edits a shift."""
        if event.data_table.id == "list-table" and event.row_key.value:
            self._open_quote(str(event.row_key.value))
        elif event.data_table.id == "shift-table":
            self.action_edit_shift()

    def action_add_shift(self):
        if not self.quote:
            return
        try:
            shift = quotes.add_shift(self.quote, self.config.holiday_subdiv)
        except QuoteLockedError as e:
            self.notify(str(e), severity="warning")
            return
        self._save_current()
        table = self.query_one("#shift-table", DataTable)
        table.move_cursor(row=table.row_count - 1)
        self.notify(f"Added shift for {shift.date.strftime('%a %d %b') if shift.date else 'today'}")

    def action_edit_shift(self):
        if not self.quote:
            return
        if quotes.is_locked(self.quote):
            self.notify(f"Quote is {self.quote.status}", severity="warning")
            return
        shift = self._selected_shift()
        if not shift:
            self.notify("No shift selected", severity="warning")
            return
        self.push_screen(EditShiftScreen(shift, self.config.holiday_subdiv), self._on_shift_edited)

    def _on_shift_edited(self, result: Shift | None) -> None:
        if not result or not self.quote:
            return
        try:
            quotes.update_shift(
                self.quote,
                result.id,
                date=result.date,
                day_type=result.day_type,
                start_time=result.start_time,
                finish_time=result.finish_time,
                travel_in=result.travel_in,
                travel_out=result.travel_out,
                tech=result.tech,
                is_night_shift=result.is_night_shift,
                vehicle=result.vehicle,
                per_diem=result.per_diem,
            )
        except QuoteLockedError as e:
            self.notify(str(e), severity="warning")
            return
        self._save_current()

    def action_delete(self):
        if self.view_mode == "list":
            quote_id = self._selected_key("#list-table")
            quote = self._find_quote(quote_id) if quote_id else None
            if not quote:
                self.notify("No quote selected", severity="warning")
                return
            self.push_screen(
                ConfirmScreen(f"Delete quote {quote.quote_number}?"),
                lambda confirmed: self._on_delete_quote_confirmed(confirmed, quote.id),
            )
        elif self.quote:
            shift = self._selected_shift()
            if not shift:
                self.notify("No shift selected", severity="warning")
                return
            if quotes.is_locked(self.quote):
                self.notify(f"Quote is {self.quote.status}", severity="warning")
                return
            self.push_screen(
                ConfirmScreen(f"Delete shift {shift.id}?"),
                lambda confirmed: self._on_delete_shift_confirmed(confirmed, shift.id),
            )

    def _on_delete_quote_confirmed(self, confirmed: bool | None, quote_id: str) -> None:
        if confirmed:
            storage.delete_quote(quote_id)
            self._load_quotes()
            self._refresh_display()
            self.notify("Quote deleted")

    def _on_delete_shift_confirmed(self, confirmed: bool | None, shift_id: int) -> None:
        if confirmed and self.quote:
            quotes.remove_shift(self.quote, shift_id)
            self._save_current()
            self.notify(f"Deleted shift {shift_id}")

    def action_edit_job(self):
        if self.quote:
            self.push_screen(EditJobScreen(self.quote.job_details), self._on_job_edited)

    def _on_job_edited(self, result: JobDetails | None) -> None:
        if not result or not self.quote:
            return
        old_techs = list(self.quote.job_details.technicians)
        try:
            quotes.update_job_details(self.quote, result)
        except QuoteLockedError as e:
            self.notify(f"{e}: technicians cannot be renamed", severity="warning")
            return
        for tech in result.technicians:
            if tech not in old_techs:
                storage.save_technician(tech)
        self._save_current()

    def action_select_customer(self):
        if self.quote:
            self.push_screen(CustomerSelectScreen(), self._on_customer_selected)

    def _on_customer_selected(self, customer: Customer | None) -> None:
        if not customer or not self.quote:
            return
        quotes.apply_customer(self.quote, customer)
        self._save_current()
        self.notify(f"Using rates for {customer.name}")

    def action_save_customer(self):
        if not self.quote:
            return
        name = self.quote.job_details.customer.strip()
        if not name:
            self.notify("Enter a customer name first (j)", severity="warning")
            return
        existing = next(
            (c for c in storage.get_all_customers() if c.name.strip().lower() == name.lower()),
            None,
        )
        if existing and existing.is_locked:
            self.notify(f"{existing.name} is locked", severity="error")
            return
        storage.save_customer(quotes.customer_from_quote(self.quote, existing))
        self.notify(f"Saved customer {name} with this quote's rates")

    def action_edit_extras(self):
        if self.quote:
            self.push_screen(ExtrasScreen(self.quote), self._on_items_closed)

    def action_edit_expenses(self):
        if self.quote:
            self.push_screen(ExpensesScreen(self.quote), self._on_items_closed)

    def _on_items_closed(self, changed: bool | None) -> None:
        if changed:
            self._save_current()

    def action_edit_rates(self):
        if self.quote:
            self.push_screen(EditRatesScreen(self.quote.rates), self._on_rates_edited)

    def _on_rates_edited(self, result: Rates | None) -> None:
        if result and self.quote:
            self.quote.rates = result
            self._save_current()
            self.notify("Rates updated")

    def action_save_default_rates(self):
        if self.quote:
            storage.save_default_rates(self.quote.rates)
            self.notify("Saved as default rates for new quotes")

    def action_cycle_status(self):
        if not self.quote:
            return
        idx = STATUSES.index(self.quote.status)
        new_status = STATUSES[(idx + 1) % len(STATUSES)]
        quotes.set_status(self.quote, new_status)
        self._save_current()
        self.notify(f"Quote {self.quote.quote_number} is now {new_status}")

    def action_copy_invoice(self):
        if self.quote:
            self.copy_to_clipboard(quotes.invoice_text(self.quote))
            self.notify("Invoice details copied to clipboard")

    def action_export_xlsx(self):
        if not self.quote:
            return
        path = Path.cwd() / f"Quote-{self.quote.quote_number}.xlsx"
        try:
            export.export_quote_xlsx(self.quote, path)
        except OSError as e:
            self.notify(f"Export failed: {e}", severity="error")
            return
        self.notify(f"Exported to {path.name}")

    def action_backup(self):
        try:
            path = backup.export_state()
        except OSError as e:
            self.notify(f"Backup failed: {e}", severity="error")
            return
        self.notify(f"Backup written to {path.name}")


def main():
    import sys
    if len(sys.argv) > 1 and sys.argv[1] == "--db-info":
        from datetime import datetime
        db_path = storage.DB_PATH
        print(f"Database: {db_path}")
        if db_path.exists():
            mtime = datetime.fromtimestamp(db_path.stat().st_mtime)
            size = db_path.stat().st_size
            print(f"Modified: {mtime.strftime('%Y-%m-%d %H:%M:%S')}")
            print(f"Size: {size:,} bytes")
        else:
            print("Status: Does not exist (will be created on first run)")
        return

    if len(sys.argv) > 2 and sys.argv[1] == "--restore":
        storage.init_db()
        try:
            count = backup.import_file(Path(sys.argv[2]))
        except backup.BackupError as e:
            print(f"Restore failed: {e}")
            sys.exit(1)
        print(f"Imported {count} quotes")
        return

    app = QuoterApp()
    app.run()


if __name__ == "__main__":
    main()
