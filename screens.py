"""Modal screens for the quoter application."""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import date

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.coordinate import Coordinate
from textual.widgets import Button, Checkbox, DataTable, Input, Label, Static
from textual.screen import ModalScreen
from rich.text import Text

import quote as quotes
import storage
from models import DAY_TYPES, Customer, JobDetails, Quote, Rates, Shift, rate_field_names, to_number
from quote import QuoteLockedError
from utils import day_type_for_date, format_money

DAY_TYPE_KEYS = {"W": "weekday", "E": "weekend", "P": "publicHoliday"}

MAX_AMOUNT = 1_000_000_000


def parse_clock(val: str) -> str | None:
    """Normalise HH:MM input, or None if it is not a valid clock time."""
    val = val.strip()
    try:
        hours, minutes = val.split(":")
        h, m = int(hours), int(minutes)
    except ValueError:
        return None
    if not (0 <= h <= 23 and 0 <= m <= 59):
        return None
    return f"{h:02d}:{m:02d}"


def parse_number(val: str) -> float | None:
    """Parse a non-negative amount. Blank is 0; invalid or out of range is None."""
    val = val.strip()
    if not val:
        return 0.0
    try:
        num = float(val)
    except ValueError:
        return None
    if not math.isfinite(num) or not 0 <= num <= MAX_AMOUNT:
        return None
    return num


class ConfirmScreen(ModalScreen[bool]):
    """Simple confirmation dialog."""

    CSS = """
    ConfirmScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $warning;
    }

    #confirm-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
    }

    #confirm-buttons Button {
        width: 1fr;
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
    ]

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label(self.message)
            with Horizontal(id="confirm-buttons"):
                yield Button("Yes (Y)", variant="warning", id="yes")
                yield Button("No (N)", variant="default", id="no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


DIALOG_CSS = """
    .dialog {
        width: 80;
        height: auto;
        max-height: 90%;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    .dialog-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    .field-group {
        width: 1fr;
        height: auto;
        margin: 0 1 0 0;
    }

    .field-label {
        height: 1;
        color: $text-muted;
    }

    .field-row {
        width: 100%;
        height: auto;
        margin-bottom: 1;
    }

    .field-row Input {
        width: 100%;
    }

    .dialog-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    .dialog-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
"""


class EditShiftScreen(ModalScreen[Shift | None]):
    """Modal screen for editing one shift."""

    CSS = "EditShiftScreen {\n    align: center middle;\n}\n" + DIALOG_CSS

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    # Field order for Enter key navigation
    FIELD_ORDER = ["shift-date", "day-type", "tech", "start", "finish", "travel-in", "travel-out"]

    def __init__(self, shift: Shift, subdiv: str = "QLD"):
        super().__init__()
        self.shift = shift
        self.subdiv = subdiv

    def _field(self, label: str, value: str, field_id: str, placeholder: str = "", **kwargs):
        with Vertical(classes="field-group"):
            yield Label(label, classes="field-label")
            yield Input(value=value, placeholder=placeholder, id=field_id, **kwargs)

    def compose(self) -> ComposeResult:
        s = self.shift
        day_key = next(k for k, v in DAY_TYPE_KEYS.items() if v == s.day_type)
        with Vertical(classes="dialog"):
            yield Label(f"Edit Shift {s.id}", classes="dialog-title")

            with Horizontal(classes="field-row"):
                yield from self._field("Date (YYYY-MM-DD)", s.date.isoformat() if s.date else "", "shift-date")
                yield from self._field("Day (W/E/P)", day_key, "day-type", "W/E/P", max_length=1)
                yield from self._field("Tech", s.tech, "tech")

            with Horizontal(classes="field-row"):
                yield from self._field("Start (HH:MM)", s.start_time, "start", "06:00")
                yield from self._field("Finish (HH:MM)", s.finish_time, "finish", "18:00")
                yield from self._field("Travel In (h)", f"{s.travel_in:g}", "travel-in", "0.5")
                yield from self._field("Travel Out (h)", f"{s.travel_out:g}", "travel-out", "0.5")

            with Horizontal(classes="field-row"):
                yield Checkbox("Night shift", value=s.is_night_shift, id="night")
                yield Checkbox("Vehicle", value=s.vehicle, id="vehicle")
                yield Checkbox("Per diem", value=s.per_diem, id="per-diem")

            with Horizontal(classes="dialog-buttons"):
                yield Button("Save", variant="primary", id="save")
                yield Button("Cancel", variant="default", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#shift-date", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Move to next field on Enter, or save if on last field."""
        current_id = event.input.id
        if current_id in self.FIELD_ORDER:
            current_idx = self.FIELD_ORDER.index(current_id)
            if current_idx < len(self.FIELD_ORDER) - 1:
                next_id = self.FIELD_ORDER[current_idx + 1]
                self.query_one(f"#{next_id}", Input).focus()
            else:
                self._save_shift()

    def on_input_changed(self, event: Input.Changed) -> None:
        """Auto-uppercase the day type and re-derive it when the date changes."""
        if event.input.id == "day-type":
            val = event.value.upper()
            if val != event.value:
                event.input.value = val
        elif event.input.id == "shift-date":
            original = self.shift.date.isoformat() if self.shift.date else ""
            if event.value.strip() == original:
                return
            try:
                d = date.fromisoformat(event.value.strip())
            except ValueError:
                return
            day_type = day_type_for_date(d, self.subdiv)
            key = next(k for k, v in DAY_TYPE_KEYS.items() if v == day_type)
            self.query_one("#day-type", Input).value = key

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "save":
            self._save_shift()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _value(self, field_id: str) -> str:
        return self.query_one(f"#{field_id}", Input).value

    def _save_shift(self) -> None:
        try:
            shift_date = date.fromisoformat(self._value("shift-date").strip())
        except ValueError:
            self.app.notify("Invalid date. Use YYYY-MM-DD", severity="error")
            return

        day_type = DAY_TYPE_KEYS.get(self._value("day-type").strip().upper())
        if day_type not in DAY_TYPES:
            self.app.notify("Invalid day type. Use W, E or P", severity="error")
            return

        start = parse_clock(self._value("start"))
        finish = parse_clock(self._value("finish"))
        if not start or not finish:
            self.app.notify("Start and finish must be HH:MM", severity="error")
            return

        travel_in = parse_number(self._value("travel-in"))
        travel_out = parse_number(self._value("travel-out"))
        if travel_in is None or travel_out is None or travel_in > 24 or travel_out > 24:
            self.app.notify("Travel must be between 0 and 24 hours", severity="error")
            return

        tech = self._value("tech").strip()
        if not tech:
            self.app.notify("Tech is required", severity="error")
            return

        updated = replace(
            self.shift,
            date=shift_date,
            day_type=day_type,
            start_time=start,
            finish_time=finish,
            travel_in=travel_in,
            travel_out=travel_out,
            tech=tech,
            is_night_shift=self.query_one("#night", Checkbox).value,
            vehicle=self.query_one("#vehicle", Checkbox).value,
            per_diem=self.query_one("#per-diem", Checkbox).value,
        )
        self.dismiss(updated)


RATE_LABELS = {
    "site_normal": "Site Normal ($/h)",
    "site_overtime": "Site Overtime ($/h)",
    "weekend": "Weekend ($/h)",
    "public_holiday": "Public Holiday ($/h)",
    "office_reporting": "Office Reporting ($/h)",
    "travel": "Travel ($/h)",
    "travel_overtime": "Travel Overtime ($/h)",
    "travel_charge": "Travel Charge ($/km)",
    "travel_charge_ex_brisbane": "Travel Charge Ex Brisbane ($/tech)",
    "vehicle": "Vehicle ($/day)",
    "per_diem": "Per Diem ($/night)",
    "standard_day_rate": "Standard Day Rate (12h)",
    "weekend_day_rate": "Weekend Day Rate (12h)",
    "cost_of_labour": "Cost of Labour ($/h)",
}


class EditRatesScreen(ModalScreen[Rates | None]):
    """Modal screen for editing a quote's rates."""

    CSS = "EditRatesScreen {\n    align: center middle;\n}\n" + DIALOG_CSS

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, rates: Rates):
        super().__init__()
        self.rates = rates

    def compose(self) -> ComposeResult:
        names = rate_field_names()
        with VerticalScroll(classes="dialog"):
            yield Label("Rates", classes="dialog-title")
            # Two rate fields per row
            for i in range(0, len(names), 2):
                with Horizontal(classes="field-row"):
                    for name in names[i:i + 2]:
                        with Vertical(classes="field-group"):
                            yield Label(RATE_LABELS.get(name, name), classes="field-label")
                            yield Input(value=f"{getattr(self.rates, name):g}", id=f"rate-{name}")
            with Vertical(classes="field-group"):
                yield Label("Notes", classes="field-label")
                yield Input(value=self.rates.rate_notes, id="rate-notes")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Save", variant="primary", id="save")
                yield Button("Cancel", variant="default", id="cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "save":
            self._save_rates()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _save_rates(self) -> None:
        values: dict[str, float] = {}
        for name in rate_field_names():
            raw = self.query_one(f"#rate-{name}", Input).value
            parsed = parse_number(raw)
            if parsed is None:
                self.app.notify(f"{RATE_LABELS.get(name, name)} must be a positive number", severity="error")
                return
            values[name] = parsed
        notes = self.query_one("#rate-notes", Input).value.strip()
        self.dismiss(replace(self.rates, rate_notes=notes, **values))


class EditJobScreen(ModalScreen[JobDetails | None]):
    """Modal screen for the job details of a quote."""

    CSS = "EditJobScreen {\n    align: center middle;\n}\n" + DIALOG_CSS

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, details: JobDetails):
        super().__init__()
        self.details = details

    def compose(self) -> ComposeResult:
        d = self.details
        with Vertical(classes="dialog"):
            yield Label("Job Details", classes="dialog-title")
            with Horizontal(classes="field-row"):
                with Vertical(classes="field-group"):
                    yield Label("Customer", classes="field-label")
                    yield Input(value=d.customer, id="customer")
                with Vertical(classes="field-group"):
                    yield Label("Job No", classes="field-label")
                    yield Input(value=d.job_no, id="job-no")
            with Horizontal(classes="field-row"):
                with Vertical(classes="field-group"):
                    yield Label("Location", classes="field-label")
                    yield Input(value=d.location, id="location")
                with Vertical(classes="field-group"):
                    yield Label("Reporting (h)", classes="field-label")
                    yield Input(value=f"{d.reporting_time:g}", id="reporting")
            with Horizontal(classes="field-row"):
                with Vertical(classes="field-group"):
                    yield Label("Technicians (comma separated)", classes="field-label")
                    yield Input(value=", ".join(d.technicians), id="technicians")
                with Vertical(classes="field-group"):
                    yield Label("PO Amount", classes="field-label")
                    yield Input(value=f"{d.po_amount:g}" if d.po_amount is not None else "", id="po-amount")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Save", variant="primary", id="save")
                yield Button("Cancel", variant="default", id="cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "save":
            self._save_details()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _save_details(self) -> None:
        reporting = parse_number(self.query_one("#reporting", Input).value)
        if reporting is None:
            self.app.notify("Reporting time must be a number of hours", severity="error")
            return

        po_raw = self.query_one("#po-amount", Input).value.strip()
        po_amount = parse_number(po_raw) if po_raw else None
        if po_raw and po_amount is None:
            self.app.notify("PO amount must be a number", severity="error")
            return

        technicians = [
            t.strip() for t in self.query_one("#technicians", Input).value.split(",") if t.strip()
        ]
        if not technicians:
            self.app.notify("At least one technician is required", severity="error")
            return

        self.dismiss(replace(
            self.details,
            customer=self.query_one("#customer", Input).value.strip(),
            job_no=self.query_one("#job-no", Input).value.strip(),
            location=self.query_one("#location", Input).value.strip(),
            reporting_time=reporting,
            technicians=technicians,
            po_amount=po_amount,
        ))


class EditLineItemScreen(ModalScreen[tuple[str, float] | None]):
    """Modal screen for the description and cost of an extra or expense."""

    CSS = "EditLineItemScreen {\n    align: center middle;\n}\n" + DIALOG_CSS

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, title: str, description: str = "", cost: float = 0.0):
        super().__init__()
        self.title_text = title
        self.description = description
        self.cost = cost

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Label(self.title_text, classes="dialog-title")
            with Horizontal(classes="field-row"):
                with Vertical(classes="field-group"):
                    yield Label("Description", classes="field-label")
                    yield Input(value=self.description, id="item-description")
                with Vertical(classes="field-group"):
                    yield Label("Cost ($)", classes="field-label")
                    yield Input(value=f"{self.cost:g}", id="item-cost")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Save", variant="primary", id="save")
                yield Button("Cancel", variant="default", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#item-description", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "item-description":
            self.query_one("#item-cost", Input).focus()
        elif event.input.id == "item-cost":
            self._save_item()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "save":
            self._save_item()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _save_item(self) -> None:
        description = self.query_one("#item-description", Input).value.strip()
        if not description:
            self.app.notify("Description is required", severity="error")
            return

        cost = parse_number(self.query_one("#item-cost", Input).value)
        if cost is None:
            self.app.notify("Cost must be a positive number", severity="error")
            return

        self.dismiss((description, cost))


ITEMS_CSS = """
    #items-dialog {
        width: 70;
        height: 22;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #items-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #items-table {
        height: 1fr;
    }

    #items-total {
        width: 100%;
        height: 1;
        text-align: right;
    }

    #items-footer {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #items-footer Button {
        width: auto;
        min-width: 10;
        margin: 0 1;
    }
"""


class LineItemsScreen(ModalScreen[bool]):
    """Modal list of a quote's line items with add, edit and delete.

    Dismisses with True when anything changed.
    """

    TITLE_TEXT = "Items"
    ITEM_NAME = "item"

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("n", "new_item", "New"),
        Binding("e", "edit_item", "Edit"),
        Binding("d", "delete_item", "Delete"),
    ]

    def __init__(self, quote: Quote):
        super().__init__()
        self.quote = quote
        self.items_changed = False

    # Subclasses bind these to the quote operations

    def _items(self) -> list:
        raise NotImplementedError

    def _add(self, description: str, cost: float) -> None:
        raise NotImplementedError

    def _update(self, item_id, description: str, cost: float) -> None:
        raise NotImplementedError

    def _remove(self, item_id) -> None:
        raise NotImplementedError

    def compose(self) -> ComposeResult:
        with Vertical(id="items-dialog"):
            yield Label(self.TITLE_TEXT, id="items-title")
            yield DataTable(id="items-table")
            yield Static(id="items-total")
            with Horizontal(id="items-footer"):
                yield Button("New [n]", id="btn-new")
                yield Button("Edit [e]", id="btn-edit")
                yield Button("Delete [d]", id="btn-delete")
                yield Button("Close [Esc]", id="btn-close")

    def on_mount(self) -> None:
        table = self.query_one("#items-table", DataTable)
        table.cursor_type = "row"
        table.add_column("Description", width=40)
        table.add_column("Cost", width=14)
        self._refresh_table()
        table.focus()

    def _refresh_table(self) -> None:
        table = self.query_one("#items-table", DataTable)
        table.clear()
        for item in self._items():
            table.add_row(
                item.description,
                Text(format_money(to_number(item.cost)), justify="right"),
                key=str(item.id),
            )
        total = sum(to_number(item.cost) for item in self._items())
        self.query_one("#items-total", Static).update(f"Total {format_money(total)}")

    def _selected_item(self):
        table = self.query_one("#items-table", DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(Coordinate(table.cursor_row, 0)).row_key
        key = str(row_key.value) if row_key else None
        return next((item for item in self._items() if str(item.id) == key), None)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.control.id == "items-table":
            self.action_edit_item()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "btn-new":
            self.action_new_item()
        elif button_id == "btn-edit":
            self.action_edit_item()
        elif button_id == "btn-delete":
            self.action_delete_item()
        elif button_id == "btn-close":
            self.action_close()

    def action_close(self) -> None:
        self.dismiss(self.items_changed)

    def _apply(self, change) -> None:
        """Run an edit, reporting a locked quote instead of failing."""
        try:
            change()
        except QuoteLockedError as e:
            self.app.notify(str(e), severity="warning")
            return
        self.items_changed = True
        self._refresh_table()

    def action_new_item(self) -> None:
        self.app.push_screen(EditLineItemScreen(f"New {self.ITEM_NAME}"), self._on_item_created)

    def _on_item_created(self, result: tuple[str, float] | None) -> None:
        if result:
            self._apply(lambda: self._add(*result))

    def action_edit_item(self) -> None:
        item = self._selected_item()
        if not item:
            self.app.notify(f"No {self.ITEM_NAME} selected", severity="warning")
            return
        self.app.push_screen(
            EditLineItemScreen(f"Edit {self.ITEM_NAME}", item.description, to_number(item.cost)),
            lambda result: self._on_item_edited(result, item.id),
        )

    def _on_item_edited(self, result: tuple[str, float] | None, item_id) -> None:
        if result:
            self._apply(lambda: self._update(item_id, *result))

    def action_delete_item(self) -> None:
        item = self._selected_item()
        if not item:
            self.app.notify(f"No {self.ITEM_NAME} selected", severity="warning")
            return
        self.app.push_screen(
            ConfirmScreen(f"Delete {item.description or self.ITEM_NAME}?"),
            lambda confirmed: self._on_delete_confirmed(confirmed, item.id),
        )

    def _on_delete_confirmed(self, confirmed: bool | None, item_id) -> None:
        if confirmed:
            self._apply(lambda: self._remove(item_id))


class ExtrasScreen(LineItemsScreen):
    """Billable extras such as accommodation, parts and freight."""

    CSS = "ExtrasScreen {\n    align: center middle;\n}\n" + ITEMS_CSS

    TITLE_TEXT = "Extras"
    ITEM_NAME = "extra"

    def _items(self) -> list:
        return self.quote.extras

    def _add(self, description: str, cost: float) -> None:
        quotes.add_extra(self.quote, description, cost)

    def _update(self, item_id, description: str, cost: float) -> None:
        quotes.update_extra(self.quote, item_id, description=description, cost=cost)

    def _remove(self, item_id) -> None:
        quotes.remove_extra(self.quote, item_id)


class ExpensesScreen(LineItemsScreen):
    """Internal expenses, counted against profit but never invoiced."""

    CSS = "ExpensesScreen {\n    align: center middle;\n}\n" + ITEMS_CSS

    TITLE_TEXT = "Internal Expenses"
    ITEM_NAME = "expense"

    def _items(self) -> list:
        return self.quote.internal_expenses

    def _add(self, description: str, cost: float) -> None:
        quotes.add_internal_expense(self.quote, description, cost)

    def _update(self, item_id, description: str, cost: float) -> None:
        quotes.update_internal_expense(self.quote, item_id, description=description, cost=cost)

    def _remove(self, item_id) -> None:
        quotes.remove_internal_expense(self.quote, item_id)


class CustomerSelectScreen(ModalScreen[Customer | None]):
    """Modal screen for picking a saved customer, with search and delete."""

    CSS = "CustomerSelectScreen {\n    align: center middle;\n}\n" + ITEMS_CSS + """
    #customers-search {
        width: 100%;
        margin-bottom: 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("d", "delete_customer", "Delete"),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="items-dialog"):
            yield Label("Select Customer", id="items-title")
            yield Input(placeholder="Search...", id="customers-search")
            yield DataTable(id="items-table")
            with Horizontal(id="items-footer"):
                yield Button("Select [Enter]", id="btn-select", variant="primary")
                yield Button("Delete [d]", id="btn-delete")
                yield Button("Cancel [Esc]", id="btn-cancel")

    def on_mount(self) -> None:
        table = self.query_one("#items-table", DataTable)
        table.cursor_type = "row"
        table.add_column("Customer", width=30)
        table.add_column("Site rate", width=10)
        table.add_column("Notes", width=14)
        self._refresh_table()
        self.query_one("#customers-search", Input).focus()

    def _refresh_table(self, search: str = "") -> None:
        table = self.query_one("#items-table", DataTable)
        table.clear()
        search = search.strip().lower()
        for customer in storage.get_all_customers():
            if search and search not in customer.name.lower():
                continue
            table.add_row(
                customer.name + (" [locked]" if customer.is_locked else ""),
                format_money(customer.rates.site_normal),
                customer.rates.rate_notes,
                key=customer.id,
            )

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "customers-search":
            self._refresh_table(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "customers-search":
            self.query_one("#items-table", DataTable).focus()

    def _selected_customer_id(self) -> str | None:
        table = self.query_one("#items-table", DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(Coordinate(table.cursor_row, 0)).row_key
        return str(row_key.value) if row_key else None

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.row_key:
            self.dismiss(storage.get_customer(str(event.row_key.value)))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "btn-select":
            customer_id = self._selected_customer_id()
            if not customer_id:
                self.app.notify("No customer selected", severity="warning")
                return
            self.dismiss(storage.get_customer(customer_id))
        elif button_id == "btn-delete":
            self.action_delete_customer()
        elif button_id == "btn-cancel":
            self.action_cancel()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def action_delete_customer(self) -> None:
        customer_id = self._selected_customer_id()
        customer = storage.get_customer(customer_id) if customer_id else None
        if not customer:
            self.app.notify("No customer selected", severity="warning")
            return
        if customer.is_locked:
            self.app.notify(f"{customer.name} is locked", severity="error")
            return
        self.app.push_screen(
            ConfirmScreen(f"Delete customer {customer.name}?"),
            lambda confirmed: self._on_delete_confirmed(confirmed, customer.id),
        )

    def _on_delete_confirmed(self, confirmed: bool | None, customer_id: str) -> None:
        if confirmed:
            storage.delete_customer(customer_id)
            self.app.notify("Customer deleted")
            self._refresh_table(self.query_one("#customers-search", Input).value)
