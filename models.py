from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Literal

DayType = Literal["weekday", "weekend", "publicHoliday"]
Status = Literal["draft", "quoted", "invoice", "closed"]

WEEKDAY: DayType = "weekday"
WEEKEND: DayType = "weekend"
PUBLIC_HOLIDAY: DayType = "publicHoliday"
DAY_TYPES: tuple[DayType, ...] = (WEEKDAY, WEEKEND, PUBLIC_HOLIDAY)

STATUSES: tuple[Status, ...] = ("draft", "quoted", "invoice", "closed")


def to_number(val: Any) -> float:
    """Coerce a loosely typed value to float; anything unusable becomes 0."""
    if isinstance(val, bool) or val is None:
        return 0.0
    try:
        num = float(val)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(num) or math.isinf(num):
        return 0.0
    return num


def to_flag(val: Any) -> bool:
    if isinstance(val, str):
        return val.strip().lower() in ("true", "yes", "1")
    return bool(val)


def _to_date(val: Any) -> date | None:
    if isinstance(val, date):
        return val
    if not val:
        return None
    try:
        return date.fromisoformat(str(val)[:10])
    except ValueError:
        return None


def _dicts(val: Any) -> list[dict]:
    """The dict entries of a list field; anything else is empty."""
    if not isinstance(val, list):
        return []
    return [v for v in val if isinstance(v, dict)]


def _optional_number(val: Any) -> float | None:
    if val is None or val == "":
        return None
    return to_number(val)


@dataclass
class Rates:
    site_normal: float = 160.0
    site_overtime: float = 190.0
    weekend: float = 210.0
    public_holiday: float = 235.0
    office_reporting: float = 160.0
    travel: float = 75.0
    travel_overtime: float = 112.0
    travel_charge: float = 1.10  # per km
    travel_charge_ex_brisbane: float = 0.0
    vehicle: float = 120.0  # per day
    per_diem: float = 90.0  # per night
    standard_day_rate: float = 2055.0  # 12hrs
    weekend_day_rate: float = 2520.0  # 12hrs
    cost_of_labour: float = 100.0
    rate_notes: str = "Ex Banyo"

    _KEYS = {
        "site_normal": "siteNormal",
        "site_overtime": "siteOvertime",
        "weekend": "weekend",
        "public_holiday": "publicHoliday",
        "office_reporting": "officeReporting",
        "travel": "travel",
        "travel_overtime": "travelOvertime",
        "travel_charge": "travelCharge",
        "travel_charge_ex_brisbane": "travelChargeExBrisbane",
        "vehicle": "vehicle",
        "per_diem": "perDiem",
        "standard_day_rate": "standardDayRate",
        "weekend_day_rate": "weekendDayRate",
        "cost_of_labour": "costOfLabour",
    }

    def to_dict(self) -> dict:
        data: dict[str, Any] = {key: getattr(self, attr) for attr, key in self._KEYS.items()}
        data["rateNotes"] = self.rate_notes
        return data

    @classmethod
    def from_dict(cls, data: dict | None) -> Rates:
        """Build rates from a stored document. Missing numbers count as 0."""
        data = data if isinstance(data, dict) else {}
        kwargs: dict[str, Any] = {attr: to_number(data.get(key)) for attr, key in cls._KEYS.items()}
        kwargs["rate_notes"] = str(data.get("rateNotes") or "")
        return cls(**kwargs)


@dataclass
class Shift:
    id: int
    date: date | None = None
    day_type: DayType = WEEKDAY
    start_time: str = ""
    finish_time: str = ""
    travel_in: float = 0.0
    travel_out: float = 0.0
    vehicle: bool = False
    per_diem: bool = False
    tech: str = ""
    is_night_shift: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat() if self.date else "",
            "dayType": self.day_type,
            "startTime": self.start_time,
            "finishTime": self.finish_time,
            "travelIn": self.travel_in,
            "travelOut": self.travel_out,
            "vehicle": self.vehicle,
            "perDiem": self.per_diem,
            "tech": self.tech,
            "isNightShift": self.is_night_shift,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Shift:
        day_type = data.get("dayType")
        return cls(
            id=int(to_number(data.get("id"))),
            date=_to_date(data.get("date")),
            day_type=day_type if day_type in DAY_TYPES else WEEKDAY,
            start_time=str(data.get("startTime") or ""),
            finish_time=str(data.get("finishTime") or ""),
            travel_in=to_number(data.get("travelIn")),
            travel_out=to_number(data.get("travelOut")),
            vehicle=to_flag(data.get("vehicle")),
            per_diem=to_flag(data.get("perDiem")),
            tech=str(data.get("tech") or ""),
            is_night_shift=to_flag(data.get("isNightShift")),
        )


@dataclass
class ShiftBreakdown:
    """Hours for one shift split into travel/site and normal/overtime buckets.

    Weekend and public holiday shifts are billed at a single rate, so the
    NT/OT names do not mean normal time and overtime for them. Weekend shifts
    keep site hours in ``site_nt`` and travel in the two ``*_ot`` buckets;
    public holiday shifts keep everything in the ``*_nt`` buckets.
    """

    travel_in_nt: float = 0.0
    travel_in_ot: float = 0.0
    site_nt: float = 0.0
    site_ot: float = 0.0
    travel_out_nt: float = 0.0
    travel_out_ot: float = 0.0
    total_hours: float = 0.0
    site_hours: float = 0.0

    @property
    def nt_hours(self) -> float:
        return self.travel_in_nt + self.site_nt + self.travel_out_nt

    @property
    def ot_hours(self) -> float:
        return self.travel_in_ot + self.site_ot + self.travel_out_ot

    @property
    def bucket_hours(self) -> float:
        """Sum of all six buckets."""
        return self.nt_hours + self.ot_hours

    def to_dict(self) -> dict:
        return {
            "travelInNT": self.travel_in_nt,
            "travelInOT": self.travel_in_ot,
            "siteNT": self.site_nt,
            "siteOT": self.site_ot,
            "travelOutNT": self.travel_out_nt,
            "travelOutOT": self.travel_out_ot,
            "totalHours": self.total_hours,
            "siteHours": self.site_hours,
        }


@dataclass
class CalculatedShift:
    cost: float
    breakdown: ShiftBreakdown


@dataclass
class ExtraItem:
    id: int
    description: str = ""
    cost: float = 0.0

    def to_dict(self) -> dict:
        return {"id": self.id, "description": self.description, "cost": self.cost}

    @classmethod
    def from_dict(cls, data: dict) -> ExtraItem:
        return cls(
            id=int(to_number(data.get("id"))),
            description=str(data.get("description") or ""),
            cost=to_number(data.get("cost")),
        )


@dataclass
class InternalExpense:
    id: str
    description: str = ""
    cost: float = 0.0

    def to_dict(self) -> dict:
        return {"id": self.id, "description": self.description, "cost": self.cost}

    @classmethod
    def from_dict(cls, data: dict) -> InternalExpense:
        return cls(
            id=str(data.get("id") or ""),
            description=str(data.get("description") or ""),
            cost=to_number(data.get("cost")),
        )


@dataclass
class JobDetails:
    customer: str = ""
    job_no: str = ""
    location: str = ""
    tech_name: str = ""
    technicians: list[str] = field(default_factory=lambda: ["Tech 1"])
    description: str = ""
    tech_notes: str = ""
    reporting_time: float = 0.0  # hours
    include_travel_charge: bool = False
    travel_distance: float = 0.0  # km
    original_quote_amount: float | None = None
    po_amount: float | None = None
    variance_reason: str = ""
    external_link: str = ""
    admin_comments: str = ""

    _TEXT_KEYS = {
        "customer": "customer",
        "job_no": "jobNo",
        "location": "location",
        "tech_name": "techName",
        "description": "description",
        "tech_notes": "techNotes",
        "variance_reason": "varianceReason",
        "external_link": "externalLink",
        "admin_comments": "adminComments",
    }

    def to_dict(self) -> dict:
        data: dict[str, Any] = {key: getattr(self, attr) for attr, key in self._TEXT_KEYS.items()}
        data.update({
            "technicians": list(self.technicians),
            "reportingTime": self.reporting_time,
            "includeTravelCharge": self.include_travel_charge,
            "travelDistance": self.travel_distance,
        })
        # The document store rejects undefined values, so optional amounts are left out
        if self.original_quote_amount is not None:
            data["originalQuoteAmount"] = self.original_quote_amount
        if self.po_amount is not None:
            data["poAmount"] = self.po_amount
        return data

    @classmethod
    def from_dict(cls, data: dict | None) -> JobDetails:
        data = data if isinstance(data, dict) else {}
        kwargs: dict[str, Any] = {
            attr: str(data.get(key) or "") for attr, key in cls._TEXT_KEYS.items()
        }
        technicians = data.get("technicians")
        kwargs["technicians"] = [str(t) for t in technicians] if isinstance(technicians, list) else []
        kwargs["reporting_time"] = to_number(data.get("reportingTime"))
        kwargs["include_travel_charge"] = to_flag(data.get("includeTravelCharge"))
        kwargs["travel_distance"] = to_number(data.get("travelDistance"))
        kwargs["original_quote_amount"] = _optional_number(data.get("originalQuoteAmount"))
        kwargs["po_amount"] = _optional_number(data.get("poAmount"))
        return cls(**kwargs)


@dataclass
class Quote:
    id: str
    quote_number: str = ""
    last_modified: int = 0  # epoch milliseconds
    status: Status = "draft"
    rates: Rates = field(default_factory=Rates)
    job_details: JobDetails = field(default_factory=JobDetails)
    shifts: list[Shift] = field(default_factory=list)
    extras: list[ExtraItem] = field(default_factory=list)
    internal_expenses: list[InternalExpense] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "quoteNumber": self.quote_number,
            "lastModified": self.last_modified,
            "status": self.status,
            "rates": self.rates.to_dict(),
            "jobDetails": self.job_details.to_dict(),
            "shifts": [s.to_dict() for s in self.shifts],
            "extras": [e.to_dict() for e in self.extras],
            "internalExpenses": [e.to_dict() for e in self.internal_expenses],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Quote:
        status = data.get("status")
        return cls(
            id=str(data.get("id") or ""),
            quote_number=str(data.get("quoteNumber") or ""),
            last_modified=int(to_number(data.get("lastModified"))),
            status=status if status in STATUSES else "draft",
            rates=Rates.from_dict(data.get("rates")),
            job_details=JobDetails.from_dict(data.get("jobDetails")),
            shifts=[Shift.from_dict(s) for s in _dicts(data.get("shifts"))],
            extras=[ExtraItem.from_dict(e) for e in _dicts(data.get("extras"))],
            internal_expenses=[InternalExpense.from_dict(e) for e in _dicts(data.get("internalExpenses"))],
        )


@dataclass
class Contact:
    name: str = ""
    phone: str = ""
    email: str = ""


@dataclass
class Customer:
    id: str
    name: str
    rates: Rates = field(default_factory=Rates)
    contacts: list[Contact] = field(default_factory=list)
    customer_notes: str = ""
    is_locked: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "rates": self.rates.to_dict(),
            "contacts": [
                {"name": c.name, "phone": c.phone, "email": c.email} for c in self.contacts
            ],
            "customerNotes": self.customer_notes,
            "isLocked": self.is_locked,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Customer:
        contacts = [
            Contact(
                name=str(c.get("name") or ""),
                phone=str(c.get("phone") or ""),
                email=str(c.get("email") or ""),
            )
            for c in _dicts(data.get("contacts"))
        ]
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            rates=Rates.from_dict(data["rates"]) if isinstance(data.get("rates"), dict) else Rates(),
            contacts=contacts,
            customer_notes=str(data.get("customerNotes") or ""),
            is_locked=to_flag(data.get("isLocked")),
        )


@dataclass
class Config:
    currency: str = "AUD"
    holiday_subdiv: str = "QLD"


def rate_field_names() -> list[str]:
    """Numeric rate fields in display order."""
    return [f.name for f in fields(Rates) if f.name != "rate_notes"]
