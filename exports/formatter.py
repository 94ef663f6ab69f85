# exports/formatter.py
"""
CSV exports of the (already filtered) booking list.

Column order is positional and spreadsheet users rely on it, so optional
column groups are spliced in at fixed places rather than appended. Every
export has a header row, even with no data rows.
"""

import csv
import io
from datetime import date
from typing import Iterable, List, Optional, Sequence

from config import settings
from core.timeutils import parse_timestamp
from models.analytics import MonthlyFinancials, MountainSummary
from models.booking import Booking, Participant
from models.filters import ExportOptions

NOT_AVAILABLE = "N/A"

BASIC_HEADERS = [
    "Booking ID",
    "Mountain",
    "Organizer Name",
    "Email",
    "Country",
    "Participants",
    "Date",
    "Time",
    "Status",
    "Amount",
    "Currency",
    "Created Date",
]
CONTACT_HEADERS = ["Phone", "Emergency Contact"]
CONTACT_POSITION = 5
PAYMENT_HEADERS = ["Payment Method", "Razorpay Order ID", "Razorpay Payment ID"]

PARTICIPANT_HEADERS = [
    "Booking ID",
    "Mountain",
    "Date",
    "Participant Type",
    "Name",
    "Email",
    "Country",
    "Passport",
    "Phone",
    "Emergency Contact",
    "Amount (Per Booking)",
    "Status",
]
MEDICAL_HEADERS = ["Medical Information"]

# "(USD)" columns hold USD revenue plus INR converted at settings.INR_PER_USD,
# an approximate display figure. Per-currency totals come from the analytics API.
MOUNTAIN_SUMMARY_HEADERS = [
    "Mountain Name",
    "Total Bookings",
    "Total Participants",
    "Total Revenue (USD)",
    "Confirmed Bookings",
    "Pending Bookings",
    "Cancelled Bookings",
    "Upcoming Trips",
]

FINANCIAL_SUMMARY_HEADERS = [
    "Month",
    "Total Revenue (USD)",
    "Total Bookings",
    "Total Participants",
    "Average Booking Value (USD)",
]

EXPORT_FILENAMES = {
    "basic": "bookings-summary",
    "participants": "detailed-participants",
    "mountain-summary": "mountain-summary",
    "financial-summary": "financial-summary",
}


def export_filename(kind: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{EXPORT_FILENAMES[kind]}-{today.isoformat()}.csv"


def to_csv(headers: Sequence[str], rows: Iterable[Sequence]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def _number(value) -> str:
    if value is None:
        return "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _text(value) -> str:
    return "" if value is None else str(value)


def _created_date(value) -> str:
    created = parse_timestamp(value)
    return created.date().isoformat() if created else NOT_AVAILABLE


def basic_headers(options: ExportOptions) -> List[str]:
    headers = list(BASIC_HEADERS)
    if options.include_contact_info:
        headers[CONTACT_POSITION:CONTACT_POSITION] = CONTACT_HEADERS
    if options.include_payment_info:
        headers += PAYMENT_HEADERS
    return headers


def basic_row(booking: Booking, options: ExportOptions) -> List[str]:
    organizer = booking.organizer or Participant()
    details = booking.slot_details
    row = [
        _text(booking.booking_id),
        _text(booking.mountain_name),
        _text(organizer.name),
        _text(organizer.email or booking.user_email),
        _text(organizer.country),
        _number(booking.participants),
        (details.date if details else None) or NOT_AVAILABLE,
        (details.time if details else None) or NOT_AVAILABLE,
        _text(booking.status),
        _number(booking.amount),
        _text(booking.currency),
        _created_date(booking.created_at),
    ]
    if options.include_contact_info:
        row[CONTACT_POSITION:CONTACT_POSITION] = [_text(organizer.phone), _text(organizer.emergency_contact)]
    if options.include_payment_info:
        row += [
            _text(booking.payment_method),
            _text(booking.razorpay_order_id),
            _text(booking.razorpay_payment_id),
        ]
    return row


def export_basic_summary(bookings: Iterable[Booking], options: ExportOptions) -> str:
    """One row per booking."""
    return to_csv(basic_headers(options), (basic_row(b, options) for b in bookings))


def participant_headers(options: ExportOptions) -> List[str]:
    headers = list(PARTICIPANT_HEADERS)
    if options.include_medical_info:
        headers += MEDICAL_HEADERS
    return headers


def _participant_row(booking: Booking, person: Participant, kind: str, amount, options: ExportOptions) -> List[str]:
    details = booking.slot_details
    row = [
        _text(booking.booking_id),
        _text(booking.mountain_name),
        (details.date if details else None) or NOT_AVAILABLE,
        kind,
        _text(person.name),
        _text(person.email),
        _text(person.country),
        _text(person.passport),
        _text(person.phone),
        _text(person.emergency_contact),
        _number(amount),
        _text(booking.status),
    ]
    if options.include_medical_info:
        row.append(_text(person.medical_info))
    return row


def participant_rows(booking: Booking, options: ExportOptions) -> List[List[str]]:
    rows = [_participant_row(booking, booking.organizer or Participant(), "Organizer", booking.amount, options)]
    if options.include_members:
        # the booking amount is not split across members
        rows += [_participant_row(booking, member, "Member", 0, options) for member in booking.members]
    return rows


def export_participants(bookings: Iterable[Booking], options: ExportOptions) -> str:
    """One row per participant: the organizer, then members if requested."""
    rows = []
    for booking in bookings:
        rows += participant_rows(booking, options)
    return to_csv(participant_headers(options), rows)


def export_mountain_summary(summaries: Iterable[MountainSummary], inr_per_usd: Optional[float] = None) -> str:
    rate = inr_per_usd or settings.INR_PER_USD
    rows = [
        [
            s.mountain_name,
            s.total_bookings,
            s.total_participants,
            _number(round(s.total_revenue.combined_usd(rate), 2)),
            s.confirmed_bookings,
            s.pending_bookings,
            s.cancelled_bookings,
            s.upcoming_trips,
        ]
        for s in summaries
    ]
    return to_csv(MOUNTAIN_SUMMARY_HEADERS, rows)


def export_financial_summary(months: Iterable[MonthlyFinancials], inr_per_usd: Optional[float] = None) -> str:
    rate = inr_per_usd or settings.INR_PER_USD
    rows = [
        [
            m.month,
            f"{m.total_revenue.combined_usd(rate):.2f}",
            m.total_bookings,
            m.total_participants,
            f"{m.average_booking_value:.2f}",
        ]
        for m in months
    ]
    return to_csv(FINANCIAL_SUMMARY_HEADERS, rows)
