"""
Tests — CSV export formatter
"""

import csv
import io
import itertools
from datetime import date

import pytest

from analytics.aggregation import monthly_financials, mountain_summary
from exports import formatter
from models.filters import ExportOptions

from factories import T0, make_booking, organizer


def _read(text):
    return list(csv.reader(io.StringIO(text)))


def _bookings():
    members = [
        organizer(name="Ravi Rao", email="ravi@example.com", medicalInfo="Asthma, mild"),
        organizer(name="Meera Rao", email="meera@example.com"),
    ]
    return [
        make_booking(booking_id="BK-001", members=members, participants=3),
        make_booking(booking_id="BK-002", name="Kashmir Valley, Gulmarg", product_type="tour", slot_date=None),
    ]


ALL_FLAGS = [
    ExportOptions(
        include_members=members,
        include_payment_info=payment,
        include_contact_info=contact,
        include_medical_info=medical,
    )
    for members, payment, contact, medical in itertools.product([True, False], repeat=4)
]


class TestHeaders:
    def test_basic_with_all_groups(self):
        rows = _read(formatter.export_basic_summary([], ExportOptions()))
        assert rows == [[
            "Booking ID", "Mountain", "Organizer Name", "Email", "Country",
            "Phone", "Emergency Contact",
            "Participants", "Date", "Time", "Status", "Amount", "Currency", "Created Date",
            "Payment Method", "Razorpay Order ID", "Razorpay Payment ID",
        ]]

    def test_basic_without_optional_groups(self):
        options = ExportOptions(include_contact_info=False, include_payment_info=False)
        assert formatter.basic_headers(options) == formatter.BASIC_HEADERS

    def test_participants(self):
        headers = formatter.participant_headers(ExportOptions(include_medical_info=True))
        assert headers[-2:] == ["Status", "Medical Information"]
        assert formatter.participant_headers(ExportOptions()) == formatter.PARTICIPANT_HEADERS

    def test_empty_exports_still_have_a_header(self):
        assert formatter.export_participants([], ExportOptions()).count("\n") == 1
        assert _read(formatter.export_mountain_summary([])) == [formatter.MOUNTAIN_SUMMARY_HEADERS]
        assert _read(formatter.export_financial_summary([])) == [formatter.FINANCIAL_SUMMARY_HEADERS]


class TestArity:
    @pytest.mark.parametrize("options", ALL_FLAGS)
    def test_every_row_matches_header(self, options):
        for text in (
            formatter.export_basic_summary(_bookings(), options),
            formatter.export_participants(_bookings(), options),
        ):
            header, *rows = _read(text)
            assert rows
            assert all(len(row) == len(header) for row in rows)


class TestRows:
    def test_basic_row_values(self):
        header, first, second = _read(formatter.export_basic_summary(_bookings(), ExportOptions()))
        record = dict(zip(header, first))
        assert record["Booking ID"] == "BK-001"
        assert record["Participants"] == "3"
        assert record["Amount"] == "1000"
        assert record["Phone"] == "+91 98450 00000"
        assert record["Emergency Contact"] == "Ravi Rao, +91 98450 11111"
        assert record["Created Date"] == "2025-06-01"
        assert record["Razorpay Order ID"] == "order_BK-001"
        missing_slot = dict(zip(header, second))
        assert missing_slot["Mountain"] == "Kashmir Valley, Gulmarg"
        assert (missing_slot["Date"], missing_slot["Time"]) == ("N/A", "N/A")

    def test_commas_are_quoted(self):
        text = formatter.export_basic_summary(_bookings(), ExportOptions())
        assert '"Kashmir Valley, Gulmarg"' in text
        assert '"Ravi Rao, +91 98450 11111"' in text

    def test_participant_rows(self):
        options = ExportOptions(include_medical_info=True)
        header, *rows = _read(formatter.export_participants(_bookings(), options))
        kinds = [(row[0], row[header.index("Participant Type")]) for row in rows]
        assert kinds == [
            ("BK-001", "Organizer"), ("BK-001", "Member"), ("BK-001", "Member"), ("BK-002", "Organizer"),
        ]
        amounts = [row[header.index("Amount (Per Booking)")] for row in rows]
        assert amounts == ["1000", "0", "0", "1000"]
        assert rows[1][-1] == "Asthma, mild"

    def test_members_left_out(self):
        options = ExportOptions(include_members=False)
        _, *rows = _read(formatter.export_participants(_bookings(), options))
        assert [row[3] for row in rows] == ["Organizer", "Organizer"]

    def test_missing_created_date(self):
        booking = make_booking(created_at=None)
        _, row = _read(formatter.export_basic_summary([booking], ExportOptions()))
        assert row[13] == "N/A"


class TestSummaries:
    def test_mountain_summary(self):
        bookings = [
            make_booking(booking_id="A", amount=1000, participants=2),
            make_booking(booking_id="B", amount=8300, currency="INR", participants=1),
            make_booking(booking_id="C", status="pending"),
        ]
        rows = _read(formatter.export_mountain_summary(mountain_summary(bookings, now=T0), inr_per_usd=83))
        assert rows[1] == ["Everest Base Camp", "3", "4", "1100", "2", "1", "0", "3"]

    def test_financial_summary(self):
        bookings = [
            make_booking(booking_id="A", amount=100, participants=2, created_at="2025-05-03T10:00:00Z"),
            make_booking(booking_id="B", amount=300, participants=2, created_at="2025-05-20T10:00:00Z"),
        ]
        text = formatter.export_financial_summary(monthly_financials(bookings))
        assert text.splitlines()[1] == "2025-05,400.00,2,4,200.00"
        assert text.endswith("\n")


def test_export_filename():
    assert formatter.export_filename("participants", date(2025, 6, 15)) == "detailed-participants-2025-06-15.csv"
