"""
Tests — Slot & availability model
"""

import pytest

from availability.slots import (
    add_date,
    add_slot,
    available_capacity,
    effective_price,
    is_full,
    reconcile_slot_capacity,
    remove_date,
    remove_slot,
    slot_status_label,
    total_available_capacity,
    total_slot_count,
)
from core.exceptions import (
    DateNotFoundError,
    DuplicateDateError,
    DuplicateTimeError,
    MissingRequiredFieldError,
    SlotNotFoundError,
)
from models.product import Slot

from factories import make_booking, make_product

JUNE_FIRST = ("2025-06-01", [
    {"id": "s-early", "time": "06:00", "max_participants": 10, "booked_participants": 10},
    {"id": "s-late", "time": "08:00", "max_participants": 5, "booked_participants": 2},
])


class TestDates:
    def test_add_date_appends_in_insertion_order(self):
        product = make_product()
        add_date(product, "2025-07-10")
        add_date(product, "2025-06-01")
        assert [d.date for d in product.available_dates] == ["2025-07-10", "2025-06-01"]
        assert product.available_dates[1].slots == []

    def test_duplicate_date_rejected(self):
        product = make_product(dates=[JUNE_FIRST])
        with pytest.raises(DuplicateDateError):
            add_date(product, "2025-06-01")
        assert len(product.available_dates) == 1

    def test_blank_date_rejected(self):
        with pytest.raises(MissingRequiredFieldError):
            add_date(make_product(), "  ")

    def test_remove_date_drops_its_slots_only(self):
        product = make_product(dates=[JUNE_FIRST, ("2025-06-02", [{"time": "07:00"}])])
        removed = remove_date(product, 0)
        assert removed.date == "2025-06-01"
        assert [d.date for d in product.available_dates] == ["2025-06-02"]
        assert total_slot_count(product) == 1

    def test_remove_date_bad_index(self):
        with pytest.raises(DateNotFoundError):
            remove_date(make_product(), 0)


class TestSlots:
    def test_add_slot_sorts_by_time(self):
        product = make_product(dates=[("2025-06-01", [])])
        add_slot(product, 0, Slot(time="14:00"))
        add_slot(product, 0, Slot(time="06:00"))
        add_slot(product, 0, Slot(time="09:30"))
        assert [s.time for s in product.available_dates[0].slots] == ["06:00", "09:30", "14:00"]

    def test_add_slot_generates_id(self):
        product = make_product(dates=[("2025-06-01", [])])
        slot = add_slot(product, 0, Slot(time="06:00"))
        assert slot.id.startswith("slot_")

    def test_duplicate_time_rejected_and_slots_unchanged(self):
        product = make_product(dates=[JUNE_FIRST])
        before = [s.model_dump() for s in product.available_dates[0].slots]
        with pytest.raises(DuplicateTimeError):
            add_slot(product, 0, Slot(time="06:00", max_participants=3))
        slots = product.available_dates[0].slots
        assert [s.time for s in slots].count("06:00") == 1
        assert [s.model_dump() for s in slots] == before

    def test_same_time_allowed_on_another_date(self):
        product = make_product(dates=[JUNE_FIRST, ("2025-06-02", [])])
        add_slot(product, 1, Slot(time="06:00"))
        assert total_slot_count(product) == 3

    def test_blank_time_rejected(self):
        product = make_product(dates=[("2025-06-01", [])])
        with pytest.raises(MissingRequiredFieldError):
            add_slot(product, 0, Slot(time=""))

    def test_remove_slot(self):
        product = make_product(dates=[JUNE_FIRST])
        removed = remove_slot(product, 0, 0)
        assert removed.time == "06:00"
        assert [s.time for s in product.available_dates[0].slots] == ["08:00"]

    def test_remove_slot_bad_index(self):
        product = make_product(dates=[JUNE_FIRST])
        with pytest.raises(SlotNotFoundError):
            remove_slot(product, 0, 5)


class TestCapacity:
    def test_scenario_total_available_capacity(self):
        product = make_product(dates=[JUNE_FIRST])
        assert total_available_capacity(product) == 3
        assert total_slot_count(product) == 2
        early = product.available_dates[0].slots[0]
        assert is_full(early)
        assert slot_status_label(early) == "Full"

    def test_overbooked_slot_is_clamped(self):
        slot = Slot(time="06:00", max_participants=4, booked_participants=9)
        assert available_capacity(slot) == 0
        assert is_full(slot)

    def test_labels(self):
        assert slot_status_label(Slot(time="06:00", max_participants=10, booked_participants=9)) == "Filling fast"
        assert slot_status_label(Slot(time="06:00", max_participants=10, booked_participants=8)) == "2 spots left"

    def test_effective_price(self):
        product = make_product()
        slot = Slot(time="06:00", price_multiplier=1.5)
        assert effective_price(product, slot) == 1800
        assert effective_price(product, slot, "INR") == 148500


class TestReconcile:
    def test_counts_confirmed_participants_per_slot(self):
        product = make_product(dates=[JUNE_FIRST])
        bookings = [
            make_booking(booking_id="A", participants=3, slot_date="2025-06-01",
                         slotDetails={"id": "s-late", "date": "2025-06-01", "time": "08:00"}),
            make_booking(booking_id="B", participants=2, slot_date="2025-06-01", slot_time="06:00"),
            make_booking(booking_id="C", participants=4, status="pending", slot_date="2025-06-01", slot_time="06:00"),
            make_booking(booking_id="D", participants=5, product_id="other", slot_date="2025-06-01"),
        ]
        reconcile_slot_capacity(product, bookings)
        early, late = product.available_dates[0].slots
        assert early.booked_participants == 2
        assert late.booked_participants == 3
