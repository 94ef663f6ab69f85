"""
Tests — Service fee and price quotes
"""

import pytest

from availability.pricing import quote, service_fee
from core.exceptions import CapacityExceededError, DateNotFoundError, SlotNotFoundError

from factories import make_product


def _product():
    return make_product(dates=[("2025-06-01", [
        {"id": "s1", "time": "06:00", "max_participants": 10, "booked_participants": 7, "price_multiplier": 1.25},
    ])])


class TestServiceFee:
    def test_inr_fee_includes_gst(self):
        assert service_fee("INR", 10000) == 236.0

    def test_usd_fee_has_fixed_part(self):
        assert service_fee("USD", 100) == 3.2

    def test_unknown_currency(self):
        assert service_fee("EUR", 100) == 0


class TestQuote:
    def test_quote_applies_multiplier_and_fee(self):
        result = quote(_product(), "2025-06-01", "06:00", 2, "USD")
        assert result.unit_price == 1500
        assert result.subtotal == 3000
        assert result.service_fee == 87.3
        assert result.total == 3087.3

    def test_quote_over_capacity(self):
        with pytest.raises(CapacityExceededError):
            quote(_product(), "2025-06-01", "06:00", 4, "USD")

    def test_unknown_date_and_time(self):
        with pytest.raises(DateNotFoundError):
            quote(_product(), "2025-06-02", "06:00", 1)
        with pytest.raises(SlotNotFoundError):
            quote(_product(), "2025-06-01", "07:00", 1)
