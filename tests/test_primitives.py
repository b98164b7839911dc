"""
Тесты примитивов валидации.
"""

from datetime import date, datetime

import pytest

from validators import primitives as p


class TestScalarPredicates:
    """Строки, числа, идентификаторы"""

    def test_uuid(self):
        assert p.is_valid_uuid("3f2b8c1e-4d5a-4b6c-8d7e-9f0a1b2c3d4e")
        assert not p.is_valid_uuid("3f2b8c1e-4d5a-4b6c-8d7e")
        assert not p.is_valid_uuid(None)

    def test_string_length_is_measured_after_trim(self):
        assert p.is_valid_string("  ab  ", 2, 2)
        assert not p.is_valid_string("   ", 1)
        assert not p.is_valid_string("abc", 1, 2)
        assert not p.is_valid_string(123)

    def test_bool_is_not_a_number(self):
        assert not p.is_number(True)
        assert not p.is_positive_number(True)
        assert p.is_positive_number(0.5)
        assert p.is_non_negative_number(0)
        assert not p.is_positive_number(0)

    def test_range(self):
        assert p.is_within_range(5, 0, 10)
        assert not p.is_within_range(11, 0, 10)
        assert p.is_within_range(-3)

    def test_integer(self):
        assert p.is_integer(3)
        assert p.is_integer(3.0)
        assert not p.is_integer(3.5)
        assert not p.is_integer(False)

    def test_array_bounds(self):
        assert p.is_valid_array([])
        assert p.is_valid_array(("a", "b"), min_items=1, max_items=2)
        assert not p.is_valid_array(["a", "b", "c"], max_items=2)
        assert not p.is_valid_array([], min_items=1)
        assert not p.is_valid_array("ab")

    def test_email_and_phone(self):
        assert p.is_valid_email("farmer@example.com")
        assert not p.is_valid_email("farmer@")
        assert p.is_valid_phone("+1 (555) 123-4567")
        assert not p.is_valid_phone("+0123")

    def test_url(self):
        assert p.is_valid_url("https://example.com/cert.pdf")
        assert not p.is_valid_url("ftp://example.com/cert.pdf")
        assert not p.is_valid_url("example.com")

    def test_stripe_id_and_tx_hash(self):
        assert p.is_valid_stripe_id("ch_3Kx9Yz")
        assert p.is_valid_stripe_id("pi_abc_123")
        assert not p.is_valid_stripe_id("cus_123")
        assert p.is_valid_tx_hash("0x" + "a" * 64)
        assert not p.is_valid_tx_hash("0x" + "a" * 63)

    @pytest.mark.parametrize("number", ["1Z999AA10123456784", "123456789012", "RA123456789CN"])
    def test_known_tracking_numbers(self, number):
        assert p.is_valid_tracking_number(number)

    def test_tracking_number_rejects_short_and_lowercase(self):
        assert not p.is_valid_tracking_number("12345")
        assert not p.is_valid_tracking_number("abcdefghijk")


class TestDates:
    """Разбор и сравнение дат в наивном UTC"""

    def test_parse_iso_with_z_suffix_becomes_naive_utc(self):
        assert p.parse_date("2025-01-02T10:00:00Z") == datetime(2025, 1, 2, 10, 0, 0)

    def test_parse_offset_is_converted_to_utc(self):
        assert p.parse_date("2025-01-02T12:00:00+02:00") == datetime(2025, 1, 2, 10, 0, 0)

    def test_parse_date_object(self):
        assert p.parse_date(date(2025, 1, 2)) == datetime(2025, 1, 2)

    def test_unparseable_values(self):
        assert p.parse_date("not a date") is None
        assert p.parse_date("") is None
        assert p.parse_date(42) is None

    def test_parse_day_requires_full_pattern_match(self):
        formats = ((r"\d{2}/\d{2}/\d{4}", "%m/%d/%Y"),)
        assert p.parse_day("06/20/2025", formats) == date(2025, 6, 20)
        assert p.parse_day("6/20/2025", formats) is None
        assert p.parse_day("13/20/2025", formats) is None
        assert p.parse_day("06/20/2025", ()) is None
        assert p.parse_day(datetime(2025, 6, 20, 9, 30), ()) == date(2025, 6, 20)

    def test_future_and_past(self):
        now = datetime(2025, 6, 15)
        assert p.is_future_date("2025-06-16", now)
        assert p.is_past_date("2025-06-14", now)
        assert not p.is_future_date("garbage", now)

    def test_months_between_ignores_days(self):
        assert p.months_between(datetime(2024, 1, 31), datetime(2024, 2, 1)) == 1
        assert p.months_between(datetime(2024, 1, 1), datetime(2029, 1, 1)) == 60


class TestInappropriateContent:
    """Эвристика спама"""

    def test_plain_text_passes(self):
        assert not p.contains_inappropriate_content("Fresh tomatoes, picked this morning!")

    def test_stop_words(self):
        assert p.contains_inappropriate_content("This is a SCAM offer")

    def test_repeated_characters(self):
        assert p.contains_inappropriate_content("Buy nowwwww")

    def test_special_character_density(self):
        assert p.contains_inappropriate_content("$$ ## @@ %%")
        assert not p.contains_inappropriate_content("Price: $12 per kg")
