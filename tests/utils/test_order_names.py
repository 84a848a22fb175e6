"""
Tests for order name extraction and normalization.
"""

from reminderbot.utils.order_names import dedupe_order_names, find_order_names


class TestFindOrderNames:
    def test_finds_all_matches(self):
        text = "C#12345, c#12346 and C#12345"
        assert find_order_names(text) == ["C#12345", "c#12346", "C#12345"]

    def test_four_digit_names(self):
        assert find_order_names("see C#1234") == ["C#1234"]

    def test_too_short(self):
        assert find_order_names("C#123 is not an order") == []

    def test_six_digits_matches_first_five(self):
        assert find_order_names("C#123456") == ["C#12345"]

    def test_none_and_empty(self):
        assert find_order_names(None) == []
        assert find_order_names("") == []

    def test_embedded_in_json(self):
        text = '{"type":"text","text":"order C#55555 pending"}'
        assert find_order_names(text) == ["C#55555"]


class TestDedupeOrderNames:
    def test_case_variants_collapse(self):
        assert dedupe_order_names(["c#1234", "C#1234"]) == ["C#1234"]

    def test_preserves_first_seen_order(self):
        names = ["C#3000", "C#1000", "c#3000", "C#2000", "C#1000"]
        assert dedupe_order_names(names) == ["C#3000", "C#1000", "C#2000"]

    def test_empty(self):
        assert dedupe_order_names([]) == []
