"""
Tests for page arithmetic and page number parsing.
"""

import pytest

from book_catalog_api.pagination import PageWindow, page_window, parse_page_number


class TestParsePageNumber:
    @pytest.mark.parametrize(
        "raw, expected",
        [(None, 1), ("", 1), ("1", 1), ("3", 3), (" 7", 7), ("+2", 2), ("4abc", 4), ("abc", 1), ("0", 1), ("-5", 1)],
    )
    def test_parses_leading_integer(self, raw, expected):
        assert parse_page_number(raw) == expected


class TestPageWindow:
    def test_fifty_five_records(self):
        """55 records make three pages of 25, 25 and 5."""
        assert page_window(1, 55).descriptor == "1 of 3"
        assert page_window(3, 55).offset == 50
        assert page_window(3, 55).descriptor == "3 of 3"

    def test_partial_single_page(self):
        window = page_window(1, 10)
        assert window == PageWindow(page=1, per_page=25, total=10)
        assert window.offset == 0
        assert window.limit == 25
        assert window.descriptor == "1 of 1"

    def test_exact_multiple_has_no_trailing_page(self):
        assert page_window(1, 50).total_pages == 2

    def test_empty_collection_has_no_pages(self):
        assert page_window(1, 0).descriptor == "1 of 0"

    def test_page_past_the_end_keeps_its_number(self):
        window = page_window(9, 30)
        assert window.offset == 200
        assert window.descriptor == "9 of 2"

    def test_page_below_one_is_clamped(self):
        assert page_window(0, 30).page == 1

    def test_custom_page_size(self):
        window = page_window(2, 7, per_page=3)
        assert window.offset == 3
        assert window.descriptor == "2 of 3"

    def test_rejects_non_positive_page_size(self):
        with pytest.raises(ValueError):
            page_window(1, 10, per_page=0)
