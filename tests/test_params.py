"""
Tests for parameter requiring, whitelisting and form decoding.
"""

import pytest

from book_catalog_api.errors import ParameterMissing, RecordInvalid, humanize_attribute
from book_catalog_api.models import BookParams
from book_catalog_api.params import permit, require
from book_catalog_api.utils import nest_form_items


class TestRequire:
    def test_returns_nested_object(self):
        assert require({"book": {"title": "Dune"}}, "book") == {"title": "Dune"}

    @pytest.mark.parametrize("payload", [{}, {"book": {}}, {"book": None}, {"book": []}, {"book": "Dune"}])
    def test_missing_or_empty(self, payload):
        with pytest.raises(ParameterMissing) as excinfo:
            require(payload, "book")
        assert excinfo.value.status_code == 400
        assert excinfo.value.message == "param is missing or the value is empty: book"


class TestPermit:
    def test_keeps_only_supplied_permitted_keys(self):
        attrs = permit({"title": "Dune", "id": 5, "isbn": "x"}, BookParams)
        assert attrs == {"title": "Dune"}

    def test_coerces_numeric_strings(self):
        attrs = permit({"year": "1965", "author_id": "3", "publisher_id": ""}, BookParams)
        assert attrs == {"year": 1965, "author_id": 3, "publisher_id": None}

    def test_numbers_become_text_for_text_fields(self):
        assert permit({"title": 1984, "edition": 2.5}, BookParams) == {"title": "1984", "edition": "2.5"}

    def test_year_outside_integer_range(self):
        with pytest.raises(RecordInvalid) as excinfo:
            permit({"year": str(10**20)}, BookParams)
        assert excinfo.value.message == "Validation failed: Year is out of range"

    def test_explicit_null_is_kept(self):
        assert permit({"title": None}, BookParams) == {"title": None}

    def test_uncoercible_values_are_invalid(self):
        with pytest.raises(RecordInvalid) as excinfo:
            permit({"title": ["a"], "author_id": "first"}, BookParams)
        assert excinfo.value.status_code == 422
        assert excinfo.value.message == "Validation failed: Title is invalid, Author is not a number"


class TestHumanizeAttribute:
    @pytest.mark.parametrize(
        "attribute, label",
        [("title", "Title"), ("author_id", "Author"), ("publisher", "Publisher"), ("page_count", "Page count")],
    )
    def test_labels(self, attribute, label):
        assert humanize_attribute(attribute) == label


class TestNestFormItems:
    def test_groups_bracketed_keys(self):
        items = [("book[title]", "Dune"), ("book[year]", "1965"), ("page", "2")]
        assert nest_form_items(items) == {"book": {"title": "Dune", "year": "1965"}, "page": "2"}

    def test_empty_inner_key_is_plain(self):
        assert nest_form_items([("book[]", "x")]) == {"book[]": "x"}

    def test_bracketed_key_replaces_plain_value(self):
        assert nest_form_items([("book", "x"), ("book[title]", "Dune")]) == {"book": {"title": "Dune"}}
