import pytest
from datetime import date
from search.parser import parse_query
from search.validator import validate, ensure_valid, parse_date, sort_field, SortField, suggest
from search.errors import (
    ValidationError,
    InvalidSearchParameters,
    INVALID_DATE,
    INVALID_RANGE,
    INVALID_NUMBER,
    UNKNOWN_FIELD,
    UNKNOWN_SORT_FIELD,
)


def codes(raw):
    return [e.code for e in validate(parse_query(raw))]


# ------------------------------
# Dates
# ------------------------------

def test_parse_date_valid():
    assert parse_date("2024-02-29") == date(2024, 2, 29)


@pytest.mark.parametrize("value", ["2024-02-30", "2023-02-29", "2024-1-5", "20240105", "2024-13-01", "soon"])
def test_parse_date_invalid(value):
    assert parse_date(value) is None


def test_calendar_invalid_date_is_rejected():
    assert codes("date:2024-02-30") == [INVALID_DATE]


def test_malformed_date_bound():
    assert codes("date:>2024/01/01") == [INVALID_DATE]


def test_reversed_range():
    assert codes("date:2024-06-30..2024-06-01") == [INVALID_RANGE]


def test_reversed_merged_bounds():
    assert codes("date:>=2024-06-30 date:<2024-06-01") == [INVALID_RANGE]


def test_single_day_range_is_valid():
    assert codes("date:2024-06-01..2024-06-01") == []


def test_dates_inside_or_groups_are_checked():
    assert codes("rust OR date:2024-02-30..2024-03-01") == [INVALID_DATE]


# ------------------------------
# Numbers
# ------------------------------

@pytest.mark.parametrize("raw", ["views:>abc", "views:>=-5", "views:1.5"])
def test_invalid_numbers(raw):
    assert codes(raw) == [INVALID_NUMBER]


def test_valid_numbers():
    assert codes("views:>=0 views:<100000") == []


# ------------------------------
# Fields and sort
# ------------------------------

def test_unknown_field():
    errors = validate(parse_query('bogus:"x"'))
    assert [e.code for e in errors] == [UNKNOWN_FIELD]
    assert errors[0].value == "bogus"


def test_unknown_field_suggestion():
    errors = validate(parse_query("titel:rust"))
    assert "did you mean 'title'" in errors[0].message


def test_field_names_are_case_sensitive():
    assert codes("Title:rust") == [UNKNOWN_FIELD]


def test_unknown_sort_field():
    errors = validate(parse_query("sort:popularity:desc"))
    assert [e.code for e in errors] == [UNKNOWN_SORT_FIELD]


@pytest.mark.parametrize("name,expected", [
    ("date", SortField.DATE),
    ("created_at", SortField.DATE),
    ("views", SortField.VIEWS),
    ("view_count", SortField.VIEWS),
    ("title", SortField.TITLE),
    ("relevance", SortField.RELEVANCE),
    ("bogus", None),
])
def test_sort_field_aliases(name, expected):
    assert sort_field(name) is expected


def test_suggest_nothing_close():
    assert suggest("zzzzzz", ["title", "content", "category"]) is None


# ------------------------------
# Collection behaviour
# ------------------------------

def test_all_errors_are_collected():
    raw = 'bogus:x date:2024-02-30 views:>many sort:popularity:asc'
    assert codes(raw) == [UNKNOWN_FIELD, INVALID_NUMBER, INVALID_DATE, UNKNOWN_SORT_FIELD]


def test_validation_is_idempotent():
    query = parse_query('bogus:x date:2024-02-30 views:>many')
    assert validate(query) == validate(query)


def test_valid_query_has_no_errors():
    query = parse_query('rust "exact" title:"x" category:Go views:>=1 date:2024-01-01..2024-02-01 sort:title:asc')
    assert validate(query) == []
    assert ensure_valid(query) is query


def test_ensure_valid_raises_with_every_error():
    with pytest.raises(InvalidSearchParameters) as e:
        ensure_valid(parse_query("bogus:x views:>y"))
    assert len(e.value.errors) == 2
    assert all(isinstance(err, ValidationError) for err in e.value.errors)
    assert str(e.value).startswith("Invalid search parameters: ")
