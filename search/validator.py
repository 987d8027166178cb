from datetime import date, datetime
from enum import Enum
from typing import List, Optional

import regex
from rapidfuzz import fuzz, process

from search.errors import (
    INVALID_DATE,
    INVALID_NUMBER,
    INVALID_RANGE,
    UNKNOWN_FIELD,
    UNKNOWN_SORT_FIELD,
    InvalidSearchParameters,
    ValidationError,
)
from search.parser import DateClause, FieldClause, ParsedQuery, RangeClause
from search.tokenizer import DATE_FIELD

DATE_FORMAT = regex.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
NUMBER_FORMAT = regex.compile(r"[0-9]+")

SUGGESTION_THRESHOLD = 70


class FieldName(str, Enum):
    TITLE = "title"
    CONTENT = "content"
    CATEGORY = "category"


class SortField(str, Enum):
    DATE = "date"
    VIEWS = "views"
    TITLE = "title"
    RELEVANCE = "relevance"


SORT_ALIASES = {
    "created_at": SortField.DATE,
    "view_count": SortField.VIEWS,
}

FIELD_NAMES = [f.value for f in FieldName]
SORT_NAMES = [f.value for f in SortField] + list(SORT_ALIASES)


def parse_date(value: str) -> Optional[date]:
    """Return the date for a strict YYYY-MM-DD string, None if it is not one."""
    if not DATE_FORMAT.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def field_name(name: str) -> Optional[FieldName]:
    try:
        return FieldName(name)
    except ValueError:
        return None


def sort_field(name: str) -> Optional[SortField]:
    if name in SORT_ALIASES:
        return SORT_ALIASES[name]
    try:
        return SortField(name)
    except ValueError:
        return None


def suggest(name: str, choices: List[str]) -> Optional[str]:
    match = process.extractOne(name, choices, scorer=fuzz.ratio, score_cutoff=SUGGESTION_THRESHOLD)
    if match is None:
        return None
    return match[0]


def _unknown(code, kind, name, choices):
    message = f"unknown {kind} '{name}'"
    hint = suggest(name, choices)
    if hint:
        message += f" (did you mean '{hint}'?)"
    else:
        message += f", expected one of: {', '.join(choices)}"
    return ValidationError(code, message, name)


def _check_date(value, errors) -> Optional[date]:
    parsed = parse_date(value)
    if parsed is None:
        errors.append(ValidationError(
            INVALID_DATE, f"invalid date '{value}', use YYYY-MM-DD", value
        ))
    return parsed


def _check_interval(low, high, errors):
    start = _check_date(low, errors) if low is not None else None
    if high == low:
        # single day, already checked
        return
    end = _check_date(high, errors) if high is not None else None
    if start is not None and end is not None and start > end:
        errors.append(ValidationError(
            INVALID_RANGE, f"date range start {low} is after end {high}", f"{low}..{high}"
        ))


def _check_clause(clause, errors):
    if isinstance(clause, FieldClause):
        if field_name(clause.name) is None:
            errors.append(_unknown(UNKNOWN_FIELD, "field", clause.name, FIELD_NAMES))
    elif isinstance(clause, DateClause):
        _check_interval(clause.low, clause.high, errors)
    elif isinstance(clause, RangeClause):
        if clause.field == DATE_FIELD:
            _check_date(clause.value, errors)
        elif not NUMBER_FORMAT.fullmatch(clause.value):
            errors.append(ValidationError(
                INVALID_NUMBER,
                f"invalid number '{clause.value}' for {clause.field}, expected a non-negative integer",
                clause.value,
            ))


def validate(query: ParsedQuery) -> List[ValidationError]:
    """
    Collect every semantic error in the query.

    Does not stop at the first problem, so callers can report all of them at
    once. An empty list means the query is safe to execute.
    """
    errors: List[ValidationError] = []

    for clause in query.clauses():
        _check_clause(clause, errors)

    if query.date_filter is not None:
        _check_interval(query.date_filter.start, query.date_filter.end, errors)

    if query.sort is not None and sort_field(query.sort.field) is None:
        errors.append(_unknown(UNKNOWN_SORT_FIELD, "sort field", query.sort.field, SORT_NAMES))

    return errors


def ensure_valid(query: ParsedQuery) -> ParsedQuery:
    errors = validate(query)
    if errors:
        raise InvalidSearchParameters(errors)
    return query
