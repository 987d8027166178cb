from dataclasses import dataclass, field
from typing import List

import regex

from search.errors import (
    EmptyFieldValueError,
    EmptyPhraseError,
    InvalidSortDirectiveError,
    UnbalancedQuotesError,
)

FIELD_PREFIX = regex.compile(r"[A-Za-z_][A-Za-z0-9_]*:")
COMPARISON = regex.compile(r">=|<=|>|<")
SORT_VALUE = regex.compile(r"(\w+):(asc|desc)", regex.IGNORECASE)

NUMERIC_FIELDS = ("views", "view_count")
DATE_FIELD = "date"
SORT_FIELD = "sort"
QUOTE = '"'


@dataclass(frozen=True)
class Token:
    """
    Base class for lexical tokens.

    start/end are offsets into the raw query string, so raw[start:end] is the
    exact source text of the token. They do not take part in equality.
    """
    start: int = field(default=0, kw_only=True, compare=False)
    end: int = field(default=0, kw_only=True, compare=False)

    def source(self, raw: str) -> str:
        return raw[self.start:self.end]


@dataclass(frozen=True)
class Word(Token):
    text: str


@dataclass(frozen=True)
class Phrase(Token):
    text: str


@dataclass(frozen=True)
class Field(Token):
    name: str
    value: str
    quoted: bool = False


@dataclass(frozen=True)
class Range(Token):
    name: str
    op: str
    value: str


@dataclass(frozen=True)
class DateRange(Token):
    low: str
    high: str


@dataclass(frozen=True)
class Sort(Token):
    field: str
    direction: str


@dataclass(frozen=True)
class And(Token):
    pass


@dataclass(frozen=True)
class Or(Token):
    pass


@dataclass(frozen=True)
class Exclude(Token):
    term: Token


CONNECTIVES = {"AND": And, "OR": Or}


def _read_phrase(raw, pos):
    # raw[pos] is an opening quote; quotes are known to be balanced
    close = raw.index(QUOTE, pos + 1)
    return raw[pos + 1:close], close + 1


def _read_bare(raw, pos):
    end = pos
    while end < len(raw) and not raw[end].isspace() and raw[end] != QUOTE:
        end += 1
    return raw[pos:end], end


def _scan_phrase(raw, pos):
    text, end = _read_phrase(raw, pos)
    if not text:
        raise EmptyPhraseError(value=raw[pos:end])
    return Phrase(text, start=pos, end=end)


def _scan_date(text, start, end):
    if ".." in text:
        low, _, high = text.partition("..")
        if not low or not high:
            raise EmptyFieldValueError(DATE_FIELD)
        return DateRange(low, high, start=start, end=end)

    op = COMPARISON.match(text)
    if op:
        value = text[op.end():]
        if not value:
            raise EmptyFieldValueError(DATE_FIELD)
        return Range(DATE_FIELD, op.group(), value, start=start, end=end)

    # date:YYYY-MM-DD is the single day
    return DateRange(text, text, start=start, end=end)


def _scan_numeric(name, text, start, end):
    op = COMPARISON.match(text)
    if not op:
        return Range(name, "=", text, start=start, end=end)

    value = text[op.end():]
    if not value:
        raise EmptyFieldValueError(name)
    return Range(name, op.group(), value, start=start, end=end)


def _scan_field(raw, start, name, value_pos):
    if value_pos < len(raw) and raw[value_pos] == QUOTE:
        text, end = _read_phrase(raw, value_pos)
        quoted = True
    else:
        text, end = _read_bare(raw, value_pos)
        quoted = False

    if not text:
        raise EmptyFieldValueError(name)

    if name == SORT_FIELD:
        match = SORT_VALUE.fullmatch(text)
        if not match:
            raise InvalidSortDirectiveError(raw[start:end])
        return Sort(match.group(1), match.group(2).lower(), start=start, end=end)

    if name == DATE_FIELD:
        return _scan_date(text, start, end)

    if name in NUMERIC_FIELDS:
        return _scan_numeric(name, text, start, end)

    return Field(name, text, quoted, start=start, end=end)


def _scan_term(raw, pos, excluded=False):
    if raw[pos] == QUOTE:
        return _scan_phrase(raw, pos)

    prefix = FIELD_PREFIX.match(raw, pos)
    if prefix:
        return _scan_field(raw, pos, prefix.group()[:-1], prefix.end())

    text, end = _read_bare(raw, pos)
    # AND/OR after a '-' are plain words
    if not excluded and text in CONNECTIVES:
        return CONNECTIVES[text](start=pos, end=end)
    return Word(text, start=pos, end=end)


def _scan_token(raw, pos):
    nxt = pos + 1
    if raw[pos] == "-" and nxt < len(raw) and not raw[nxt].isspace():
        term = _scan_term(raw, nxt, excluded=True)
        return Exclude(term, start=pos, end=term.end)
    return _scan_term(raw, pos)


def tokenize(raw: str) -> List[Token]:
    """
    Split a raw query string into tokens.

    Whitespace outside quotes separates tokens, whitespace inside quotes is kept.
    A bare word also ends at a double quote, so every non-whitespace character
    belongs to exactly one token. Raises a LexError on malformed input.
    """
    if not raw:
        return []

    if raw.count(QUOTE) % 2:
        raise UnbalancedQuotesError(value=raw)

    tokens = []
    pos = 0
    while pos < len(raw):
        if raw[pos].isspace():
            pos += 1
            continue
        token = _scan_token(raw, pos)
        tokens.append(token)
        pos = token.end

    return tokens
