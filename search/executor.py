import operator
from typing import Iterable, Iterator, List

from models.article import Article
from search.parser import (
    DateClause,
    DateFilter,
    FieldClause,
    OrClause,
    ParsedQuery,
    RangeClause,
    Term,
)
from search.text import fold, strip_markup
from search.tokenizer import DATE_FIELD
from search.validator import FieldName, field_name, parse_date

COMPARATORS = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "=": operator.eq,
}


class Haystack:
    """Case-folded, markup-free text of one article, built once per match test."""

    __slots__ = ("article", "title", "content", "summary")

    def __init__(self, article: Article):
        self.article = article
        self.title = fold(article.title)
        self.content = fold(strip_markup(article.content))
        self.summary = fold(strip_markup(article.summary))

    def contains(self, folded_term: str) -> bool:
        return (
            folded_term in self.title
            or folded_term in self.content
            or folded_term in self.summary
        )


def _date_in(day, date_filter: DateFilter) -> bool:
    if date_filter.start is not None:
        start = parse_date(date_filter.start)
        if day < start or (day == start and not date_filter.start_inclusive):
            return False
    if date_filter.end is not None:
        end = parse_date(date_filter.end)
        if day > end or (day == end and not date_filter.end_inclusive):
            return False
    return True


class Matcher:
    """
    Decides whether an article satisfies a validated ParsedQuery.

    Filters are checked first, then the boolean clause tree, then the
    exclusions. Exclusions win over everything else.
    """

    def __init__(self, query: ParsedQuery):
        self.query = query
        self.excluded = [fold(term.text) for term in query.excluded]

    def _field(self, clause: FieldClause, hay: Haystack) -> bool:
        value = fold(clause.value)
        name = field_name(clause.name)
        if name is FieldName.TITLE:
            return value in hay.title
        if name is FieldName.CONTENT:
            return value in hay.content
        if name is FieldName.CATEGORY:
            category = hay.article.category
            return category is not None and fold(category.name) == value
        return False

    def _range(self, clause: RangeClause, hay: Haystack) -> bool:
        compare = COMPARATORS[clause.op]
        if clause.field == DATE_FIELD:
            return compare(hay.article.created_at.date(), parse_date(clause.value))
        return compare(hay.article.view_count, int(clause.value))

    def evaluate(self, clause, hay: Haystack) -> bool:
        if isinstance(clause, Term):
            return hay.contains(fold(clause.text))
        if isinstance(clause, OrClause):
            return self.evaluate(clause.left, hay) or self.evaluate(clause.right, hay)
        if isinstance(clause, FieldClause):
            return self._field(clause, hay)
        if isinstance(clause, RangeClause):
            return self._range(clause, hay)
        if isinstance(clause, DateClause):
            day = hay.article.created_at.date()
            return parse_date(clause.low) <= day <= parse_date(clause.high)
        raise TypeError(f"unknown clause: {clause!r}")

    def matches(self, article: Article) -> bool:
        hay = Haystack(article)
        query = self.query

        for clause in query.field_filters.values():
            if not self._field(clause, hay):
                return False

        if query.date_filter is not None and not _date_in(article.created_at.date(), query.date_filter):
            return False

        for clause in query.numeric_filters:
            if not self._range(clause, hay):
                return False

        for clause in query.required:
            if not self.evaluate(clause, hay):
                return False

        return not any(hay.contains(term) for term in self.excluded)


def iter_matches(query: ParsedQuery, corpus: Iterable[Article]) -> Iterator[Article]:
    matcher = Matcher(query)
    for article in corpus:
        if matcher.matches(article):
            yield article


def execute(query: ParsedQuery, corpus: Iterable[Article]) -> List[Article]:
    """Return the articles of corpus matching a validated query, in corpus order."""
    return list(iter_matches(query, corpus))
