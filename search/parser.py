from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Tuple, Union

from search.errors import (
    ConflictingSortError,
    DanglingOperatorError,
    DuplicateFieldError,
    InvalidExclusionError,
)
from search.tokenizer import (
    DATE_FIELD,
    And,
    DateRange,
    Exclude,
    Field,
    Or,
    Phrase,
    Range,
    Sort,
    Token,
    Word,
    tokenize,
)

VIEWS_FIELD = "views"


# --- AST ---

@dataclass(frozen=True)
class Term:
    text: str
    phrase: bool = False


@dataclass(frozen=True)
class FieldClause:
    name: str
    value: str
    quoted: bool = False


@dataclass(frozen=True)
class RangeClause:
    field: str
    op: str
    value: str


@dataclass(frozen=True)
class DateClause:
    """Inclusive date interval; both ends are raw YYYY-MM-DD strings."""
    low: str
    high: str


@dataclass(frozen=True)
class OrClause:
    left: "Clause"
    right: "Clause"


Clause = Union[Term, FieldClause, RangeClause, DateClause, OrClause]
FILTER_CLAUSES = (FieldClause, RangeClause, DateClause)


@dataclass(frozen=True)
class DateFilter:
    start: Optional[str] = None
    end: Optional[str] = None
    start_inclusive: bool = True
    end_inclusive: bool = True


@dataclass(frozen=True)
class SortSpec:
    field: str
    direction: str = "desc"

    @property
    def descending(self) -> bool:
        return self.direction == "desc"


DEFAULT_SORT = SortSpec("date", "desc")


@dataclass(frozen=True)
class ParsedQuery:
    """
    Structured form of a query.

    required clauses are ANDed together. Filters written at the top level of
    the query live in field_filters / date_filter / numeric_filters; filters
    that are operands of an OR stay inside the clause tree.
    """
    required: Tuple[Clause, ...] = ()
    excluded: Tuple[Term, ...] = ()
    field_filters: Mapping[str, FieldClause] = field(default_factory=lambda: MappingProxyType({}))
    date_filter: Optional[DateFilter] = None
    numeric_filters: Tuple[RangeClause, ...] = ()
    sort: Optional[SortSpec] = None

    @property
    def effective_sort(self) -> SortSpec:
        return self.sort or DEFAULT_SORT

    def clauses(self) -> Iterator[Clause]:
        """Every clause in the query, including those nested in OR groups."""
        for clause in self.required:
            yield from walk(clause)
        yield from self.field_filters.values()
        yield from self.numeric_filters


def walk(clause: Clause) -> Iterator[Clause]:
    if isinstance(clause, OrClause):
        yield from walk(clause.left)
        yield from walk(clause.right)
    else:
        yield clause


# --- Parsing ---

def _describe(token: Token) -> str:
    if isinstance(token, Field):
        return f'{token.name}:"{token.value}"' if token.quoted else f"{token.name}:{token.value}"
    if isinstance(token, Range):
        return f"{token.name}:{token.op}{token.value}"
    if isinstance(token, DateRange):
        return f"{DATE_FIELD}:{token.low}..{token.high}"
    if isinstance(token, Sort):
        return f"sort:{token.field}:{token.direction}"
    if isinstance(token, (And, Or)):
        return type(token).__name__.upper()
    return getattr(token, "text", "")


def _is_clause_token(token) -> bool:
    return isinstance(token, (Word, Phrase, Field, Range, DateRange))


def _to_clause(token: Token) -> Clause:
    if isinstance(token, Word):
        return Term(token.text)
    if isinstance(token, Phrase):
        return Term(token.text, phrase=True)
    if isinstance(token, Field):
        return FieldClause(token.name, token.value, token.quoted)
    if isinstance(token, Range):
        name = DATE_FIELD if token.name == DATE_FIELD else VIEWS_FIELD
        return RangeClause(name, token.op, token.value)
    if isinstance(token, DateRange):
        return DateClause(token.low, token.high)
    raise TypeError(f"not a clause token: {token!r}")


def _excluded_term(token: Exclude) -> Term:
    inner = token.term
    if isinstance(inner, (Word, Phrase)):
        return _to_clause(inner)
    raise InvalidExclusionError("-" + _describe(inner))


class _DateBounds:
    def __init__(self):
        self.start = None
        self.end = None
        self.start_inclusive = True
        self.end_inclusive = True

    def set_start(self, value, inclusive=True):
        if self.start is not None:
            raise DuplicateFieldError(DATE_FIELD)
        self.start = value
        self.start_inclusive = inclusive

    def set_end(self, value, inclusive=True):
        if self.end is not None:
            raise DuplicateFieldError(DATE_FIELD)
        self.end = value
        self.end_inclusive = inclusive

    def add(self, clause):
        if isinstance(clause, DateClause):
            self.set_start(clause.low)
            self.set_end(clause.high)
        elif clause.op in (">", ">="):
            self.set_start(clause.value, inclusive=clause.op == ">=")
        elif clause.op in ("<", "<="):
            self.set_end(clause.value, inclusive=clause.op == "<=")
        else:
            self.set_start(clause.value)
            self.set_end(clause.value)

    def build(self) -> Optional[DateFilter]:
        if self.start is None and self.end is None:
            return None
        return DateFilter(self.start, self.end, self.start_inclusive, self.end_inclusive)


def _build_chain(tokens: List[Token]):
    """
    Fold the token stream into the top-level AND chain.

    OR binds tighter than the implicit AND: it takes the clause right before
    it off the chain and pairs it with the clause right after it, so a b OR c
    becomes [a, (b OR c)] and a OR b OR c becomes [((a OR b) OR c)].
    """
    chain: List[Clause] = []
    excluded: List[Term] = []
    sort = None
    pending = None
    prev = None

    for token in tokens:
        if isinstance(token, (And, Or)):
            if prev is None or isinstance(prev, (And, Or)):
                raise DanglingOperatorError(_describe(token))
            if isinstance(token, Or) and not _is_clause_token(prev):
                raise DanglingOperatorError(_describe(token))
            pending = token
            prev = token
            continue

        if isinstance(pending, Or) and not _is_clause_token(token):
            raise DanglingOperatorError(_describe(pending))

        if isinstance(token, Sort):
            if sort is not None:
                raise ConflictingSortError(value=_describe(token))
            sort = SortSpec(token.field, token.direction)
        elif isinstance(token, Exclude):
            excluded.append(_excluded_term(token))
        else:
            clause = _to_clause(token)
            if isinstance(pending, Or):
                clause = OrClause(chain.pop(), clause)
            chain.append(clause)

        pending = None
        prev = token

    if pending is not None:
        raise DanglingOperatorError(_describe(pending))

    return chain, excluded, sort


def parse(tokens: List[Token]) -> ParsedQuery:
    chain, excluded, sort = _build_chain(tokens)

    required = []
    field_filters = {}
    numeric_filters = []
    dates = _DateBounds()

    for clause in chain:
        if isinstance(clause, FieldClause):
            if clause.name in field_filters:
                raise DuplicateFieldError(clause.name)
            field_filters[clause.name] = clause
        elif isinstance(clause, DateClause):
            dates.add(clause)
        elif isinstance(clause, RangeClause):
            if clause.field == DATE_FIELD:
                dates.add(clause)
            else:
                numeric_filters.append(clause)
        else:
            required.append(clause)

    return ParsedQuery(
        required=tuple(required),
        excluded=tuple(excluded),
        field_filters=MappingProxyType(field_filters),
        date_filter=dates.build(),
        numeric_filters=tuple(numeric_filters),
        sort=sort,
    )


def parse_query(raw: str) -> ParsedQuery:
    return parse(tokenize(raw))
