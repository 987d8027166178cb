import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from models.article import Article
from search.errors import QueryError
from search.executor import iter_matches
from search.highlighter import extract_terms
from search.parser import DEFAULT_SORT, ParsedQuery, SortSpec, parse
from search.sorter import sort_articles
from search.tokenizer import tokenize
from search.validator import ensure_valid


def compile_query(query_string: str) -> ParsedQuery:
    """Tokenize, parse and validate; raises a QueryError subclass on bad input."""
    return ensure_valid(parse(tokenize(query_string)))


def check_query(query_string: str) -> List[dict]:
    """
    Every problem with a query, as dicts. Lexical and parse errors stop at the
    first one; validation errors are all reported.
    """
    if not query_string or not query_string.strip():
        return []
    try:
        compile_query(query_string)
    except QueryError as e:
        errors = getattr(e, "errors", None)
        if errors is not None:
            return [err.to_dict() for err in errors]
        return [e.to_dict()]
    return []


@dataclass
class SearchOutcome:
    query: Optional[ParsedQuery] = None
    articles: List[Article] = field(default_factory=list)
    sort: SortSpec = DEFAULT_SORT
    terms: List[str] = field(default_factory=list)


class QueryEngine:
    """Stateless: every call gets the corpus snapshot to search."""

    def search(self, query_string: str, documents: Iterable[Article]) -> SearchOutcome:
        """
        Run a query string against documents.

        An empty query runs nothing and returns an empty outcome. Invalid queries
        raise before any article is looked at.
        """
        if not query_string or not query_string.strip():
            return SearchOutcome()

        try:
            query = compile_query(query_string)
        except QueryError as e:
            logging.info("Rejected query %r: %s", query_string, e)
            raise

        terms = extract_terms(query)
        articles = sort_articles(iter_matches(query, documents), query.sort, terms)

        return SearchOutcome(
            query=query,
            articles=articles,
            sort=query.effective_sort,
            terms=terms,
        )
