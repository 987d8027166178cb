from typing import Iterable, List, Optional, Sequence

from models.article import Article
from search.executor import Haystack
from search.parser import SortSpec
from search.text import fold
from search.validator import SortField, sort_field

# relevance proxy weights, per matched occurrence
FIELD_WEIGHTS = {
    "title": 5.0,
    "summary": 2.0,
    "content": 1.0,
}


def relevance(article: Article, terms: Sequence[str]) -> float:
    hay = Haystack(article)
    score = 0.0
    for term in terms:
        folded = fold(term)
        for field, weight in FIELD_WEIGHTS.items():
            score += weight * getattr(hay, field).count(folded)
    return score


def _key(field: SortField, terms: Sequence[str]):
    if field is SortField.DATE:
        return lambda a: a.created_at
    if field is SortField.VIEWS:
        return lambda a: a.view_count
    if field is SortField.TITLE:
        return lambda a: fold(a.title)
    if field is SortField.RELEVANCE:
        return lambda a: relevance(a, terms)
    raise ValueError(f"unsupported sort field: {field!r}")


def sort_articles(
    matches: Iterable[Article],
    sort: Optional[SortSpec] = None,
    terms: Sequence[str] = (),
) -> List[Article]:
    """
    Order matched articles.

    Without a directive: newest first, ties by id descending. With one: the
    requested key and direction, ties by id ascending. Both orders are total,
    so repeated runs over the same input give the same list.
    """
    if sort is None:
        return sorted(matches, key=lambda a: (a.created_at, a.id), reverse=True)

    field = sort_field(sort.field)
    if field is None:
        raise ValueError(f"unknown sort field: {sort.field!r}")

    # sorted() is stable and keeps equal keys in input order even with reverse=True
    by_id = sorted(matches, key=lambda a: a.id)
    return sorted(by_id, key=_key(field, terms), reverse=sort.descending)
