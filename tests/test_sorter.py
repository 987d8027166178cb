import pytest
from models.article import Article
from search.parser import SortSpec
from search.sorter import sort_articles, relevance


def make_article(id, title, created_at, views=0, content=""):
    return Article(id=id, title=title, content=content, created_at=created_at, view_count=views)


@pytest.fixture
def articles():
    return [
        make_article(1, "banana", "2024-01-01", 10),
        make_article(2, "Apple", "2024-03-01", 30),
        make_article(3, "cherry", "2024-03-01", 10),
        make_article(4, "apple pie", "2023-12-31", 20),
    ]


def ids(articles):
    return [a.id for a in articles]


# ------------------------------------------------------
# Default order
# ------------------------------------------------------

def test_default_is_newest_first_ties_by_id_desc(articles):
    assert ids(sort_articles(articles)) == [3, 2, 1, 4]


def test_default_order_is_stable_across_runs(articles):
    first = ids(sort_articles(articles))
    for _ in range(5):
        assert ids(sort_articles(list(reversed(articles)))) == first


# ------------------------------------------------------
# Directives
# ------------------------------------------------------

def test_date_asc_ties_by_id_asc(articles):
    assert ids(sort_articles(articles, SortSpec("date", "asc"))) == [4, 1, 2, 3]


def test_date_desc_ties_by_id_asc(articles):
    assert ids(sort_articles(articles, SortSpec("date", "desc"))) == [2, 3, 1, 4]


def test_views_asc(articles):
    assert ids(sort_articles(articles, SortSpec("views", "asc"))) == [1, 3, 4, 2]


def test_views_desc(articles):
    assert ids(sort_articles(articles, SortSpec("view_count", "desc"))) == [2, 4, 1, 3]


def test_title_is_case_insensitive(articles):
    assert ids(sort_articles(articles, SortSpec("title", "asc"))) == [2, 4, 1, 3]


def test_created_at_alias(articles):
    assert ids(sort_articles(articles, SortSpec("created_at", "asc"))) == [4, 1, 2, 3]


def test_unknown_sort_field_raises(articles):
    with pytest.raises(ValueError):
        sort_articles(articles, SortSpec("bogus", "asc"))


def test_empty_input():
    assert sort_articles([]) == []


# ------------------------------------------------------
# Relevance proxy
# ------------------------------------------------------

def test_relevance_weights_title_over_content():
    in_title = make_article(1, "Rust tips", "2024-01-01")
    in_content = make_article(2, "Tips", "2024-01-01", content="rust rust rust")
    assert relevance(in_title, ["rust"]) == 5.0
    assert relevance(in_content, ["rust"]) == 3.0


def test_relevance_sort(articles):
    ordered = sort_articles(articles, SortSpec("relevance", "desc"), terms=["apple"])
    assert ids(ordered) == [2, 4, 1, 3]
