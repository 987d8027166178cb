import logging
import math
import time
from datetime import datetime, timezone
from typing import Iterable, Iterator, Optional

from app.core.config import Settings
from app.core.exceptions import (
    InvalidDocumentRequestError,
    InvalidSearchParametersError,
    InvalidSearchSyntaxError,
)
from app.models.document import ArticleDocument
from app.models.search_response import (
    AppliedSort,
    Pagination,
    QueryCheck,
    SearchResponse,
    SearchResult,
)
from ingestion.ingest import load_articles
from models.article import Article
from search.errors import InvalidSearchParameters, QueryError
from search.highlighter import highlight, highlight_snippet
from search.query import QueryEngine, check_query
from search.validator import sort_field


class SearchService:
    def __init__(self, settings: Optional[Settings] = None, articles: Iterable[Article] = ()):
        self.settings = settings or Settings()
        self.engine = QueryEngine()
        # replaced, never mutated, so a running search keeps its own snapshot
        self.articles = tuple(articles)

    def load_data(self):
        data_path = self.settings.data_path
        if not data_path.exists():
            logging.warning("No article data at %s, starting with an empty corpus", data_path)
            self.articles = ()
            return

        load_start = time.perf_counter()
        self.articles = tuple(load_articles(data_path))
        load_end = time.perf_counter()

        logging.info(
            "Loaded %d articles from %s in %.3fs",
            len(self.articles), data_path, load_end - load_start,
        )

    def add_article(self, article: Article):
        if any(a.id == article.id for a in self.articles):
            raise InvalidDocumentRequestError(
                f"An article with id {article.id} already exists",
                details=[{"id": article.id}],
            )
        self.articles = self.articles + (article,)
        logging.info("Added article id=%s (%d total)", article.id, len(self.articles))

    def _corpus(self, language: Optional[str], include_future: bool) -> Iterator[Article]:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        for article in self.articles:
            if not include_future and article.created_at > now:
                continue
            yield article.localized(language)

    def _limit(self, limit: Optional[int]) -> int:
        if limit is None or limit < 1 or limit > self.settings.max_limit:
            return self.settings.default_limit
        return limit

    def search(
        self,
        query: str,
        page: int = 1,
        limit: Optional[int] = None,
        language: Optional[str] = None,
        include_future: Optional[bool] = None,
    ) -> SearchResponse:
        page = max(page, 1)
        limit = self._limit(limit)
        if include_future is None:
            include_future = self.settings.include_future

        try:
            outcome = self.engine.search(query, self._corpus(language, include_future))
        except InvalidSearchParameters as e:
            raise InvalidSearchParametersError(str(e), details=[err.to_dict() for err in e.errors])
        except QueryError as e:
            raise InvalidSearchSyntaxError(str(e), details=[e.to_dict()])

        total = len(outcome.articles)
        start = (page - 1) * limit
        page_articles = outcome.articles[start:start + limit]

        results = []
        for article in page_articles:
            results.append(
                SearchResult(
                    document=ArticleDocument.from_article(article),
                    highlighted_title=highlight(article.title, outcome.terms, escape=True),
                    highlighted_snippet=highlight_snippet(
                        article.summary or article.content, outcome.terms, escape=True
                    ),
                )
            )

        return SearchResponse(
            query=query,
            results=results,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=math.ceil(total / limit),
            ),
            sort=AppliedSort(
                field=sort_field(outcome.sort.field).value,
                direction=outcome.sort.direction,
            ),
        )

    def check(self, query: str) -> QueryCheck:
        errors = check_query(query)
        return QueryCheck(query=query, valid=not errors, errors=errors)

    def health_check(self):
        return {
            "total_documents": len(self.articles),
            "status": "ok"
        }
