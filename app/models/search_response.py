from pydantic import BaseModel
from typing import Any, Dict, List

from app.models.document import ArticleDocument

class SearchResult(BaseModel):
    document: ArticleDocument
    highlighted_title: str
    highlighted_snippet: str

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

class AppliedSort(BaseModel):
    field: str
    direction: str

class SearchResponse(BaseModel):
    query: str
    results: List[SearchResult]
    pagination: Pagination
    sort: AppliedSort

class QueryCheck(BaseModel):
    query: str
    valid: bool
    errors: List[Dict[str, Any]]
