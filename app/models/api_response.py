from pydantic import BaseModel
from typing import Any, Dict, Generic, List, TypeVar, Optional

T = TypeVar('T')

class APIError(BaseModel):
    code: str
    message: str
    # one entry per problem found in the query
    details: Optional[List[Dict[str, Any]]] = None

class Meta(BaseModel):
    page: Optional[int] = None
    limit: Optional[int] = None
    total_hits: Optional[int] = None
    took_ms: Optional[float] = None

class APIResponse(BaseModel, Generic[T]):
    status: str
    data: Optional[T] = None
    meta: Optional[Meta] = None
    error: Optional[APIError] = None
