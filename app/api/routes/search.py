from fastapi import APIRouter, Request, Depends, Query
from app.models.search_query import SearchQuery
from app.models.api_response import APIResponse, Meta
from app.models.search_response import QueryCheck, SearchResponse
from time import perf_counter

router = APIRouter()

@router.get("/", response_model=APIResponse[SearchResponse])
def search(
    request: Request,
    query: SearchQuery = Depends()
    ):
    service = request.app.state.search_service

    start_time = perf_counter()

    results = service.search(
        query.q,
        page=query.page,
        limit=query.limit,
        language=query.lang,
        include_future=query.include_future
    )

    took_ms = (perf_counter() - start_time) * 1000

    return APIResponse(
        status="ok",
        data=results,
        meta=Meta(
            page=results.pagination.page,
            limit=results.pagination.limit,
            total_hits=results.pagination.total,
            took_ms=round(took_ms, 2)
        )
    )

@router.get("/validate", response_model=APIResponse[QueryCheck])
def validate(request: Request, q: str = Query("", max_length=500)):
    # same checks that gate /search, for as-you-type feedback
    service = request.app.state.search_service

    return APIResponse(
        status="ok",
        data=service.check(q)
    )

@router.get("/health", response_model=APIResponse)
def health(request: Request):
    service = request.app.state.search_service
    
    return APIResponse(
        status="ok",
        data=service.health_check()
    )
