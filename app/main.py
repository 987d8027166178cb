import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.core.config import Settings
from app.core.search_service import SearchService
from app.api.routes import documents, search
from app.api.errors import search_error_handler
from app.core.exceptions import SearchError


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    app.state.search_service = SearchService(settings)
    app.state.search_service.load_data()
    yield


app = FastAPI(
    title="Article Search",
    lifespan=lifespan,
)

app.include_router(search.router, prefix="/search", tags=["search"])
app.include_router(documents.router, prefix="/documents", tags=["documents"])
app.add_exception_handler(SearchError, search_error_handler)
