from pydantic import BaseModel, Field
from typing import Optional

class SearchQuery(BaseModel):
    q: str = Field(
        default="",
        max_length=500,
        description="Search query string (advanced syntax)"
    )

    page: int = Field(
        default=1,
        ge=1,
        description="Page number (1-based)"
    )

    limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of results per page"
    )

    lang: Optional[str] = Field(
        default=None,
        max_length=10,
        description="Language of the returned titles and snippets"
    )

    include_future: bool = Field(
        default=False,
        description="Include articles scheduled in the future"
    )
