from datetime import datetime
from pydantic import BaseModel, Field
from typing import Dict, Optional

from models.article import Article

class CategoryModel(BaseModel):
    id: Optional[int] = None
    name: str

class TranslationModel(BaseModel):
    title: str
    content: str = ""
    summary: str = ""

class ArticleDocument(BaseModel):
    id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1)
    content: str = ""
    summary: str = ""
    category: Optional[CategoryModel] = None
    created_at: datetime
    view_count: int = Field(default=0, ge=0)
    translations: Dict[str, TranslationModel] = Field(default_factory=dict)

    @classmethod
    def from_article(cls, article: Article, with_translations: bool = False):
        data = article.to_dict()
        if not with_translations:
            data["translations"] = {}
        return cls.model_validate(data)
