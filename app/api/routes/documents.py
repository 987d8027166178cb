from fastapi import APIRouter, Request
from app.core.exceptions import InvalidDocumentRequestError
from app.models.document import ArticleDocument
from models.article import Article, InvalidDocumentError

router = APIRouter()

@router.post("/")
def add_document(request: Request, doc: ArticleDocument):
    service = request.app.state.search_service

    try:
        article = Article.from_dict(doc.model_dump())
    except InvalidDocumentError as e:
        raise InvalidDocumentRequestError(str(e), details=[{"id": doc.id}])

    service.add_article(article)
    return {"status": "added", "id": article.id}
