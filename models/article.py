from datetime import date, datetime, timezone


class InvalidDocumentError(ValueError):
    pass


class Category:
    def __init__(self, id, name):
        self.id = int(id) if isinstance(id, str) and id.strip().isdigit() else id
        self.name = " ".join(str(name or "").split())

    def __eq__(self, other):
        return isinstance(other, Category) and (self.id, self.name) == (other.id, other.name)

    def __repr__(self):
        return f"Category(id={self.id!r}, name={self.name!r})"

    def to_dict(self):
        return {"id": self.id, "name": self.name}


class Translation:
    def __init__(self, title, content="", summary=""):
        self.title = Article.normalize_title(title)
        self.content = Article.normalize_text(content)
        self.summary = Article.normalize_text(summary)

    def to_dict(self):
        return {"title": self.title, "content": self.content, "summary": self.summary}


class Article:
    """
    A searchable article. An Article always has a positive id, a non-empty
    title, a timestamp and a non-negative view count. Instances are treated as
    read-only once built.
    """
    def __init__(self, id, title, content, created_at, view_count=0,
                 category=None, summary="", translations=None):
        self.id = Article.normalize_id(id)
        self.title = Article.normalize_title(title)
        self.content = Article.normalize_text(content)
        self.summary = Article.normalize_text(summary)
        self.category = Article.normalize_category(category)
        self.created_at = Article.normalize_created_at(created_at)
        self.view_count = Article.normalize_view_count(view_count)
        self.translations = Article.normalize_translations(translations)

    @staticmethod
    def normalize_id(id):
        if id is None or id == "" or isinstance(id, bool):
            raise InvalidDocumentError("missing id")

        if isinstance(id, str):
            id = id.strip()
            if not id.isdigit():
                raise InvalidDocumentError(f"id is not a number: {id!r}")
            id = int(id)

        if not isinstance(id, int):
            raise InvalidDocumentError("id is not int")

        if id <= 0:
            raise InvalidDocumentError("id must be positive")

        return id

    @staticmethod
    def normalize_title(title):
        if not title or not isinstance(title, str):
            raise InvalidDocumentError("missing title")

        title = " ".join(title.split())
        if not title:
            raise InvalidDocumentError("missing title")
        return title

    @staticmethod
    def normalize_text(text):
        if not text:
            return ""
        if not isinstance(text, str):
            raise InvalidDocumentError("text field is not a string")
        return text.strip()

    @staticmethod
    def normalize_category(category):
        if category is None or isinstance(category, Category):
            return category

        if isinstance(category, dict):
            if not category.get("name"):
                return None
            return Category(category.get("id"), category["name"])

        if isinstance(category, str):
            return Category(None, category) if category.strip() else None

        raise InvalidDocumentError("category is not None, string or object")

    @staticmethod
    def normalize_created_at(created_at):
        if created_at is None or created_at == "":
            raise InvalidDocumentError("missing created_at")

        if isinstance(created_at, str):
            try:
                created_at = datetime.fromisoformat(created_at.strip())
            except ValueError:
                raise InvalidDocumentError(f"invalid created_at: {created_at!r}")

        if isinstance(created_at, datetime):
            if created_at.tzinfo is not None:
                created_at = created_at.astimezone(timezone.utc).replace(tzinfo=None)
            return created_at

        if isinstance(created_at, date):
            return datetime(created_at.year, created_at.month, created_at.day)

        raise InvalidDocumentError("created_at is not a date")

    @staticmethod
    def normalize_view_count(view_count):
        if view_count is None or view_count == "":
            return 0

        if isinstance(view_count, bool):
            raise InvalidDocumentError("view_count is not int")

        if isinstance(view_count, str):
            view_count = view_count.strip()
            if not view_count.isdigit():
                raise InvalidDocumentError(f"view_count is not a number: {view_count!r}")
            view_count = int(view_count)

        if isinstance(view_count, float):
            if not view_count.is_integer():
                raise InvalidDocumentError("view_count is not int")
            view_count = int(view_count)

        if not isinstance(view_count, int):
            raise InvalidDocumentError("view_count is not int")

        if view_count < 0:
            raise InvalidDocumentError("view_count must not be negative")

        return view_count

    @staticmethod
    def normalize_translations(translations):
        if not translations:
            return {}

        # a list of {"language": ..., "title": ...} rows or a {language: {...}} map
        if isinstance(translations, list):
            rows = {}
            for row in translations:
                if not isinstance(row, dict) or not row.get("language"):
                    raise InvalidDocumentError("translation without language")
                rows[row["language"]] = row
            translations = rows

        if not isinstance(translations, dict):
            raise InvalidDocumentError("translations is not a list or object")

        result = {}
        for language, row in translations.items():
            if isinstance(row, Translation):
                result[language] = row
            elif isinstance(row, dict):
                result[language] = Translation(
                    row.get("title"), row.get("content", ""), row.get("summary", "")
                )
            else:
                raise InvalidDocumentError(f"invalid translation for {language!r}")
        return result

    def localized(self, language):
        """Return this article with title/content/summary in the given language, if translated."""
        translation = self.translations.get(language) if language else None
        if translation is None:
            return self

        return Article(
            id=self.id,
            title=translation.title,
            content=translation.content,
            summary=translation.summary,
            category=self.category,
            created_at=self.created_at,
            view_count=self.view_count,
            translations=self.translations,
        )

    def __repr__(self):
        return f"Article(id={self.id!r}, title={self.title!r})"

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "summary": self.summary,
            "category": self.category.to_dict() if self.category else None,
            "created_at": self.created_at.isoformat(),
            "view_count": self.view_count,
            "translations": {lang: t.to_dict() for lang, t in self.translations.items()},
        }

    @classmethod
    def from_dict(cls, data):
        return cls(id=data.get("id", None),
                   title=data.get("title", None),
                   content=data.get("content", None),
                   summary=data.get("summary", None),
                   category=data.get("category", None),
                   created_at=data.get("created_at", None),
                   view_count=data.get("view_count", None),
                   translations=data.get("translations", None))
