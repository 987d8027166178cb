from dataclasses import dataclass
from typing import List, Optional, Sequence

SYNTAX_PREFIX = "Invalid search syntax: "
PARAMETERS_PREFIX = "Invalid search parameters: "


class QueryError(Exception):
    code = "QUERY_ERROR"
    message = "query could not be processed"
    prefix = SYNTAX_PREFIX

    def __init__(self, message: str | None = None, value=None):
        self.message = message or self.message
        self.value = value
        super().__init__(self.prefix + self.message)

    def to_dict(self):
        return {"code": self.code, "message": self.message, "value": self.value}


# --- Lexical errors ---

class LexError(QueryError):
    code = "LEX_ERROR"
    message = "query could not be tokenized"


class UnbalancedQuotesError(LexError):
    code = "UNBALANCED_QUOTES"
    message = "unbalanced quotes"


class EmptyFieldValueError(LexError):
    code = "EMPTY_FIELD_VALUE"
    message = "empty field value"

    def __init__(self, field: str):
        super().__init__(f"empty value for field '{field}'", value=field)


class EmptyPhraseError(LexError):
    code = "EMPTY_PHRASE"
    message = "empty quoted phrase"


class InvalidSortDirectiveError(LexError):
    code = "INVALID_SORT"

    def __init__(self, directive: str):
        super().__init__(
            f"invalid sort directive '{directive}', use sort:<field>:<asc|desc>",
            value=directive,
        )


# --- Parse errors ---

class ParseError(QueryError):
    code = "PARSE_ERROR"
    message = "query could not be parsed"


class DuplicateFieldError(ParseError):
    code = "DUPLICATE_FIELD"

    def __init__(self, field: str):
        super().__init__(f"field '{field}' is given more than once", value=field)


class ConflictingSortError(ParseError):
    code = "CONFLICTING_SORT"
    message = "only one sort directive is allowed"


class InvalidExclusionError(ParseError):
    code = "INVALID_EXCLUSION"

    def __init__(self, source: str):
        super().__init__(
            f"'{source}' cannot be excluded, only words and phrases can",
            value=source,
        )


class DanglingOperatorError(ParseError):
    code = "DANGLING_OPERATOR"

    def __init__(self, operator: str):
        super().__init__(f"'{operator}' must join two search clauses", value=operator)


# --- Validation errors ---

INVALID_DATE = "INVALID_DATE"
INVALID_RANGE = "INVALID_RANGE"
INVALID_NUMBER = "INVALID_NUMBER"
UNKNOWN_FIELD = "UNKNOWN_FIELD"
UNKNOWN_SORT_FIELD = "UNKNOWN_SORT_FIELD"


@dataclass(frozen=True)
class ValidationError:
    """One semantic problem found in a parsed query."""

    code: str
    message: str
    value: Optional[str] = None

    def to_dict(self):
        return {"code": self.code, "message": self.message, "value": self.value}


class InvalidSearchParameters(QueryError):
    code = "INVALID_SEARCH_PARAMETERS"
    message = "query parameters are invalid"
    prefix = PARAMETERS_PREFIX

    def __init__(self, errors: Sequence[ValidationError]):
        self.errors: List[ValidationError] = list(errors)
        super().__init__("; ".join(e.message for e in self.errors))

    def to_dict(self):
        return {
            "code": self.code,
            "message": self.message,
            "errors": [e.to_dict() for e in self.errors],
        }
