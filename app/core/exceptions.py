class SearchError(Exception):
    code = "SEARCH_ERROR"
    status_code = 400
    message = "Search failed"

    def __init__(self, message: str | None = None, details=None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

class InvalidSearchSyntaxError(SearchError):
    code = "INVALID_SEARCH_SYNTAX"
    message = "Invalid search syntax"

class InvalidSearchParametersError(SearchError):
    code = "INVALID_SEARCH_PARAMETERS"
    message = "Invalid search parameters"

class InvalidDocumentRequestError(SearchError):
    code = "INVALID_DOCUMENT"
    message = "The document is invalid"
