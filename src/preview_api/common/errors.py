PREVIEW_UNAVAILABLE_MESSAGE = (
    "Unable to generate preview for this URL. The site may be blocking "
    "requests or is temporarily unavailable."
)


class PreviewApiError(Exception):
    """Base error rendered to clients as ``{"message": ...}``."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PreviewApiError):
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(PreviewApiError):
    status_code = 404
    default_message = "Not found"


class PreviewUnavailableError(PreviewApiError):
    status_code = 400
    default_message = PREVIEW_UNAVAILABLE_MESSAGE


class FetchError(Exception):
    """Timeout, connection failure or non-2xx response from the target site."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class ExtractionError(Exception):
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to extract metadata from {url}: {reason}")
