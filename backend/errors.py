"""Typed errors for the analysis pipeline.

Each error carries the user-facing message and the HTTP status the API
responds with. AI failures are not represented here: they never leave
ai_service.
"""


class AnalyzerError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MissingURLError(AnalyzerError):
    status_code = 400

    def __init__(self, message: str = "URL is required") -> None:
        super().__init__(message)


class InvalidURLError(AnalyzerError):
    status_code = 400

    def __init__(self, message: str = "Invalid URL format") -> None:
        super().__init__(message)


class FetchError(AnalyzerError):
    """Page could not be fetched for a reason other than DNS or timeout."""

    status_code = 500

    def __init__(self, message: str = "Failed to analyze the website. Please try again.") -> None:
        super().__init__(message)


class PageNotFoundError(FetchError):
    status_code = 400

    def __init__(self, message: str = "Website not found. Please check the URL.") -> None:
        super().__init__(message)


class FetchTimeoutError(FetchError):
    status_code = 400

    def __init__(
        self,
        message: str = "Request timed out. The website may be slow or unavailable.",
    ) -> None:
        super().__init__(message)
