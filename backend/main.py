"""On-page SEO Analyzer API – FastAPI app."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ai_service import CompletionClient, build_client
from analyzer import Fetcher, analyze_url
from config import Settings, configure_logging, load_settings
from errors import AnalyzerError, FetchError, MissingURLError
from schemas import AnalyzeRequest, validate_url
from scraper import fetch_page

logger = logging.getLogger(__name__)

_DEFAULT_CLIENT = object()


def create_app(
    settings: Settings | None = None,
    client: CompletionClient | None | object = _DEFAULT_CLIENT,
    fetcher: Fetcher = fetch_page,
) -> FastAPI:
    """
    Build the API. The AI client is created from settings unless one is
    passed in; pass client=None to run without AI suggestions.
    """
    settings = settings or load_settings()
    if client is _DEFAULT_CLIENT:
        client = build_client(settings)

    app = FastAPI(
        title="On-Page SEO Analyzer API",
        description="On-page SEO metrics with AI suggestions",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.ai_client = client
    app.state.fetcher = fetcher

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AnalyzerError)
    def handle_analyzer_error(request: Request, exc: AnalyzerError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    def handle_invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        # missing, malformed or non-object JSON bodies carry no usable URL
        return handle_analyzer_error(request, MissingURLError())

    @app.exception_handler(Exception)
    def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Analysis error: %s", exc, exc_info=exc)
        return handle_analyzer_error(request, FetchError())

    @app.post("/api/analyze")
    def analyze(request: Request, body: AnalyzeRequest | None = None) -> dict:
        """
        Pipeline: validate URL -> fetch page -> extract metrics -> AI suggestions.
        """
        url = validate_url(body.url if body is not None else "")
        state = request.app.state
        result = analyze_url(url, state.ai_client, state.settings, fetcher=state.fetcher)
        return {"success": True, **result}

    @app.get("/health")
    def health() -> dict:
        """Health check for deployment."""
        return {"status": "ok", "ai_enabled": app.state.ai_client is not None}

    return app


def _build_default_app() -> FastAPI:
    settings = load_settings()
    configure_logging(settings.log_level)
    if not settings.ai_enabled:
        logger.warning("ANTHROPIC_API_KEY is not set – AI suggestions are disabled")
    return create_app(settings)


app = _build_default_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=load_settings().port, reload=False)
