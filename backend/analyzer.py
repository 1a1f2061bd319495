"""Analysis pipeline: fetch -> extract metrics -> AI suggestions -> result."""

import logging
from collections.abc import Callable

from ai_service import CompletionClient, aggregate
from config import Settings
from models import AnalysisResult
from scraper import extract_analytics, fetch_page

logger = logging.getLogger(__name__)

Fetcher = Callable[[str, float], str]


def analyze_html(
    html: str,
    url: str,
    client: CompletionClient | None,
    strict: bool = False,
) -> AnalysisResult:
    """Extract analytics from `html` and attach AI suggestions for them."""
    analytics = extract_analytics(html, url)
    ai_suggestions = aggregate(analytics, url, client, strict=strict)
    return {"analytics": analytics, "aiSuggestions": ai_suggestions}


def analyze_url(
    url: str,
    client: CompletionClient | None,
    settings: Settings,
    fetcher: Fetcher = fetch_page,
) -> AnalysisResult:
    """
    Fetch `url` and analyze it.
    Fetch errors propagate unchanged; extraction is not attempted.
    """
    html = fetcher(url, settings.fetch_timeout_seconds)
    result = analyze_html(html, url, client, strict=settings.strict_ai_validation)
    logger.info(
        "Analyzed %s: %d words, score=%s",
        url,
        result["analytics"]["wordCount"],
        result["aiSuggestions"].get("score"),
    )
    return result
