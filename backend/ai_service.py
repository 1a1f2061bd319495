"""
AI scoring for extracted analytics.

aggregate() turns an AnalyticsRecord into a SuggestionRecord using an
injected client. It never raises: a missing key, a failed request or an
unparseable answer all come back as fixed fallback records.
"""

import json
import logging
import math
from typing import Protocol

from anthropic import Anthropic

from config import Settings
from models import AnalyticsRecord, SuggestionRecord

logger = logging.getLogger(__name__)

SYSTEM_MESSAGE = """You are an SEO expert.
Return ONLY a single valid raw JSON object.
Do not include markdown, code fences, or text outside JSON."""

PROMPT_TEMPLATE = """Analyze the following on-page SEO metrics for the URL: {url}

SEO Metrics:
- Word Count: {wordCount}
- Title: "{title}" ({titleLength} characters)
- Meta Description: "{metaDescription}" ({metaDescriptionLength} characters)
- H1 Tags: {h1Count}
- H2 Tags: {h2Count}
- H3 Tags: {h3Count}
- Total Images: {imageCount}
- Images Missing Alt Text: {imagesWithoutAlt}
- Internal Links: {internalLinks}
- External Links: {externalLinks}

Provide your response in the following JSON format only (no markdown, no code blocks):
{{
    "score": <integer 0-100>,
    "explanation": "<brief 1-2 sentence explanation of the score>",
    "suggestions": ["<suggestion 1>", "<suggestion 2>", "<suggestion 3>", "<suggestion 4>", "<suggestion 5>"],
    "blogIdeas": ["<blog idea 1>", "<blog idea 2>"]
}}

Base your score and suggestions on SEO best practices:
- Title should be {title_min}-{title_max} characters
- Meta description should be {meta_min}-{meta_max} characters
- Page should have exactly {h1_target} H1 tag
- All images should have alt text
- Good content length is {min_words}+ words
- Balance of internal and external links"""

TITLE_LENGTH_RANGE = (50, 60)
META_DESCRIPTION_LENGTH_RANGE = (150, 160)
H1_TARGET = 1
MIN_WORD_COUNT = 1000


def config_missing_result() -> SuggestionRecord:
    return {
        "score": None,
        "explanation": "Anthropic API key not configured",
        "suggestions": ["Configure ANTHROPIC_API_KEY in .env file to enable AI suggestions"],
        "blogIdeas": [],
    }


def unavailable_result() -> SuggestionRecord:
    return {
        "score": None,
        "explanation": "Unable to generate AI suggestions",
        "suggestions": ["AI analysis temporarily unavailable"],
        "blogIdeas": [],
    }


class CompletionClient(Protocol):
    def complete(self, prompt: str) -> str: ...


class ClaudeClient:
    """Single-shot Claude Messages API client.

    Timeouts and transport retries are the SDK's own, configured from
    Settings; the caller never retries.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 1024,
        temperature: float = 0.2,
        timeout: float = 30.0,
        max_retries: int = 2,
    ) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = Anthropic(api_key=api_key, timeout=timeout, max_retries=max_retries)

    def complete(self, prompt: str) -> str:
        response = self._client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=SYSTEM_MESSAGE,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
        )
        if getattr(response, "stop_reason", None) == "max_tokens":
            logger.warning("Claude output hit max_tokens for model=%s", self.model)
        return _extract_response_text(response)


def build_client(settings: Settings) -> ClaudeClient | None:
    """Return a configured client, or None when no API key is set."""
    if not settings.ai_enabled:
        return None
    return ClaudeClient(
        api_key=settings.anthropic_api_key,
        model=settings.claude_model,
        max_tokens=settings.claude_max_tokens,
        temperature=settings.claude_temperature,
        timeout=settings.claude_timeout_seconds,
        max_retries=settings.claude_max_retries,
    )


def _extract_response_text(response: object) -> str:
    content = ""
    for block in getattr(response, "content", []) or []:
        text = getattr(block, "text", None)
        if text:
            content += text
    return content.strip()


def build_prompt(analytics: AnalyticsRecord, url: str) -> str:
    """Embed every analytics field, the URL and the scoring heuristics."""
    return PROMPT_TEMPLATE.format(
        url=url,
        title_min=TITLE_LENGTH_RANGE[0],
        title_max=TITLE_LENGTH_RANGE[1],
        meta_min=META_DESCRIPTION_LENGTH_RANGE[0],
        meta_max=META_DESCRIPTION_LENGTH_RANGE[1],
        h1_target=H1_TARGET,
        min_words=MIN_WORD_COUNT,
        **analytics,
    )


def extract_json(text: str) -> dict | None:
    """
    Return the first JSON object embedded in `text`, or None.

    The model may wrap its answer in prose or Markdown fences, so every
    "{" is tried as a starting point and trailing text is ignored.
    """
    if not text:
        return None

    text = text.strip()
    if text.startswith("```"):
        text = text.replace("```json", "").replace("```", "").strip()

    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        except RecursionError:
            logger.warning("AI response JSON is nested too deeply to decode.")
            return None
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def normalize_suggestions(raw: dict) -> SuggestionRecord:
    """Coerce an untrusted AI payload into the SuggestionRecord shape."""
    def score(v) -> int | None:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return None
        if isinstance(v, float) and not math.isfinite(v):
            return None
        return int(min(100, max(0, round(v))))

    def str_list(v) -> list[str]:
        if not isinstance(v, list):
            return []
        return [str(x).strip() for x in v if x is not None and str(x).strip()]

    explanation = raw.get("explanation")
    return {
        "score": score(raw.get("score")),
        "explanation": str(explanation).strip() if explanation is not None else "",
        "suggestions": str_list(raw.get("suggestions")),
        "blogIdeas": str_list(raw.get("blogIdeas")),
    }


def aggregate(
    analytics: AnalyticsRecord,
    url: str,
    client: CompletionClient | None,
    strict: bool = False,
) -> SuggestionRecord:
    """
    Score `analytics` with the AI client and return its suggestions.
    On missing key, API/network failure or missing JSON returns a fallback. Never raises.
    """
    if client is None:
        logger.info("ANTHROPIC_API_KEY not configured; skipping AI suggestions.")
        return config_missing_result()

    try:
        content = client.complete(build_prompt(analytics, url))
        logger.debug("Raw AI response for %s: %s", url, content)

        parsed = extract_json(content)
        if parsed is None:
            logger.warning("AI response for %s contained no JSON object.", url)
            return unavailable_result()

        if strict:
            return normalize_suggestions(parsed)
        return parsed
    except Exception as e:
        logger.warning("AI suggestion error for %s: %s", url, e)
        return unavailable_result()
