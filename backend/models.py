"""Data models and types used across the backend.

Keys are camelCase because these records are returned verbatim as JSON
to the report renderer and the history store.
"""

from typing import TypedDict


class AnalyticsRecord(TypedDict):
    """Deterministic on-page metrics extracted from a single HTML document."""

    wordCount: int
    title: str
    titleLength: int
    metaDescription: str
    metaDescriptionLength: int
    h1Count: int
    h2Count: int
    h3Count: int
    imageCount: int
    imagesWithoutAlt: int
    internalLinks: int
    externalLinks: int


class SuggestionRecord(TypedDict):
    """Score and prose returned by the AI service (or a fallback)."""

    score: int | None
    explanation: str
    suggestions: list[str]
    blogIdeas: list[str]


class AnalysisResult(TypedDict):
    analytics: AnalyticsRecord
    aiSuggestions: SuggestionRecord


class HistoryEntry(TypedDict):
    id: str
    url: str
    timestamp: str
    score: int | None
    result: AnalysisResult
