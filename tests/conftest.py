import pytest

from config import Settings


class FakeClient:
    """Stand-in for ClaudeClient: returns canned text or raises."""

    def __init__(self, response: str = "", error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


class FakeResponse:
    def __init__(self, text: str = "", status_error: Exception | None = None) -> None:
        self.text = text
        self.apparent_encoding = "utf-8"
        self.encoding = None
        self._status_error = status_error

    def raise_for_status(self) -> None:
        if self._status_error is not None:
            raise self._status_error


SCENARIO_HTML = (
    "<html><head><title>Hi</title></head>"
    "<body><h1>A</h1><p>one two three</p><img src=x></body></html>"
)

AI_PAYLOAD = {
    "score": 72,
    "explanation": "Solid basics, thin content.",
    "suggestions": ["Add a meta description", "Write more content"],
    "blogIdeas": ["10 tips for beginners"],
}


@pytest.fixture(autouse=True)
def _no_api_key(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(history_db_path=tmp_path / "history.db")
