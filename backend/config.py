"""
Runtime configuration loaded from environment variables.

The Anthropic API key is read from a .env file in the working directory
(or the nearest parent directory that has one):

ANTHROPIC_API_KEY=your_real_key_here

python-dotenv loads that file before the environment is read. Without a
key the analyzer still extracts metrics and returns the "not configured"
suggestion record.

The CLI history database defaults to ~/.seo-analyzer/history.db.
"""

from dataclasses import dataclass, field
import logging
import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

DATA_DIR_NAME = ".seo-analyzer"
FALSE_VALUES = {"0", "false", "no", "off"}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def default_history_db_path() -> Path:
    return Path.home() / DATA_DIR_NAME / "history.db"


@dataclass(frozen=True)
class Settings:
    anthropic_api_key: str = ""
    claude_model: str = "claude-3-5-sonnet-latest"
    claude_max_tokens: int = 1024
    claude_temperature: float = 0.2
    claude_timeout_seconds: float = 30.0
    claude_max_retries: int = 2
    strict_ai_validation: bool = False
    fetch_timeout_seconds: float = 10.0
    history_db_path: Path = field(default_factory=default_history_db_path)
    log_level: str = "INFO"
    port: int = 3000

    @property
    def ai_enabled(self) -> bool:
        return bool(self.anthropic_api_key)


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in FALSE_VALUES


def load_settings(dotenv_path: Path | None = None) -> Settings:
    """Read .env (if present) and build Settings from the environment."""
    load_dotenv(dotenv_path=dotenv_path or find_dotenv(usecwd=True))

    history_path = os.getenv("HISTORY_DB_PATH", "").strip()
    return Settings(
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", "").strip(),
        claude_model=os.getenv("CLAUDE_MODEL", "").strip() or Settings.claude_model,
        claude_max_tokens=_env_int("CLAUDE_MAX_TOKENS", Settings.claude_max_tokens),
        claude_temperature=_env_float("CLAUDE_TEMPERATURE", Settings.claude_temperature),
        claude_timeout_seconds=_env_float("CLAUDE_TIMEOUT_SECONDS", Settings.claude_timeout_seconds),
        claude_max_retries=max(0, _env_int("CLAUDE_MAX_RETRIES", Settings.claude_max_retries)),
        strict_ai_validation=_env_bool("AI_STRICT_VALIDATION", False),
        fetch_timeout_seconds=_env_float("FETCH_TIMEOUT_SECONDS", Settings.fetch_timeout_seconds),
        history_db_path=Path(history_path) if history_path else default_history_db_path(),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        port=_env_int("PORT", Settings.port),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
