from pathlib import Path

from config import Settings, load_settings

ENV_VARS = [
    "CLAUDE_MODEL",
    "CLAUDE_MAX_TOKENS",
    "CLAUDE_TEMPERATURE",
    "CLAUDE_TIMEOUT_SECONDS",
    "CLAUDE_MAX_RETRIES",
    "AI_STRICT_VALIDATION",
    "FETCH_TIMEOUT_SECONDS",
    "HISTORY_DB_PATH",
    "LOG_LEVEL",
    "PORT",
]


def _load(monkeypatch, tmp_path, **env) -> Settings:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name, value in env.items():
        monkeypatch.setenv(name, value)
    return load_settings(dotenv_path=tmp_path / "missing.env")


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    settings = _load(monkeypatch, tmp_path)
    assert settings == Settings()
    assert settings.ai_enabled is False
    assert settings.history_db_path == tmp_path / ".seo-analyzer" / "history.db"


def test_values_from_environment(monkeypatch, tmp_path):
    settings = _load(
        monkeypatch,
        tmp_path,
        ANTHROPIC_API_KEY=" sk-test ",
        CLAUDE_MODEL="claude-test",
        CLAUDE_MAX_TOKENS="512",
        FETCH_TIMEOUT_SECONDS="4.5",
        AI_STRICT_VALIDATION="1",
        HISTORY_DB_PATH=str(tmp_path / "h.db"),
        LOG_LEVEL="debug",
    )
    assert settings.anthropic_api_key == "sk-test"
    assert settings.ai_enabled is True
    assert settings.claude_model == "claude-test"
    assert settings.claude_max_tokens == 512
    assert settings.fetch_timeout_seconds == 4.5
    assert settings.strict_ai_validation is True
    assert settings.history_db_path == Path(tmp_path / "h.db")
    assert settings.log_level == "DEBUG"


def test_invalid_numbers_fall_back(monkeypatch, tmp_path):
    settings = _load(monkeypatch, tmp_path, CLAUDE_MAX_TOKENS="lots", PORT="", CLAUDE_MAX_RETRIES="-3")
    assert settings.claude_max_tokens == Settings.claude_max_tokens
    assert settings.port == Settings.port
    assert settings.claude_max_retries == 0


def test_false_values(monkeypatch, tmp_path):
    for value in ("0", "false", "No", "OFF"):
        assert _load(monkeypatch, tmp_path, AI_STRICT_VALIDATION=value).strict_ai_validation is False


def test_dotenv_file_is_read(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    dotenv = tmp_path / ".env"
    dotenv.write_text("CLAUDE_MODEL=claude-from-dotenv\n")
    assert load_settings(dotenv_path=dotenv).claude_model == "claude-from-dotenv"


def test_dotenv_found_from_working_directory(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    project = tmp_path / "project"
    nested = project / "reports"
    nested.mkdir(parents=True)
    (project / ".env").write_text("CLAUDE_MODEL=claude-from-cwd\n")
    monkeypatch.chdir(nested)
    assert load_settings().claude_model == "claude-from-cwd"
