import pytest

from src.app.errors import ConfigError
from src.app.settings import Settings, load_settings

ENV_VARS = [
    "MONGO_URI", "MONGO_DB", "MONGO_TLS", "TRANSCRIPTS_COLLECTION", "ARCHIVE_MODE",
    "LLM_PROVIDER", "OPENAI_API_KEY", "CEREBRAS_API_KEY", "LLM_MODEL", "LLM_TEMPERATURE",
    "LLM_MAX_TOKENS", "LLM_TIMEOUT_S", "PERSONA_MODE", "TYPING_DELAY_MS_PER_CHAR",
    "TYPING_DELAY_MAX_MS", "SESSION_IDLE_TTL_S", "SESSION_SWEEP_INTERVAL_S",
    "CORS_ORIGINS", "PORT", "LOG_LEVEL", "LOG_JSON",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = load_settings()

    assert s.mongo_uri is None
    assert s.llm_provider == "openai"
    assert s.llm_model == "gpt-4o-mini"
    assert s.llm_temperature == 0.85
    assert s.llm_max_tokens == 200
    assert s.persona_mode == "standard"
    assert s.archive_mode == "document"
    assert s.port == 3000
    assert s.cors_origins == ("*",)


def test_cerebras_provider_picks_its_default_model(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "Cerebras")
    monkeypatch.setenv("CEREBRAS_API_KEY", "csk-test")
    s = load_settings()

    assert s.llm_model == "llama3.1-8b"
    assert s.provider_api_key() == "csk-test"


def test_overrides(monkeypatch):
    monkeypatch.setenv("PERSONA_MODE", "hidden_facts")
    monkeypatch.setenv("ARCHIVE_MODE", "append")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, https://app.example.com")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_JSON", "no")
    s = load_settings()

    assert s.persona_mode == "hidden_facts"
    assert s.archive_mode == "append"
    assert s.cors_origins == ("http://localhost:5173", "https://app.example.com")
    assert s.port == 8080
    assert s.log_json is False


@pytest.mark.parametrize(
    "name, value",
    [
        ("LLM_PROVIDER", "anthropic-ish"),
        ("PERSONA_MODE", "chaotic"),
        ("ARCHIVE_MODE", "firestore"),
        ("LLM_TEMPERATURE", "2.5"),
        ("LLM_TEMPERATURE", "warm"),
        ("LLM_MAX_TOKENS", "0"),
        ("PORT", "eighty"),
    ],
)
def test_invalid_values_raise_config_error(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        load_settings()


def test_missing_credentials():
    s = Settings(mongo_uri=None)
    with pytest.raises(ConfigError):
        s.require_mongo_uri()
    with pytest.raises(ConfigError):
        s.provider_api_key()
