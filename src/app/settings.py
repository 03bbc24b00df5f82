from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Tuple

from src.app.errors import ConfigError

PROVIDERS = {"openai", "cerebras"}
PERSONA_MODES = {"standard", "hidden_facts"}
ARCHIVE_MODES = {"document", "append"}

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "cerebras": "llama3.1-8b",
}

def _get_env(name: str, default: str | None = None) -> str:
    v = os.getenv(name, default)
    if v is None or v == "":
        raise ConfigError(f"Missing required env var: {name}")
    return v

def _get_bool(name: str, default: str) -> bool:
    raw = os.getenv(name, default).lower().strip()
    return raw in {"1", "true", "yes", "y", "on"}

def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e

def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e

def _get_choice(name: str, default: str, allowed: set[str]) -> str:
    v = os.getenv(name, default).lower().strip()
    if v not in allowed:
        raise ConfigError(f"{name} must be one of {sorted(allowed)}, got {v!r}")
    return v

@dataclass(frozen=True)
class Settings:
    # Mongo
    mongo_uri: str | None
    mongo_db: str = "csr_roleplay"
    mongo_tls: bool = True
    transcripts_collection: str = "chat_transcripts"
    archive_mode: str = "document"

    # Completion provider
    llm_provider: str = "openai"
    openai_api_key: str | None = None
    cerebras_api_key: str | None = None
    llm_model: str = DEFAULT_MODELS["openai"]
    llm_temperature: float = 0.85
    llm_max_tokens: int = 200
    llm_timeout_s: float = 30.0

    # Roleplay
    persona_mode: str = "standard"
    typing_delay_ms_per_char: int = 0
    typing_delay_max_ms: int = 8000

    # Session lifecycle
    session_idle_ttl_s: int = 0
    session_sweep_interval_s: int = 60

    # HTTP
    cors_origins: Tuple[str, ...] = ("*",)
    port: int = 3000

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    def require_mongo_uri(self) -> str:
        if not self.mongo_uri:
            raise ConfigError("Missing required env var: MONGO_URI")
        return self.mongo_uri

    def provider_api_key(self) -> str:
        key = self.openai_api_key if self.llm_provider == "openai" else self.cerebras_api_key
        if not key:
            raise ConfigError(f"Missing API key for provider {self.llm_provider!r}")
        return key

def load_settings() -> Settings:
    provider = _get_choice("LLM_PROVIDER", "openai", PROVIDERS)

    temperature = _get_float("LLM_TEMPERATURE", 0.85)
    if not 0.0 <= temperature <= 2.0:
        raise ConfigError(f"LLM_TEMPERATURE must be within [0, 2], got {temperature}")

    max_tokens = _get_int("LLM_MAX_TOKENS", 200)
    if max_tokens <= 0:
        raise ConfigError("LLM_MAX_TOKENS must be positive")

    origins = tuple(o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip())

    return Settings(
        mongo_uri=os.getenv("MONGO_URI") or None,
        mongo_db=os.getenv("MONGO_DB", "csr_roleplay"),
        mongo_tls=_get_bool("MONGO_TLS", "true"),
        transcripts_collection=os.getenv("TRANSCRIPTS_COLLECTION", "chat_transcripts"),
        archive_mode=_get_choice("ARCHIVE_MODE", "document", ARCHIVE_MODES),
        llm_provider=provider,
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        cerebras_api_key=os.getenv("CEREBRAS_API_KEY"),
        llm_model=os.getenv("LLM_MODEL") or DEFAULT_MODELS[provider],
        llm_temperature=temperature,
        llm_max_tokens=max_tokens,
        llm_timeout_s=_get_float("LLM_TIMEOUT_S", 30.0),
        persona_mode=_get_choice("PERSONA_MODE", "standard", PERSONA_MODES),
        typing_delay_ms_per_char=max(0, _get_int("TYPING_DELAY_MS_PER_CHAR", 0)),
        typing_delay_max_ms=max(0, _get_int("TYPING_DELAY_MAX_MS", 8000)),
        session_idle_ttl_s=max(0, _get_int("SESSION_IDLE_TTL_S", 0)),
        session_sweep_interval_s=max(1, _get_int("SESSION_SWEEP_INTERVAL_S", 60)),
        cors_origins=origins or ("*",),
        port=_get_int("PORT", 3000),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=_get_bool("LOG_JSON", "true"),
    )
