from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Protocol

from src.app.errors import ProviderError
from src.app.settings import Settings


class ChatLLM(Protocol):
    name: str

    def chat(
        self,
        *,
        model: str,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> str: ...


@dataclass(frozen=True)
class SamplingConfig:
    """
    Fixed per deployment; attached unchanged to every request.
    """
    model: str
    temperature: float = 0.85
    max_tokens: int = 200

    def __post_init__(self) -> None:
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be within [0, 2], got {self.temperature}")
        if self.max_tokens <= 0:
            raise ValueError("max_tokens must be positive")

    @classmethod
    def from_settings(cls, settings: Settings) -> "SamplingConfig":
        return cls(
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )


class CompletionGateway:
    """
    One provider attempt per call. Returns a trimmed, non-empty reply or
    raises ProviderError; anything else the client raises is wrapped too.
    """

    def __init__(self, llm: ChatLLM, sampling: SamplingConfig):
        self.llm = llm
        self.sampling = sampling

    def complete(self, messages: List[Dict[str, str]]) -> str:
        try:
            raw = self.llm.chat(
                model=self.sampling.model,
                messages=messages,
                temperature=self.sampling.temperature,
                max_tokens=self.sampling.max_tokens,
            )
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"{getattr(self.llm, 'name', 'provider')} call failed: {e}") from e

        reply = (raw or "").strip() if isinstance(raw, str) else ""
        if not reply:
            raise ProviderError("provider returned no usable content", payload=raw)
        return reply
