from __future__ import annotations

import os
from typing import Dict, List, Optional
from openai import APIConnectionError, APIStatusError, OpenAI, OpenAIError

from src.app.errors import ProviderError


class OpenAILLM:
    """
    Wrapper around the OpenAI chat completions API.
    Single attempt per call: SDK retries are disabled.
    """
    name = "openai"

    def __init__(self, api_key: Optional[str] = None, timeout_s: float = 30.0):
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.client = OpenAI(api_key=self.api_key, timeout=timeout_s, max_retries=0)

    def chat(
        self,
        *,
        model: str = "gpt-4o-mini",
        messages: List[Dict[str, str]],
        temperature: float = 0.85,
        max_tokens: int = 200,
    ) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except APIStatusError as e:
            raise ProviderError("openai returned an error status", status=e.status_code, payload=e.body) from e
        except APIConnectionError as e:
            raise ProviderError(f"openai unreachable: {e}") from e
        except OpenAIError as e:
            raise ProviderError(f"openai error: {e}") from e

        choices = getattr(resp, "choices", None) or []
        if not choices:
            return ""
        return choices[0].message.content or ""
