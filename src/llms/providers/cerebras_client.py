from __future__ import annotations

import os
from typing import Dict, List, Optional
from cerebras.cloud.sdk import APIConnectionError, APIError, APIStatusError, Cerebras

from src.app.errors import ProviderError


class CerebrasLLM:
    """
    Wrapper around Cerebras Cloud SDK.
    """
    name = "cerebras"

    def __init__(self, api_key: Optional[str] = None, timeout_s: float = 30.0):
        self.api_key = api_key or os.environ.get("CEREBRAS_API_KEY")
        self.client = Cerebras(api_key=self.api_key, timeout=timeout_s, max_retries=0)

    def chat(
        self,
        *,
        model: str = "llama3.1-8b",
        messages: List[Dict[str, str]],
        temperature: float = 0.85,
        max_tokens: int = 200,
    ) -> str:
        """
        Non-streaming chat completion. SDK errors surface as ProviderError.
        """
        try:
            resp = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_completion_tokens=max_tokens,
                stream=False,
            )
        except APIStatusError as e:
            raise ProviderError("cerebras returned an error status", status=e.status_code, payload=e.body) from e
        except APIConnectionError as e:
            raise ProviderError(f"cerebras unreachable: {e}") from e
        except APIError as e:
            raise ProviderError(f"cerebras error: {e}", payload=e.body) from e

        choices = getattr(resp, "choices", None) or []
        if not choices:
            return ""
        return choices[0].message.content or ""
