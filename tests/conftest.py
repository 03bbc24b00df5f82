import copy
import sys
from pathlib import Path
from typing import Dict, List
from unittest.mock import MagicMock

import pytest

# Add project root to path
root = Path(__file__).resolve().parents[1]
project_root = str(root)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from src.app.errors import ProviderError  # noqa: E402
from src.db.repositories import TranscriptRepo  # noqa: E402
from src.llms.gateway import CompletionGateway, SamplingConfig  # noqa: E402
from src.session.archiver import TranscriptArchiver  # noqa: E402
from src.session.models import HiddenFacts  # noqa: E402
from src.session.session_manager import SessionManager  # noqa: E402
from src.session.session_store import SessionStore  # noqa: E402


class FakeLLM:
    """Records every prompt; replies "reply <n>" padded with whitespace."""

    name = "fake"

    def __init__(self, fail_on=(), empty_on=()):
        self.fail_on = set(fail_on)
        self.empty_on = set(empty_on)
        self.calls: List[Dict] = []

    def chat(self, *, model, messages, temperature, max_tokens):
        self.calls.append(
            {
                "model": model,
                "messages": copy.deepcopy(messages),
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        n = len(self.calls)
        if n in self.fail_on:
            raise ProviderError("upstream exploded", status=503, payload={"error": "internal secret detail"})
        if n in self.empty_on:
            return "   "
        return f"  reply {n}  "


FIXED_FACTS = HiddenFacts(
    customer_name="Alex Johnson",
    product="Smart Fitness Watch",
    tracking_number="739182645",
    final_location="Springfield, IL",
)


@pytest.fixture()
def fake_llm():
    return FakeLLM()


@pytest.fixture()
def sampling():
    return SamplingConfig(model="test-model", temperature=0.85, max_tokens=200)


@pytest.fixture()
def collection():
    return MagicMock(name="chat_transcripts")


@pytest.fixture()
def archiver(collection):
    return TranscriptArchiver(TranscriptRepo(collection), mode="document")


@pytest.fixture()
def store():
    return SessionStore()


@pytest.fixture()
def manager(store, fake_llm, sampling, archiver):
    return SessionManager(store, CompletionGateway(fake_llm, sampling), archiver)
