"""Pytest configuration and shared fixtures."""
import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from sofia.audio import AudioBuffer
from sofia.llm import (
    AttachedFile,
    ChatAnswer,
    ChatClient,
    ChatResult,
    GroundingSource,
    Language,
    SpeechClient,
)


def make_chat_response(text=None, chunks=None):
    """Build an object shaped like a GenerateContentResponse with grounding."""
    grounding_chunks = [
        SimpleNamespace(web=SimpleNamespace(**web) if web is not None else None)
        for web in (chunks or [])
    ]
    candidate = SimpleNamespace(
        grounding_metadata=SimpleNamespace(grounding_chunks=grounding_chunks)
    )
    return SimpleNamespace(text=text, candidates=[candidate])


def make_speech_response(data):
    """Build an object shaped like a GenerateContentResponse with inline audio."""
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type="audio/L16;rate=24000"))
    candidate = SimpleNamespace(content=SimpleNamespace(parts=[part]))
    return SimpleNamespace(text=None, candidates=[candidate])


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "gemini": os.getenv("GEMINI_API_KEY"),
    }


@pytest.fixture
def genai_client():
    """A stand-in for genai.Client whose generate_content is an AsyncMock."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    return client


@pytest.fixture
def pdf_attachment():
    """A small attachment as produced by load_attachment."""
    # base64 of b"%PDF-1.4 test"
    return AttachedFile(
        name="faktura.pdf",
        mime_type="application/pdf",
        data="data:application/pdf;base64,JVBERi0xLjQgdGVzdA=="
    )


class FakeChatClient(ChatClient):
    """Chat client that records calls and returns a canned result."""

    def __init__(self, result: ChatResult | None = None):
        self.result = result or ChatAnswer(
            text="Termin rejestracji VAT...",
            sources=[GroundingSource(title="ISAP", uri="https://isap.sejm.gov.pl")]
        )
        self.calls: list[tuple[str, Language, AttachedFile | None]] = []

    async def ask(self, prompt, language, file=None):
        self.calls.append((prompt, language, file))
        return self.result

    async def close(self):
        pass


class FakeSpeechClient(SpeechClient):
    """Speech client that returns canned PCM (or None)."""

    sample_rate = 24000
    channels = 1

    def __init__(self, pcm: bytes | None = b"\x00\x00\xff\x7f\x00\x80"):
        self.pcm = pcm
        self.calls: list[str] = []

    async def synthesize(self, text):
        self.calls.append(text)
        return self.pcm

    async def close(self):
        pass


class FakePlayer:
    """Player that records buffers instead of touching a sound device."""

    def __init__(self):
        self.played: list[AudioBuffer] = []

    async def play(self, buffer):
        self.played.append(buffer)


@pytest.fixture
def chat_client():
    return FakeChatClient()


@pytest.fixture
def speech_client():
    return FakeSpeechClient()


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def chat_response():
    """Factory for grounded chat responses."""
    return make_chat_response


@pytest.fixture
def speech_response():
    """Factory for inline-audio speech responses."""
    return make_speech_response
