from abc import ABC, abstractmethod
from typing import Any

from .models import AttachedFile, ChatResult, Language


class _ClosableClient(ABC):
    """Async context manager support shared by the remote clients."""

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "_ClosableClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise


class ChatClient(_ClosableClient):
    """Abstract client for the assistant's question/answer endpoint.

    This module hides the design decision of which generative model answers.
    Implementations must handle:
    - System instruction and request assembly
    - Inline attachment encoding
    - Web-search grounding and source extraction
    - Absorbing every transport failure into a ChatFallback

    Usage:
        async with client:
            result = await client.ask("Kiedy rejestracja VAT?", Language.PL)
    """

    @abstractmethod
    async def ask(
        self,
        prompt: str,
        language: Language,
        file: AttachedFile | None = None,
    ) -> ChatResult:
        """Ask the assistant a single question.

        Args:
            prompt: User's question
            language: Language the answer must be written in
            file: Optional attachment sent inline with the prompt

        Returns:
            ChatAnswer with text and sources, or ChatFallback with an
            error message. Never raises.
        """
        pass


class SpeechClient(_ClosableClient):
    """Abstract client for text-to-speech synthesis.

    Implementations return raw 16-bit little-endian PCM bytes; decoding into
    float samples is left to ``sofia.audio.pcm``.
    """

    sample_rate: int
    channels: int

    @abstractmethod
    async def synthesize(self, text: str) -> bytes | None:
        """Synthesize speech for the given text.

        Args:
            text: Text to read aloud

        Returns:
            Raw PCM bytes, or None if synthesis failed for any reason
        """
        pass
