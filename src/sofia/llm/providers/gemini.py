"""Google Gemini chat and speech clients.

Uses the official Google GenAI SDK for async generation.
Reference: https://github.com/googleapis/python-genai

Both clients absorb every failure at their boundary: the chat client turns it
into a ChatFallback, the speech client into None. Nothing is retried.
"""

import base64
import binascii
from typing import Any

from google import genai
from google.genai import types
from loguru import logger

from ...prompts import get_system_instruction
from ..base import ChatClient, SpeechClient
from ..models import (
    AttachedFile,
    ChatAnswer,
    ChatFallback,
    ChatResult,
    GroundingSource,
    Language,
)

DEFAULT_CHAT_MODEL = "gemini-3-pro-preview"
DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_VOICE = "Kore"

# Synthesized speech is 16-bit little-endian mono PCM at this rate
SAMPLE_RATE = 24000
CHANNELS = 1

NO_RESPONSE_TEXT = "No response received."
ERROR_TEXT = "Error occurred while processing your request."


def build_parts(prompt: str, file: AttachedFile | None = None) -> list[types.Part]:
    """Build request parts: the optional inline attachment, then the prompt.

    The attachment's data-URI header is dropped; only the base64 payload
    after the first comma is sent.
    """
    parts = []
    if file is not None:
        parts.append(types.Part.from_bytes(
            data=base64.b64decode(file.payload, validate=True),
            mime_type=file.mime_type
        ))
    parts.append(types.Part(text=prompt))
    return parts


def extract_sources(response: Any) -> list[GroundingSource]:
    """Extract cited web sources from a grounded response.

    Only chunks exposing a web URI are kept; duplicates (by URI) are dropped
    in order of first appearance. A missing title falls back to the URI.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    sources = []
    seen = set()
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None)
        if not uri or uri in seen:
            continue
        seen.add(uri)
        sources.append(GroundingSource(title=getattr(web, "title", None) or uri, uri=uri))
    return sources


def extract_audio(response: Any) -> bytes | None:
    """Extract raw PCM bytes from a speech response.

    The SDK normally returns decoded bytes, but a base64 string is accepted
    too. Returns None when the payload is absent or empty.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    if not parts:
        return None

    inline_data = getattr(parts[0], "inline_data", None)
    data = getattr(inline_data, "data", None)
    if not data:
        return None

    if isinstance(data, str):
        return base64.b64decode(data, validate=True) or None
    return bytes(data)


class GeminiChatClient(ChatClient):
    """Google Gemini chat client with Google Search grounding.

    Hidden design decisions:
    - Google GenAI client initialization
    - Request assembly (system instruction, inline data, search tool)
    - Grounding source extraction and filtering
    - Failure absorption into ChatFallback
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_CHAT_MODEL,
        client: genai.Client | None = None,
        **client_kwargs: Any
    ):
        """Initialize Gemini chat client.

        Args:
            api_key: Google AI API key
            model: Model to answer with
            client: Existing GenAI client to share (api_key is then unused)
            **client_kwargs: Additional kwargs for Client
        """
        self._model = model
        self._client = client or genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        """Get the model name."""
        return self._model

    def _build_config(self, language: Language) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=get_system_instruction(language),
            tools=[types.Tool(google_search=types.GoogleSearch())],
        )

    async def ask(
        self,
        prompt: str,
        language: Language,
        file: AttachedFile | None = None,
    ) -> ChatResult:
        """Ask Gemini a question, grounded with Google Search.

        Args:
            prompt: User's question
            language: Answer language
            file: Optional attachment sent as inline data

        Returns:
            ChatAnswer, or ChatFallback if anything went wrong
        """
        try:
            contents = types.Content(role="user", parts=build_parts(prompt, file))
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=contents,
                config=self._build_config(language)
            )
            text = response.text or NO_RESPONSE_TEXT
            sources = extract_sources(response)
        except Exception as e:
            logger.exception(f"Gemini chat request failed: {e}")
            return ChatFallback(text=ERROR_TEXT)

        logger.debug(f"Gemini answered with {len(text)} chars and {len(sources)} sources")
        return ChatAnswer(text=text, sources=sources or None)

    async def close(self) -> None:
        """Close the Gemini client.

        Note: The Google GenAI client doesn't require explicit closing,
        but we implement this for interface consistency.
        """
        pass


class GeminiSpeechClient(SpeechClient):
    """Google Gemini text-to-speech client.

    Hidden design decisions:
    - Audio-only response modality and prebuilt voice selection
    - Payload extraction and base64 handling
    - Failure absorption into None
    """

    sample_rate = SAMPLE_RATE
    channels = CHANNELS

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_TTS_MODEL,
        voice: str = DEFAULT_VOICE,
        client: genai.Client | None = None,
        **client_kwargs: Any
    ):
        """Initialize Gemini speech client.

        Args:
            api_key: Google AI API key
            model: TTS model
            voice: Prebuilt voice name (Kore, Puck, Charon, ...)
            client: Existing GenAI client to share (api_key is then unused)
            **client_kwargs: Additional kwargs for Client
        """
        self._model = model
        self._voice = voice
        self._client = client or genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        """Get the model name."""
        return self._model

    @property
    def voice(self) -> str:
        """Get the voice name."""
        return self._voice

    def _build_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=self._voice)
                )
            ),
        )

    async def synthesize(self, text: str) -> bytes | None:
        """Synthesize speech with Gemini TTS.

        Args:
            text: Text to read aloud

        Returns:
            Raw 16-bit PCM at 24000 Hz mono, or None on any failure
        """
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=[types.Content(parts=[types.Part(text=text)])],
                config=self._build_config()
            )
            audio = extract_audio(response)
        except binascii.Error as e:
            logger.error(f"Gemini TTS returned malformed audio: {e}")
            return None
        except Exception as e:
            logger.exception(f"Gemini TTS request failed: {e}")
            return None

        if audio is None:
            logger.warning("Gemini TTS response contained no audio")
            return None

        logger.debug(f"Gemini TTS returned {len(audio)} bytes of PCM")
        return audio

    async def close(self) -> None:
        """Close the Gemini client (no-op, kept for interface consistency)."""
        pass
