"""
Sofia: a bilingual (Polish/Russian) assistant for Polish accounting and business law.

Answers come from Gemini with Google Search grounding; replies can be read
aloud through Gemini text-to-speech. Each module hides one design decision:
which model answers (llm), how PCM becomes playable audio (audio), and how
a conversation is held together (session).
"""

__version__ = "0.1.0"

from .audio import AudioBuffer, decode_pcm16
from .llm import (
    AttachedFile,
    ChatAnswer,
    ChatClient,
    ChatFallback,
    ChatMessage,
    ChatResult,
    GroundingSource,
    Language,
    SpeechClient,
    create_chat_client,
    create_speech_client,
)
from .session import ChatSession

__all__ = [
    "AudioBuffer",
    "decode_pcm16",
    "AttachedFile",
    "ChatAnswer",
    "ChatClient",
    "ChatFallback",
    "ChatMessage",
    "ChatResult",
    "GroundingSource",
    "Language",
    "SpeechClient",
    "create_chat_client",
    "create_speech_client",
    "ChatSession",
]
