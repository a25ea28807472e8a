from .base import ChatClient, SpeechClient
from .factory import create_chat_client, create_speech_client
from .models import (
    AttachedFile,
    ChatAnswer,
    ChatFallback,
    ChatMessage,
    ChatResult,
    GroundingSource,
    Language,
)
from .providers import GeminiChatClient, GeminiSpeechClient

__all__ = [
    "ChatClient",
    "SpeechClient",
    "create_chat_client",
    "create_speech_client",
    "AttachedFile",
    "ChatAnswer",
    "ChatFallback",
    "ChatMessage",
    "ChatResult",
    "GroundingSource",
    "Language",
    "GeminiChatClient",
    "GeminiSpeechClient",
]
