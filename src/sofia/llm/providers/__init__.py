from .gemini import GeminiChatClient, GeminiSpeechClient

__all__ = ["GeminiChatClient", "GeminiSpeechClient"]
