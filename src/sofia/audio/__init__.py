from .capture import (
    VOICE_MESSAGE_MIME_TYPE,
    VOICE_MESSAGE_NAME,
    VoiceRecorder,
    collect_recording,
    pcm_to_wav,
)
from .pcm import AudioBuffer, decode_pcm16, encode_pcm16
from .playback import AudioPlayer, save_wav

__all__ = [
    "VOICE_MESSAGE_MIME_TYPE",
    "VOICE_MESSAGE_NAME",
    "VoiceRecorder",
    "collect_recording",
    "pcm_to_wav",
    "AudioBuffer",
    "decode_pcm16",
    "encode_pcm16",
    "AudioPlayer",
    "save_wav",
]
