"""Playback and export of decoded audio."""

import asyncio
from pathlib import Path

import soundfile as sf
from loguru import logger

from ..exceptions import PlaybackError
from .pcm import AudioBuffer


class AudioPlayer:
    """Plays AudioBuffers on the default output device.

    The audio backend is opened lazily on the first ``play`` call, so
    constructing a player never touches the sound system.
    """

    def __init__(self, device: int | str | None = None):
        self._device = device
        self._sd = None

    def _backend(self):
        if self._sd is None:
            try:
                import sounddevice as sd
            except OSError as e:
                raise PlaybackError(f"Audio backend unavailable: {e}") from e
            self._sd = sd
        return self._sd

    def play_blocking(self, buffer: AudioBuffer) -> None:
        """Play a buffer and wait until it has finished.

        Raises:
            PlaybackError: If the output device cannot be used
        """
        sd = self._backend()
        logger.debug(f"Playing {buffer.duration:.2f}s of audio at {buffer.sample_rate}Hz")
        try:
            sd.play(buffer.interleaved(), samplerate=buffer.sample_rate, device=self._device, blocking=True)
        except sd.PortAudioError as e:
            raise PlaybackError(f"Playback failed: {e}") from e

    async def play(self, buffer: AudioBuffer) -> None:
        """Play a buffer without blocking the event loop."""
        await asyncio.to_thread(self.play_blocking, buffer)


def save_wav(buffer: AudioBuffer, path: Path | str) -> Path:
    """Write a buffer to a 16-bit WAV file.

    Returns:
        The path written
    """
    path = Path(path)
    sf.write(str(path), buffer.interleaved(), buffer.sample_rate, subtype="PCM_16")
    logger.info(f"Saved {buffer.duration:.2f}s of audio to {path}")
    return path
