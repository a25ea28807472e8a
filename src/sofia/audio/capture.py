"""Microphone capture.

A recording is an async stream of raw PCM chunks that ends when ``stop()`` is
called. The consumer joins the chunks into one buffer once the stream is
exhausted and attaches the result as a WAV file.
"""

import asyncio
import io
from collections.abc import AsyncIterable, AsyncIterator

import numpy as np
import soundfile as sf
from loguru import logger

from ..config import CAPTURE_BLOCK_SIZE, CAPTURE_CHANNELS, CAPTURE_SAMPLE_RATE
from ..exceptions import CaptureError
from ..files import attachment_from_bytes
from ..llm.models import AttachedFile
from .pcm import BYTES_PER_SAMPLE

VOICE_MESSAGE_NAME = "VoiceMessage.wav"
VOICE_MESSAGE_MIME_TYPE = "audio/wav"


class VoiceRecorder:
    """Records 16-bit PCM from the default input device.

    A recorder produces exactly one stream; create a new one for the next
    recording.

    Usage:
        recorder = VoiceRecorder()
        task = asyncio.create_task(collect_recording(recorder.chunks()))
        ...
        recorder.stop()
        attachment = await task
    """

    def __init__(
        self,
        sample_rate: int = CAPTURE_SAMPLE_RATE,
        channels: int = CAPTURE_CHANNELS,
        block_size: int = CAPTURE_BLOCK_SIZE,
    ):
        self.sample_rate = sample_rate
        self.channels = channels
        self.block_size = block_size
        self._queue: asyncio.Queue[bytes | None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stream = None
        self._started = False
        self._stopped = False

    def _open_stream(self, callback):
        try:
            import sounddevice as sd
        except OSError as e:
            raise CaptureError(f"Audio backend unavailable: {e}") from e

        try:
            return sd.RawInputStream(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype="int16",
                blocksize=self.block_size,
                callback=callback,
            )
        except sd.PortAudioError as e:
            raise CaptureError(f"Could not open microphone: {e}") from e

    def open(self) -> None:
        """Acquire the input device without starting to record.

        Must be called from the event loop that will consume ``chunks()``,
        which calls it when the caller has not.

        Raises:
            CaptureError: If the microphone cannot be opened
        """
        if self._stream is not None:
            return

        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        queue = self._queue
        loop = self._loop

        def callback(indata, frames, time_info, status):
            if status:
                logger.debug(f"Input stream status: {status}")
            loop.call_soon_threadsafe(queue.put_nowait, bytes(indata))

        self._stream = self._open_stream(callback)
        if self._stopped:
            queue.put_nowait(None)

    async def chunks(self) -> AsyncIterator[bytes]:
        """Yield PCM chunks until ``stop()`` is called.

        Raises:
            RuntimeError: If this recorder was already used
            CaptureError: If the microphone cannot be opened
        """
        if self._started:
            raise RuntimeError("VoiceRecorder cannot be restarted")
        self._started = True

        self.open()
        queue = self._queue

        logger.info(f"Recording started: {self.sample_rate}Hz, {self.channels} channel(s)")
        with self._stream:
            while True:
                chunk = await queue.get()
                if chunk is None:
                    break
                yield chunk
        logger.info("Recording stopped")

    def stop(self) -> None:
        """End the stream. Safe to call from any thread, and more than once."""
        if self._stopped:
            return
        self._stopped = True
        if self._loop is not None and self._queue is not None:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, None)


def pcm_to_wav(pcm: bytes, sample_rate: int, channels: int) -> bytes:
    """Wrap raw 16-bit PCM in a WAV container."""
    usable = len(pcm) // (BYTES_PER_SAMPLE * channels) * BYTES_PER_SAMPLE * channels
    samples = np.frombuffer(pcm[:usable], dtype="<i2").reshape(-1, channels)

    buf = io.BytesIO()
    sf.write(buf, samples, sample_rate, subtype="PCM_16", format="WAV")
    return buf.getvalue()


async def collect_recording(
    chunks: AsyncIterable[bytes],
    sample_rate: int = CAPTURE_SAMPLE_RATE,
    channels: int = CAPTURE_CHANNELS,
) -> AttachedFile | None:
    """Concatenate a finished chunk stream into a voice-message attachment.

    Returns:
        WAV attachment named VoiceMessage.wav, or None if nothing was captured
    """
    parts = []
    async for chunk in chunks:
        parts.append(chunk)
    pcm = b"".join(parts)

    if len(pcm) < BYTES_PER_SAMPLE * channels:
        logger.warning("No audio data captured")
        return None

    wav = pcm_to_wav(pcm, sample_rate, channels)
    return attachment_from_bytes(VOICE_MESSAGE_NAME, VOICE_MESSAGE_MIME_TYPE, wav)
