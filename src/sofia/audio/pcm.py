"""16-bit PCM decoding.

Converts interleaved signed 16-bit little-endian PCM into per-channel float32
samples, the shape an audio device or WAV writer consumes.

Every integer sample ``v`` maps to ``v / 32768.0``. The range is therefore
asymmetric: -32768 becomes exactly -1.0 while 32767 becomes 0.999969...
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

PCM16_SCALE = 32768.0
BYTES_PER_SAMPLE = 2
_PCM16_DTYPE = np.dtype("<i2")


@dataclass(frozen=True)
class AudioBuffer:
    """Decoded, playable audio.

    Attributes:
        channel_data: One float32 array per channel, all of equal length
        sample_rate: Samples per second per channel
    """

    channel_data: tuple[NDArray[np.float32], ...]
    sample_rate: int

    @property
    def channels(self) -> int:
        return len(self.channel_data)

    @property
    def frame_count(self) -> int:
        return len(self.channel_data[0]) if self.channel_data else 0

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return self.frame_count / self.sample_rate

    def get_channel_data(self, channel: int) -> NDArray[np.float32]:
        """Get the samples of a single channel."""
        if not 0 <= channel < self.channels:
            raise IndexError(f"Channel {channel} out of range (buffer has {self.channels})")
        return self.channel_data[channel]

    def interleaved(self) -> NDArray[np.float32]:
        """Samples as a (frames, channels) array."""
        return np.stack(self.channel_data, axis=1)


def decode_pcm16(data: bytes, sample_rate: int, channels: int) -> AudioBuffer:
    """Decode interleaved 16-bit little-endian PCM.

    Sample ``i`` of channel ``c`` is read from flat index ``i * channels + c``.
    A trailing partial frame (including a dangling odd byte) is dropped.

    Args:
        data: Raw PCM bytes
        sample_rate: Sample rate to tag the buffer with
        channels: Number of interleaved channels

    Returns:
        AudioBuffer with ``len(data) // 2 // channels`` frames per channel

    Raises:
        ValueError: If channels or sample_rate is not positive
    """
    if channels < 1:
        raise ValueError(f"channels must be positive, got {channels}")
    if sample_rate < 1:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")

    frame_count = len(data) // BYTES_PER_SAMPLE // channels
    usable = frame_count * channels * BYTES_PER_SAMPLE

    if frame_count == 0:
        empty = tuple(np.zeros(0, dtype=np.float32) for _ in range(channels))
        return AudioBuffer(channel_data=empty, sample_rate=sample_rate)

    samples = np.frombuffer(memoryview(data)[:usable], dtype=_PCM16_DTYPE)
    frames = samples.reshape(frame_count, channels).astype(np.float32) / np.float32(PCM16_SCALE)

    return AudioBuffer(
        channel_data=tuple(np.ascontiguousarray(frames[:, c]) for c in range(channels)),
        sample_rate=sample_rate,
    )


def encode_pcm16(samples: NDArray[np.floating]) -> bytes:
    """Encode float samples back into 16-bit little-endian PCM.

    Accepts a 1-D mono array or a (frames, channels) array, which is written
    interleaved. Values are clipped to the representable range.
    """
    scaled = np.clip(np.asarray(samples, dtype=np.float64) * PCM16_SCALE, -32768, 32767)
    return np.round(scaled).astype(_PCM16_DTYPE).tobytes()
