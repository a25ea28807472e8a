"""Exception hierarchy for Sofia.

Transport failures never surface as exceptions: the chat and speech clients
absorb them at their boundary. What remains here are errors the caller is
expected to act on.
"""


class SofiaError(Exception):
    """Base class for all Sofia errors."""


class ConfigurationError(SofiaError):
    """Required configuration is missing or invalid. Fatal at startup."""


class AudioDeviceError(SofiaError):
    """The local audio backend or device could not be used."""


class CaptureError(AudioDeviceError):
    """The microphone could not be opened."""


class PlaybackError(AudioDeviceError):
    """Decoded audio could not be played."""
