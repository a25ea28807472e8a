"""Chat session state.

A ChatSession holds everything one interactive conversation needs: the
message log, the pending attachment, the answer language, and the audio
player, which is created on first use and kept until the session ends.
Nothing is persisted.
"""

import time

from loguru import logger

from .audio.capture import VoiceRecorder, collect_recording
from .audio.pcm import AudioBuffer, decode_pcm16
from .audio.playback import AudioPlayer
from .exceptions import AudioDeviceError
from .llm.base import ChatClient, SpeechClient
from .llm.models import AttachedFile, ChatMessage, Language
from .translations import TranslationStrings, get_strings

DEFAULT_FILE_PROMPT = "Analyze the attached file."


class ChatSession:
    """One conversation with the assistant.

    Sends are serialized: while a request is in flight ``submit`` refuses new
    ones. Playback is serialized the same way through ``speak``.
    """

    def __init__(
        self,
        chat_client: ChatClient,
        speech_client: SpeechClient,
        player: AudioPlayer | None = None,
        language: Language = Language.PL,
    ):
        """Initialize a session.

        Args:
            chat_client: Client answering questions
            speech_client: Client reading answers aloud
            player: Output player; an AudioPlayer is created on first playback if omitted
            language: Initial answer language
        """
        self.chat_client = chat_client
        self.speech_client = speech_client
        self.language = language
        self.messages: list[ChatMessage] = []
        self.attached_file: AttachedFile | None = None
        self.is_loading = False
        self.is_playing = False
        self._player = player
        self._last_id = 0

    @property
    def strings(self) -> TranslationStrings:
        """Interface strings for the current language."""
        return get_strings(self.language)

    @property
    def last_answer(self) -> ChatMessage | None:
        """Most recent assistant message, if any."""
        for message in reversed(self.messages):
            if message.role == "assistant":
                return message
        return None

    def set_language(self, language: Language) -> None:
        self.language = language

    def attach(self, file: AttachedFile) -> None:
        """Set the attachment for the next message, replacing any previous one."""
        self.attached_file = file

    def detach(self) -> None:
        self.attached_file = None

    def _next_id(self) -> str:
        # Millisecond timestamps, bumped when two messages share a millisecond
        self._last_id = max(int(time.time() * 1000), self._last_id + 1)
        return str(self._last_id)

    async def submit(self, text: str) -> ChatMessage | None:
        """Send the user's text and the pending attachment.

        Args:
            text: The user's message; may be empty when a file is attached

        Returns:
            The assistant's message, or None if nothing was sent (empty input
            or a request already in flight)
        """
        if not text.strip() and self.attached_file is None:
            return None
        if self.is_loading:
            logger.debug("Submit ignored: a request is already in flight")
            return None

        user_message = ChatMessage(
            id=self._next_id(),
            role="user",
            content=text,
            file=self.attached_file,
        )
        self.messages.append(user_message)
        self.attached_file = None
        self.is_loading = True

        try:
            result = await self.chat_client.ask(
                user_message.content or DEFAULT_FILE_PROMPT,
                self.language,
                user_message.file,
            )
        finally:
            self.is_loading = False

        assistant_message = ChatMessage(
            id=self._next_id(),
            role="assistant",
            content=result.text,
            sources=result.sources,
        )
        self.messages.append(assistant_message)
        return assistant_message

    def _get_player(self) -> AudioPlayer:
        if self._player is None:
            self._player = AudioPlayer()
        return self._player

    async def speak(self, text: str) -> AudioBuffer | None:
        """Synthesize text and play it.

        Failures are silent to the caller: no audio plays and None is
        returned.

        Returns:
            The decoded buffer that was played, or None
        """
        if self.is_playing:
            logger.debug("Speak ignored: playback already in progress")
            return None

        self.is_playing = True
        try:
            pcm = await self.speech_client.synthesize(text)
            if pcm is None:
                return None

            buffer = decode_pcm16(pcm, self.speech_client.sample_rate, self.speech_client.channels)
            try:
                await self._get_player().play(buffer)
            except AudioDeviceError as e:
                logger.error(f"Could not play synthesized speech: {e}")
                return None
            return buffer
        finally:
            self.is_playing = False

    async def record_voice(self, recorder: VoiceRecorder) -> AttachedFile | None:
        """Capture a voice message and attach it.

        Runs until ``recorder.stop()`` is called from elsewhere. Microphone
        problems are logged and leave the session unchanged.

        Returns:
            The attached recording, or None
        """
        try:
            file = await collect_recording(recorder.chunks(), recorder.sample_rate, recorder.channels)
        except AudioDeviceError as e:
            logger.error(f"Failed to record voice message: {e}")
            return None

        if file is not None:
            self.attach(file)
        return file
