from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..translations import Language


def strip_data_uri_header(data_uri: str) -> str:
    """Return the part of a data URI after the first comma.

    A string without a comma is assumed to be a bare payload already.
    """
    _, sep, payload = data_uri.partition(",")
    return payload if sep else data_uri


class AttachedFile(BaseModel):
    """A file held in memory as a data URI until it is sent."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Original file name")
    mime_type: str = Field(description="MIME type of the content")
    data: str = Field(description="Data URI: data:<mime>;base64,<payload>")

    @property
    def payload(self) -> str:
        """Base64 payload with the data-URI header removed."""
        return strip_data_uri_header(self.data)


class GroundingSource(BaseModel):
    """A web citation returned when the model used search grounding."""

    model_config = ConfigDict(frozen=True)

    title: str
    uri: str


class ChatMessage(BaseModel):
    """A single turn in the conversation log."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique message identifier")
    role: Literal["user", "assistant"] = Field(description="Role of the message sender")
    content: str = Field(description="Message text (Markdown for assistant messages)")
    file: AttachedFile | None = Field(default=None, description="Attachment sent with a user message")
    sources: list[GroundingSource] | None = Field(
        default=None,
        description="Web sources cited by an assistant message"
    )


class ChatResult(BaseModel):
    """Outcome of a chat request.

    The chat client always resolves to one of two variants:
    ChatAnswer when the model replied, ChatFallback when the request failed
    and ``text`` carries a user-facing error message instead.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Answer text or fallback message")
    sources: list[GroundingSource] | None = Field(default=None)

    @property
    def is_fallback(self) -> bool:
        return False


class ChatAnswer(ChatResult):
    """A reply produced by the model."""


class ChatFallback(ChatResult):
    """A failed request rendered as a normal reply. Never carries sources."""

    sources: None = None

    @property
    def is_fallback(self) -> bool:
        return True
