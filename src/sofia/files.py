"""Attachment encoding.

Files are held in memory as data URIs (``data:<mime>;base64,<payload>``)
between attach and send, the same representation a browser file reader
produces. Only the payload after the first comma goes over the wire.
"""

import base64
import mimetypes
from pathlib import Path

from .llm.models import AttachedFile, strip_data_uri_header

DEFAULT_MIME_TYPE = "application/octet-stream"


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode bytes as a base64 data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def guess_mime_type(path: Path | str) -> str:
    """Guess a MIME type from a file name."""
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or DEFAULT_MIME_TYPE


def attachment_from_bytes(name: str, mime_type: str, data: bytes) -> AttachedFile:
    """Wrap in-memory content as an attachment."""
    return AttachedFile(name=name, mime_type=mime_type, data=to_data_uri(data, mime_type))


def load_attachment(path: Path | str) -> AttachedFile:
    """Read a file fully into memory as an attachment.

    Raises:
        FileNotFoundError: If the file does not exist
        IsADirectoryError: If the path is a directory
    """
    path = Path(path)
    return attachment_from_bytes(path.name, guess_mime_type(path), path.read_bytes())


__all__ = [
    "DEFAULT_MIME_TYPE",
    "attachment_from_bytes",
    "guess_mime_type",
    "load_attachment",
    "strip_data_uri_header",
    "to_data_uri",
]
