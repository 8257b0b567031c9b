'''
    Description:
        - Attachment handling: file bytes -> base64 for an outgoing message, and
          base64 -> <message-id>.out on disk for an incoming one.
        - Size is checked from the file's metadata before it is read, so an
          oversized file never reaches the network.
        - An existing target file is only replaced after an explicit yes.
'''

from __future__ import annotations
import binascii
import enum
import logging
from pathlib import Path
from typing import Callable, Optional

from backend.crypto.base64_codec import b64_decode, b64_encode
from protocol.errors import AttachmentError, SizeExceeded
from protocol.types import Message

log = logging.getLogger(__name__)

MAX_ATTACHMENT_BYTES = 10 * 1024 * 1024


class SaveOutcome(str, enum.Enum):
    SAVED = "saved"
    DECLINED = "declined"          # user kept the existing file
    NO_ATTACHMENT = "no_attachment"


# ========== Outbound ==========
def encode_attachment(path: Path, max_bytes: int = MAX_ATTACHMENT_BYTES) -> str:
    path = Path(path)
    if not path.exists() or path.is_dir():
        raise AttachmentError(f"{path} does not exist or is a directory")
    size = path.stat().st_size
    if size > max_bytes:
        raise SizeExceeded(size, max_bytes)
    data = path.read_bytes()
    if len(data) > max_bytes:
        # file grew between stat and read
        raise SizeExceeded(len(data), max_bytes)
    return b64_encode(data)


# ========== Inbound ==========
def decode_attachment(message: Message) -> Optional[bytes]:
    if not message.has_attachment():
        return None
    try:
        return b64_decode(message.attachment)
    except (binascii.Error, ValueError) as e:
        raise AttachmentError(f"attachment of message {message.id} is not valid base64") from e


def attachment_path(message: Message, directory: Path) -> Path:
    return Path(directory) / f"{message.id}.out"


def save_attachment(message: Message, directory: Path, confirm: Callable[[str], bool]) -> SaveOutcome:
    """Write a verified message's attachment to `directory/<id>.out`."""
    data = decode_attachment(message)
    if data is None:
        return SaveOutcome.NO_ATTACHMENT
    if message.id is None:
        raise AttachmentError("cannot name an attachment for a message without message-id")

    target = attachment_path(message, directory)
    if target.exists():
        if not confirm(f"File {target.name} already exists. Do you want to overwrite it?"):
            log.info("kept existing %s", target)
            return SaveOutcome.DECLINED

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    log.info("saved attachment of message %s to %s (%d bytes)", message.id, target, len(data))
    return SaveOutcome.SAVED
