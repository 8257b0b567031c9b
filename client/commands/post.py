'''
    Description:
        - Implements the `post` command: sign a message (and optional attachment)
          with the local identity and publish it to the feed.
        - The stored copy echoed back by the feed must carry an id and must still
          verify under our own key before the post counts as done.
'''

import json
import logging
from pathlib import Path
from typing import Optional

from backend.crypto.content_sig import require_valid, sign_message
from backend.keydir import KeyDirectory
from client.attachments import MAX_ATTACHMENT_BYTES, encode_attachment
from client.identity_store import Identity
from client.utils import now_iso
from protocol.errors import EmptyMessage, IdentityError, ProtocolError
from protocol.feed import FeedStore
from protocol.types import Message

log = logging.getLogger(__name__)


def build_signed_message(identity: Identity, text: str, attachment_b64: Optional[str] = None,
                         date: Optional[str] = None) -> Message:
    if text is None or not text.strip():
        raise EmptyMessage("Message cannot be empty.")
    if not identity.can_sign:
        raise IdentityError(f"identity {identity.username!r} has no private key and cannot sign")

    message = Message(
        date=date or now_iso(),
        author=identity.username,
        text=text,
        attachment=attachment_b64,
    )
    return message.with_signature(sign_message(message.signable_fields(), identity.private_key))


def cmd_post(store: FeedStore, identity: Identity, text: str, file: Optional[Path] = None,
             max_bytes: int = MAX_ATTACHMENT_BYTES) -> Message:
    # empty text is refused before the attachment is even read
    if text is None or not text.strip():
        raise EmptyMessage("Message cannot be empty.")
    attachment_b64 = encode_attachment(file, max_bytes) if file is not None else None

    signed = build_signed_message(identity, text, attachment_b64)
    stored = store.publish(signed)
    if stored.id is None:
        raise ProtocolError("feed store did not assign a message-id")
    require_valid(stored, KeyDirectory.for_identity(identity))

    log.info("published message %s as %r", stored.id, identity.username)
    print(json.dumps({"message-id": stored.id}))
    return stored
