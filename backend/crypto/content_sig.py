'''
    Description:
        - Message content signatures: canonical JSON of the signable fields,
          signed with the author's RSA key and carried as base64.
        - Verification always re-derives the signable fields from the received
          message; nothing precomputed is trusted.
'''

import binascii
import logging
from typing import Mapping

from protocol.errors import EmptyMessage, MissingSignature, SignatureInvalid, UnknownAuthor
from protocol.types import F_TEXT, Message
from .base64_codec import b64_encode, b64_decode
from .json_format import canonical_message_bytes
from .rsa_sig import rsa_sign, rsa_verify

log = logging.getLogger(__name__)

# ========== Signing ==========

def sign_message(fields: Mapping[str, str], private_key_pem: bytes) -> str:
    text = fields.get(F_TEXT)
    if not isinstance(text, str) or not text.strip():
        raise EmptyMessage("refusing to sign an empty message")
    payload_bytes = canonical_message_bytes(fields)
    return b64_encode(rsa_sign(private_key_pem, payload_bytes))

# ========== Verification ==========

def verify_message(message: Message, public_key_pem: bytes) -> bool:
    if message.signature is None:
        raise MissingSignature(
            "message has no signature", author=message.author, message_id=message.id
        )
    payload_bytes = canonical_message_bytes(message.signable_fields())
    try:
        sig = b64_decode(message.signature)
    except (binascii.Error, ValueError):
        return False
    return rsa_verify(public_key_pem, payload_bytes, sig)

def require_valid(message: Message, keydir) -> Message:
    """Raise unless `message` verifies against its author's known key."""
    if message.signature is None:
        raise MissingSignature(
            "message has no signature", author=message.author, message_id=message.id
        )
    pub = keydir.get_public_key(message.author)
    if pub is None:
        raise UnknownAuthor(
            f"no public key known for author {message.author!r}",
            author=message.author, message_id=message.id,
        )
    if not verify_message(message, pub):
        log.warning("signature check failed for message %s by %r", message.id, message.author)
        raise SignatureInvalid(
            "message signature verification failed", author=message.author, message_id=message.id
        )
    return message
