# protocol/errors.py
from __future__ import annotations
from typing import Optional


class MicroblogError(Exception):
    """Base class for every failure the client core reports."""


# ---- Canonical encoding ----
class EncodingError(MicroblogError):
    """Signable fields could not be serialised. Never falls back to other bytes."""


# ---- Identity / key material ----
class IdentityError(MicroblogError):
    pass

class IdentityNotFound(IdentityError):
    pass

class IdentityCorrupt(IdentityError):
    pass


# ---- Verification ----
class VerificationError(MicroblogError):
    def __init__(self, message: str, *, author: Optional[str] = None, message_id: Optional[int] = None):
        super().__init__(message)
        self.author = author
        self.message_id = message_id

class SignatureInvalid(VerificationError):
    """A signature was present but did not verify (forged or corrupted)."""

class MissingSignature(VerificationError):
    """The message carries no signature at all (protocol violation)."""

class UnknownAuthor(VerificationError):
    """No public key is known for the claimed author."""


# ---- Feed store ----
class TransportError(MicroblogError):
    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

class ProtocolError(MicroblogError):
    """The feed store answered, but broke the response contract."""

class EmptyFeed(MicroblogError):
    pass


# ---- Publish / attachments ----
class EmptyMessage(MicroblogError):
    pass

class AttachmentError(MicroblogError):
    pass

class SizeExceeded(AttachmentError):
    def __init__(self, size: int, limit: int):
        super().__init__(f"attachment is {size} bytes, maximum allowed is {limit} bytes")
        self.size = size
        self.limit = limit
