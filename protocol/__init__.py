from .errors import (
    MicroblogError, EncodingError,
    IdentityError, IdentityNotFound, IdentityCorrupt,
    VerificationError, SignatureInvalid, MissingSignature, UnknownAuthor,
    TransportError, ProtocolError, EmptyFeed,
    EmptyMessage, AttachmentError, SizeExceeded,
)
from .types import Message, SIGNABLE_FIELDS
from .feed import FeedStore
