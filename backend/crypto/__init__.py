'''
    Description:
        - Cryptographic utilities for the feed: base64 wire encoding, canonical
          message JSON, RSA key management and RSA signing / verification.
        - Consolidated here for easy import across the client and tests.
'''

from .base64_codec import b64_encode, b64_decode
from .json_format import canonical_message_bytes
from .rsa_key_management import generate_rsa_keypair, load_public_key, load_private_key
from .rsa_sig import rsa_sign, rsa_verify
from .content_sig import sign_message, verify_message, require_valid

__all__ = [
    "b64_encode", "b64_decode",
    "canonical_message_bytes",
    "load_public_key", "load_private_key", "generate_rsa_keypair",
    "rsa_sign", "rsa_verify",
    "sign_message", "verify_message", "require_valid",
]
