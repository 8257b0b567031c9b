# backend/crypto/rsa_sig.py
from __future__ import annotations
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives import hashes
from .rsa_key_management import load_private_key, load_public_key

def _as_bytes(pem_or_str):
    return pem_or_str.encode("utf-8") if isinstance(pem_or_str, str) else pem_or_str

def rsa_sign(privkey_pem: bytes | str, message: bytes) -> bytes:
    """
    RSA PKCS#1 v1.5 with SHA-256 (SHA256withRSA). Deterministic: the same key
    and bytes always give the same signature.
    """
    priv = load_private_key(_as_bytes(privkey_pem))
    return priv.sign(message, padding.PKCS1v15(), hashes.SHA256())

def rsa_verify(pubkey_pem: bytes | str, message: bytes, signature: bytes) -> bool:
    """
    Returns True if signature is valid under PKCS#1 v1.5 / SHA-256.
    """
    pub = load_public_key(_as_bytes(pubkey_pem))
    try:
        pub.verify(signature, message, padding.PKCS1v15(), hashes.SHA256())
        return True
    except InvalidSignature:
        return False
