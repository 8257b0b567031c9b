'''
    Description:
        - RSA key management: key generation and loading public / private keys
          from PEM. Anything that is not RSA is refused at load time.
'''

from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey, RSAPrivateKey

MIN_KEY_BITS = 2048


def generate_rsa_keypair(bits: int = MIN_KEY_BITS) -> tuple[bytes, bytes]:
    if bits < MIN_KEY_BITS:
        raise ValueError(f"RSA keys must be at least {MIN_KEY_BITS} bits")
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=bits)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )
    return private_pem, public_pem

def load_public_key(public_pem_or_obj) -> RSAPublicKey:
    if isinstance(public_pem_or_obj, RSAPublicKey):
        return public_pem_or_obj
    if isinstance(public_pem_or_obj, str):
        public_pem_or_obj = public_pem_or_obj.encode("utf-8")
    key = serialization.load_pem_public_key(public_pem_or_obj)
    if not isinstance(key, RSAPublicKey):
        raise TypeError(f"expected an RSA public key, got {type(key).__name__}")
    return key

def load_private_key(private_pem_or_obj) -> RSAPrivateKey:
    if isinstance(private_pem_or_obj, RSAPrivateKey):
        return private_pem_or_obj
    if isinstance(private_pem_or_obj, str):
        private_pem_or_obj = private_pem_or_obj.encode("utf-8")
    key = serialization.load_pem_private_key(private_pem_or_obj, password=None)
    if not isinstance(key, RSAPrivateKey):
        raise TypeError(f"expected an RSA private key, got {type(key).__name__}")
    return key

