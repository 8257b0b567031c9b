'''
    Description:
        - Standard-alphabet base64 used on the wire for signatures and attachments.
        - Padding is always emitted and decoding is strict: characters outside the
          alphabet or a bad length raise instead of being silently skipped.
'''

'''
    BASE64 functionality

    Tested:
        - Round-trip encode/decode for b"", b"A", b"OK", b"hello world", b"\x00\xff\x10"
        - Padding kept on encode
        - Non-alphabet characters and truncated input raise binascii.Error
'''

# ========== Imports ==========
import base64
import binascii


# ========== Base64 Encoding ==========
def b64_encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


# ========== Base64 Decoding ==========
def b64_decode(text: str) -> bytes:
    if not isinstance(text, str):
        raise binascii.Error("base64 payload must be a string")
    return base64.b64decode(text.encode("ascii", errors="strict"), validate=True)
