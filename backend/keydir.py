# backend/keydir.py

from __future__ import annotations
import logging
import re
from pathlib import Path
from typing import Callable, Dict, Optional

from backend.crypto.rsa_key_management import load_public_key
from protocol.errors import IdentityCorrupt

log = logging.getLogger(__name__)

USERNAME_RE = re.compile(r"^[A-Za-z0-9_.-]{1,64}$")


def is_valid_username(name: str) -> bool:
    return bool(USERNAME_RE.match(name or "")) and name not in (".", "..")


class KeyDirectory:

    """
    author -> RSA public key (PEM bytes) used by the verifier.
    Keys come from the local identity and from a keyring directory of
    <username>.pem files. Everything stored here has already parsed as RSA.
    """
    def __init__(self, keyring_dir: Optional[Path] = None):
        self.keyring_dir = Path(keyring_dir).expanduser() if keyring_dir else None
        self._pubkeys: Dict[str, bytes] = {}

    @classmethod
    def for_identity(cls, identity, keyring_dir: Optional[Path] = None) -> "KeyDirectory":
        keydir = cls(keyring_dir)
        keydir.add_public_key(identity.username, identity.public_key)
        return keydir

    def add_public_key(self, author: str, pubkey_pem: bytes | str) -> None:
        if isinstance(pubkey_pem, str):
            pubkey_pem = pubkey_pem.encode("utf-8")
        load_public_key(pubkey_pem)
        self._pubkeys[author] = pubkey_pem

    def get_public_key(self, author: str) -> Optional[bytes]:
        if author in self._pubkeys:
            return self._pubkeys[author]
        path = self._keyring_path(author)
        if path is None or not path.is_file():
            return None
        pem = path.read_bytes()
        try:
            load_public_key(pem)
        except (ValueError, TypeError) as e:
            raise IdentityCorrupt(f"keyring entry {path} is not an RSA public key: {e}") from e
        self._pubkeys[author] = pem
        return pem

    def trust(self, author: str, pubkey_pem: bytes,
              confirm: Optional[Callable[[str], bool]] = None) -> Optional[Path]:
        """Validate and store `author`'s key in the keyring directory.

        Replacing a different key already on file needs `confirm`; returns None
        and leaves the keyring untouched when that is declined or unavailable.
        """
        path = self._keyring_path(author)
        if path is None:
            raise ValueError(f"invalid username {author!r} or no keyring directory configured")
        try:
            load_public_key(pubkey_pem)
        except (ValueError, TypeError) as e:
            raise IdentityCorrupt(f"not an RSA public key: {e}") from e
        if path.is_file() and path.read_bytes() != pubkey_pem:
            question = f"A different key for {author} is already trusted. Replace it?"
            if confirm is None or not confirm(question):
                log.info("keyring overwrite declined for %r", author)
                return None
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(pubkey_pem)
        self._pubkeys[author] = pubkey_pem
        log.info("trusted public key for %r at %s", author, path)
        return path

    def _keyring_path(self, author: str) -> Optional[Path]:
        if self.keyring_dir is None or not is_valid_username(author):
            return None
        return self.keyring_dir / f"{author}.pem"
