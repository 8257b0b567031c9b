'''
    Description:
        - Identity store: one RSA keypair bound to a username, kept in a single
          private JSON file {username, public_key, private_key}.
        - `create` is the only code path that writes key material. Overwriting an
          existing identity needs an explicit yes from the confirm callback.
'''

from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from backend.crypto.rsa_key_management import (
    MIN_KEY_BITS, generate_rsa_keypair, load_private_key, load_public_key,
)
from backend.keydir import is_valid_username
from protocol.errors import IdentityCorrupt, IdentityNotFound

log = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


@dataclass(frozen=True)
class Identity:
    username: str
    public_key: bytes
    private_key: Optional[bytes] = None

    @property
    def can_sign(self) -> bool:
        return self.private_key is not None


class IdentityStore:
    def __init__(self, path: Path, confirm: Optional[Confirm] = None, key_size: int = MIN_KEY_BITS):
        self.path = Path(path).expanduser()
        self.confirm = confirm
        self.key_size = key_size

    def exists(self) -> bool:
        return self.path.exists()

    # ========== Create ==========
    def create(self, username: str) -> Optional[Identity]:
        """Generate and persist a fresh keypair. Returns None if the user declines an overwrite."""
        username = (username or "").strip()
        if not is_valid_username(username):
            raise ValueError("username must be 1-64 characters of letters, digits, '.', '_' or '-'")

        if self.exists():
            question = f"{self.path} already exists. Overwrite?"
            if self.confirm is None or not self.confirm(question):
                log.info("identity overwrite declined for %s", self.path)
                return None

        private_pem, public_pem = generate_rsa_keypair(self.key_size)
        identity = Identity(username=username, public_key=public_pem, private_key=private_pem)
        self._atomic_write(identity)
        log.info("created identity %r at %s", username, self.path)
        return identity

    # ========== Load ==========
    def load(self) -> Identity:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise IdentityNotFound(f"no identity at {self.path}; run 'microblog create' first") from None
        except OSError as e:
            raise IdentityCorrupt(f"cannot read identity file {self.path}: {e}") from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise IdentityCorrupt(f"identity file {self.path} is not valid JSON") from e
        if not isinstance(data, dict):
            raise IdentityCorrupt(f"identity file {self.path} is not a JSON object")

        username = data.get("username")
        public_pem = data.get("public_key")
        private_pem = data.get("private_key")
        if not isinstance(username, str) or not username:
            raise IdentityCorrupt("identity file has no username")
        if not isinstance(public_pem, str):
            raise IdentityCorrupt("identity file has no public key")
        if private_pem is not None and not isinstance(private_pem, str):
            raise IdentityCorrupt("identity file has a malformed private key")

        public_bytes = public_pem.encode("utf-8")
        private_bytes = private_pem.encode("utf-8") if private_pem is not None else None
        try:
            pub = load_public_key(public_bytes)
            priv = load_private_key(private_bytes) if private_bytes is not None else None
        except (ValueError, TypeError) as e:
            raise IdentityCorrupt(f"identity file {self.path} holds unusable key material: {e}") from e
        if priv is not None and priv.public_key().public_numbers() != pub.public_numbers():
            raise IdentityCorrupt("identity file public and private keys do not match")

        return Identity(username=username, public_key=public_bytes, private_key=private_bytes)

    # ========== Persistence ==========
    def _atomic_write(self, identity: Identity) -> None:
        self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        record = {
            "username": identity.username,
            "public_key": identity.public_key.decode("utf-8"),
            "private_key": identity.private_key.decode("utf-8") if identity.private_key else None,
        }
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp, 0o600)
            os.replace(tmp, self.path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
