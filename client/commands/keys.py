from pathlib import Path
from typing import Callable, Optional

from backend.keydir import KeyDirectory
from client.identity_store import Identity
from protocol.errors import IdentityCorrupt


def cmd_export_key(identity: Identity) -> str:
    pem = identity.public_key.decode("utf-8")
    print(pem, end="" if pem.endswith("\n") else "\n")
    return pem


def cmd_trust(keydir: KeyDirectory, username: str, pem_file: Path,
              confirm: Optional[Callable[[str], bool]] = None) -> Optional[Path]:
    try:
        pem = Path(pem_file).read_bytes()
    except OSError as e:
        raise IdentityCorrupt(f"cannot read public key file {pem_file}: {e}") from e
    path = keydir.trust(username, pem, confirm=confirm)
    if path is None:
        print("Operation cancelled by the user.")
        return None
    print(f"Trusted key for {username!r} stored at {path}")
    return path
