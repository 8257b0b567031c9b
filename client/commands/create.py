'''
    Description:
        - Implements the `create` command: generate a keypair for a username and
          store it as the local identity.
'''

import json
from typing import Optional

from client.identity_store import Identity, IdentityStore


def cmd_create(store: IdentityStore, username: str) -> Optional[Identity]:
    identity = store.create(username)
    if identity is None:
        print("Operation cancelled by the user.")
        return None
    print(f"Public and private keys for {identity.username!r} saved to {store.path}")
    print(json.dumps({"message": "welcome"}))
    return identity
