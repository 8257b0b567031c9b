'''
    Description:
        - Canonical JSON for the signable part of a message.
        - The same bytes are produced on the publish path (signing) and the read
          path (verification), so any failure here is fatal: there is no fallback
          payload.
'''

'''
    Canonical message JSON

    Tested:
        - Same fields in different mapping order produce identical bytes
        - Exact expected output, compact separators, no whitespace
        - UTF-8 preserved (no \\u escapes for non-ASCII)
        - message-id / signature / unknown keys rejected
'''

# ========== Imports ==========
import json
from typing import Mapping

from protocol.errors import EncodingError
from protocol.types import SIGNABLE_FIELDS, REQUIRED_SIGNABLE_FIELDS


# ========== Canonical message bytes ==========
def canonical_message_bytes(fields: Mapping[str, object]) -> bytes:
    extra = [k for k in fields if k not in SIGNABLE_FIELDS]
    if extra:
        raise EncodingError(f"not a signable field: {', '.join(sorted(map(str, extra)))}")
    missing = [k for k in REQUIRED_SIGNABLE_FIELDS if k not in fields]
    if missing:
        raise EncodingError(f"missing signable field: {', '.join(missing)}")

    # fixed field order, independent of the mapping's own order
    ordered = {}
    for name in SIGNABLE_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if not isinstance(value, str):
            raise EncodingError(f"field {name!r} must be a string, got {type(value).__name__}")
        ordered[name] = value

    try:
        text = json.dumps(
            ordered,
            separators=(",", ":"),  # no white space
            ensure_ascii=False,
            allow_nan=False,
        )
        return text.encode("utf-8")
    except (TypeError, ValueError) as e:
        # lone surrogates end up here
        raise EncodingError(f"cannot serialise signable fields: {e}") from e
