# protocol/types.py
from __future__ import annotations
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# ---- Wire keys ----
F_ID = "message-id"
F_DATE = "date"
F_AUTHOR = "author"
F_TEXT = "message"
F_ATTACHMENT = "attachment"
F_SIGNATURE = "signature"

# Order matters: this is the order fields are serialised in for signing.
SIGNABLE_FIELDS = (F_DATE, F_AUTHOR, F_TEXT, F_ATTACHMENT)
REQUIRED_SIGNABLE_FIELDS = (F_DATE, F_AUTHOR, F_TEXT)


class Message(BaseModel):
    """One feed entry. `id` is owned by the store, everything else by the author."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: Optional[int] = Field(default=None, alias=F_ID)
    date: str
    author: str
    text: str = Field(alias=F_TEXT)
    attachment: Optional[str] = None
    signature: Optional[str] = None

    def signable_fields(self) -> Dict[str, str]:
        fields = {F_DATE: self.date, F_AUTHOR: self.author, F_TEXT: self.text}
        if self.attachment is not None:
            fields[F_ATTACHMENT] = self.attachment
        return fields

    def has_attachment(self) -> bool:
        return bool(self.attachment)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def with_signature(self, signature: str) -> "Message":
        return self.model_copy(update={"signature": signature})

    def with_id(self, message_id: int) -> "Message":
        return self.model_copy(update={"id": message_id})


# Minimal shape docs (for human readers)
# POST /messages               body: {date, author, message, [attachment], signature}
#                              resp: same object plus "message-id"
# GET  /messages?count=N       newest N messages, newest first (no count = all)
# GET  /messages?limit=N&next=ID   up to N messages with id <= ID, newest first
