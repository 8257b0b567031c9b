'''
    Description:
        - Implements the `list` command: walk the feed backwards and print every
          verified message, optionally saving attachments next to the identity.
'''

import json
from pathlib import Path
from typing import Callable, Optional

from client.attachments import SaveOutcome, attachment_path, decode_attachment, save_attachment
from client.feed_walker import FeedWalker
from protocol.types import F_ATTACHMENT, F_AUTHOR, F_DATE, F_ID, F_SIGNATURE, F_TEXT, Message


def format_message(message: Message) -> str:
    shown = {
        F_ID: message.id,
        F_DATE: message.date,
        F_AUTHOR: message.author,
        F_TEXT: message.text,
    }
    data = decode_attachment(message)
    if data is not None:
        shown[F_ATTACHMENT] = f"\N{PAPERCLIP} {len(data)} bytes"
    shown[F_SIGNATURE] = message.signature
    return json.dumps(shown, ensure_ascii=False)


def cmd_list(walker: FeedWalker, count: int, start: Optional[int] = None, save: bool = False,
             attachment_dir: Optional[Path] = None, confirm: Optional[Callable[[str], bool]] = None) -> int:
    shown = 0
    for message in walker.walk(count, start):
        print(format_message(message))
        shown += 1
        if not save:
            continue
        outcome = save_attachment(message, attachment_dir, confirm)
        if outcome is SaveOutcome.SAVED:
            print(f"Saved attachment to {attachment_path(message, attachment_dir)}")
        elif outcome is SaveOutcome.DECLINED:
            print(f"File {message.id}.out not overwritten.")
    return shown
