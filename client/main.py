import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from backend.keydir import KeyDirectory
from protocol.errors import (
    AttachmentError, EmptyFeed, EmptyMessage, EncodingError, IdentityCorrupt, IdentityError,
    IdentityNotFound, MicroblogError, MissingSignature, ProtocolError, SignatureInvalid,
    SizeExceeded, TransportError, UnknownAuthor,
)

from .commands import cmd_create, cmd_export_key, cmd_list, cmd_post, cmd_trust
from .config import Settings, get_settings
from .feed_walker import FeedWalker
from .identity_store import IdentityStore
from .transport import HttpFeedStore
from .utils import prompt_yes_no

log = logging.getLogger("client.main")

# most specific first
ERROR_MESSAGES = (
    (SizeExceeded, "Attachment too large"),
    (AttachmentError, "Attachment error"),
    (EmptyMessage, "Cannot post"),
    (EncodingError, "Could not encode message for signing"),
    (IdentityNotFound, "No identity"),
    (IdentityCorrupt, "Identity or key file is damaged"),
    (IdentityError, "Identity error"),
    (MissingSignature, "Rejected unsigned message (protocol violation)"),
    (SignatureInvalid, "Rejected message with a forged or corrupted signature"),
    (UnknownAuthor, "Rejected message from an unknown author"),
    (TransportError, "Feed store unavailable"),
    (ProtocolError, "Feed store sent an invalid response"),
)


def describe_error(err: MicroblogError) -> str:
    for kind, headline in ERROR_MESSAGES:
        if isinstance(err, kind):
            return f"{headline}: {err}"
    return f"Error: {err}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="microblog", description="Interacts with the MicroBlog feed.")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output to stderr")
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p = sub.add_parser("create", help="generate a new identity (keypair) for a username")
    p.add_argument("username", nargs="?", help="username; asked for interactively when omitted")

    p = sub.add_parser("post", help="sign and post a new message")
    p.add_argument("message", help="the message to post")
    p.add_argument("-f", "--file", type=Path, help="file to attach")

    p = sub.add_parser("list", help="list verified messages, newest first")
    p.add_argument("-s", "--starting", type=int, dest="starting", help="ID to start listing from")
    p.add_argument("-c", "--count", type=int, help="number of messages to retrieve")
    p.add_argument("--save-attachment", "-sa", action="store_true", dest="save_attachment",
                   help="save attachments as <message-id>.out")

    sub.add_parser("export-key", help="print this identity's public key (PEM)")

    p = sub.add_parser("trust", help="store another author's public key for verification")
    p.add_argument("username")
    p.add_argument("pem_file", type=Path)
    return parser


def _ask_username() -> str:
    print("Enter a new username: ", end="", flush=True)
    return sys.stdin.readline().strip()


def run(args: argparse.Namespace, settings: Settings, confirm: Callable[[str], bool] = prompt_yes_no) -> int:
    identities = IdentityStore(settings.identity_path, confirm=confirm, key_size=settings.key_size)

    if args.command == "create":
        cmd_create(identities, args.username or _ask_username())
        return 0

    identity = identities.load()
    keydir = KeyDirectory.for_identity(identity, settings.keyring_dir)

    if args.command == "export-key":
        cmd_export_key(identity)
        return 0
    if args.command == "trust":
        cmd_trust(keydir, args.username, args.pem_file, confirm)
        return 0

    store = HttpFeedStore(settings.server_url, timeout=settings.request_timeout)
    if args.command == "post":
        cmd_post(store, identity, args.message, args.file, settings.max_attachment_bytes)
        return 0
    if args.command == "list":
        count = args.count if args.count is not None else settings.default_count
        if count < 1:
            print("--count must be at least 1", file=sys.stderr)
            return 2
        walker = FeedWalker(store, keydir, page_cap=settings.page_cap)
        try:
            cmd_list(walker, count, args.starting, args.save_attachment, settings.attachment_dir, confirm)
        except EmptyFeed:
            print("The feed is empty.")
        return 0
    return 2


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        print("Welcome to the MicroBlog CLI. Use -h for help.")
        return 0

    try:
        settings = get_settings()
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        return run(args, settings)
    except MicroblogError as e:
        log.debug("command %s failed", args.command, exc_info=True)
        print(describe_error(e), file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
