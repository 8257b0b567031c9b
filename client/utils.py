import sys
from datetime import datetime
from typing import Callable, TextIO

YES = ("yes", "y")
NO = ("no", "n")


def now_iso() -> str:
    # local time with offset, second precision: 2024-01-01T09:30:00+01:00
    return datetime.now().astimezone().isoformat(timespec="seconds")


def prompt_yes_no(question: str, *, reader: Callable[[], str] = None, out: TextIO = None) -> bool:
    """Ask until the answer is yes/y or no/n. EOF counts as no."""
    out = out or sys.stdout
    reader = reader or sys.stdin.readline
    while True:
        print(f"{question} (yes/no): ", end="", file=out, flush=True)
        line = reader()
        if not line:
            return False
        answer = line.strip().lower()
        if answer in YES:
            return True
        if answer in NO:
            return False
