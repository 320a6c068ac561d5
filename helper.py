from __future__ import annotations

import sys
from typing import TextIO

from doc_events import Event


def describe_event(event: Event) -> str:
    """
    One-line, repr-like description of an event for debug output.

    Example: Start(Header(level=1)) -> 'Start Header(level=1)'
    """
    name = type(event).__name__
    tag = getattr(event, "tag", None)
    if tag is not None:
        return f"{name} {tag!r}"
    payload = vars(event)
    if not payload:
        return name
    args = ", ".join(f"{k}={v!r}" for k, v in payload.items())
    return f"{name}({args})"


def print_event_gray(text: str, *, file: TextIO | None = None) -> None:
    """
    Print event/debug output in gray using ANSI escape codes.

    Goes to stderr unless a file is given, so it never mixes with rendered
    HTML on stdout.
    """
    GRAY = "\033[90m"
    RESET = "\033[0m"
    print(f"{GRAY}{text}{RESET}", file=file or sys.stderr)
