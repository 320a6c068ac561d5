#!/usr/bin/env python3
"""
event_reader.py

Read document events from a YAML (or JSON) event-stream document.

Document shape: a top-level list, one entry per event.

    - start: {header: 1}
    - text: hello
    - end: {header: 1}
    - start: list          # bullet list
    - start: item
    - text: alpha
    - end: item
    - soft_break
    - task_list_marker: true
    - start: {image: {destination: cat.png, title: A cat}}
    - end: list

Entries are decoded lazily, one at a time, in document order.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Iterable, Iterator

import yaml

from doc_events import (
    Alignment,
    BlockQuote,
    Code,
    CodeBlock,
    Emphasis,
    End,
    Event,
    EventCounts,
    FootnoteDefinition,
    FootnoteReference,
    HardBreak,
    Header,
    Html,
    HtmlBlock,
    Image,
    InlineHtml,
    Item,
    Link,
    LinkType,
    List,
    Paragraph,
    Rule,
    SoftBreak,
    Start,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableHead,
    TableRow,
    Tag,
    TaskListMarker,
    Text,
)
from helper import print_event_gray

# Tags without payload, by document name.
SIMPLE_TAGS: dict[str, type] = {
    "paragraph": Paragraph,
    "rule": Rule,
    "table_head": TableHead,
    "table_row": TableRow,
    "table_cell": TableCell,
    "block_quote": BlockQuote,
    "item": Item,
    "emphasis": Emphasis,
    "strong": Strong,
    "strikethrough": Strikethrough,
    "html_block": HtmlBlock,
}

SIMPLE_TAG_NAMES: dict[type, str] = {cls: name for name, cls in SIMPLE_TAGS.items()}

TEXT_EVENTS: dict[str, type] = {
    "text": Text,
    "code": Code,
    "html": Html,
    "inline_html": InlineHtml,
}

BARE_EVENTS: dict[str, type] = {
    "soft_break": SoftBreak,
    "hard_break": HardBreak,
}


# ---------------- Decoding ---------------------------------------------------


def _single_key(value: dict, what: str) -> tuple[str, Any]:
    if len(value) != 1:
        raise ValueError(f"{what} mapping must have exactly one key, got {sorted(map(str, value))}")
    key, payload = next(iter(value.items()))
    return str(key), payload


def _as_str(value: Any, what: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        raise ValueError(f"{what} must be a string")
    return str(value)


def parse_alignment(value: Any) -> Alignment:
    """Map 'left'/'center'/'right'/'none' (or null) to an Alignment."""
    if value is None:
        return Alignment.NONE
    try:
        return Alignment(str(value).lower())
    except ValueError:
        raise ValueError(f"unknown alignment: {value!r}") from None


def _parse_link_args(value: Any, what: str) -> tuple[LinkType, str, str]:
    if isinstance(value, str):
        return LinkType.INLINE, value, ""
    if not isinstance(value, dict):
        raise ValueError(f"{what} needs a destination string or a mapping")
    kind_raw = value.get("kind", "inline")
    try:
        kind = LinkType(str(kind_raw).lower())
    except ValueError:
        raise ValueError(f"unknown link kind: {kind_raw!r}") from None
    destination = _as_str(value.get("destination", ""), f"{what} destination")
    title = _as_str(value.get("title", ""), f"{what} title")
    return kind, destination, title


def parse_tag(value: Any) -> Tag:
    """
    Decode a tag from its document form: a bare name or a one-key mapping.
    """
    if isinstance(value, str):
        name = value.lower()
        if name in SIMPLE_TAGS:
            return SIMPLE_TAGS[name]()
        if name == "list":
            return List(None)
        if name == "code_block":
            return CodeBlock("")
        if name == "table":
            return Table(())
        if name == "header":
            return Header(1)
        raise ValueError(f"unknown tag: {value!r}")

    if not isinstance(value, dict):
        raise ValueError(f"tag must be a string or a mapping, got {type(value).__name__}")

    name, payload = _single_key(value, "tag")
    name = name.lower()

    if name in SIMPLE_TAGS:
        return SIMPLE_TAGS[name]()

    if name == "header":
        if not isinstance(payload, int) or isinstance(payload, bool):
            raise ValueError("header level must be an integer")
        return Header(payload)

    if name == "table":
        if payload is None:
            payload = []
        if not isinstance(payload, list):
            raise ValueError("table alignments must be a list")
        return Table(tuple(parse_alignment(a) for a in payload))

    if name == "code_block":
        return CodeBlock(_as_str(payload, "code_block info"))

    if name == "list":
        if payload is not None and (not isinstance(payload, int) or isinstance(payload, bool)):
            raise ValueError("list start must be an integer or null")
        return List(payload)

    if name == "link":
        return Link(*_parse_link_args(payload, "link"))

    if name == "image":
        return Image(*_parse_link_args(payload, "image"))

    if name == "footnote_definition":
        return FootnoteDefinition(_as_str(payload, "footnote_definition name"))

    raise ValueError(f"unknown tag: {name!r}")


def parse_event(value: Any) -> Event:
    """
    Decode one event entry.
    """
    if isinstance(value, str):
        name = value.lower()
        if name in BARE_EVENTS:
            return BARE_EVENTS[name]()
        raise ValueError(f"unknown event: {value!r}")

    if not isinstance(value, dict):
        raise ValueError(f"event must be a string or a mapping, got {type(value).__name__}")

    name, payload = _single_key(value, "event")
    name = name.lower()

    if name == "start":
        return Start(parse_tag(payload))
    if name == "end":
        return End(parse_tag(payload))
    if name in TEXT_EVENTS:
        return TEXT_EVENTS[name](_as_str(payload, name))
    if name in BARE_EVENTS:
        return BARE_EVENTS[name]()
    if name == "footnote_reference":
        return FootnoteReference(_as_str(payload, "footnote_reference name"))
    if name == "task_list_marker":
        if not isinstance(payload, bool):
            raise ValueError("task_list_marker must be true or false")
        return TaskListMarker(payload)

    raise ValueError(f"unknown event: {name!r}")


def iter_events(items: Iterable[Any]) -> Iterator[Event]:
    """
    Lazily decode event entries, in order.

    Raises ValueError naming the entry index on the first bad entry.
    """
    for index, item in enumerate(items):
        try:
            yield parse_event(item)
        except ValueError as e:
            raise ValueError(f"event #{index}: {e}") from e


def parse_events_document(source: str) -> Iterator[Event]:
    """
    Parse a YAML/JSON event-stream document from text.

    The document itself is parsed eagerly (YAML errors surface here as
    ValueError); entries are decoded lazily.
    """
    try:
        raw = yaml.safe_load(source)
    except yaml.YAMLError as e:
        raise ValueError(f"not a valid YAML/JSON document: {e}") from e
    if raw is None:
        raw = []
    if not isinstance(raw, list):
        raise ValueError("event stream document must be a list")
    return iter_events(raw)


def load_events(path: Path) -> Iterator[Event]:
    """
    Read an event-stream document from disk (UTF-8).
    """
    return parse_events_document(Path(path).read_text(encoding="utf-8"))


# ---------------- Encoding ---------------------------------------------------


def _dump_link_args(tag: Link | Image) -> dict[str, str]:
    out = {"kind": tag.kind.value, "destination": tag.destination}
    if tag.title:
        out["title"] = tag.title
    return out


def dump_tag(tag: Tag) -> Any:
    """Inverse of parse_tag()."""
    if type(tag) in SIMPLE_TAG_NAMES:
        return SIMPLE_TAG_NAMES[type(tag)]
    if isinstance(tag, Header):
        return {"header": tag.level}
    if isinstance(tag, Table):
        return {"table": [a.value for a in tag.alignments]}
    if isinstance(tag, CodeBlock):
        return {"code_block": tag.info}
    if isinstance(tag, List):
        return {"list": tag.start}
    if isinstance(tag, Link):
        return {"link": _dump_link_args(tag)}
    if isinstance(tag, Image):
        return {"image": _dump_link_args(tag)}
    if isinstance(tag, FootnoteDefinition):
        return {"footnote_definition": tag.name}
    raise TypeError(f"Unknown tag: {tag!r}")


def dump_event(event: Event) -> Any:
    """Inverse of parse_event()."""
    if isinstance(event, Start):
        return {"start": dump_tag(event.tag)}
    if isinstance(event, End):
        return {"end": dump_tag(event.tag)}
    for name, cls in TEXT_EVENTS.items():
        if type(event) is cls:
            return {name: event.html if isinstance(event, (Html, InlineHtml)) else event.text}
    for name, cls in BARE_EVENTS.items():
        if type(event) is cls:
            return name
    if isinstance(event, FootnoteReference):
        return {"footnote_reference": event.name}
    if isinstance(event, TaskListMarker):
        return {"task_list_marker": event.checked}
    raise TypeError(f"Unknown event: {event!r}")


def format_event(event: Event) -> str:
    """Single-line flow-style YAML for one event."""
    dumped = dump_event(event)
    if isinstance(dumped, str):
        return dumped
    return yaml.safe_dump(dumped, default_flow_style=True, width=10**6).strip()


# ---------------- CLI --------------------------------------------------------


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="event_reader.py",
        description="Decode an event stream document and print one event per line.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="events.yml",
        help="Event stream document to read (default: events.yml)",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print per-variant event counts to stderr at the end.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        events = load_events(Path(args.input))
    except Exception as e:
        print(f"[event_reader] Failed to read events: {e}", file=sys.stderr)
        return 2

    counts = EventCounts()
    try:
        for event in events:
            counts.add(event)
            print(format_event(event))
    except ValueError as e:
        print(f"[event_reader] Invalid event stream: {e}", file=sys.stderr)
        return 2

    if args.summary:
        for name, n in sorted(counts.counts.items()):
            print_event_gray(f"{name}: {n}")
        print_event_gray(f"total: {counts.total}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
