#!/usr/bin/env python3
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Union


class Alignment(enum.Enum):
    """Column alignment of a table, one per column."""
    NONE = "none"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class LinkType(enum.Enum):
    """How a link or image destination was written in the source."""
    INLINE = "inline"
    REFERENCE = "reference"
    SHORTCUT = "shortcut"
    AUTOLINK = "autolink"
    EMAIL = "email"


# ---------------- Tags -------------------------------------------------------
#
# A tag is the payload of a Start/End pair. Payloads are only meaningful on
# the Start side (e.g. table alignments); End may carry an equal or empty copy.


@dataclass(frozen=True)
class Paragraph:
    pass


@dataclass(frozen=True)
class Rule:
    pass


@dataclass(frozen=True)
class Header:
    level: int = 1


@dataclass(frozen=True)
class Table:
    alignments: tuple[Alignment, ...] = ()


@dataclass(frozen=True)
class TableHead:
    pass


@dataclass(frozen=True)
class TableRow:
    pass


@dataclass(frozen=True)
class TableCell:
    pass


@dataclass(frozen=True)
class BlockQuote:
    pass


@dataclass(frozen=True)
class CodeBlock:
    info: str = ""


@dataclass(frozen=True)
class List:
    """
    A list container.

    start is the first number of an ordered list, or None for a bullet list.
    """
    start: Optional[int] = None


@dataclass(frozen=True)
class Item:
    pass


@dataclass(frozen=True)
class Emphasis:
    pass


@dataclass(frozen=True)
class Strong:
    pass


@dataclass(frozen=True)
class Strikethrough:
    pass


@dataclass(frozen=True)
class Link:
    kind: LinkType = LinkType.INLINE
    destination: str = ""
    title: str = ""


@dataclass(frozen=True)
class Image:
    kind: LinkType = LinkType.INLINE
    destination: str = ""
    title: str = ""


@dataclass(frozen=True)
class FootnoteDefinition:
    name: str = ""


@dataclass(frozen=True)
class HtmlBlock:
    pass


Tag = Union[
    Paragraph,
    Rule,
    Header,
    Table,
    TableHead,
    TableRow,
    TableCell,
    BlockQuote,
    CodeBlock,
    List,
    Item,
    Emphasis,
    Strong,
    Strikethrough,
    Link,
    Image,
    FootnoteDefinition,
    HtmlBlock,
]

TAG_TYPES: tuple[type, ...] = (
    Paragraph,
    Rule,
    Header,
    Table,
    TableHead,
    TableRow,
    TableCell,
    BlockQuote,
    CodeBlock,
    List,
    Item,
    Emphasis,
    Strong,
    Strikethrough,
    Link,
    Image,
    FootnoteDefinition,
    HtmlBlock,
)


# ---------------- Events -----------------------------------------------------


@dataclass(frozen=True)
class Start:
    tag: Tag


@dataclass(frozen=True)
class End:
    tag: Tag


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Code:
    text: str


@dataclass(frozen=True)
class Html:
    html: str


@dataclass(frozen=True)
class InlineHtml:
    html: str


@dataclass(frozen=True)
class SoftBreak:
    pass


@dataclass(frozen=True)
class HardBreak:
    pass


@dataclass(frozen=True)
class FootnoteReference:
    name: str


@dataclass(frozen=True)
class TaskListMarker:
    checked: bool = False


Event = Union[
    Start,
    End,
    Text,
    Code,
    Html,
    InlineHtml,
    SoftBreak,
    HardBreak,
    FootnoteReference,
    TaskListMarker,
]

EVENT_TYPES: tuple[type, ...] = (
    Start,
    End,
    Text,
    Code,
    Html,
    InlineHtml,
    SoftBreak,
    HardBreak,
    FootnoteReference,
    TaskListMarker,
)


@dataclass
class EventCounts:
    """
    Tally of events seen in a stream, keyed by variant name.

    Used by the dump CLI to print a short summary after the events.
    """
    counts: dict[str, int] = field(default_factory=dict)

    def add(self, event: Event) -> None:
        name = type(event).__name__
        self.counts[name] = self.counts.get(name, 0) + 1

    @property
    def total(self) -> int:
        return sum(self.counts.values())
