#!/usr/bin/env python3
"""
event_to_html.py

Single-pass HTML renderer for a stream of document events.

- doc_events supplies the event/tag model produced by an upstream parser
- html_sink.StringSink / StreamSink are the two output destinations
- html_escape supplies content and href escaping

The renderer never builds a tree: it pulls one event at a time and keeps
only the state needed for valid output (line freshness, table section,
column alignments, footnote numbers). Image alt text is the one place
where it reads ahead: the events up to the image's matching End are
flattened into plain text.
"""
from __future__ import annotations

import argparse
import enum
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterable, Iterator, Union

from config_loader import DEFAULT_CONFIG, RenderConfig, load_config_or_default
from doc_events import (
    Alignment,
    BlockQuote,
    Code,
    CodeBlock,
    Emphasis,
    End,
    Event,
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
from event_reader import load_events
from helper import describe_event, print_event_gray
from html_escape import escape_href, escape_html
from html_sink import HtmlSink, StreamSink, StringSink


class TableSection(enum.Enum):
    HEAD = "head"
    BODY = "body"


ALIGN_ATTRIBUTES = {
    Alignment.LEFT: ' align="left"',
    Alignment.CENTER: ' align="center"',
    Alignment.RIGHT: ' align="right"',
}


@dataclass
class RenderState:
    """
    Mutable state for one rendering pass.

    Tracks:
    - whether the last write ended with a newline
    - table section (head/body), column alignments and current column
    - footnote numbers, assigned in first-seen order
    """
    end_newline: bool = True

    table_section: TableSection = TableSection.HEAD
    column_alignments: tuple[Alignment, ...] = ()
    column_index: int = 0

    footnote_numbers: dict[str, int] = field(default_factory=dict)

    def footnote_number(self, name: str) -> int:
        """Look up the number for a footnote name, assigning the next one if new."""
        return self.footnote_numbers.setdefault(name, len(self.footnote_numbers) + 1)

    def current_alignment(self) -> Alignment:
        """Alignment of the cell being opened; missing columns mean NONE."""
        if 0 <= self.column_index < len(self.column_alignments):
            return self.column_alignments[self.column_index]
        return Alignment.NONE


class HtmlWriter:
    """
    Drive an event iterator and write HTML to a sink.

    The iterator is shared with raw_text(), which consumes the events of an
    image description directly and hands the cursor back afterwards.
    """

    def __init__(
        self,
        events: Iterable[Event],
        sink: HtmlSink,
        *,
        cfg: RenderConfig = DEFAULT_CONFIG,
    ) -> None:
        self.iter: Iterator[Event] = iter(events)
        self.sink = sink
        self.cfg = cfg
        self.state = RenderState()

    # ---------- low-level writes ----------

    def write_newline(self) -> None:
        self.state.end_newline = True
        self.sink.write_text("\n")

    def write(self, s: str, newline: bool = False) -> None:
        """Write a string and track whether the output now ends in a newline."""
        self.sink.write_text(s)
        if newline:
            self.write_newline()
        elif s:
            self.state.end_newline = s.endswith("\n")

    def fresh_line(self) -> None:
        """Start a new line unless the output already ends with one."""
        if not self.state.end_newline:
            self.write_newline()

    def trace(self, event: Event, prefix: str = "") -> None:
        if self.cfg.trace_events:
            print_event_gray(prefix + describe_event(event))

    # ---------- main loop ----------

    def run(self) -> None:
        for event in self.iter:
            self.trace(event)

            if isinstance(event, Start):
                self.start_tag(event.tag)

            elif isinstance(event, End):
                self.end_tag(event.tag)

            elif isinstance(event, Text):
                escape_html(self.sink, event.text)
                self.state.end_newline = event.text.endswith("\n")

            elif isinstance(event, Code):
                self.write("<code>")
                escape_html(self.sink, event.text)
                self.write("</code>")
                self.state.end_newline = False

            elif isinstance(event, (Html, InlineHtml)):
                self.write(event.html)

            elif isinstance(event, SoftBreak):
                self.write_newline()

            elif isinstance(event, HardBreak):
                self.write("<br />", newline=True)

            elif isinstance(event, FootnoteReference):
                self.write(f'<sup class="{self.cfg.footnote_reference_class}"><a href="#')
                escape_html(self.sink, event.name)
                self.write('">')
                self.sink.write_formatted(self.state.footnote_number(event.name))
                self.write("</a></sup>")

            elif isinstance(event, TaskListMarker):
                if event.checked:
                    self.write('<input disabled="" type="checkbox" checked=""/>', newline=True)
                else:
                    self.write('<input disabled="" type="checkbox"/>', newline=True)

            else:
                raise TypeError(f"Unknown event: {event!r}")

    # ---------- tags ----------

    def start_tag(self, tag: Tag) -> None:
        """Write the opening markup for a tag."""
        state = self.state

        if isinstance(tag, Paragraph):
            self.fresh_line()
            self.write("<p>")

        elif isinstance(tag, Rule):
            self.fresh_line()
            self.write("<hr />", newline=True)

        elif isinstance(tag, Header):
            self.fresh_line()
            state.end_newline = False
            self.sink.write_text("<h")
            self.sink.write_formatted(tag.level)
            self.sink.write_text(">")

        elif isinstance(tag, Table):
            state.column_alignments = tuple(tag.alignments)
            state.table_section = TableSection.HEAD
            self.write("<table>")

        elif isinstance(tag, TableHead):
            state.table_section = TableSection.HEAD
            state.column_index = 0
            self.write("<thead><tr>")

        elif isinstance(tag, TableRow):
            state.column_index = 0
            self.write("<tr>")

        elif isinstance(tag, TableCell):
            self.write("<th" if state.table_section is TableSection.HEAD else "<td")
            align = ALIGN_ATTRIBUTES.get(state.current_alignment())
            if align:
                self.write(align)
            self.write(">")

        elif isinstance(tag, BlockQuote):
            self.fresh_line()
            self.write("<blockquote>", newline=True)

        elif isinstance(tag, CodeBlock):
            self.fresh_line()
            # only the first word of the info string names the language
            tokens = tag.info.split(maxsplit=1)
            lang = tokens[0] if tokens else ""
            if not lang:
                self.write("<pre><code>")
            else:
                self.write(f'<pre><code class="{self.cfg.code_language_prefix}')
                escape_html(self.sink, lang)
                self.write('">')

        elif isinstance(tag, List):
            self.fresh_line()
            if tag.start is None:
                self.write("<ul>", newline=True)
            elif tag.start == 1:
                self.write("<ol>", newline=True)
            else:
                self.write('<ol start="')
                self.sink.write_formatted(tag.start)
                self.write('">', newline=True)

        elif isinstance(tag, Item):
            self.fresh_line()
            self.write("<li>")

        elif isinstance(tag, Emphasis):
            self.write("<em>")

        elif isinstance(tag, Strong):
            self.write("<strong>")

        elif isinstance(tag, Strikethrough):
            self.write("<del>")

        elif isinstance(tag, Link):
            self.write('<a href="')
            if tag.kind is LinkType.EMAIL:
                self.write(self.cfg.mailto_prefix)
            escape_href(self.sink, tag.destination)
            if tag.title:
                self.write('" title="')
                escape_html(self.sink, tag.title)
            self.write('">')

        elif isinstance(tag, Image):
            self.write('<img src="')
            escape_href(self.sink, tag.destination)
            self.write('" alt="')
            self.raw_text()
            if tag.title:
                self.write('" title="')
                escape_html(self.sink, tag.title)
            self.write('" />')

        elif isinstance(tag, FootnoteDefinition):
            self.fresh_line()
            self.write(f'<div class="{self.cfg.footnote_definition_class}" id="')
            escape_html(self.sink, tag.name)
            self.write(f'"><sup class="{self.cfg.footnote_label_class}">')
            self.sink.write_formatted(state.footnote_number(tag.name))
            self.write("</sup>")

        elif isinstance(tag, HtmlBlock):
            pass

        else:
            raise TypeError(f"Unknown tag: {tag!r}")

    def end_tag(self, tag: Tag) -> None:
        """Write the closing markup for a tag."""
        state = self.state

        if isinstance(tag, Paragraph):
            self.write("</p>", newline=True)

        elif isinstance(tag, Rule):
            pass

        elif isinstance(tag, Header):
            self.sink.write_text("</h")
            self.sink.write_formatted(tag.level)
            self.write(">", newline=True)

        elif isinstance(tag, Table):
            self.write("</tbody></table>", newline=True)

        elif isinstance(tag, TableHead):
            self.write("</tr></thead><tbody>", newline=True)
            state.table_section = TableSection.BODY

        elif isinstance(tag, TableRow):
            self.write("</tr>", newline=True)

        elif isinstance(tag, TableCell):
            self.write("</th>" if state.table_section is TableSection.HEAD else "</td>")
            state.column_index += 1

        elif isinstance(tag, BlockQuote):
            self.write("</blockquote>", newline=True)

        elif isinstance(tag, CodeBlock):
            self.write("</code></pre>", newline=True)

        elif isinstance(tag, List):
            self.write("</ul>" if tag.start is None else "</ol>", newline=True)

        elif isinstance(tag, Item):
            self.write("</li>", newline=True)

        elif isinstance(tag, Emphasis):
            self.write("</em>")

        elif isinstance(tag, Strong):
            self.write("</strong>")

        elif isinstance(tag, Strikethrough):
            self.write("</del>")

        elif isinstance(tag, Link):
            self.write("</a>")

        elif isinstance(tag, Image):
            # consumed by raw_text() when the image was opened
            pass

        elif isinstance(tag, FootnoteDefinition):
            self.write("</div>", newline=True)

        elif isinstance(tag, HtmlBlock):
            pass

        else:
            raise TypeError(f"Unknown tag: {tag!r}")

    # ---------- raw text ----------

    def raw_text(self) -> None:
        """
        Flatten events into plain escaped text, consuming the enclosing End.

        Used for attribute values (image alt text) that cannot hold markup.
        Nested Start/End pairs are absorbed; breaks become a single space.
        Stops at the first End with no open Start, or when the stream ends.
        """
        nest = 0
        for event in self.iter:
            self.trace(event, prefix="  alt: ")

            if isinstance(event, Start):
                nest += 1

            elif isinstance(event, End):
                if nest == 0:
                    break
                nest -= 1

            elif isinstance(event, Html):
                pass

            elif isinstance(event, (InlineHtml, Code, Text)):
                text = event.html if isinstance(event, InlineHtml) else event.text
                escape_html(self.sink, text)
                self.state.end_newline = text.endswith("\n")

            elif isinstance(event, (SoftBreak, HardBreak)):
                self.write(" ")

            elif isinstance(event, FootnoteReference):
                self.write("[")
                self.sink.write_formatted(self.state.footnote_number(event.name))
                self.write("]")

            elif isinstance(event, TaskListMarker):
                self.write("[x]" if event.checked else "[ ]")

            else:
                raise TypeError(f"Unknown event: {event!r}")


# ---------------- Public API -------------------------------------------------


def push_html(
    buffer: list[str],
    events: Iterable[Event],
    *,
    cfg: RenderConfig = DEFAULT_CONFIG,
) -> None:
    """
    Render events and append the HTML to a caller-owned list of text parts.

    Example:
        parts: list[str] = []
        push_html(parts, events)
        html = "".join(parts)
    """
    HtmlWriter(events, StringSink(buffer), cfg=cfg).run()


def write_html(
    stream: Union[IO[bytes], IO[str]],
    events: Iterable[Event],
    *,
    cfg: RenderConfig = DEFAULT_CONFIG,
) -> None:
    """
    Render events and write the HTML to a stream.

    Byte streams receive UTF-8. An OSError from the stream aborts the
    render and propagates; the stream's contents are then undefined.
    Wrap raw files or sockets in a buffered writer.
    """
    HtmlWriter(events, StreamSink(stream), cfg=cfg).run()


def render_html(events: Iterable[Event], *, cfg: RenderConfig = DEFAULT_CONFIG) -> str:
    """Render events to an HTML string."""
    parts: list[str] = []
    push_html(parts, events, cfg=cfg)
    return "".join(parts)


# ---------------- CLI --------------------------------------------------------


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="event_to_html.py",
        description="Render a YAML/JSON event stream to HTML.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="events.yml",
        help="Event stream document (default: events.yml)",
    )
    parser.add_argument("-o", "--output", default="-", help="Output HTML file, '-' for stdout (default: -)")
    parser.add_argument("-c", "--config", default="config.yml", help="Config YAML file (default: config.yml)")
    parser.add_argument("--trace", action="store_true", help="Echo every consumed event to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        cfg = load_config_or_default(Path(args.config))
    except Exception as e:
        print(f"[event_to_html] Failed to load config: {e}", file=sys.stderr)
        return 2
    if args.trace:
        cfg = cfg.replace(trace_events=True)

    try:
        events = load_events(Path(args.input))
    except Exception as e:
        print(f"[event_to_html] Failed to read events: {e}", file=sys.stderr)
        return 2

    try:
        if args.output == "-":
            write_html(sys.stdout.buffer, events, cfg=cfg)
            sys.stdout.buffer.flush()
        else:
            # render fully before touching the output file
            document = render_html(events, cfg=cfg)
            Path(args.output).write_text(document, encoding="utf-8")
    except ValueError as e:
        print(f"[event_to_html] Invalid event stream: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"[event_to_html] Error while writing: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
