# test_event_reader.py
#
# Run:
#   python -m unittest -v

import contextlib
import io
import tempfile
import unittest
from pathlib import Path

import event_reader as m
from doc_events import (
    Alignment,
    CodeBlock,
    End,
    FootnoteDefinition,
    FootnoteReference,
    HardBreak,
    Header,
    Image,
    InlineHtml,
    Item,
    Link,
    LinkType,
    List,
    Paragraph,
    SoftBreak,
    Start,
    Table,
    TaskListMarker,
    Text,
)


class TestParseEvent(unittest.TestCase):
    # ---------- bare events ----------
    def test_breaks(self):
        self.assertEqual(m.parse_event("soft_break"), SoftBreak())
        self.assertEqual(m.parse_event("hard_break"), HardBreak())

    # ---------- payload events ----------
    def test_text_like_events(self):
        self.assertEqual(m.parse_event({"text": "hi"}), Text("hi"))
        self.assertEqual(m.parse_event({"inline_html": "<b>"}), InlineHtml("<b>"))
        self.assertEqual(m.parse_event({"text": 42}), Text("42"))

    def test_footnote_and_task_marker(self):
        self.assertEqual(m.parse_event({"footnote_reference": "n"}), FootnoteReference("n"))
        self.assertEqual(m.parse_event({"task_list_marker": True}), TaskListMarker(True))

    def test_task_marker_requires_bool(self):
        with self.assertRaises(ValueError):
            m.parse_event({"task_list_marker": "yes please"})

    # ---------- tags ----------
    def test_simple_tags(self):
        self.assertEqual(m.parse_event({"start": "paragraph"}), Start(Paragraph()))
        self.assertEqual(m.parse_event({"end": "item"}), End(Item()))

    def test_list_tags(self):
        self.assertEqual(m.parse_tag("list"), List(None))
        self.assertEqual(m.parse_tag({"list": None}), List(None))
        self.assertEqual(m.parse_tag({"list": 3}), List(3))

    def test_header_table_code_block(self):
        self.assertEqual(m.parse_tag({"header": 2}), Header(2))
        self.assertEqual(
            m.parse_tag({"table": ["left", "none", "RIGHT", None]}),
            Table((Alignment.LEFT, Alignment.NONE, Alignment.RIGHT, Alignment.NONE)),
        )
        self.assertEqual(m.parse_tag({"code_block": "rust ignore"}), CodeBlock("rust ignore"))
        self.assertEqual(m.parse_tag("code_block"), CodeBlock(""))

    def test_link_and_image(self):
        self.assertEqual(
            m.parse_tag({"link": {"kind": "email", "destination": "a@b.c"}}),
            Link(LinkType.EMAIL, "a@b.c", ""),
        )
        self.assertEqual(
            m.parse_tag({"image": {"destination": "x.png", "title": "X"}}),
            Image(LinkType.INLINE, "x.png", "X"),
        )
        self.assertEqual(m.parse_tag({"link": "http://x"}), Link(LinkType.INLINE, "http://x", ""))

    def test_footnote_definition(self):
        self.assertEqual(m.parse_tag({"footnote_definition": "n"}), FootnoteDefinition("n"))

    # ---------- errors ----------
    def test_unknown_names_raise(self):
        with self.assertRaises(ValueError):
            m.parse_event("nothing")
        with self.assertRaises(ValueError):
            m.parse_tag("nothing")
        with self.assertRaises(ValueError):
            m.parse_tag({"table": ["sideways"]})
        with self.assertRaises(ValueError):
            m.parse_tag({"link": {"kind": "carrier-pigeon"}})

    def test_multi_key_mapping_raises(self):
        with self.assertRaises(ValueError):
            m.parse_event({"text": "a", "code": "b"})

    def test_bad_header_level_raises(self):
        with self.assertRaises(ValueError):
            m.parse_tag({"header": "one"})


class TestDocuments(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_yaml_document(self):
        events = list(m.parse_events_document("- start: {header: 1}\n- text: hello\n- end: {header: 1}\n"))
        self.assertEqual(events, [Start(Header(1)), Text("hello"), End(Header(1))])

    def test_json_document(self):
        events = list(m.parse_events_document('[{"start": "paragraph"}, "soft_break", {"end": "paragraph"}]'))
        self.assertEqual(events, [Start(Paragraph()), SoftBreak(), End(Paragraph())])

    def test_empty_document_has_no_events(self):
        self.assertEqual(list(m.parse_events_document("")), [])

    def test_non_list_document_raises(self):
        with self.assertRaises(ValueError):
            m.parse_events_document("text: hello\n")

    def test_invalid_yaml_raises_value_error(self):
        with self.assertRaises(ValueError):
            m.parse_events_document("- [unclosed\n")

    def test_entries_are_decoded_lazily_and_errors_name_the_index(self):
        events = m.parse_events_document("- text: ok\n- bogus: 1\n")
        self.assertEqual(next(events), Text("ok"))
        with self.assertRaises(ValueError) as ctx:
            next(events)
        self.assertIn("event #1", str(ctx.exception))

    def test_load_events_from_file(self):
        p = self.root / "events.yml"
        p.write_text("- text: café\n", encoding="utf-8")
        self.assertEqual(list(m.load_events(p)), [Text("café")])


class TestDump(unittest.TestCase):
    def test_dump_is_inverse_of_parse(self):
        events = [
            Start(Table((Alignment.LEFT,))),
            Start(List(None)),
            Start(List(7)),
            Start(Link(LinkType.EMAIL, "a@b.c", "t")),
            End(Image(LinkType.INLINE, "x.png", "")),
            Start(FootnoteDefinition("n")),
            Text("t"),
            InlineHtml("<i>"),
            SoftBreak(),
            FootnoteReference("n"),
            TaskListMarker(False),
        ]
        for event in events:
            with self.subTest(event=event):
                self.assertEqual(m.parse_event(m.dump_event(event)), event)

    def test_format_event(self):
        self.assertEqual(m.format_event(SoftBreak()), "soft_break")
        self.assertEqual(m.format_event(Text("hello")), "{text: hello}")
        self.assertEqual(m.format_event(Start(Paragraph())), "{start: paragraph}")


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_prints_one_event_per_line(self):
        p = self.root / "events.yml"
        p.write_text("- start: paragraph\n- text: hi\n- end: paragraph\n", encoding="utf-8")
        out = io.StringIO()
        err = io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            rc = m.main([str(p), "--summary"])
        self.assertEqual(rc, 0)
        self.assertEqual(
            out.getvalue().splitlines(),
            ["{start: paragraph}", "{text: hi}", "{end: paragraph}"],
        )
        self.assertIn("total: 3", err.getvalue())

    def test_missing_file_returns_2(self):
        err = io.StringIO()
        with contextlib.redirect_stderr(err):
            rc = m.main([str(self.root / "missing.yml")])
        self.assertEqual(rc, 2)
        self.assertIn("[event_reader]", err.getvalue())


if __name__ == "__main__":
    unittest.main(verbosity=2)
