# test_html_sink.py
#
# Run:
#   python -m unittest -v

import codecs
import io
import tempfile
import unittest

from html_escape import escape_href, escape_html
from html_sink import StreamSink, StringSink


class TestSinks(unittest.TestCase):
    def test_string_sink_appends_to_given_list(self):
        parts = ["a"]
        sink = StringSink(parts)
        sink.write_text("b")
        sink.write_formatted(3)
        self.assertEqual(parts, ["a", "b", "3"])
        self.assertEqual(sink.getvalue(), "ab3")

    def test_stream_sink_encodes_for_byte_streams(self):
        buf = io.BytesIO()
        sink = StreamSink(buf)
        sink.write_text("é")
        sink.write_formatted(12)
        self.assertEqual(buf.getvalue(), "é12".encode("utf-8"))

    def test_stream_sink_custom_encoding(self):
        buf = io.BytesIO()
        StreamSink(buf, encoding="latin-1").write_text("é")
        self.assertEqual(buf.getvalue(), b"\xe9")

    def test_stream_sink_passes_str_to_text_streams(self):
        buf = io.StringIO()
        StreamSink(buf).write_text("é")
        self.assertEqual(buf.getvalue(), "é")

    def test_stream_sink_detects_text_mode_from_stream_mode(self):
        with tempfile.SpooledTemporaryFile(mode="w+", encoding="utf-8") as f:
            StreamSink(f).write_text("é")
            f.seek(0)
            self.assertEqual(f.read(), "é")

    def test_stream_sink_passes_str_to_codecs_writers(self):
        buf = io.BytesIO()
        StreamSink(codecs.getwriter("utf-8")(buf)).write_text("é")
        self.assertEqual(buf.getvalue(), "é".encode("utf-8"))

    def test_stream_sink_encoding_none_forces_text(self):
        class Collector:
            def __init__(self):
                self.items = []

            def write(self, s):
                self.items.append(s)

        out = Collector()
        sink = StreamSink(out, encoding=None)
        sink.write_text("a")
        sink.write_formatted(1)
        self.assertEqual(out.items, ["a", "1"])


class TestEscaping(unittest.TestCase):
    def escaped(self, fn, text: str) -> str:
        sink = StringSink()
        fn(sink, text)
        return sink.getvalue()

    def test_escape_html(self):
        self.assertEqual(self.escaped(escape_html, "a<b>&\"'"), "a&lt;b&gt;&amp;&quot;&#x27;")
        self.assertEqual(self.escaped(escape_html, ""), "")

    def test_escape_href_keeps_url_structure(self):
        self.assertEqual(
            self.escaped(escape_href, "https://x.org/p?a=1#top"),
            "https://x.org/p?a=1#top",
        )

    def test_escape_href_encodes_unsafe_characters(self):
        self.assertEqual(self.escaped(escape_href, 'a b"<é>'), "a%20b%22%3C%C3%A9%3E")
        self.assertEqual(self.escaped(escape_href, "?x=1&y='z'"), "?x=1&amp;y=&#x27;z&#x27;")


if __name__ == "__main__":
    unittest.main(verbosity=2)
