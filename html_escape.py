# html_escape.py
from __future__ import annotations

import html
from urllib.parse import quote

from html_sink import HtmlSink

# Characters allowed through unchanged in an href value ('&' and "'" are
# handled separately, everything else is percent-encoded).
HREF_SAFE = "-_.~!#$%()*+,/:;=?@&'"


def escape_html(sink: HtmlSink, text: str) -> None:
    """Escape text for element content or a quoted attribute and write it."""
    if text:
        sink.write_text(html.escape(text, quote=True))


def escape_href(sink: HtmlSink, text: str) -> None:
    """
    Escape a URL for use inside a double-quoted href/src attribute.

    Reserved URL characters are kept so the link still works; bytes outside
    the safe set (spaces, quotes, non-ASCII) are percent-encoded as UTF-8.
    """
    if not text:
        return
    encoded = quote(text, safe=HREF_SAFE)
    sink.write_text(encoded.replace("&", "&amp;").replace("'", "&#x27;"))
