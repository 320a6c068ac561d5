# html_sink.py
from __future__ import annotations

import codecs
import io
from typing import IO, Any, Optional, Protocol, Union


class HtmlSink(Protocol):
    """
    Destination for rendered markup.

    write_text() appends a string verbatim; write_formatted() appends the
    textual form of a value (numbers, mostly). Either may raise OSError.
    """

    def write_text(self, s: str) -> None: ...

    def write_formatted(self, value: Any) -> None: ...


class StringSink:
    """
    In-memory sink backed by a list of text parts.

    Appending never fails. Pass an existing list to append into a
    caller-owned buffer.
    """

    def __init__(self, parts: list[str] | None = None) -> None:
        self.parts: list[str] = parts if parts is not None else []

    def write_text(self, s: str) -> None:
        self.parts.append(s)

    def write_formatted(self, value: Any) -> None:
        self.parts.append(str(value))

    def getvalue(self) -> str:
        return "".join(self.parts)


class StreamSink:
    """
    Sink writing to an external stream.

    Byte streams receive UTF-8 (or `encoding`) encoded text; text streams
    receive str unchanged. Pass encoding=None to force text mode for
    writers that are not detected as text. Errors raised by the stream
    propagate as-is.
    """

    def __init__(
        self,
        stream: Union[IO[bytes], IO[str]],
        *,
        encoding: Optional[str] = "utf-8",
    ) -> None:
        self.stream = stream
        self.encoding = encoding
        self.is_text = encoding is None or is_text_stream(stream)

    def write_text(self, s: str) -> None:
        if not s:
            return
        if self.is_text:
            self.stream.write(s)  # type: ignore[arg-type]
        else:
            self.stream.write(s.encode(self.encoding))  # type: ignore[arg-type]

    def write_formatted(self, value: Any) -> None:
        self.write_text(str(value))


def is_text_stream(stream: Any) -> bool:
    """
    Guess whether a stream wants str rather than bytes.

    io text classes and codecs writers are text; otherwise a `mode`
    without "b" (e.g. SpooledTemporaryFile(mode="w")) means text.
    Streams without a mode are treated as binary.
    """
    if isinstance(stream, (io.TextIOBase, codecs.StreamWriter, codecs.StreamReaderWriter)):
        return True
    mode = getattr(stream, "mode", None)
    return isinstance(mode, str) and "b" not in mode
