"""Incremental Server-Sent Events parsing for upstream model streams.

Upstream transports do not guarantee that one network read holds one
event: an event may be split across reads, and one read may carry
several events or end in the middle of a UTF-8 sequence. The parser
buffers until a line boundary and dispatches an event's data on the
blank line that terminates it.
"""

import codecs
import re

DONE_SENTINEL = "[DONE]"

_LINE_END = re.compile(r"\r\n|\r|\n")


class SSEFrameParser:
    """Accumulates bytes and yields the ``data`` payload of each complete event.

    Example:
        >>> parser = SSEFrameParser()
        >>> parser.feed(b'data: {"a"')
        []
        >>> parser.feed(b': 1}\\n\\n')
        ['{"a": 1}']
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._data_lines: list[str] = []

    def feed(self, chunk: bytes) -> list[str]:
        """Consume one chunk; return payloads of events completed by it."""
        self._buffer += self._decoder.decode(chunk)
        return self._drain()

    def flush(self) -> list[str]:
        """Dispatch whatever is pending once the upstream stream has ended."""
        self._buffer += self._decoder.decode(b"", final=True)
        payloads = self._drain(final=True)
        if self._buffer:
            self._process_line(self._buffer)
            self._buffer = ""
        pending = self._dispatch()
        if pending is not None:
            payloads.append(pending)
        return payloads

    def _drain(self, final: bool = False) -> list[str]:
        payloads: list[str] = []
        while True:
            match = _LINE_END.search(self._buffer)
            if match is None:
                break
            # A trailing "\r" may be the first half of "\r\n"; wait for more input.
            if not final and match.group() == "\r" and match.end() == len(self._buffer):
                break
            line = self._buffer[: match.start()]
            self._buffer = self._buffer[match.end() :]
            payload = self._process_line(line)
            if payload is not None:
                payloads.append(payload)
        return payloads

    def _process_line(self, line: str) -> str | None:
        if not line:
            return self._dispatch()

        if line.startswith(":"):
            return None

        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "data":
            self._data_lines.append(value)
        return None

    def _dispatch(self) -> str | None:
        if not self._data_lines:
            return None
        payload = "\n".join(self._data_lines)
        self._data_lines = []
        return payload
