"""Incremental parser for the backend's server-sent event stream.

Network chunks can split a frame, a line, or even a multi-byte UTF-8
character anywhere. The parser keeps one buffer across feeds so the
payloads it yields depend only on the bytes, not on how they were chunked.
"""

import codecs
from typing import Iterable, Iterator

FRAME_DELIMITER = "\n\n"
DATA_MARKER = "data:"
DONE_SENTINEL = "[DONE]"

# ASCII blanks only; str.strip() would also eat U+2028 and U+0085 inside payloads
_BLANKS = " \t\r"


def is_done_sentinel(payload: str) -> bool:
    """True for the payload that ends a round (checked before any JSON parse)."""
    return payload == DONE_SENTINEL


class FrameParser:
    """
    Turns a byte-chunk stream into `data:` payload strings.

    Usage:
        parser = FrameParser()
        async for chunk in response.aiter_bytes():
            for payload in parser.feed(chunk):
                ...

    Lines that are not data lines (comments, `event:` names, `id:`) are
    ignored. An incomplete trailing frame is never emitted.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> list[str]:
        """Add a chunk and return every payload from the frames it completes."""
        self._buffer += self._decoder.decode(chunk)
        return list(self._drain())

    def _drain(self) -> Iterator[str]:
        while True:
            idx = self._buffer.find(FRAME_DELIMITER)
            if idx == -1:
                return
            frame = self._buffer[:idx]
            self._buffer = self._buffer[idx + len(FRAME_DELIMITER):]
            yield from parse_frame(frame)

    @property
    def pending(self) -> str:
        """Text buffered after the last complete frame."""
        return self._buffer


def parse_frame(frame: str) -> Iterator[str]:
    """Yield the payload of every data line in one frame, in order."""
    for line in frame.split("\n"):
        line = line.strip(_BLANKS)
        if not line.startswith(DATA_MARKER):
            continue
        yield line[len(DATA_MARKER):].strip(_BLANKS)


def parse_chunks(chunks: Iterable[bytes]) -> list[str]:
    """Parse a finite chunk sequence in one go."""
    parser = FrameParser()
    payloads: list[str] = []
    for chunk in chunks:
        payloads.extend(parser.feed(chunk))
    return payloads
