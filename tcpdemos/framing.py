"""Length-prefixed message framing over asyncio streams.

Each message is an 8-byte header holding the payload length in
hexadecimal, right-aligned and padded with spaces, followed by the payload.
"""

from __future__ import annotations

import asyncio
import re

__all__ = ["HEADER_LENGTH", "Connection", "FramingError", "encode_frame", "parse_header"]

HEADER_LENGTH = 8

_HEX_LENGTH = re.compile(r"\s*\+?(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]+)")


class FramingError(ValueError):
    """Raised when a frame header cannot be built or understood."""


def encode_frame(payload: bytes) -> bytes:
    """Return the header followed by the payload."""
    payload = bytes(payload)
    header = f"{len(payload):>{HEADER_LENGTH}x}"
    if len(header) != HEADER_LENGTH:
        raise FramingError(f"payload of {len(payload)} bytes is too large to frame")
    return header.encode("ascii") + payload


def parse_header(header: bytes) -> int:
    """Return the payload length announced by a frame header."""
    if len(header) != HEADER_LENGTH:
        raise FramingError(f"header must be {HEADER_LENGTH} bytes, got {len(header)}")
    try:
        text = bytes(header).decode("ascii")
    except UnicodeDecodeError:
        raise FramingError(f"invalid header {bytes(header)!r}") from None
    match = _HEX_LENGTH.match(text)
    if match is None:
        raise FramingError(f"invalid header {bytes(header)!r}")
    return int(match.group(1), 16)


class Connection:
    """Sends and receives framed messages over a stream pair."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.reader = reader
        self.writer = writer

    async def write(self, payload: bytes) -> None:
        """Send one framed message, header and payload in a single write."""
        self.writer.write(encode_frame(payload))
        await self.writer.drain()

    async def read(self) -> bytes:
        """Receive one framed message and return its payload.

        Raises asyncio.IncompleteReadError if the stream ends early and
        FramingError if the header is not valid.
        """
        header = await self.reader.readexactly(HEADER_LENGTH)
        size = parse_header(header)
        return await self.reader.readexactly(size)

    async def close(self) -> None:
        """Close the underlying stream."""
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError):
            pass