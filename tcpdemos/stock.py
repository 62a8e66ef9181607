"""Stock quote records and a plain-text archive format for lists of them."""

from __future__ import annotations

import operator
import re
from dataclasses import dataclass
from typing import Iterable

__all__ = ["ArchiveError", "Stock", "dump_stocks", "load_stocks"]

_ARCHIVE_PARTS = (b"tcpdemos", b"archive")
ARCHIVE_TAG = b"::".join(_ARCHIVE_PARTS)
VERSION = 1

_WORD_PATTERN = re.compile(rb"\s*(\S+)")
_INTEGER = re.compile(rb"[+-]?[0-9]+")


class ArchiveError(ValueError):
    """Raised when archive data cannot be decoded."""


@dataclass
class Stock:
    """Quote information about a single stock."""

    code: str
    name: str
    open_price: float
    high_price: float
    low_price: float
    last_price: float
    buy_price: float
    buy_quantity: int
    sell_price: float
    sell_quantity: int


def _encode_string(value: str) -> bytes:
    raw = value.encode("utf-8")
    return str(len(raw)).encode("ascii") + b" " + raw


def _encode_real(value: float) -> bytes:
    return repr(float(value)).encode("ascii")


def _encode_integer(value: int) -> bytes:
    return str(operator.index(value)).encode("ascii")


def _encode_stock(stock: Stock) -> list[bytes]:
    return [
        _encode_string(stock.code),
        _encode_string(stock.name),
        _encode_real(stock.open_price),
        _encode_real(stock.high_price),
        _encode_real(stock.low_price),
        _encode_real(stock.last_price),
        _encode_real(stock.buy_price),
        _encode_integer(stock.buy_quantity),
        _encode_real(stock.sell_price),
        _encode_integer(stock.sell_quantity),
    ]


def dump_stocks(stocks: Iterable[Stock]) -> bytes:
    """Serialize a sequence of stocks into archive bytes."""
    stocks = list(stocks)
    parts = [ARCHIVE_TAG, str(VERSION).encode("ascii"), str(len(stocks)).encode("ascii")]
    for stock in stocks:
        parts.extend(_encode_stock(stock))
    return b" ".join(parts)


class _Reader:
    """Cursor over archive bytes."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def next_word(self) -> bytes:
        match = _WORD_PATTERN.match(self._data, self._pos)
        if match is None:
            raise ArchiveError("unexpected end of archive")
        self._pos = match.end()
        return match.group(1)

    def integer(self) -> int:
        word = self.next_word()
        if _INTEGER.fullmatch(word) is None:
            raise ArchiveError(f"expected an integer, got {word!r}")
        return int(word)

    def real(self) -> float:
        word = self.next_word()
        try:
            return float(word.decode("ascii"))
        except (UnicodeDecodeError, ValueError):
            raise ArchiveError(f"expected a number, got {word!r}") from None

    def string(self) -> str:
        length = self.integer()
        if length < 0:
            raise ArchiveError(f"negative string length {length}")
        if self._data[self._pos:self._pos + 1] != b" ":
            raise ArchiveError("missing separator after string length")
        start = self._pos + 1
        end = start + length
        if end > len(self._data):
            raise ArchiveError("string runs past end of archive")
        self._pos = end
        try:
            return self._data[start:end].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ArchiveError(f"invalid text in archive: {exc}") from None

    def finish(self) -> None:
        if self._data[self._pos:].strip():
            raise ArchiveError("trailing data after archive")


def _read_stock(reader: _Reader) -> Stock:
    return Stock(
        code=reader.string(),
        name=reader.string(),
        open_price=reader.real(),
        high_price=reader.real(),
        low_price=reader.real(),
        last_price=reader.real(),
        buy_price=reader.real(),
        buy_quantity=reader.integer(),
        sell_price=reader.real(),
        sell_quantity=reader.integer(),
    )


def load_stocks(data: bytes) -> list[Stock]:
    """Decode archive bytes produced by :func:`dump_stocks`."""
    reader = _Reader(data)
    if reader.next_word() != ARCHIVE_TAG:
        raise ArchiveError("not a stock archive")
    version = reader.integer()
    if version != VERSION:
        raise ArchiveError(f"unsupported archive version {version}")
    count = reader.integer()
    if count < 0:
        raise ArchiveError(f"negative element count {count}")
    stocks = [_read_stock(reader) for _ in range(count)]
    reader.finish()
    return stocks