"""Downloads stock quote information from a stock server."""

from __future__ import annotations

import asyncio
import sys
from typing import Iterable, Sequence

from .framing import Connection, FramingError
from .stock import ArchiveError, Stock, load_stocks

__all__ = ["fetch_stocks", "format_stocks", "main"]


async def fetch_stocks(host: str, port: int | str) -> list[Stock]:
    """Connect to a stock server and return the list of stocks it sends.

    Every address the host resolves to is tried in turn.
    """
    reader, writer = await asyncio.open_connection(host, port)
    connection = Connection(reader, writer)
    try:
        return load_stocks(await connection.read())
    finally:
        await connection.close()


def _number(value: float) -> str:
    return f"{value:g}"


def format_stocks(stocks: Iterable[Stock]) -> str:
    """Render stocks as the client prints them."""
    lines: list[str] = []
    for number, stock in enumerate(stocks):
        lines.extend(
            [
                f"Stock number {number}",
                f"  code: {stock.code}",
                f"  name: {stock.name}",
                f"  open_price: {_number(stock.open_price)}",
                f"  high_price: {_number(stock.high_price)}",
                f"  low_price: {_number(stock.low_price)}",
                f"  last_price: {_number(stock.last_price)}",
                f"  buy_price: {_number(stock.buy_price)}",
                f"  buy_quantity: {stock.buy_quantity}",
                f"  sell_price: {_number(stock.sell_price)}",
                f"  sell_quantity: {stock.sell_quantity}",
            ]
        )
    return "".join(line + "\n" for line in lines)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the stock client: ``client <host> <port>``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        print("Usage: client <host> <port>", file=sys.stderr)
        return 1
    host, port = args
    try:
        stocks = asyncio.run(fetch_stocks(host, port))
    except (OSError, EOFError, FramingError, ArchiveError) as exc:
        print(exc, file=sys.stderr)
        return 0
    sys.stdout.write(format_stocks(stocks))
    return 0


if __name__ == "__main__":
    sys.exit(main())