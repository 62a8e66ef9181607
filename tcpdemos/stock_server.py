"""Serves a fixed list of stock quotes to every client that connects."""

from __future__ import annotations

import asyncio
import re
import sys
from typing import Iterable, Sequence

from .framing import Connection, FramingError
from .stock import Stock, dump_stocks

__all__ = ["StockServer", "default_stocks", "main"]

_PORT = re.compile(r"[0-9]+")


def default_stocks() -> list[Stock]:
    """Return the quotes the server hands out by default."""
    return [
        Stock(
            code="ABC",
            name="A Big Company",
            open_price=4.56,
            high_price=5.12,
            low_price=4.33,
            last_price=4.98,
            buy_price=4.96,
            buy_quantity=1000,
            sell_price=4.99,
            sell_quantity=2000,
        ),
        Stock(
            code="DEF",
            name="Developer Entertainment Firm",
            open_price=20.24,
            high_price=22.88,
            low_price=19.50,
            last_price=19.76,
            buy_price=19.72,
            buy_quantity=34000,
            sell_price=19.85,
            sell_quantity=45000,
        ),
    ]


class StockServer:
    """Accepts connections and sends each client the archived stock list."""

    def __init__(
        self,
        port: int,
        stocks: Iterable[Stock] | None = None,
        host: str = "0.0.0.0",
    ) -> None:
        self.host = host
        self.port = port
        self.stocks = list(default_stocks() if stocks is None else stocks)
        self._server: asyncio.AbstractServer | None = None

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        connection = Connection(reader, writer)
        try:
            await connection.write(dump_stocks(self.stocks))
        except (ConnectionError, OSError, FramingError):
            pass
        finally:
            await connection.close()

    async def start(self) -> None:
        """Bind the listening socket and begin accepting connections."""
        if self._server is not None:
            return
        self._server = await asyncio.start_server(self._handle, self.host, self.port)
        sockets = self._server.sockets
        if sockets:
            self.port = sockets[0].getsockname()[1]

    async def serve_forever(self) -> None:
        """Accept connections until cancelled."""
        await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    async def close(self) -> None:
        """Stop accepting connections."""
        if self._server is None:
            return
        server, self._server = self._server, None
        server.close()
        await server.wait_closed()

    async def __aenter__(self) -> "StockServer":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def _parse_port(text: str) -> int:
    if _PORT.fullmatch(text) is None or int(text) > 0xFFFF:
        raise ValueError(f"invalid port: {text!r}")
    return int(text)


async def _serve(port: int) -> None:
    server = StockServer(port)
    try:
        await server.serve_forever()
    finally:
        await server.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the stock server: ``server <port>``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("Usage: server <port>", file=sys.stderr)
        return 1
    try:
        port = _parse_port(args[0])
        asyncio.run(_serve(port))
    except KeyboardInterrupt:
        pass
    except (ValueError, OSError) as exc:
        print(exc, file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())