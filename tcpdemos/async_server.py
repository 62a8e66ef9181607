"""Line echo server: each connection gets back every line it sends."""

from __future__ import annotations

import asyncio
import sys
from typing import Sequence

from .conf import ServerConf

__all__ = ["EchoServer", "main"]


class EchoServer:
    """Accepts connections and echoes newline-terminated messages."""

    def __init__(self, conf: ServerConf | None = None) -> None:
        self.conf = conf if conf is not None else ServerConf()
        self.port = self.conf.port
        self._server: asyncio.AbstractServer | None = None

    async def _session(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        print("new session!!!", flush=True)
        try:
            while True:
                line = await reader.readuntil(b"\n")
                print(f"Read : {line.decode('utf-8', 'replace')}", flush=True)
                writer.write(line)
                await writer.drain()
        except (asyncio.IncompleteReadError, asyncio.LimitOverrunError, OSError):
            pass
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionError, OSError):
                pass

    async def start(self) -> None:
        """Bind the listening socket and begin accepting connections."""
        if self._server is not None:
            return
        self._server = await asyncio.start_server(self._session, self.conf.address, self.conf.port)
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

    async def __aenter__(self) -> "EchoServer":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


async def _serve(conf: ServerConf) -> None:
    server = EchoServer(conf)
    try:
        await server.serve_forever()
    finally:
        await server.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the echo server on the default settings until interrupted."""
    try:
        asyncio.run(_serve(ServerConf()))
    except KeyboardInterrupt:
        pass
    except OSError as exc:
        print(f"Error : {exc}", flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())