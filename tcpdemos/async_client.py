"""Client that pings a server once per interval over a single connection."""

from __future__ import annotations

import asyncio
import sys
from typing import Sequence, TextIO

from .conf import ClientConf

__all__ = ["PingClient", "PingSession", "main"]

PING = b"ping\n"


class PingSession:
    """Connects, then alternates writing a ping and reading one line back."""

    def __init__(
        self,
        conf: ClientConf,
        interval: float = 1.0,
        output: TextIO | None = None,
    ) -> None:
        self.conf = conf
        self.interval = interval
        self.output = output

    def _say(self, text: str) -> None:
        print(text, file=self.output if self.output is not None else sys.stdout, flush=True)

    async def _close(self, writer: asyncio.StreamWriter | None) -> None:
        message = "Success"
        if writer is not None:
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionError, OSError) as exc:
                message = str(exc) or type(exc).__name__
        self._say(f"Close : {message}")

    async def run(self) -> int:
        """Ping until the connection fails; return how many replies arrived."""
        self._say("connect ")
        try:
            reader, writer = await asyncio.open_connection(self.conf.address, self.conf.port)
        except OSError:
            await self._close(None)
            return 0

        replies = 0
        try:
            while True:
                self._say("write")
                writer.write(PING)
                await writer.drain()
                await reader.readuntil(b"\n")
                replies += 1
                await asyncio.sleep(self.interval)
        except (OSError, asyncio.IncompleteReadError, asyncio.LimitOverrunError):
            pass
        await self._close(writer)
        return replies


class PingClient:
    """Starts one ping session against the configured server."""

    def __init__(self, conf: ClientConf | None = None) -> None:
        self.conf = conf if conf is not None else ClientConf()

    async def run(self) -> int:
        """Run a session to completion; return the number of replies."""
        try:
            return await PingSession(self.conf).run()
        except Exception as exc:  # report anything unexpected and stop
            print(f"Error : {exc}", flush=True)
            return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Ping the default server until the connection drops."""
    try:
        asyncio.run(PingClient(ClientConf()).run())
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())