"""Blocking client that pings a server over plain sockets."""

from __future__ import annotations

import ipaddress
import socket
import sys
import time
from typing import Sequence

from .conf import ClientConf

__all__ = ["MAX_READ", "SyncClient", "SyncSession", "main"]

MAX_READ = 1024
_PAUSE = 0.001


class SyncSession:
    """One blocking connection to the configured server."""

    def __init__(self, conf: ClientConf | None = None) -> None:
        self.conf = conf if conf is not None else ClientConf()
        # The server address must be a literal IP address, not a host name.
        ipaddress.ip_address(self.conf.address)
        self.endpoint = (self.conf.address, self.conf.port)
        self._sock: socket.socket | None = None

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise ConnectionError("session is not connected")
        return self._sock

    def connect(self) -> None:
        """Open the connection; does nothing if it is already open."""
        if self._sock is None:
            self._sock = socket.create_connection(self.endpoint)

    def write(self, msg: str | bytes) -> None:
        """Send a message; send errors are ignored."""
        data = msg.encode("utf-8") if isinstance(msg, str) else bytes(msg)
        try:
            self._socket().sendall(data)
        except OSError:
            pass

    def read(self) -> bytes:
        """Receive up to MAX_READ bytes, print them and return them.

        Returns b"" once the server has closed the connection.
        """
        data = self._socket().recv(MAX_READ)
        if data:
            print(data.decode("utf-8", "replace"), flush=True)
        return data

    def close(self) -> None:
        """Close the connection."""
        if self._sock is not None:
            sock, self._sock = self._sock, None
            sock.close()

    def __enter__(self) -> "SyncSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class SyncClient:
    """Holds the client's sessions and drives them."""

    def __init__(self, conf: ClientConf | None = None) -> None:
        self.conf = conf if conf is not None else ClientConf()
        self.sessions: list[SyncSession] = []

    def run(self) -> None:
        """Create a session and connect every session."""
        self.sessions.append(SyncSession(self.conf))
        for session in self.sessions:
            session.connect()

    def loop(self) -> None:
        """Ping every session in turn until one of them is closed by the server."""
        while True:
            for session in self.sessions:
                session.write("ping")
                if not session.read():
                    return
            time.sleep(_PAUSE)

    def __enter__(self) -> "SyncClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        for session in self.sessions:
            session.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Connect a client to the default server."""
    with SyncClient(ClientConf()) as client:
        try:
            client.run()
        except OSError as exc:
            print(exc, file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())