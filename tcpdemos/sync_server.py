"""Threaded echo server that polls its sessions and drops idle ones."""

from __future__ import annotations

import ipaddress
import select
import socket
import sys
import threading
import time
from typing import Sequence

from .conf import ServerConf

__all__ = ["MAX_SIZE", "SESSION_LIFETIME", "ServerSession", "SyncServer", "main"]

MAX_SIZE = 1024
SESSION_LIFETIME = 1.0
_POLL = 0.001
_ACCEPT_TIMEOUT = 0.1


class ServerSession:
    """An accepted connection that echoes whatever it receives."""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock
        self.last_ping = time.monotonic()
        self.closed = False

    def _available(self) -> bool:
        try:
            readable, _, _ = select.select([self.sock], [], [], 0)
        except (OSError, ValueError):
            self.closed = True
            return False
        return bool(readable)

    def answer(self) -> bytes:
        """Echo any data waiting on the socket and return it (b"" if none)."""
        if self.closed or not self._available():
            return b""
        try:
            data = self.sock.recv(MAX_SIZE)
        except OSError:
            data = b""
        if not data:
            self.closed = True
            return b""
        self.last_ping = time.monotonic()
        try:
            self.sock.sendall(data)
        except OSError:
            self.closed = True
        return data

    def timed_out(self) -> bool:
        """True once the peer is gone or has been silent for too long."""
        return self.closed or time.monotonic() - self.last_ping > SESSION_LIFETIME

    def close(self) -> None:
        """Close the connection."""
        self.closed = True
        try:
            self.sock.close()
        except OSError:
            pass


class SyncServer:
    """Accepts connections on one thread and answers them on another."""

    def __init__(self, conf: ServerConf | None = None) -> None:
        self.conf = conf if conf is not None else ServerConf()
        self._ip = ipaddress.ip_address(self.conf.address)
        self.port = self.conf.port
        self.sessions: set[ServerSession] = set()
        self.ready = threading.Event()
        self._stopping = threading.Event()
        self._lock = threading.Lock()
        self._listener: socket.socket | None = None

    def _bind(self) -> socket.socket:
        if self._listener is None:
            family = socket.AF_INET6 if self._ip.version == 6 else socket.AF_INET
            listener = socket.create_server((str(self._ip), self.conf.port), family=family)
            listener.settimeout(_ACCEPT_TIMEOUT)
            self._listener = listener
            self.port = listener.getsockname()[1]
            self.ready.set()
        return self._listener

    def _close_listener(self) -> None:
        if self._listener is not None:
            listener, self._listener = self._listener, None
            listener.close()

    def run(self) -> None:
        """Serve until stopped; raises OSError if the address cannot be bound."""
        self._bind()
        threads = [
            threading.Thread(target=self.accept_loop, name="accept", daemon=True),
            threading.Thread(target=self.answer_loop, name="answer", daemon=True),
        ]
        for thread in threads:
            thread.start()
        try:
            for thread in threads:
                thread.join()
        finally:
            self.stop()
            for thread in threads:
                thread.join()
            with self._lock:
                remaining, self.sessions = self.sessions, set()
            for session in remaining:
                session.close()

    def accept_loop(self) -> None:
        """Accept connections and register a session for each."""
        listener = self._bind()
        try:
            while not self._stopping.is_set():
                try:
                    conn, _ = listener.accept()
                except socket.timeout:
                    continue
                except OSError:
                    if self._stopping.is_set():
                        break
                    raise
                conn.settimeout(None)
                with self._lock:
                    self.sessions.add(ServerSession(conn))
        finally:
            self._close_listener()

    def answer_loop(self) -> None:
        """Poll every session, echoing data and dropping timed-out sessions."""
        while not self._stopping.is_set():
            with self._lock:
                current = list(self.sessions)
            for session in current:
                session.answer()
            expired = [session for session in current if session.timed_out()]
            if expired:
                with self._lock:
                    self.sessions.difference_update(expired)
                for session in expired:
                    session.close()
            time.sleep(_POLL)

    def stop(self) -> None:
        """Ask both loops to finish."""
        self._stopping.set()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the echo server on the default settings until interrupted."""
    server = SyncServer(ServerConf())
    try:
        server.run()
    except KeyboardInterrupt:
        server.stop()
    except OSError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())