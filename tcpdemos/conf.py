"""Settings shared by the ping clients and echo servers."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["ClientConf", "ServerConf"]

DEFAULT_ADDRESS = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_SESSION_LIFETIME = 1.0

_MAX_PORT = 0xFFFF


def _check_port(port: int) -> None:
    if isinstance(port, bool) or not isinstance(port, int):
        raise TypeError(f"port must be an integer, got {port!r}")
    if not 0 <= port <= _MAX_PORT:
        raise ValueError(f"port out of range: {port}")


@dataclass(frozen=True)
class ClientConf:
    """Where a client connects to."""

    address: str = DEFAULT_ADDRESS
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        _check_port(self.port)


@dataclass(frozen=True)
class ServerConf:
    """Where a server listens, and how long an idle session may live."""

    address: str = DEFAULT_ADDRESS
    port: int = DEFAULT_PORT
    session_lifetime: float = DEFAULT_SESSION_LIFETIME

    def __post_init__(self) -> None:
        _check_port(self.port)
        if self.session_lifetime < 0:
            raise ValueError(f"session lifetime must not be negative: {self.session_lifetime}")