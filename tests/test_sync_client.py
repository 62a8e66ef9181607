import socket
import threading
from unittest.mock import patch

import pytest

from tcpdemos.conf import ClientConf
from tcpdemos.sync_client import SyncClient, SyncSession, main


def start_echo(rounds):
    """Accept one connection, echo `rounds` chunks back, then close it."""
    listener = socket.create_server(("127.0.0.1", 0))
    port = listener.getsockname()[1]

    def serve():
        with listener:
            conn, _ = listener.accept()
            with conn:
                for _ in range(rounds):
                    data = conn.recv(1024)
                    if not data:
                        break
                    conn.sendall(data)

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    return port, thread


def test_session_round_trip_prints_reply(capsys):
    port, thread = start_echo(1)
    with SyncSession(ClientConf(port=port)) as session:
        session.connect()
        session.write("ping")
        assert session.read() == b"ping"
    thread.join(5)
    assert capsys.readouterr().out == "ping\n"


def test_session_writes_bytes():
    port, thread = start_echo(1)
    with SyncSession(ClientConf(port=port)) as session:
        session.connect()
        session.write(b"hello")
        assert session.read() == b"hello"
    thread.join(5)


def test_read_after_server_closes_returns_empty(capsys):
    port, thread = start_echo(0)
    with SyncSession(ClientConf(port=port)) as session:
        session.connect()
        thread.join(5)
        assert session.read() == b""
    assert capsys.readouterr().out == ""


def test_host_name_is_rejected():
    with pytest.raises(ValueError):
        SyncSession(ClientConf(address="localhost"))


def test_read_before_connect_raises():
    session = SyncSession(ClientConf())
    session.write("ping")
    with pytest.raises(ConnectionError):
        session.read()


def test_endpoint_comes_from_conf():
    session = SyncSession(ClientConf(address="10.0.0.1", port=9000))
    assert session.endpoint == ("10.0.0.1", 9000)


def test_loop_pings_until_server_closes(capsys):
    port, thread = start_echo(3)
    with SyncClient(ClientConf(port=port)) as client:
        client.run()
        assert len(client.sessions) == 1
        client.loop()
    thread.join(5)
    out = capsys.readouterr().out
    assert out.splitlines() == ["ping", "ping", "ping"]


def test_main_reports_connection_failure(capsys):
    with patch("socket.create_connection", side_effect=ConnectionRefusedError("refused")):
        assert main([]) == 1
    assert "refused" in capsys.readouterr().err