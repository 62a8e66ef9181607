import asyncio

import pytest

from tcpdemos.async_server import EchoServer
from tcpdemos.conf import ServerConf


@pytest.mark.asyncio
async def test_echoes_a_line():
    async with EchoServer(ServerConf(port=0)) as server:
        reader, writer = await asyncio.open_connection("127.0.0.1", server.port)
        writer.write(b"ping\n")
        await writer.drain()
        reply = await asyncio.wait_for(reader.readuntil(b"\n"), 5)
        writer.close()
        await writer.wait_closed()
    assert reply == b"ping\n"


@pytest.mark.asyncio
async def test_echoes_lines_in_order():
    async with EchoServer(ServerConf(port=0)) as server:
        reader, writer = await asyncio.open_connection("127.0.0.1", server.port)
        writer.write(b"first\nsecond\n")
        await writer.drain()
        one = await asyncio.wait_for(reader.readuntil(b"\n"), 5)
        two = await asyncio.wait_for(reader.readuntil(b"\n"), 5)
        writer.close()
        await writer.wait_closed()
    assert [one, two] == [b"first\n", b"second\n"]


@pytest.mark.asyncio
async def test_reports_sessions_and_reads(capsys):
    async with EchoServer(ServerConf(port=0)) as server:
        reader, writer = await asyncio.open_connection("127.0.0.1", server.port)
        writer.write(b"ping\n")
        await writer.drain()
        await asyncio.wait_for(reader.readuntil(b"\n"), 5)
        writer.close()
        await writer.wait_closed()
    out = capsys.readouterr().out
    assert "new session!!!" in out
    assert "Read : ping\n" in out


@pytest.mark.asyncio
async def test_partial_line_is_not_echoed_and_session_ends_on_eof():
    async with EchoServer(ServerConf(port=0)) as server:
        reader, writer = await asyncio.open_connection("127.0.0.1", server.port)
        writer.write(b"no newline")
        writer.write_eof()
        await writer.drain()
        rest = await asyncio.wait_for(reader.read(), 5)
        writer.close()
        await writer.wait_closed()
    assert rest == b""


@pytest.mark.asyncio
async def test_port_zero_gets_real_port_and_close_stops_listening():
    server = EchoServer(ServerConf(port=0))
    await server.start()
    port = server.port
    assert port > 0
    await server.close()
    with pytest.raises(OSError):
        await asyncio.open_connection("127.0.0.1", port)