import asyncio
import socket

import pytest

from tcpdemos.framing import FramingError, encode_frame
from tcpdemos.stock import ArchiveError, Stock, dump_stocks
from tcpdemos.stock_client import fetch_stocks, format_stocks, main

ABC = Stock("ABC", "A Big Company", 4.56, 5.12, 4.33, 4.98, 4.96, 1000, 4.99, 2000)
DEF = Stock(
    "DEF", "Developer Entertainment Firm", 20.24, 22.88, 19.50, 19.76, 19.72, 34000, 19.85, 45000
)


def _unused_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


async def _serve_bytes(data):
    async def handle(reader, writer):
        writer.write(data)
        await writer.drain()
        writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    return server, server.sockets[0].getsockname()[1]


async def _fetch_from(data):
    server, port = await _serve_bytes(data)
    try:
        return await fetch_stocks("127.0.0.1", port)
    finally:
        server.close()
        await server.wait_closed()


def test_format_single_stock():
    lines = format_stocks([ABC]).splitlines()
    assert lines[0] == "Stock number 0"
    assert "  code: ABC" in lines
    assert "  name: A Big Company" in lines
    assert "  open_price: 4.56" in lines
    assert "  buy_quantity: 1000" in lines
    assert "  sell_quantity: 2000" in lines
    assert len(lines) == 11


def test_format_numbers_stocks_in_order():
    text = format_stocks([ABC, DEF])
    assert text.index("Stock number 0") < text.index("  code: ABC")
    assert text.index("  code: ABC") < text.index("Stock number 1")
    assert text.index("Stock number 1") < text.index("  code: DEF")
    assert text.endswith("\n")


def test_format_empty():
    assert format_stocks([]) == ""


@pytest.mark.asyncio
async def test_fetch_round_trip():
    assert await _fetch_from(encode_frame(dump_stocks([ABC, DEF]))) == [ABC, DEF]


@pytest.mark.asyncio
async def test_fetch_bad_header():
    with pytest.raises(FramingError):
        await _fetch_from(b"zzzzzzzz")


@pytest.mark.asyncio
async def test_fetch_truncated_payload():
    with pytest.raises(asyncio.IncompleteReadError):
        await _fetch_from(b"      10abc")


@pytest.mark.asyncio
async def test_fetch_undecodable_payload():
    with pytest.raises(ArchiveError):
        await _fetch_from(encode_frame(b"garbage"))


@pytest.mark.asyncio
async def test_fetch_connection_refused():
    with pytest.raises(OSError):
        await fetch_stocks("127.0.0.1", _unused_port())


def test_main_usage(capsys):
    assert main(["127.0.0.1"]) == 1
    assert "Usage: client <host> <port>" in capsys.readouterr().err


def test_main_reports_connection_error(capsys):
    assert main(["127.0.0.1", str(_unused_port())]) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.strip() != ""