# tcpdemos

Three small TCP client/server pairs built on the standard library alone:

- **Stock quotes**: a server that sends a fixed list of stock quotes to every
  client that connects, as one length-prefixed frame.
- **Asynchronous ping/echo**: an asyncio client that sends `ping` once a
  second and an asyncio server that echoes every line back.
- **Synchronous ping/echo**: a blocking client session that writes `ping` and
  prints the reply, and a threaded server with one thread accepting
  connections and another echoing data and dropping idle sessions.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Stock quotes

Start the server on a port (it listens on all IPv4 addresses):

```
tcpdemos-stock-server 9000
```

Fetch and print the quotes:

```
tcpdemos-stock-client 127.0.0.1 9000
```

The client prints each stock in turn:

```
Stock number 0
  code: ABC
  name: A Big Company
  open_price: 4.56
  ...
```

Connection and decoding errors are printed to standard error. Both commands
print a usage line and exit with status 1 when given the wrong number of
arguments.

Used as a library, `fetch_stocks` is a coroutine:

```python
import asyncio

from tcpdemos.stock_client import fetch_stocks, format_stocks

stocks = asyncio.run(fetch_stocks("127.0.0.1", 9000))
print(format_stocks(stocks), end="")
```

`StockServer(port, stocks=None, host="0.0.0.0")` serves `default_stocks()`
unless given another list; it can be used as an async context manager, and
after `start()` its `port` attribute holds the port actually bound (useful
with port 0).

The pieces underneath:

- `tcpdemos.stock` holds the `Stock` dataclass and `dump_stocks` /
  `load_stocks`, which turn a list of stocks into a plain-text archive and
  back. A malformed archive raises `ArchiveError`.
- `tcpdemos.framing` holds `encode_frame` and `parse_header` and the
  `Connection` class, whose `write`, `read` and `close` coroutines send and
  receive whole frames over an asyncio stream pair. A frame is an 8-byte
  header giving the payload length in hexadecimal, right-aligned with
  spaces, followed by the payload. A bad header or an oversized payload
  raises `FramingError`.

## Asynchronous ping/echo

```
tcpdemos-async-server
tcpdemos-async-client
```

The server listens on `127.0.0.1:8080`, prints `new session!!!` for each
connection, prints every line it reads and sends it back, until the client
disconnects.

The client connects to the same address and prints `connect `, then repeats:
print `write`, send `ping`, wait for a line back, pause one second. When the
connection fails or closes it prints `Close : ...`.

From code, `EchoServer(conf)` (with `start`, `serve_forever`, `close`, and
use as an async context manager) and `PingClient(conf)` / `PingSession(conf,
interval=1.0, output=None)` take settings from `tcpdemos.conf`.
`PingSession.run()` returns the number of replies received.

## Synchronous ping/echo

```
tcpdemos-sync-server
tcpdemos-sync-client
```

`SyncServer` binds `127.0.0.1:8080` and runs an accept loop and an answer
loop on two threads until `stop()` is called or the process is interrupted.
Each connection is a `ServerSession`: whatever data arrives (up to 1024
bytes at a time) is written straight back, and a session whose peer has
gone, or that has received nothing for more than a second, is closed and
dropped.

`SyncClient.run()` opens one `SyncSession` and connects it;
`SyncClient.loop()` then writes `ping` and prints the reply on each session
until the server closes the connection. A `SyncSession` can also be used on
its own: `connect`, `write(msg)`, `read()` (returns the bytes received, `b""`
once the server has closed) and `close`, or as a context manager. The server
address must be a literal IP address.

## Settings

`tcpdemos.conf` holds two frozen dataclasses:

- `ClientConf(address="127.0.0.1", port=8080)`
- `ServerConf(address="127.0.0.1", port=8080, session_lifetime=1.0)`

A port outside 0–65535 or a negative session lifetime raises `ValueError`.

## Limits

- The ping/echo commands take no command-line options; other addresses or
  ports are only available by building the configuration in code.
- `tcpdemos-sync-client` only connects and exits; the ping loop is run from
  code with `SyncClient.loop()`.
- `EchoServer` does not close idle sessions; `ServerConf.session_lifetime`
  is not used by it.