"""Small TCP client/server demos: framed stock quotes and ping/echo pairs."""

__version__ = "0.1.0"