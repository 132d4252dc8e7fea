# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Message-oriented duplex channels."""

from __future__ import annotations

import contextlib
import logging
import socket
from typing import Protocol, runtime_checkable

from gatt_conformance._debug import transcript_logger
from gatt_conformance.errors import ChannelError

__all__ = [
    "DEFAULT_MAX_MESSAGE",
    "Channel",
    "SocketChannel",
    "make_channel_pair",
]

DEFAULT_MAX_MESSAGE = 65535
"""Largest message a channel will receive without reporting truncation."""


# ---------------------------------------------------------------------------
# Channel protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class Channel(Protocol):
    """A reliable duplex transport that preserves message boundaries."""

    def send(self, data: bytes) -> int:
        """Send one message and return the number of bytes written."""
        ...

    def recv(self) -> bytes:
        """Receive one whole message; ``b""`` means the peer closed."""
        ...

    def fileno(self) -> int:
        """Descriptor to watch for readability."""
        ...

    def close(self) -> None:
        """Close this end."""
        ...


# ---------------------------------------------------------------------------
# SocketChannel + make_channel_pair
# ---------------------------------------------------------------------------


class SocketChannel:
    """Channel backed by one end of an ``AF_UNIX``/``SOCK_SEQPACKET`` pair.

    Sequenced-packet sockets keep message boundaries, so one ``send`` is one
    ``recv`` on the other end.  A message longer than ``max_message`` is
    reported as :class:`ChannelError` instead of being silently cut.
    """

    __slots__ = ("_closed", "_max_message", "_sock")

    def __init__(self, sock: socket.socket, *, max_message: int = DEFAULT_MAX_MESSAGE) -> None:
        """Wrap a connected socket."""
        self._sock = sock
        self._max_message = max_message
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether :meth:`close` has been called."""
        return self._closed

    def send(self, data: bytes) -> int:
        """Send one message.

        Raises:
            ChannelError: If the channel is closed or the send fails.

        """
        if self._closed:
            raise ChannelError("send on closed channel")
        try:
            return self._sock.send(data)
        except OSError as exc:
            raise ChannelError(f"send failed: {exc}") from exc

    def recv(self) -> bytes:
        """Receive one message.

        Raises:
            ChannelError: If the channel is closed, the receive fails, or the
                message was larger than ``max_message``.

        """
        if self._closed:
            raise ChannelError("recv on closed channel")
        try:
            data, _, flags, _ = self._sock.recvmsg(self._max_message)
        except OSError as exc:
            raise ChannelError(f"recv failed: {exc}") from exc
        if flags & socket.MSG_TRUNC:
            raise ChannelError(f"message truncated at {self._max_message} bytes")
        return data

    def fileno(self) -> int:
        """Socket descriptor."""
        return self._sock.fileno()

    def close(self) -> None:
        """Close the socket; safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        with contextlib.suppress(OSError):
            self._sock.close()


def make_channel_pair(*, max_message: int = DEFAULT_MAX_MESSAGE) -> tuple[SocketChannel, SocketChannel]:
    """Create two connected, non-blocking channels.

    Returns (harness_end, engine_end).
    """
    left, right = socket.socketpair(socket.AF_UNIX, socket.SOCK_SEQPACKET)
    left.setblocking(False)
    right.setblocking(False)
    if transcript_logger.isEnabledFor(logging.DEBUG):
        transcript_logger.debug("make_channel_pair: fds=(%d,%d)", left.fileno(), right.fileno())
    return SocketChannel(left, max_message=max_message), SocketChannel(right, max_message=max_message)
