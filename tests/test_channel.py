# © Copyright 2025-2026, Query.Farm LLC - https://query.farm
# SPDX-License-Identifier: Apache-2.0

"""Tests for the message channel."""

from __future__ import annotations

import pytest

from gatt_conformance.errors import ChannelError
from gatt_conformance.transcript import SocketChannel, make_channel_pair


class TestMessageBoundaries:
    """One send is one receive."""

    def test_messages_are_not_merged(self, channel_pair: tuple[SocketChannel, SocketChannel]) -> None:
        """Two sends arrive as two messages."""
        left, right = channel_pair
        assert left.send(b"\x02\x00\x02") == 3
        left.send(b"\x0a\x03\x00")
        assert right.recv() == b"\x02\x00\x02"
        assert right.recv() == b"\x0a\x03\x00"

    def test_both_directions(self, channel_pair: tuple[SocketChannel, SocketChannel]) -> None:
        """The pair is bidirectional."""
        left, right = channel_pair
        right.send(b"\x03\x00\x02")
        assert left.recv() == b"\x03\x00\x02"

    def test_truncation_is_an_error(self) -> None:
        """Oversized messages are reported, never cut."""
        left, right = make_channel_pair(max_message=4)
        try:
            left.send(b"\x01" * 8)
            with pytest.raises(ChannelError, match="truncated"):
                right.recv()
        finally:
            left.close()
            right.close()


class TestLifecycle:
    """Closing and non-blocking behaviour."""

    def test_recv_without_data_fails(self, channel_pair: tuple[SocketChannel, SocketChannel]) -> None:
        """Channels are non-blocking."""
        _, right = channel_pair
        with pytest.raises(ChannelError, match="recv failed"):
            right.recv()

    def test_peer_close_reads_empty(self, channel_pair: tuple[SocketChannel, SocketChannel]) -> None:
        """A closed peer is seen as an empty message."""
        left, right = channel_pair
        left.close()
        assert right.recv() == b""

    def test_use_after_close(self, channel_pair: tuple[SocketChannel, SocketChannel]) -> None:
        """A closed channel refuses I/O."""
        left, _ = channel_pair
        left.close()
        assert left.closed
        with pytest.raises(ChannelError, match="closed channel"):
            left.send(b"\x01")
        with pytest.raises(ChannelError, match="closed channel"):
            left.recv()

    def test_close_is_idempotent(self, channel_pair: tuple[SocketChannel, SocketChannel]) -> None:
        """Closing twice is harmless."""
        left, _ = channel_pair
        left.close()
        left.close()
        assert left.closed
