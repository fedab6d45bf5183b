"""
Unit tests for read delegation.

Tests that ProxyStream forwards reads to its source and calls
the before/after hooks with the right sizes.
"""

import io
from typing import List, Tuple

import pytest

from lazyfile.exceptions import StreamUnavailable
from lazyfile.proxy import ProxyStream


class RecordingProxy(ProxyStream):
    """ProxyStream that records every hook call."""
    
    def __init__(self, source, buffer_size=None) -> None:
        super().__init__(source, buffer_size)
        self.events: List[Tuple[str, int]] = []
    
    def _before_read(self, n: int) -> None:
        super()._before_read(n)
        self.events.append(("before", n))
    
    def _after_read(self, n: int) -> None:
        self.events.append(("after", n))


class TestProxyStream:
    """Test ProxyStream class functionality."""
    
    def test_delegates_reads(self) -> None:
        """Test that reads come from the source."""
        stream = ProxyStream(io.BytesIO(b"Hello, World!"))
        
        assert stream.read(5) == b"Hello"
        assert stream.read() == b", World!"
    
    def test_hooks(self) -> None:
        """Test hook calls for partial reads and end of stream."""
        stream = RecordingProxy(io.BytesIO(b"abc"))
        
        assert stream.read(2) == b"ab"
        assert stream.read(5) == b"c"
        assert stream.read(5) == b""
        
        assert stream.events == [
            ("before", 2), ("after", 2),
            ("before", 5), ("after", 1),
            ("before", 5), ("after", -1),
        ]
    
    def test_zero_sized_read(self) -> None:
        """Test that a zero sized read does not signal end of stream."""
        stream = RecordingProxy(io.BytesIO(b"abc"))
        
        assert stream.read(0) == b""
        assert stream.events == [("before", 0), ("after", 0)]
    
    def test_readall_signals_end(self) -> None:
        """Test that readall ends with an end of stream hook call."""
        stream = RecordingProxy(io.BytesIO(b"abc"))
        
        assert stream.readall() == b"abc"
        assert stream.events[-1] == ("after", -1)
    
    def test_readinto(self) -> None:
        """Test reading into a buffer."""
        stream = ProxyStream(io.BytesIO(b"abc"))
        buffer = bytearray(5)
        
        assert stream.readinto(buffer) == 3
        assert buffer[:3] == bytearray(b"abc")
    
    def test_skip(self) -> None:
        """Test skipping through the proxy."""
        stream = RecordingProxy(io.BytesIO(b"abcdef"))
        
        assert stream.skip(4) == 4
        assert stream.read() == b"ef"
        assert ("after", 4) in stream.events
    
    def test_close(self) -> None:
        """Test that close releases the source."""
        source = io.BytesIO(b"abc")
        stream = ProxyStream(source)
        
        stream.close()
        stream.close()
        
        assert source.closed is True
        assert stream.closed is True
        with pytest.raises(StreamUnavailable, match="closed stream"):
            stream.read(1)
    
    def test_not_seekable(self) -> None:
        """Test the io capabilities."""
        stream = ProxyStream(io.BytesIO(b""))
        
        assert stream.readable() is True
        assert stream.seekable() is False
    
    def test_readable_after_close(self) -> None:
        """Test that readable follows the closed state."""
        stream = ProxyStream(io.BytesIO(b"abc"))
        
        stream.close()
        assert stream.readable() is False
    
    def test_iteration_stops_at_end_of_stream(self) -> None:
        """Test line iteration over data without a trailing newline."""
        stream = ProxyStream(io.BytesIO(b"one\ntwo"))
        
        assert list(stream) == [b"one\n", b"two"]
    
    def test_readall_uses_buffer_size(self) -> None:
        """Test the configured chunk size for readall."""
        stream = RecordingProxy(io.BytesIO(b"abcdef"), buffer_size=4)
        
        assert stream.readall() == b"abcdef"
        assert stream.events[0] == ("before", 4)
