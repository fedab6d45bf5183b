"""
Mock network implementations for testing.

This module provides a mock socket that can be handed to HTTPOpener
so HTTP responses can be tested without actual network connections.
"""

from typing import Iterable, Iterator, List, Optional, Tuple


class MockSocket:
    """
    Mock blocking socket for testing.
    
    Serves canned response bytes from ``recv`` and records
    everything passed to ``sendall``.
    """
    
    def __init__(self, data: bytes = b"", recv_size: Optional[int] = None) -> None:
        """
        Initialize the mock socket.
        
        Args:
            data: Data to be returned by ``recv``
            recv_size: Maximum bytes returned per ``recv`` call
        """
        self._data = data
        self._position = 0
        self._recv_size = recv_size
        self._closed = False
        self._write_buffer: List[bytes] = []
    
    def recv(self, bufsize: int) -> bytes:
        if self._closed:
            raise OSError("Socket is closed")
        
        if self._recv_size is not None:
            bufsize = min(bufsize, self._recv_size)
        end = min(self._position + bufsize, len(self._data))
        result = self._data[self._position:end]
        self._position = end
        return result
    
    def sendall(self, data: bytes) -> None:
        if self._closed:
            raise OSError("Socket is closed")
        self._write_buffer.append(bytes(data))
    
    def close(self) -> None:
        self._closed = True
    
    @property
    def is_closed(self) -> bool:
        """Check if the mock socket is closed."""
        return self._closed
    
    @property
    def written_data(self) -> bytes:
        """Get all data that was sent through the socket."""
        return b"".join(self._write_buffer)


class MockSocketFactory:
    """
    Socket factory handing out prepared MockSockets in order.
    
    Records the address every socket was requested for.
    """
    
    def __init__(self, sockets: Iterable[MockSocket]) -> None:
        self._sockets: Iterator[MockSocket] = iter(sockets)
        self.addresses: List[Tuple[str, int]] = []
    
    def __call__(self, address: Tuple[str, int], timeout: Optional[float] = None) -> MockSocket:
        self.addresses.append(address)
        try:
            return next(self._sockets)
        except StopIteration:
            raise OSError(f"No mock socket left for {address}") from None
