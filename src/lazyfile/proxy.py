"""
Read delegation for lazyfile.

This module provides ProxyStream, a readable binary stream that forwards
every read to an underlying source and gives subclasses a hook before
and after each read.
"""

import io
from typing import BinaryIO, Optional

from .exceptions import StreamUnavailable


class ProxyStream(io.RawIOBase):
    """
    Readable stream that delegates to a wrapped source.
    
    Subclasses customize behavior through two hooks:
    
    - ``_before_read(n)`` runs before the source is touched and may
      replace ``self._source``.
    - ``_after_read(n)`` runs with the number of bytes returned, or
      ``-1`` when the source signalled end of stream.
    """
    
    DEFAULT_BUFFER_SIZE = io.DEFAULT_BUFFER_SIZE
    
    _source: Optional[BinaryIO] = None
    _eof = False
    
    def __init__(self, source: Optional[BinaryIO], buffer_size: Optional[int] = None) -> None:
        """
        Initialize ProxyStream.
        
        Args:
            source: The readable binary stream to delegate to
            buffer_size: Chunk size used by readall and skip
        """
        super().__init__()
        self._source = source
        self._buffer_size = buffer_size or self.DEFAULT_BUFFER_SIZE
    
    def _before_read(self, n: int) -> None:
        """Called before every read with the requested size."""
        if self._source is None:
            raise StreamUnavailable("Cannot read from closed stream")
    
    def _after_read(self, n: int) -> None:
        """Called after every read with the byte count, or -1 at end of stream."""
        pass
    
    def readable(self) -> bool:
        return not self.closed
    
    def seekable(self) -> bool:
        return False
    
    def read(self, size: Optional[int] = -1) -> bytes:
        """
        Read up to ``size`` bytes from the source.
        
        A negative or ``None`` size reads until end of stream.
        An empty result means end of stream unless ``size`` was 0.
        """
        if size is None or size < 0:
            return self.readall()
        
        self._before_read(size)
        data = self._source.read(size)
        
        if not data and size > 0:
            self._eof = True
            self._after_read(-1)
            return b""
        
        data = bytes(data or b"")
        self._after_read(len(data))
        return data
    
    def readinto(self, buffer) -> int:
        view = memoryview(buffer).cast("B")
        data = self.read(len(view))
        view[:len(data)] = data
        return len(data)
    
    def readall(self) -> bytes:
        """Read until end of stream and return everything as bytes."""
        chunks = []
        while True:
            chunk = self.read(self._buffer_size)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)
    
    def __next__(self) -> bytes:
        # Iteration stops for good once the source reported end of stream
        if self._eof:
            raise StopIteration
        line = self.readline()
        if not line:
            raise StopIteration
        return line
    
    def skip(self, n: int) -> int:
        """
        Consume and discard up to ``n`` bytes.
        
        Args:
            n: Number of bytes to skip
            
        Returns:
            Number of bytes actually skipped
        """
        skipped = 0
        while skipped < n:
            chunk = self.read(min(n - skipped, self._buffer_size))
            if not chunk:
                break
            skipped += len(chunk)
        return skipped
    
    def close(self) -> None:
        """Close the wrapped source and mark this stream closed."""
        try:
            if self._source is not None:
                source = self._source
                self._source = None
                source.close()
        finally:
            super().close()
