"""
File-backed streams for lazyfile.

This module provides MaterializingStream, a readable byte stream that
can turn itself into a file on demand. Callers that only read get a
plain sequential stream; callers that need a path or a length get a
file, created lazily in a temporary location when the data did not
come from one.
"""

import io
import logging
import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional, Union

from typing_extensions import Self

from . import network
from .exceptions import (
    ConcurrentReadConflict,
    StreamAlreadyConsumed,
    StreamUnavailable,
)
from .proxy import ProxyStream
from .utils import copy

logger = logging.getLogger(__name__)

PathType = Union[str, os.PathLike]
BytesLike = Union[bytes, bytearray, memoryview]


class FileState(Enum):
    """Backing file states of a MaterializingStream."""
    NONE = "none"              # No backing file (yet)
    EXTERNAL = "external"      # Supplied by the caller, never deleted
    TEMPORARY = "temporary"    # Created by the stream, deleted on close


class MaterializingStream(ProxyStream):
    """
    Readable stream that is transparently backed by a file.
    
    The stream reads sequentially from its source. When a caller asks
    for the backing file (or for the length of a stream whose length is
    unknown), the remaining source bytes are copied into a temporary
    file and later reads are served from that file. Temporary files are
    removed on close, and the stream closes itself once a read reaches
    the end of the data.
    
    Instances are meant for a single consumer; no locking is done.
    """
    
    # Default configuration
    DEFAULT_TEMP_PREFIX = "lazyfile-"
    DEFAULT_TEMP_SUFFIX = ".tmp"
    DEFAULT_BUFFER_SIZE = 65536  # 64KB copy buffer
    
    _path: Optional[Path] = None
    _file_state = FileState.NONE
    
    def __init__(
        self,
        stream: BinaryIO,
        length: Optional[int] = None,
        *,
        path: Optional[PathType] = None,
        temp_dir: Optional[PathType] = None,
        temp_prefix: Optional[str] = None,
        temp_suffix: Optional[str] = None,
        buffer_size: Optional[int] = None,
    ) -> None:
        """
        Initialize MaterializingStream.
        
        Args:
            stream: The readable binary stream to wrap
            length: Total number of bytes in the stream, if known
            path: File that already holds the stream contents. It is
                  used as the backing file and never deleted.
            temp_dir: Directory for temporary backing files
            temp_prefix: Prefix for temporary backing file names
            temp_suffix: Suffix for temporary backing file names
            buffer_size: Buffer size used when copying into a file
        """
        if length is not None and length < 0:
            raise ValueError("length must be non-negative")
        
        super().__init__(stream, buffer_size)
        
        self._path = Path(path) if path is not None else None
        self._file_state = FileState.EXTERNAL if path is not None else FileState.NONE
        self._length = length
        self._position = 0
        
        # Configuration
        self._temp_dir = os.fspath(temp_dir) if temp_dir is not None else None
        self._temp_prefix = temp_prefix or self.DEFAULT_TEMP_PREFIX
        self._temp_suffix = temp_suffix or self.DEFAULT_TEMP_SUFFIX
    
    @classmethod
    def get(cls, stream: BinaryIO, **options) -> Self:
        """
        Return ``stream`` itself if it is already a MaterializingStream,
        otherwise wrap it.
        """
        if isinstance(stream, cls):
            return stream
        return cls(stream, **options)
    
    @classmethod
    def from_bytes(cls, data: BytesLike, **options) -> Self:
        """Create a stream over an in-memory buffer. The length is known."""
        data = bytes(data)
        return cls(io.BytesIO(data), len(data), **options)
    
    @classmethod
    def from_path(cls, path: PathType, **options) -> Self:
        """
        Create a stream over an existing file.
        
        The file becomes the backing file and is never deleted by the
        stream.
        
        Raises:
            OSError: If the file cannot be opened or inspected
        """
        path = Path(path)
        length = path.stat().st_size
        stream = path.open("rb")
        try:
            return cls(stream, length, path=path, **options)
        except Exception:
            stream.close()
            raise
    
    @classmethod
    def from_url(cls, url: str, timeout: Optional[float] = None, **options) -> Self:
        """
        Create a stream over a network resource.
        
        ``file:`` URLs are treated like :meth:`from_path`. For HTTP
        resources a Content-Length header, when present, becomes the
        known length.
        """
        if network.is_file_url(url):
            return cls.from_path(network.file_url_to_path(url), **options)
        
        body = network.open_url(url, timeout=timeout)
        length = getattr(body, "content_length", None)
        return cls(body, length, **options)
    
    def _before_read(self, n: int) -> None:
        if self._source is None:
            if self._path is None:
                raise StreamUnavailable("End of the stream reached")
            logger.debug(f"Reopening backing file {self._path}")
            self._source = self._path.open("rb")
    
    def _after_read(self, n: int) -> None:
        if n != -1:
            self._position += n
        else:
            logger.debug(f"End of stream after {self._position} bytes, closing")
            self.close()
    
    def get_file(self) -> Path:
        """
        Return the backing file, materializing the stream if needed.
        
        Materialization copies every remaining source byte into a new
        temporary file. It is only allowed before anything has been
        read; afterwards reads are served from the file, starting at
        its first byte.
        
        Returns:
            Path of the backing file
            
        Raises:
            StreamAlreadyConsumed: If the source is gone and no file exists
            ConcurrentReadConflict: If bytes were already read without a file
            OSError: If the temporary file cannot be created or written
        """
        if self._path is None:
            if self._source is None:
                raise StreamAlreadyConsumed("Stream has already been read")
            if self._position > 0:
                raise ConcurrentReadConflict(
                    f"Stream is already being read ({self._position} bytes consumed)"
                )
            self._materialize()
        
        return self._path
    
    def get_path(self) -> Path:
        """Alias for :meth:`get_file`."""
        return self.get_file()
    
    def _materialize(self) -> None:
        fd, name = tempfile.mkstemp(
            prefix=self._temp_prefix,
            suffix=self._temp_suffix,
            dir=self._temp_dir,
        )
        path = Path(name)
        
        try:
            with os.fdopen(fd, "wb") as out:
                copied = copy(self._source, out, self._buffer_size)
        except Exception:
            self._delete_quietly(path)
            raise
        
        logger.debug(f"Materialized {copied} bytes to {path}")
        
        self._path = path
        self._file_state = FileState.TEMPORARY
        
        source = self._source
        self._source = None
        source.close()
    
    def get_length(self) -> int:
        """
        Return the total length of the stream in bytes.
        
        When the length was not known at construction this materializes
        the stream and uses the size of the backing file.
        """
        if self._length is None:
            self._length = self.get_file().stat().st_size
        return self._length
    
    def has_file(self) -> bool:
        """Check if a backing file exists, without creating one."""
        return self._path is not None
    
    def has_length(self) -> bool:
        """Check if the length is known, without materializing."""
        return self._length is not None
    
    def tell(self) -> int:
        return self._position
    
    @property
    def position(self) -> int:
        """Get the number of bytes read through this stream."""
        return self._position
    
    @property
    def file_state(self) -> FileState:
        """Get the state of the backing file."""
        return self._file_state
    
    @property
    def owned(self) -> bool:
        """Check if the backing file was created by this stream."""
        return self._file_state is FileState.TEMPORARY
    
    def close(self) -> None:
        """
        Close the stream and release its resources.
        
        Temporary backing files are deleted; caller supplied files are
        kept. Calling close more than once is a no-op.
        """
        try:
            super().close()
        finally:
            if self._path is not None:
                if self._file_state is FileState.TEMPORARY:
                    self._delete_quietly(self._path)
                else:
                    logger.debug(f"Keeping external backing file {self._path}")
                self._path = None
                self._file_state = FileState.NONE
    
    @staticmethod
    def _delete_quietly(path: Path) -> None:
        try:
            path.unlink()
            logger.debug(f"Deleted temporary file {path}")
        except OSError as e:
            logger.warning(f"Error deleting temporary file {path}: {e}")
    
    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} position={self._position} "
            f"length={self._length} file={self._path} state={self._file_state.value}>"
        )


# Factory functions for creating streams
def get_stream(
    data: Union[MaterializingStream, BytesLike, PathType, BinaryIO],
    **options,
) -> MaterializingStream:
    """
    Factory function to create a MaterializingStream from various sources.
    
    Args:
        data: An existing MaterializingStream (returned unchanged), a
              bytes-like buffer, a filesystem path, or a readable
              binary stream
        **options: Keyword options forwarded to MaterializingStream
        
    Returns:
        MaterializingStream instance
    """
    if isinstance(data, MaterializingStream):
        return data
    if isinstance(data, (bytes, bytearray, memoryview)):
        return MaterializingStream.from_bytes(data, **options)
    if isinstance(data, (str, os.PathLike)):
        return MaterializingStream.from_path(data, **options)
    return MaterializingStream(data, **options)


def from_bytes(data: BytesLike, **options) -> MaterializingStream:
    """Factory function for :meth:`MaterializingStream.from_bytes`."""
    return MaterializingStream.from_bytes(data, **options)


def from_path(path: PathType, **options) -> MaterializingStream:
    """Factory function for :meth:`MaterializingStream.from_path`."""
    return MaterializingStream.from_path(path, **options)


def from_url(url: str, timeout: Optional[float] = None, **options) -> MaterializingStream:
    """Factory function for :meth:`MaterializingStream.from_url`."""
    return MaterializingStream.from_url(url, timeout=timeout, **options)
