"""
Stream utilities for lazyfile.

Small helpers for moving bytes between file-like objects. They only
rely on ``read``/``write`` so any binary stream works.
"""

from typing import BinaryIO, Iterator, List

DEFAULT_CHUNK_SIZE = 65536  # 64KB chunks


def iter_chunks(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """
    Iterate over a binary stream in chunks.
    
    Args:
        stream: Readable binary stream
        chunk_size: Maximum size of each chunk
        
    Yields:
        Non-empty chunks until the stream reports end of data
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            return
        yield chunk


def copy(source: BinaryIO, sink: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """
    Drain a source stream fully into a sink.
    
    Args:
        source: Readable binary stream
        sink: Writable binary stream
        chunk_size: Size of the intermediate buffer
        
    Returns:
        Number of bytes copied
        
    Raises:
        OSError: If reading or writing fails
    """
    total = 0
    for chunk in iter_chunks(source, chunk_size):
        sink.write(chunk)
        total += len(chunk)
    return total


def read_stream_to_bytes(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """
    Read entire stream and return as bytes.
    
    Args:
        stream: Readable binary stream
        chunk_size: Size of each read
        
    Returns:
        All bytes from the stream concatenated
    """
    chunks: List[bytes] = list(iter_chunks(stream, chunk_size))
    return b"".join(chunks)
