"""
lazyfile - Byte streams that turn into files on demand

A readable stream abstraction that stays sequential while it can and
materializes itself into a temporary file when a caller needs a path,
a length, or to read the data again.
"""

__version__ = "0.1.0"
__author__ = "Developer"
__email__ = "dev@example.com"

# Import main components for easy access
from .exceptions import (
    LazyFileError,
    StreamError,
    StreamUnavailable,
    StreamAlreadyConsumed,
    ConcurrentReadConflict,
    ProtocolError,
    IOFailure,
)
from .proxy import ProxyStream
from .streams import (
    FileState,
    MaterializingStream,
    get_stream,
    from_bytes,
    from_path,
    from_url,
)
from .utils import copy, read_stream_to_bytes

__all__ = [
    "LazyFileError",
    "StreamError",
    "StreamUnavailable",
    "StreamAlreadyConsumed",
    "ConcurrentReadConflict",
    "ProtocolError",
    "IOFailure",
    "ProxyStream",
    "FileState",
    "MaterializingStream",
    "get_stream",
    "from_bytes",
    "from_path",
    "from_url",
    "copy",
    "read_stream_to_bytes",
]
