"""
Custom exceptions for lazyfile.

This module defines the exception hierarchy used throughout
the library for error handling and debugging.
"""

from typing import Optional


# Filesystem and socket failures are never wrapped; they surface as the
# OSError subclass the underlying call raised.
IOFailure = OSError


class LazyFileError(Exception):
    """Base exception for all lazyfile errors."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class StreamError(LazyFileError):
    """Raised when there's an error with stream operations."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Stream error: {message}", cause)


class StreamUnavailable(StreamError):
    """Raised when a read needs a source but none can be opened."""


class StreamAlreadyConsumed(StreamError):
    """Raised when materialization is requested after the source is gone."""


class ConcurrentReadConflict(StreamError):
    """Raised when materialization is requested after reading has started."""


class ProtocolError(LazyFileError):
    """Raised when there's an error with HTTP protocol handling."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Protocol error: {message}", cause)
