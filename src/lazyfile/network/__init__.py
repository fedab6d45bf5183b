"""
Network resource access for lazyfile.

This module opens resources named by URL as readable byte streams.
"""

from typing import BinaryIO, Optional

from .http11 import HTTPBodyStream, HTTPOpener
from .utils import (
    create_ssl_context,
    file_url_to_path,
    format_host_header,
    is_file_url,
    parse_url,
)


def open_url(
    url: str,
    timeout: Optional[float] = None,
    opener: Optional[HTTPOpener] = None,
) -> BinaryIO:
    """
    Open a URL for reading.
    
    Args:
        url: A ``file``, ``http`` or ``https`` URL
        timeout: Socket timeout for HTTP resources in seconds
        opener: HTTPOpener to use instead of a default one
    
    Returns:
        Readable binary stream over the resource contents
    
    Raises:
        ValueError: If the URL scheme is not supported
        ProtocolError: If the HTTP request fails
        OSError: If the resource cannot be opened
    """
    if is_file_url(url):
        return file_url_to_path(url).open("rb")
    
    if opener is None:
        opener = HTTPOpener(timeout=timeout)
    return opener.open(url)


__all__ = [
    "HTTPBodyStream",
    "HTTPOpener",
    "open_url",
    "create_ssl_context",
    "file_url_to_path",
    "format_host_header",
    "is_file_url",
    "parse_url",
]
