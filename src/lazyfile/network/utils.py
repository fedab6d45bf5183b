"""
Network utilities for lazyfile.

This module provides utility functions for URL handling and
SSL context setup used when opening network resources.
"""

import ssl
from pathlib import Path
from typing import Tuple
from urllib.parse import urlparse
from urllib.request import url2pathname


def parse_url(url: str) -> Tuple[str, str, int, str]:
    """
    Parse URL into components.
    
    Args:
        url: URL string to parse
    
    Returns:
        Tuple of (scheme, host, port, target) where target is the
        path plus query string sent in the request line
    
    Raises:
        ValueError: If URL is malformed
    """
    parsed = urlparse(url)
    
    # Extract scheme
    scheme = (parsed.scheme or "http").lower()
    
    # Extract host
    host = parsed.hostname or ""
    if not host:
        raise ValueError("No hostname found in URL")
    
    # Extract port
    port = parsed.port
    if port is None:
        port = 443 if scheme == "https" else 80
    
    # Extract target, fragments never go on the wire
    target = parsed.path or "/"
    if parsed.query:
        target += "?" + parsed.query
    
    return scheme, host, port, target


def format_host_header(host: str, port: int, scheme: str) -> str:
    """
    Format host header for HTTP requests.
    
    Args:
        host: Hostname
        port: Port number
        scheme: URL scheme
    
    Returns:
        Formatted host header string
    """
    if ":" in host:
        host = f"[{host}]"
    if (scheme == "https" and port == 443) or (scheme == "http" and port == 80):
        return host
    return f"{host}:{port}"


def is_file_url(url: str) -> bool:
    """Check if a URL uses the ``file`` scheme."""
    return urlparse(url).scheme.lower() == "file"


def file_url_to_path(url: str) -> Path:
    """
    Convert a ``file:`` URL to a local path.
    
    Raises:
        ValueError: If the URL is not a local file URL
    """
    parsed = urlparse(url)
    if parsed.scheme.lower() != "file":
        raise ValueError(f"Not a file URL: {url}")
    if parsed.netloc not in ("", "localhost"):
        raise ValueError(f"Remote file URLs are not supported: {url}")
    return Path(url2pathname(parsed.path))


def create_ssl_context() -> ssl.SSLContext:
    """
    Create an SSL context for HTTPS downloads.
    
    Returns:
        Configured SSL context with certificate and hostname checks
    """
    context = ssl.create_default_context()
    
    context.options |= ssl.OP_NO_COMPRESSION
    
    # Disable legacy protocols
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    
    return context
