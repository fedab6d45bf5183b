"""
HTTP/1.1 resource access for lazyfile.

This module opens an HTTP(S) resource as a readable byte stream. The
request and response are driven by h11 over a blocking socket; the
response body is handed out chunk by chunk as it arrives.
"""

import io
import logging
import socket
from typing import Callable, List, Optional, Tuple
from urllib.parse import urljoin

import h11

from ..exceptions import ProtocolError
from .utils import create_ssl_context, format_host_header, parse_url

logger = logging.getLogger(__name__)

SocketFactory = Callable[[Tuple[str, int], Optional[float]], socket.socket]

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


def _next_event(sock: socket.socket, connection: h11.Connection, chunk_size: int) -> h11.Event:
    """
    Get the next h11 event, reading from the socket as needed.
    
    Raises:
        ProtocolError: If the server violates HTTP/1.1
        OSError: If the socket fails
    """
    while True:
        try:
            event = connection.next_event()
        except h11.RemoteProtocolError as e:
            raise ProtocolError(str(e), cause=e) from e
        
        if event is h11.NEED_DATA:
            # An empty read tells h11 the peer closed the connection
            connection.receive_data(sock.recv(chunk_size))
            continue
        
        return event


class HTTPBodyStream(io.RawIOBase):
    """
    Readable stream over an HTTP response body.
    
    The socket is closed as soon as the body is exhausted or the
    stream is closed.
    """
    
    def __init__(
        self,
        sock: socket.socket,
        connection: h11.Connection,
        response: h11.Response,
        chunk_size: int,
    ) -> None:
        super().__init__()
        self._sock: Optional[socket.socket] = sock
        self._connection = connection
        self._chunk_size = chunk_size
        self._pending = b""
        self._done = False
        
        self.status_code: int = response.status_code
        self.headers: List[Tuple[bytes, bytes]] = list(response.headers)
    
    def header(self, name: bytes) -> Optional[bytes]:
        """Get the first value of a response header, or None."""
        name = name.lower()
        for key, value in self.headers:
            if key.lower() == name:
                return value
        return None
    
    @property
    def content_length(self) -> Optional[int]:
        """Get the Content-Length of the body, or None if not present."""
        value = self.header(b"content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None
    
    def readable(self) -> bool:
        return not self.closed
    
    def readinto(self, buffer) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        
        view = memoryview(buffer).cast("B")
        if not len(view):
            return 0
        
        while not self._pending and not self._done:
            event = _next_event(self._sock, self._connection, self._chunk_size)
            if isinstance(event, h11.Data):
                self._pending = bytes(event.data)
            elif isinstance(event, (h11.EndOfMessage, h11.ConnectionClosed)):
                self._done = True
                self._release()
        
        n = min(len(view), len(self._pending))
        view[:n] = self._pending[:n]
        self._pending = self._pending[n:]
        return n
    
    def _release(self) -> None:
        if self._sock is not None:
            sock = self._sock
            self._sock = None
            sock.close()
    
    def close(self) -> None:
        try:
            self._release()
        finally:
            super().close()


class HTTPOpener:
    """
    Opens HTTP(S) resources for reading.
    
    Every request uses a fresh connection with ``Connection: close``.
    Redirects are followed up to a fixed limit.
    """
    
    # Default configuration
    DEFAULT_TIMEOUT = 30.0  # 30 seconds
    DEFAULT_MAX_REDIRECTS = 5
    DEFAULT_USER_AGENT = "lazyfile/0.1.0"
    DEFAULT_CHUNK_SIZE = 65536  # 64KB chunks
    
    def __init__(
        self,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        user_agent: Optional[str] = None,
        chunk_size: Optional[int] = None,
        socket_factory: Optional[SocketFactory] = None,
    ) -> None:
        """
        Initialize HTTPOpener.
        
        Args:
            timeout: Socket timeout for connect and reads in seconds
            max_redirects: Maximum number of redirects to follow
            user_agent: Value of the User-Agent header
            chunk_size: Maximum bytes per socket read
            socket_factory: Callable ``(address, timeout) -> socket``,
                            defaults to ``socket.create_connection``
        """
        self._timeout = timeout or self.DEFAULT_TIMEOUT
        self._max_redirects = (
            max_redirects if max_redirects is not None else self.DEFAULT_MAX_REDIRECTS
        )
        self._user_agent = user_agent or self.DEFAULT_USER_AGENT
        self._chunk_size = chunk_size or self.DEFAULT_CHUNK_SIZE
        self._socket_factory = socket_factory or socket.create_connection
    
    def open(self, url: str) -> HTTPBodyStream:
        """
        Send a GET request and return the response body stream.
        
        Args:
            url: http or https URL
            
        Returns:
            Stream over the response body
            
        Raises:
            ProtocolError: On error statuses, bad redirects or protocol violations
            OSError: If the connection fails
        """
        for _ in range(self._max_redirects + 1):
            body = self._request(url)
            
            if body.status_code in REDIRECT_STATUSES:
                location = body.header(b"location")
                body.close()
                if location is None:
                    raise ProtocolError(f"Redirect {body.status_code} without Location")
                url = urljoin(url, location.decode("latin-1"))
                logger.debug(f"Following redirect {body.status_code} to {url}")
                continue
            
            if body.status_code >= 400:
                body.close()
                raise ProtocolError(f"GET {url} returned status {body.status_code}")
            
            return body
        
        raise ProtocolError(f"Too many redirects (max {self._max_redirects})")
    
    def _connect(self, scheme: str, host: str, port: int) -> socket.socket:
        sock = self._socket_factory((host, port), self._timeout)
        if scheme == "https":
            try:
                sock = create_ssl_context().wrap_socket(sock, server_hostname=host)
            except Exception:
                sock.close()
                raise
        return sock
    
    def _request(self, url: str) -> HTTPBodyStream:
        scheme, host, port, target = parse_url(url)
        if scheme not in ("http", "https"):
            raise ValueError(f"Unsupported URL scheme: {scheme!r}")
        
        sock = self._connect(scheme, host, port)
        try:
            connection = h11.Connection(h11.CLIENT)
            request = h11.Request(
                method="GET",
                target=target,
                headers=[
                    ("Host", format_host_header(host, port, scheme)),
                    ("User-Agent", self._user_agent),
                    ("Accept", "*/*"),
                    ("Connection", "close"),
                ],
            )
            sock.sendall(connection.send(request))
            sock.sendall(connection.send(h11.EndOfMessage()))
            
            # Skip informational (1xx) responses
            while True:
                event = _next_event(sock, connection, self._chunk_size)
                if isinstance(event, h11.Response):
                    break
                if isinstance(event, h11.ConnectionClosed):
                    raise ProtocolError("Connection closed by server")
        except Exception:
            sock.close()
            raise
        
        logger.debug(f"GET {url} -> {event.status_code}")
        return HTTPBodyStream(sock, connection, event, self._chunk_size)
