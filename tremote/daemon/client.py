"""Client for the download daemon's RPC service.

This module drives one RPC call end-to-end over a plain TCP socket:
connect, send the frame, read until the frame is complete, handle the
session token handshake, close, decode.

Usage:
    client = RpcClient()
    response = client.request("torrent-get", {"fields": ["id", "name"]})
    response.ensure_success()
"""

import logging
import socket
import threading
from typing import TYPE_CHECKING, Any, Dict, Optional

from tremote.daemon.connection import DEFAULT_HOST, DEFAULT_PORT, ConnectionManager
from tremote.daemon.protocol import (
    RPC_PATH,
    RpcRequest,
    RpcResponse,
    build_frame,
    decode_response,
    frame_complete,
    interpret_status,
)
from tremote.daemon.state import SessionState
from tremote.exceptions import ConflictError, DaemonConnectionError, RpcTimeoutError

if TYPE_CHECKING:
    from tremote.core.configs import ClientConfig

logger = logging.getLogger(__name__)

RECV_SIZE = 65536


class RpcClient:
    """
    Request orchestrator for the daemon RPC service.

    Owns the session token and the connection slot, so independent clients
    never share state. Calls are serialized with a lock: only one request
    is ever in flight per client.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        path: str = RPC_PATH,
        timeout: Optional[float] = 30.0,
        session: Optional[SessionState] = None,
    ):
        """
        Initialize client.

        Args:
            host: Daemon host name
            port: Daemon RPC port
            path: RPC resource path
            timeout: Socket timeout in seconds; None waits forever
            session: Session state to use (a fresh one by default)
        """
        self.path = path
        self.timeout = timeout
        self.session = session or SessionState()
        self.connections = ConnectionManager(host, port, timeout=timeout)
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: "ClientConfig") -> "RpcClient":
        return cls(
            host=config.host,
            port=config.port,
            path=config.rpc_path,
            timeout=config.timeout,
        )

    def request(
        self,
        method: str,
        arguments: Optional[Dict[str, Any]] = None,
        tag: Any = None,
    ) -> RpcResponse:
        """
        Send one RPC request and return the decoded response.

        A 409 reply is retried exactly once with the new session token.
        The connection is closed on every path.

        Raises:
            DaemonConnectionError: If the daemon cannot be reached
            RpcTimeoutError: If the daemon stops responding mid-frame
            ConflictError: If the retry is rejected as well
            DecodeError: If the response cannot be decoded
        """
        rpc_request = RpcRequest(method=method, arguments=arguments, tag=tag)

        with self._lock:
            conn = None
            try:
                conn = self.connections.acquire()
                try:
                    data = self._exchange(conn, rpc_request)
                except ConflictError:
                    logger.info(f"Session token refreshed, retrying {method}")
                    self.connections.release(conn)
                    conn = None
                    conn = self.connections.acquire()
                    data = self._exchange(conn, rpc_request)
                return decode_response(data)
            finally:
                self.connections.release(conn)

    def close(self) -> None:
        """Drop any connection left in the slot."""
        self.connections.release(self.connections.connection)

    def _exchange(self, conn: socket.socket, rpc_request: RpcRequest) -> bytes:
        """
        Send the frame and read the reply, checking its status.

        Returns:
            Raw response bytes (possibly partial if the daemon hung up)
        """
        frame = build_frame(rpc_request, self.session.token, self.path)
        logger.debug(f"-> {rpc_request.method} ({len(frame)} bytes)")

        try:
            conn.sendall(frame)
        except socket.timeout as e:
            raise RpcTimeoutError(f"Timed out sending {rpc_request.method}") from e
        except OSError as e:
            raise DaemonConnectionError(f"Failed to send request: {e}") from e

        data = self._receive(conn)
        status = interpret_status(data, self.session)
        logger.debug(f"<- {rpc_request.method} status {status} ({len(data)} bytes)")
        return data

    def _receive(self, conn: socket.socket) -> bytes:
        """Read until the frame is complete or the connection goes away."""
        data = b""
        while not frame_complete(data):
            try:
                chunk = conn.recv(RECV_SIZE)
            except socket.timeout as e:
                raise RpcTimeoutError(
                    f"No complete response within {self.timeout}s"
                ) from e
            except OSError as e:
                if not data:
                    raise DaemonConnectionError(f"Connection lost: {e}") from e
                logger.debug(f"Connection lost mid-frame: {e}")
                break
            if not chunk:
                if not data:
                    raise DaemonConnectionError("Daemon closed the connection without replying")
                break
            data += chunk
        return data
