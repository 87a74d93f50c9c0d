"""Connection slot for the daemon byte stream.

Each ConnectionManager owns one named slot. acquire() reuses the connection
in the slot if one is open; release() always closes it. RpcClient releases
after every request, so in normal operation every request opens a fresh
TCP connection.
"""

import logging
import socket
from typing import Optional

from tremote.exceptions import DaemonConnectionError

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 9091


class ConnectionManager:
    """
    Opens, reuses and tears down the TCP connection to the daemon.

    Not thread-safe; callers hold the client lock while using it.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: Optional[float] = None,
        name: str = "transmission",
    ):
        """
        Initialize the manager. No connection is opened here.

        Args:
            host: Daemon host name
            port: Daemon RPC port
            timeout: Per-operation socket timeout in seconds (None = block)
            name: Logical slot name, used in log messages
        """
        self.host = host
        self.port = port
        self.timeout = timeout
        self.name = name
        self._conn: Optional[socket.socket] = None

    @property
    def connection(self) -> Optional[socket.socket]:
        """The socket currently held in the slot, or None."""
        return self._conn

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def acquire(self) -> socket.socket:
        """
        Return the open connection, opening one if the slot is empty.

        Raises:
            DaemonConnectionError: If the daemon cannot be reached
        """
        if self._conn is not None:
            return self._conn

        logger.debug(f"[{self.name}] connecting to {self.host}:{self.port}")
        try:
            conn = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as e:
            raise DaemonConnectionError(
                f"Cannot connect to daemon at {self.host}:{self.port}: {e}"
            ) from e

        self._conn = conn
        return conn

    def release(self, conn: Optional[socket.socket]) -> None:
        """Close conn and empty the slot, whatever state the request is in."""
        self._conn = None
        if conn is None:
            return
        try:
            conn.close()
        except OSError as e:
            logger.debug(f"[{self.name}] error while closing connection: {e}")
