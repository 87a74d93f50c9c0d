"""Session token state shared by every request of one client.

The daemon hands out a session token through a 409 reply and expects it on
every later request. The token lives here, owned by a single RpcClient, and
is only written by the status interpreter in protocol.py.

Thread safety: not thread-safe on its own. RpcClient serializes requests,
so at most one writer is active at a time.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Current session token; empty until the first conflict reply."""
    token: str = ""

    def update(self, token: str) -> None:
        """Replace the token (last writer wins)."""
        logger.debug(f"Session token updated: {self.token!r} -> {token!r}")
        self.token = token
