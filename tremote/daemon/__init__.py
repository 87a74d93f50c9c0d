"""RPC transport for the download daemon.

Architecture:
- protocol: Frame building, completeness test, status and body decoding
- SessionState: Session token negotiated through 409 replies
- ConnectionManager: Single-slot TCP connection to the daemon
- RpcClient: Drives one request end-to-end, retrying once on conflict
"""

from tremote.daemon.state import SessionState
from tremote.daemon.connection import ConnectionManager
from tremote.daemon.client import RpcClient
from tremote.daemon.protocol import (
    RpcRequest,
    RpcResponse,
    build_frame,
    frame_complete,
    decode_response,
)

__all__ = [
    "SessionState",
    "ConnectionManager",
    "RpcClient",
    "RpcRequest",
    "RpcResponse",
    "build_frame",
    "frame_complete",
    "decode_response",
]
