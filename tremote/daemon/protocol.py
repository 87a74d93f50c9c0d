"""HTTP-style framing for the daemon RPC protocol.

Request frame:
    POST /transmission/rpc HTTP/1.1\\r\\n
    X-Transmission-Session-Id: <token or empty>\\r\\n
    Content-length: <payload size in bytes>\\r\\n
    \\r\\n
    {"method": str, "arguments": dict | null, "tag": any}

Response frame:
    HTTP/1.1 <status> <reason>\\r\\n
    <headers, including Content-Length>\\r\\n
    \\r\\n
    {"result": "success" | <error message>, "arguments": dict}

A 409 response carries a fresh session token in the
X-Transmission-Session-Id header; the request must be resent with it.

All length bookkeeping is done on bytes, never on decoded characters.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from tremote.daemon.state import SessionState
from tremote.exceptions import (
    ApplicationError,
    ConflictError,
    DecodeError,
    IncompleteFrameError,
)

RPC_PATH = "/transmission/rpc"
SESSION_HEADER = "X-Transmission-Session-Id"
CONFLICT_STATUS = 409

CRLF = b"\r\n"
TERMINATOR = b"\r\n\r\n"


@dataclass(frozen=True)
class RpcRequest:
    """A single RPC call: method name plus optional arguments and tag."""
    method: str
    arguments: Optional[Dict[str, Any]] = None
    tag: Any = None

    def to_payload(self) -> bytes:
        """Serialize to the UTF-8 JSON body sent after the headers."""
        body = {
            "method": self.method,
            "arguments": self.arguments,
            "tag": self.tag,
        }
        return json.dumps(body).encode("utf-8")


@dataclass(frozen=True)
class RpcResponse:
    """Decoded daemon reply."""
    result: str
    arguments: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.result == "success"

    @classmethod
    def from_dict(cls, data: Any) -> "RpcResponse":
        if not isinstance(data, dict) or "result" not in data:
            raise DecodeError(f"Response body is not an RPC reply: {data!r}")
        return cls(result=str(data["result"]), arguments=data.get("arguments"))

    def ensure_success(self) -> "RpcResponse":
        """
        Return self if the daemon reported success.

        Raises:
            ApplicationError: With the daemon's message otherwise
        """
        if not self.ok:
            raise ApplicationError(self.result)
        return self


def build_frame(request: RpcRequest, token: str, path: str = RPC_PATH) -> bytes:
    """
    Build the complete request frame for socket transmission.

    Args:
        request: Request to send
        token: Current session token (may be empty)
        path: Resource path on the daemon

    Returns:
        Header block and payload as bytes
    """
    payload = request.to_payload()
    head = (
        f"POST {path} HTTP/1.1\r\n"
        f"{SESSION_HEADER}: {token}\r\n"
        f"Content-length: {len(payload)}\r\n"
        "\r\n"
    )
    return head.encode("latin-1") + payload


def split_frame(data: bytes) -> Optional[Tuple[List[str], bytes]]:
    """
    Split accumulated bytes into header lines and body.

    Returns:
        (header_lines, body) or None if the blank line has not arrived yet.
        header_lines includes the status/request line first.
    """
    index = data.find(TERMINATOR)
    if index < 0:
        return None
    head = data[:index].decode("latin-1")
    return head.split("\r\n"), data[index + len(TERMINATOR):]


def header_value(header_lines: List[str], name: str) -> Optional[str]:
    """Case-insensitive header lookup. Returns the stripped value or None."""
    wanted = name.lower()
    for line in header_lines[1:]:
        key, sep, value = line.partition(":")
        if sep and key.strip().lower() == wanted:
            return value.strip()
    return None


def declared_length(header_lines: List[str]) -> Optional[int]:
    value = header_value(header_lines, "Content-Length")
    if value is None:
        return None
    try:
        length = int(value)
    except ValueError:
        return None
    # negative lengths are malformed
    return length if length >= 0 else None


def frame_complete(data: bytes) -> bool:
    """
    Check whether a full response frame has been received.

    A frame without a length header is never complete; the caller keeps
    reading until the connection closes.
    """
    parts = split_frame(data)
    if parts is None:
        return False
    header_lines, body = parts
    length = declared_length(header_lines)
    if length is None:
        return False
    return len(body) >= length


def parse_status(data: bytes) -> int:
    """
    Parse the numeric status from the first response line.

    Raises:
        IncompleteFrameError: If the reply stopped before a parseable status line
        DecodeError: If there is no status line to parse
    """
    first_line = data.split(CRLF, 1)[0].decode("latin-1")
    fields = first_line.split()
    if len(fields) < 2 or not fields[0].startswith("HTTP/") or not fields[1].isdigit():
        if split_frame(data) is None:
            raise IncompleteFrameError(f"Reply ended inside the status line: {first_line!r}")
        raise DecodeError(f"Malformed status line: {first_line!r}")
    return int(fields[1])


def interpret_status(data: bytes, session: SessionState) -> int:
    """
    Check the response status before the body is looked at.

    On 409 the new session token is stored in session and ConflictError is
    raised so the caller can resend.

    Returns:
        The status code for any non-conflict response
    """
    status = parse_status(data)
    if status == CONFLICT_STATUS:
        parts = split_frame(data)
        head = parts[0] if parts is not None else data.decode("latin-1").split("\r\n")
        token = header_value(head, SESSION_HEADER) or ""
        session.update(token)
        raise ConflictError(token)
    return status


def decode_response(data: bytes) -> RpcResponse:
    """
    Decode the JSON body of a response frame.

    Raises:
        IncompleteFrameError: If the frame was cut short and did not parse
        DecodeError: If the body is not a JSON RPC reply
    """
    parts = split_frame(data)
    if parts is None:
        raise IncompleteFrameError("Connection closed before the header block ended")
    header_lines, body = parts
    length = declared_length(header_lines)
    if length is not None:
        body = body[:length]
    try:
        decoded = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        if length is None or len(body) < length:
            raise IncompleteFrameError(f"Truncated response body: {e}") from e
        raise DecodeError(f"Response body is not valid JSON: {e}") from e
    return RpcResponse.from_dict(decoded)
