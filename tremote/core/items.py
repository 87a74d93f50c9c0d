"""Daemon-tracked jobs as seen by the client."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional

from tremote.daemon.protocol import RpcResponse
from tremote.exceptions import DecodeError


class ItemStatus(IntEnum):
    """Status codes reported by the daemon for each job."""
    STOPPED = 0
    CHECK_WAIT = 1
    CHECK = 2
    DOWNLOAD_WAIT = 3
    DOWNLOADING = 4
    SEED_WAIT = 5
    SEEDING = 6

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")


@dataclass(frozen=True)
class Item:
    """Transient copy of one daemon job."""
    id: int
    name: str
    status: int

    @property
    def state(self) -> Optional[ItemStatus]:
        """The status as an ItemStatus, or None for codes we don't know."""
        try:
            return ItemStatus(self.status)
        except ValueError:
            return None

    @property
    def status_label(self) -> str:
        state = self.state
        return state.label if state is not None else f"status-{self.status}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        try:
            return cls(
                id=int(data["id"]),
                name=str(data.get("name", "")),
                status=int(data.get("status", -1)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Malformed item entry {data!r}: {e}") from e


def items_from_response(response: RpcResponse) -> List[Item]:
    """
    Extract items from a torrent-get response, keeping daemon order.

    Raises:
        DecodeError: If the response does not carry a torrents list
    """
    arguments = response.arguments or {}
    entries = arguments.get("torrents", [])
    if not isinstance(entries, list):
        raise DecodeError(f"Expected a list of torrents, got {type(entries).__name__}")
    return [Item.from_dict(entry) for entry in entries]
