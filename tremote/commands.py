#!/usr/bin/env python3
"""
Command handlers that turn user actions into daemon RPC calls.
Each handler takes an RpcClient, issues one method and checks the result.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from tremote.core.items import Item, ItemStatus, items_from_response
from tremote.daemon.client import RpcClient

logger = logging.getLogger(__name__)

ITEM_FIELDS = ["id", "name", "status"]


def fetch_items(client: RpcClient, ids: Optional[Iterable[int]] = None) -> List[Item]:
    """
    Fetch the daemon's items.

    Args:
        client: RPC client
        ids: Only fetch these items (all items when None)

    Returns:
        Items in the order the daemon reported them
    """
    arguments: Dict[str, Any] = {"fields": list(ITEM_FIELDS)}
    if ids is not None:
        arguments["ids"] = list(ids)
    response = client.request("torrent-get", arguments).ensure_success()
    return items_from_response(response)


def start_items(client: RpcClient, ids: Iterable[int]) -> None:
    """Start (resume) the given items."""
    client.request("torrent-start", {"ids": list(ids)}).ensure_success()


def stop_items(client: RpcClient, ids: Iterable[int]) -> None:
    """Stop (pause) the given items."""
    client.request("torrent-stop", {"ids": list(ids)}).ensure_success()


def toggle_item(client: RpcClient, item: Item) -> Optional[str]:
    """
    Start a stopped item, stop a downloading or seeding one.

    Items in any other state (checking, queued, unknown) are left alone.

    Returns:
        The RPC method issued, or None if nothing was done
    """
    state = item.state
    if state is ItemStatus.STOPPED:
        start_items(client, [item.id])
        return "torrent-start"
    elif state in (ItemStatus.DOWNLOADING, ItemStatus.SEEDING):
        stop_items(client, [item.id])
        return "torrent-stop"
    else:
        logger.debug(f"Not toggling item {item.id} in state {item.status_label}")
        return None


def add_item(client: RpcClient, target: str) -> Dict[str, Any]:
    """
    Add a new item from a URL, magnet link or path on the daemon host.

    Returns:
        The daemon's description of the added (or already present) item
    """
    response = client.request("torrent-add", {"filename": target}).ensure_success()
    arguments = response.arguments or {}
    return arguments.get("torrent-added") or arguments.get("torrent-duplicate") or {}


def remove_items(client: RpcClient, ids: Iterable[int], delete_data: bool = False) -> None:
    """Remove items from the daemon, optionally deleting downloaded data."""
    client.request(
        "torrent-remove",
        {"ids": list(ids), "delete-local-data": delete_data},
    ).ensure_success()


def session_stats(client: RpcClient) -> Dict[str, Any]:
    """Fetch the daemon's transfer statistics."""
    response = client.request("session-stats").ensure_success()
    return response.arguments or {}
