"""Main CLI entry point - one subcommand per daemon action."""

import logging
import sys
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from tremote.commands import (
    add_item,
    fetch_items,
    remove_items,
    session_stats,
    start_items,
    stop_items,
    toggle_item,
)
from tremote.core.configs import (
    CONFIG_PATH,
    ClientConfig,
    get_client_config,
    save_config,
)
from tremote.core.render import RenderModel
from tremote.daemon.client import RpcClient
from tremote.exceptions import RpcError
from tremote.ui.output import UIManager, format_item
from tremote.ui.prompts import PromptManager

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="tremote - remote control for the Transmission download daemon.",
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log RPC traffic"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ============================================================================
# Shared Setup
# ============================================================================

def _setup_client() -> RpcClient:
    """Load config and create the RPC client. Exits on error."""
    try:
        config = get_client_config()
    except ValueError as e:
        typer.echo(f"Error loading configuration: {e}", err=True)
        typer.echo("Run 'tremote settings init' to set up configuration", err=True)
        raise typer.Exit(1)
    return RpcClient.from_config(config)


def _fail(error: RpcError) -> NoReturn:
    UIManager().error(f"Error: {error}", file=sys.stderr)
    raise typer.Exit(1)


def _find_item(client: RpcClient, item_id: int):
    items = fetch_items(client, ids=[item_id])
    if not items:
        typer.echo(f"No item with id {item_id}", err=True)
        raise typer.Exit(1)
    return items[0]


# ============================================================================
# Commands
# ============================================================================

@app.command("list")
def list_items(
    plain: bool = typer.Option(False, "--plain", help="Disable colors"),
) -> None:
    """
    List the daemon's items, one per line.

    Example: tremote list
    """
    client = _setup_client()
    try:
        items = fetch_items(client)
    except RpcError as e:
        _fail(e)

    if plain:
        model = RenderModel(label=format_item)
        model.refresh(items)
        typer.echo(model.surface, nl=False)
        return

    ui = UIManager(color=sys.stdout.isatty())
    if not items:
        ui.info("No items")
        return
    for item in items:
        ui.item(item)


@app.command()
def add(
    target: Optional[str] = typer.Argument(None, help="URL, magnet link or path on the daemon host"),
) -> None:
    """
    Add an item to the daemon.

    Example: tremote add "magnet:?xt=urn:btih:..."
    """
    if not target:
        target = PromptManager().get_user_input("Add (URL, magnet or path): ")
        if not target:
            typer.echo("Nothing to add.", err=True)
            raise typer.Exit(1)

    client = _setup_client()
    try:
        added = add_item(client, target)
    except RpcError as e:
        _fail(e)

    UIManager().success(f"Added {added.get('name', target)} (id {added.get('id', '?')})")


@app.command()
def toggle(
    item_id: int = typer.Argument(..., help="Item id"),
) -> None:
    """Start a stopped item or stop a downloading/seeding one."""
    client = _setup_client()
    try:
        item = _find_item(client, item_id)
        method = toggle_item(client, item)
    except RpcError as e:
        _fail(e)

    ui = UIManager()
    if method is None:
        ui.warning(f"{item.name} is {item.status_label}, nothing to toggle")
    elif method == "torrent-start":
        ui.success(f"Started {item.name}")
    else:
        ui.success(f"Stopped {item.name}")


@app.command()
def start(item_ids: List[int] = typer.Argument(..., help="Item ids")) -> None:
    """Start (resume) items."""
    client = _setup_client()
    try:
        start_items(client, item_ids)
    except RpcError as e:
        _fail(e)
    UIManager().success(f"Started {len(item_ids)} item(s)")


@app.command()
def stop(item_ids: List[int] = typer.Argument(..., help="Item ids")) -> None:
    """Stop (pause) items."""
    client = _setup_client()
    try:
        stop_items(client, item_ids)
    except RpcError as e:
        _fail(e)
    UIManager().success(f"Stopped {len(item_ids)} item(s)")


@app.command()
def remove(
    item_ids: List[int] = typer.Argument(..., help="Item ids"),
    delete_data: bool = typer.Option(False, "--delete-data", help="Also delete downloaded files"),
) -> None:
    """Remove items from the daemon."""
    if delete_data and not PromptManager().get_simple_confirmation(
        f"Delete downloaded data for {len(item_ids)} item(s)?"
    ):
        typer.echo("Cancelled by user.", err=True)
        raise typer.Exit(1)

    client = _setup_client()
    try:
        remove_items(client, item_ids, delete_data=delete_data)
    except RpcError as e:
        _fail(e)
    UIManager().success(f"Removed {len(item_ids)} item(s)")


@app.command()
def stats() -> None:
    """Show daemon transfer statistics."""
    client = _setup_client()
    try:
        data = session_stats(client)
    except RpcError as e:
        _fail(e)

    table = Table(title="Daemon statistics")
    table.add_column("Stat", style="cyan")
    table.add_column("Value", justify="right")
    for key in ("torrentCount", "activeTorrentCount", "pausedTorrentCount",
                "downloadSpeed", "uploadSpeed"):
        if key in data:
            table.add_row(key, str(data[key]))
    console.print(table)


@app.command()
def browse() -> None:
    """
    Browse items interactively.

    Keys: n/p move between items, t toggles, g refreshes, a adds, q quits.
    """
    from tremote.ui.browser import ListingBrowser

    ListingBrowser(_setup_client()).run()


@app.command()
def settings(
    action: str = typer.Argument(..., help="Action: init or show"),
) -> None:
    """
    Manage tremote configuration.

    Actions:
        init - Interactive configuration wizard
        show - Display current configuration
    """
    if action == "show":
        try:
            config = get_client_config()
        except ValueError as e:
            typer.echo(f"Error loading configuration: {e}", err=True)
            raise typer.Exit(1)
        table = Table(title=str(CONFIG_PATH))
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        table.add_row("host", config.host)
        table.add_row("port", str(config.port))
        table.add_row("rpc_path", config.rpc_path)
        table.add_row("timeout", "none" if config.timeout is None else str(config.timeout))
        console.print(table)

    elif action == "init":
        prompts = PromptManager()
        defaults = ClientConfig()
        raw = {
            "host": prompts.get_user_input(f"Daemon host [{defaults.host}]: "),
            "port": prompts.get_user_input(f"Daemon port [{defaults.port}]: "),
            "rpc_path": prompts.get_user_input(f"RPC path [{defaults.rpc_path}]: "),
            "timeout": prompts.get_user_input(f"Timeout in seconds, 0 for none [{defaults.timeout}]: "),
        }
        try:
            config = get_client_config(raw)
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)
        path = save_config(config)
        UIManager().success(f"Config file saved at {path}")

    else:
        typer.echo(f"Unknown action: {action}", err=True)
        typer.echo("Available actions: init, show", err=True)
        raise typer.Exit(1)


def run() -> None:
    """Entry point for console script mapping."""
    app()


if __name__ == "__main__":
    run()
