"""
Interactive item listing.

Shows the render surface in a read-only prompt_toolkit buffer and moves the
cursor from item to item using the render model's spans.

Keys:
    n / down     next item
    p / up       previous item
    t / enter    start or stop the item under the cursor
    g            refresh from the daemon
    a            add an item (prompts for URL, magnet link or path)
    q / Ctrl-C   quit
"""

from typing import Dict, Optional

from prompt_toolkit.application import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import BufferControl, FormattedTextControl

from tremote.commands import add_item, fetch_items, toggle_item
from tremote.core.items import Item
from tremote.core.render import RenderModel
from tremote.daemon.client import RpcClient
from tremote.exceptions import RpcError
from tremote.ui.output import format_item
from tremote.ui.prompts import PromptManager

ADD_ACTION = "add"


class ListingBrowser:
    """Keyboard-driven view over the daemon's items."""

    def __init__(
        self,
        client: RpcClient,
        model: Optional[RenderModel] = None,
        prompts: Optional[PromptManager] = None,
    ):
        self.client = client
        self.model = model or RenderModel(label=format_item)
        self.prompts = prompts or PromptManager()
        self.buffer = Buffer(read_only=True)
        self.items: Dict[int, Item] = {}
        self.status = ""

    @property
    def cursor(self) -> int:
        return self.buffer.cursor_position

    def current_item(self) -> Optional[Item]:
        item_id = self.model.item_at(self.cursor)
        if item_id is None:
            return None
        return self.items.get(item_id)

    def refresh(self) -> None:
        """Refetch items and redraw, keeping the cursor where it was."""
        try:
            items = fetch_items(self.client)
        except RpcError as e:
            self.status = f"Error: {e}"
            return

        self.items = {item.id: item for item in items}
        cursor = self.model.refresh(items, self.cursor)
        self.buffer.set_document(Document(self.model.surface, cursor), bypass_readonly=True)
        self.status = f"{len(items)} items"

    def next_item(self) -> None:
        position = self.model.forward(self.cursor)
        if position is None:
            self.status = "No next item"
            return
        self.buffer.cursor_position = position

    def previous_item(self) -> None:
        position = self.model.backward(self.cursor)
        if position is None:
            self.status = "No previous item"
            return
        self.buffer.cursor_position = position

    def toggle_current(self) -> None:
        item = self.current_item()
        if item is None:
            self.status = "No item under cursor"
            return

        try:
            method = toggle_item(self.client, item)
        except RpcError as e:
            self.status = f"Error: {e}"
            return

        if method is None:
            self.status = f"{item.name} is {item.status_label}, nothing to toggle"
            return
        self.refresh()

    def add(self, target: str) -> None:
        if not target:
            return
        try:
            added = add_item(self.client, target)
        except RpcError as e:
            self.status = f"Error: {e}"
            return
        self.refresh()
        self.status = f"Added {added.get('name', target)}"

    def build_application(self, input=None, output=None) -> Application:
        kb = KeyBindings()

        @kb.add("n")
        @kb.add("down")
        def _next(event):
            self.next_item()

        @kb.add("p")
        @kb.add("up")
        def _previous(event):
            self.previous_item()

        @kb.add("t")
        @kb.add("enter")
        def _toggle(event):
            self.toggle_current()

        @kb.add("g")
        def _refresh(event):
            self.refresh()

        @kb.add("a")
        def _add(event):
            # Prompting needs the terminal, so leave the app and come back
            event.app.exit(result=ADD_ACTION)

        @kb.add("q")
        @kb.add("c-c")
        def _quit(event):
            event.app.exit(result=None)

        body = Window(BufferControl(buffer=self.buffer), wrap_lines=False)
        status_bar = Window(
            FormattedTextControl(lambda: self.status),
            height=1,
            style="reverse",
        )
        return Application(
            layout=Layout(HSplit([body, status_bar])),
            key_bindings=kb,
            full_screen=True,
            input=input,
            output=output,
        )

    def run(self) -> None:
        """Show the listing until the user quits."""
        self.refresh()
        while True:
            action = self.build_application().run()
            if action != ADD_ACTION:
                break
            self.add(self.prompts.get_user_input("Add (URL, magnet or path): "))
