"""
UI output management with color-coded terminal output.
"""

from typing import Dict, Optional, TextIO

from tremote.core.items import Item, ItemStatus


TEXT_COLOR_MAPPING = {
    "blue": "36;1",
    "yellow": "33;1",
    "green": "32;1",
    "red": "31;1",
    "cyan": "96;1",
    "gray": "90",
}

STATUS_COLORS: Dict[ItemStatus, str] = {
    ItemStatus.STOPPED: "gray",
    ItemStatus.CHECK_WAIT: "yellow",
    ItemStatus.CHECK: "yellow",
    ItemStatus.DOWNLOAD_WAIT: "blue",
    ItemStatus.DOWNLOADING: "cyan",
    ItemStatus.SEED_WAIT: "blue",
    ItemStatus.SEEDING: "green",
}


def get_colored_text(text: str, color: str) -> str:
    """
    Get colored text.

    Raises:
        ValueError: If the specified color is not supported
    """
    if color not in TEXT_COLOR_MAPPING:
        raise ValueError(
            f"Unsupported color: {color}. Available colors: {', '.join(TEXT_COLOR_MAPPING.keys())}"
        )

    color_str = TEXT_COLOR_MAPPING[color]
    return f"\u001b[{color_str}m{text}\u001b[0m"


def format_item(item: Item) -> str:
    """One listing line for item, without color: id, status, name."""
    return f"{item.id:>4}  {item.status_label:<13}  {item.name}"


class UIManager:
    """Manages colored terminal output for tremote."""

    def __init__(self, color: bool = True):
        self.color = color

    def success(self, message: str) -> None:
        self._print_colored(message, "green")

    def error(self, message: str, file: Optional[TextIO] = None) -> None:
        self._print_colored(message, "red", file=file)

    def warning(self, message: str) -> None:
        self._print_colored(message, "yellow")

    def info(self, message: str) -> None:
        self._print_colored(message, "blue")

    def item(self, item: Item) -> None:
        """Print one listing line, colored by the item's status."""
        self._print_colored(format_item(item), STATUS_COLORS.get(item.state, "gray"))

    def _print_colored(
        self,
        text: str,
        color: str,
        end: str = "\n",
        file: Optional[TextIO] = None
    ) -> None:
        if self.color:
            try:
                text = get_colored_text(text, color)
            except ValueError:
                # Fall back to plain text if color is invalid
                pass

        print(text, end=end, file=file)
        if file:
            file.flush()
