"""
Tests for ui/output.py - colored and plain message output.
"""

import io
import unittest
from unittest.mock import patch

from tremote.core.items import Item
from tremote.ui.output import UIManager, format_item, get_colored_text


class TestUIManager(unittest.TestCase):

    def test_info_is_colored(self):
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            UIManager().info("No items")
        self.assertEqual(out.getvalue(), get_colored_text("No items", "blue") + "\n")

    def test_color_disabled_prints_plain_text(self):
        item = Item(id=7, name="delta", status=6)
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            UIManager(color=False).item(item)
        self.assertEqual(out.getvalue(), format_item(item) + "\n")

    def test_error_goes_to_given_stream(self):
        stream = io.StringIO()
        UIManager(color=False).error("Error: boom", file=stream)
        self.assertEqual(stream.getvalue(), "Error: boom\n")

    def test_unknown_color_rejected(self):
        with self.assertRaises(ValueError):
            get_colored_text("x", "magenta")


if __name__ == "__main__":
    unittest.main()
