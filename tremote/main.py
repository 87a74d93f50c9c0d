#!/usr/bin/env python3
"""
Main entry point for the Typer-based tremote CLI.

This delegates to the UI layer in tremote.ui.cli to keep the
console script mapping stable.
"""

from tremote.ui.cli import run as tremote


if __name__ == "__main__":
    tremote()
