"""
User prompt management for confirmations and interactions.
Simple implementation using prompt_toolkit.
"""

from prompt_toolkit import prompt
from prompt_toolkit.shortcuts import confirm


class PromptManager:
    """Manages user prompts and confirmations."""

    def get_user_input(self, message: str) -> str:
        """
        Get user input.

        Returns:
            Stripped user input, or "" on Ctrl-C / EOF
        """
        try:
            return prompt(message).strip()
        except (KeyboardInterrupt, EOFError):
            return ""

    def get_simple_confirmation(self, message: str) -> bool:
        """
        Get simple yes/no confirmation.

        Returns:
            True if confirmed, False otherwise
        """
        try:
            return confirm(message)
        except (KeyboardInterrupt, EOFError):
            return False
