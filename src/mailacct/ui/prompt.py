# =============================================================================
# Prompt Service
# =============================================================================
# The credential resolver asks for missing usernames and passwords through
# a Prompter. Two implementations are provided:
#
#   - TextualPrompter: an inline Textual dialog (the default for the CLI)
#   - TerminalPrompter: plain input()/getpass() for dumb terminals
#
# Both block until the user answers. A return value of None means the user
# cancelled (Escape, Ctrl-C, end of input).
# =============================================================================

import getpass
import logging
from typing import Protocol

from textual.app import App

from mailacct.ui.screens.prompt import CredentialPromptScreen

logger = logging.getLogger(__name__)


class Prompter(Protocol):
    """Interface the credential resolver uses to ask the user."""

    def prompt_line(self, message: str, default: str = "") -> str | None:
        """Ask for a line of text, pre-filled with default."""
        ...

    def prompt_password(self, message: str) -> str | None:
        """Ask for a secret without echoing it."""
        ...


class TerminalPrompter:
    """Prompter reading from the controlling terminal."""

    def prompt_line(self, message: str, default: str = "") -> str | None:
        shown = f"{message}[{default}] " if default else message
        try:
            answer = input(shown).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return None
        return answer or default

    def prompt_password(self, message: str) -> str | None:
        try:
            return getpass.getpass(message)
        except (EOFError, KeyboardInterrupt):
            print()
            return None


class PromptApp(App[str | None]):
    """
    Minimal Textual app hosting one CredentialPromptScreen.

    The app exits with the screen's result as its return value.
    """

    def __init__(self, message: str, default: str = "", password: bool = False) -> None:
        super().__init__()
        self._prompt_screen = CredentialPromptScreen(message, default=default, password=password)

    def on_mount(self) -> None:
        self.push_screen(self._prompt_screen, callback=self._finish)

    def _finish(self, result: str | None) -> None:
        self.exit(result)


class TextualPrompter:
    """
    Prompter showing a Textual dialog inline in the terminal.

    Attributes:
        inline: Render below the cursor instead of taking over the screen.
    """

    def __init__(self, inline: bool = True) -> None:
        self.inline = inline

    def _run(self, app: PromptApp) -> str | None:
        result = app.run(inline=self.inline)
        if result is None:
            logger.debug("Prompt cancelled")
        return result

    def prompt_line(self, message: str, default: str = "") -> str | None:
        return self._run(PromptApp(message, default=default))

    def prompt_password(self, message: str) -> str | None:
        return self._run(PromptApp(message, password=True))
