# =============================================================================
# Credential Prompt Screen
# =============================================================================
# A modal screen asking for a single credential: a username (plain input,
# pre-filled with a default) or a password (masked input).
#
# The entered value is returned to the caller; None means the user
# cancelled.
# =============================================================================

from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import ModalScreen
from textual.widgets import Static, Input, Button
from textual.containers import Vertical, Horizontal


class CredentialPromptScreen(ModalScreen[str | None]):
    """
    Modal screen for credential input.

    Returns:
        The entered string, or None if cancelled.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("enter", "submit", "Submit", show=False),
    ]

    CSS = """
    CredentialPromptScreen {
        align: center middle;
    }

    #prompt-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #prompt-message {
        margin-bottom: 1;
    }

    #prompt-input {
        margin-bottom: 1;
    }

    #prompt-buttons {
        align: center middle;
        height: auto;
    }

    #prompt-buttons Button {
        margin: 0 1;
    }
    """

    def __init__(
        self,
        message: str,
        default: str = "",
        password: bool = False,
    ) -> None:
        """
        Initialize the prompt screen.

        Args:
            message: Question shown above the input (e.g., "Username at host: ").
            default: Initial value of the input. Ignored for passwords.
            password: Mask the input and refuse an empty answer.
        """
        super().__init__()
        self._message = message
        self._default = "" if password else default
        self._password = password

    def compose(self) -> ComposeResult:
        """Compose the prompt dialog."""
        with Vertical(id="prompt-dialog"):
            yield Static(self._message, id="prompt-message")
            yield Input(
                value=self._default,
                placeholder="Password" if self._password else "Username",
                password=self._password,
                id="prompt-input",
            )
            with Horizontal(id="prompt-buttons"):
                yield Button("Submit", id="submit-btn", variant="primary")
                yield Button("Cancel", id="cancel-btn")

    def on_mount(self) -> None:
        """Focus the input when mounted."""
        self.query_one("#prompt-input", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button presses."""
        if event.button.id == "submit-btn":
            self.action_submit()
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in the input field."""
        self.action_submit()

    def action_submit(self) -> None:
        """Submit the entered value."""
        value = self.query_one("#prompt-input", Input).value
        if not self._password:
            self.dismiss(value.strip())
        elif value:
            self.dismiss(value)
        else:
            self.notify("Password cannot be empty", severity="warning")

    def action_cancel(self) -> None:
        """Cancel and return None."""
        self.dismiss(None)
