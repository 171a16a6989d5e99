# =============================================================================
# UI Module
# =============================================================================
# Interactive prompts used by the credential resolver.
#
# Structure:
#   - prompt.py: Prompter interface, terminal and Textual implementations
#   - screens/: Textual screens (the credential prompt dialog)
# =============================================================================

from mailacct.ui.prompt import Prompter, PromptApp, TerminalPrompter, TextualPrompter
from mailacct.ui.screens.prompt import CredentialPromptScreen

__all__ = [
    "Prompter",
    "PromptApp",
    "TerminalPrompter",
    "TextualPrompter",
    "CredentialPromptScreen",
]
