# =============================================================================
# UI Screens
# =============================================================================
# Textual screens shown while resolving credentials.
#   - CredentialPromptScreen: asks for a username or password
# =============================================================================

from mailacct.ui.screens.prompt import CredentialPromptScreen

__all__ = ["CredentialPromptScreen"]
