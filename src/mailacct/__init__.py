# =============================================================================
# mailacct: Mail Account Credential Resolution
# =============================================================================
#
# Resolves the credentials a mail client needs before it connects to an
# IMAP, POP, SMTP or NNTP server:
#
#   - Account model with "already known" flags per field
#   - Account matching for connection reuse
#   - Conversion between accounts and mail URLs
#   - Username/login/password lookup from config, keyring or a prompt
#   - SASL OAUTHBEARER tokens from an external refresh command
#
# =============================================================================

__version__ = "0.1.0"
__app_name__ = "mailacct"

# Main entry point - this is what gets called by the 'mailacct' command
from mailacct.app import main

__all__ = ["main", "__version__", "__app_name__"]
