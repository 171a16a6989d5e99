# =============================================================================
# mailacct Entry Point for `python -m mailacct`
# =============================================================================
# This module allows mailacct to be run as a Python module:
#
#   python -m mailacct imaps://bob@imap.example.com
#
# This is equivalent to running the 'mailacct' command after installation.
# =============================================================================

import sys

from mailacct.app import main

if __name__ == "__main__":
    sys.exit(main())
