# =============================================================================
# mailacct Core Module
# =============================================================================
# The account model and the pure operations on it. Nothing here prompts,
# touches the keyring or runs commands.
#
#   - Account: a connection target and its credentials
#   - Url: a parsed mail URL
#   - account_from_url / account_to_url: conversion between the two
#   - accounts_match: connection reuse check
# =============================================================================

from mailacct.core.account import Account, AccountError, AccountFlags, AccountType
from mailacct.core.bridge import (
    MissingHostError,
    UnsupportedSchemeError,
    account_from_url,
    account_to_url,
)
from mailacct.core.matcher import accounts_match, default_user
from mailacct.core.url import Url, parse_url

__all__ = [
    "Account",
    "AccountError",
    "AccountFlags",
    "AccountType",
    "MissingHostError",
    "UnsupportedSchemeError",
    "account_from_url",
    "account_to_url",
    "accounts_match",
    "default_user",
    "Url",
    "parse_url",
]
