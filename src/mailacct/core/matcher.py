# =============================================================================
# Account Matching
# =============================================================================
# Decides whether two Accounts point at the same server with the same
# identity, so an open connection can be reused instead of opening another.
# =============================================================================

from typing import TYPE_CHECKING

from mailacct.core.account import Account, AccountFlags, AccountType

if TYPE_CHECKING:
    from mailacct.config import CredentialConfig


def default_user(account_type: AccountType, config: "CredentialConfig") -> str:
    """
    The username an account of this type gets when none is given.

    This is the configured user for the protocol if there is one, otherwise
    the general username (the system login name unless overridden).
    """
    configured = config.for_type(account_type).user
    if configured is not None:
        return configured
    return config.username


def accounts_match(a1: Account, a2: Account, config: "CredentialConfig") -> bool:
    """
    Check whether two accounts denote the same connection.

    Type, host (case-insensitive) and port must agree. Then the users are
    compared: two explicit users directly, one explicit user against the
    default user, and no explicit users at all always match.

    News servers are strict: an account with an explicit user never matches
    one without, whatever the default user is.

    Args:
        a1: First account.
        a2: Second account.
        config: Credential configuration supplying the default user.

    Returns:
        True if a connection for one account can serve the other.
    """
    if a1.type != a2.type:
        return False
    if a1.host.lower() != a2.host.lower():
        return False
    if a1.port != a2.port:
        return False

    has1 = a1.has(AccountFlags.USER)
    has2 = a2.has(AccountFlags.USER)

    if has1 and has2:
        return a1.user == a2.user
    if a1.type is AccountType.NNTP:
        return not (has1 or has2)

    user = default_user(a1.type, config)
    if has1:
        return a1.user == user
    if has2:
        return a2.user == user
    return True
