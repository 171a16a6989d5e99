# =============================================================================
# Account <-> URL Bridge
# =============================================================================
# Converts between Account objects and Url values.
#
#   - account_from_url(): seeds an Account from a user-supplied location.
#     Only the fields present in the URL are marked as known; everything
#     else is left for the credential resolver.
#   - account_to_url(): renders an Account back to a URL for display and
#     logging. Only known fields are included.
#
# The Url returned by account_to_url() is an independent copy; changing
# the Account afterwards does not affect it.
# =============================================================================

import logging

from mailacct.core.account import Account, AccountError, AccountFlags, AccountType
from mailacct.core.url import Url

logger = logging.getLogger(__name__)


def account_from_url(url: Url, account_type: AccountType | None = None) -> Account:
    """
    Build an Account from a parsed URL.

    Args:
        url: The parsed location.
        account_type: Protocol to use. If omitted, it is taken from the URL
                      scheme, and a secure scheme also sets the SSL flag.

    Returns:
        A new Account with host set and user/password/port marked as known
        when the URL supplies them. Login is never set here.

    Raises:
        MissingHostError: If the URL has no host.
        UnsupportedSchemeError: If no account_type is given and the scheme
                                is not a mail protocol.
    """
    if not url.host:
        raise MissingHostError(f"No host in URL: {url.redacted()}")

    flags = AccountFlags.NONE
    if account_type is None:
        found = AccountType.from_scheme(url.scheme or "")
        if found is None:
            raise UnsupportedSchemeError(f"Unsupported URL scheme: {url.scheme!r}")
        account_type, secure = found
        if secure:
            flags |= AccountFlags.SSL

    account = Account(type=account_type, host=url.host, flags=flags)

    if url.user is not None:
        account.set_user(url.user)
    if url.password is not None:
        account.set_password(url.password)
    if url.port:
        account.set_port(url.port)

    logger.debug(f"Account from URL: {account!r}")
    return account


def account_to_url(account: Account) -> Url:
    """
    Render an Account as a Url.

    The scheme comes from the account type and the SSL flag. Host is always
    filled in; user, password and port only when their flags are set.
    """
    url = Url(
        scheme=account.type.scheme_for(account.ssl),
        host=account.host,
    )
    if account.has(AccountFlags.PORT):
        url.port = account.port
    if account.has(AccountFlags.USER):
        url.user = account.user
    if account.has(AccountFlags.PASS):
        url.password = account.password
    return url


# =============================================================================
# Exceptions
# =============================================================================

class MissingHostError(AccountError):
    """Raised when a URL without a host is used to build an Account."""
    pass


class UnsupportedSchemeError(AccountError):
    """Raised when a URL scheme does not name a mail protocol."""
    pass
