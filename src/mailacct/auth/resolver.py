# =============================================================================
# Credential Resolver
# =============================================================================
# Fills in the credentials an Account still lacks, just before connecting.
#
# Each field is looked up in order until one source answers:
#
#   user:     already known -> [proto] user -> prompt (default: username)
#   login:    already known -> [imap] login -> resolved user
#   password: already known -> [proto] pass -> keyring -> masked prompt
#
# When prompting is disabled (config.interactive = false, or no prompter),
# a field that would need a prompt fails immediately instead of blocking.
#
# Once a field's flag is set the resolver never looks at it again, so the
# calls are cheap to repeat. After the server rejects a password, call
# unset_pass() (or forget_pass() to also drop the keyring entry) so the
# next connection attempt asks again.
# =============================================================================

import logging
from typing import TYPE_CHECKING

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from mailacct.core.account import Account, AccountError, AccountFlags

if TYPE_CHECKING:
    from mailacct.config import CredentialConfig, ProtocolConfig
    from mailacct.ui.prompt import Prompter

# Set up logging for this module
logger = logging.getLogger(__name__)


def keyring_service(account: Account) -> str:
    """
    Service name used for keyring password storage.

    We use a consistent naming scheme so passwords can be managed via the
    keyring CLI if needed:
        keyring get mailacct:imap bob@imap.example.com
    """
    return f"mailacct:{account.type.scheme}"


def keyring_username(account: Account) -> str:
    return f"{account.identity}@{account.host}"


class CredentialResolver:
    """
    Resolves usernames, logins and passwords for Accounts.

    Usage:
        >>> resolver = CredentialResolver(config, TerminalPrompter())
        >>> resolver.get_login(account)
        >>> resolver.get_pass(account)
        >>> client.login(account.login, account.password)

    Attributes:
        config: Credential configuration (per-protocol settings).
        prompter: Used to ask the user, or None to never prompt.
    """

    def __init__(self, config: "CredentialConfig", prompter: "Prompter | None" = None) -> None:
        self.config = config
        self.prompter = prompter

    @property
    def interactive(self) -> bool:
        """Whether missing credentials may be asked for."""
        return self.config.interactive and self.prompter is not None

    def _settings(self, account: Account) -> "ProtocolConfig":
        return self.config.for_type(account.type)

    # =========================================================================
    # Username and Login
    # =========================================================================

    def get_user(self, account: Account) -> None:
        """
        Make sure account.user is set.

        Raises:
            NotInteractiveError: If a prompt is needed but not allowed.
            PromptFailedError: If the user cancelled the prompt.
        """
        if account.has(AccountFlags.USER):
            return

        configured = self._settings(account).user
        if configured is not None:
            logger.debug(f"Using configured user for {account.host}")
            account.set_user(configured)
            return

        if not self.interactive:
            raise NotInteractiveError(f"No username for {account.host} and prompting is disabled")

        answer = self.prompter.prompt_line(
            f"Username at {account.host}: ",
            default=self.config.username,
        )
        if answer is None:
            raise PromptFailedError(f"No username entered for {account.host}")

        account.set_user(answer)

    def get_login(self, account: Account) -> None:
        """
        Make sure account.login is set.

        IMAP accounts use the configured login if there is one; everything
        else logs in as the (resolved) user.

        Raises:
            NotInteractiveError, PromptFailedError: From get_user().
        """
        if account.has(AccountFlags.LOGIN):
            return

        if account.type.supports_login:
            configured = self._settings(account).login
            if configured is not None:
                account.set_login(configured)
                return

        try:
            self.get_user(account)
        except CredentialError:
            logger.debug("Couldn't get user info")
            raise

        account.set_login(account.user)

    # =========================================================================
    # Password
    # =========================================================================

    def get_pass(self, account: Account) -> None:
        """
        Make sure account.password is set.

        Raises:
            NotInteractiveError: If a prompt is needed but not allowed.
            PromptFailedError: If the prompt was cancelled or left empty.
        """
        if account.has(AccountFlags.PASS):
            return

        settings = self._settings(account)
        if settings.password is not None:
            logger.debug(f"Using configured password for {account.host}")
            account.set_password(settings.password)
            return

        if settings.use_keyring:
            stored = self._keyring_lookup(account)
            if stored:
                logger.debug(f"Using keyring password for {account.host}")
                account.set_password(stored)
                return

        if not self.interactive:
            raise NotInteractiveError(f"No password for {account.host} and prompting is disabled")

        answer = self.prompter.prompt_password(
            f"Password for {account.identity}@{account.host}: "
        )
        if not answer:
            raise PromptFailedError(f"No password entered for {account.host}")

        account.set_password(answer)

        if settings.use_keyring:
            self._keyring_store(account)

    def unset_pass(self, account: Account) -> None:
        """Clear the PASS flag so the password is resolved again."""
        account.unset_pass()

    def forget_pass(self, account: Account) -> None:
        """
        Clear the password and remove it from the keyring.

        Use this instead of unset_pass() when the server rejected the
        password, so the stale keyring copy isn't offered again.
        """
        account.unset_pass()
        if not self._settings(account).use_keyring or not account.identity:
            return
        try:
            keyring.delete_password(keyring_service(account), keyring_username(account))
            logger.info(f"Removed stored password for {account.identity}@{account.host}")
        except PasswordDeleteError:
            logger.debug(f"No stored password for {account.identity}@{account.host}")
        except KeyringError as e:
            logger.warning(f"Could not remove password from keyring: {e}")

    # -------------------------------------------------------------------------
    # Keyring helpers
    # -------------------------------------------------------------------------

    def _keyring_lookup(self, account: Account) -> str | None:
        if not account.identity:
            return None
        try:
            return keyring.get_password(keyring_service(account), keyring_username(account))
        except KeyringError as e:
            logger.warning(f"Keyring lookup failed: {e}")
            return None

    def _keyring_store(self, account: Account) -> None:
        if not account.identity:
            return
        try:
            keyring.set_password(
                keyring_service(account),
                keyring_username(account),
                account.password,
            )
        except KeyringError as e:
            logger.warning(f"Could not save password to keyring: {e}")


# =============================================================================
# Exceptions
# =============================================================================

class CredentialError(AccountError):
    """Base exception for credential resolution."""
    pass


class NotInteractiveError(CredentialError):
    """Raised when a prompt is required but prompting is disabled."""
    pass


class PromptFailedError(CredentialError):
    """Raised when the user cancels a prompt or gives an empty password."""
    pass
