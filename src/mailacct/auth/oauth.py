# =============================================================================
# OAUTHBEARER Token Builder
# =============================================================================
# Builds the SASL OAUTHBEARER initial response (RFC 7628) for an Account.
#
# The OAuth token comes from an external command configured per protocol
# (oauth_refresh_command), e.g. a script that refreshes the token with the
# provider and prints it. The first line of its output is the token.
#
# Wire format before encoding (\x01 is the Control-A separator):
#
#   n,a=<login>,\x01host=<host>\x01port=<port>\x01auth=Bearer <token>\x01\x01
#
# The result is base64 encoded and handed to the SASL layer as-is.
#
# Neither the token nor the assembled payload is ever logged.
# =============================================================================

import base64
import logging
import subprocess
from typing import IO, Callable, Protocol

from mailacct.auth.resolver import CredentialError, CredentialResolver
from mailacct.core.account import Account

logger = logging.getLogger(__name__)

# Control-A, the key/value separator in OAUTHBEARER messages
SEPARATOR = "\x01"


class RefreshProcess(Protocol):
    """A running refresh command. subprocess.Popen satisfies this."""

    stdout: IO[bytes] | None

    def wait(self) -> int:
        ...


def spawn_command(command: str) -> RefreshProcess:
    """
    Start a refresh command through the shell with its output piped.

    The output is read as bytes and decoded by the caller, so a command
    printing invalid UTF-8 surfaces as InvalidRefreshTokenError.

    Raises:
        OSError: If the shell cannot be started.
    """
    return subprocess.Popen(
        command,
        shell=True,
        stdout=subprocess.PIPE,
    )


def encode_oauthbearer(login: str, host: str, port: int, token: str) -> str:
    """
    Assemble and base64-encode an OAUTHBEARER initial response.

    Args:
        login: Authorization identity (the account login).
        host: Server hostname.
        port: Server port, rendered in decimal (0 if unknown).
        token: OAuth access token.

    Returns:
        Standard base64 (with padding) of the UTF-8 message. No newline.
    """
    payload = (
        f"n,a={login},{SEPARATOR}"
        f"host={host}{SEPARATOR}"
        f"port={port:d}{SEPARATOR}"
        f"auth=Bearer {token}{SEPARATOR}{SEPARATOR}"
    )
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


class OAuthBearerBuilder:
    """
    Produces OAUTHBEARER tokens for Accounts.

    Usage:
        >>> builder = OAuthBearerBuilder(resolver)
        >>> token = builder.build(account)
        >>> await client.authenticate("OAUTHBEARER", token)

    Attributes:
        resolver: Resolves the account login embedded in the token.
        spawn: Starts the refresh command. Replaceable for testing.
    """

    def __init__(
        self,
        resolver: CredentialResolver,
        spawn: Callable[[str], RefreshProcess] = spawn_command,
    ) -> None:
        self.resolver = resolver
        self.spawn = spawn

    def build(self, account: Account) -> str:
        """
        Build the encoded OAUTHBEARER initial response for account.

        Blocks until the refresh command prints its first line (or closes
        its output). There is no timeout.

        Raises:
            CredentialError: If the login cannot be resolved.
            NoRefreshCommandError: If no refresh command is configured for
                                   the account's protocol.
            SpawnFailedError: If the command could not be started.
            EmptyRefreshTokenError: If the command printed nothing.
            InvalidRefreshTokenError: If the output is not valid UTF-8.
        """
        # The token includes the login
        self.resolver.get_login(account)

        command = self.resolver.config.for_type(account.type).oauth_refresh_command
        if not command:
            logger.error(f"No OAuth refresh command defined for {account.type.config_key}")
            raise NoRefreshCommandError(
                f"No OAuth refresh command defined for {account.type.config_key}"
            )

        token = self._run_refresh_command(command)
        if not token:
            logger.error("OAuth refresh command returned empty string")
            raise EmptyRefreshTokenError("OAuth refresh command returned empty string")

        logger.debug(f"Building OAUTHBEARER token for {account.login}@{account.host}")
        return encode_oauthbearer(account.login, account.host, account.port, token)

    def _run_refresh_command(self, command: str) -> str:
        """Run the refresh command and return its first output line."""
        logger.debug("Running OAuth refresh command")
        try:
            process = self.spawn(command)
        except OSError as e:
            logger.error(f"Unable to run OAuth refresh command: {e}")
            raise SpawnFailedError(f"Unable to run OAuth refresh command: {e}") from e

        line = b""
        try:
            if process.stdout is not None:
                try:
                    line = process.stdout.readline()
                finally:
                    process.stdout.close()
        finally:
            # The exit status isn't checked; only the output matters.
            process.wait()

        try:
            return line.decode("utf-8").rstrip("\r\n")
        except UnicodeDecodeError as e:
            logger.error(f"OAuth refresh command output is not valid UTF-8: {e.reason}")
            raise InvalidRefreshTokenError(
                "OAuth refresh command output is not valid UTF-8"
            ) from e


def get_oauthbearer(
    account: Account,
    resolver: CredentialResolver,
    spawn: Callable[[str], RefreshProcess] = spawn_command,
) -> str:
    """Shortcut for OAuthBearerBuilder(resolver, spawn).build(account)."""
    return OAuthBearerBuilder(resolver, spawn).build(account)


# =============================================================================
# Exceptions
# =============================================================================

class OAuthError(CredentialError):
    """Base exception for OAUTHBEARER token construction."""
    pass


class NoRefreshCommandError(OAuthError):
    """Raised when no refresh command is configured for the protocol."""
    pass


class SpawnFailedError(OAuthError):
    """Raised when the refresh command cannot be started."""
    pass


class EmptyRefreshTokenError(OAuthError):
    """Raised when the refresh command prints no token."""
    pass


class InvalidRefreshTokenError(OAuthError):
    """Raised when the refresh command output cannot be decoded."""
    pass
