# =============================================================================
# Configuration Management
# =============================================================================
# Handles loading, saving, and validating mailacct configuration.
#
# XDG Base Directory Compliance (https://specifications.freedesktop.org/basedir-spec/):
#   - Config:  $XDG_CONFIG_HOME/mailacct/  (default: ~/.config/mailacct/)
#
# File layout (config.toml):
#
#   [general]
#   username = "bob"            # default user (system login name if unset)
#   interactive = true          # false: never prompt, fail instead
#
#   [imap]                      # also [pop], [smtp], [nntp]
#   user = "bob"
#   login = "bob@example.com"   # IMAP only
#   pass = "secret"
#   oauth_refresh_command = "oauth2-token --account work"
#   use_keyring = true
# =============================================================================

import getpass
import logging
import os
import tomllib  # Built into Python 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w  # For writing TOML (tomllib is read-only)

from mailacct.core.account import AccountType

logger = logging.getLogger(__name__)


# =============================================================================
# XDG Directory Management
# =============================================================================

# Application identifier used in all XDG paths
APP_NAME = "mailacct"


def get_xdg_config_home() -> Path:
    """
    Returns the XDG config directory for mailacct.

    Respects $XDG_CONFIG_HOME if set, otherwise uses ~/.config/mailacct/
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        base = Path(xdg_config)
    else:
        base = Path.home() / ".config"
    return base / APP_NAME


def system_username() -> str:
    """
    The login name of the user running this process.

    Returns an empty string when the platform cannot tell.
    """
    try:
        return getpass.getuser()
    except (OSError, KeyError) as e:
        logger.warning(f"Could not determine system username: {e}")
        return ""


# =============================================================================
# Configuration Data Structures
# =============================================================================

@dataclass
class ProtocolConfig:
    """
    Credential settings for one protocol.

    Any setting left as None falls through to the next source in the
    resolver (keyring, then an interactive prompt).

    Attributes:
        user: Default username for accounts of this protocol.
        login: Login identity sent to the server. Only read for IMAP.
        password: Password for accounts of this protocol.
        oauth_refresh_command: Shell command printing an OAuth token on
                               its first line of output.
        use_keyring: Look passwords up in (and save prompted passwords to)
                     the system keyring.
    """
    user: str | None = None
    login: str | None = None
    password: str | None = None
    oauth_refresh_command: str | None = None
    use_keyring: bool = False


@dataclass
class CredentialConfig:
    """
    Main configuration container for mailacct.

    Attributes:
        username: Fallback username when a protocol has none configured.
        interactive: Whether prompting is allowed. When False, anything
                     that would need a prompt fails immediately.
        protocols: Per-protocol settings, keyed by AccountType.

    Usage:
        >>> config = CredentialConfig.load()
        >>> config.for_type(AccountType.IMAP).user
        'bob'
    """
    username: str = field(default_factory=system_username)
    interactive: bool = True
    protocols: dict[AccountType, ProtocolConfig] = field(
        default_factory=lambda: {t: ProtocolConfig() for t in AccountType}
    )

    def for_type(self, account_type: AccountType) -> ProtocolConfig:
        """Settings for one protocol (empty settings if none were configured)."""
        return self.protocols.setdefault(account_type, ProtocolConfig())

    # -------------------------------------------------------------------------
    # File Paths
    # -------------------------------------------------------------------------

    @staticmethod
    def config_file_path() -> Path:
        """Returns the path to the main config file."""
        return get_xdg_config_home() / "config.toml"

    # -------------------------------------------------------------------------
    # Loading and Saving
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path | None = None) -> "CredentialConfig":
        """
        Load configuration from the config file.

        If the config file doesn't exist, returns default configuration.

        Args:
            path: Config file to read. Defaults to the XDG location.

        Returns:
            Loaded CredentialConfig object.

        Raises:
            ConfigError: If the config file exists but is invalid.
        """
        config_path = path or cls.config_file_path()

        if not config_path.exists():
            logger.debug(f"No config file at {config_path}, using defaults")
            return cls()

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file: {e}") from e

        logger.debug(f"Loaded config from {config_path}")
        return cls._from_dict(data)

    def save(self, path: Path | None = None) -> Path:
        """
        Save configuration to the config file.

        Creates the config directory if it doesn't exist.

        Returns:
            The path written to.
        """
        config_path = path or self.config_file_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "wb") as f:
            tomli_w.dump(self._to_dict(), f)

        return config_path

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "CredentialConfig":
        """
        Create a CredentialConfig from a dictionary (parsed TOML).
        """
        config = cls()

        general = data.get("general", {})
        if "username" in general:
            config.username = _expect_str(general["username"], "general.username")
        config.interactive = _expect_bool(general.get("interactive", True), "general.interactive")

        for account_type in AccountType:
            section = data.get(account_type.config_key, {})
            if not isinstance(section, dict):
                raise ConfigError(f"[{account_type.config_key}] must be a table")
            prefix = account_type.config_key
            config.protocols[account_type] = ProtocolConfig(
                user=_optional_str(section, "user", prefix),
                login=_optional_str(section, "login", prefix),
                password=_optional_str(section, "pass", prefix),
                oauth_refresh_command=_optional_str(section, "oauth_refresh_command", prefix),
                use_keyring=_expect_bool(
                    section.get("use_keyring", False), f"{prefix}.use_keyring"
                ),
            )

        return config

    def _to_dict(self) -> dict[str, Any]:
        """
        Convert CredentialConfig to a dictionary for TOML serialization.

        TOML has no null, so unset values are left out.
        """
        data: dict[str, Any] = {}

        data["general"] = {
            "username": self.username,
            "interactive": self.interactive,
        }

        for account_type in AccountType:
            proto = self.for_type(account_type)
            section: dict[str, Any] = {"use_keyring": proto.use_keyring}
            for key, value in (
                ("user", proto.user),
                ("login", proto.login),
                ("pass", proto.password),
                ("oauth_refresh_command", proto.oauth_refresh_command),
            ):
                if value is not None:
                    section[key] = value
            data[account_type.config_key] = section

        return data


def _expect_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{name} must be a string, got {type(value).__name__}")
    return value


def _expect_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false, got {value!r}")
    return value


def _optional_str(section: dict[str, Any], key: str, prefix: str) -> str | None:
    if key not in section:
        return None
    return _expect_str(section[key], f"{prefix}.{key}")


# =============================================================================
# Exceptions
# =============================================================================

class ConfigError(Exception):
    """Raised when there's an error loading or parsing configuration."""
    pass


# =============================================================================
# Utility Functions
# =============================================================================

def print_paths() -> None:
    """
    Print the config path for debugging.
    Useful for users wondering where their config is stored.
    """
    print(f"Config:       {get_xdg_config_home()}")
    print(f"Config file:  {CredentialConfig.config_file_path()}")
