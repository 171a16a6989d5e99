# =============================================================================
# Account Model
# =============================================================================
# Represents one connection target: a mail store (IMAP/POP), a submission
# server (SMTP) or a news server (NNTP), plus the credentials used to log in.
#
# An Account starts out partially filled (usually from a URL) and is
# completed in place by the credential resolver. The flags say which fields
# are already authoritative; a field whose flag is clear must be resolved
# before it is used.
# =============================================================================

from dataclasses import dataclass
from enum import Enum, IntFlag


# Field limits. Longer values are truncated on assignment.
HOST_MAX = 127
USER_MAX = 127
LOGIN_MAX = 127
PASSWORD_MAX = 255


class AccountType(Enum):
    """
    The protocol an Account connects with.

    Each member carries its URL schemes and default ports as
    (plain, secure) pairs:
        - IMAP: imap/imaps, 143/993
        - POP:  pop/pops,   110/995
        - SMTP: smtp/smtps, 25/465
        - NNTP: nntp/snews, 119/563
    """
    IMAP = ("imap", "imaps", 143, 993)
    POP = ("pop", "pops", 110, 995)
    SMTP = ("smtp", "smtps", 25, 465)
    NNTP = ("nntp", "snews", 119, 563)

    def __init__(self, scheme: str, secure_scheme: str, port: int, secure_port: int) -> None:
        self.scheme = scheme
        self.secure_scheme = secure_scheme
        self.default_port = port
        self.secure_default_port = secure_port

    @property
    def config_key(self) -> str:
        """Section name used for this protocol in config.toml."""
        return self.name.lower()

    @property
    def supports_login(self) -> bool:
        """Only IMAP has a login setting separate from the username."""
        return self is AccountType.IMAP

    def scheme_for(self, ssl: bool) -> str:
        return self.secure_scheme if ssl else self.scheme

    def port_for(self, ssl: bool) -> int:
        return self.secure_default_port if ssl else self.default_port

    @classmethod
    def from_scheme(cls, scheme: str) -> tuple["AccountType", bool] | None:
        """
        Look up the protocol for a URL scheme.

        Returns:
            (account_type, is_secure), or None for an unknown scheme.
        """
        scheme = scheme.lower()
        for account_type in cls:
            if scheme == account_type.scheme:
                return account_type, False
            if scheme == account_type.secure_scheme:
                return account_type, True
        # "news" is the common alias for plain NNTP
        if scheme == "news":
            return cls.NNTP, False
        return None


class AccountFlags(IntFlag):
    """
    Markers for the Account fields that are already known.

    Usage:
        # Check a field
        if account.flags & AccountFlags.USER:
            print(account.user)

        # Force the password to be resolved again
        account.flags &= ~AccountFlags.PASS
    """
    NONE = 0
    USER = 1 << 0       # user is set
    LOGIN = 1 << 1      # login is set
    PASS = 1 << 2       # password is set
    PORT = 1 << 3       # port was given explicitly
    SSL = 1 << 4        # connect over TLS from the start


def _bounded(value: str, limit: int) -> str:
    return value[:limit]


@dataclass
class Account:
    """
    A connection target and its credentials.

    Attributes:
        type: Protocol used for this connection.
        host: Server hostname. Compared case-insensitively.
        port: Server port, or 0 when not given (the protocol default applies).
        user: Username for this account.
        login: Identity actually sent to the server. Usually the same as
               user, but IMAP can configure it separately.
        password: The password. Only meaningful while PASS is set.
        flags: Which of the fields above are already resolved.

    Example:
        >>> account = Account(AccountType.IMAP, "imap.example.com")
        >>> account.set_user("bob")
        >>> account.has(AccountFlags.USER)
        True
    """

    type: AccountType
    host: str
    port: int = 0
    user: str = ""
    login: str = ""
    password: str = ""
    flags: AccountFlags = AccountFlags.NONE

    def __post_init__(self) -> None:
        self.host = _bounded(self.host, HOST_MAX)
        self.user = _bounded(self.user, USER_MAX)
        self.login = _bounded(self.login, LOGIN_MAX)
        self.password = _bounded(self.password, PASSWORD_MAX)

    def has(self, flag: AccountFlags) -> bool:
        """True if every bit of flag is set."""
        return (self.flags & flag) == flag

    @property
    def ssl(self) -> bool:
        return self.has(AccountFlags.SSL)

    # -------------------------------------------------------------------------
    # Field setters (each marks the field as known)
    # -------------------------------------------------------------------------

    def set_host(self, host: str) -> None:
        self.host = _bounded(host, HOST_MAX)

    def set_port(self, port: int) -> None:
        self.port = port
        self.flags |= AccountFlags.PORT

    def set_user(self, user: str) -> None:
        self.user = _bounded(user, USER_MAX)
        self.flags |= AccountFlags.USER

    def set_login(self, login: str) -> None:
        self.login = _bounded(login, LOGIN_MAX)
        self.flags |= AccountFlags.LOGIN

    def set_password(self, password: str) -> None:
        self.password = _bounded(password, PASSWORD_MAX)
        self.flags |= AccountFlags.PASS

    def unset_pass(self) -> None:
        """
        Mark the password as unknown so it is resolved again on next use.

        The stored characters are left in place until they are overwritten;
        nothing should read them while PASS is clear.
        """
        self.flags &= ~AccountFlags.PASS

    @property
    def identity(self) -> str:
        """The login if resolved, else the user. Used in prompts and logs."""
        return self.login if self.has(AccountFlags.LOGIN) else self.user

    def __str__(self) -> str:
        scheme = self.type.scheme_for(self.ssl)
        if self.has(AccountFlags.USER):
            return f"{scheme}://{self.user}@{self.host}"
        return f"{scheme}://{self.host}"

    def __repr__(self) -> str:
        """Developer-friendly representation. Never includes the password."""
        return (
            f"Account(type={self.type.name}, host={self.host!r}, "
            f"port={self.port}, user={self.user!r}, login={self.login!r}, "
            f"flags={self.flags!r})"
        )


# =============================================================================
# Exceptions
# =============================================================================

class AccountError(Exception):
    """Base exception for account and credential operations."""
    pass
