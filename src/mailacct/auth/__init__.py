# =============================================================================
# Auth Module
# =============================================================================
# Credential resolution for Accounts:
#   - CredentialResolver: username, login and password lookup
#   - OAuthBearerBuilder: SASL OAUTHBEARER tokens (RFC 7628)
# =============================================================================

from mailacct.auth.resolver import (
    CredentialResolver,
    CredentialError,
    NotInteractiveError,
    PromptFailedError,
)
from mailacct.auth.oauth import (
    OAuthBearerBuilder,
    OAuthError,
    NoRefreshCommandError,
    SpawnFailedError,
    EmptyRefreshTokenError,
    InvalidRefreshTokenError,
    encode_oauthbearer,
    get_oauthbearer,
    spawn_command,
)

__all__ = [
    # Resolver
    "CredentialResolver",
    "CredentialError",
    "NotInteractiveError",
    "PromptFailedError",
    # OAuth
    "OAuthBearerBuilder",
    "OAuthError",
    "NoRefreshCommandError",
    "SpawnFailedError",
    "EmptyRefreshTokenError",
    "InvalidRefreshTokenError",
    "encode_oauthbearer",
    "get_oauthbearer",
    "spawn_command",
]
