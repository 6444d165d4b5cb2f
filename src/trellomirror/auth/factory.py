"""Credential resolver factory."""

from __future__ import annotations

from trellomirror.auth.base import CredentialResolver
from trellomirror.auth.env import EnvCredentialResolver
from trellomirror.auth.static import StaticCredentialResolver
from trellomirror.contracts.config import MirrorConfig
from trellomirror.contracts.exceptions import ConfigError

RESOLVERS: dict[str, type[CredentialResolver]] = {
    "env": EnvCredentialResolver,
    "static": StaticCredentialResolver,
}


def create_credential_resolver(config: MirrorConfig) -> CredentialResolver:
    auth_mode = config.auth
    if auth_mode not in RESOLVERS:
        raise ConfigError(f"Unknown auth mode: {auth_mode}")

    if auth_mode == "env":
        return EnvCredentialResolver()
    return StaticCredentialResolver(
        api_key=config.api_key or "",
        token=config.token or "",
        api_secret=config.api_secret,
    )
