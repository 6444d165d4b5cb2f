"""Credential resolution."""

from trellomirror.auth.base import CredentialResolver, Credentials
from trellomirror.auth.env import EnvCredentialResolver
from trellomirror.auth.factory import create_credential_resolver
from trellomirror.auth.static import StaticCredentialResolver

__all__ = [
    "CredentialResolver",
    "Credentials",
    "EnvCredentialResolver",
    "StaticCredentialResolver",
    "create_credential_resolver",
]
