"""Environment credential resolver."""

from __future__ import annotations

import os

from trellomirror.auth.base import CredentialResolver, Credentials
from trellomirror.contracts.exceptions import AuthenticationError

API_KEY_VAR = "TRELLO_API_KEY"
TOKEN_VAR = "TRELLO_TOKEN"
API_SECRET_VAR = "TRELLO_API_SECRET"


class EnvCredentialResolver(CredentialResolver):
    async def resolve(self) -> Credentials:
        api_key = (os.getenv(API_KEY_VAR) or "").strip()
        token = (os.getenv(TOKEN_VAR) or "").strip()
        if not api_key:
            raise AuthenticationError(f"{API_KEY_VAR} is not set or empty")
        if not token:
            raise AuthenticationError(f"{TOKEN_VAR} is not set or empty")
        api_secret = (os.getenv(API_SECRET_VAR) or "").strip() or None
        return Credentials(api_key=api_key, token=token, api_secret=api_secret)
