"""Static credential resolver."""

from __future__ import annotations

from trellomirror.auth.base import CredentialResolver, Credentials
from trellomirror.contracts.exceptions import AuthenticationError


class StaticCredentialResolver(CredentialResolver):
    def __init__(self, *, api_key: str, token: str, api_secret: str | None = None) -> None:
        self._api_key = api_key
        self._token = token
        self._api_secret = api_secret

    async def resolve(self) -> Credentials:
        api_key = self._api_key.strip()
        token = self._token.strip()
        if not api_key or not token:
            raise AuthenticationError("static api_key and token must be non-empty")
        return Credentials(api_key=api_key, token=token, api_secret=(self._api_secret or "").strip() or None)
