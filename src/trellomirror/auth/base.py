"""Credential resolver interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Credentials:
    api_key: str
    token: str
    api_secret: str | None = None

    def __repr__(self) -> str:
        return "Credentials(api_key='***', token='***', api_secret=%s)" % ("'***'" if self.api_secret else None)


class CredentialResolver(ABC):
    @abstractmethod
    async def resolve(self) -> Credentials:
        """Resolve and return API credentials."""
