"""Identity provider clients: validate opaque bearer tokens."""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


class IdentityProviderClient(ABC):

    @abstractmethod
    def validate_token(self, token: str) -> bool:
        ...


class StaticTokenIdentityProviderClient(IdentityProviderClient):
    """Accepts a fixed set of tokens (local development)."""

    def __init__(self, tokens: Iterable[str] = ()):
        self._tokens = frozenset(tokens)

    def validate_token(self, token: str) -> bool:
        return bool(token) and token in self._tokens


class SupabaseIdentityProviderClient(IdentityProviderClient):
    """Validates Supabase JWTs by asking the auth server for the user."""

    def __init__(self, client):
        self._client = client

    def validate_token(self, token: str) -> bool:
        if not token:
            return False
        try:
            user_response = self._client.auth.get_user(token)
        except Exception as e:
            logger.info("Token rejected by identity provider: %s", e)
            return False
        return user_response is not None and user_response.user is not None


def bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an `Authorization: Bearer ...` header value."""
    if not authorization or not authorization.startswith("Bearer "):
        return ""
    return authorization[len("Bearer "):].strip()
