"""Identity lookup used to scope per-user project storage."""

from abc import ABC, abstractmethod
from typing import Optional


class IdentityProvider(ABC):
    """Source of the signed-in user's identity."""

    @abstractmethod
    async def get_user_id(self) -> Optional[str]:
        """Return the current user id, or None when nobody is signed in."""
        pass


class StaticIdentityProvider(IdentityProvider):
    """Provider returning a fixed identity."""

    def __init__(self, user_id: Optional[str] = None):
        self.user_id = user_id

    async def get_user_id(self) -> Optional[str]:
        return self.user_id
