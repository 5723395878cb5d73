"""Interfaces to external collaborators used by the core."""

from .identity import IdentityProvider, StaticIdentityProvider
from .enhancement import EnhancementService, EnhancementResult

__all__ = [
    "IdentityProvider",
    "StaticIdentityProvider",
    "EnhancementService",
    "EnhancementResult",
]
