"""Storage collaborator contracts.

Balances are keyed by normalized user identity (trimmed, lower-cased login).
"""

from __future__ import annotations

from typing import Protocol

from ..config.model import AudioReference


def normalize_user(user_id: str) -> str:
    return user_id.strip().lstrip("@").lower()


class PointStore(Protocol):
    """Protocol for per-user point balances."""

    async def get_balance(self, user_id: str) -> int:
        """Return the balance, creating a zero record on first reference."""
        ...

    async def set_balance(self, user_id: str, amount: int) -> None:
        """Overwrite the balance."""
        ...

    async def adjust_balance(self, user_id: str, delta: int) -> int:
        """Atomically add ``delta`` and return the new balance.

        Raises ``InsufficientFundsError`` when the result would be negative.
        """
        ...


class AudioCatalog(Protocol):
    """Protocol for read-only sound lookups."""

    def get_audio_reference(self, name: str) -> AudioReference | None:
        ...
