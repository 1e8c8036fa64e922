"""Point economy errors raised by the storage collaborators."""

from __future__ import annotations

from .internal import SoundPointError


class InsufficientFundsError(SoundPointError):
    """Raised when a balance adjustment would leave a negative balance.

    Args:
        user_id: Normalized user identity.
        balance: Balance at the time of the rejected adjustment.
        delta: The adjustment that was refused.
    """

    def __init__(self, user_id: str, balance: int, delta: int) -> None:
        super().__init__(
            f"insufficient points for {user_id}: balance={balance} delta={delta}",
            data={"user_id": user_id, "balance": balance, "delta": delta},
        )
        self.user_id = user_id
        self.balance = balance
        self.delta = delta


__all__ = ["InsufficientFundsError"]
