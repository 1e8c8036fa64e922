"""In-memory point store with per-user locking."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping

from ..constants import POINTS_LOCK_TTL_SECONDS
from ..errors import InsufficientFundsError
from ..logs.logger import logger
from .base import normalize_user


class InMemoryPointStore:
    """Dict-backed ``PointStore``.

    Every mutation runs under the user's own ``asyncio.Lock`` so a
    read-modify-write never interleaves with another one for the same key.
    Idle locks are pruned after ``POINTS_LOCK_TTL_SECONDS``.
    """

    def __init__(self, balances: Mapping[str, int] | None = None) -> None:
        self._balances: dict[str, int] = {
            normalize_user(k): int(v) for k, v in (balances or {}).items()
        }
        self._locks: dict[str, tuple[asyncio.Lock, float]] = {}
        self._lock_ttl = POINTS_LOCK_TTL_SECONDS

    def snapshot(self) -> dict[str, int]:
        return dict(self._balances)

    def _user_lock(self, key: str) -> asyncio.Lock:
        now = time.monotonic()
        entry = self._locks.get(key)
        lock = entry[0] if entry else asyncio.Lock()
        self._locks[key] = (lock, now)
        self._prune_locks(now, keep=key)
        return lock

    def _prune_locks(self, now: float, keep: str) -> None:
        stale = [
            k
            for k, (lock, ts) in self._locks.items()
            if k != keep and not lock.locked() and now - ts > self._lock_ttl
        ]
        for k in stale:
            del self._locks[k]
        if stale:
            logger.log_event(
                "points",
                "lock_prune",
                level=logging.DEBUG,
                removed=len(stale),
                remaining=len(self._locks),
            )

    async def get_balance(self, user_id: str) -> int:
        key = normalize_user(user_id)
        async with self._user_lock(key):
            if key not in self._balances:
                await self._commit(key, 0)
                self._balances[key] = 0
            return self._balances[key]

    async def set_balance(self, user_id: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("balance must not be negative")
        key = normalize_user(user_id)
        async with self._user_lock(key):
            await self._commit(key, amount)
            self._balances[key] = amount

    async def adjust_balance(self, user_id: str, delta: int) -> int:
        key = normalize_user(user_id)
        async with self._user_lock(key):
            current = self._balances.get(key, 0)
            updated = current + delta
            if updated < 0:
                raise InsufficientFundsError(key, current, delta)
            await self._commit(key, updated)
            self._balances[key] = updated
            return updated

    async def _commit(self, key: str, balance: int) -> None:
        """Persist ``balance`` for ``key`` before it becomes visible.

        Runs inside the user lock. If it raises, the in-memory balance is
        left untouched.
        """
