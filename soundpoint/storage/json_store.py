"""JSON file persistence for point balances."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from ..errors import ConfigurationError
from ..logs.logger import logger
from .memory import InMemoryPointStore


class JsonPointStore(InMemoryPointStore):
    """``InMemoryPointStore`` that rewrites a JSON file before a change is applied.

    The write runs in the default executor; a single persistence lock keeps
    snapshots from different users landing out of order.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__(self._read(self.path))
        self._persist_lock = asyncio.Lock()

    @staticmethod
    def _read(path: Path) -> dict[str, int]:
        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.log_event(
                "points", "load_failed", level=logging.ERROR, path=str(path), error=str(e)
            )
            raise ConfigurationError(f"Points file unreadable: {path}: {e}") from e
        balances = data.get("balances", {}) if isinstance(data, dict) else {}
        return {
            str(k): int(v)
            for k, v in balances.items()
            if isinstance(v, int) and not isinstance(v, bool)
        }

    async def _commit(self, key: str, balance: int) -> None:
        loop = asyncio.get_running_loop()
        async with self._persist_lock:
            # Snapshot inside the lock: files land in commit order.
            snapshot = self.snapshot()
            snapshot[key] = balance
            await loop.run_in_executor(None, self._atomic_write, snapshot)
        logger.log_event(
            "points", "saved", level=logging.DEBUG, user=key, path=str(self.path)
        )

    def _atomic_write(self, balances: dict[str, int]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
                encoding="utf-8",
            ) as tmp:
                temp_path = tmp.name
                json.dump({"balances": balances}, tmp, indent=2, sort_keys=True)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(temp_path, self.path)
        except OSError:
            if temp_path and os.path.exists(temp_path):
                os.unlink(temp_path)
            raise
