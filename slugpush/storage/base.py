# slugpush/storage/base.py
"""Storage backend abstract base class"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict


class StorageBackend(ABC):
    """Content store addressed by slot

    A slot is derived from the content hash, so writing the same bytes to
    the same slot twice is harmless. upload() returns the remote reference
    the build service resolves when it assembles the application.
    """

    def __init__(self, config: Dict[str, Any] = None):
        self.config = dict(config or {})
        self._ready = False

    async def open(self) -> 'StorageBackend':
        """Connect on first use; later calls are no-ops"""
        if not self._ready:
            await self._connect()
            self._ready = True
        return self

    async def _connect(self) -> None:
        """Prepare clients or directories"""

    async def _disconnect(self) -> None:
        """Release what _connect acquired"""

    @abstractmethod
    async def upload(self, local_path: Path, slot: str) -> str:
        """
        Store one file in its slot

        Args:
            local_path: File to read
            slot: Destination slot, see utils.hash_utils.content_slot

        Returns:
            Remote reference of the stored content

        Raises:
            UploadError: If the transfer was not confirmed
        """

    async def close(self) -> None:
        if self._ready:
            await self._disconnect()
            self._ready = False

    async def __aenter__(self):
        return await self.open()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
