"""Cache store abstract base class"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..models import CacheEntry


class CacheStore(ABC):
    """Content hash -> remote reference mapping for one application

    The store is owned by the remote side; implementations only read and
    write through it and do no local locking.
    """

    def __init__(self, app_name: str):
        self.app_name = app_name

    @abstractmethod
    async def snapshot(self) -> Dict[str, CacheEntry]:
        """
        Fetch the full current mapping

        Returns:
            Copy of the mapping keyed by content hash
        """
        pass

    @abstractmethod
    async def put(self, entry: CacheEntry) -> None:
        """
        Record uploaded content

        Args:
            entry: Cache entry to store (replaces any entry with the same hash)
        """
        pass

    async def get(self, content_hash: str) -> Optional[CacheEntry]:
        """Look up a single content hash"""
        return (await self.snapshot()).get(content_hash)

    async def close(self) -> None:
        """Release resources"""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
