"""In-memory cache store"""

from typing import Dict, Optional

from .base import CacheStore
from ..models import CacheEntry


class InMemoryCacheStore(CacheStore):
    """Process-local cache store, mainly for tests and dry runs"""

    def __init__(self, app_name: str = "default", entries: Optional[Dict[str, CacheEntry]] = None):
        super().__init__(app_name)
        self._entries: Dict[str, CacheEntry] = dict(entries or {})
        self.snapshot_calls = 0
        self.put_calls = 0

    async def snapshot(self) -> Dict[str, CacheEntry]:
        self.snapshot_calls += 1
        return dict(self._entries)

    async def put(self, entry: CacheEntry) -> None:
        self.put_calls += 1
        self._entries[entry.content_hash] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, content_hash: str) -> bool:
        return content_hash in self._entries
