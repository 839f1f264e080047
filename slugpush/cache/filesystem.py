"""JSON file cache store"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

import aiofiles

from .base import CacheStore
from ..constants import DEFAULT_CACHE_DIR
from ..models import CacheEntry

logger = logging.getLogger(__name__)


class FileCacheStore(CacheStore):
    """Cache store persisted as '<cache_dir>/<app>.json'"""

    def __init__(self, app_name: str, cache_dir: Optional[Path] = None):
        super().__init__(app_name)
        self.cache_dir = Path(cache_dir) if cache_dir else Path(DEFAULT_CACHE_DIR)
        self.cache_file = self.cache_dir / f"{app_name}.json"
        self._write_lock = asyncio.Lock()

    async def _load(self) -> Dict[str, CacheEntry]:
        if not self.cache_file.exists():
            return {}

        try:
            async with aiofiles.open(self.cache_file, 'r', encoding='utf-8') as f:
                content = await f.read()
        except OSError as e:
            logger.warning(f"Ignoring unreadable cache file {self.cache_file}: {e}")
            return {}

        try:
            data = json.loads(content) if content.strip() else {}
            return {
                content_hash: CacheEntry.from_dict({'content_hash': content_hash, **entry})
                for content_hash, entry in data.get('entries', {}).items()
            }
        except (ValueError, AttributeError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring corrupt cache file {self.cache_file}: {e}")
            return {}

    async def _save(self, entries: Dict[str, CacheEntry]) -> None:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        data = {
            'app': self.app_name,
            'entries': {
                h: {k: v for k, v in e.to_dict().items() if k != 'content_hash'}
                for h, e in sorted(entries.items())
            }
        }

        temp_file = self.cache_file.with_suffix('.json.tmp')
        async with aiofiles.open(temp_file, 'w', encoding='utf-8') as f:
            await f.write(json.dumps(data, indent=2, ensure_ascii=False))
        os.replace(temp_file, self.cache_file)

    async def snapshot(self) -> Dict[str, CacheEntry]:
        return await self._load()

    async def put(self, entry: CacheEntry) -> None:
        """Add entry; OSError from writing the file propagates"""
        async with self._write_lock:
            entries = await self._load()
            entries[entry.content_hash] = entry
            await self._save(entries)
