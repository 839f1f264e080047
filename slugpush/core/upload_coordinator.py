"""Upload coordinator: transfers changed content and records it in the cache"""

import asyncio
import logging
from typing import Dict, List, Optional

from .event_bus import EventBus
from ..api.exceptions import UploadError, SlugPushError
from ..cache.base import CacheStore
from ..constants import DEFAULT_UPLOAD_WORKERS
from ..models import CacheEntry, DiffResult, EventType, FileEntry, Manifest, UploadResult
from ..storage.base import StorageBackend
from ..utils.async_utils import run_bounded
from ..utils.hash_utils import content_slot

logger = logging.getLogger(__name__)


class UploadCoordinator:
    """Uploads each distinct content hash at most once per run"""

    def __init__(self,
                 storage: StorageBackend,
                 cache_store: CacheStore,
                 event_bus: Optional[EventBus] = None,
                 max_workers: int = DEFAULT_UPLOAD_WORKERS):
        """
        Initialize upload coordinator

        Args:
            storage: Destination of the file content
            cache_store: Cache updated after each confirmed transfer
            event_bus: Bus receiving uploads-start/uploads-end
            max_workers: Maximum concurrent transfers
        """
        self.storage = storage
        self.cache_store = cache_store
        self.event_bus = event_bus or EventBus()
        self.max_workers = max_workers
        self._cache_lock = asyncio.Lock()

    @staticmethod
    def group_by_content(entries: List[FileEntry]) -> Dict[str, List[FileEntry]]:
        """Group entries sharing a content hash, keeping first-seen order"""
        groups: Dict[str, List[FileEntry]] = {}
        for entry in entries:
            groups.setdefault(entry.checksum, []).append(entry)
        return groups

    async def upload(self,
                     manifest: Manifest,
                     diff: DiffResult,
                     write_cache: bool = True) -> UploadResult:
        """
        Upload the diff's new and modified content

        Nothing is emitted when there is nothing to upload.

        Args:
            manifest: Manifest the diff was computed from
            diff: Diff result
            write_cache: Record uploaded content in the cache store

        Returns:
            UploadResult mapping content hashes to remote references

        Raises:
            UploadError: If any transfer or cache write fails
        """
        result = UploadResult()
        groups = self.group_by_content(diff.to_upload)
        count = len(groups)

        if count == 0:
            return result

        self.event_bus.emit(EventType.UPLOADS_START, count)

        async def upload_one(content_hash: str) -> None:
            entry = groups[content_hash][0]
            local_path = manifest.local_path(entry)
            try:
                remote_ref = await self.storage.upload(local_path, content_slot(content_hash))
            except UploadError:
                raise
            except (OSError, SlugPushError) as e:
                raise UploadError(f"Failed to upload {entry.path}: {e}",
                                  path=entry.path, content_hash=content_hash) from e

            result.uploaded[content_hash] = remote_ref
            result.bytes_uploaded += entry.size
            logger.debug(f"Uploaded {entry.path} ({content_hash[:12]})")

            if write_cache:
                await self._record(CacheEntry(content_hash, remote_ref, entry.path))

        await run_bounded(list(groups), upload_one, self.max_workers)

        self.event_bus.emit(EventType.UPLOADS_END, count)
        return result

    async def _record(self, entry: CacheEntry) -> None:
        async with self._cache_lock:
            try:
                await self.cache_store.put(entry)
            except (OSError, SlugPushError) as e:
                raise UploadError(f"Uploaded {entry.path} but could not record it in the cache: {e}",
                                  path=entry.path, content_hash=entry.content_hash) from e
