"""Diff engine: manifest vs. cache snapshot"""

import logging
from typing import Dict, Mapping, Optional

from ..models import CacheEntry, DiffResult, DiffStatus, Manifest

logger = logging.getLogger(__name__)


class DiffEngine:
    """Classifies manifest entries against a cache snapshot

    Identity is by content hash: any cached hash is unchanged no matter which
    path it was uploaded from. A missing hash is 'modified' when the snapshot
    knows the same path under another hash, else 'new'.
    """

    def diff(self,
             manifest: Manifest,
             snapshot: Optional[Mapping[str, CacheEntry]],
             read_cache: bool = True) -> DiffResult:
        """
        Compute the upload set

        Args:
            manifest: Workspace manifest
            snapshot: Cache contents fetched once for this pass
            read_cache: When False every entry is classified as new

        Returns:
            DiffResult
        """
        result = DiffResult(total_files=len(manifest))
        snapshot = snapshot if (read_cache and snapshot) else {}

        cached_paths: Dict[str, str] = {
            entry.path: content_hash
            for content_hash, entry in snapshot.items()
            if entry.path
        }

        for entry in manifest:
            if entry.checksum in snapshot:
                status = DiffStatus.UNCHANGED
            elif entry.path in cached_paths:
                status = DiffStatus.MODIFIED
            else:
                status = DiffStatus.NEW

            result.classifications[entry.path] = status
            if status != DiffStatus.UNCHANGED:
                result.to_upload.append(entry)

        logger.debug(
            f"Diff: {result.count(DiffStatus.UNCHANGED)} unchanged, "
            f"{result.count(DiffStatus.NEW)} new, {result.count(DiffStatus.MODIFIED)} modified"
        )
        return result
