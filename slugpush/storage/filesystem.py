"""Filesystem storage backend implementation"""

import logging
from pathlib import Path
from typing import Any, Dict

import aiofiles

from .base import StorageBackend
from ..api.exceptions import UploadError
from ..constants import DEFAULT_CHUNK_SIZE, DEFAULT_CACHE_DIR

logger = logging.getLogger(__name__)


class FileSystemStorage(StorageBackend):
    """Stores content under a local directory, one file per slot

    Useful for air-gapped builders that read content from a shared volume.
    References are file:// URIs.
    """

    def __init__(self, config: Dict[str, Any] = None):
        """
        Args:
            config: Configuration including:
                - base_path: Root directory (default: .slugpush-cache/blobs)
        """
        super().__init__(config)
        base_path = self.config.get('base_path')
        self.base_path = Path(base_path) if base_path else Path(DEFAULT_CACHE_DIR) / "blobs"

    async def _connect(self) -> None:
        self.base_path.mkdir(parents=True, exist_ok=True)

    async def upload(self, local_path: Path, slot: str) -> str:
        """Copy a file into its slot; the slot appears only once complete"""
        await self.open()

        local_path = Path(local_path)
        target = self.base_path / slot
        partial = target.with_name(target.name + ".part")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(local_path, 'rb') as src, aiofiles.open(partial, 'wb') as dst:
                while chunk := await src.read(DEFAULT_CHUNK_SIZE):
                    await dst.write(chunk)
            partial.replace(target)
        except OSError as e:
            logger.debug(f"Storing {local_path} in {target} failed: {e}")
            partial.unlink(missing_ok=True)
            raise UploadError(f"Failed to store {local_path}: {e}", path=str(local_path)) from e

        logger.debug(f"Stored {local_path} as {slot}")
        return target.resolve().as_uri()
