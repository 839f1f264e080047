"""Manifest builder: workspace scan and content fingerprinting"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from .event_bus import EventBus
from ..api.exceptions import ScanError
from ..constants import DEFAULT_HASH_ALGORITHM
from ..models import FileEntry, Manifest, EventType
from ..utils.glob_utils import GlobScanner, GlobPatternError
from ..utils.hash_utils import hash_file

logger = logging.getLogger(__name__)


class ManifestBuilder:
    """Builds a content-addressed Manifest from a directory"""

    def __init__(self,
                 event_bus: Optional[EventBus] = None,
                 algorithm: str = DEFAULT_HASH_ALGORITHM):
        """Initialize manifest builder

        Args:
            event_bus: Bus receiving the diff-start event
            algorithm: Content hash algorithm
        """
        self.event_bus = event_bus or EventBus()
        self.algorithm = algorithm

    def create_scanner(self, includes: Optional[str], excludes: Optional[str]) -> GlobScanner:
        """Compile include/exclude patterns, reporting bad ones as ScanError"""
        try:
            return GlobScanner(includes, excludes)
        except GlobPatternError as e:
            raise ScanError(str(e)) from e

    async def build(self,
                    base_dir: Path,
                    includes: Optional[str] = "**",
                    excludes: Optional[str] = "") -> Manifest:
        """Scan base_dir and fingerprint every selected regular file

        Emits diff-start with the number of files before hashing begins.

        Args:
            base_dir: Directory to deploy
            includes: Comma-separated include globs
            excludes: Comma-separated exclude globs

        Returns:
            Manifest of the selected files

        Raises:
            ScanError: If base_dir is unreadable or a pattern is malformed
        """
        base_dir = Path(base_dir)
        scanner = self.create_scanner(includes, excludes)

        if not base_dir.is_dir():
            raise ScanError(f"Base directory not found: {base_dir}", path=str(base_dir))

        loop = asyncio.get_running_loop()
        try:
            paths = await loop.run_in_executor(None, scanner.scan, base_dir)
        except OSError as e:
            raise ScanError(f"Cannot read {e.filename or base_dir}: {e.strerror or e}",
                            path=str(e.filename or base_dir)) from e

        logger.debug(f"Scanned {base_dir}: {len(paths)} files selected")
        self.event_bus.emit(EventType.DIFF_START, len(paths))

        entries = []
        for relative_path in paths:
            file_path = base_dir / relative_path
            try:
                size = file_path.stat().st_size
                checksum = await hash_file(file_path, self.algorithm)
            except OSError as e:
                raise ScanError(f"Cannot read {relative_path}: {e.strerror or e}",
                                path=relative_path) from e
            entries.append(FileEntry(path=relative_path, checksum=checksum, size=size))

        return Manifest(base_dir=base_dir, entries=tuple(entries))
