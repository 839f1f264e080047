"""Workspace bundler: filtered workspace packed as a temporary .tar.gz"""

import asyncio
import logging
import os
import tarfile
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List, Optional, Tuple

from ..api.exceptions import ScanError
from ..constants import APP_NAME, BUNDLE_SUFFIX
from ..utils.glob_utils import GlobScanner, GlobPatternError

logger = logging.getLogger(__name__)


class WorkspaceBundler:
    """Packs the files selected by include/exclude globs into a gzip tarball"""

    def __init__(self, includes: Optional[str] = "**", excludes: Optional[str] = ""):
        try:
            self.scanner = GlobScanner(includes, excludes)
        except GlobPatternError as e:
            raise ScanError(str(e)) from e

    def _write(self, base_dir: Path, output_path: Path) -> int:
        output = output_path.resolve()
        paths: List[str] = [
            p for p in self.scanner.scan(base_dir)
            if (base_dir / p).resolve() != output
        ]

        with tarfile.open(name=str(output_path), mode="w:gz") as tar:
            for relative_path in paths:
                tar.add(str(base_dir / relative_path), arcname=relative_path, recursive=False)

        return len(paths)

    async def create(self, base_dir: Path, output_path: Path) -> int:
        """
        Write the bundle

        The output file itself is never included, even when it lives under
        base_dir.

        Args:
            base_dir: Workspace root
            output_path: Archive to create

        Returns:
            Number of files packed

        Raises:
            ScanError: If the workspace cannot be read
        """
        base_dir = Path(base_dir)
        output_path = Path(output_path)
        if not base_dir.is_dir():
            raise ScanError(f"Base directory not found: {base_dir}", path=str(base_dir))

        loop = asyncio.get_running_loop()
        try:
            count = await loop.run_in_executor(None, self._write, base_dir, output_path)
        except OSError as e:
            raise ScanError(f"Bundling {base_dir} failed: {e}", path=str(base_dir)) from e

        logger.debug(f"Bundled {count} files from {base_dir} into {output_path}")
        return count

    @asynccontextmanager
    async def bundle(self,
                     base_dir: Path,
                     temp_dir: Optional[Path] = None) -> AsyncIterator[Tuple[Path, int]]:
        """
        Create a temporary bundle that is removed on exit

        Usage:
            async with bundler.bundle(workspace) as (archive, count):
                ...

        Yields:
            (archive path, number of files packed)
        """
        fd, name = tempfile.mkstemp(prefix=f"{APP_NAME}-", suffix=BUNDLE_SUFFIX,
                                    dir=str(temp_dir) if temp_dir else None)
        os.close(fd)
        archive = Path(name)

        try:
            count = await self.create(base_dir, archive)
            yield archive, count
        finally:
            if archive.exists():
                archive.unlink()
                logger.debug(f"Removed temporary bundle {archive}")
