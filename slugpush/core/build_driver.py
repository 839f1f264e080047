"""Build driver: remote buildpack execution with streamed output"""

import logging
from pathlib import Path
from typing import Optional

import aiofiles

from .event_bus import EventBus
from ..api.exceptions import BuildError
from ..clients.base import BuildService
from ..constants import LOCAL_STATE_DIR, SLUG_FILE_NAME, SLUG_SUCCESS_MARKER
from ..models import BuildConfig, EventType, Manifest

logger = logging.getLogger(__name__)


class BuildDriver:
    """Runs a build for a manifest and returns the artifact reference"""

    def __init__(self, build_service: BuildService, event_bus: Optional[EventBus] = None):
        self.build_service = build_service
        self.event_bus = event_bus or EventBus()

    @staticmethod
    def parse_slug_line(line: str) -> Optional[str]:
        """Extract the slug URL from a success marker line"""
        index = line.find(SLUG_SUCCESS_MARKER)
        if index < 0:
            return None
        return line[index + len(SLUG_SUCCESS_MARKER):].strip() or None

    async def build(self,
                    manifest: Manifest,
                    config: BuildConfig,
                    buildpack_url: Optional[str] = None) -> str:
        """
        Build the uploaded content

        Output lines are delivered as build-output-line events one at a
        time, except the success marker line.

        Args:
            manifest: Full workspace manifest
            config: Build configuration
            buildpack_url: Buildpack override

        Returns:
            Artifact reference (slug URL)

        Raises:
            BuildError: If the build exits nonzero or yields no artifact
        """
        slug_from_output = None

        stream = await self.build_service.start_build(manifest, config, buildpack_url)
        try:
            async for line in stream:
                if SLUG_SUCCESS_MARKER in line:
                    slug_from_output = self.parse_slug_line(line)
                    continue
                self.event_bus.emit(EventType.BUILD_OUTPUT_LINE, line)

            exit_status = await stream.exit_status()
            artifact_ref = stream.artifact_ref or slug_from_output
        finally:
            await stream.close()

        if exit_status != 0:
            raise self._fail(BuildError(exit_status))

        if not artifact_ref:
            raise self._fail(BuildError(exit_status, "build finished without producing a slug"))

        logger.debug(f"Build of {config.app_name} produced {artifact_ref}")

        if config.write_slug:
            await self.write_slug(manifest.base_dir, artifact_ref)

        return artifact_ref

    def _fail(self, error: BuildError) -> BuildError:
        logger.debug(str(error))
        self.event_bus.emit(EventType.DEPLOY_ERROR, str(error))
        return error

    @staticmethod
    async def write_slug(base_dir: Path, artifact_ref: str) -> Path:
        """Write the artifact reference under the local state directory"""
        state_dir = Path(base_dir) / LOCAL_STATE_DIR
        state_dir.mkdir(parents=True, exist_ok=True)
        slug_file = state_dir / SLUG_FILE_NAME

        async with aiofiles.open(slug_file, 'w', encoding='utf-8') as f:
            await f.write(artifact_ref + "\n")

        return slug_file
