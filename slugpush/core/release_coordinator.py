"""Release coordinator"""

import logging
from typing import Optional

from .event_bus import EventBus
from ..api.exceptions import ReleaseError, SlugPushError
from ..clients.base import PlatformClient
from ..models import EventType, ReleaseInfo

logger = logging.getLogger(__name__)


class ReleaseCoordinator:
    """Points an application at a built artifact"""

    def __init__(self, platform: PlatformClient, event_bus: Optional[EventBus] = None):
        self.platform = platform
        self.event_bus = event_bus or EventBus()

    async def release(self,
                      app_name: str,
                      artifact_ref: str,
                      description: Optional[str] = None,
                      procfile_ref: Optional[str] = None) -> ReleaseInfo:
        """
        Release artifact_ref to app_name

        Emits release-start with the application name and release-end with
        the new release version.

        Raises:
            ReleaseError: Carrying artifact_ref, if the platform rejects the release
        """
        self.event_bus.emit(EventType.RELEASE_START, app_name)

        try:
            info = await self.platform.release_to_app(app_name, artifact_ref, description, procfile_ref)
            if not info.web_url:
                app = await self.platform.get_app(app_name)
                web_url = app.get("web_url") if isinstance(app, dict) else None
                info = ReleaseInfo(version=info.version, web_url=web_url)
        except SlugPushError as e:
            raise ReleaseError(f"Release to {app_name} failed: {e}", artifact_ref=artifact_ref) from e

        logger.debug(f"Released {artifact_ref} to {app_name} as {info.version}")
        self.event_bus.emit(EventType.RELEASE_END, info.version)
        return info
