"""Interfaces of the remote platform collaborators"""

from abc import ABC, abstractmethod
from typing import AsyncIterator, Dict, Optional, Any

from ..models import BuildConfig, Manifest, ReleaseInfo, UserInfo


class PlatformClient(ABC):
    """Platform API: account lookup and release registration"""

    @abstractmethod
    async def get_user_info(self) -> UserInfo:
        """Get the account the API key belongs to"""
        pass

    @abstractmethod
    async def get_app(self, app_name: str) -> Dict[str, Any]:
        """Get application details (at least 'name' and 'web_url')"""
        pass

    @abstractmethod
    async def release_to_app(self,
                             app_name: str,
                             artifact_ref: str,
                             description: Optional[str] = None,
                             procfile_ref: Optional[str] = None) -> ReleaseInfo:
        """
        Point the application at a built artifact

        Args:
            app_name: Target application
            artifact_ref: Slug URL returned by the build, or an uploaded bundle
            description: Human readable release description
            procfile_ref: Uploaded Procfile overriding the one in the artifact

        Returns:
            ReleaseInfo of the new release
        """
        pass

    async def close(self) -> None:
        """Release network resources"""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class BuildStream(ABC):
    """Output of a running remote build"""

    @property
    def artifact_ref(self) -> Optional[str]:
        """Artifact reference reported by the service, if any"""
        return None

    @abstractmethod
    def lines(self) -> AsyncIterator[str]:
        """Iterate build output lines; blocks until the next line arrives"""
        pass

    @abstractmethod
    async def exit_status(self) -> int:
        """Exit status of the build, available once output is exhausted"""
        pass

    async def close(self) -> None:
        """Abort or release the underlying connection"""
        pass

    def __aiter__(self) -> AsyncIterator[str]:
        return self.lines().__aiter__()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class BuildService(ABC):
    """Remote buildpack execution"""

    @abstractmethod
    async def start_build(self,
                          manifest: Manifest,
                          config: BuildConfig,
                          buildpack_url: Optional[str] = None) -> BuildStream:
        """
        Submit a build of the uploaded content described by manifest

        Args:
            manifest: Full workspace manifest
            config: Build configuration
            buildpack_url: Buildpack override (auto-detected when None)

        Returns:
            BuildStream delivering the build output
        """
        pass

    async def close(self) -> None:
        """Release network resources"""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
