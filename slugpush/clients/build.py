"""Build service client over HTTP

The build endpoint answers with a chunked text stream of build output. The
manifest id header identifies the build so its exit status can be fetched
once the stream is exhausted.
"""

import logging
from typing import AsyncIterator, Optional

import httpx

from .base import BuildService, BuildStream
from .http import create_http_client, raise_for_status
from ..api.exceptions import PlatformError
from ..constants import (
    DEFAULT_BUILD_URL,
    DEFAULT_BUILD_TIMEOUT,
    HEADER_SLUG_URL,
    HEADER_MANIFEST_ID,
    HEADER_EXIT_STATUS,
)
from ..models import BuildConfig, Manifest

logger = logging.getLogger(__name__)


class HttpBuildStream(BuildStream):
    """Streaming response of a build request"""

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response):
        self.client = client
        self.response = response
        self.manifest_id = response.headers.get(HEADER_MANIFEST_ID)
        self._artifact_ref = response.headers.get(HEADER_SLUG_URL)

    @property
    def artifact_ref(self) -> Optional[str]:
        return self._artifact_ref

    async def lines(self) -> AsyncIterator[str]:
        try:
            async for line in self.response.aiter_lines():
                yield line.rstrip("\r\n")
        except httpx.HTTPError as e:
            raise PlatformError(f"Reading build output failed: {e}") from e

    @staticmethod
    def _parse_status(value: str) -> int:
        try:
            return int(value.strip())
        except ValueError:
            raise PlatformError(f"Build service returned an invalid exit status: {value[:50]!r}") from None

    async def exit_status(self) -> int:
        header = self.response.headers.get(HEADER_EXIT_STATUS)
        if header is not None:
            return self._parse_status(header)

        if not self.manifest_id:
            return 0

        try:
            response = await self.client.get(f"/exit/{self.manifest_id}")
        except httpx.HTTPError as e:
            raise PlatformError(f"Fetching build exit status failed: {e}") from e
        raise_for_status(response, "Fetching build exit status")
        return self._parse_status(response.text)

    async def close(self) -> None:
        await self.response.aclose()


class HttpBuildService(BuildService):
    """Client of an Anvil-style build service"""

    def __init__(self,
                 api_key: str,
                 base_url: str = DEFAULT_BUILD_URL,
                 user_agent: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url
        self._owns_client = client is None
        self.client = client or create_http_client(
            base_url,
            api_key=api_key,
            user_agent=user_agent,
            timeout=DEFAULT_BUILD_TIMEOUT,
            transport=transport,
        )

    async def start_build(self,
                          manifest: Manifest,
                          config: BuildConfig,
                          buildpack_url: Optional[str] = None) -> HttpBuildStream:
        payload = {
            "manifest": manifest.to_build_dict(),
            "env": dict(config.env),
            "app": config.app_name,
            "user": config.app_user,
            "cache": {"read": config.read_cache, "write": config.write_cache},
            "keepalive": 1,
        }
        buildpack = buildpack_url or config.buildpack_url
        if buildpack:
            payload["buildpack"] = buildpack

        request = self.client.build_request(
            "POST",
            "/manifest/build",
            json=payload,
            headers={"User-Agent": config.consumer_user_agent},
        )
        try:
            response = await self.client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise PlatformError(f"Starting build failed: {e}") from e

        if response.is_error:
            await response.aread()
            await response.aclose()
            raise_for_status(response, "Starting build")

        logger.debug(f"Build started for {config.app_name} "
                     f"(manifest id {response.headers.get(HEADER_MANIFEST_ID)})")
        return HttpBuildStream(self.client, response)

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()
