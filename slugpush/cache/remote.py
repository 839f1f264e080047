"""Cache store kept by the build service"""

import logging
from typing import Dict, Optional

import httpx

from .base import CacheStore
from ..api.exceptions import PlatformError
from ..clients.http import create_http_client, decode_json, raise_for_status
from ..constants import DEFAULT_BUILD_URL
from ..models import CacheEntry

logger = logging.getLogger(__name__)


class RemoteCacheStore(CacheStore):
    """Reads and writes '<endpoint>/cache/<app>' on the build service"""

    def __init__(self,
                 app_name: str,
                 api_key: Optional[str] = None,
                 endpoint: str = DEFAULT_BUILD_URL,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 client: Optional[httpx.AsyncClient] = None):
        super().__init__(app_name)
        self._owns_client = client is None
        self.client = client or create_http_client(endpoint, api_key=api_key, transport=transport)

    async def snapshot(self) -> Dict[str, CacheEntry]:
        try:
            response = await self.client.get(f"/cache/{self.app_name}")
        except httpx.HTTPError as e:
            raise PlatformError(f"Fetching cache for {self.app_name} failed: {e}") from e

        if response.status_code == 404:
            logger.debug(f"No remote cache for {self.app_name} yet")
            return {}
        action = f"Fetching cache for {self.app_name}"
        raise_for_status(response, action)

        data = decode_json(response, action)
        try:
            return {
                content_hash: CacheEntry.from_dict({'content_hash': content_hash, **entry})
                for content_hash, entry in data.items()
            }
        except (AttributeError, KeyError, TypeError) as e:
            raise PlatformError(f"{action} returned malformed entries: {e}") from e

    async def put(self, entry: CacheEntry) -> None:
        body = {'remote_ref': entry.remote_ref}
        if entry.path:
            body['path'] = entry.path

        try:
            response = await self.client.put(
                f"/cache/{self.app_name}/{entry.content_hash}", json=body
            )
        except httpx.HTTPError as e:
            raise PlatformError(f"Writing cache entry {entry.content_hash} failed: {e}") from e
        raise_for_status(response, f"Writing cache entry {entry.content_hash}")

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()
