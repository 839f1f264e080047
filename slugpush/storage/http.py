"""HTTP content storage backend (build service file endpoint)"""

import logging
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional

import aiofiles
import httpx

from .base import StorageBackend
from ..api.exceptions import UploadError
from ..clients.http import create_http_client
from ..constants import DEFAULT_BUILD_URL, DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)


class HttpStorage(StorageBackend):
    """PUTs file bytes to '<endpoint>/file/<slot>'

    The service may answer with {"url": ...}; otherwise the file URL itself
    is the reference.
    """

    def __init__(self, config: Dict[str, Any] = None, client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            config: Configuration including:
                - endpoint: Build service root URL
                - api_key: Bearer token
                - user_agent: Consumer user agent
                - transport: Optional httpx transport
            client: Shared httpx.AsyncClient, left open on close()
        """
        super().__init__(config)
        self.endpoint = self.config.get('endpoint', DEFAULT_BUILD_URL).rstrip('/')
        self.client = client
        self._owns_client = client is None

    async def _connect(self) -> None:
        if self.client is None:
            self.client = create_http_client(
                self.endpoint,
                api_key=self.config.get('api_key'),
                user_agent=self.config.get('user_agent'),
                transport=self.config.get('transport'),
            )

    async def _disconnect(self) -> None:
        if self._owns_client and self.client is not None:
            await self.client.aclose()
            self.client = None

    @staticmethod
    async def _stream(local_path: Path) -> AsyncIterator[bytes]:
        async with aiofiles.open(local_path, 'rb') as f:
            while chunk := await f.read(DEFAULT_CHUNK_SIZE):
                yield chunk

    async def upload(self, local_path: Path, slot: str) -> str:
        await self.open()
        local_path = Path(local_path)
        path = f"/file/{slot}"

        try:
            size = local_path.stat().st_size
            response = await self.client.put(
                path,
                content=self._stream(local_path),
                headers={"Content-Type": "application/octet-stream",
                         "Content-Length": str(size)},
            )
        except (httpx.HTTPError, OSError) as e:
            logger.debug(f"Upload of {local_path} failed: {e}")
            raise UploadError(f"Failed to upload {local_path}: {e}", path=str(local_path)) from e

        if not response.is_success:
            logger.debug(f"Upload of {local_path} rejected: HTTP {response.status_code}")
            raise UploadError(f"Failed to upload {local_path}: HTTP {response.status_code}",
                              path=str(local_path))

        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get('url'):
            return body['url']
        return f"{self.endpoint}{path}"
