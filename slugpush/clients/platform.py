"""Platform API client over HTTP"""

import logging
from typing import Dict, Optional, Any

import httpx

from .base import PlatformClient
from .http import create_http_client, decode_json, raise_for_status
from ..api.exceptions import PlatformError
from ..constants import DEFAULT_PLATFORM_URL
from ..models import ReleaseInfo, UserInfo

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "application/vnd.heroku+json; version=3"


class HttpPlatformClient(PlatformClient):
    """Heroku-style platform API client"""

    def __init__(self,
                 api_key: str,
                 base_url: str = DEFAULT_PLATFORM_URL,
                 user_agent: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url
        self._owns_client = client is None
        self.client = client or create_http_client(
            base_url,
            api_key=api_key,
            user_agent=user_agent,
            headers={"Accept": ACCEPT_HEADER},
            transport=transport,
        )

    async def _request(self, method: str, url: str, action: str, **kwargs) -> Any:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise PlatformError(f"{action} failed: {e}") from e

        raise_for_status(response, action)
        return decode_json(response, action)

    async def get_user_info(self) -> UserInfo:
        data = await self._request("GET", "/account", "User lookup")
        email = data.get("email") if isinstance(data, dict) else None
        if not email:
            raise PlatformError("User lookup returned no email for this API key")
        return UserInfo(email=email)

    async def get_app(self, app_name: str) -> Dict[str, Any]:
        return await self._request("GET", f"/apps/{app_name}", f"App lookup for {app_name}")

    async def release_to_app(self,
                             app_name: str,
                             artifact_ref: str,
                             description: Optional[str] = None,
                             procfile_ref: Optional[str] = None) -> ReleaseInfo:
        payload = {"slug_url": artifact_ref}
        if description:
            payload["description"] = description
        if procfile_ref:
            payload["procfile_url"] = procfile_ref

        data = await self._request(
            "POST", f"/apps/{app_name}/releases", f"Release to {app_name}", json=payload
        )
        logger.debug(f"Release response for {app_name}: {data}")
        if not isinstance(data, dict):
            raise PlatformError(f"Release to {app_name} returned an unexpected response")

        version = data.get("release") or data.get("version")
        if version is None:
            raise PlatformError(f"Release to {app_name} returned no version")
        if isinstance(version, int) or str(version).isdigit():
            version = f"v{version}"

        web_url = data.get("web_url")
        if web_url is None and isinstance(data.get("app"), dict):
            web_url = data["app"].get("web_url")

        return ReleaseInfo(version=str(version), web_url=web_url)

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()
