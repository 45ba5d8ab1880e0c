"""
HTTP client for the data API
"""

from typing import List, Optional

import httpx
import structlog

from dochost.core.exceptions import DirectoryUnavailable

logger = structlog.get_logger(__name__)


class ApiClient:
    """Content calls made on behalf of a resolved tenant"""

    def __init__(self, client: httpx.AsyncClient, api_key_header: str = "X-API-Key"):
        self.client = client
        self.api_key_header = api_key_header

    async def _get(self, url: str, api_key: str, **kwargs) -> httpx.Response:
        try:
            response = await self.client.get(url, headers={self.api_key_header: api_key}, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"API call {url} failed: {e}")
            raise DirectoryUnavailable("Documentation API unavailable") from e
        if response.status_code >= 500:
            logger.error(f"API call {url} returned {response.status_code}")
            raise DirectoryUnavailable("Documentation API unavailable")
        return response

    async def list_pages(self, api_key: str, category: Optional[str] = None) -> List[dict]:
        params = {"category": category} if category else None
        response = await self._get("/pages/", api_key, params=params)
        if response.status_code != 200:
            return []
        return response.json()

    async def login(self, subdomain: str, password: str) -> httpx.Response:
        """Forward a subdomain login to the issuer"""
        try:
            return await self.client.post(
                "/subdomain/login",
                json={"subdomain": subdomain, "password": password},
            )
        except httpx.HTTPError as e:
            logger.error(f"Subdomain login forward failed: {e}")
            raise DirectoryUnavailable("Login service unavailable") from e
