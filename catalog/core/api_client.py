import logging
from typing import Any, Optional

import httpx

from catalog.core.config import settings
from catalog.core.errors import GENERIC_ERROR_MESSAGE, RemoteError, extract_error_message

logger = logging.getLogger(__name__)


class CatalogAPIClient:
    """HTTP client for the remote product API."""

    def __init__(self, base_url: str = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = (base_url or settings.PRODUCT_API_BASE_URL).rstrip("/")
        self.transport = transport
        self.client = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=settings.REQUEST_TIMEOUT_SECONDS,
                transport=self.transport,
            )
        return self.client

    def _headers(self, token: Optional[str]) -> dict:
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def _request(
        self,
        method: str,
        path: str,
        fallback: str = GENERIC_ERROR_MESSAGE,
        token: Optional[str] = None,
        **kwargs,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            client = await self._get_client()
            logger.info(f"{method} {url}")
            response = await client.request(method, url, headers=self._headers(token), **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = self._json_or_none(e.response)
            message = extract_error_message(body, fallback)
            logger.error(f"{method} {url} failed with status {e.response.status_code}: {message}")
            raise RemoteError(message, status_code=e.response.status_code, body=body)
        except httpx.RequestError as e:
            logger.error(f"{method} {url} failed: {str(e)}")
            raise RemoteError(fallback)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.error(f"{method} {url} returned a malformed body: {response.text[:200]}")
            raise RemoteError(fallback, status_code=response.status_code)

    @staticmethod
    def _json_or_none(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    # Auth

    async def register(self, username: str, email: str, password: str) -> dict:
        logger.info(f"Registering user: {email}")
        return await self._request(
            "POST",
            "/auth/register",
            fallback="Signup failed. Please try again.",
            json={"username": username, "email": email, "password": password},
        )

    async def login(self, email: str, password: str) -> dict:
        logger.info(f"Logging in user: {email}")
        return await self._request(
            "POST",
            "/auth/login",
            fallback="Login failed. Please try again.",
            json={"email": email, "password": password},
        )

    async def logout(self, token: Optional[str] = None) -> None:
        await self._request("POST", "/auth/logout", fallback="Logout failed", token=token)

    # Products

    async def list_products(
        self,
        token: Optional[str] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
    ) -> dict:
        params = {}
        if status:
            params["status"] = status
        if category:
            params["category"] = category
        return await self._request(
            "GET", "/products", fallback="Failed to fetch products", token=token, params=params
        )

    async def get_product_by_id(self, product_id: str, token: Optional[str] = None) -> dict:
        return await self._request(
            "GET", f"/products/id/{product_id}", fallback="Failed to fetch product", token=token
        )

    async def get_product_by_slug(self, slug: str, token: Optional[str] = None) -> dict:
        return await self._request(
            "GET", f"/products/slug/{slug}", fallback="Failed to load product details", token=token
        )

    async def create_product(self, payload: dict, token: Optional[str] = None) -> dict:
        return await self._request(
            "POST", "/products", fallback="Failed to save product", token=token, json=payload
        )

    async def update_product(self, product_id: str, payload: dict, token: Optional[str] = None) -> dict:
        return await self._request(
            "PUT", f"/products/{product_id}", fallback="Failed to save product", token=token, json=payload
        )

    async def delete_product(self, product_id: str, token: Optional[str] = None) -> None:
        await self._request(
            "DELETE", f"/products/{product_id}", fallback="Failed to delete product", token=token
        )

    # Uploads

    async def upload_image(
        self,
        filename: str,
        content: bytes,
        content_type: str,
        token: Optional[str] = None,
    ) -> dict:
        logger.info(f"Uploading image {filename} ({len(content)} bytes)")
        return await self._request(
            "POST",
            "/upload",
            fallback="Failed to upload image",
            token=token,
            files={"image": (filename, content, content_type)},
        )

    async def delete_image(self, public_id: str, token: Optional[str] = None) -> None:
        await self._request(
            "DELETE", "/upload", fallback="Failed to delete image", token=token, json={"publicId": public_id}
        )

    async def close(self):
        if self.client:
            await self.client.aclose()
            self.client = None


catalog_client = CatalogAPIClient()
