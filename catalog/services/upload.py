import logging
from typing import Optional

from catalog.core.api_client import CatalogAPIClient
from catalog.core.config import settings
from catalog.core.errors import FieldValidationError, RemoteError
from catalog.core.session import SessionContext

logger = logging.getLogger(__name__)


def check_image_file(content_type: Optional[str], size: int) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise FieldValidationError("image", "Please select an image file")
    if size > settings.MAX_IMAGE_SIZE_MB * 1024 * 1024:
        raise FieldValidationError("image", f"File size must be less than {settings.MAX_IMAGE_SIZE_MB}MB")


async def upload_image(
    client: CatalogAPIClient,
    session: SessionContext,
    filename: str,
    content: bytes,
    content_type: str,
) -> str:
    check_image_file(content_type, len(content))

    data = await client.upload_image(filename, content, content_type, token=session.token)
    url = data.get("url") if isinstance(data, dict) else None
    if not url:
        logger.error(f"Upload of {filename} returned no URL: {data}")
        raise RemoteError("Failed to get image URL from response")

    logger.info(f"Image uploaded: {url}")
    return url


async def delete_image(client: CatalogAPIClient, session: SessionContext, public_id: str) -> None:
    await client.delete_image(public_id, token=session.token)
