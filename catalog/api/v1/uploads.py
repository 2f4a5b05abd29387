from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel

from catalog.api.dependencies import get_client, require_session
from catalog.core.api_client import CatalogAPIClient
from catalog.core.session import SessionContext
from catalog.services import upload as upload_service

router = APIRouter(prefix="/api/v1/upload", tags=["upload"])


class DeleteImageRequest(BaseModel):
    publicId: str


@router.post("")
async def upload_image(
    file: UploadFile = File(...),
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(require_session),
):
    content = await file.read()
    url = await upload_service.upload_image(
        client, session, file.filename or "image", content, file.content_type
    )
    return {"url": url, "message": "Image uploaded successfully!"}


@router.delete("")
async def delete_image(
    data: DeleteImageRequest,
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(require_session),
):
    await upload_service.delete_image(client, session, data.publicId)
    return {"message": "Image deleted"}
