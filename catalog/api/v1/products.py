import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import ValidationError

from catalog.api.dependencies import get_client, require_session
from catalog.core.api_client import CatalogAPIClient
from catalog.core.session import SessionContext
from catalog.schemas.product import (
    CATEGORY_OPTIONS,
    DashboardResponse,
    FilterCriteria,
    GallerySelectByIndex,
    GallerySelectByUrl,
    Product,
    ProductDetailResponse,
    ProductFormInput,
)
from catalog.services.screens import DashboardScreen, ProductDetailScreen, ProductFormScreen
from catalog.services.validation import ProductFormState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["products"])

GALLERY_SESSION_KEY = "gallery"
# Only the most recently viewed products keep a saved gallery selection
GALLERY_SESSION_LIMIT = 5


def _raise_screen_error(screen, default_status: int):
    code = screen.error_status
    if code is None or code < 400:
        code = default_status
    raise HTTPException(status_code=code, detail=screen.error)


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    search: str = "",
    status_filter: Optional[str] = Query(default=None, alias="status"),
    category: Optional[str] = None,
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(require_session),
):
    try:
        criteria = FilterCriteria(searchTerm=search, status=status_filter, category=category)
    except ValidationError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown status: {status_filter}")
    screen = DashboardScreen(client, session, criteria)
    await screen.load()
    view = screen.view
    return DashboardResponse(
        products=screen.cards(),
        stats=view.stats,
        categories=view.categories,
        criteria=screen.criteria,
        error=screen.error,
    )


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: str,
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(require_session),
):
    screen = DashboardScreen(client, session)
    if not await screen.delete(product_id):
        _raise_screen_error(screen, status.HTTP_502_BAD_GATEWAY)
    return {"message": "Product deleted"}


async def _load_detail(request: Request, slug: str, client: CatalogAPIClient, session: SessionContext) -> ProductDetailScreen:
    screen = ProductDetailScreen(client, session, slug)
    if not await screen.load():
        _raise_screen_error(screen, status.HTTP_502_BAD_GATEWAY)

    saved = request.session.get(GALLERY_SESSION_KEY, {}).get(slug)
    if saved:
        screen.gallery.restore(saved["selectedIndex"], saved["displayedUrl"])
        screen.main_image = saved.get("mainImage", screen.main_image)
    return screen


def _save_detail(request: Request, screen: ProductDetailScreen) -> ProductDetailResponse:
    galleries = dict(request.session.get(GALLERY_SESSION_KEY, {}))
    galleries.pop(screen.slug, None)
    galleries[screen.slug] = {
        "selectedIndex": screen.gallery.selected_index,
        "displayedUrl": screen.gallery.displayed_url,
        "mainImage": screen.main_image,
    }
    for slug in list(galleries)[:-GALLERY_SESSION_LIMIT]:
        del galleries[slug]
    request.session[GALLERY_SESSION_KEY] = galleries
    return screen.view()


@router.get("/products/slug/{slug}", response_model=ProductDetailResponse)
async def product_detail(
    slug: str,
    request: Request,
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(require_session),
):
    screen = await _load_detail(request, slug, client, session)
    return screen.view()


@router.post("/products/slug/{slug}/gallery/next", response_model=ProductDetailResponse)
async def gallery_next(
    slug: str,
    request: Request,
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(require_session),
):
    screen = await _load_detail(request, slug, client, session)
    screen.gallery.next()
    return _save_detail(request, screen)


@router.post("/products/slug/{slug}/gallery/previous", response_model=ProductDetailResponse)
async def gallery_previous(
    slug: str,
    request: Request,
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(require_session),
):
    screen = await _load_detail(request, slug, client, session)
    screen.gallery.previous()
    return _save_detail(request, screen)


@router.post("/products/slug/{slug}/gallery/select", response_model=ProductDetailResponse)
async def gallery_select(
    slug: str,
    data: GallerySelectByIndex,
    request: Request,
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(require_session),
):
    screen = await _load_detail(request, slug, client, session)
    try:
        screen.gallery.select_by_index(data.index)
    except IndexError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _save_detail(request, screen)


@router.post("/products/slug/{slug}/gallery/select-url", response_model=ProductDetailResponse)
async def gallery_select_url(
    slug: str,
    data: GallerySelectByUrl,
    request: Request,
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(require_session),
):
    screen = await _load_detail(request, slug, client, session)
    screen.gallery.select_by_url(data.url)
    screen.main_image = data.url
    return _save_detail(request, screen)


@router.get("/products/form")
async def new_product_form(session: SessionContext = Depends(require_session)):
    form = ProductFormState()
    return {"values": form.values, "isEdit": False, "categories": CATEGORY_OPTIONS}


@router.get("/products/id/{product_id}/form")
async def product_form(
    product_id: str,
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(require_session),
):
    screen = ProductFormScreen(client, session, product_id)
    if not await screen.load():
        _raise_screen_error(screen, status.HTTP_502_BAD_GATEWAY)
    return {"values": screen.form.values, "isEdit": True, "categories": CATEGORY_OPTIONS}


@router.post("/products", response_model=Optional[Product], status_code=status.HTTP_201_CREATED)
async def create_product(
    values: ProductFormInput,
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(require_session),
):
    screen = ProductFormScreen(client, session)
    screen.form.values = values
    product = await screen.submit()
    logger.info(f"Product created: {values.productUrl}")
    return product


@router.put("/products/{product_id}", response_model=Optional[Product])
async def update_product(
    product_id: str,
    values: ProductFormInput,
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(require_session),
):
    screen = ProductFormScreen(client, session, product_id)
    screen.form.values = values
    return await screen.submit()
