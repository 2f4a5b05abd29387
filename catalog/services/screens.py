import logging
from typing import Optional

import nh3
from pydantic import ValidationError

from catalog.core.api_client import CatalogAPIClient
from catalog.core.errors import FormValidationError, RemoteError
from catalog.core.session import ScreenGuard, SessionContext
from catalog.schemas.product import (
    CatalogView,
    FilterCriteria,
    Product,
    ProductCard,
    ProductDetailResponse,
)
from catalog.services.catalog_filter import (
    CatalogFilterEngine,
    detail_discount_label,
    discount_badge,
    final_price,
    savings_label,
)
from catalog.services.gallery import GallerySync
from catalog.services.validation import ProductFormState

logger = logging.getLogger(__name__)


def sanitize_description(html: str) -> str:
    return nh3.clean(html or "")


class Screen:
    """Owns the state of one view and discards responses that outlive it."""

    name = "screen"

    def __init__(self, client: CatalogAPIClient, session: SessionContext):
        self.client = client
        self.session = session
        self.guard = ScreenGuard(self.name)
        self.error: Optional[str] = None
        self.error_status: Optional[int] = None
        self.loading = False

    def close(self) -> None:
        self.guard.close()


class DashboardScreen(Screen):
    name = "dashboard"

    def __init__(self, client: CatalogAPIClient, session: SessionContext, criteria: FilterCriteria = None):
        super().__init__(client, session)
        self.engine = CatalogFilterEngine()
        self.products: list[Product] = []
        self.criteria = criteria or FilterCriteria()

    async def load(self) -> bool:
        token = self.guard.begin()
        self.loading = True
        try:
            data = await self.client.list_products(token=self.session.token)
            products = [Product.model_validate(p) for p in data.get("products", [])]
        except RemoteError as e:
            if self.guard.accept(token):
                self.error_status = e.status_code
                self.error = e.message
                self.loading = False
            return False
        except (ValidationError, AttributeError, TypeError) as e:
            logger.error(f"Malformed product list: {str(e)}")
            if self.guard.accept(token):
                self.error = "Failed to fetch products"
                self.loading = False
            return False

        if not self.guard.accept(token):
            return False
        self.products = products
        self.loading = False
        logger.info(f"Dashboard loaded {len(products)} products")
        return True

    def set_criteria(self, **changes) -> None:
        self.criteria = FilterCriteria(**{**self.criteria.model_dump(), **changes})

    @property
    def view(self) -> CatalogView:
        return self.engine.apply(self.products, self.criteria)

    def cards(self) -> list[ProductCard]:
        return [ProductCard(product=p, discountBadge=discount_badge(p)) for p in self.view.visible]

    async def delete(self, product_id) -> bool:
        token = self.guard.begin()
        try:
            await self.client.delete_product(product_id, token=self.session.token)
        except RemoteError as e:
            if self.guard.accept(token):
                self.error_status = e.status_code
                self.error = e.message
            return False

        if not self.guard.accept(token):
            return False
        self.products = [p for p in self.products if str(p.id) != str(product_id)]
        logger.info(f"Deleted product {product_id}")
        return True


class ProductDetailScreen(Screen):
    name = "product-detail"

    def __init__(self, client: CatalogAPIClient, session: SessionContext, slug: str):
        super().__init__(client, session)
        self.slug = slug
        self.product: Optional[Product] = None
        self.main_image: Optional[str] = None
        self.gallery = GallerySync(on_select=self._set_main_image)

    def _set_main_image(self, url: str) -> None:
        self.main_image = url

    async def load(self) -> bool:
        token = self.guard.begin()
        self.loading = True
        try:
            data = await self.client.get_product_by_slug(self.slug, token=self.session.token)
            product = Product.model_validate(data)
        except RemoteError as e:
            if self.guard.accept(token):
                logger.warning(f"Product {self.slug} failed to load: {e.message}")
                self.error_status = e.status_code
                self.error = "Failed to load product details"
                self.loading = False
            return False
        except ValidationError as e:
            logger.error(f"Malformed product {self.slug}: {str(e)}")
            if self.guard.accept(token):
                self.error = "Failed to load product details"
                self.loading = False
            return False

        if not self.guard.accept(token):
            return False
        self.show(product)
        self.loading = False
        return True

    def show(self, product: Product) -> None:
        self.product = product
        self.main_image = product.mainImage.url if product.mainImage else None
        self.gallery.replace_items(product.gallery)
        if self.main_image:
            self.gallery.select_by_url(self.main_image)

    def view(self) -> ProductDetailResponse:
        if self.product is None:
            raise ValueError("Product not loaded")
        return ProductDetailResponse(
            product=self.product,
            mainImage=self.main_image,
            finalPrice=final_price(self.product),
            discountLabel=detail_discount_label(self.product),
            savingsLabel=savings_label(self.product),
            descriptionHtml=sanitize_description(self.product.description),
            gallery=self.gallery.state,
        )


class ProductFormScreen(Screen):
    name = "product-form"

    def __init__(self, client: CatalogAPIClient, session: SessionContext, product_id=None):
        super().__init__(client, session)
        self.product_id = product_id
        self.form = ProductFormState(is_edit=product_id is not None)
        self.field_errors: dict[str, str] = {}

    @property
    def is_edit(self) -> bool:
        return self.product_id is not None

    async def load(self) -> bool:
        if not self.is_edit:
            return True
        token = self.guard.begin()
        self.loading = True
        try:
            data = await self.client.get_product_by_id(self.product_id, token=self.session.token)
            product = Product.model_validate(data)
        except (RemoteError, ValidationError) as e:
            logger.warning(f"Product {self.product_id} failed to load for editing: {str(e)}")
            if self.guard.accept(token):
                if isinstance(e, RemoteError):
                    self.error_status = e.status_code
                self.error = "Failed to fetch product"
                self.loading = False
            return False

        if not self.guard.accept(token):
            return False
        self.form = ProductFormState.from_product(product)
        self.loading = False
        return True

    async def submit(self) -> Optional[Product]:
        self.error = None
        self.field_errors = {}
        try:
            payload = self.form.build_payload()
        except FormValidationError as e:
            self.field_errors = e.errors
            self.error = e.message
            raise

        token = self.guard.begin()
        self.loading = True
        try:
            if self.is_edit:
                data = await self.client.update_product(self.product_id, payload, token=self.session.token)
            else:
                data = await self.client.create_product(payload, token=self.session.token)
        except RemoteError as e:
            if self.guard.accept(token):
                self.error_status = e.status_code
                self.error = e.message
                self.loading = False
            raise

        if not self.guard.accept(token):
            return None
        self.loading = False
        try:
            return Product.model_validate(data)
        except ValidationError:
            logger.warning(f"Save succeeded but response was not a product: {data}")
            return None
