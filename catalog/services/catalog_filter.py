import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from catalog.schemas.product import CatalogStats, CatalogView, FilterCriteria, Product, ProductStatus

logger = logging.getLogger(__name__)


def matches(product: Product, criteria: FilterCriteria) -> bool:
    term = criteria.searchTerm.lower()
    if term and term not in product.productName.lower():
        return False
    if criteria.status is not None and product.status != criteria.status:
        return False
    if criteria.category is not None and product.category != criteria.category:
        return False
    return True


def compute_stats(products: Iterable[Product]) -> CatalogStats:
    stats = CatalogStats()
    for product in products:
        stats.total += 1
        if product.status == ProductStatus.ACTIVE:
            stats.active += 1
        elif product.status == ProductStatus.DRAFT:
            stats.draft += 1
        elif product.status == ProductStatus.INACTIVE:
            stats.inactive += 1
    return stats


def category_options(products: Iterable[Product]) -> list[str]:
    """Distinct categories in first-seen order."""
    seen = {}
    for product in products:
        if product.category and product.category not in seen:
            seen[product.category] = True
    return list(seen)


class CatalogFilterEngine:
    """Derives the dashboard list and counters from the last fetched collection."""

    def apply(self, products: list[Product], criteria: Optional[FilterCriteria] = None) -> CatalogView:
        criteria = criteria or FilterCriteria()
        visible = [p for p in products if matches(p, criteria)]
        logger.debug(
            f"Filtered {len(products)} products to {len(visible)} "
            f"(search={criteria.searchTerm!r}, status={criteria.status}, category={criteria.category})"
        )
        return CatalogView(
            visible=visible,
            stats=compute_stats(products),
            categories=category_options(products),
        )


# Discount derivation. Grid badge and detail view share one rounding rule.

def discount_percent(price, discounted_price) -> Optional[int]:
    if discounted_price is None or price is None:
        return None
    price = Decimal(str(price))
    discounted_price = Decimal(str(discounted_price))
    if price <= 0 or discounted_price >= price:
        return None
    percent = (price - discounted_price) * 100 / price
    return int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def product_discount(product: Product) -> Optional[int]:
    return discount_percent(product.price, product.discountedPrice)


def discount_badge(product: Product) -> Optional[str]:
    percent = product_discount(product)
    return f"{percent}% OFF" if percent is not None else None


def detail_discount_label(product: Product) -> Optional[str]:
    percent = product_discount(product)
    return f"-{percent}%" if percent is not None else None


def savings_label(product: Product) -> Optional[str]:
    percent = product_discount(product)
    return f"Save {percent}%" if percent is not None else None


def final_price(product: Product) -> Decimal:
    if product.discountedPrice is not None and product_discount(product) is not None:
        return product.discountedPrice
    return product.price
