import enum
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator


CATEGORY_OPTIONS = ["mobile", "electronics", "fashion", "home", "books", "other"]


class ProductStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"


class Image(BaseModel):
    url: str
    alt: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def from_bare_url(cls, data):
        # Legacy records store gallery entries as plain URL strings
        if isinstance(data, str):
            return {"url": data}
        return data


class Product(BaseModel):
    id: Optional[Union[int, str]] = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    productName: str
    productUrl: str = ""
    metaTitle: str = ""
    price: Decimal
    discountedPrice: Optional[Decimal] = None
    category: str = ""
    # Known statuses parse to ProductStatus; anything else the remote sends is kept as text
    status: Union[ProductStatus, str] = Field(default=ProductStatus.DRAFT, union_mode="left_to_right")
    mainImage: Optional[Image] = None
    gallery: List[Image] = []
    description: str = ""

    class Config:
        from_attributes = True
        populate_by_name = True

    @field_validator("discountedPrice", "mainImage", mode="before")
    @classmethod
    def blank_as_none(cls, value):
        if value == "":
            return None
        return value

    @field_validator("gallery", mode="before")
    @classmethod
    def gallery_or_empty(cls, value):
        return value or []


class FilterCriteria(BaseModel):
    searchTerm: str = ""
    status: Optional[ProductStatus] = None
    category: Optional[str] = None

    @field_validator("status", "category", mode="before")
    @classmethod
    def blank_as_unset(cls, value):
        if value == "":
            return None
        return value


class CatalogStats(BaseModel):
    total: int = 0
    active: int = 0
    draft: int = 0
    inactive: int = 0


class CatalogView(BaseModel):
    visible: List[Product]
    stats: CatalogStats
    categories: List[str]


class GalleryState(BaseModel):
    items: List[Image]
    selectedIndex: int = 0
    displayedUrl: Optional[str] = None


class ProductCard(BaseModel):
    product: Product
    discountBadge: Optional[str] = None


class DashboardResponse(BaseModel):
    products: List[ProductCard]
    stats: CatalogStats
    categories: List[str]
    criteria: FilterCriteria
    error: Optional[str] = None


class ProductDetailResponse(BaseModel):
    product: Product
    mainImage: Optional[str] = None
    finalPrice: Decimal
    discountLabel: Optional[str] = None
    savingsLabel: Optional[str] = None
    descriptionHtml: str = ""
    gallery: GalleryState


class GallerySelectByIndex(BaseModel):
    index: int


class GallerySelectByUrl(BaseModel):
    url: str


class ProductFormInput(BaseModel):
    productName: str = ""
    metaTitle: str = ""
    productUrl: str = ""
    price: str = ""
    discountedPrice: str = ""
    description: str = ""
    mainImage: str = ""
    category: str = ""
    status: str = ""
    galleryInputs: List[str] = [""]

    @field_validator("price", "discountedPrice", mode="before")
    @classmethod
    def number_as_text(cls, value):
        if value is None:
            return ""
        return str(value)
