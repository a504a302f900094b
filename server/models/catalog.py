"""Product and category schemas."""

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BeforeValidator, Field, field_validator

from models.common import CamelModel, EntityModel, parse_money

DEFAULT_SIZES = ["S", "M", "L", "XL"]

CategoryStatus = Literal["available", "coming-soon"]


def _price_string(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"${value:g}"
    return value


Price = Annotated[str, BeforeValidator(_price_string)]


class ProductVariant(CamelModel):
    id: str
    size: str
    color: Optional[str] = None
    stock: int = 0
    sku: Optional[str] = None


class Product(EntityModel):
    title: str = ""
    description: str = ""
    price: Price = ""
    sale_price: Optional[Price] = None
    image: str = ""
    images: List[str] = Field(default_factory=list)
    category: str = ""
    featured: bool = False
    inventory: int = 0
    sizes: List[str] = Field(default_factory=lambda: list(DEFAULT_SIZES))
    variants: List[ProductVariant] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    is_published: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None

    @field_validator("description", "image", "category", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("inventory", mode="before")
    @classmethod
    def none_to_zero(cls, v):
        return 0 if v is None else v

    @field_validator("sizes", mode="before")
    @classmethod
    def default_sizes(cls, v):
        return list(DEFAULT_SIZES) if not v else v

    @property
    def numeric_price(self) -> float:
        return parse_money(self.price)

    @property
    def in_stock(self) -> bool:
        return self.inventory > 0


class ProductCreate(CamelModel):
    title: str
    price: Price
    category: str
    description: str = ""
    image: str = ""
    images: List[str] = Field(default_factory=list)
    sale_price: Optional[Price] = None
    featured: bool = False
    inventory: int = 0
    sizes: List[str] = Field(default_factory=lambda: list(DEFAULT_SIZES))
    variants: List[ProductVariant] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    is_published: Optional[bool] = None
    created_by: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ProductUpdate(CamelModel):
    title: Optional[str] = None
    price: Optional[Price] = None
    category: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    images: Optional[List[str]] = None
    sale_price: Optional[Price] = None
    featured: Optional[bool] = None
    inventory: Optional[int] = None
    sizes: Optional[List[str]] = None
    variants: Optional[List[ProductVariant]] = None
    tags: Optional[List[str]] = None
    is_published: Optional[bool] = None


class Category(EntityModel):
    """A storefront category. ``id`` is the numeric category id as a string key."""

    name: str = ""
    description: str = ""
    image: str = ""
    product_count: int = 0
    status: CategoryStatus = "coming-soon"
    order: Optional[int] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Category":
        numeric = data.get("id")
        key = str(numeric) if numeric not in (None, "") else doc_id
        return cls.model_validate({**data, "id": key})

    @field_validator("product_count", mode="before")
    @classmethod
    def none_to_zero(cls, v):
        return 0 if v is None else v

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        return v or "coming-soon"


class CategoryWrite(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    product_count: Optional[int] = None
    status: Optional[CategoryStatus] = None
    order: Optional[int] = None
