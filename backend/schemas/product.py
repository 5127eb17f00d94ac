# backend/schemas/product.py
import re
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from schemas.common import ORMBase

_ASSET_PREFIX_RE = re.compile(r"^/?assets/generated_images/")


def normalize_asset_url(url: Optional[str]) -> Optional[str]:
    """Strip the legacy generated-images prefix and make the path root-relative."""
    if not url:
        return url
    u = _ASSET_PREFIX_RE.sub("/", url)
    if not u.startswith("/") and "://" not in u:
        u = f"/{u}"
    return u


# Shared base attributes for product entities
class ProductBase(ORMBase):
    name: str = Field(min_length=1)
    description: str
    price: int = Field(ge=0)
    category: str = Field(min_length=1)
    image_url: str
    images: List[str] = Field(default_factory=list)
    material: str
    is_pre_order: bool = False
    in_stock: bool = True
    stock_quantity: int = Field(default=100, ge=0)
    sizes: Optional[List[str]] = None


# Schema for creating a new product
class ProductCreate(ProductBase):
    pass


# Schema for partial product updates
class ProductUpdate(ORMBase):
    """Schema for PATCH requests - all fields optional."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[int] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1)
    image_url: Optional[str] = None
    images: Optional[List[str]] = None
    material: Optional[str] = None
    is_pre_order: Optional[bool] = None
    in_stock: Optional[bool] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    sizes: Optional[List[str]] = None


# Full product representation including ID
class ProductResponse(ProductBase):
    id: str
    created_at: Optional[datetime] = None

    @field_validator("image_url")
    @classmethod
    def _normalize_image_url(cls, v):
        return normalize_asset_url(v)

    @field_validator("images")
    @classmethod
    def _normalize_images(cls, v):
        return [normalize_asset_url(x) for x in (v or [])]
