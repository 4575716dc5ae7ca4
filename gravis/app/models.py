"""DTOs mirroring the backend REST resources.

The backend owns every entity; these models only describe what we read back.
Unknown keys are ignored so backend additions don't break rendering.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BackendModel(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # the backend sends null for unset columns; let field defaults apply
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class ImageRef(BackendModel):
    id: str = ""
    key: str = ""
    url: str = ""


class ProductImage(BackendModel):
    image: Optional[ImageRef] = None
    image_id: str = ""
    is_primary: bool = False


class CategoryRef(BackendModel):
    id: str
    name: str = ""
    description: str = ""


class TechnicalDetail(BackendModel):
    label: str = ""
    value: str = ""


class Product(BackendModel):
    id: str
    category_id: str = ""
    name: str
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    sale_price_in_paisa: int = 0
    sale_price_in_rupee: float = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    points: List[str] = Field(default_factory=list)
    category: Optional[CategoryRef] = None
    primary_image: Optional[ImageRef] = None
    images: List[ProductImage] = Field(default_factory=list)
    technical_details: List[TechnicalDetail] = Field(default_factory=list)
    product_label: Optional[str] = None
    warranty_label: Optional[str] = None
    has_pending_inquiry: bool = False

    @property
    def primary_image_url(self) -> Optional[str]:
        if self.primary_image and self.primary_image.url:
            return self.primary_image.url
        for img in self.images:
            if img.is_primary and img.image and img.image.url:
                return img.image.url
        if self.images and self.images[0].image and self.images[0].image.url:
            return self.images[0].image.url
        return None

    @property
    def image_urls(self) -> List[str]:
        """Gallery order: primary image first, then the rest without repeats."""
        urls: List[str] = []
        for img in self.images:
            if img.image and img.image.url and img.image.url not in urls:
                urls.append(img.image.url)
        primary = self.primary_image.url if self.primary_image else ""
        if primary:
            urls = [primary] + [u for u in urls if u != primary]
        return urls

    @property
    def valid_technical_details(self) -> List[TechnicalDetail]:
        return [d for d in self.technical_details if d.label.strip() or d.value.strip()]

    @property
    def technical_detail_columns(self) -> tuple[List[TechnicalDetail], List[TechnicalDetail]]:
        details = self.valid_technical_details
        half = math.ceil(len(details) / 2)
        return details[:half], details[half:]

    @property
    def mrp_rupee(self) -> int:
        # display-only list price shown struck through next to the sale price
        return round(self.sale_price_in_rupee * 1.5)


class ProductCategory(BackendModel):
    id: str
    name: str = ""
    description: str = ""
    image_id: Optional[str] = None
    image: Optional[ImageRef] = None


class CategoryBanner(BackendModel):
    id: str
    name: Optional[str] = None
    banner_image: Optional[ImageRef] = None


class CategoryFilterOption(BackendModel):
    id: str
    category_filter_id: str = ""
    value: str = ""
    sort_order: Optional[int] = None


class CategoryFilter(BackendModel):
    id: str
    category_id: str = ""
    name: str = ""
    slug: Optional[str] = None
    sort_order: Optional[int] = None
    options: List[CategoryFilterOption] = Field(default_factory=list)


class CartItem(BackendModel):
    product_id: str
    quantity: int = 0
    description: str = ""
    product_name: str = ""
    primary_image: Optional[ImageRef] = None
    sale_price_in_paisa: int = 0

    @property
    def price_rupee(self) -> float:
        return self.sale_price_in_paisa / 100

    @property
    def line_total_rupee(self) -> float:
        return self.price_rupee * self.quantity


class Cart(BackendModel):
    items: List[CartItem] = Field(default_factory=list)
    total: float = 0

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def subtotal_rupee(self) -> float:
        return sum(item.line_total_rupee for item in self.items)

    def find(self, product_id: str) -> Optional[CartItem]:
        return next((i for i in self.items if i.product_id == product_id), None)


class Customer(BackendModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    email: str = ""
    phone_number: str = ""
    is_email_verified: bool = False
    created_at: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.full_name or f"{self.first_name} {self.last_name}".strip() or self.email


class AuthSession(BackendModel):
    token: str
    expires_at: Optional[str] = None
    customer: Optional[Customer] = None
