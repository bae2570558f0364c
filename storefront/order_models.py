from __future__ import annotations

import re
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PHONE_RE = re.compile(r"^[0-9+()\-.\s]{7,30}$")
# local@domain.tld, no whitespace
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class OrderItem(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    productId: str = Field(min_length=1, max_length=100)
    productName: str = Field(min_length=1, max_length=200)
    size: Optional[str] = Field(default=None, max_length=50)
    quantity: int = Field(ge=1, le=100)
    price: float = Field(ge=0)
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("size", "notes", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Any:
        return _blank_to_none(v)


class Order(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)
    phone: str = Field(max_length=30)
    email: Optional[str] = Field(default=None, max_length=254)
    pickupOrDelivery: Literal["pickup", "delivery"]
    address: Optional[str] = Field(default=None, max_length=500)
    desiredDate: Optional[str] = Field(default=None, max_length=50)
    generalNotes: Optional[str] = Field(default=None, max_length=1000)
    items: List[OrderItem] = Field(min_length=1, max_length=50)
    total: float = Field(ge=0)

    @field_validator("email", "address", "desiredDate", "generalNotes", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("phone")
    @classmethod
    def _validate_phone(cls, v: str) -> str:
        if not PHONE_RE.match(v):
            raise ValueError("phone may only contain digits, spaces and + ( ) - .")
        return v

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not EMAIL_RE.match(v):
            raise ValueError("invalid email address")
        return v


class OrderSubmission(Order):
    """Order as posted by the web form, including the anti-spam fields."""

    company: Optional[Any] = None
    formStartedAt: Optional[Any] = None

    def to_order(self) -> Order:
        return Order(**self.model_dump(exclude={"company", "formStartedAt"}))


def delivery_address_missing(order: Order) -> bool:
    return order.pickupOrDelivery == "delivery" and not (order.address or "").strip()
