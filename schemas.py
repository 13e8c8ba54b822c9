# schemas.py
from __future__ import annotations

import math
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

# =========================
# Base model configurations
# =========================

class APIBase(BaseModel):
    """Base for models mapped to the remote products API payloads."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

# ======================================================
# Product (wire shape of the /products resource)
# ======================================================

class Product(APIBase):
    id: str
    name: str
    sku: str
    price: float
    is_favorite: bool = Field(False, alias="isFavorite")
    image: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    updated_by: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        # json-server seeds often use numeric ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

# ======================================================
# Editor form validation
# ======================================================

MIN_TEXT_LENGTH = 3

REQUIRED = "required"
TOO_SHORT = "too_short"
INVALID = "invalid"

MESSAGES: Dict[str, Dict[str, str]] = {
    "name": {
        REQUIRED: "Favor informar o nome do produto",
        TOO_SHORT: "Nome muito curto",
    },
    "sku": {
        REQUIRED: "Favor informar o SKU do produto",
        TOO_SHORT: "SKU muito curto",
    },
    "price": {
        REQUIRED: "Favor informar o preço do produto",
        INVALID: "Preço inválido",
    },
}


class FieldError(BaseModel):
    field: str
    category: Literal["required", "too_short", "invalid"]
    message: str


class ProductForm(BaseModel):
    """The user-editable part of a product: name, sku and price."""

    name: str = Field(None, validate_default=True)
    sku: str = Field(None, validate_default=True)
    price: float = Field(None, validate_default=True)

    @field_validator("name", "sku", mode="before")
    @classmethod
    def _check_text(cls, value: Any, info: ValidationInfo) -> str:
        messages = MESSAGES[info.field_name]
        text = "" if value is None else str(value).strip()
        if not text:
            raise PydanticCustomError(REQUIRED, messages[REQUIRED])
        if len(text) < MIN_TEXT_LENGTH:
            raise PydanticCustomError(TOO_SHORT, messages[TOO_SHORT])
        return text

    @field_validator("price", mode="before")
    @classmethod
    def _check_price(cls, value: Any) -> float:
        messages = MESSAGES["price"]
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError(REQUIRED, messages[REQUIRED])
        if isinstance(value, bool):
            raise PydanticCustomError(INVALID, messages[INVALID])
        if isinstance(value, str):
            value = value.strip().replace(",", ".")
        try:
            price = float(value)
        except (TypeError, ValueError):
            raise PydanticCustomError(INVALID, messages[INVALID])
        if not math.isfinite(price) or price <= 0:
            raise PydanticCustomError(INVALID, messages[INVALID])
        return price


def validate_product_form(data: Mapping[str, Any]) -> Tuple[Optional[ProductForm], List[FieldError]]:
    """
    Validate raw form input.

    Returns the parsed form and an empty list, or None and one FieldError per
    failing field (name, sku, price order).
    """
    try:
        form = ProductForm(
            name=data.get("name"),
            sku=data.get("sku"),
            price=data.get("price"),
        )
    except ValidationError as e:
        errors = [
            FieldError(field=str(err["loc"][0]), category=err["type"], message=err["msg"])
            for err in e.errors()
        ]
        return None, errors
    return form, []

# ======================================================
# Editor results and session context
# ======================================================

class Success(BaseModel):
    ok: Literal[True] = True
    product: Product


class Failure(BaseModel):
    ok: Literal[False] = False
    reason: Literal["cancelled", "invalid", "persistence", "busy", "closed"]
    message: Optional[str] = None
    errors: List[FieldError] = Field(default_factory=list)


EditorResult = Union[Success, Failure]


class SessionContext(BaseModel):
    """Identity of the signed-in user, built per request from the session cookie."""
    model_config = ConfigDict(frozen=True)

    user_name: str
