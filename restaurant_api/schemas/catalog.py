from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


# =========================
# USERS
# =========================
class UserCreate(BaseModel):
    email: EmailStr
    password_hash: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    active: bool = True


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password_hash: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    active: Optional[bool] = None


class RegisterPayload(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginPayload(BaseModel):
    email: str
    password: str


# =========================
# CATEGORIES
# =========================
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[int] = None
    sort_order: int = 0
    active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[int] = None
    sort_order: Optional[int] = None
    active: Optional[bool] = None


# =========================
# PRODUCTS
# =========================
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    category_id: Optional[int] = None
    available: bool = True
    can_be_sold_separately: bool = True
    image_url: Optional[str] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    category_id: Optional[int] = None
    available: Optional[bool] = None
    can_be_sold_separately: Optional[bool] = None
    image_url: Optional[str] = None


# =========================
# PRODUCT MODIFIERS
# =========================
class ProductModifierCreate(BaseModel):
    product_id: int
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    required: bool = False
    min_selections: int = Field(0, ge=0)
    max_selections: int = Field(1, ge=0)


class ProductModifierUpdate(BaseModel):
    """Corpo aceito em POST e PUT; presença e faixa são checadas pelo IntegrityGuard."""

    product_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    required: Optional[bool] = None
    min_selections: Optional[int] = None
    max_selections: Optional[int] = None


# =========================
# PRODUCT MODIFIER OPTIONS
# =========================
class ProductModifierOptionCreate(BaseModel):
    product_modifier_id: int
    product_id: int
    additional_price: Decimal = Field(Decimal("0"), ge=0)
    default_selected: bool = False


class ProductModifierOptionUpdate(BaseModel):
    product_modifier_id: Optional[int] = None
    product_id: Optional[int] = None
    additional_price: Optional[Decimal] = Field(None, ge=0)
    default_selected: Optional[bool] = None


class ProductModifierOptionPayload(BaseModel):
    # product_modifier_id vem da rota
    product_id: Optional[int] = None
    additional_price: Optional[Decimal] = Field(None, ge=0)
    default_selected: Optional[bool] = None
