from datetime import datetime
from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class BusinessAddress(BaseModel):
    street: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=128)
    state: Optional[str] = Field(None, max_length=128)
    postal_code: Optional[str] = Field(None, max_length=32)
    country: Optional[str] = Field(None, max_length=64)


class SellerApplyIn(BaseModel):
    business_name: str = Field(..., min_length=2, max_length=255)
    business_type: Optional[Literal["individual", "business", "organization"]] = None
    description: Optional[str] = Field(None, max_length=2000)
    business_email: Optional[EmailStr] = None
    business_phone: Optional[str] = Field(None, max_length=32)
    business_address: Optional[BusinessAddress] = None

    model_config = {"extra": "forbid"}

    @field_validator("business_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("business_name must be between 2 and 255 characters")
        return v


class SellerProfileUpdateIn(BaseModel):
    business_name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    business_email: Optional[EmailStr] = None
    business_phone: Optional[str] = Field(None, max_length=32)
    business_address: Optional[BusinessAddress] = None
    settings: Optional[Dict[str, Any]] = None

    model_config = {"extra": "forbid"}   # for any extra input fields in model raise 400 at pydantic level


class SellerProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    business_name: str
    business_type: str
    description: Optional[str] = None
    business_email: Optional[str] = None
    business_phone: Optional[str] = None
    business_address: Optional[Dict[str, Any]] = None
    kyc_status: str
    commission_rate_bps: int
    total_sales: int
    total_orders: int
    settings: Optional[Dict[str, Any]] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SellerStats(BaseModel):
    total_orders: int = 0
    total_revenue_cents: int = 0
    pending_orders: int = 0
    total_products: int = 0
    active_products: int = 0
