import enum
from sqlalchemy import JSON, BigInteger, Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, Text, UniqueConstraint, Uuid
from uuid6 import uuid7
from datetime import datetime
from typing import Any, Dict, Optional
import uuid
from sqlmodel import Column, SQLModel, Field, String
from marketplace.common.utils import now


def _in_values(column: str, enum_cls) -> str:
    values = ", ".join(f"'{m.value}'" for m in enum_cls)
    return f"{column} IN ({values})"


# Join tables
class UserRole(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True,nullable=False)
    role_id: Optional[int] = Field(default=None, foreign_key="role.id", index=True,nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uq_user_role_user_id_role_id"),)


class Users(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)  #* optional just means for the created object before saving in db .
    public_id: uuid.UUID = Field(
        default_factory=uuid7,
        sa_column=Column(Uuid(as_uuid=True), unique=True, index=True, nullable=False)
    )
    email: Optional[str] = Field(default=None,sa_column=Column(String(320), nullable=True,unique=True))
    name: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    role_version:int=Field(default=0,nullable=False)
    created_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False,default=now))
    updated_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False,default=now, onupdate=now))

    deleted_at: Optional[datetime] = Field(default=None,
        sa_column=Column(DateTime(timezone=True)))


class Role(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(sa_column=Column(String(length=200), unique=True, nullable=False,default='buyer'))
    description: Optional[str] = None

# ---------------------------------------------------------------------------------------------------------

class KycStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class BusinessType(str, enum.Enum):
    INDIVIDUAL = "individual"
    BUSINESS = "business"
    ORGANIZATION = "organization"


# User --> SellerProfile (1:1) ,uniqueness on user_id is what settles concurrent applications
class SellerProfile(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(sa_column=Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, unique=True))
    business_name: str = Field(sa_column=Column(String(255), nullable=False))
    business_type: str = Field(default=BusinessType.INDIVIDUAL.value, sa_column=Column(String(32), nullable=False, default=BusinessType.INDIVIDUAL.value))
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    business_email: Optional[str] = Field(default=None, sa_column=Column(String(320), nullable=True))
    business_phone: Optional[str] = Field(default=None, sa_column=Column(String(32), nullable=True))
    business_address: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    kyc_status: str = Field(default=KycStatus.PENDING.value, sa_column=Column(String(32), nullable=False, default=KycStatus.PENDING.value))
    # basis points ,1000 = 10%
    commission_rate_bps: int = Field(default=1000, sa_column=Column(Integer, nullable=False, default=1000))
    total_sales: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))  # cents
    total_orders: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    settings: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))
    created_at: datetime = Field(default_factory=now, sa_column=Column(DateTime(timezone=True), nullable=False, default=now))
    updated_at: datetime = Field(default_factory=now,sa_column=Column(DateTime(timezone=True), nullable=False,default=now, onupdate=now))

    __table_args__ = (
        CheckConstraint(_in_values("kyc_status", KycStatus), name="ck_sellerprofile_kyc_status"),
        CheckConstraint(_in_values("business_type", BusinessType), name="ck_sellerprofile_business_type"),
    )

# ---------------------------------------------------------------------------------------------------------

class ProductStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"


class Product(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    seller_id: int = Field(sa_column=Column(Integer, ForeignKey("sellerprofile.id", ondelete="CASCADE"), index=True, nullable=False))
    title: str = Field(sa_column=Column(String(255), nullable=False))
    price_cents: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))
    stock: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    status: str = Field(default=ProductStatus.ACTIVE.value, sa_column=Column(String(32), nullable=False, index=True, default=ProductStatus.ACTIVE.value))
    created_at: datetime = Field(default_factory=now, sa_column=Column(DateTime(timezone=True), nullable=False, default=now))
    updated_at: datetime = Field(default_factory=now,sa_column=Column(DateTime(timezone=True), nullable=False,default=now, onupdate=now))

# --------------------------------------------------------------------------------------------

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# Buyer --> Orders (1:many) , Seller --> Orders (1:many)
# orders are never deleted ,they are the audit trail for payouts
class Orders(SQLModel, table=True):

    id: Optional[int] = Field(default=None, primary_key=True)
    order_number: str = Field(sa_column=Column(String(64), nullable=False, unique=True))
    seller_id: int = Field(sa_column=Column(Integer, ForeignKey("sellerprofile.id", ondelete="RESTRICT"), nullable=False, index=True))
    buyer_id: int = Field(sa_column=Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True))
    status: str = Field(default=OrderStatus.PENDING.value, sa_column=Column(String(32), nullable=False, index=True, default=OrderStatus.PENDING.value))
    total_cents: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))
    tracking_number: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    seller_notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    shipped_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    delivered_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    created_at: datetime = Field(default_factory=now, sa_column=Column(DateTime(timezone=True), nullable=False, default=now))
    updated_at: datetime = Field(default_factory=now,sa_column=Column(DateTime(timezone=True), nullable=False,default=now))

    __table_args__ = (
        CheckConstraint(_in_values("status", OrderStatus), name="ck_orders_status"),
        Index("ix_orders_seller_created", "seller_id", "created_at"),
    )

# --------------------------------------------------------------------------------------------------------------------------------

class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUNDED = "refunded"


# Order --> Payment (1:1)
class Payment(SQLModel, table=True):

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(sa_column=Column(Integer, ForeignKey("orders.id", ondelete="RESTRICT"), nullable=False, unique=True))
    status: str = Field(default=PaymentStatus.PENDING.value, sa_column=Column(String(32), nullable=False, index=True, default=PaymentStatus.PENDING.value))
    amount_cents: int = Field(sa_column=Column(BigInteger, nullable=False))
    platform_fee_cents: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))
    created_at: datetime = Field(default_factory=now, sa_column=Column(DateTime(timezone=True), nullable=False, default=now))

# --------------------------------------------------------------------------------------------------------------------------------

class PayoutStatus(str, enum.Enum):
    REQUESTED = "requested"
    PROCESSING = "processing"
    PAID = "paid"
    FAILED = "failed"


class Payout(SQLModel, table=True):

    id: Optional[int] = Field(default=None, primary_key=True)
    seller_id: int = Field(sa_column=Column(Integer, ForeignKey("sellerprofile.id", ondelete="RESTRICT"), nullable=False, index=True))
    status: str = Field(default=PayoutStatus.REQUESTED.value, sa_column=Column(String(32), nullable=False, index=True, default=PayoutStatus.REQUESTED.value))
    amount_cents: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))
    created_at: datetime = Field(default_factory=now, sa_column=Column(DateTime(timezone=True), nullable=False, default=now))


# Payout <--> Orders ,the orders a payout batch covers .
# rows are written together with their payout and never changed afterwards
class PayoutOrder(SQLModel, table=True):

    payout_id: int = Field(sa_column=Column(Integer, ForeignKey("payout.id", ondelete="RESTRICT"), primary_key=True))
    order_id: int = Field(sa_column=Column(Integer, ForeignKey("orders.id", ondelete="RESTRICT"), primary_key=True, index=True))
