from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from marketplace.common.custom_exceptions import InvalidInput
from marketplace.config.settings import config_settings
from marketplace.orders.constants import VALID_ORDER_STATUSES
from marketplace.schema.full_schema import OrderStatus


def parse_order_status(value: Optional[str]) -> OrderStatus:
    if value is None or value not in VALID_ORDER_STATUSES:
        raise InvalidInput("Invalid status", details={"allowed": sorted(VALID_ORDER_STATUSES)})
    return OrderStatus(value)


@dataclass(frozen=True)
class OrderFilter:
    limit: int = config_settings.DEFAULT_PAGE_LIMIT
    offset: int = 0
    status: Optional[OrderStatus] = None

    @classmethod
    def build(cls, status: Optional[str] = None, limit: Optional[int] = None, offset: Optional[int] = None,
              max_limit: int = config_settings.MAX_PAGE_LIMIT) -> "OrderFilter":
        limit = config_settings.DEFAULT_PAGE_LIMIT if limit is None else limit
        offset = 0 if offset is None else offset

        for name, val in (("limit", limit), ("offset", offset)):
            if isinstance(val, bool) or not isinstance(val, int) or val < 0:
                raise InvalidInput(f"{name} must be a non-negative integer")
        if limit > max_limit:
            raise InvalidInput(f"limit must not exceed {max_limit}")

        parsed_status = parse_order_status(status) if status else None
        return cls(limit=limit, offset=offset, status=parsed_status)


@dataclass(frozen=True)
class OrderPatch:
    """Fields to write on an order ,None means leave the column unchanged."""
    status: Optional[OrderStatus] = None
    tracking_number: Optional[str] = None
    seller_notes: Optional[str] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None

    def plain_values(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        if self.status is not None:
            values["status"] = self.status.value
        if self.tracking_number is not None:
            values["tracking_number"] = self.tracking_number
        if self.seller_notes is not None:
            values["seller_notes"] = self.seller_notes
        return values


class OrderStatusUpdateIn(BaseModel):
    # kept as str, unknown values are rejected by the status machine with a 400
    status: str = Field(..., min_length=1, max_length=32)
    tracking_number: Optional[str] = Field(None, max_length=128)
    seller_notes: Optional[str] = Field(None, max_length=2000)

    model_config = {"extra": "forbid"}


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    seller_id: int
    buyer_id: int
    status: str
    total_cents: int
    tracking_number: Optional[str] = None
    seller_notes: Optional[str] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class SellerOrderOut(OrderOut):
    buyer_name: Optional[str] = None
    buyer_email: Optional[str] = None
