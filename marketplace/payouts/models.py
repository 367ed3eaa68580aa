from typing import List
from pydantic import BaseModel


class PayoutSummary(BaseModel):
    pending_payout_cents: int
    pending_payout_display: str
    order_ids: List[int]
    # orders already covered by a processing or paid payout
    claimed_order_ids: List[int]
    meets_minimum: bool
