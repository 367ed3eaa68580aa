from marketplace.common.logging_setup import get_logger
from marketplace.schema.full_schema import PaymentStatus, PayoutStatus

logger = get_logger("marketplace.payouts")

# payouts in these statuses have claimed their orders
CLAIMING_PAYOUT_STATUSES = (PayoutStatus.PROCESSING.value, PayoutStatus.PAID.value)

SETTLED_PAYMENT_STATUS = PaymentStatus.SUCCEEDED.value

MIN_PAYOUT_CENTS = 1000
