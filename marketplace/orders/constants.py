from marketplace.common.logging_setup import get_logger
from marketplace.schema.full_schema import OrderStatus

logger = get_logger("marketplace.orders")

VALID_ORDER_STATUSES = frozenset(s.value for s in OrderStatus)

# happy path ,cancelled is reachable from any non terminal status
FULFILLMENT_PATH = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

# counted as pending on the seller dashboard
OPEN_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING})
