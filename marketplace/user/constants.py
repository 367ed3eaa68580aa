from marketplace.common.logging_setup import get_logger

logger = get_logger("marketplace.user")

SELLER_ROLE = "seller"

DEFAULT_ROLES = [
    {"name": "buyer", "description": "default role for every account"},
    {"name": SELLER_ROLE, "description": "manages a seller profile ,its products and orders"},
    {"name": "admin", "description": "platform administration"},
]
