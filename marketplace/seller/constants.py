from marketplace.common.logging_setup import get_logger

logger = get_logger("marketplace.seller")
