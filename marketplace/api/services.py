from dataclasses import dataclass
from marketplace.orders.repository import OrderStore
from marketplace.orders.status_machine import OrderStatusMachine
from marketplace.payouts.services import PayoutCalculator
from marketplace.products.repository import ProductStore
from marketplace.seller.repository import SellerProfileStore
from marketplace.seller.services import SellerApplicationService
from marketplace.seller.stats import SellerStatsAggregator
from marketplace.user.repository import UserStore


@dataclass(frozen=True)
class Services:
    """Stateless stores and components shared by every request ,built once per app."""
    order_store: OrderStore
    product_store: ProductStore
    user_store: UserStore
    profile_store: SellerProfileStore
    status_machine: OrderStatusMachine
    payouts: PayoutCalculator
    stats: SellerStatsAggregator
    applications: SellerApplicationService


def build_services(strict_transitions: bool = False) -> Services:
    order_store = OrderStore()
    product_store = ProductStore()
    user_store = UserStore()
    profile_store = SellerProfileStore()

    return Services(
        order_store=order_store,
        product_store=product_store,
        user_store=user_store,
        profile_store=profile_store,
        status_machine=OrderStatusMachine(order_store, strict=strict_transitions),
        payouts=PayoutCalculator(),
        stats=SellerStatsAggregator(order_store, product_store),
        applications=SellerApplicationService(profile_store, user_store),
    )
