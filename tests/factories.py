from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional
from uuid6 import uuid7
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.auth.utils import create_access_token
from marketplace.schema.full_schema import (
    Orders, Payment, PaymentStatus, Payout, PayoutOrder, Product, SellerProfile, Users,
)

BASE_TIME = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def auth_headers(user: Users) -> dict:
    token = create_access_token(user.public_id)
    return {"Authorization": f"Bearer {token}"}


async def make_user(session: AsyncSession, email: Optional[str] = None, name: str = "Asha Rao") -> Users:
    user = Users(email=email or f"user-{uuid7().hex[:12]}@example.com", name=name)
    session.add(user)
    await session.commit()
    return user


async def make_seller(session: AsyncSession, user: Optional[Users] = None,
                      business_name: str = "Green Leaf Pantry") -> SellerProfile:
    user = user or await make_user(session)
    seller = SellerProfile(user_id=user.id, business_name=business_name, business_email=user.email)
    session.add(seller)
    await session.commit()
    return seller


async def make_order(session: AsyncSession, seller: SellerProfile, buyer: Users,
                     total_cents: int = 10000, status: str = "pending",
                     minutes: int = 0, **fields) -> Orders:
    created = BASE_TIME + timedelta(minutes=minutes)
    order = Orders(
        order_number=f"ORD-{uuid7().hex[:16]}",
        seller_id=seller.id,
        buyer_id=buyer.id,
        total_cents=total_cents,
        status=status,
        created_at=created,
        updated_at=created,
        **fields,
    )
    session.add(order)
    await session.commit()
    return order


async def make_payment(session: AsyncSession, order: Orders, fee_cents: int = 0,
                       status: str = PaymentStatus.SUCCEEDED.value) -> Payment:
    payment = Payment(order_id=order.id, status=status, amount_cents=order.total_cents, platform_fee_cents=fee_cents)
    session.add(payment)
    await session.commit()
    return payment


async def make_paid_order(session: AsyncSession, seller: SellerProfile, buyer: Users,
                          total_cents: int, fee_cents: int, minutes: int = 0) -> Orders:
    order = await make_order(session, seller, buyer, total_cents=total_cents, status="delivered", minutes=minutes)
    await make_payment(session, order, fee_cents=fee_cents)
    return order


async def make_payout(session: AsyncSession, seller: SellerProfile, status: str,
                      orders: Iterable[Orders] = ()) -> Payout:
    orders = list(orders)
    payout = Payout(seller_id=seller.id, status=status, amount_cents=sum(o.total_cents for o in orders))
    session.add(payout)
    await session.flush()
    for order in orders:
        session.add(PayoutOrder(payout_id=payout.id, order_id=order.id))
    await session.commit()
    return payout


async def make_product(session: AsyncSession, seller: SellerProfile, title: str = "Millet Cookies",
                       status: str = "active") -> Product:
    product = Product(seller_id=seller.id, title=title, price_cents=450, stock=10, status=status)
    session.add(product)
    await session.commit()
    return product
