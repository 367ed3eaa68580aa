from datetime import datetime, timezone
import pytest
from marketplace.common.custom_exceptions import InvalidInput, NotFound
from marketplace.orders.models import OrderPatch
from marketplace.orders.repository import OrderStore
from marketplace.orders.status_machine import OrderStatusMachine, allowed_next
from marketplace.schema.full_schema import OrderStatus, Orders
from tests.factories import make_order, make_seller, make_user


def _order(status: str, **fields) -> Orders:
    return Orders(id=1, order_number="ORD-1", seller_id=1, buyer_id=2, status=status, total_cents=1000, **fields)


def test_allowed_next_moves_forward_or_cancels():
    assert allowed_next(OrderStatus.PENDING) == {
        OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING,
        OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED,
    }
    assert OrderStatus.PROCESSING not in allowed_next(OrderStatus.SHIPPED)
    assert allowed_next(OrderStatus.DELIVERED) == {OrderStatus.DELIVERED}
    assert allowed_next(OrderStatus.CANCELLED) == {OrderStatus.CANCELLED}


def test_permissive_machine_allows_backwards_moves():
    machine = OrderStatusMachine(OrderStore())
    patch = machine.build_patch(_order("delivered"), OrderStatus.PROCESSING)
    assert patch.status is OrderStatus.PROCESSING


def test_strict_machine_rejects_backwards_and_terminal_moves():
    machine = OrderStatusMachine(OrderStore(), strict=True)

    with pytest.raises(InvalidInput):
        machine.build_patch(_order("shipped"), OrderStatus.CONFIRMED)
    with pytest.raises(InvalidInput):
        machine.build_patch(_order("cancelled"), OrderStatus.PENDING)

    assert machine.build_patch(_order("pending"), OrderStatus.SHIPPED).status is OrderStatus.SHIPPED
    assert machine.build_patch(_order("processing"), OrderStatus.CANCELLED).status is OrderStatus.CANCELLED


def test_shipped_at_only_set_on_first_ship():
    machine = OrderStatusMachine(OrderStore())

    first = machine.build_patch(_order("pending"), OrderStatus.SHIPPED)
    assert first.shipped_at is not None
    assert first.delivered_at is None

    already = datetime(2026, 2, 1, tzinfo=timezone.utc)
    again = machine.build_patch(_order("shipped", shipped_at=already), OrderStatus.SHIPPED)
    assert again.shipped_at is None


def test_empty_tracking_and_notes_mean_unchanged():
    machine = OrderStatusMachine(OrderStore())
    patch = machine.build_patch(_order("pending"), OrderStatus.CONFIRMED, tracking_number="", seller_notes="")
    assert patch.plain_values() == {"status": "confirmed"}


@pytest.mark.asyncio
async def test_transition_persists_and_keeps_first_shipped_at(db_session):
    buyer = await make_user(db_session, name="Buyer")
    seller = await make_seller(db_session)
    order = await make_order(db_session, seller, buyer)
    machine = OrderStatusMachine(OrderStore())

    shipped = await machine.transition(db_session, order, "shipped", tracking_number="TRK-100")
    await db_session.commit()
    assert shipped.status == "shipped"
    assert shipped.tracking_number == "TRK-100"
    first_shipped_at = shipped.shipped_at
    assert first_shipped_at is not None

    again = await machine.transition(db_session, shipped, "shipped", seller_notes="handed to courier")
    await db_session.commit()
    assert again.shipped_at == first_shipped_at
    assert again.tracking_number == "TRK-100"
    assert again.seller_notes == "handed to courier"

    delivered = await machine.transition(db_session, again, "delivered")
    await db_session.commit()
    assert delivered.delivered_at is not None
    assert delivered.shipped_at == first_shipped_at


@pytest.mark.asyncio
async def test_transition_rejects_unknown_status_without_writing(db_session):
    buyer = await make_user(db_session)
    seller = await make_seller(db_session)
    order = await make_order(db_session, seller, buyer, status="confirmed")
    machine = OrderStatusMachine(OrderStore())

    with pytest.raises(InvalidInput):
        await machine.transition(db_session, order, "bogus")
    await db_session.rollback()

    stored = await OrderStore().get_by_seller_and_id(db_session, seller.id, order.id)
    assert stored.status == "confirmed"


@pytest.mark.asyncio
async def test_orders_of_other_sellers_are_not_found(db_session):
    buyer = await make_user(db_session)
    owner = await make_seller(db_session)
    other = await make_seller(db_session, business_name="Other Shop")
    order = await make_order(db_session, owner, buyer)

    with pytest.raises(NotFound):
        await OrderStore().get_by_seller_and_id(db_session, other.id, order.id)
    with pytest.raises(NotFound):
        await OrderStore().get_by_seller_and_id(db_session, owner.id, order.id + 1000)


@pytest.mark.asyncio
async def test_update_keeps_recorded_shipped_and_delivered_at(db_session):
    # a writer holding a stale row still cannot overwrite the audit timestamps
    buyer = await make_user(db_session)
    seller = await make_seller(db_session)
    first_shipped = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    first_delivered = datetime(2026, 1, 4, 18, 30, tzinfo=timezone.utc)
    order = await make_order(db_session, seller, buyer, status="delivered",
                             shipped_at=first_shipped, delivered_at=first_delivered)
    store = OrderStore()

    later = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)
    updated = await store.update(db_session, order.id, OrderPatch(status=OrderStatus.SHIPPED, shipped_at=later))
    await db_session.commit()
    assert updated.status == "shipped"
    assert updated.shipped_at.replace(tzinfo=None) == first_shipped.replace(tzinfo=None)

    updated = await store.update(db_session, order.id, OrderPatch(status=OrderStatus.DELIVERED, delivered_at=later))
    await db_session.commit()
    assert updated.status == "delivered"
    assert updated.delivered_at.replace(tzinfo=None) == first_delivered.replace(tzinfo=None)
    assert updated.shipped_at.replace(tzinfo=None) == first_shipped.replace(tzinfo=None)


@pytest.mark.asyncio
async def test_update_records_first_shipped_at(db_session):
    buyer = await make_user(db_session)
    seller = await make_seller(db_session)
    order = await make_order(db_session, seller, buyer)

    ts = datetime(2026, 2, 10, 8, 15, tzinfo=timezone.utc)
    updated = await OrderStore().update(db_session, order.id, OrderPatch(status=OrderStatus.SHIPPED, shipped_at=ts))
    await db_session.commit()
    assert updated.shipped_at.replace(tzinfo=None) == ts.replace(tzinfo=None)
    assert updated.delivered_at is None
