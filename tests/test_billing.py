from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from restaurant_pos import crud
from restaurant_pos.db.models.bill import Bill, BillStatus
from restaurant_pos.db.models.table import TableStatus
from restaurant_pos.schemas.event import EventKind
from restaurant_pos.schemas.order import LineItemCreate
from restaurant_pos.services import billing_service, order_service, table_service
from restaurant_pos.services.table_service import CONCURRENT_UPDATE_MESSAGE

from .conftest import API, TestingSessionLocal


def test_send_to_billing(client, occupied_table, place_order, waiter_headers, owner_headers, kitchen_headers, received):
    first = place_order(1, [(1, 2)]).json()
    second = place_order(1, [(2, 1), (3, 2)]).json()
    received.clear()

    resp = client.post(f"{API}/tables/1/send-to-billing", headers=waiter_headers)
    assert resp.status_code == 201
    bill = resp.json()
    assert bill["table_number"] == 1
    assert bill["contact"] == "9876543210"
    assert bill["status"] == "pending"
    assert Decimal(bill["total"]) == Decimal("486.00")
    assert [o["order_id"] for o in bill["orders"]] == [second["id"], first["id"]]
    assert bill["orders"][1]["items"] == [
        {"menu_item_id": 1, "name": "Paneer Tikka", "quantity": 2, "unit_price": "180.00"}
    ]
    assert [e.kind for e in received] == [EventKind.ORDERS_BILLED, EventKind.TABLE_RELEASED]
    assert received[0].bill_id == bill["id"]

    table = client.get(f"{API}/tables/1", headers=waiter_headers).json()
    assert table["status"] == "available"
    assert table["contact"] is None
    assert client.get(f"{API}/tables/1/orders", headers=waiter_headers).json()["orders"] == []
    assert client.get(f"{API}/kitchen/orders", headers=kitchen_headers).json() == []

    pending = client.get(f"{API}/billing/bills", headers=owner_headers).json()
    assert [b["id"] for b in pending] == [bill["id"]]


def test_bill_total_matches_snapshot(client, occupied_table, place_order, waiter_headers):
    place_order(1, [(3, 3)])
    place_order(1, [(2, 1)])
    bill = client.post(f"{API}/tables/1/send-to-billing", headers=waiter_headers).json()

    assert Decimal(bill["total"]) == sum(Decimal(o["total"]) for o in bill["orders"])
    for snapshot in bill["orders"]:
        line_sum = sum(Decimal(i["unit_price"]) * i["quantity"] for i in snapshot["items"])
        assert Decimal(snapshot["total"]) == line_sum


def test_billing_table_without_orders(client, occupied_table, waiter_headers, owner_headers):
    resp = client.post(f"{API}/tables/1/send-to-billing", headers=waiter_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Table 1 has no orders to bill."

    table = client.get(f"{API}/tables/1", headers=waiter_headers).json()
    assert table["status"] == "occupied"
    assert client.get(f"{API}/billing/bills", headers=owner_headers).json() == []


def test_billing_unknown_table(client, tables, waiter_headers):
    resp = client.post(f"{API}/tables/31/send-to-billing", headers=waiter_headers)
    assert resp.status_code == 404


def test_failed_billing_changes_nothing(
    client, occupied_table, place_order, waiter_headers, owner_headers, monkeypatch, received
):
    order = place_order(1, [(1, 1)]).json()
    received.clear()

    def broken_remove_multi(db, *, orders):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(crud.order, "remove_multi", broken_remove_multi)

    resp = client.post(f"{API}/tables/1/send-to-billing", headers=waiter_headers)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to process billing. Please try again."
    assert received == []

    monkeypatch.undo()
    assert client.get(f"{API}/billing/bills", headers=owner_headers).json() == []
    table = client.get(f"{API}/tables/1", headers=waiter_headers).json()
    assert table["status"] == "occupied"
    assert table["contact"] == "9876543210"
    orders = client.get(f"{API}/tables/1/orders", headers=waiter_headers).json()["orders"]
    assert [o["id"] for o in orders] == [order["id"]]


def test_send_to_billing_service_propagates_failure(db, tables, event_bus, catalog, monkeypatch):
    table_service.occupy_table(db, table_number=2, contact="555", events=event_bus)
    order_service.place_order(
        db, table_number=2, items=[LineItemCreate(menu_item_id=2, quantity=1)], catalog=catalog, events=event_bus
    )

    def broken_mark_available(db, *, db_obj):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(crud.table, "mark_available", broken_mark_available)
    with pytest.raises(SQLAlchemyError):
        billing_service.send_to_billing(db, table_number=2, events=event_bus)
    monkeypatch.undo()

    assert db.query(Bill).count() == 0
    assert crud.table.get_by_number(db, number=2).status == TableStatus.OCCUPIED


def test_clear_bill(client, occupied_table, place_order, waiter_headers, owner_headers, received):
    place_order(1, [(1, 1)])
    bill = client.post(f"{API}/tables/1/send-to-billing", headers=waiter_headers).json()
    received.clear()

    resp = client.post(f"{API}/billing/bills/{bill['id']}/clear", headers=owner_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "cleared"
    assert resp.json()["cleared_at"] is not None
    assert [(e.kind, e.bill_id) for e in received] == [(EventKind.BILL_CLEARED, bill["id"])]

    assert client.get(f"{API}/billing/bills", headers=owner_headers).json() == []
    cleared = client.get(f"{API}/billing/bills", params={"status": "cleared"}, headers=owner_headers).json()
    assert [b["id"] for b in cleared] == [bill["id"]]


def test_clearing_twice_is_harmless(client, occupied_table, place_order, waiter_headers, owner_headers, received):
    place_order(1, [(1, 1)])
    bill = client.post(f"{API}/tables/1/send-to-billing", headers=waiter_headers).json()
    first = client.post(f"{API}/billing/bills/{bill['id']}/clear", headers=owner_headers).json()
    received.clear()

    again = client.post(f"{API}/billing/bills/{bill['id']}/clear", headers=owner_headers)
    assert again.status_code == 200
    assert again.json()["status"] == "cleared"
    assert again.json()["cleared_at"] == first["cleared_at"]
    assert received == []


def test_clear_unknown_bill(client, owner_headers):
    resp = client.post(f"{API}/billing/bills/999/clear", headers=owner_headers)
    assert resp.status_code == 404


def test_waiter_cannot_see_bills(client, waiter_headers):
    resp = client.get(f"{API}/billing/bills", headers=waiter_headers)
    assert resp.status_code == 403


def test_malformed_snapshot_entries_are_skipped(client, db, owner_headers):
    good = {
        "order_id": 7,
        "status": "completed",
        "created_at": None,
        "total": "90.00",
        "items": [{"menu_item_id": 5, "name": "Tomato Soup", "quantity": 1, "unit_price": "90.00"}],
    }
    db_bill = Bill(
        table_number=4,
        contact="555",
        orders=[good, {"order_id": "not a number"}, "legacy string entry"],
        total=Decimal("90.00"),
        status=BillStatus.PENDING,
    )
    db.add(db_bill)
    db.commit()

    resp = client.get(f"{API}/billing/bills/{db_bill.id}", headers=owner_headers)
    assert resp.status_code == 200
    orders = resp.json()["orders"]
    assert [o["order_id"] for o in orders] == [7]
    assert orders[0]["items"][0]["name"] == "Tomato Soup"


def test_non_list_snapshot_shows_no_orders(client, db, owner_headers):
    db_bill = Bill(table_number=4, orders={"broken": True}, total=Decimal("0.00"), status=BillStatus.PENDING)
    db.add(db_bill)
    db.commit()

    resp = client.get(f"{API}/billing/bills", headers=owner_headers)
    assert resp.status_code == 200
    assert resp.json()[0]["orders"] == []


def test_table_four_full_lifecycle(client, owner_headers, waiter_headers, kitchen_headers):
    assert client.post(f"{API}/tables/", json={"number": 4}, headers=owner_headers).status_code == 201

    occupied = client.post(f"{API}/tables/4/occupy", json={"contact": "9998887776"}, headers=waiter_headers)
    assert occupied.json()["status"] == "occupied"

    order = client.post(
        f"{API}/tables/4/orders",
        json={"items": [{"menu_item_id": 1, "quantity": 2}]},
        headers=waiter_headers,
    ).json()
    assert order["total"] == "360.00"

    client.post(f"{API}/kitchen/orders/{order['id']}/complete", headers=kitchen_headers)
    completed = client.get(f"{API}/kitchen/orders", params={"status": "completed"}, headers=kitchen_headers)
    pending = client.get(f"{API}/kitchen/orders", headers=kitchen_headers)
    assert [o["id"] for o in completed.json()] == [order["id"]]
    assert pending.json() == []

    bill = client.post(f"{API}/tables/4/send-to-billing", headers=waiter_headers).json()
    assert bill["table_number"] == 4
    assert bill["total"] == "360.00"
    assert bill["status"] == "pending"
    assert bill["orders"][0]["status"] == "completed"

    table = client.get(f"{API}/tables/4", headers=waiter_headers).json()
    assert (table["status"], table["contact"]) == ("available", None)
    assert client.get(f"{API}/tables/4/orders", headers=waiter_headers).json()["orders"] == []

    client.post(f"{API}/billing/bills/{bill['id']}/clear", headers=owner_headers)
    client.post(f"{API}/billing/bills/{bill['id']}/clear", headers=owner_headers)
    cleared = client.get(f"{API}/billing/bills", params={"status": "cleared"}, headers=owner_headers).json()
    assert [b["id"] for b in cleared] == [bill["id"]]


def _seat_with_order(db, event_bus, catalog, table_number):
    table_service.occupy_table(db, table_number=table_number, contact="555", events=event_bus)
    return order_service.place_order(
        db,
        table_number=table_number,
        items=[LineItemCreate(menu_item_id=1, quantity=2)],
        catalog=catalog,
        events=event_bus,
    )


def test_order_placed_while_billing_rolls_billing_back(db, tables, event_bus, catalog, received, monkeypatch):
    first = _seat_with_order(db, event_bus, catalog, 2)
    late_orders = []
    create_bill = crud.bill.create

    # Another waiter commits an order after billing has read the table's orders
    def create_after_concurrent_order(session, **kwargs):
        other = TestingSessionLocal()
        try:
            late_orders.append(
                order_service.place_order(
                    other,
                    table_number=2,
                    items=[LineItemCreate(menu_item_id=2, quantity=1)],
                    catalog=catalog,
                    events=event_bus,
                ).id
            )
        finally:
            other.close()
        return create_bill(session, **kwargs)

    monkeypatch.setattr(crud.bill, "create", create_after_concurrent_order)
    received.clear()

    with pytest.raises(ValueError) as exc_info:
        billing_service.send_to_billing(db, table_number=2, events=event_bus)
    assert str(exc_info.value) == CONCURRENT_UPDATE_MESSAGE.format(number=2)
    monkeypatch.undo()

    assert db.query(Bill).count() == 0
    table = crud.table.get_by_number(db, number=2)
    assert (table.status, table.contact) == (TableStatus.OCCUPIED, "555")
    remaining = crud.order.get_multi_by_table(db, table_id=table.id)
    assert sorted(o.id for o in remaining) == sorted([first.id] + late_orders)
    assert [e.kind for e in received] == [EventKind.ORDER_PLACED]

    # Retrying bills everything, including the late order
    bill = billing_service.send_to_billing(db, table_number=2, events=event_bus)
    assert bill.total == Decimal("405.00")
    assert crud.order.get_multi_by_table(db, table_id=table.id) == []


def test_billing_with_stale_table_state_is_rejected(db, tables, event_bus, catalog):
    _seat_with_order(db, event_bus, catalog, 3)

    stale = TestingSessionLocal()
    fresh = TestingSessionLocal()
    try:
        # Load table 3 into the first session before the second one orders on it
        assert crud.table.get_by_number(stale, number=3).contact == "555"
        order_service.place_order(
            fresh,
            table_number=3,
            items=[LineItemCreate(menu_item_id=3, quantity=1)],
            catalog=catalog,
            events=event_bus,
        )

        with pytest.raises(ValueError) as exc_info:
            billing_service.send_to_billing(stale, table_number=3, events=event_bus)
        assert str(exc_info.value) == CONCURRENT_UPDATE_MESSAGE.format(number=3)
    finally:
        stale.close()
        fresh.close()

    assert db.query(Bill).count() == 0
    table = crud.table.get_by_number(db, number=3)
    assert table.status == TableStatus.OCCUPIED
    assert len(crud.order.get_multi_by_table(db, table_id=table.id)) == 2


def test_concurrent_clear_emits_once(db, event_bus, received):
    db_bill = Bill(table_number=5, orders=[], total=Decimal("10.00"), status=BillStatus.PENDING)
    db.add(db_bill)
    db.commit()

    stale = TestingSessionLocal()
    fresh = TestingSessionLocal()
    try:
        # Both requests saw the bill as pending
        assert crud.bill.get(stale, id=db_bill.id).status == BillStatus.PENDING
        first = billing_service.mark_bill_cleared(fresh, bill_id=db_bill.id, events=event_bus)
        second = billing_service.mark_bill_cleared(stale, bill_id=db_bill.id, events=event_bus)

        assert second.status == BillStatus.CLEARED
        assert second.cleared_at == first.cleared_at
    finally:
        stale.close()
        fresh.close()

    assert [(e.kind, e.bill_id) for e in received] == [(EventKind.BILL_CLEARED, db_bill.id)]
