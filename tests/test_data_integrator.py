"""
Tests for the Supabase data layer against the in-memory fake
"""
from datetime import date

import data_integrator
from services.order_service import OrderDraft


def draft_with(*slots):
    draft = OrderDraft.new(today=date(2024, 1, 1))
    for i, (qty, price) in enumerate(slots):
        draft.set_item_quantity(i, qty)
        draft.set_item_price(i, price)
    return draft


class TestFetch:

    def test_customers_ordered_by_name(self, fake_db):
        fake_db.tables["customers"] = [
            {"id": "c2", "name": "Zoya", "phone": "2"},
            {"id": "c1", "name": "Asha", "phone": "1"},
        ]

        ok, msg, customers = data_integrator.fetch_customers()

        assert ok
        assert [c.name for c in customers] == ["Asha", "Zoya"]

    def test_orders_newest_first_with_items(self, fake_db):
        fake_db.tables["orders"] = [
            {"id": "o1", "customer_id": "c1", "due_date": "2024-01-08", "created_at": "2024-01-01",
             "total_amount": 500, "amount_paid": 0, "payment_status": "unpaid",
             "items": [{"id": "i1", "item_type": "shirt", "quantity": 1, "status": "not_started", "price": 500}]},
            {"id": "o2", "customer_id": "c1", "due_date": "2024-01-09", "created_at": "2024-01-02",
             "total_amount": 0, "amount_paid": 0, "payment_status": "unpaid", "items": None},
        ]

        ok, msg, orders = data_integrator.fetch_orders_with_items()

        assert ok
        assert [o.id for o in orders] == ["o2", "o1"]
        assert orders[0].items == []
        assert orders[1].items[0].subtotal == 500

    def test_fetch_failure_returns_empty_list(self, fake_db):
        fake_db.fail_on.add(("orders", "select"))

        ok, msg, orders = data_integrator.fetch_orders_with_items()

        assert not ok
        assert orders == []
        assert "orders select rejected" in msg


class TestSaveOrder:
    """Item rows are always replaced wholesale, never diffed"""

    def test_create_inserts_order_then_non_zero_items(self, fake_db):
        draft = draft_with((2, 500), (1, 700), (0, 300))

        ok, msg, order_id = data_integrator.save_order(draft, customer_id="c1")

        assert ok
        assert msg == "Order created successfully"
        assert fake_db.ops() == [("orders", "insert"), ("order_items", "insert")]

        order = fake_db.tables["orders"][0]
        assert order["id"] == order_id
        assert order["customer_id"] == "c1"
        assert order["total_amount"] == 1700

        items = fake_db.tables["order_items"]
        assert [(i["item_type"], i["quantity"]) for i in items] == [("shirt", 2), ("pants", 1)]
        assert all(i["order_id"] == order_id for i in items)

    def test_update_replaces_all_items(self, fake_db):
        fake_db.tables["orders"] = [{"id": "o1", "customer_id": "c1", "total_amount": 500}]
        fake_db.tables["order_items"] = [
            {"id": "old-1", "order_id": "o1", "item_type": "shirt", "quantity": 1, "price": 500},
            {"id": "other", "order_id": "o2", "item_type": "pants", "quantity": 1, "price": 700},
        ]
        draft = draft_with((0, 500), (2, 700))

        ok, msg, order_id = data_integrator.save_order(draft, order_id="o1")

        assert ok
        assert order_id == "o1"
        assert fake_db.ops() == [
            ("orders", "update"),
            ("order_items", "delete"),
            ("order_items", "insert"),
        ]
        assert fake_db.tables["orders"][0]["total_amount"] == 1400

        rows = {(r["order_id"], r["item_type"], r["quantity"]) for r in fake_db.tables["order_items"]}
        assert rows == {("o2", "pants", 1), ("o1", "pants", 2)}

    def test_all_zero_items_skips_item_insert(self, fake_db):
        draft = draft_with()

        ok, msg, order_id = data_integrator.save_order(draft, customer_id="c1")

        assert ok
        assert fake_db.ops() == [("orders", "insert")]

    def test_failure_stops_and_leaves_draft_untouched(self, fake_db):
        fake_db.tables["orders"] = [{"id": "o1", "customer_id": "c1"}]
        fake_db.fail_on.add(("order_items", "delete"))
        draft = draft_with((2, 500))
        draft.set_amount_paid(400)

        ok, msg, order_id = data_integrator.save_order(draft, order_id="o1")

        assert not ok
        assert msg.startswith("Failed to save order")
        assert ("order_items", "insert") not in fake_db.ops()
        assert draft.items[0].quantity == 2
        assert draft.amount_paid == 400
        assert draft.payment_status == "partial_payment"

    def test_retry_after_failure(self, fake_db):
        fake_db.fail_on.add(("orders", "insert"))
        draft = draft_with((1, 500))

        ok, _, _ = data_integrator.save_order(draft, customer_id="c1")
        assert not ok

        fake_db.fail_on.clear()
        ok, _, order_id = data_integrator.save_order(draft, customer_id="c1")
        assert ok
        assert len(fake_db.tables["order_items"]) == 1

    def test_new_order_rolled_back_when_items_fail(self, fake_db):
        fake_db.fail_on.add(("order_items", "insert"))
        draft = draft_with((2, 500), (1, 700))

        ok, msg, order_id = data_integrator.save_order(draft, customer_id="c1")

        assert not ok
        assert order_id is None
        assert fake_db.tables["orders"] == []

        fake_db.fail_on.clear()
        ok, _, order_id = data_integrator.save_order(draft, customer_id="c1", order_id=None)

        assert ok
        assert [o["id"] for o in fake_db.tables["orders"]] == [order_id]
        assert len(fake_db.tables["order_items"]) == 2

    def test_update_keeps_order_when_items_fail(self, fake_db):
        fake_db.tables["orders"] = [{"id": "o1", "customer_id": "c1"}]
        fake_db.fail_on.add(("order_items", "insert"))

        ok, msg, order_id = data_integrator.save_order(draft_with((1, 500)), order_id="o1")

        assert not ok
        assert order_id == "o1"
        assert fake_db.tables["orders"] == [{"id": "o1", "customer_id": "c1", **fake_db.calls[0][2]}]
        assert ("orders", "delete") not in fake_db.ops()


class TestDelete:

    def test_delete_order_removes_items_first(self, fake_db):
        fake_db.tables["orders"] = [{"id": "o1"}]
        fake_db.tables["order_items"] = [{"id": "i1", "order_id": "o1"}]

        ok, msg = data_integrator.delete_order("o1")

        assert ok
        assert fake_db.ops() == [("order_items", "delete"), ("orders", "delete")]
        assert fake_db.tables["orders"] == []
        assert fake_db.tables["order_items"] == []

    def test_delete_order_stops_when_items_fail(self, fake_db):
        fake_db.fail_on.add(("order_items", "delete"))

        ok, msg = data_integrator.delete_order("o1")

        assert not ok
        assert ("orders", "delete") not in fake_db.ops()

    def test_delete_customer(self, fake_db):
        fake_db.tables["customers"] = [{"id": "c1", "name": "Asha"}]

        ok, msg = data_integrator.delete_customer("c1")

        assert ok
        assert msg == "Customer deleted successfully"
        assert fake_db.tables["customers"] == []
