import logging
from typing import Dict, List, Any, Tuple, Optional

from domain.models import Customer, Order
from supabase_client import get_supabase_client, get_schema

logger = logging.getLogger(__name__)

ORDER_ITEMS_SELECT = """
    *,
    items:order_items (
        id,
        item_type,
        quantity,
        status,
        price
    )
"""


def _table(table_name: str):
    return get_supabase_client().schema(get_schema()).table(table_name)


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------

def fetch_customers() -> Tuple[bool, str, List[Customer]]:
    """
    All customers, ordered by name.
    Returns (ok, message, customers)
    """
    try:
        resp = _table("customers").select("*").order("name").execute()

        if getattr(resp, "error", None):
            return False, f"Fetch customers failed: {resp.error}", []

        return True, "Fetched", [Customer.from_row(row) for row in (resp.data or [])]

    except Exception as e:
        logger.error("Failed to fetch customers: %s", e)
        return False, f"Failed to fetch customers: {e}", []


def insert_customer(payload: Dict[str, Any]) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    """
    Insert a single customer row.
    Returns (ok, message, inserted_row)
    """
    try:
        resp = _table("customers").insert(payload).execute()

        if getattr(resp, "error", None):
            return False, f"Insert customer failed: {resp.error}", None

        inserted = resp.data[0] if resp.data else None
        logger.info("Inserted customer %s", inserted.get("id") if inserted else None)
        return True, "Customer added successfully", inserted

    except Exception as e:
        logger.error("Failed to insert customer: %s", e)
        return False, str(e), None


def update_customer(customer_id: str, payload: Dict[str, Any]) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    try:
        resp = _table("customers").update(payload).eq("id", customer_id).execute()

        if getattr(resp, "error", None):
            return False, f"Update customer failed: {resp.error}", None

        updated = resp.data[0] if resp.data else None
        logger.info("Updated customer %s", customer_id)
        return True, "Customer updated successfully", updated

    except Exception as e:
        logger.error("Failed to update customer %s: %s", customer_id, e)
        return False, str(e), None


def delete_customer(customer_id: str) -> Tuple[bool, str]:
    try:
        resp = _table("customers").delete().eq("id", customer_id).execute()

        if getattr(resp, "error", None):
            return False, f"Delete customer failed: {resp.error}"

        logger.info("Deleted customer %s", customer_id)
        return True, "Customer deleted successfully"

    except Exception as e:
        logger.error("Failed to delete customer %s: %s", customer_id, e)
        return False, str(e)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

def fetch_orders_with_items() -> Tuple[bool, str, List[Order]]:
    """
    All orders with their items nested, newest first.
    Returns (ok, message, orders)
    """
    try:
        resp = (
            _table("orders")
            .select(ORDER_ITEMS_SELECT)
            .order("created_at", desc=True)
            .execute()
        )

        if getattr(resp, "error", None):
            return False, f"Fetch orders failed: {resp.error}", []

        # orders without items come back with items = null
        orders = [Order.from_row({**row, "items": row.get("items") or []}) for row in (resp.data or [])]
        return True, "Fetched", orders

    except Exception as e:
        logger.error("Failed to fetch orders: %s", e)
        return False, f"Failed to fetch orders: {e}", []


def insert_order(fields: Dict[str, Any]) -> Tuple[bool, str, Optional[str]]:
    """
    Insert the scalar fields of an order.
    Returns (ok, message, new_order_id)
    """
    try:
        resp = _table("orders").insert(fields).execute()

        if getattr(resp, "error", None):
            return False, f"Insert order failed: {resp.error}", None

        if not resp.data:
            return False, "Insert order failed: no data returned", None

        return True, "Inserted", resp.data[0]["id"]

    except Exception as e:
        logger.error("Failed to insert order: %s", e)
        return False, str(e), None


def update_order(order_id: str, fields: Dict[str, Any]) -> Tuple[bool, str]:
    try:
        resp = _table("orders").update(fields).eq("id", order_id).execute()

        if getattr(resp, "error", None):
            return False, f"Update order failed: {resp.error}"

        return True, "Updated"

    except Exception as e:
        logger.error("Failed to update order %s: %s", order_id, e)
        return False, str(e)


def delete_items_for_order(order_id: str) -> Tuple[bool, str]:
    try:
        resp = _table("order_items").delete().eq("order_id", order_id).execute()

        if getattr(resp, "error", None):
            return False, f"Delete order items failed: {resp.error}"

        return True, "Deleted"

    except Exception as e:
        logger.error("Failed to delete items of order %s: %s", order_id, e)
        return False, str(e)


def insert_order_items(rows: List[Dict[str, Any]]) -> Tuple[bool, str]:
    """
    Bulk insert item rows. Each row must already carry its order_id.
    """
    if not rows:
        return True, "Nothing to insert"

    try:
        resp = _table("order_items").insert(rows).execute()

        if getattr(resp, "error", None):
            return False, f"Insert order items failed: {resp.error}"

        return True, f"Inserted {len(rows)} items"

    except Exception as e:
        logger.error("Failed to insert order items: %s", e)
        return False, str(e)


def delete_order(order_id: str) -> Tuple[bool, str]:
    """
    Delete an order and its items (items first).
    """
    ok_items, msg_items = delete_items_for_order(order_id)
    if not ok_items:
        return False, msg_items

    try:
        resp = _table("orders").delete().eq("id", order_id).execute()

        if getattr(resp, "error", None):
            return False, f"Delete order failed: {resp.error}"

        logger.info("Deleted order %s", order_id)
        return True, "Order deleted successfully"

    except Exception as e:
        logger.error("Failed to delete order %s: %s", order_id, e)
        return False, str(e)


def save_order(
        draft,
        customer_id: Optional[str] = None,
        order_id: Optional[str] = None,
) -> Tuple[bool, str, Optional[str]]:
    """
    Persist an OrderDraft.

    Behaviour:
      - order_id given (update):
          -> update the order's scalar fields
          -> delete every existing item row of the order
          -> insert the finalized non-zero rows fresh
      - no order_id (create):
          -> insert the order for customer_id
          -> insert the finalized non-zero rows
          -> if the rows fail, delete the new order again (returns id None)

    Item rows are never diffed. The draft is not modified, so a failed save
    can be retried without re-entering anything.
    Returns (ok, message, order_id)
    """
    order_fields, item_rows = draft.finalize()
    is_new = False

    if order_id:
        ok, msg = update_order(order_id, order_fields)
        if not ok:
            return False, f"Failed to save order: {msg}", order_id

        ok, msg = delete_items_for_order(order_id)
        if not ok:
            return False, f"Failed to save order: {msg}", order_id

        success_msg = "Order updated successfully"
    else:
        ok, msg, order_id = insert_order({"customer_id": customer_id, **order_fields})
        if not ok:
            return False, f"Failed to save order: {msg}", None

        success_msg = "Order created successfully"
        is_new = True

    ok, msg = insert_order_items([{"order_id": order_id, **row} for row in item_rows])
    if not ok:
        if not is_new:
            return False, f"Failed to save order: {msg}", order_id

        # undo the half-created order so a retry creates it again cleanly
        ok_undo, msg_undo = delete_order(order_id)
        if not ok_undo:
            logger.critical("Order %s left without items, rollback failed: %s", order_id, msg_undo)
        return False, f"Failed to save order: {msg}", None

    logger.info("Saved order %s with %d items", order_id, len(item_rows))
    return True, success_msg, order_id
