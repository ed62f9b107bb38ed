# tailor/services/order_service.py

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from domain.models import (
    Customer,
    DEFAULT_DUE_DAYS,
    ITEM_STATUSES,
    ITEM_TYPES,
    Order,
    OrderItem,
    PAYMENT_STATUSES,
)
from utils.formatting import format_label
from utils.numbers import to_amount, to_int

logger = logging.getLogger(__name__)


@dataclass
class OrderDraft:
    """
    An order being edited in the order form.

    Keeps total, amount paid, amount pending and payment status consistent.
    Editing the amount derives the status (`set_amount_paid`); editing the
    status sometimes derives the amount (`set_payment_status`). Editing items
    only changes the total: an amount paid against an older, larger total is
    left as is, so `amount_pending` can go negative until the amount is edited.
    """
    items: List[OrderItem]
    due_date: date
    payment_status: str = "unpaid"
    amount_paid: float = 0
    notes: str = ""

    @classmethod
    def new(
            cls,
            item_types: Sequence[str] = ITEM_TYPES,
            today: Optional[date] = None,
    ) -> "OrderDraft":
        today = today or date.today()
        return cls(
            items=[OrderItem(item_type=t) for t in item_types],
            due_date=today + timedelta(days=DEFAULT_DUE_DAYS),
        )

    @classmethod
    def from_order(cls, order: Order, item_types: Sequence[str] = ITEM_TYPES) -> "OrderDraft":
        """
        Load a stored order into the form: one slot per item kind, filled from
        the order's item of that kind, or empty when the order has none.
        """
        by_type: Dict[str, OrderItem] = {}
        for item in order.items:
            by_type.setdefault(item.item_type, item)

        slots = [
            replace(by_type[t]) if t in by_type else OrderItem(item_type=t)
            for t in item_types
        ]
        # kinds outside the fixed set still get a slot
        slots += [replace(item) for t, item in by_type.items() if t not in item_types]

        try:
            due = date.fromisoformat(order.due_date[:10])
        except ValueError:
            logger.warning("Order %s has unreadable due_date %r, using default", order.id, order.due_date)
            due = date.today() + timedelta(days=DEFAULT_DUE_DAYS)

        return cls(
            items=slots,
            due_date=due,
            payment_status=order.payment_status,
            amount_paid=order.amount_paid,
            notes=order.notes or "",
        )

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    def compute_total(self) -> float:
        return sum(item.quantity * item.price for item in self.items)

    @property
    def total_amount(self) -> float:
        return self.compute_total()

    @property
    def amount_pending(self) -> float:
        return self.total_amount - self.amount_paid

    # ------------------------------------------------------------------
    # Line item edits
    # ------------------------------------------------------------------

    def set_item_quantity(self, index: int, quantity: Any) -> None:
        self.items[index].quantity = max(0, to_int(quantity))

    def adjust_item_quantity(self, index: int, delta: int) -> None:
        """+/- buttons: never goes below zero."""
        self.set_item_quantity(index, self.items[index].quantity + to_int(delta))

    def set_item_price(self, index: int, price: Any) -> None:
        self.items[index].price = max(0, to_amount(price))

    def set_item_status(self, index: int, status: str) -> None:
        if status not in ITEM_STATUSES:
            logger.warning("Ignoring unknown item status %r", status)
            return
        self.items[index].status = status

    # ------------------------------------------------------------------
    # Payment edits
    # ------------------------------------------------------------------

    def set_payment_status(self, status: str) -> None:
        if status not in PAYMENT_STATUSES:
            logger.warning("Ignoring unknown payment status %r", status)
            return

        self.payment_status = status
        if status == "paid":
            self.amount_paid = self.total_amount
        elif status == "unpaid":
            self.amount_paid = 0
        # partial_payment keeps whatever amount was entered

    def set_amount_paid(self, amount: Any) -> None:
        total = self.total_amount
        valid_amount = min(max(0, to_amount(amount)), total)
        self.amount_paid = valid_amount

        if valid_amount == 0:
            self.payment_status = "unpaid"
        elif valid_amount == total:
            self.payment_status = "paid"
        else:
            self.payment_status = "partial_payment"

    # ------------------------------------------------------------------
    # Persistence shape
    # ------------------------------------------------------------------

    def finalize(self) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        """
        Returns (order_fields, item_rows) ready for the backend.
        Zero-quantity slots are dropped; the draft itself is not touched.
        """
        order_fields = {
            "due_date": self.due_date.isoformat(),
            "payment_status": self.payment_status,
            "total_amount": self.total_amount,
            "amount_paid": self.amount_paid,
            "notes": self.notes,
        }
        item_rows = [item.to_row() for item in self.items if item.quantity > 0]
        return order_fields, item_rows


def describe_items(items: Iterable[OrderItem]) -> str:
    """'2× Shirt, 1× Pants' for items with a quantity."""
    return ", ".join(
        f"{item.quantity}× {format_label(item.item_type)}"
        for item in items
        if item.quantity > 0
    )


def order_rows_for_display(orders: List[Order], customers: List[Customer]) -> List[Dict[str, Any]]:
    """
    Flatten orders for the overview table, one dict per order.
    """
    names = {c.id: c.name for c in customers}
    rows = []

    for order in orders:
        rows.append(
            {
                "Customer": names.get(order.customer_id, "-"),
                "Due Date": order.due_date[:10],
                "Items": describe_items(order.items) or "-",
                "Total": order.total_amount,
                "Paid": order.amount_paid,
                "Pending": order.amount_pending,
                "Payment": format_label(order.payment_status),
                "Active": order.is_active,
            }
        )

    return rows
