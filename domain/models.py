# tailor/domain/models.py

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

ItemType = Literal["shirt", "pants", "other"]
ItemStatus = Literal["not_started", "in_progress", "completed", "delivered"]
PaymentStatus = Literal["unpaid", "partial_payment", "paid"]

ITEM_TYPES = ("shirt", "pants", "other")
ITEM_STATUSES = ("not_started", "in_progress", "completed", "delivered")
PAYMENT_STATUSES = ("unpaid", "partial_payment", "paid")

ITEM_STATUS_LABELS = {
    "not_started": "Not Started",
    "in_progress": "In Progress",
    "completed": "Completed",
    "delivered": "Delivered",
}

PAYMENT_STATUS_LABELS = {
    "unpaid": "Unpaid",
    "partial_payment": "Partial Payment",
    "paid": "Paid",
}

DEFAULT_DUE_DAYS = 7


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Empty or whitespace-only text is stored as NULL."""
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class Customer:
    """
    One row of the `customers` table.
    Blank measurements are kept as None, the way the backend stores them.
    """
    id: Optional[str]
    name: str
    phone: str
    shirt_measurements: Optional[str] = None
    pants_measurements: Optional[str] = None
    other_measurements: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Customer":
        return cls(
            id=row.get("id"),
            name=row.get("name") or "",
            phone=row.get("phone") or "",
            # older rows hold "" for empty measurements
            shirt_measurements=blank_to_none(row.get("shirt_measurements")),
            pants_measurements=blank_to_none(row.get("pants_measurements")),
            other_measurements=blank_to_none(row.get("other_measurements")),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def to_payload(self) -> Dict[str, Any]:
        """Writable columns only (no id / timestamps)."""
        return {
            "name": self.name,
            "phone": self.phone,
            "shirt_measurements": self.shirt_measurements,
            "pants_measurements": self.pants_measurements,
            "other_measurements": self.other_measurements,
        }


@dataclass
class OrderItem:
    """
    One line item of an order: a garment kind with quantity, unit price and
    its own tailoring status.
    """
    item_type: str
    quantity: int = 0
    price: float = 0
    status: str = "not_started"
    id: Optional[str] = None
    order_id: Optional[str] = None

    @property
    def subtotal(self) -> float:
        return self.quantity * self.price

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "OrderItem":
        return cls(
            item_type=row["item_type"],
            quantity=row.get("quantity") or 0,
            price=row.get("price") or 0,
            status=row.get("status") or "not_started",
            id=row.get("id"),
            order_id=row.get("order_id"),
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "item_type": self.item_type,
            "quantity": self.quantity,
            "status": self.status or "not_started",
            "price": self.price,
        }


@dataclass
class Order:
    """
    A garment order as stored in `orders`, with its `order_items` nested.
    """
    id: Optional[str]
    customer_id: Optional[str]
    due_date: str
    total_amount: float = 0
    amount_paid: float = 0
    payment_status: str = "unpaid"
    notes: Optional[str] = None
    items: List[OrderItem] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def amount_pending(self) -> float:
        return self.total_amount - self.amount_paid

    @property
    def is_active(self) -> bool:
        # an order stays on the customer card until every item is delivered
        return any(item.status != "delivered" for item in self.items)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Order":
        return cls(
            id=row.get("id"),
            customer_id=row.get("customer_id"),
            due_date=row.get("due_date") or "",
            total_amount=row.get("total_amount") or 0,
            amount_paid=row.get("amount_paid") or 0,
            payment_status=row.get("payment_status") or "unpaid",
            notes=row.get("notes"),
            items=[OrderItem.from_row(i) for i in (row.get("items") or [])],
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass
class SaveOutcome:
    """
    Result of a save attempt.

    status:
      - "saved": the write went through, `record` holds the stored row
      - "duplicate": nothing was written, `duplicate` is the existing customer
      - "failed": the backend rejected or could not be reached
    """
    status: Literal["saved", "duplicate", "failed"]
    message: str
    record: Optional[Dict[str, Any]] = None
    duplicate: Optional[Customer] = None

    @property
    def ok(self) -> bool:
        return self.status == "saved"
