# tailor/services/customer_service.py

import logging
import re
from typing import Iterable, List, Optional

import data_integrator
from domain.models import Customer, Order, SaveOutcome, blank_to_none

logger = logging.getLogger(__name__)

NON_DIGITS = re.compile(r"\D")


def normalize_phone(raw: Optional[str]) -> str:
    return NON_DIGITS.sub("", raw or "")


def build_customer(
        name: str,
        phone: str,
        shirt_measurements: Optional[str] = None,
        pants_measurements: Optional[str] = None,
        other_measurements: Optional[str] = None,
        customer_id: Optional[str] = None,
) -> Customer:
    """
    Build a Customer from raw form input: trimmed name, digits-only phone,
    empty measurements stored as None.
    """
    return Customer(
        id=customer_id,
        name=(name or "").strip(),
        phone=normalize_phone(phone),
        shirt_measurements=blank_to_none(shirt_measurements),
        pants_measurements=blank_to_none(pants_measurements),
        other_measurements=blank_to_none(other_measurements),
    )


def find_duplicate_customer(
        candidate: Customer,
        existing: Iterable[Customer],
        exclude_id: Optional[str] = None,
) -> Optional[Customer]:
    """
    First customer in `existing` that matches `candidate` on all of: name
    (case-insensitive), phone, shirt, pants and other measurements.

    `exclude_id` is the record being edited; it never counts as its own duplicate.
    """
    candidate_name = candidate.name.lower()

    for other in existing:
        if exclude_id is not None and other.id == exclude_id:
            continue
        if (
                other.name.lower() == candidate_name
                and other.phone == candidate.phone
                and other.shirt_measurements == candidate.shirt_measurements
                and other.pants_measurements == candidate.pants_measurements
                and other.other_measurements == candidate.other_measurements
        ):
            return other

    return None


def save_customer(
        candidate: Customer,
        existing: List[Customer],
        exclude_id: Optional[str] = None,
) -> SaveOutcome:
    """
    Insert (no exclude_id) or update (exclude_id) a customer.
    A duplicate aborts the save before anything is written.
    """
    duplicate = find_duplicate_customer(candidate, existing, exclude_id)
    if duplicate:
        logger.info("Customer %r already exists (id=%s), save aborted", candidate.name, duplicate.id)
        return SaveOutcome(
            status="duplicate",
            message="This customer already exists",
            duplicate=duplicate,
        )

    payload = candidate.to_payload()
    if exclude_id is not None:
        ok, msg, row = data_integrator.update_customer(exclude_id, payload)
    else:
        ok, msg, row = data_integrator.insert_customer(payload)

    if not ok:
        return SaveOutcome(status="failed", message=f"Failed to save customer: {msg}")

    return SaveOutcome(status="saved", message=msg, record=row)


def filter_customers(customers: List[Customer], query: str) -> List[Customer]:
    """Search box: name contains the query (any case) or phone contains it."""
    if not query:
        return list(customers)

    needle = query.lower()
    return [c for c in customers if needle in c.name.lower() or query in c.phone]


def orders_for_customer(orders: List[Order], customer_id: Optional[str]) -> List[Order]:
    return [o for o in orders if o.customer_id == customer_id]


def active_orders(orders: List[Order]) -> List[Order]:
    return [o for o in orders if o.is_active]
