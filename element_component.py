import time
from typing import List, Optional, Tuple

import streamlit as st
import pandas as pd

from data_integrator import delete_customer
from domain.models import Customer
from services.customer_service import build_customer, save_customer

HIGHLIGHT_SECONDS = 2


@st.dialog("Customer")
def customer_form_dialog(customer: Optional[Customer], customers: List[Customer]):
    """
    Add (customer is None) or edit a customer.
    A duplicate closes the dialog and flags the existing card.
    """
    with st.form("customer_form", enter_to_submit=False):
        name = st.text_input("Name", value=customer.name if customer else "")
        shirt = st.text_input(
            "Shirt Measurements",
            value=(customer.shirt_measurements or "") if customer else "",
            placeholder="e.g., 44,55,52/48,54,9,9.5",
        )
        pants = st.text_input(
            "Pants Measurements",
            value=(customer.pants_measurements or "") if customer else "",
            placeholder="e.g., 44,55,52/48,54,9,9.5",
        )
        other = st.text_area(
            "Other Measurements",
            value=(customer.other_measurements or "") if customer else "",
        )
        phone = st.text_input("Phone", value=customer.phone if customer else "")

        submitted = st.form_submit_button("Save Changes" if customer else "Add Customer", type="primary")

    if not submitted:
        return

    candidate = build_customer(
        name,
        phone,
        shirt,
        pants,
        other,
        customer_id=customer.id if customer else None,
    )

    if not candidate.name or not candidate.phone:
        st.error("Name and phone are required.")
        return

    outcome = save_customer(candidate, customers, exclude_id=customer.id if customer else None)

    if outcome.status == "duplicate":
        st.session_state["flash"] = ("error", outcome.message)
        st.session_state["highlight_customer"] = (outcome.duplicate.id, time.time())
        st.rerun()
    elif outcome.status == "failed":
        # keep the dialog open so the user can retry
        st.error(outcome.message)
    else:
        st.session_state["flash"] = ("success", outcome.message)
        st.rerun()


@st.dialog("Delete Customer")
def confirm_delete_dialog(customer: Customer):
    st.write(f"Are you sure you want to delete **{customer.name}**? This action cannot be undone.")

    df = pd.DataFrame(
        [
            ("Name", customer.name),
            ("Phone", customer.phone),
        ],
        columns=["Key", "Value"],
    )
    st.dataframe(df, hide_index=True)

    col_no, col_yes = st.columns(2)

    with col_no:
        if st.button("Cancel", key="confirm_no"):
            st.rerun()
    with col_yes:
        if st.button("Delete", type="primary", key="confirm_yes"):
            ok, msg = delete_customer(customer.id)

            if not ok:
                st.error(f"Failed to delete customer: {msg}")
            else:
                st.session_state["flash"] = ("success", msg)
                st.rerun()


def highlight_remaining(flagged: Optional[Tuple[str, float]], now: float) -> float:
    """Seconds left on a duplicate highlight; 0 when there is none or it ran out."""
    if not flagged:
        return 0
    _, flagged_at = flagged
    return max(0.0, HIGHLIGHT_SECONDS - (now - flagged_at))


def is_highlighted(customer_id: str) -> bool:
    """True for HIGHLIGHT_SECONDS after a duplicate of this customer was blocked."""
    flagged = st.session_state.get("highlight_customer")
    if not highlight_remaining(flagged, time.time()):
        st.session_state.pop("highlight_customer", None)
        return False
    return flagged[0] == customer_id
