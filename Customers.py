import time

import streamlit as st

from data_integrator import fetch_customers, fetch_orders_with_items
from element_component import (
    HIGHLIGHT_SECONDS,
    confirm_delete_dialog,
    customer_form_dialog,
    highlight_remaining,
    is_highlighted,
)
from services.customer_service import active_orders, filter_customers, orders_for_customer
from utils.formatting import format_label, format_rupee
from utils.logging_config import setup_logging

setup_logging()

st.set_page_config(
    page_title="Customers",
    page_icon="🧵"
)

st.sidebar.header("🧵 Customers")
st.title("Nizy Fashions")

# messages set by dialogs before their st.rerun()
flash = st.session_state.pop("flash", None)
if flash:
    kind, message = flash
    if kind == "success":
        st.success(message)
    else:
        st.error(message)

ok_1, msg_1, customers = fetch_customers()
ok_2, msg_2, orders = fetch_orders_with_items()

if not ok_1:
    st.error("Failed to fetch customers")
if not ok_2:
    st.error("Failed to fetch orders")


def open_order_form(customer_id, order_id=None):
    st.session_state["selected_customer_id"] = customer_id
    st.session_state["selected_order_id"] = order_id
    st.switch_page("pages/1_Order_Form.py")


col_search, col_add = st.columns([3, 1])

with col_search:
    query = st.text_input(
        "Search",
        placeholder="Search customers by name or phone...",
        label_visibility="collapsed",
    )

with col_add:
    if st.button("➕ Add Customer", type="primary", width="stretch"):
        customer_form_dialog(None, customers)

visible = filter_customers(customers, query)

if not visible:
    st.info("No customers found.")


def render_customer_cards(visible):
    for customer in visible:
        with st.container(border=True):
            if is_highlighted(customer.id):
                st.warning("This customer already exists")

            col_info, col_actions = st.columns([3, 2])

            with col_info:
                st.subheader(customer.name)
                st.markdown(f"📞 [{customer.phone}](tel:{customer.phone})")

            with col_actions:
                col_order, col_edit, col_delete = st.columns(3)
                if col_order.button("➕", key=f"add_order_{customer.id}", help="Add order"):
                    open_order_form(customer.id)
                if col_edit.button("✏️", key=f"edit_{customer.id}", help="Edit customer"):
                    customer_form_dialog(customer, customers)
                if col_delete.button("🗑️", key=f"delete_{customer.id}", help="Delete customer"):
                    confirm_delete_dialog(customer)

            for label, value in (
                    ("Shirt Measurements", customer.shirt_measurements),
                    ("Pants Measurements", customer.pants_measurements),
                    ("Other Measurements", customer.other_measurements),
            ):
                if value:
                    st.caption(f"**{label}:** {value}")

            current = active_orders(orders_for_customer(orders, customer.id))
            if not current:
                continue

            st.markdown("**Active Orders**")
            for order in current:
                with st.container(border=True):
                    st.write(
                        f"Due: **{order.due_date[:10]}** · "
                        f"{format_label(order.payment_status)}"
                    )

                    for item in order.items:
                        if item.quantity > 0:
                            st.caption(
                                f"{item.quantity}× {format_label(item.item_type)} · "
                                f"{format_label(item.status)} · {format_rupee(item.subtotal)}"
                            )

                    col_total, col_paid, col_pending = st.columns(3)
                    col_total.metric("Total", format_rupee(order.total_amount))
                    col_paid.metric("Paid", format_rupee(order.amount_paid))
                    col_pending.metric("Pending", format_rupee(order.amount_pending))

                    if st.button("Edit order", key=f"edit_order_{order.id}"):
                        open_order_form(customer.id, order.id)


# rerun the cards on a timer while a duplicate highlight is showing so it clears by itself
flagged = st.session_state.get("highlight_customer")
refresh = HIGHLIGHT_SECONDS if highlight_remaining(flagged, time.time()) else None
st.fragment(run_every=refresh)(render_customer_cards)(visible)
