import streamlit as st

from data_integrator import delete_order, fetch_customers, fetch_orders_with_items, save_order
from domain.models import ITEM_STATUS_LABELS, ITEM_STATUSES, PAYMENT_STATUS_LABELS, PAYMENT_STATUSES
from services.customer_service import orders_for_customer
from services.order_service import OrderDraft
from utils.formatting import format_label, format_rupee
from utils.logging_config import setup_logging

setup_logging()

st.set_page_config(
    page_title="Order Form",
    page_icon="✂️"
)

st.sidebar.header("✂️ Order Form")

NEW_ORDER = "new"

# -------------------------------------------------------------------
# Load data
# -------------------------------------------------------------------

ok_1, msg_1, customers = fetch_customers()
ok_2, msg_2, orders = fetch_orders_with_items()

if not ok_1:
    st.error("Could not load customers")
    st.stop()
if not ok_2:
    st.error("Could not load orders")

if not customers:
    st.info("Add a customer first.")
    st.stop()

customer_by_id = {c.id: c for c in customers}

# -------------------------------------------------------------------
# Pick customer + order (defaults come from the Customers page)
# -------------------------------------------------------------------

customer_ids = list(customer_by_id.keys())
preselected_customer = st.session_state.get("selected_customer_id")

customer_id = st.selectbox(
    "Customer",
    customer_ids,
    index=customer_ids.index(preselected_customer) if preselected_customer in customer_ids else None,
    format_func=lambda cid: f"{customer_by_id[cid].name} ({customer_by_id[cid].phone})",
    placeholder="Pick a customer",
)

if customer_id is None:
    st.stop()

customer_orders = {o.id: o for o in orders_for_customer(orders, customer_id)}
order_options = [NEW_ORDER] + list(customer_orders.keys())
preselected_order = st.session_state.get("selected_order_id")

order_choice = st.selectbox(
    "Order",
    order_options,
    index=order_options.index(preselected_order) if preselected_order in order_options else 0,
    format_func=lambda oid: "New order" if oid == NEW_ORDER else (
        f"Due {customer_orders[oid].due_date[:10]} · {format_rupee(customer_orders[oid].total_amount)}"
    ),
)

order_id = None if order_choice == NEW_ORDER else order_choice
st.session_state["selected_customer_id"] = customer_id
st.session_state["selected_order_id"] = order_id

# -------------------------------------------------------------------
# Draft in session state, rebuilt when the customer/order changes
# -------------------------------------------------------------------

source = (customer_id, order_id)
if st.session_state.get("draft_source") != source:
    st.session_state["draft"] = (
        OrderDraft.from_order(customer_orders[order_id]) if order_id else OrderDraft.new()
    )
    st.session_state["draft_source"] = source

draft: OrderDraft = st.session_state["draft"]


def on_quantity_change(i):
    draft.set_item_quantity(i, st.session_state[f"qty_{i}"])


def on_quantity_step(i, delta):
    draft.adjust_item_quantity(i, delta)


def on_price_change(i):
    draft.set_item_price(i, st.session_state[f"price_{i}"])


def on_status_change(i):
    draft.set_item_status(i, st.session_state[f"status_{i}"])


def on_payment_status_change():
    draft.set_payment_status(st.session_state["payment_status"])


def on_amount_paid_change():
    draft.set_amount_paid(st.session_state["amount_paid"])


def on_due_date_change():
    draft.due_date = st.session_state["due_date"]


def on_notes_change():
    draft.notes = st.session_state["notes"]


# The draft is the source of truth: push its values into the widgets every run
for i, item in enumerate(draft.items):
    st.session_state[f"qty_{i}"] = item.quantity
    st.session_state[f"price_{i}"] = float(item.price)
    st.session_state[f"status_{i}"] = item.status
st.session_state["due_date"] = draft.due_date
st.session_state["payment_status"] = draft.payment_status
st.session_state["amount_paid"] = float(draft.amount_paid)
st.session_state["notes"] = draft.notes

# -------------------------------------------------------------------
# Items
# -------------------------------------------------------------------

customer = customer_by_id[customer_id]
st.subheader(f"{'Edit Order' if order_id else 'New Order'} - {customer.name}")

for i, item in enumerate(draft.items):
    label = format_label(item.item_type)
    col_qty, col_step, col_price, col_status = st.columns([2, 1, 2, 2])

    with col_qty:
        st.number_input(
            f"{label} Quantity",
            min_value=0,
            step=1,
            key=f"qty_{i}",
            on_change=on_quantity_change,
            args=(i,),
        )
    with col_step:
        st.button("➖", key=f"dec_{i}", on_click=on_quantity_step, args=(i, -1))
        st.button("➕", key=f"inc_{i}", on_click=on_quantity_step, args=(i, 1))
    with col_price:
        st.number_input(
            "Price (₹)",
            min_value=0.0,
            step=1.0,
            key=f"price_{i}",
            on_change=on_price_change,
            args=(i,),
        )
    with col_status:
        st.selectbox(
            "Status",
            ITEM_STATUSES,
            format_func=ITEM_STATUS_LABELS.get,
            key=f"status_{i}",
            on_change=on_status_change,
            args=(i,),
        )

    st.caption(f"Subtotal: {format_rupee(item.subtotal)}")

st.divider()

# -------------------------------------------------------------------
# Due date + payment
# -------------------------------------------------------------------

col_due, col_payment = st.columns(2)

with col_due:
    st.date_input("Due Date", key="due_date", on_change=on_due_date_change)
with col_payment:
    st.selectbox(
        "Payment Status",
        PAYMENT_STATUSES,
        format_func=PAYMENT_STATUS_LABELS.get,
        key="payment_status",
        on_change=on_payment_status_change,
    )

col_total, col_paid, col_pending = st.columns(3)

with col_total:
    st.metric("Total Amount", format_rupee(draft.total_amount))
with col_paid:
    st.number_input(
        "Amount Paid",
        min_value=0.0,
        step=1.0,
        key="amount_paid",
        on_change=on_amount_paid_change,
    )
with col_pending:
    st.metric("Amount Pending", format_rupee(draft.amount_pending))

st.text_area("Notes", key="notes", on_change=on_notes_change)

# -------------------------------------------------------------------
# Save / delete
# -------------------------------------------------------------------

col_save, col_delete = st.columns(2)

with col_save:
    if st.button("Update Order" if order_id else "Create Order", type="primary"):
        ok, msg, saved_id = save_order(draft, customer_id=customer_id, order_id=order_id)

        if not ok:
            # draft is untouched, the user can just press save again
            st.error(msg)
        else:
            st.session_state["flash"] = ("success", msg)
            st.session_state.pop("draft_source", None)
            st.session_state["selected_order_id"] = None
            st.switch_page("Customers.py")

with col_delete:
    if order_id and st.button("Delete Order"):
        ok, msg = delete_order(order_id)

        if not ok:
            st.error(f"Failed to delete order: {msg}")
        else:
            st.session_state["flash"] = ("success", msg)
            st.session_state.pop("draft_source", None)
            st.session_state["selected_order_id"] = None
            st.switch_page("Customers.py")
