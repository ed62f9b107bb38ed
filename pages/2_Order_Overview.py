import streamlit as st
import pandas as pd

from data_integrator import fetch_customers, fetch_orders_with_items
from services.order_service import order_rows_for_display
from utils.formatting import format_rupee
from utils.logging_config import setup_logging

setup_logging()

# -----------------------------------------------------------------------------
# Page config
# -----------------------------------------------------------------------------
st.set_page_config(page_title="Order Overview", page_icon="📋")
st.title("📋 Order Overview")

ok_1, msg_1, customers = fetch_customers()
ok_2, msg_2, orders = fetch_orders_with_items()

if not ok_1:
    st.error("Failed to fetch customers")
if not ok_2:
    st.error("Failed to fetch orders")
    st.stop()

if not orders:
    st.warning("No orders yet.")
    st.stop()

# -----------------------------------------------------------------------------
# Filters
# -----------------------------------------------------------------------------
only_active = st.toggle("Only active orders", value=True)

df_orders = pd.DataFrame(order_rows_for_display(orders, customers))

if only_active:
    df_orders = df_orders[df_orders["Active"]]

if df_orders.empty:
    st.info("No active orders.")
    st.stop()

# -----------------------------------------------------------------------------
# Table + totals
# -----------------------------------------------------------------------------
df_display = df_orders.drop(columns=["Active"]).copy()
for col in ("Total", "Paid", "Pending"):
    df_display[col] = df_display[col].apply(format_rupee)

st.dataframe(df_display, width='stretch', hide_index=True)

col_total, col_paid, col_pending = st.columns(3)
col_total.metric("Grand Total", format_rupee(df_orders["Total"].sum()))
col_paid.metric("Collected", format_rupee(df_orders["Paid"].sum()))
col_pending.metric("Pending", format_rupee(df_orders["Pending"].sum()))

csv = df_orders.drop(columns=["Active"]).to_csv(index=False).encode("utf-8")
st.download_button(
    "Download as CSV",
    data=csv,
    file_name="orders.csv",
    mime="text/csv",
)
