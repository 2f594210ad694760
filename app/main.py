import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date

import streamlit as st
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from expense_core.config import get_settings
from expense_core.domain import DEFAULT_CATEGORIES
from expense_core.functional import validate_budget_form, validate_expense_form
from expense_core.logging_utils import get_logger
from expense_core.services import BudgetService, ExpenseService, ReportService
from expense_core.store import JsonFileStore, records_as_dicts

LOGGER = get_logger(__name__)

settings = get_settings()
store = JsonFileStore(settings.data_directory)
expense_service = ExpenseService(store)
budget_service = BudgetService(store)
report_service = ReportService(store)

st.set_page_config(page_title="Expense Buddy", layout="wide")


def money(value) -> str:
    return f"{settings.currency_symbol}{float(value):,.2f}"


def expenses_df(expenses) -> pd.DataFrame:
    df = pd.DataFrame(records_as_dicts(expenses), columns=["id", "date", "amount", "category", "description"])
    if not df.empty:
        df["date"] = pd.to_datetime(df["date"], errors="coerce").dt.strftime("%Y-%m-%d")
        df["amount"] = df["amount"].astype(float)
        df["description"] = df["description"].fillna("")
    return df


def render_budget_rows(rows, with_actions: bool = False):
    if not rows:
        st.info("No budgets yet.")
        return
    for row in rows:
        b = row.budget
        c1, c2 = st.columns([4, 1])
        with c1:
            label = f"**{b.category}**: {money(row.spent)} / {money(b.amount)} ({row.progress.percent}%)"
            if row.progress.over:
                label += " · :red[over budget]"
            st.markdown(label)
            st.progress(row.progress.percent / 100)
        if with_actions:
            with c2:
                if st.button("Edit", key=f"edit_{b.id}"):
                    st.session_state.budget_form = {"id": b.id, "category": b.category, "amount": str(b.amount)}
                    st.rerun()
                if st.button("Delete", key=f"del_{b.id}"):
                    budget_service.delete(b.id)
                    st.rerun()


if "expense_form" not in st.session_state:
    st.session_state.expense_form = {}
if "budget_form" not in st.session_state:
    st.session_state.budget_form = {}

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Dashboard", "🧾 Expenses", "💰 Budgets", "📊 Analytics"]
)

if menu == "🏠 Dashboard":
    st.title("🏠 Dashboard")
    st.caption("Overview of your finances at a glance")
    view = report_service.dashboard(settings.recent_limit)

    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric(f"Spent in {view['month']}", money(view["month_total"]))
    with k2:
        st.metric("Total budget", money(view["total_budget"]))
    with k3:
        st.metric("Remaining", money(view["remaining"]))

    left, right = st.columns([3, 2])
    with left:
        st.subheader("Recent expenses")
        recent = expenses_df(view["recent"])
        if recent.empty:
            st.info("No expenses yet. Add your first expense.")
        else:
            st.table(recent[["date", "category", "description", "amount"]].assign(
                amount=lambda x: x["amount"].map(money)
            ).reset_index(drop=True))
    with right:
        st.subheader("Budgets")
        render_budget_rows(view["rows"])

elif menu == "🧾 Expenses":
    st.title("🧾 Expenses")
    form_state = st.session_state.expense_form
    editing = bool(form_state.get("id"))

    with st.form("expense_entry", clear_on_submit=True):
        c1, c2, c3, c4 = st.columns(4)
        with c1:
            exp_date = st.date_input("Date", value=form_state.get("date") or date.today())
        with c2:
            amount = st.text_input("Amount", value=form_state.get("amount", ""), placeholder="0.00")
        with c3:
            current = form_state.get("category", DEFAULT_CATEGORIES[0])
            options = list(DEFAULT_CATEGORIES) if current in DEFAULT_CATEGORIES else [current, *DEFAULT_CATEGORIES]
            category = st.selectbox("Category", options, index=options.index(current))
        with c4:
            description = st.text_input("Description", value=form_state.get("description", ""), placeholder="Optional")
        submitted = st.form_submit_button("Update expense" if editing else "Add expense")

    if submitted:
        form = {"date": exp_date, "amount": amount, "category": category, "description": description}
        check = validate_expense_form(form)
        if check.is_left():
            LOGGER.debug("Form rejected: %s", check.get_error())
            st.warning(check.get_error()["message"])
        else:
            expense_service.save(form, form_state.get("id"))
            st.session_state.expense_form = {}
            st.rerun()
    if editing and st.button("Cancel edit"):
        st.session_state.expense_form = {}
        st.rerun()

    st.divider()
    f1, f2 = st.columns([3, 1])
    with f1:
        query = st.text_input("Search", placeholder="Search description or category")
    with f2:
        category_filter = st.selectbox("Filter by category", ["all", *DEFAULT_CATEGORIES])

    result = expense_service.search(category_filter, query)
    m1, m2 = st.columns(2)
    m1.metric("Filtered total", money(result["filtered_total"]))
    m2.metric("All-time total", money(result["all_time_total"]))

    df = expenses_df(result["expenses"])
    if df.empty:
        st.info("No expenses match the selected filters")
    else:
        for e in result["expenses"]:
            r1, r2, r3, r4, r5 = st.columns([2, 2, 4, 2, 2])
            r1.write(e.date.isoformat())
            r2.write(e.category)
            r3.write(e.description or "-")
            r4.write(money(e.amount))
            with r5:
                if st.button("Edit", key=f"edit_{e.id}"):
                    st.session_state.expense_form = {
                        "id": e.id,
                        "date": e.date,
                        "amount": str(e.amount),
                        "category": e.category,
                        "description": e.description or "",
                    }
                    st.rerun()
                if st.button("Delete", key=f"del_{e.id}"):
                    expense_service.delete(e.id)
                    st.rerun()
        csv = df.to_csv(index=False)
        st.download_button("⬇ Download CSV", csv, file_name="expenses.csv", mime="text/csv")

elif menu == "💰 Budgets":
    st.title("💰 Budgets")
    view = budget_service.overview()

    k1, k2, k3, k4 = st.columns(4)
    k1.metric("Total budget", money(view["total_budget"]))
    k2.metric(f"Spent in {view['month']}", money(view["total_spent"]))
    k3.metric("Remaining", money(view["remaining"]))
    k4.metric("Over budget", view["over_count"])

    form_state = st.session_state.budget_form
    editing = bool(form_state.get("id"))
    with st.form("budget_entry", clear_on_submit=True):
        c1, c2 = st.columns(2)
        with c1:
            current = form_state.get("category", DEFAULT_CATEGORIES[0])
            options = list(DEFAULT_CATEGORIES) if current in DEFAULT_CATEGORIES else [current, *DEFAULT_CATEGORIES]
            category = st.selectbox("Category", options, index=options.index(current))
        with c2:
            amount = st.text_input("Monthly amount", value=form_state.get("amount", ""), placeholder="0.00")
        submitted = st.form_submit_button("Update budget" if editing else "Save budget")

    if submitted:
        form = {"category": category, "amount": amount}
        check = validate_budget_form(form)
        if check.is_left():
            LOGGER.debug("Form rejected: %s", check.get_error())
            st.warning(check.get_error()["message"])
        else:
            budget_service.save(form, form_state.get("id"))
            st.session_state.budget_form = {}
            st.rerun()
    if editing and st.button("Cancel edit"):
        st.session_state.budget_form = {}
        st.rerun()

    st.subheader("Spending vs limit")
    render_budget_rows(view["rows"], with_actions=True)

elif menu == "📊 Analytics":
    st.title("📊 Analytics")
    view = report_service.analytics()

    chips = [f"This month: {money(view['month_total'])}", f"Categories: {view['category_count']}"]
    if view["top"]:
        top_name, top_total = view["top"]
        chips.append(f"Top: {top_name} ({money(top_total)})")
    st.caption(" · ".join(chips))

    by_month = pd.DataFrame(view["by_month"], columns=["month", "total"]).astype({"total": float})
    by_category = pd.DataFrame(view["by_category"], columns=["category", "total"]).astype({"total": float})

    left, right = st.columns(2)
    with left:
        st.subheader("Monthly spending")
        if by_month.empty:
            st.info("No data yet.")
        else:
            fig_ts = go.Figure()
            fig_ts.add_trace(go.Scatter(x=by_month["month"], y=by_month["total"], mode="lines+markers", name="Total spent"))
            fig_ts.update_layout(margin=dict(t=30, b=10, l=10, r=10))
            st.plotly_chart(fig_ts, use_container_width=True)
    with right:
        st.subheader(f"By category ({view['month']})")
        if by_category.empty:
            st.info("No expenses this month.")
        else:
            fig_cat = px.bar(by_category, x="category", y="total", color="category", labels={"total": "Total spent"})
            st.plotly_chart(fig_cat, use_container_width=True)

    st.subheader("Monthly totals")
    if not by_month.empty:
        fig_bar = px.bar(by_month, x="month", y="total", labels={"total": "Total spent"})
        st.plotly_chart(fig_bar, use_container_width=True)
