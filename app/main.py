import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
import json
from datetime import date
from functools import partial
from uuid import uuid4

import streamlit as st
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from networth.config import load_settings
from networth.domain import Asset, AssetCategory, asset_to_dict
from networth.eosb import compute_accrual, to_minor_units, years_of_service
from networth.errors import AssetNotFoundError, InvalidInputError
from networth.lazy import by_category, iter_assets, lazy_top_holdings
from networth.logging_setup import configure_logging, get_logger
from networth.prices import fetch_quote
from networth.revalue import is_priced, revalue_holdings
from networth.services import NetWorthService
from networth.transforms import category_totals, holding_value, real_estate_value

settings = load_settings()
configure_logging(settings.log_level)
log = get_logger("networth.app")

st.set_page_config(page_title="Net Worth", layout="wide")

CURRENCY = settings.currency

LABELS = {
    AssetCategory.CASH: "💵 Cash",
    AssetCategory.EQUITY: "📈 Stocks",
    AssetCategory.REAL_ESTATE: "🏠 Real Estate",
    AssetCategory.CRYPTO: "🪙 Crypto",
    AssetCategory.VEHICLE: "🚗 Vehicle",
    AssetCategory.EOSB: "💼 Gratuity (EOSB)",
    AssetCategory.LIABILITY: "💳 Liability",
}


def money(minor: int) -> str:
    return f"{minor / 100:,.2f} {CURRENCY}"


if "ledger" not in st.session_state:
    st.session_state.ledger = NetWorthService.from_seed(settings.seed_path, eosb_cap=settings.eosb_cap)

ledger: NetWorthService = st.session_state.ledger

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Overview", "📂 Assets", "➕ Add / Edit", "💼 Gratuity", "📜 History"]
)

if menu == "🏠 Overview":
    current = ledger.current()
    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Net Worth", money(current.net_worth))
    with k2:
        st.metric("Total Assets", money(current.total_assets))
    with k3:
        st.metric("Total Liabilities", money(current.total_liabilities))

    col_left, col_right = st.columns(2)
    with col_left:
        fig_split = px.pie(
            names=["Assets", "Debt"],
            values=[current.total_assets / 100, current.total_liabilities / 100],
            title="Assets vs Debt",
            hole=0.5,
        )
        st.plotly_chart(fig_split, use_container_width=True)
    with col_right:
        by_cat = category_totals(ledger.assets)
        if by_cat:
            df_cat = pd.DataFrame(
                [{"Category": LABELS[c], "Value": v / 100} for c, v in by_cat.items()]
            )
            fig_cat = px.bar(df_cat, x="Category", y="Value", title="By category", template="plotly_dark")
            st.plotly_chart(fig_cat, use_container_width=True)

    st.subheader("📊 Top Holdings")
    k = st.number_input("Show top-K holdings:", min_value=1, max_value=20, value=5)
    top = list(lazy_top_holdings(ledger.assets, int(k)))
    if top:
        st.table(pd.DataFrame([{"Holding": n, "Value": money(v)} for n, v in top]))
    else:
        st.info("No holdings yet.")

elif menu == "📂 Assets":
    st.title("📂 Assets")

    selected = st.multiselect("Category", options=list(LABELS), format_func=LABELS.get, default=[])
    rows = ledger.assets
    if selected:
        rows = tuple(a for c in selected for a in iter_assets(ledger.assets, by_category(c)))

    if st.button("🔄 Refresh prices", disabled=not settings.alphavantage_api_key):
        fetch = partial(fetch_quote, api_key=settings.alphavantage_api_key, timeout=settings.alphavantage_timeout)
        revalued = asyncio.run(revalue_holdings(list(ledger.assets), fetch))
        changed = [new for old, new in zip(ledger.assets, revalued) if is_priced(old) and new.value != old.value]
        for a in changed:
            ledger.upsert(a)
        log.info("refreshed prices, %d holding(s) changed", len(changed))
        st.success(f"Updated {len(changed)} holding(s)")
        st.rerun()

    st.download_button(
        "⬇ Export JSON",
        json.dumps({"assets": [asset_to_dict(a) for a in ledger.assets]}, indent=2),
        file_name="assets.json",
    )

    for a in rows:
        with st.container(border=True):
            c1, c2, c3 = st.columns([3, 2, 1])
            with c1:
                st.markdown(f"**{a.name}**  \n{LABELS.get(a.category, a.category)}")
                if a.ticker:
                    st.caption(f"{a.ticker} × {a.quantity}")
                if a.notes:
                    st.caption(a.notes)
            with c2:
                sign = "-" if a.category.is_liability else ""
                st.markdown(f"### {sign}{money(a.value)}")
                if a.market_value is not None:
                    st.caption(f"Market value {money(a.market_value)}")
                if a.loan_value:
                    st.caption(f"Outstanding loan -{money(a.loan_value)}")
            with c3:
                if st.button("🗑 Delete", key=f"del_{a.id}"):
                    try:
                        ledger.delete(a.id)
                    except AssetNotFoundError as e:
                        st.error(str(e))
                    else:
                        st.rerun()

            archived = ledger.archive(a.id)
            if archived:
                with st.expander(f"Previous versions ({len(archived)})"):
                    st.table(pd.DataFrame([
                        {
                            "Archived": pd.to_datetime(v.archived_at, unit="ms").strftime("%Y-%m-%d %H:%M"),
                            "Value": money(v.asset.value),
                        }
                        for v in archived
                    ]))

elif menu == "➕ Add / Edit":
    st.title("➕ Add or edit an asset")

    existing = {f"{a.name} ({a.id})": a for a in ledger.assets}
    choice = st.selectbox("Edit existing", ["— new asset —"] + list(existing))
    current_asset = existing.get(choice)

    categories = list(LABELS)
    category = st.selectbox(
        "Category",
        categories,
        index=categories.index(current_asset.category) if current_asset else 0,
        format_func=LABELS.get,
        disabled=current_asset is not None,
    )
    if category == AssetCategory.EOSB:
        st.info("Gratuity is calculated from salary and dates, use the 💼 Gratuity page.")

    with st.form("asset_form"):
        name = st.text_input("Name", value=current_asset.name if current_asset else "")
        ticker, qty, market, loan, fetch_price = None, None, None, None, False
        value_major = (current_asset.value / 100) if current_asset else 0.0

        if category in (AssetCategory.EQUITY, AssetCategory.CRYPTO):
            ticker = st.text_input("Ticker", value=(current_asset.ticker or "") if current_asset else "")
            qty = st.number_input("Quantity", min_value=0.0, value=float(current_asset.quantity or 0) if current_asset else 0.0)
            fetch_price = st.checkbox("Fetch live price", disabled=not settings.alphavantage_api_key)
        elif category == AssetCategory.REAL_ESTATE:
            market = st.number_input("Market value", min_value=0.0, value=(current_asset.market_value or 0) / 100 if current_asset else 0.0)
            loan = st.number_input("Outstanding loan", min_value=0.0, value=(current_asset.loan_value or 0) / 100 if current_asset else 0.0)

        if category != AssetCategory.REAL_ESTATE:
            value_major = st.number_input(f"Total value ({CURRENCY})", min_value=0.0, value=float(value_major), step=100.0)
        account_number = st.text_input("Account number", value=(current_asset.account_number or "") if current_asset else "")
        notes = st.text_area("Notes", value=(current_asset.notes or "") if current_asset else "")
        submitted = st.form_submit_button("Save")

    if submitted:
        try:
            if not name or len(name.strip()) < 2:
                raise InvalidInputError("Name must have at least 2 characters")
            market_minor = loan_minor = None
            if category == AssetCategory.REAL_ESTATE:
                market_minor, loan_minor = to_minor_units(market), to_minor_units(loan)
                value = real_estate_value(market_minor, loan_minor)
            elif category in (AssetCategory.EQUITY, AssetCategory.CRYPTO) and ticker and qty and fetch_price:
                price = fetch_quote(ticker, settings.alphavantage_api_key, timeout=settings.alphavantage_timeout)
                if price is None:
                    raise InvalidInputError("Could not fetch price. Please enter value manually.")
                value = holding_value(price, qty)
            else:
                value = to_minor_units(value_major)

            snap = ledger.upsert(Asset(
                id=current_asset.id if current_asset else str(uuid4()),
                name=name.strip(),
                category=category,
                value=value,
                quantity=qty or None,
                ticker=ticker or None,
                market_value=market_minor,
                loan_value=loan_minor,
                account_number=account_number or None,
                notes=notes or None,
            ))
        except InvalidInputError as e:
            st.error(f"❌ {e}")
        else:
            st.success(f"✅ Saved. Net worth is now {money(snap.net_worth)}")

elif menu == "💼 Gratuity":
    st.title("💼 End-of-service benefit")
    st.caption("21 days of basic salary per year for the first 5 years, 30 days per year after that. Nothing before one year.")

    with st.form("eosb_form"):
        name = st.text_input("Name", value="Gratuity")
        salary = st.number_input(f"Monthly basic salary ({CURRENCY})", min_value=0.0, step=500.0)
        c1, c2 = st.columns(2)
        with c1:
            start = st.date_input("Start date", value=date(date.today().year - 3, 1, 1))
        with c2:
            end = st.date_input("End date", value=date.today())
        preview = st.form_submit_button("Calculate")
        save = st.form_submit_button("Save as asset")

    years = years_of_service(start, end)
    st.metric("Est. years", f"{years:.2f}")

    if preview or save:
        try:
            gratuity = compute_accrual(to_minor_units(salary), years, cap=settings.eosb_cap)
            st.metric("Estimated gratuity", money(gratuity))
            if save:
                snap = ledger.add_eosb(name, salary, start, end)
                st.success(f"✅ Saved. Net worth is now {money(snap.net_worth)}")
        except InvalidInputError as e:
            st.error(f"❌ {e}")

elif menu == "📜 History":
    st.title("📜 Net worth history")
    history = ledger.history()
    if history:
        hist_df = pd.DataFrame([
            {
                "time": pd.to_datetime(s.timestamp, unit="ms"),
                "net_worth": s.net_worth / 100,
                "assets": s.total_assets / 100,
                "liabilities": s.total_liabilities / 100,
            }
            for s in history
        ])
        fig = go.Figure()
        fig.add_trace(go.Scatter(x=hist_df["time"], y=hist_df["net_worth"], mode="lines+markers", name="Net Worth", fill="tozeroy"))
        fig.add_trace(go.Scatter(x=hist_df["time"], y=hist_df["assets"], mode="lines", name="Assets"))
        fig.add_trace(go.Scatter(x=hist_df["time"], y=hist_df["liabilities"], mode="lines", name="Debt"))
        fig.update_layout(template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig, use_container_width=True)

        st.dataframe(hist_df, use_container_width=True)
        st.download_button("⬇ Download CSV", hist_df.to_csv(index=False), file_name="net_worth_history.csv")
    else:
        st.info("No snapshots yet. Add, edit or delete an asset to record one.")
