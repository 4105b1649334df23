import os
import sys
import streamlit as st
from typing import Sequence

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from styles import COLORS, RISK_COLORS, render_header
from utils import currency_column_format, format_currency, records_to_frame
from config import DISPLAY_NAMES, SimulatorDefaults, TransactionColumns
from fraudsim.filters import ALL, filter_transactions
from fraudsim.records import TransactionRecord

RISK_OPTIONS = {ALL: "All Levels", "High": "🔴 High Risk", "Medium": "🟡 Medium Risk", "Low": "🟢 Low Risk"}
ACTION_OPTIONS = {ALL: "All Actions", "Block": "🚫 Block", "Review": "👁️ Review", "Accept": "✅ Accept"}

# ==============================================================================
# 1. FILTERS
# ==============================================================================
def _render_filters():
    c1, c2 = st.columns(2)
    with c1:
        risk = st.selectbox("Risk Level", list(RISK_OPTIONS), format_func=RISK_OPTIONS.get, key="risk_filter")
    with c2:
        action = st.selectbox("Action", list(ACTION_OPTIONS), format_func=ACTION_OPTIONS.get, key="action_filter")
    return risk, action

# ==============================================================================
# 2. TRANSACTION CARDS
# ==============================================================================
def _render_transaction_card(tx: TransactionRecord):
    color = RISK_COLORS.get(tx.risk_level.value, COLORS['neutral'])
    st.markdown(f"""
    <div class="tx-card" style="border-left: 5px solid {color};">
        <div>
            <div class="tx-amount">{format_currency(tx.amount)}</div>
            <div class="tx-detail">Probability: {tx.fraud_probability * 100:.1f}%</div>
        </div>
        <div style="text-align: right;">
            <span style="color: {color}; font-weight: 700;">{tx.risk_level.value}</span>
            <div class="tx-detail">{tx.action.value}</div>
        </div>
    </div>
    """, unsafe_allow_html=True)

# ==============================================================================
# MAIN VIEW CONTROLLER
# ==============================================================================
def render_page(records: Sequence[TransactionRecord]):
    render_header("Risk Monitor", "High-Risk Transactions & Advanced Filters")

    risk, action = _render_filters()
    limit = SimulatorDefaults.RISK_LIST_LIMIT

    matches = filter_transactions(records, risk_level=risk, action=action)
    st.caption(f"{len(matches):,} matching transactions (showing first {min(limit, len(matches))})")

    if not matches:
        st.info("ℹ️ No transactions match the selected filters.")
        return

    for tx in matches[:limit]:
        _render_transaction_card(tx)

    with st.expander("View Matching Transactions Table"):
        st.dataframe(
            records_to_frame(matches),
            column_config={
                DISPLAY_NAMES[TransactionColumns.AMOUNT]: st.column_config.NumberColumn(format=currency_column_format()),
                DISPLAY_NAMES[TransactionColumns.FRAUD_PROB]: st.column_config.ProgressColumn(
                    format="%.3f", min_value=0, max_value=1),
            },
            hide_index=True,
            use_container_width=True,
        )
