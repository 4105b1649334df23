import os
import sys
import streamlit as st
import plotly.graph_objects as go
from typing import Optional

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from styles import COLORS, kpi_card, apply_plot_style, render_header, signed_color
from utils import currency_hover, format_compact, format_currency
from config import SimulatorDefaults
from fraudsim.engine import DerivedMetrics, SCENARIO_WITHOUT_MODEL
from fraudsim.evaluation import compare_with_summary
from fraudsim.records import EconomicSummary

# ==============================================================================
# 1. IMPORTED SUMMARY
# ==============================================================================
def _render_imported_summary(summary: EconomicSummary):
    """Upstream figures as shipped in the economic analysis CSV."""
    st.subheader("📥 Loaded Economic Analysis")
    c1, c2, c3, c4, c5 = st.columns(5)
    with c1: st.markdown(kpi_card("TP", f"{summary.tp:,}", "Fraud Detected", COLORS['safe']), unsafe_allow_html=True)
    with c2: st.markdown(kpi_card("FN", f"{summary.fn:,}", "Fraud Missed", COLORS['danger']), unsafe_allow_html=True)
    with c3: st.markdown(kpi_card("FP", f"{summary.fp:,}", "False Alarms", COLORS['warning']), unsafe_allow_html=True)
    with c4: st.markdown(kpi_card("TN", f"{summary.tn:,}", "Legit Accepted", COLORS['info']), unsafe_allow_html=True)
    with c5:
        st.markdown(kpi_card("Net Benefit", format_compact(summary.net_benefit), "As Reported",
                             signed_color(summary.net_benefit)), unsafe_allow_html=True)

# ==============================================================================
# 2. WITH vs WITHOUT MODEL
# ==============================================================================
def _render_comparison_chart(metrics: DerivedMetrics):
    data = list(metrics.economic_comparison)
    bar_colors = [COLORS['danger'] if d['scenario'] == SCENARIO_WITHOUT_MODEL else COLORS['info'] for d in data]

    fig = go.Figure(go.Bar(
        x=[d['scenario'] for d in data],
        y=[d['benefit'] for d in data],
        marker_color=bar_colors,
        text=[format_compact(d['benefit']) for d in data],
        textposition="outside",
        customdata=[d['cost'] for d in data],
        hovertemplate=f"%{{x}}<br>Benefit: {currency_hover('y')}<br>Investigation Cost: {currency_hover('customdata')}<extra></extra>",
    ))
    fig = apply_plot_style(fig, title="Economic Benefit: Without vs. With Model",
                           height=SimulatorDefaults.CHART_HEIGHT, money_axis=True)
    fig.update_layout(yaxis_title="Benefit", showlegend=False)
    st.plotly_chart(fig, use_container_width=True, key="economic_comparison")


def _render_amounts(metrics: DerivedMetrics, threshold: float):
    st.markdown(f"#### 🧮 Calculated Metrics (Threshold: {threshold:.2f})")
    c1, c2, c3 = st.columns(3)
    with c1:
        st.markdown(kpi_card("Detected", format_currency(metrics.detected_amount), "Recovered from TP",
                             COLORS['safe']), unsafe_allow_html=True)
    with c2:
        st.markdown(kpi_card("Lost", format_currency(metrics.lost_amount), "Undetected Fraud (FN)",
                             COLORS['danger']), unsafe_allow_html=True)
    with c3:
        st.markdown(kpi_card("Investigation Cost", format_currency(metrics.total_investigation_cost),
                             f"{metrics.tp + metrics.fp:,} Flagged Cases", COLORS['warning']), unsafe_allow_html=True)

# ==============================================================================
# 3. MAIN RENDER FUNCTION
# ==============================================================================
def render_page(metrics: DerivedMetrics, threshold: float, summary: Optional[EconomicSummary] = None):
    render_header("Economic Impact", "Financial Analysis & Economic Parameters")

    if summary is not None:
        _render_imported_summary(summary)
        st.markdown("<br>", unsafe_allow_html=True)

    _render_comparison_chart(metrics)
    _render_amounts(metrics, threshold)

    if summary is not None:
        st.markdown("#### 🔍 Imported vs. Recomputed")
        st.dataframe(
            compare_with_summary(metrics, summary),
            column_config={
                "metric": "Metric",
                "imported": st.column_config.NumberColumn("Imported", format="%.2f"),
                "recomputed": st.column_config.NumberColumn("Recomputed", format="%.2f"),
                "delta": st.column_config.NumberColumn("Delta", format="%.2f"),
            },
            hide_index=True,
            use_container_width=True,
        )

    with st.expander("View Raw Metrics"):
        st.json(metrics.as_dict())
