import os
import sys
import streamlit as st
import plotly.graph_objects as go

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from styles import COLORS, CONFUSION_COLORS, kpi_card, apply_plot_style, render_header, signed_color
from utils import format_currency, format_percent
from config import SimulatorDefaults
from fraudsim.engine import DerivedMetrics

# ==============================================================================
# 1. COMPONENT FUNCTIONS
# ==============================================================================
def _render_confusion_counts(metrics: DerivedMetrics):
    """2x2 grid of confusion matrix counts."""
    cards = [
        ("True Positives", metrics.tp, "Fraud caught", COLORS['safe']),
        ("False Positives", metrics.fp, "Legit flagged", COLORS['warning']),
        ("True Negatives", metrics.tn, "Legit accepted", COLORS['info']),
        ("False Negatives", metrics.fn, "Fraud missed", COLORS['danger']),
    ]
    for row in (cards[:2], cards[2:]):
        c1, c2 = st.columns(2)
        for col, (title, value, sub, color) in zip((c1, c2), row):
            with col:
                st.markdown(kpi_card(title, f"{value:,}", sub, color), unsafe_allow_html=True)


def _render_ratios(metrics: DerivedMetrics):
    c1, c2, c3 = st.columns(3)
    with c1:
        st.markdown(kpi_card("ROI", format_percent(metrics.roi), "Net Benefit / Investigation Cost",
                             signed_color(metrics.roi)), unsafe_allow_html=True)
    with c2:
        st.markdown(kpi_card("Precision", format_percent(metrics.precision), "TP / Flagged Cases",
                             COLORS['info']), unsafe_allow_html=True)
    with c3:
        st.markdown(kpi_card("Net Benefit", format_currency(metrics.net_benefit), "Detected - Cost - Lost",
                             signed_color(metrics.net_benefit)), unsafe_allow_html=True)


def _render_confusion_donut(metrics: DerivedMetrics):
    data = list(metrics.confusion_matrix)
    if sum(d['value'] for d in data) == 0:
        st.info("ℹ️ No transactions to classify.")
        return

    fig = go.Figure(go.Pie(
        labels=[d['name'] for d in data],
        values=[d['value'] for d in data],
        hole=0.55,
        sort=False,
        marker=dict(colors=CONFUSION_COLORS),
        textinfo="percent",
    ))
    fig = apply_plot_style(fig, title="Confusion Matrix Breakdown", height=SimulatorDefaults.CHART_HEIGHT)
    st.plotly_chart(fig, use_container_width=True, key="confusion_donut")

# ==============================================================================
# 2. MAIN RENDER FUNCTION
# ==============================================================================
def render_page(metrics: DerivedMetrics, threshold: float):
    render_header("Threshold Simulation", f"Decision cut-off at probability {threshold:.2f}")

    _render_confusion_counts(metrics)
    st.markdown("<br>", unsafe_allow_html=True)
    _render_ratios(metrics)
    _render_confusion_donut(metrics)
