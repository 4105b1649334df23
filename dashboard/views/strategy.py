import os
import sys
import streamlit as st
import pandas as pd
import plotly.graph_objects as go

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from styles import COLORS, kpi_card, apply_plot_style, render_header, signed_color
from utils import format_compact
from fraudsim.evaluation import best_threshold

# ==============================================================================
# ROW 1: STRATEGY KPIs
# ==============================================================================
def _render_strategy_kpis(curve_df: pd.DataFrame, current_threshold: float, auc: float):
    best_t = best_threshold(curve_df)
    best_net = curve_df.loc[(curve_df['threshold'] - best_t).abs().idxmin(), 'net_benefit']

    c1, c2, c3 = st.columns(3)
    with c1:
        st.markdown(kpi_card("Score ROC-AUC", f"{auc:.3f}", "Ranking Quality of Stored Scores",
                             COLORS['info']), unsafe_allow_html=True)
    with c2:
        st.markdown(kpi_card("Best Threshold", f"{best_t:.2f}", f"Current: {current_threshold:.2f}",
                             COLORS['highlight']), unsafe_allow_html=True)
    with c3:
        st.markdown(kpi_card("Max Net Benefit", format_compact(best_net), "At Best Threshold",
                             signed_color(best_net)), unsafe_allow_html=True)

# ==============================================================================
# ROW 2: THE ROI FRONTIER
# ==============================================================================
def _render_benefit_curve(curve_df: pd.DataFrame, current_threshold: float):
    """
    Net benefit over the full threshold range, with the active setting marked.
    """
    best_t = best_threshold(curve_df)
    best_idx = (curve_df['threshold'] - best_t).abs().idxmin()
    current_idx = (curve_df['threshold'] - current_threshold).abs().idxmin()

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=curve_df['threshold'], y=curve_df['net_benefit'],
        mode='lines', name='Net Benefit',
        line=dict(color=COLORS['highlight'], width=4),
        fill='tozeroy', fillcolor='rgba(0, 204, 150, 0.05)'
    ))
    fig.add_trace(go.Scatter(
        x=[best_t], y=[curve_df.loc[best_idx, 'net_benefit']],
        mode='markers+text', name='Best',
        text=["MAX BENEFIT"], textposition="bottom center",
        marker=dict(color=COLORS['safe'], size=15, symbol="star")
    ))
    fig.add_trace(go.Scatter(
        x=[current_threshold], y=[curve_df.loc[current_idx, 'net_benefit']],
        mode='markers+text', name='Current Setting',
        text=["ACTIVE"], textposition="top center",
        marker=dict(color=COLORS['danger'], size=12, symbol="diamond")
    ))

    fig = apply_plot_style(fig, title="Net Benefit vs. Decision Threshold", height=420, money_axis=True)
    fig.update_layout(xaxis_title="Threshold", yaxis_title="Net Benefit", hovermode="x unified")
    st.plotly_chart(fig, use_container_width=True, key="benefit_curve")

    diff = current_threshold - best_t
    gap = curve_df.loc[best_idx, 'net_benefit'] - curve_df.loc[current_idx, 'net_benefit']
    if abs(diff) < 0.05:
        st.success(f"✅ **Strategy Insight:** Current threshold ({current_threshold:.2f}) is close to the best net benefit.")
    elif diff > 0:
        st.warning(f"⚠️ **Strategy Insight:** Threshold is too **Conservative**. Lowering it to {best_t:.2f} adds {format_compact(gap)}.")
    else:
        st.error(f"🚨 **Strategy Insight:** Threshold is too **Aggressive**. Raising it to {best_t:.2f} adds {format_compact(gap)}.")


def _render_precision_recall(curve_df: pd.DataFrame, current_threshold: float):
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=curve_df['threshold'], y=curve_df['precision'], name="Precision",
                             line=dict(color=COLORS['safe'], width=3)))
    fig.add_trace(go.Scatter(x=curve_df['threshold'], y=curve_df['recall'], name="Recall",
                             line=dict(color=COLORS['warning'], width=3)))
    fig.add_vline(x=current_threshold, line_width=2, line_dash="dash", line_color="white", annotation_text="Current")
    fig = apply_plot_style(fig, title="Precision & Recall Trade-off")
    fig.update_layout(xaxis_title="Threshold", yaxis_title="%", yaxis=dict(range=[0, 105]), hovermode="x unified")
    st.plotly_chart(fig, use_container_width=True, key="precision_recall")

# ==============================================================================
# MAIN RENDERER
# ==============================================================================
def render_page(curve_df: pd.DataFrame, current_threshold: float, auc: float):
    render_header("Strategy Center", "Threshold Sweep & ROI Frontier")

    if curve_df.empty:
        st.info("ℹ️ Load a transactions file to compute the threshold sweep.")
        return

    _render_strategy_kpis(curve_df, current_threshold, auc)
    st.markdown("---")
    _render_benefit_curve(curve_df, current_threshold)
    _render_precision_recall(curve_df, current_threshold)
