import streamlit as st
from config import CURRENCY_SYMBOL

# ==============================================================================
# 1. COLOR PALETTE
# ==============================================================================
COLORS = {
    "background": "#0E1117",      # Main App Background
    "card_bg": "#181b21",         # Card Background
    "text": "#FAFAFA",
    "safe": "#00CC96",            # Green
    "danger": "#EF553B",          # Red
    "warning": "#FFA15A",         # Amber
    "info": "#3B82F6",            # Blue
    "neutral": "#8b92a1",         # Subtext Gray
    "border": "#2b3b4f",          # Card Border
    "highlight": "#00CC96"        # Title Color
}

# Confusion matrix slices, in TP, FP, TN, FN order
CONFUSION_COLORS = ["#10b981", "#f59e0b", "#3b82f6", "#ef4444"]

RISK_COLORS = {
    "High": COLORS['danger'],
    "Medium": COLORS['warning'],
    "Low": COLORS['safe'],
}

# ==============================================================================
# 2. CSS INJECTION
# ==============================================================================
def apply_custom_css():
    """Dark theme, KPI cards and the Risk Monitor transaction cards."""
    st.markdown(f"""
    <style>
        #MainMenu {{ visibility: hidden; }}
        footer {{ visibility: hidden; }}

        .stApp {{ background-color: {COLORS['background']}; color: {COLORS['text']}; }}

        .page-header {{
            margin: 10px 0 15px 0;
            padding-bottom: 5px;
            border-bottom: 1px solid {COLORS['border']};
        }}
        .page-header h2 {{ font-size: 22px; font-weight: 700; color: {COLORS['text']}; margin: 0; }}
        .page-header .subtitle {{ font-size: 12px; color: {COLORS['neutral']}; margin-top: 2px; }}

        .kpi-card {{
            background-color: {COLORS['card_bg']};
            border: 1px solid {COLORS['border']};
            border-radius: 10px;
            padding: 16px;
            margin-bottom: 10px;
            min-height: 120px;
            text-align: center;
        }}
        .kpi-title {{ font-size: 13px; font-weight: 600; margin-bottom: 6px; }}
        .kpi-value {{ font-size: 26px; font-weight: 800; margin-bottom: 6px; }}
        .kpi-subtext {{ font-size: 11px; color: {COLORS['neutral']}; font-style: italic; }}

        .tx-card {{
            background-color: {COLORS['card_bg']};
            border-radius: 8px;
            padding: 12px 16px;
            margin-bottom: 8px;
            display: flex;
            justify-content: space-between;
            align-items: center;
        }}
        .tx-amount {{ font-size: 1.2rem; font-weight: 700; }}
        .tx-detail {{ font-size: 0.85rem; color: {COLORS['neutral']}; }}
    </style>
    """, unsafe_allow_html=True)

def setup_page(title: str):
    """Page config + global CSS. Must be the first Streamlit call of the script."""
    st.set_page_config(page_title=title, page_icon="🛡️", layout="wide")
    apply_custom_css()

# ==============================================================================
# 3. UI HELPERS
# ==============================================================================
def render_header(title, subtitle=""):
    subtitle_html = f"<div class='subtitle'>{subtitle}</div>" if subtitle else ""
    st.markdown(f"<div class='page-header'><h2>{title}</h2>{subtitle_html}</div>", unsafe_allow_html=True)

def kpi_card(title, value, subtext, value_color=COLORS['safe']):
    """HTML for one KPI tile; render with st.markdown(..., unsafe_allow_html=True)."""
    return (
        f"<div class='kpi-card'><div class='kpi-title'>{title}</div>"
        f"<div class='kpi-value' style='color: {value_color}'>{value}</div>"
        f"<div class='kpi-subtext'>{subtext}</div></div>"
    )

def signed_color(value: float) -> str:
    return COLORS['safe'] if value >= 0 else COLORS['danger']

def apply_plot_style(fig, title="", height=350, money_axis=False):
    """
    Dark card theme for a plotly figure.
    With `money_axis` the y ticks carry the configured currency symbol.
    """
    fig.update_layout(
        title=dict(text=f"<b>{title}</b>", x=0.5, xanchor="center",
                   font=dict(size=14, color=COLORS['text'])),
        height=height,
        font=dict(color=COLORS['neutral']),
        paper_bgcolor=COLORS['card_bg'],
        plot_bgcolor=COLORS['card_bg'],
        margin=dict(l=30, r=30, t=50, b=30),
        legend=dict(orientation="h", y=1.02, x=1, xanchor="right", bgcolor="rgba(0,0,0,0)"),
    )
    axis = dict(gridcolor="rgba(43, 59, 79, 0.5)", linecolor=COLORS['border'], zeroline=False)
    fig.update_xaxes(**axis)
    fig.update_yaxes(**axis, tickprefix=CURRENCY_SYMBOL if money_axis else "")
    return fig
