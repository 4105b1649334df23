import sys
import os
import logging
import traceback
import pandas as pd
import streamlit as st

# Add parent directory to path to allow imports
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from config import LOG_LEVEL, SimulatorDefaults, debug_config
from styles import setup_page, COLORS
from utils import upload_key
from views import threshold, economics, risk_monitor, strategy
from fraudsim.engine import compute_metrics_cached
from fraudsim.evaluation import default_thresholds, score_auc, threshold_sweep
from fraudsim.ingestion import load_economic_summary, load_transactions
from fraudsim.params import EconomicParameters
from fraudsim.records import TransactionDataset

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("Dashboard")

# ==============================================================================
# 1. SETUP & STATE
# ==============================================================================
setup_page("Fraud Threshold Simulator")

if 'dataset' not in st.session_state:
    debug_config()
    st.session_state.dataset = TransactionDataset()
if 'summary' not in st.session_state:
    st.session_state.summary = None
if 'loaded_files' not in st.session_state:
    st.session_state.loaded_files = {}

# ==============================================================================
# 2. CACHED LOADERS
# ==============================================================================
@st.cache_data(show_spinner="Parsing transactions...")
def _parse_transactions(data: bytes) -> TransactionDataset:
    return load_transactions(data)

@st.cache_data(show_spinner=False)
def _parse_summary(data: bytes):
    return load_economic_summary(data)

@st.cache_data(show_spinner="Sweeping thresholds...")
def _sweep(_dataset: TransactionDataset, fingerprint: str, cost: float, rate: float, points: int) -> pd.DataFrame:
    # Keyed on the dataset fingerprint; the dataset itself is not hashed.
    return threshold_sweep(_dataset, cost, rate, thresholds=default_thresholds(points))

@st.cache_data(show_spinner=False)
def _auc(_dataset: TransactionDataset, fingerprint: str) -> float:
    return score_auc(_dataset)


def _ingest(uploaded, kind: str):
    """
    Replaces the session dataset (or summary) when a new file is uploaded.
    On failure the previous data is kept.
    """
    if uploaded is None:
        return
    data = uploaded.getvalue()
    file_key = upload_key(data)
    if st.session_state.loaded_files.get(kind) == file_key:
        return

    try:
        if kind == "transactions":
            st.session_state.dataset = _parse_transactions(data)
        else:
            st.session_state.summary = _parse_summary(data)
        st.session_state.loaded_files[kind] = file_key
    except Exception as e:
        logger.error(f"❌ Could not load {kind} file '{uploaded.name}': {e}")
        st.error(f"🚨 Could not read `{uploaded.name}`. Previous data kept.")

# ==============================================================================
# 3. SIDEBAR (DATA, PARAMETERS & NAVIGATION)
# ==============================================================================
with st.sidebar:
    st.markdown(f"<h1 style='text-align: center; color: {COLORS['highlight']}; letter-spacing: 2px; margin-bottom: 0;'>Fraud Simulator</h1>", unsafe_allow_html=True)
    st.caption("Interactive Threshold & Economic Analysis")
    st.markdown("---")

    with st.expander("📂 Data Upload", expanded=True):
        tx_file = st.file_uploader("Fraud Detection Results CSV", type=["csv"], key="fraud_file")
        summary_file = st.file_uploader("Economic Analysis CSV", type=["csv"], key="economic_file")

    _ingest(tx_file, "transactions")
    _ingest(summary_file, "summary")

    page = st.radio(
        "MODULES",
        ["Threshold Simulation", "Economic Impact", "Risk Monitor", "Strategy"],
        index=0
    )
    st.markdown("---")

    with st.expander("⚙️ Economic Parameters", expanded=True):
        raw_threshold = st.slider(
            "Probability Threshold",
            min_value=SimulatorDefaults.THRESHOLD_MIN,
            max_value=SimulatorDefaults.THRESHOLD_MAX,
            value=SimulatorDefaults.THRESHOLD,
            step=SimulatorDefaults.THRESHOLD_STEP,
        )
        raw_cost = st.number_input(
            "Investigation Cost per Case ($)",
            min_value=0.0,
            value=SimulatorDefaults.INVESTIGATION_COST,
            step=1000.0,
        )
        raw_rate = st.number_input(
            "Recovery Rate (%)",
            min_value=SimulatorDefaults.RECOVERY_RATE_MIN,
            max_value=SimulatorDefaults.RECOVERY_RATE_MAX,
            value=SimulatorDefaults.RECOVERY_RATE,
            step=5.0,
        )

    params = EconomicParameters.from_inputs(raw_threshold, raw_cost, raw_rate)

    st.markdown("---")
    dataset = st.session_state.dataset
    if len(dataset):
        st.caption(f"🟢 {len(dataset):,} transactions loaded")
    else:
        st.caption("⚪ No transactions loaded")

# ==============================================================================
# 4. MAIN CONTROLLER
# ==============================================================================
def main():
    try:
        dataset = st.session_state.dataset
        summary = st.session_state.summary

        if len(dataset) == 0:
            st.info("ℹ️ Upload a fraud detection results CSV to start the analysis.")
            return

        metrics = compute_metrics_cached(dataset, params)

        if page == "Threshold Simulation":
            threshold.render_page(metrics, params.threshold)

        elif page == "Economic Impact":
            economics.render_page(metrics, params.threshold, summary)

        elif page == "Risk Monitor":
            risk_monitor.render_page(dataset.records)

        elif page == "Strategy":
            curve_df = _sweep(dataset, dataset.fingerprint, params.investigation_cost_per_case,
                              params.recovery_rate_percent, SimulatorDefaults.SWEEP_POINTS)
            strategy.render_page(curve_df, params.threshold, _auc(dataset, dataset.fingerprint))

    except Exception:
        logger.error(f"Dashboard Error: {traceback.format_exc()}")
        st.error("🚨 An unexpected error occurred in the dashboard controller.")
        with st.expander("Technical Details"):
            st.code(traceback.format_exc())

if __name__ == "__main__":
    main()
