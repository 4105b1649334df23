import hashlib
import pandas as pd
from typing import Iterable

from config import CURRENCY_SYMBOL, DISPLAY_NAMES, TransactionColumns
from fraudsim.records import TransactionRecord, records_to_rows

def format_currency(value: float) -> str:
    """Formats amounts with thousands separators (e.g., -$1,200.00)."""
    if value is None:
        return f"{CURRENCY_SYMBOL}0.00"
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(value):,.2f}"

def format_compact(value: float) -> str:
    """Formats large numbers into readable currency (e.g., $1.2M)."""
    if value is None:
        return f"{CURRENCY_SYMBOL}0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    if value >= 1_000_000:
        return f"{sign}{CURRENCY_SYMBOL}{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{sign}{CURRENCY_SYMBOL}{value / 1_000:.1f}K"
    return f"{sign}{CURRENCY_SYMBOL}{value:,.2f}"

def format_percent(value: float) -> str:
    """Formats a value already on the 0-100 scale."""
    if value is None:
        return "0.0%"
    return f"{value:.1f}%"

def records_to_frame(records: Iterable[TransactionRecord]) -> pd.DataFrame:
    """
    Builds a display DataFrame from records.
    Columns follow the CSV order and are renamed to their display headers.
    """
    df = pd.DataFrame(records_to_rows(records), columns=TransactionColumns.ORDER)
    return df.rename(columns=DISPLAY_NAMES)

def currency_column_format() -> str:
    """printf-style format for st.column_config.NumberColumn."""
    return f"{CURRENCY_SYMBOL.replace('%', '%%')}%.2f"

def currency_hover(field: str) -> str:
    """Plotly hovertemplate fragment for a money field (e.g., $%{y:,.2f})."""
    return f"{CURRENCY_SYMBOL}%{{{field}:,.2f}}"

def upload_key(data: bytes) -> str:
    """Content key for an uploaded file. Same name and size with new content is a new upload."""
    return hashlib.sha256(data).hexdigest()
