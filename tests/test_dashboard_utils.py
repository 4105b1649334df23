import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "dashboard"))

from utils import (
    currency_column_format, currency_hover, format_compact, format_currency,
    format_percent, records_to_frame, upload_key,
)
from fraudsim.records import TransactionRecord


class TestFormatting:
    def test_currency(self):
        assert format_currency(1234.5) == "$1,234.50"
        assert format_currency(-120) == "-$120.00"
        assert format_currency(None) == "$0.00"

    def test_compact(self):
        assert format_compact(2_500_000) == "$2.5M"
        assert format_compact(-18_000) == "-$18.0K"
        assert format_compact(950) == "$950.00"

    def test_percent(self):
        assert format_percent(-600) == "-600.0%"
        assert format_percent(50) == "50.0%"
        assert format_percent(None) == "0.0%"

    def test_chart_formats_use_currency_symbol(self):
        assert currency_column_format() == "$%.2f"
        assert currency_hover("y") == "$%{y:,.2f}"
        assert currency_hover("customdata") == "$%{customdata:,.2f}"


class TestUploadKey:
    """A re-exported file with the same name and size must still be re-ingested"""

    def test_same_size_different_content(self):
        first = b"Time,Amount\n1,0.41\n"
        second = b"Time,Amount\n1,0.42\n"
        assert len(first) == len(second)
        assert upload_key(first) != upload_key(second)

    def test_same_content_same_key(self):
        assert upload_key(b"a,b\n") == upload_key(b"a,b\n")


def test_records_to_frame():
    records = [
        TransactionRecord(time="7", amount=12.5, actual_class=1, fraud_probability=0.8, risk_level="Alto", action="Block"),
        TransactionRecord(time="8"),
    ]
    df = records_to_frame(records)
    assert list(df.columns)[:3] == ["Time", "Amount", "Real Class"]
    assert len(df) == 2
    assert df.loc[0, "Risk Level"] == "High"
    assert df.loc[1, "Action"] == "Accept"

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
