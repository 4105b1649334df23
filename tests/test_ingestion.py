import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from fraudsim.ingestion import load_economic_summary, load_transactions
from fraudsim.records import (
    Action, EconomicSummary, RiskLevel, TransactionDataset, TransactionRecord,
    count_defaults, to_binary, to_float, to_int,
)

TX_HEADER = "Time,Amount,Real_Class,Pred_Class,Fraud_Prob,Risk_Level,Action,Expected_Savings,Investigation_Cost\n"
SUMMARY_HEADER = ("Fraudes Detectados (TP),Fraudes No Detectados (FN),Falsos Positivos (FP),"
                  "Verdaderos Negativos (TN),Monto Detectado,Monto Perdido,Costo Investigaciones,"
                  "Beneficio Neto,ROI (%),Precision\n")

# Fixtures
@pytest.fixture
def transactions_csv(tmp_path):
    path = tmp_path / "fraud_results.csv"
    path.write_text(
        TX_HEADER
        + "0,149.62,0,0,0.02,Bajo,Accept,0,0\n"
        + "406,529.00,1,1,0.97,Alto,Block,529,18000\n"
        + "\n"
        + "472,abc,1,0,0.41,Medio,Review,0,18000\n"
        + "500,10.5,1,1,not-a-prob,???,Hold,0,0\n"
    )
    return path


class TestFieldCoercion:
    """Test the default-on-failure parsing rules"""

    def test_to_float(self):
        assert to_float("12.5") == 12.5
        assert to_float(" 7 ") == 7.0
        assert to_float("abc") == 0.0
        assert to_float("") == 0.0
        assert to_float(None) == 0.0
        assert to_float("nan") == 0.0
        assert to_float("inf") == 0.0

    def test_to_float_overflow(self):
        assert to_float(10**400) == 0.0
        assert to_int(10**400) == 0
        assert TransactionRecord(amount=10**400).amount == 0.0

    def test_to_int_truncates(self):
        assert to_int("1.0") == 1
        assert to_int("3.9") == 3
        assert to_int("x") == 0

    def test_to_binary(self):
        assert to_binary("1") == 1
        assert to_binary("0") == 0
        assert to_binary("2") == 0
        assert to_binary("-1") == 0
        assert to_binary("yes") == 0

    def test_enum_fallbacks(self):
        assert RiskLevel.parse("Alto") is RiskLevel.HIGH
        assert RiskLevel.parse("medium") is RiskLevel.MEDIUM
        assert RiskLevel.parse("") is RiskLevel.LOW
        assert RiskLevel.parse("critical") is RiskLevel.LOW
        assert Action.parse("BLOCK") is Action.BLOCK
        assert Action.parse("Hold") is Action.ACCEPT
        assert Action.parse(Action.REVIEW) is Action.REVIEW


class TestTransactionRecord:
    """Test the always-succeeding record constructor"""

    def test_from_row_full(self):
        r = TransactionRecord.from_row(["406", "529.00", "1", "1", "0.97", "Alto", "Block", "529", "18000"])
        assert r.time == "406"
        assert r.amount == 529.0
        assert r.actual_class == 1
        assert r.fraud_probability == 0.97
        assert r.risk_level is RiskLevel.HIGH
        assert r.action is Action.BLOCK
        assert r.investigation_cost == 18000

    def test_from_row_short_and_malformed(self):
        r = TransactionRecord.from_row(["1", "oops", "1"])
        assert r.amount == 0.0
        assert r.actual_class == 1
        assert r.fraud_probability == 0.0
        assert r.risk_level is RiskLevel.LOW
        assert r.action is Action.ACCEPT

    def test_by_alias(self):
        r = TransactionRecord(Amount="10", Real_Class="1", Fraud_Prob="0.6")
        assert (r.amount, r.actual_class, r.fraud_probability) == (10.0, 1, 0.6)

    def test_out_of_range_kept(self):
        r = TransactionRecord(amount=-5, fraud_probability=1.4)
        assert r.amount == -5
        assert r.fraud_probability == 1.4

    def test_is_immutable(self):
        r = TransactionRecord(amount=1)
        with pytest.raises(Exception):
            r.amount = 2

    def test_count_defaults(self):
        assert count_defaults(["0", "1", "0", "0", "0.2", "Bajo", "Accept", "0", "0"]) == 0
        assert count_defaults(["0", "x", "0", "0", "0.2", "???", "Accept", "0", "0"]) == 2
        assert count_defaults(["0"]) == 8


class TestDataset:
    def test_fingerprint_depends_on_content(self):
        a = TransactionDataset([TransactionRecord(amount=1), TransactionRecord(amount=2)])
        b = TransactionDataset([TransactionRecord(amount=1), TransactionRecord(amount=2)])
        c = TransactionDataset([TransactionRecord(amount=2), TransactionRecord(amount=1)])
        assert a == b and hash(a) == hash(b)
        assert a != c

    def test_arrays(self):
        ds = TransactionDataset([TransactionRecord(amount=3, actual_class=1, fraud_probability=0.4)])
        assert ds.amounts.tolist() == [3.0]
        assert ds.actual.tolist() == [1]
        assert ds.probabilities.tolist() == [0.4]


class TestLoadTransactions:
    """Test CSV ingestion"""

    def test_loads_rows_and_skips_header(self, transactions_csv):
        ds = load_transactions(transactions_csv)
        assert len(ds) == 4
        assert ds[0].time == "0"
        assert ds[1].risk_level is RiskLevel.HIGH

    def test_malformed_fields_defaulted(self, transactions_csv):
        ds = load_transactions(transactions_csv)
        assert ds[2].amount == 0.0
        assert ds[2].risk_level is RiskLevel.MEDIUM
        assert ds[3].fraud_probability == 0.0
        assert ds[3].risk_level is RiskLevel.LOW
        assert ds[3].action is Action.ACCEPT

    def test_malformed_fields_logged(self, transactions_csv, caplog):
        with caplog.at_level("WARNING", logger="Ingestion"):
            load_transactions(transactions_csv)
        assert "malformed fields" in caplog.text

    def test_bytes_input(self):
        data = (TX_HEADER + "1,20,1,1,0.9,Alto,Block,20,5\n").encode("utf-8")
        ds = load_transactions(data)
        assert len(ds) == 1
        assert ds[0].amount == 20.0

    def test_ragged_rows(self):
        data = (TX_HEADER + "1,20,1\n" + "2,30,0,0,0.1,Bajo,Accept,0,0,extra,cells\n").encode("utf-8")
        ds = load_transactions(data)
        assert len(ds) == 2
        assert ds[0].fraud_probability == 0.0
        assert ds[1].amount == 30.0
        assert ds[1].investigation_cost == 0.0

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")
        assert len(load_transactions(path)) == 0

    def test_header_only(self):
        assert len(load_transactions(TX_HEADER.encode("utf-8"))) == 0


class TestLoadEconomicSummary:
    def test_loads_first_data_row(self):
        data = (SUMMARY_HEADER + "120,30,400,50000,1500000.5,300000,9360000,-8160000,-87.18,23.08\n").encode("utf-8")
        summary = load_economic_summary(data)
        assert isinstance(summary, EconomicSummary)
        assert (summary.tp, summary.fn, summary.fp, summary.tn) == (120, 30, 400, 50000)
        assert summary.detected_amount == 1500000.5
        assert summary.net_benefit == -8160000
        assert summary.precision == 23.08

    def test_defaults_on_bad_values(self):
        summary = load_economic_summary((SUMMARY_HEADER + "x,1,2\n").encode("utf-8"))
        assert summary.tp == 0
        assert summary.fn == 1
        assert summary.roi == 0.0

    def test_missing_data_row(self, caplog):
        with caplog.at_level("WARNING", logger="Ingestion"):
            assert load_economic_summary(SUMMARY_HEADER.encode("utf-8")) is None
        assert "no data row" in caplog.text

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
