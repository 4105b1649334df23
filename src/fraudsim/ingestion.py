"""
ROLE: Record Ingestion
RESPONSIBILITIES:
1. Reads the scored-transactions CSV into a `TransactionDataset`.
2. Reads the one-row economic summary CSV into an `EconomicSummary`.
3. Reports (but never fails on) malformed fields; defaults are applied by the
   record constructors.

Both files are positional: the header row is discarded and columns are taken
by index, not by name.
"""
import io
import logging
from pathlib import Path
from typing import IO, List, Optional, Sequence, Union

import pandas as pd

from fraudsim.records import (
    SUMMARY_FIELDS, TRANSACTION_FIELDS, EconomicSummary, TransactionDataset,
    TransactionRecord, count_defaults,
)

logger = logging.getLogger("Ingestion")

Source = Union[str, Path, bytes, IO]


def _read_rows(source: Source, width: int) -> List[Sequence[str]]:
    """
    Reads a headerless CSV into rows of exactly `width` string cells.
    Short rows are padded with "", long rows are truncated, blank lines skipped.
    """
    if isinstance(source, bytes):
        source = io.BytesIO(source)

    try:
        df = pd.read_csv(
            source,
            header=None,
            names=list(range(width)),
            index_col=False,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=lambda fields: fields[:width],
            encoding="utf-8",
            encoding_errors="replace",
        )
    except pd.errors.EmptyDataError:
        return []

    df = df.fillna("")
    return [tuple(row) for row in df.itertuples(index=False, name=None)]


def load_transactions(source: Source) -> TransactionDataset:
    """Parses the transactions file. An empty file is a valid, empty dataset."""
    rows = _read_rows(source, len(TRANSACTION_FIELDS))[1:]

    records = [TransactionRecord.from_row(row) for row in rows]
    defaulted = sum(count_defaults(row) for row in rows)

    dataset = TransactionDataset(records)
    logger.info(f"✅ Loaded {len(dataset):,} transactions ({sum(r.is_fraud for r in records):,} labelled fraud)")
    if defaulted:
        logger.warning(f"⚠️ {defaulted:,} malformed fields replaced with defaults")
    return dataset


def load_economic_summary(source: Source) -> Optional[EconomicSummary]:
    """Parses the first data row of the summary file, or returns None if there is none."""
    rows = _read_rows(source, len(SUMMARY_FIELDS))
    if len(rows) < 2:
        logger.warning("⚠️ Economic summary file has no data row. Skipping.")
        return None

    summary = EconomicSummary.from_row(rows[1])
    logger.info(f"✅ Loaded economic summary (TP={summary.tp}, FP={summary.fp}, net={summary.net_benefit:,.2f})")
    return summary
