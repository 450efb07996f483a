"""CSV import and export of text pairs and distances.

Import reads ``Query Text, Stored Text, Related`` files on a best-effort
basis: a malformed row becomes an empty pair instead of aborting the
import. Export writes one row per pair with 4-decimal distances per model
and a trailing ``Optimal Threshold`` row.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

import pandas as pd

from .comparison.labels import parse_related_label
from .errors import ImportFormatError

if TYPE_CHECKING:
    from .comparison.orchestrator import ComparisonOrchestrator

logger = logging.getLogger(__name__)

QUERY_COLUMN = "Query Text"
STORED_COLUMN = "Stored Text"
RELATED_COLUMN = "Related"
THRESHOLD_ROW_LABEL = "Optimal Threshold"


class ImportedRow(NamedTuple):
    """One parsed CSV row."""

    query_text: str
    stored_text: str
    related: bool


def _find_column(columns: list[str], name: str, position: int) -> int | None:
    """Locate a header case-insensitively, falling back to column position."""
    for index, column in enumerate(columns):
        if column.strip().lower() == name.lower():
            return index
    known = {QUERY_COLUMN.lower(), STORED_COLUMN.lower(), RELATED_COLUMN.lower()}
    if any(column.strip().lower() in known for column in columns):
        return None
    return position if position < len(columns) else None


def _cell(record: list[str], index: int | None) -> str:
    return record[index] if index is not None else ""


def _is_threshold_row(
    record: list[str], query_text: str, related_column: int | None
) -> bool:
    return (
        query_text == THRESHOLD_ROW_LABEL
        and related_column is not None
        and not _cell(record, related_column).strip()
    )


def read_pairs(path: Path | str) -> list[ImportedRow]:
    """Read text pairs and labels from a CSV file.

    The header row is read as data so that a first row with extra fields
    cannot be mistaken for an index column. Rows with more fields than the
    header become empty pairs; rows with fewer are padded with empty cells.

    Args:
        path: CSV file with a header row

    Returns:
        Parsed rows in file order

    Raises:
        ImportFormatError: If the file cannot be read or has no header
    """
    try:
        header = pd.read_csv(
            path,
            header=None,
            nrows=1,
            dtype=str,
            keep_default_na=False,
            engine="python",
        )
        columns = [str(column) for column in header.iloc[0].tolist()]
        blank = [""] * len(columns)

        frame = pd.read_csv(
            path,
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            # Rows with extra fields become empty pairs
            on_bad_lines=lambda bad_line: list(blank),
        )
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as e:
        raise ImportFormatError(f"Failed to read CSV {path}: {e}", e) from e
    except pd.errors.EmptyDataError as e:
        raise ImportFormatError(f"CSV {path} is empty", e) from e

    records = frame.fillna("").astype(str).values.tolist()[1:]
    query_column = _find_column(columns, QUERY_COLUMN, 0)
    stored_column = _find_column(columns, STORED_COLUMN, 1)
    related_column = _find_column(columns, RELATED_COLUMN, 2)

    rows = []
    for position, record in enumerate(records):
        query_text = _cell(record, query_column)
        stored_text = _cell(record, stored_column)

        # Only the exported trailing row; a real pair always has a label
        if position == len(records) - 1 and _is_threshold_row(
            record, query_text, related_column
        ):
            continue
        rows.append(
            ImportedRow(
                query_text,
                stored_text,
                parse_related_label(_cell(record, related_column)),
            )
        )

    logger.debug(f"Read {len(rows)} rows from {path}")
    return rows


def _format_distance(value: float | None) -> str:
    return "" if value is None else f"{value:.4f}"


def build_export_frame(orchestrator: "ComparisonOrchestrator") -> pd.DataFrame:
    """Build the export table for every pair and active model.

    Distances not currently computed are left blank, as are thresholds of
    models without related values.
    """
    models = orchestrator.active_models()
    records = []
    for pair in orchestrator.pairs:
        record = {
            QUERY_COLUMN: pair.query_text,
            STORED_COLUMN: pair.stored_text,
            RELATED_COLUMN: "Yes" if orchestrator.labels.get(pair.index) else "No",
        }
        for model in models:
            record[model] = _format_distance(orchestrator.entry(pair.index, model).value)
        records.append(record)

    threshold_record = {QUERY_COLUMN: THRESHOLD_ROW_LABEL, STORED_COLUMN: "", RELATED_COLUMN: ""}
    for model in models:
        threshold_record[model] = _format_distance(orchestrator.threshold(model))
    records.append(threshold_record)

    return pd.DataFrame(
        records, columns=[QUERY_COLUMN, STORED_COLUMN, RELATED_COLUMN, *models]
    )


def write_csv(orchestrator: "ComparisonOrchestrator", path: Path | str) -> Path:
    """Export pairs, labels, distances and thresholds to a CSV file."""
    path = Path(path)
    build_export_frame(orchestrator).to_csv(path, index=False)
    logger.debug(f"Exported {len(orchestrator.pairs)} pairs to {path}")
    return path
