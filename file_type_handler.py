import csv
import io
import os

import pandas as pd

from cell_coercion import cell_text
from column_layout import ColumnDescriptor, describe_columns
from errors import DatasetFileError, InputError

SEPARATORS = {".csv": ",", ".tsv": "\t"}


def validate_column_ids(column_ids) -> list[str]:
    ids = [str(c) for c in column_ids]
    if not ids:
        raise InputError("Dataset has no columns")
    seen = set()
    for col in ids:
        if not col.strip():
            raise InputError("Column ids must be non-empty")
        if col in seen:
            raise InputError(f"Duplicate column id '{col}'")
        seen.add(col)
    return ids


def ingest_records(records, columns=None):
    """Build a frame from flat records; every row gets every column."""
    records = list(records or [])
    if not records:
        raise InputError("Dataset is empty")

    if columns is not None:
        descriptors = [
            c if isinstance(c, ColumnDescriptor) else ColumnDescriptor(id=str(c), header=str(c))
            for c in columns
        ]
        ids = validate_column_ids(d.id for d in descriptors)
    else:
        descriptors = None
        ids = []
        for record in records:
            for key in record:
                if str(key) not in ids:
                    ids.append(str(key))
        ids = validate_column_ids(ids)

    rows = [{str(k): v for k, v in record.items()} for record in records]
    frame = pd.DataFrame.from_records(rows, columns=ids).astype(object)
    frame = frame.where(frame.notna(), "")
    if descriptors is None:
        descriptors = describe_columns(frame)
    return frame, descriptors


def parse_csv(text: str, sep: str = ","):
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            sep=sep,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as exc:
        raise InputError("Dataset is empty") from exc
    except (pd.errors.ParserError, ValueError) as exc:
        raise DatasetFileError(f"Could not parse data: {exc}") from exc

    validate_column_ids(frame.columns)
    if frame.empty:
        raise InputError("Dataset is empty")
    frame = frame.astype(object)
    return frame, describe_columns(frame)


def to_csv_text(frame: pd.DataFrame, order=None, sep: str = ",") -> str:
    """Serialise in display order with column ids as headers."""
    columns = [c for c in (order or frame.columns) if c in frame.columns]
    out = frame[columns].map(cell_text)
    return out.to_csv(index=False, sep=sep, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")


class FileTypeHandler:
    def __init__(self, path: str):
        self.path = path
        _, ext = os.path.splitext(path)
        self.ext = ext.lower()

        if self.ext not in SEPARATORS:
            raise DatasetFileError("Unsupported file type (use .csv or .tsv)")

    @property
    def sep(self) -> str:
        return SEPARATORS[self.ext]

    def load(self):
        if not os.path.exists(self.path):
            raise DatasetFileError(f"No such file: {self.path}")
        try:
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise DatasetFileError(f"Could not read {self.path}: {exc}") from exc
        return parse_csv(text, sep=self.sep)

    def save(self, frame: pd.DataFrame, order=None) -> None:
        data = to_csv_text(frame, order, sep=self.sep)
        try:
            with open(self.path, "w", encoding="utf-8", newline="") as f:
                f.write(data)
        except OSError as exc:
            raise DatasetFileError(f"Could not write {self.path}: {exc}") from exc
