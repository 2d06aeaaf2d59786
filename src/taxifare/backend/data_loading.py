import logging
import re
from pathlib import Path

import numpy as np
import pandas as pd

from taxifare.backend.errors import LoadError
from taxifare.utils.constants import TRIP_SCHEMA

logger = logging.getLogger(__name__)

_PARSER_LINE = re.compile(r"line (\d+)")


def load_table(path, schema: dict, delimiter: str = ",", has_header: bool = True) -> pd.DataFrame:
    """Reads a delimited text file into a DataFrame typed by ``schema``.

    ``schema`` maps column names to ``str``, ``int`` or ``float`` in file order.
    Blank lines are skipped. The header row, when present, is the first
    non-blank line; its names are not checked. Raises LoadError naming the 1-based line of the first bad row.
    """
    path = Path(path)
    if not path.is_file():
        raise LoadError("file not found", path=path)

    raw = _read_raw(path, len(schema), delimiter)
    # Index rows by physical line, then drop blank lines
    raw.index = raw.index + 1
    raw = raw.dropna(how="all")
    if has_header and not raw.empty:
        raw = raw.iloc[1:]
    raw.columns = list(schema)

    missing = raw.isna().any(axis=1)
    if missing.any():
        line = int(missing.idxmax())
        raise LoadError(f"line {line}: expected {len(schema)} non-empty fields", path=path, line=line)

    table = pd.DataFrame(
        {name: _parse_column(raw[name], kind, path) for name, kind in schema.items()}
    ).reset_index(drop=True)
    logger.info("Loaded %d rows from %s", len(table), path)
    return table


def load_trips(path, config) -> pd.DataFrame:
    return load_table(path, TRIP_SCHEMA, delimiter=config.delimiter, has_header=config.has_header)


def _read_raw(path: Path, n_fields: int, delimiter: str) -> pd.DataFrame:
    try:
        raw = pd.read_csv(
            path,
            sep=delimiter,
            header=None,
            dtype=str,
            keep_default_na=False,
            na_values=[""],
            skip_blank_lines=False,
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=range(n_fields), dtype=str)
    except pd.errors.ParserError as exc:
        match = _PARSER_LINE.search(str(exc))
        line = int(match.group(1)) if match else None
        where = f"line {line}" if line else "malformed row"
        raise LoadError(f"{where}: wrong number of fields ({exc})", path=path, line=line) from exc

    # The first line fixes the width pandas expects for the rest of the file
    if raw.shape[1] != n_fields:
        raise LoadError(f"line 1: expected {n_fields} fields, found {raw.shape[1]}", path=path, line=1)
    return raw


def _parse_column(values: pd.Series, kind, path: Path) -> pd.Series:
    if kind is str:
        return values.astype(str)

    parsed = pd.to_numeric(values, errors="coerce")
    bad = parsed.isna()
    if kind is int:
        bad |= parsed.notna() & (parsed % 1 != 0)
    if bad.any():
        line = int(bad.idxmax())
        raise LoadError(
            f"line {line}: cannot parse {values.name}={values.loc[line]!r} as {kind.__name__}",
            path=path,
            line=line,
        )
    return parsed.astype(np.int64 if kind is int else np.float64)
