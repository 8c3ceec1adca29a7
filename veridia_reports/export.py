import csv
import json
from typing import Any, Dict, Optional, Sequence

import pandas as pd


def _flatten(value: Any) -> Any:
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return value


def rows_to_csv_bytes(rows: Sequence[Dict[str, Any]], columns: Optional[Sequence[str]] = None) -> bytes:
    """
    Spreadsheet-friendly CSV: UTF-8 with BOM so Excel detects the encoding,
    every value quoted. Columns default to the keys of the first row.
    """
    if not rows:
        return b""
    columns = list(columns) if columns else list(rows[0].keys())
    records = [{col: _flatten(row.get(col)) for col in columns} for row in rows]
    df = pd.DataFrame(records, columns=columns, dtype=object)
    text = df.to_csv(index=False, quoting=csv.QUOTE_ALL, na_rep="", lineterminator="\n")
    return text.encode("utf-8-sig")
