import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .models import AggregateEntry, ChartDatum


@dataclass
class AggregateTotals:
    entries: int
    total_count: int
    with_counts: int
    without_counts: int


def count_by(values: Iterable[Optional[str]], missing: str = "Unknown") -> List[ChartDatum]:
    """
    Count occurrences of each value, mapping blanks to ``missing``.
    Result is sorted by count (desc) then name.
    """
    series = pd.Series(list(values), dtype=object)
    if series.empty:
        return []
    series = series.where(series.notna() & (series.astype(str).str.strip() != ""), missing)
    counts = series.astype(str).value_counts()
    frame = counts.rename_axis("name").reset_index(name="count")
    frame = frame.sort_values(["count", "name"], ascending=[False, True])
    return [ChartDatum(str(name), int(count)) for name, count in zip(frame["name"], frame["count"])]


def distinct_count(values: Iterable[Optional[str]]) -> int:
    """Number of distinct values; missing values count as one bucket."""
    series = pd.Series(list(values), dtype=object)
    return int(series.nunique(dropna=False))


def genus_and_epithet_counts(names: Iterable[Optional[str]]) -> Tuple[List[ChartDatum], List[ChartDatum]]:
    """
    Split binomial names into genus (first token, as written) and specific
    epithet (second token, lowercased) and count each.
    """
    tokens = pd.Series([(n or "").strip() for n in names], dtype=object).str.split()
    if tokens.empty:
        return [], []
    genus = tokens.map(lambda parts: parts[0] if len(parts) >= 1 else None).dropna()
    epithet = tokens.map(lambda parts: parts[1].lower() if len(parts) >= 2 else None).dropna()
    return count_by(genus), count_by(epithet)


def aggregate_totals(entries: Sequence[AggregateEntry]) -> AggregateTotals:
    if not entries:
        return AggregateTotals(entries=0, total_count=0, with_counts=0, without_counts=0)
    counts = pd.Series([e.count for e in entries], dtype="int64")
    with_counts = int((counts > 0).sum())
    return AggregateTotals(
        entries=len(entries),
        total_count=int(counts.sum()),
        with_counts=with_counts,
        without_counts=len(entries) - with_counts,
    )


def sort_aggregate(entries: Sequence[AggregateEntry]) -> List[AggregateEntry]:
    return sorted(entries, key=lambda e: (-e.count, e.name))


def natural_sort_key(value: Optional[str]):
    """Sort key that orders embedded numbers numerically ("A-2" < "A-10")."""
    parts = [p for p in re.split(r"(\d+)", value or "") if p]
    return [(0, int(p), "") if p.isdecimal() else (1, 0, p.lower()) for p in parts]
