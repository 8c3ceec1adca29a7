from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from .errors import ReportInputError

CellValue = Union[str, int, float, None]
RGB = Tuple[int, int, int]


def first_of(relation: Any) -> Any:
    """
    Joined relations arrive either as one object or as a list holding it.
    Normalize both shapes (and empties) to a single object or None.
    """
    if relation is None:
        return None
    if isinstance(relation, (list, tuple)):
        return relation[0] if relation else None
    return relation


@dataclass(frozen=True)
class ChartDatum:
    name: str
    count: int

    def __post_init__(self):
        if self.count < 0:
            raise ReportInputError(f"Negative count for {self.name!r}: {self.count}")


@dataclass(frozen=True)
class ColumnStyle:
    width: Optional[float] = None
    align: str = "L"
    font_style: str = ""
    color: Optional[RGB] = None


@dataclass
class TableSpec:
    columns: Sequence[str]
    rows: Sequence[Sequence[CellValue]]
    column_styles: Dict[int, ColumnStyle] = field(default_factory=dict)
    header_fill: Optional[RGB] = None
    font_size: Optional[float] = None

    @classmethod
    def from_frame(cls, df: pd.DataFrame, column_styles: Optional[Dict[int, ColumnStyle]] = None) -> "TableSpec":
        rows = df.astype(object).where(pd.notna(df), "-").values.tolist()
        return cls(columns=[str(c) for c in df.columns], rows=rows, column_styles=column_styles or {})

    def style_for(self, index: int) -> ColumnStyle:
        return self.column_styles.get(index, ColumnStyle())


@dataclass(frozen=True)
class TableResult:
    final_y: float
    pages: int
    header_rows: int


@dataclass(frozen=True)
class AggregateEntry:
    name: str
    count: int
    created_at_display: str
    authorship: Optional[str] = None


@dataclass
class DetailSection:
    columns: Sequence[str]
    rows: Sequence[Sequence[CellValue]]
    title: Optional[str] = None
    column_styles: Dict[int, ColumnStyle] = field(default_factory=dict)
    empty_message: Optional[str] = None
    header_fill: Optional[RGB] = None
    # Sections with nothing to show and no message are skipped entirely.
    hide_when_empty: bool = False


@dataclass
class EntityDetail:
    name: str
    authorship: Optional[str] = None
    source: Optional[str] = None
    fields: List[Tuple[str, CellValue]] = field(default_factory=list)


@dataclass
class LabelRecord:
    scientific_name: str
    family: str
    collector: str
    date: str
    locality: str
    determinant: str
    author: Optional[str] = None
    popular_name: Optional[str] = None
    collector_number: Optional[str] = None
    coordinates: Optional[str] = None
    habitat: Optional[str] = None
    notes: Optional[str] = None
    morphology: Optional[str] = None
    determination_date: Optional[str] = None
    sequence_number: Optional[Union[int, str]] = None

    def description(self) -> str:
        parts = [p for p in (self.morphology, self.notes) if p]
        return ". ".join(parts)


@dataclass
class SpeciesRecord:
    """Narrative payload for the single-species fact sheet."""

    scientific_name: str
    popular_name: Optional[str] = None
    family: Any = None
    location: Any = None
    description: Optional[str] = None
    light: Optional[str] = None
    water: Optional[str] = None
    temperature: Optional[str] = None
    substrate: Optional[str] = None
    nutrients: Optional[str] = None
    local_description: Optional[str] = None
    field_notes: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    image_urls: List[str] = field(default_factory=list)

    @property
    def family_name(self) -> Optional[str]:
        return _relation_value(self.family, "familia_nome")

    @property
    def location_name(self) -> Optional[str]:
        return _relation_value(self.location, "nome")

    @property
    def image_url(self) -> Optional[str]:
        return self.image_urls[0] if self.image_urls else None


@dataclass(frozen=True)
class CultivationGuide:
    items: Tuple[Tuple[str, str], ...]
    title: str = "Cultivation Guide"


@dataclass(frozen=True)
class FieldNotes:
    items: Tuple[Tuple[str, str], ...]
    title: str = "Field Details & Location"


Section = Union[CultivationGuide, FieldNotes]


def resolve_section(record: SpeciesRecord, is_local: bool) -> Section:
    """Pick the one role-dependent section a fact sheet shows."""
    if is_local:
        items = []
        if record.field_notes:
            items.append(("Field Notes", record.field_notes))
        if record.latitude is not None or record.longitude is not None:
            lat = "-" if record.latitude is None else record.latitude
            lng = "-" if record.longitude is None else record.longitude
            items.append(("GPS Coordinates", f"Lat: {lat} | Long: {lng}"))
        return FieldNotes(items=tuple(items))

    care = (
        ("Light", record.light),
        ("Watering", record.water),
        ("Temperature", record.temperature),
        ("Substrate", record.substrate),
        ("Nutrients", record.nutrients),
    )
    return CultivationGuide(items=tuple((label, value) for label, value in care if value))


@dataclass
class SpeciesSummary:
    scientific_name: str
    popular_name: Optional[str] = None
    family: Any = None
    location: Any = None

    @property
    def family_name(self) -> Optional[str]:
        return _relation_value(self.family, "familia_nome")

    @property
    def location_name(self) -> Optional[str]:
        return _relation_value(self.location, "nome")


@dataclass
class SpecimenSummary:
    tombo: str
    scientific_name: Optional[str] = None
    family: Optional[str] = None
    collector: Optional[str] = None
    collected_on: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_gps(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def _relation_value(relation: Any, key: str) -> Optional[str]:
    item = first_of(relation)
    if item is None:
        return None
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        return item.get(key)
    return getattr(item, key, None)
