import math
from typing import List, Optional, Sequence

from ..chrome import draw_notice_box
from ..config import (
    COLORS,
    LABEL_FONT,
    LABEL_HEADING,
    LABEL_SUBHEADING,
    MESSAGES,
)
from ..context import ReportContext
from ..cursor import LayoutCursor
from ..errors import ReportInputError
from ..models import LabelRecord
from ..surface import DrawingSurface
from .base import ReportAssembler

LABEL_WIDTH = 90.0
LABEL_HEIGHT = 130.0
GRID_MARGIN = 10.0
GRID_GAP = 10.0
LABELS_PER_PAGE = 4
FIELD_LINE_HEIGHT = 4.5
FOOTER_BAND = 14.0
COLLECTOR_BUDGET = 35

REQUIRED_FIELDS = ("scientific_name", "family", "collector", "date", "locality", "determinant")


def truncate_lines(lines: Sequence[str], max_lines: int) -> List[str]:
    """Keep at most ``max_lines``; a cut block ends its last line with '...'."""
    if len(lines) <= max_lines:
        return list(lines)
    kept = list(lines[: max(max_lines, 0)])
    if kept and len(kept[-1]) > 3:
        kept[-1] = kept[-1][:-3] + "..."
    return kept


class LabelSheetReport(ReportAssembler):
    """Herbarium labels, 2x2 bordered cells per A4 page. No header or footer."""

    kind = "labels"
    filename_prefix = "etiquetas"
    title = "Herbarium Labels"

    def __init__(self, records: Sequence[LabelRecord], context: Optional[ReportContext] = None):
        super().__init__(context)
        self.records = list(records)

    @property
    def filename_stem(self) -> str:
        return ""

    @property
    def expected_pages(self) -> int:
        return max(1, math.ceil(len(self.records) / LABELS_PER_PAGE))

    def validate(self) -> None:
        for idx, record in enumerate(self.records):
            missing = [name for name in REQUIRED_FIELDS if not str(getattr(record, name, "") or "").strip()]
            if missing:
                raise ReportInputError(f"Label {idx + 1} is missing: {', '.join(missing)}")

    def first_page_header(self, surface: DrawingSurface) -> float:
        return GRID_MARGIN

    def apply_footer(self, surface: DrawingSurface, from_page: int) -> None:
        return None

    def compose_body(self, cursor: LayoutCursor) -> None:
        surface = cursor.surface
        if not self.records:
            draw_notice_box(surface, GRID_MARGIN + 10, MESSAGES["no_labels"])
            return

        for index, record in enumerate(self.records):
            if index > 0 and index % LABELS_PER_PAGE == 0:
                surface.add_page()
            slot = index % LABELS_PER_PAGE
            x = GRID_MARGIN + (slot % 2) * (LABEL_WIDTH + GRID_GAP)
            y = GRID_MARGIN + (slot // 2) * (LABEL_HEIGHT + GRID_GAP)
            self.draw_label(surface, record, x, y)

    def draw_label(self, surface: DrawingSurface, item: LabelRecord, x: float, y: float) -> None:
        center = x + LABEL_WIDTH / 2
        left = x + 5
        value_x = x + 18
        value_width = LABEL_WIDTH - 20
        lh = FIELD_LINE_HEIGHT

        surface.set_draw_color(COLORS["text"])
        surface.set_text_color(COLORS["text"])
        surface.set_line_width(0.4)
        surface.draw_rect(x, y, LABEL_WIDTH, LABEL_HEIGHT, style="D")

        surface.set_font(LABEL_FONT, "B", 12)
        surface.draw_text(LABEL_HEADING, center, y + 10, align="center")
        surface.set_font(LABEL_FONT, "", 10)
        surface.draw_text(LABEL_SUBHEADING, center, y + 15, align="center")
        surface.set_line_width(0.2)
        surface.draw_line(x + 5, y + 18, x + LABEL_WIDTH - 5, y + 18)

        if item.sequence_number not in (None, ""):
            surface.set_font(LABEL_FONT, "B", 9)
            surface.draw_text(str(item.sequence_number), x + LABEL_WIDTH - 5, y + 8, align="right")

        cur = y + 24
        surface.set_font(LABEL_FONT, "B", 11)
        surface.draw_text(item.family.upper(), center, cur, align="center")
        cur += 6

        surface.set_font(LABEL_FONT, "BI", 11)
        name = f"{item.scientific_name} {item.author}" if item.author else item.scientific_name
        name_lines = surface.split_to_width(name, LABEL_WIDTH - 10)
        surface.draw_lines(name_lines, center, cur, 5, align="center")
        cur += len(name_lines) * 5 + 2

        if item.popular_name:
            surface.set_font(LABEL_FONT, "", 10)
            popular_lines = surface.split_to_width(f"Popular name: {item.popular_name}", LABEL_WIDTH - 10)
            surface.draw_lines(popular_lines, left, cur, 5)
            cur += len(popular_lines) * 5 + 2
        else:
            cur += 2

        determination = item.determinant
        if item.determination_date:
            determination += f"  Date: {item.determination_date}"
        self._field(surface, "Det.:", [determination], left, value_x, cur)
        cur += lh

        surface.set_font(LABEL_FONT, "", 9)
        locality = f"{item.locality}  {item.coordinates}" if item.coordinates else item.locality
        loc_lines = surface.split_to_width(locality, value_width)
        self._field(surface, "Loc.:", loc_lines, left, value_x, cur)
        cur += len(loc_lines) * lh

        if item.habitat:
            surface.set_font(LABEL_FONT, "", 9)
            hab_lines = surface.split_to_width(item.habitat, value_width)
            self._field(surface, "Hab.:", hab_lines, left, value_x, cur)
            cur += len(hab_lines) * lh

        description = item.description()
        if description:
            surface.set_font(LABEL_FONT, "", 9)
            footer_start = y + LABEL_HEIGHT - FOOTER_BAND
            max_lines = math.floor((footer_start - cur) / lh)
            note_lines = truncate_lines(surface.split_to_width(description, value_width), max_lines)
            if note_lines:
                self._field(surface, "Descr.:", note_lines, left, value_x, cur)

        footer_y = y + LABEL_HEIGHT - 12
        collector = item.collector
        if item.collector_number:
            collector += f"  Nº: {item.collector_number}"
        if len(collector) > COLLECTOR_BUDGET:
            collector = collector[:32] + "..."
        self._field(surface, "Coll.:", [collector], left, x + 14, footer_y)
        self._field(surface, "Date:", [item.date], left, x + 14, footer_y + 5)

    @staticmethod
    def _field(surface: DrawingSurface, label: str, lines: Sequence[str], label_x: float, value_x: float, y: float) -> None:
        surface.set_font(LABEL_FONT, "B", 9)
        surface.draw_text(label, label_x, y)
        surface.set_font(LABEL_FONT, "", 9)
        surface.draw_lines(list(lines), value_x, y, FIELD_LINE_HEIGHT)
