from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from ..charts import ChartInput, ChartRenderer, coerce_chart_data
from ..chrome import draw_cover, draw_header, draw_notice_box
from ..config import BODY_FONT, COLORS, DATA_SOURCE_LINE, DATE_FORMAT, MESSAGES, PRODUCT_NAME
from ..context import ReportContext
from ..cursor import LayoutCursor
from ..metrics import (
    aggregate_totals,
    count_by,
    distinct_count,
    genus_and_epithet_counts,
    natural_sort_key,
    sort_aggregate,
)
from ..models import AggregateEntry, ColumnStyle, SpeciesSummary, SpecimenSummary, TableSpec
from ..surface import DrawingSurface
from ..tables import TableRenderer
from .base import ReportAssembler


NOTICE_SPACE = 30.0
# heading, header row and one body row
TABLE_HEADING_SPACE = 35.0


def _clip(text: Optional[str], limit: int) -> str:
    if not text:
        return "-"
    return text[:limit] + "..." if len(text) > limit else text


class DashboardReport(ReportAssembler):
    """
    Cover page with headline numbers, then compact-chrome pages with charts
    and a full table. The cover carries no footer.
    """

    footer_from_page = 2
    footer_rule_offset = 14.0
    footer_text_offset = 8.0
    source_line = DATA_SOURCE_LINE

    def __init__(self, context: Optional[ReportContext] = None, logo: Optional[bytes] = None):
        super().__init__(context, logo=logo)
        self.charts = ChartRenderer()
        self.last_table = None

    def cover_stats(self) -> Sequence[Tuple[str, object]]:
        return ()

    def compose_cover(self, surface: DrawingSurface) -> bool:
        draw_cover(surface, self.chrome, self.cover_stats(), logo=self.logo(), source_line=self.source_line)
        return True

    # ---- body helpers
    def draw_chart(self, cursor: LayoutCursor, data: Iterable[ChartInput], title: str, top_n: int) -> None:
        data = list(data)
        needed = self.charts.planned_height(cursor.surface, data, top_n) + 5
        cursor.check_break(needed)
        cursor.move_to(self.charts.render(cursor.surface, data, cursor.y + 5, title, top_n))

    def draw_notice(self, cursor: LayoutCursor, message: str) -> None:
        cursor.check_break(NOTICE_SPACE)
        cursor.move_to(draw_notice_box(cursor.surface, cursor.y, message))

    def draw_table(self, cursor: LayoutCursor, heading: str, spec: TableSpec, font_size: float = 9, padding: float = 3) -> None:
        cursor.check_break(TABLE_HEADING_SPACE)
        surface = cursor.surface
        surface.set_font(BODY_FONT, "B", 12)
        surface.set_text_color(COLORS["text"])
        surface.draw_text(heading, cursor.left, cursor.y)
        cursor.advance(5)
        renderer = TableRenderer(
            surface,
            safe_bottom=cursor.safe_bottom,
            top_offset=cursor.top_offset,
            font_size=font_size,
            cell_padding=padding,
            on_new_page=self.continuation_header,
        )
        self.last_table = renderer.render(cursor.y, spec)
        cursor.move_to(self.last_table.final_y)


class AggregateReport(DashboardReport):
    """Entities with a count each (families with their species, by default)."""

    kind = "aggregate"
    filename_prefix = "relatorio"
    source_line = "Data source: Flora do Brasil 2020 / SiBBr"

    def __init__(
        self,
        context: Optional[ReportContext],
        entries: Sequence[AggregateEntry],
        title: str = "General Families Report",
        entity_label: str = "Families",
        count_label: str = "Species",
        logo: Optional[bytes] = None,
    ):
        super().__init__(context, logo=logo)
        self.entries = list(entries)
        self.title = title
        self.entity_label = entity_label
        self.count_label = count_label

    def validate(self) -> None:
        coerce_chart_data((e.name, e.count) for e in self.entries)

    def cover_stats(self):
        totals = aggregate_totals(self.entries)
        return (
            (f"Total {self.entity_label}", totals.entries),
            (f"Total {self.count_label}", totals.total_count),
            (f"With {self.count_label}", totals.with_counts),
            (f"Without {self.count_label}", totals.without_counts),
        )

    def compose_body(self, cursor: LayoutCursor) -> None:
        ordered = sort_aggregate(self.entries)
        if any(e.count > 0 for e in ordered):
            self.draw_chart(
                cursor,
                [(e.name, e.count) for e in ordered],
                f"{self.count_label} Richness by {self.entity_label} (Top 15)",
                top_n=15,
            )
            cursor.advance(5)
        else:
            self.draw_notice(cursor, MESSAGES["no_chart_data"])

        spec = TableSpec(
            columns=["Family", "Authorship", self.count_label, "Registered"],
            rows=[[e.name, e.authorship or "-", e.count, e.created_at_display] for e in ordered],
            column_styles={
                0: ColumnStyle(width=50, font_style="B"),
                1: ColumnStyle(font_style="I", color=COLORS["text_light"]),
                2: ColumnStyle(width=25, align="C"),
                3: ColumnStyle(width=35, align="C"),
            },
        )
        self.draw_table(cursor, f"Breakdown by {self.entity_label}", spec, font_size=10, padding=4)


class SpeciesCatalogReport(DashboardReport):
    """
    Species dashboard. Without a project name it is the global catalog and
    gains a location column and location totals.
    """

    kind = "species"
    filename_prefix = "relatorio_especies"

    def __init__(
        self,
        context: Optional[ReportContext],
        species: Sequence[SpeciesSummary],
        project_name: Optional[str] = None,
        logo: Optional[bytes] = None,
    ):
        super().__init__(context, logo=logo)
        self.species = list(species)
        self.project_name = project_name
        if self.is_global:
            self.title = "General Species Report"
            self.source_line = f"Data source: {PRODUCT_NAME} DB - Global"
        else:
            self.title = f"Species Report - {project_name}"
            self.source_line = f"Data source: {PRODUCT_NAME} DB - {project_name}"
        self._family_counts = count_by((s.family_name for s in self.species), missing="No Family")
        self._genus_counts, self._epithet_counts = genus_and_epithet_counts(s.scientific_name for s in self.species)

    @property
    def is_global(self) -> bool:
        return not self.project_name

    @property
    def filename_stem(self) -> str:
        return "global" if self.is_global else self.project_name

    def cover_stats(self):
        no_common_name = sum(1 for s in self.species if not s.popular_name)
        stats: List[Tuple[str, object]] = [
            ("Total Species", len(self.species)),
            ("Total Families", len(self._family_counts)),
        ]
        if self.is_global:
            locations = count_by((s.location_name for s in self.species), missing="Not informed")
            stats.append(("Total Locations", len(locations)))
        else:
            stats.append(("Unique Genera", len(self._genus_counts)))
        stats.append(("No Common Name", no_common_name))
        return stats

    def compose_body(self, cursor: LayoutCursor) -> None:
        if self.species:
            self.draw_chart(cursor, self._family_counts, "Distribution by Family (Top 15)", top_n=15)
            if self._genus_counts:
                self.draw_chart(cursor, self._genus_counts, "Most Frequent Genera (Top 10)", top_n=10)
            if self._epithet_counts:
                self.draw_chart(cursor, self._epithet_counts, "Most Frequent Epithets (Top 10)", top_n=10)
        else:
            self.draw_notice(cursor, MESSAGES["no_chart_data"])

        ordered = sorted(self.species, key=lambda s: ((s.family_name or "").lower(), (s.scientific_name or "").lower()))
        columns = ["Scientific Name", "Popular Name", "Family"]
        styles = {
            0: ColumnStyle(font_style="I"),
            1: ColumnStyle(width=40),
            2: ColumnStyle(width=40),
        }
        if self.is_global:
            columns.append("Location")
            styles[3] = ColumnStyle(width=35)

        rows = []
        for s in ordered:
            row = [_clip(s.scientific_name, 60), _clip(s.popular_name, 40), _clip(s.family_name, 30)]
            if self.is_global:
                row.append(_clip(s.location_name or f"{PRODUCT_NAME} DB", 30))
            rows.append(row)
        self.draw_table(cursor, "Complete Species List", TableSpec(columns=columns, rows=rows, column_styles=styles))


class ProjectSpecimensReport(DashboardReport):
    """Specimens collected for one project, ordered by tombo number."""

    kind = "specimens"
    filename_prefix = "relatorio_especimes"
    title = "Project Specimens Report"

    def __init__(
        self,
        context: Optional[ReportContext],
        specimens: Sequence[SpecimenSummary],
        project_name: str,
        project_code: Optional[str] = None,
        logo: Optional[bytes] = None,
    ):
        super().__init__(context, logo=logo)
        self.specimens = list(specimens)
        self.project_name = project_name
        self.project_code = project_code

    @property
    def subtitle(self) -> Optional[str]:
        if self.project_code:
            return f"{self.project_name} ({self.project_code})"
        return self.project_name

    @property
    def filename_stem(self) -> str:
        return self.project_name

    def continuation_header(self, surface: DrawingSurface) -> float:
        spec = replace(self.chrome, title=f"Specimens Report - {self.project_name}")
        return draw_header(surface, spec, compact=True)

    def cover_stats(self):
        return (
            ("Total Specimens", len(self.specimens)),
            ("Unique Species", distinct_count(s.scientific_name for s in self.specimens)),
            ("Unique Collectors", distinct_count(s.collector for s in self.specimens)),
            ("With Coordinates", sum(1 for s in self.specimens if s.has_gps)),
        )

    def compose_body(self, cursor: LayoutCursor) -> None:
        if self.specimens:
            by_species = count_by((s.scientific_name for s in self.specimens), missing="Undetermined")
            by_family = count_by((s.family for s in self.specimens), missing="Undetermined")
            by_collector = count_by((s.collector for s in self.specimens), missing="No Collector")
            self.draw_chart(cursor, by_species, "Most Frequent Species (Top 10)", top_n=10)
            self.draw_chart(cursor, by_family, "Distribution by Family (Top 10)", top_n=10)
            if by_collector:
                self.draw_chart(cursor, by_collector, "Most Active Collectors (Top 10)", top_n=10)
        else:
            self.draw_notice(cursor, "No records found.")

        ordered = sorted(self.specimens, key=lambda s: natural_sort_key(s.tombo))
        rows = [
            [
                s.tombo or "-",
                _clip(s.scientific_name or "Undetermined", 50),
                _clip(s.family or "Undetermined", 30),
                _clip(s.collector, 30),
                format_collection_date(s.collected_on),
                "GPS OK" if s.has_gps else "No GPS",
            ]
            for s in ordered
        ]
        spec = TableSpec(
            columns=["Tombo", "Species", "Family", "Collector", "Date", "GPS"],
            rows=rows,
            column_styles={
                0: ColumnStyle(width=35, font_style="B"),
                1: ColumnStyle(font_style="I"),
                2: ColumnStyle(width=35),
                3: ColumnStyle(width=35),
                4: ColumnStyle(width=25, align="C"),
                5: ColumnStyle(width=20, align="C"),
            },
        )
        self.draw_table(cursor, "Complete Specimen List", spec)


def format_collection_date(value: Optional[str]) -> str:
    """ISO dates become dd/mm/yyyy; anything unparseable is shown as given."""
    if not value:
        return "-"
    parsed = pd.to_datetime(value, errors="coerce", format="ISO8601")
    if pd.isna(parsed):
        return str(value)
    return parsed.strftime(DATE_FORMAT)
