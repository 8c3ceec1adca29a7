"""
Report generation for the Veridia Saber botanical collection.

Assemblers turn already-fetched records into paginated A4 PDFs: table
reports, entity details, dashboards with bar charts, species fact sheets
and herbarium label sheets. Drawing, layout and output live in separate
modules so each piece can be tested on its own.
"""

from .assemblers import (
    AggregateReport,
    EntityDetailReport,
    FactSheetReport,
    GenericTableReport,
    LabelSheetReport,
    ProjectSpecimensReport,
    RenderedDocument,
    ReportAssembler,
    SpeciesCatalogReport,
)
from .config import DEFAULT_REPORT_DIR, ENV_LOGO_PATH
from .context import ChromeSpec, PageGeometry, ReportContext
from .errors import ReportInputError
from .models import (
    AggregateEntry,
    ChartDatum,
    ColumnStyle,
    DetailSection,
    EntityDetail,
    LabelRecord,
    SpeciesRecord,
    SpeciesSummary,
    SpecimenSummary,
    TableSpec,
    first_of,
)
from .report_presets import REPORT_PRESETS, build_assembler, generate_report

__all__ = [
    "AggregateEntry",
    "AggregateReport",
    "ChartDatum",
    "ChromeSpec",
    "ColumnStyle",
    "DEFAULT_REPORT_DIR",
    "DetailSection",
    "ENV_LOGO_PATH",
    "EntityDetail",
    "EntityDetailReport",
    "FactSheetReport",
    "GenericTableReport",
    "LabelRecord",
    "LabelSheetReport",
    "PageGeometry",
    "ProjectSpecimensReport",
    "REPORT_PRESETS",
    "RenderedDocument",
    "ReportAssembler",
    "ReportContext",
    "ReportInputError",
    "SpeciesCatalogReport",
    "SpeciesRecord",
    "SpeciesSummary",
    "SpecimenSummary",
    "TableSpec",
    "build_assembler",
    "first_of",
    "generate_report",
]
