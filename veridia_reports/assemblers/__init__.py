from .base import RenderedDocument, ReportAssembler
from .dashboards import AggregateReport, DashboardReport, ProjectSpecimensReport, SpeciesCatalogReport
from .detail import EntityDetailReport
from .fact_sheet import FactSheetReport
from .generic import GenericTableReport
from .labels import LabelSheetReport

__all__ = [
    "AggregateReport",
    "DashboardReport",
    "EntityDetailReport",
    "FactSheetReport",
    "GenericTableReport",
    "LabelSheetReport",
    "ProjectSpecimensReport",
    "RenderedDocument",
    "ReportAssembler",
    "SpeciesCatalogReport",
]
