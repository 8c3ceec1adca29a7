from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

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
from .errors import ReportInputError


@dataclass(frozen=True)
class ReportPreset:
    label: str
    factory: Callable[..., ReportAssembler]
    audience: str = "general"


REPORT_PRESETS: Dict[str, ReportPreset] = {
    "table": ReportPreset(label="Generic Table", factory=GenericTableReport),
    "detail": ReportPreset(label="Entity Detail", factory=EntityDetailReport),
    "family_detail": ReportPreset(label="Family Detail", factory=EntityDetailReport.for_family, audience="curator"),
    "families": ReportPreset(label="Families Dashboard", factory=AggregateReport, audience="curator"),
    "species": ReportPreset(label="Species Catalog", factory=SpeciesCatalogReport),
    "specimens": ReportPreset(label="Project Specimens", factory=ProjectSpecimensReport, audience="collection_manager"),
    "fact_sheet": ReportPreset(label="Species Fact Sheet", factory=FactSheetReport),
    "labels": ReportPreset(label="Herbarium Labels", factory=LabelSheetReport, audience="collection_manager"),
}


def build_assembler(kind: str, **kwargs) -> ReportAssembler:
    preset = REPORT_PRESETS.get(kind)
    if not preset:
        raise ReportInputError(f"Unknown report kind: {kind!r}")
    return preset.factory(**kwargs)


def generate_report(kind: str, output_dir: Optional[Path] = None, **kwargs) -> RenderedDocument:
    """
    Convenience helper: build the named report and, when ``output_dir`` is
    given, save it there with its metadata sidecar.
    """
    document = build_assembler(kind, **kwargs).build()
    if output_dir is not None:
        document.save(output_dir)
    return document
