import pytest

from veridia_reports.assemblers import AggregateReport, ProjectSpecimensReport, SpeciesCatalogReport
from veridia_reports.assemblers import dashboards
from veridia_reports.assemblers.dashboards import format_collection_date
from veridia_reports.config import CONFIDENTIAL_LINE
from veridia_reports.errors import ReportInputError
from veridia_reports.models import AggregateEntry, SpeciesSummary, SpecimenSummary
from veridia_reports.surface import DrawingSurface


@pytest.fixture
def drawn_text(monkeypatch):
    drawn = []
    draw_text = DrawingSurface.draw_text

    def spy(self, text, x, y, align="left"):
        drawn.append((self.current_page, text))
        draw_text(self, text, x, y, align=align)

    monkeypatch.setattr(DrawingSurface, "draw_text", spy)
    return drawn


def _families(n, count=3):
    return [AggregateEntry(f"Family{i:02d}aceae", count + i % 5, "01/02/2024", "L.") for i in range(n)]


def test_aggregate_report_has_cover_and_footers_from_page_two(drawn_text, context):
    report = AggregateReport(context, _families(60))
    document = report.build()

    assert document.page_count >= 3
    footers = [text for _, text in drawn_text if text.startswith("Page ")]
    assert footers == [f"Page {i} of {document.page_count}" for i in range(2, document.page_count + 1)]
    assert all(page != 1 for page, text in drawn_text if text.startswith("Page "))
    assert report.last_table.header_rows == report.last_table.pages
    assert document.filename == "relatorio_general_families_report.pdf"


def test_aggregate_report_without_counts_shows_notice(monkeypatch, context):
    notices = []
    original = dashboards.draw_notice_box

    def spy(surface, y, message):
        notices.append(message)
        return original(surface, y, message)

    monkeypatch.setattr(dashboards, "draw_notice_box", spy)
    document = AggregateReport(context, _families(4, count=0)[:1]).build()
    assert notices == [dashboards.MESSAGES["no_chart_data"]]
    assert document.page_count == 2


def test_aggregate_report_rejects_negative_counts(context):
    entries = [AggregateEntry("Asteraceae", 5, "01/02/2024"), AggregateEntry("Lauraceae", -1, "01/02/2024")]
    with pytest.raises(ReportInputError):
        AggregateReport(context, entries).build()


def test_cover_stats(context):
    entries = [
        AggregateEntry("Asteraceae", 5, "01/02/2024"),
        AggregateEntry("Lauraceae", 0, "03/02/2024"),
        AggregateEntry("Myrtaceae", 2, "04/02/2024"),
    ]
    stats = dict(AggregateReport(context, entries).cover_stats())
    assert stats == {
        "Total Families": 3,
        "Total Species": 7,
        "With Species": 2,
        "Without Species": 1,
    }


def _species():
    return [
        SpeciesSummary("Mikania glomerata", "Guaco", [{"familia_nome": "Asteraceae"}], {"nome": "Horto"}),
        SpeciesSummary("Mikania laevigata", None, {"familia_nome": "Asteraceae"}, None),
        SpeciesSummary("Ocotea odorifera", "Canela-sassafrás", "Lauraceae", [{"nome": "Trilha Norte"}]),
        SpeciesSummary("Eugenia uniflora", "Pitanga", None, None),
    ]


def test_global_species_catalog(drawn_text, context):
    report = SpeciesCatalogReport(context, _species())
    document = report.build()

    assert report.is_global
    assert document.filename == "relatorio_especies_global.pdf"
    texts = [text for _, text in drawn_text]
    assert "Location" in texts
    assert "Most Frequent Genera (Top 10)" in texts
    stats = dict(report.cover_stats())
    assert stats["Total Species"] == 4
    assert stats["Total Families"] == 3
    assert stats["No Common Name"] == 1


def test_project_species_catalog_has_no_location_column(drawn_text, context):
    report = SpeciesCatalogReport(context, _species(), project_name="Mata Atlântica")
    document = report.build()

    assert document.filename == "relatorio_especies_mata_atl_ntica.pdf"
    assert "Location" not in [text for _, text in drawn_text]
    assert dict(report.cover_stats())["Unique Genera"] == 3


def test_empty_species_catalog_still_renders(context):
    document = SpeciesCatalogReport(context, []).build()
    assert document.page_count == 2


def test_project_specimens_are_naturally_sorted(drawn_text, context):
    specimens = [
        SpecimenSummary("HVS-10", "Mikania glomerata", "Asteraceae", "M. Pereira", "2024-03-12", -23.4, -45.0),
        SpecimenSummary("HVS-2", "Ocotea odorifera", "Lauraceae", "J. Ramos", "2024-03-01"),
        SpecimenSummary("HVS-1", None, None, None, None),
    ]
    report = ProjectSpecimensReport(context, specimens, "Serra do Mar", project_code="SM-01")
    document = report.build()

    tombos = [text for _, text in drawn_text if text.startswith("HVS-")]
    assert tombos == ["HVS-1", "HVS-2", "HVS-10"]
    texts = [text for _, text in drawn_text]
    assert "Serra do Mar (SM-01)" in texts
    assert "Specimens Report - Serra do Mar" in texts
    assert "GPS OK" in texts and "No GPS" in texts
    assert "12/03/2024" in texts
    assert document.filename == "relatorio_especimes_serra_do_mar.pdf"


def test_format_collection_date():
    assert format_collection_date("2024-03-12") == "12/03/2024"
    assert format_collection_date("2024-03-12T10:15:00") == "12/03/2024"
    assert format_collection_date("março de 2024") == "março de 2024"
    assert format_collection_date(None) == "-"


@pytest.fixture
def drawn_marks(monkeypatch):
    marks = []
    draw_rect = DrawingSurface.draw_rect
    draw_text = DrawingSurface.draw_text

    def rect_spy(self, x, y, w, h, style="D", radius=0):
        marks.append((self.current_page, "rect", y + h))
        draw_rect(self, x, y, w, h, style=style, radius=radius)

    def text_spy(self, text, x, y, align="left"):
        # the footer band below the safe bottom is stamped last
        if text != CONFIDENTIAL_LINE and not text.startswith("Page "):
            marks.append((self.current_page, text, y))
        draw_text(self, text, x, y, align=align)

    monkeypatch.setattr(DrawingSurface, "draw_rect", rect_spy)
    monkeypatch.setattr(DrawingSurface, "draw_text", text_spy)
    return marks


def _assert_within_safe_bottom(marks, safe_bottom):
    overflow = [m for m in marks if m[2] > safe_bottom]
    assert overflow == []


def test_specimen_charts_break_between_pages(drawn_marks, context):
    specimens = [
        SpecimenSummary(f"HVS-{i}", f"Genus{i} epithet{i}", f"Family{i}aceae", f"Collector {i}", "2024-03-12")
        for i in range(30)
    ]
    report = ProjectSpecimensReport(context, specimens, "Serra do Mar")
    document = report.build()

    _assert_within_safe_bottom(drawn_marks, report.geometry().safe_bottom)
    chart_pages = [page for page, text, _ in drawn_marks if str(text).startswith(("Most ", "Distribution "))]
    assert chart_pages == [2, 3, 4]
    assert document.page_count >= 5


def test_species_catalog_charts_break_between_pages(drawn_marks, context):
    species = [
        SpeciesSummary(f"Genus{i} epithet{i}", None, f"Family{i}aceae", f"Trilha {i}")
        for i in range(30)
    ]
    report = SpeciesCatalogReport(context, species)
    report.build()

    _assert_within_safe_bottom(drawn_marks, report.geometry().safe_bottom)
    chart_pages = [page for page, text, _ in drawn_marks if str(text).startswith(("Most ", "Distribution "))]
    assert chart_pages == [2, 3, 4]
