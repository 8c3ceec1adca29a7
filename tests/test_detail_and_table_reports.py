import pandas as pd
import pytest

from veridia_reports.assemblers import EntityDetailReport, GenericTableReport
from veridia_reports.errors import ReportInputError
from veridia_reports.models import DetailSection, EntityDetail, TableSpec
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


def test_generic_table_repeats_header_and_numbers_every_page(drawn_text, context):
    table = TableSpec(
        columns=["Tombo", "Species"],
        rows=[[f"HVS-{i}", "Mikania glomerata"] for i in range(120)],
    )
    report = GenericTableReport(context, "Specimen List", table, subtitle="All projects")
    document = report.build()

    assert document.page_count >= 3
    assert report.last_result.pages == document.page_count
    assert report.last_result.header_rows == document.page_count
    header_pages = [page for page, text in drawn_text if text == "Tombo"]
    assert header_pages == list(range(1, document.page_count + 1))
    footers = [text for _, text in drawn_text if text.startswith("Page ")]
    assert footers == [f"Page {i} of {document.page_count}" for i in range(1, document.page_count + 1)]
    assert document.filename == "relatorio_specimen_list.pdf"


def test_generic_table_from_frame_in_landscape(context):
    frame = pd.DataFrame({"Family": ["Asteraceae", "Lauraceae"], "Species": [12, None]})
    report = GenericTableReport(context, "Families", TableSpec.from_frame(frame), orientation="landscape")
    document = report.build()
    assert document.page_count == 1
    assert report.geometry().width == 297


def test_builds_are_independent(context):
    table = TableSpec(columns=["A"], rows=[["x"]] * 80)
    report = GenericTableReport(context, "Repeat", table)
    first, second = report.build(), report.build()
    assert first.page_count == second.page_count
    assert second.data.startswith(b"%PDF")


def test_detail_report_renders_sections(drawn_text, context):
    entity = EntityDetail(
        name="Asteraceae",
        authorship="Bercht. & J.Presl",
        source="Flora do Brasil 2020",
        fields=[("Genera", 12), ("Notes", "Maior família de angiospermas do Brasil " * 8)],
    )
    sections = [
        DetailSection(title="Linked Species", columns=["Name"], rows=[["Mikania glomerata"], ["Baccharis dracunculifolia"]]),
        DetailSection(title="Specimens", columns=["Tombo"], rows=[], empty_message="No specimens yet."),
        DetailSection(title="Name History", columns=["Former Name"], rows=[], hide_when_empty=True),
    ]
    document = EntityDetailReport(context, "Family Detail Report", entity, sections).build()

    texts = [text for _, text in drawn_text]
    assert "ASTERACEAE" in texts
    assert "Source: Flora do Brasil 2020" in texts
    assert "Genera:" in texts
    assert "Linked Species (2)" in texts
    assert "Specimens (0)" in texts
    assert "No specimens yet." in texts
    assert not any(text.startswith("Name History") for text in texts)
    assert document.filename == "relatorio_asteraceae.pdf"


def test_detail_report_rejects_label_column_wider_than_page(context):
    report = EntityDetailReport(context, "Detail", EntityDetail(name="X"), label_width=500)
    with pytest.raises(ReportInputError):
        report.build()


def test_family_detail_factory(drawn_text, context):
    family = [{"familia_nome": "Lauraceae", "autoria_taxonomica": "Juss.", "fonte_referencia": "APG IV"}]
    species = [{"nome_cientifico": "Ocotea odorifera", "nome_popular": "Canela-sassafrás"}]
    legacy = [{"nome_legado": "Laurineae", "tipo": "Sinônimo", "fonte": "Tropicos"}]

    report = EntityDetailReport.for_family(context, family, species, legacy)
    document = report.build()

    texts = [text for _, text in drawn_text]
    assert "LAURACEAE" in texts
    assert "Juss." in texts
    assert "Linked Species (1)" in texts
    assert "Name History (1)" in texts
    assert document.page_count == 1


def test_family_detail_without_species_or_history(drawn_text, context):
    EntityDetailReport.for_family(context, {"familia_nome": "Myrtaceae"}).build()
    texts = [text for _, text in drawn_text]
    assert "Unknown authorship" in texts
    assert "No linked species." in texts
    assert not any(text.startswith("Name History") for text in texts)
