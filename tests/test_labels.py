from dataclasses import replace

import pytest

from veridia_reports.assemblers import LabelSheetReport
from veridia_reports.assemblers.labels import truncate_lines
from veridia_reports.errors import ReportInputError
from veridia_reports.surface import DrawingSurface


@pytest.mark.parametrize("n, pages", [(0, 1), (1, 1), (4, 1), (5, 2), (8, 2), (9, 3)])
def test_page_count_follows_four_labels_per_page(label_record, n, pages):
    report = LabelSheetReport([label_record] * n)
    document = report.build()
    assert document.page_count == pages
    assert report.expected_pages == pages


def test_fifth_label_starts_second_page_even_with_long_text(monkeypatch, label_record):
    pages_at_draw = []
    draw_label = LabelSheetReport.draw_label

    def spy(self, surface, item, x, y):
        pages_at_draw.append((surface.current_page, x, y))
        draw_label(self, surface, item, x, y)

    monkeypatch.setattr(LabelSheetReport, "draw_label", spy)
    verbose = replace(label_record, notes="ramos cilíndricos, estriados, glabros " * 40)
    LabelSheetReport([verbose] * 5).build()

    assert [p for p, _, _ in pages_at_draw] == [1, 1, 1, 1, 2]
    assert pages_at_draw[4][1:] == (10, 10)
    assert pages_at_draw[3][1:] == (110, 150)


def test_long_description_is_truncated_with_ellipsis(monkeypatch, label_record):
    drawn = []
    draw_text = DrawingSurface.draw_text

    def spy(self, text, x, y, align="left"):
        drawn.append((text, y))
        draw_text(self, text, x, y, align=align)

    monkeypatch.setattr(DrawingSurface, "draw_text", spy)
    verbose = replace(label_record, notes="folhas opostas com margem serreada " * 60)
    LabelSheetReport([verbose]).build()

    assert any(text.endswith("...") for text, _ in drawn)
    # nothing spills into the collector band at the bottom of the cell
    description_ys = [y for text, y in drawn if "serreada" in text or "margem" in text]
    assert max(description_ys) <= 10 + 130 - 14


def test_missing_required_field_is_rejected(label_record):
    broken = replace(label_record, locality="  ")
    with pytest.raises(ReportInputError, match="locality"):
        LabelSheetReport([label_record, broken]).build()


def test_filename_has_no_stem(label_record):
    assert LabelSheetReport([label_record]).build().filename == "etiquetas.pdf"


def test_truncate_lines():
    assert truncate_lines(["abcdef", "ghijkl", "mnopqr"], 2) == ["abcdef", "ghi..."]
    assert truncate_lines(["abcdef", "ab", "zz"], 2) == ["abcdef", "ab"]
    assert truncate_lines(["abc"], 3) == ["abc"]
    assert truncate_lines(["abc", "def"], 0) == []
