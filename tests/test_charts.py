import logging

import pytest

from veridia_reports.charts import (
    ChartRenderer,
    bucket_top_n,
    chart_height,
    coerce_chart_data,
    layout_bars,
    truncate_name,
)
from veridia_reports.errors import ReportInputError
from veridia_reports.models import ChartDatum


def _data(counts):
    return [ChartDatum(f"item{i}", c) for i, c in enumerate(counts)]


def test_others_bucket_matches_example():
    result = bucket_top_n(_data([10, 6, 4, 3, 2]), top_n=3)
    assert [d.count for d in result] == [10, 6, 4, 5]
    assert result[-1].name == "Others"


@pytest.mark.parametrize("top_n", [0, 1, 2, 5, 10])
def test_others_bucket_conserves_total(top_n):
    data = _data([7, 0, 3, 12, 1, 1, 9])
    result = bucket_top_n(data, top_n=top_n)
    assert sum(d.count for d in result) == sum(d.count for d in data)


def test_zero_remainder_adds_no_others_entry():
    result = bucket_top_n(_data([5, 3, 0, 0]), top_n=2)
    assert [d.name for d in result] == ["item0", "item1"]


def test_ties_are_broken_by_name():
    data = [ChartDatum("beta", 2), ChartDatum("alpha", 2), ChartDatum("gamma", 5)]
    assert [d.name for d in bucket_top_n(data, top_n=3)] == ["gamma", "alpha", "beta"]


def test_minimum_bar_width_floor():
    bars = layout_bars([ChartDatum("a", 10), ChartDatum("b", 0)])
    assert bars[1].width == 5


def test_bar_width_is_proportional():
    bars = layout_bars([ChartDatum("a", 10), ChartDatum("b", 2)], max_bar_width=90)
    assert bars[1].width == pytest.approx(18)
    assert bars[0].value_inside is True
    assert bars[1].value_inside is False


def test_all_zero_counts_render_at_floor():
    bars = layout_bars([ChartDatum("a", 0), ChartDatum("b", 0)])
    assert [b.width for b in bars] == [5, 5]


def test_negative_counts_are_rejected():
    with pytest.raises(ReportInputError):
        ChartDatum("bad", -1)
    with pytest.raises(ReportInputError):
        bucket_top_n([("bad", -3)], top_n=3)


def test_truncate_name():
    assert truncate_name("Short") == "Short"
    long_name = "Asteraceae Bercht. & J.Presl"
    assert truncate_name(long_name) == long_name[:20] + "..."


def test_render_returns_end_below_last_bar(surface):
    end = ChartRenderer().render(surface, _data([10, 6, 4, 3, 2]), 40, "Families", top_n=3)
    assert end == pytest.approx(40 + chart_height(4))
    assert surface.page_count == 1


def test_top_n_is_clamped_to_one_page(surface, caplog):
    renderer = ChartRenderer()
    data = _data(range(1, 101))
    with caplog.at_level(logging.WARNING, logger="veridia_reports.charts"):
        entries = renderer.prepare(surface, data, top_n=100)
    assert len(entries) == renderer.max_bars(surface)
    assert sum(d.count for d in entries) == sum(d.count for d in data)
    assert "does not fit" in caplog.text


def test_malformed_chart_entries_are_rejected():
    with pytest.raises(ReportInputError, match="Malformed"):
        coerce_chart_data([("Asteraceae", "many")])
    with pytest.raises(ReportInputError, match="Malformed"):
        coerce_chart_data([("only-a-name",)])
    with pytest.raises(ReportInputError, match="Negative"):
        coerce_chart_data([("Lauraceae", -4)])
    assert coerce_chart_data([("Myrtaceae", "3")]) == [ChartDatum("Myrtaceae", 3)]
