import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .config import (
    BODY_FONT,
    CHART_BAR_GAP,
    CHART_BAR_HEIGHT,
    CHART_BAR_X,
    CHART_DEFAULT_TOP_N,
    CHART_LABEL_X,
    CHART_MAX_BAR_WIDTH,
    CHART_MIN_BAR_WIDTH,
    CHART_NAME_BUDGET,
    CHART_TITLE_GAP,
    CHART_TRAILING_GAP,
    CHART_VALUE_THRESHOLD,
    COLORS,
    CONTINUATION_TOP,
    OTHERS_LABEL,
)
from .errors import ReportInputError
from .models import ChartDatum
from .surface import DrawingSurface

logger = logging.getLogger(__name__)

ChartInput = Union[ChartDatum, Tuple[str, int]]
ROW_PITCH = CHART_BAR_HEIGHT + CHART_BAR_GAP


@dataclass(frozen=True)
class BarLayout:
    name: str
    count: int
    width: float
    value_inside: bool


def coerce_chart_data(data: Iterable[ChartInput]) -> List[ChartDatum]:
    """
    Normalize chart input to ChartDatum entries. Malformed pairs and
    negative counts raise ReportInputError.
    """
    out = []
    for item in data:
        if isinstance(item, ChartDatum):
            out.append(item)
            continue
        try:
            name, count = item
            count = int(count)
        except (TypeError, ValueError) as exc:
            raise ReportInputError(f"Malformed chart entry {item!r}: {exc}") from exc
        if count < 0:
            raise ReportInputError(f"Negative count for {name!r}: {count}")
        out.append(ChartDatum(str(name), count))
    return out


def bucket_top_n(
    data: Iterable[ChartInput],
    top_n: int = CHART_DEFAULT_TOP_N,
    others_label: str = OTHERS_LABEL,
) -> List[ChartDatum]:
    """
    Sort by count (desc) then name, keep the first ``top_n`` and fold the rest
    into one trailing entry, which is only added when the remainder is > 0.
    """
    entries = sorted(coerce_chart_data(data), key=lambda d: (-d.count, d.name))
    top_n = max(int(top_n), 0)
    head, tail = entries[:top_n], entries[top_n:]
    rest = sum(d.count for d in tail)
    if rest > 0:
        head.append(ChartDatum(others_label, rest))
    return head


def layout_bars(
    entries: Sequence[ChartDatum],
    max_bar_width: float = CHART_MAX_BAR_WIDTH,
    min_bar_width: float = CHART_MIN_BAR_WIDTH,
    threshold: float = CHART_VALUE_THRESHOLD,
) -> List[BarLayout]:
    max_count = max((e.count for e in entries), default=0) or 1
    bars = []
    for entry in entries:
        width = max(entry.count / max_count * max_bar_width, min_bar_width)
        bars.append(BarLayout(entry.name, entry.count, width, width > threshold))
    return bars


def chart_height(n_entries: int) -> float:
    return CHART_TITLE_GAP + n_entries * ROW_PITCH + CHART_TRAILING_GAP


def truncate_name(name: str, budget: int = CHART_NAME_BUDGET) -> str:
    if len(name) > budget:
        return name[: budget - 2] + "..."
    return name


class ChartRenderer:
    """Horizontal bar chart drawn straight onto the page. Never page-breaks."""

    def __init__(self, top_offset: float = CONTINUATION_TOP):
        self.top_offset = top_offset

    def max_bars(self, surface: DrawingSurface) -> int:
        usable = surface.geometry.safe_bottom - self.top_offset - CHART_TITLE_GAP - CHART_TRAILING_GAP
        return max(int(math.floor(usable / ROW_PITCH)), 1)

    def prepare(self, surface: DrawingSurface, data: Iterable[ChartInput], top_n: int) -> List[ChartDatum]:
        """Bucket the data, shrinking ``top_n`` so the chart fits on an empty page."""
        limit = self.max_bars(surface)
        if top_n + 1 > limit:
            clamped = max(limit - 1, 0)
            logger.warning("Chart top_n %d does not fit one page; using %d", top_n, clamped)
            top_n = clamped
        return bucket_top_n(data, top_n)

    def planned_height(self, surface: DrawingSurface, data: Iterable[ChartInput], top_n: int = CHART_DEFAULT_TOP_N) -> float:
        return chart_height(len(self.prepare(surface, data, top_n)))

    def render(
        self,
        surface: DrawingSurface,
        data: Iterable[ChartInput],
        start_y: float,
        title: str,
        top_n: int = CHART_DEFAULT_TOP_N,
        color: Optional[Tuple[int, int, int]] = None,
    ) -> float:
        entries = self.prepare(surface, data, top_n)
        geo = surface.geometry

        surface.set_font(BODY_FONT, "B", 13)
        surface.set_text_color(COLORS["text"])
        surface.draw_text(title, geo.width / 2, start_y, align="center")

        y = start_y + CHART_TITLE_GAP
        surface.set_fill_color(color or COLORS["primary"])
        for bar in layout_bars(entries):
            surface.set_font(BODY_FONT, "", 9)
            surface.set_text_color(COLORS["text"])
            surface.draw_text(truncate_name(bar.name), CHART_LABEL_X, y + 6)

            surface.draw_rect(CHART_BAR_X, y, bar.width, CHART_BAR_HEIGHT, style="F", radius=1)

            surface.set_font(BODY_FONT, "B", 8)
            if bar.value_inside:
                surface.set_text_color(COLORS["white"])
                surface.draw_text(str(bar.count), CHART_BAR_X + bar.width - 3, y + 6, align="right")
            else:
                surface.set_text_color(COLORS["text"])
                surface.draw_text(str(bar.count), CHART_BAR_X + bar.width + 3, y + 6)
            y += ROW_PITCH

        return y + CHART_TRAILING_GAP
