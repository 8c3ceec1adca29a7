import logging
from typing import Callable, List, Optional, Sequence

from .config import BODY_FONT, COLORS, MESSAGES, TABLE_CELL_PADDING, TABLE_FONT_SIZE
from .models import CellValue, TableResult, TableSpec
from .surface import DrawingSurface

logger = logging.getLogger(__name__)

PT_TO_MM = 0.3528
MIN_AUTO_WIDTH = 10.0


def _cell_text(value: CellValue) -> str:
    if value is None:
        return ""
    return str(value)


def _split_row(wrapped: List[List[str]], max_lines: int) -> List[List[List[str]]]:
    tallest = max((len(lines) for lines in wrapped), default=1)
    if tallest <= max_lines:
        return [wrapped]
    return [[lines[start : start + max_lines] for lines in wrapped] for start in range(0, tallest, max_lines)]


class TableRenderer:
    """
    Paginating table: measured column widths, primary-colour header row
    repeated on every page it occupies, zebra body rows.
    """

    def __init__(
        self,
        surface: DrawingSurface,
        safe_bottom: float,
        top_offset: float,
        font_size: float = TABLE_FONT_SIZE,
        cell_padding: float = TABLE_CELL_PADDING,
        on_new_page: Optional[Callable[[DrawingSurface], float]] = None,
    ):
        self.surface = surface
        self.safe_bottom = safe_bottom
        self.top_offset = top_offset
        self.font_size = font_size
        self.cell_padding = cell_padding
        self.on_new_page = on_new_page

    def _font_size(self, spec: TableSpec) -> float:
        return spec.font_size or self.font_size

    # ---- geometry
    def column_widths(self, spec: TableSpec) -> List[float]:
        surface = self.surface
        available = surface.geometry.content_width
        n = len(spec.columns)
        widths: List[Optional[float]] = [spec.style_for(i).width for i in range(n)]
        fixed = sum(w for w in widths if w is not None)
        auto = [i for i, w in enumerate(widths) if w is None]
        if not auto:
            return [float(w) for w in widths]

        natural = {}
        for i in auto:
            surface.set_font(BODY_FONT, "B", self._font_size(spec))
            best = surface.measure_text(spec.columns[i])
            surface.set_font(BODY_FONT, spec.style_for(i).font_style, self._font_size(spec))
            for row in spec.rows:
                if i < len(row):
                    best = max(best, surface.measure_text(_cell_text(row[i])))
            natural[i] = best + 2 * self.cell_padding

        remaining = available - fixed
        total_natural = sum(natural.values()) or 1.0
        if remaining <= MIN_AUTO_WIDTH * len(auto):
            logger.warning("Fixed columns leave %.1f mm for %d auto columns", remaining, len(auto))
            share = {i: MIN_AUTO_WIDTH for i in auto}
        elif total_natural <= remaining:
            # Everything fits at natural size; spread the slack proportionally.
            share = {i: remaining * natural[i] / total_natural for i in auto}
        else:
            share = {i: max(remaining * natural[i] / total_natural, MIN_AUTO_WIDTH) for i in auto}
        return [float(widths[i]) if widths[i] is not None else share[i] for i in range(n)]

    def _wrap_row(self, spec: TableSpec, cells: Sequence[str], widths: Sequence[float], header: bool) -> List[List[str]]:
        wrapped = []
        for i, width in enumerate(widths):
            style = "B" if header else spec.style_for(i).font_style
            self.surface.set_font(BODY_FONT, style, self._font_size(spec))
            text = cells[i] if i < len(cells) else ""
            wrapped.append(self.surface.split_to_width(text, width - 2 * self.cell_padding))
        return wrapped

    def _row_height(self, wrapped: Sequence[Sequence[str]], spec: TableSpec) -> float:
        lines = max((len(w) for w in wrapped), default=1)
        return lines * self._line_height(spec) + 2 * self.cell_padding

    def _line_height(self, spec: TableSpec) -> float:
        return self._font_size(spec) * PT_TO_MM * 1.25

    # ---- drawing
    def _draw_row(
        self,
        spec: TableSpec,
        wrapped: Sequence[Sequence[str]],
        widths: Sequence[float],
        y: float,
        height: float,
        header: bool,
        fill=None,
    ) -> None:
        surface = self.surface
        x = surface.geometry.margin_left
        if fill is not None:
            surface.set_fill_color(fill)
            surface.draw_rect(x, y, sum(widths), height, style="F")

        size = self._font_size(spec)
        ascent = size * PT_TO_MM * 0.8
        line_h = self._line_height(spec)
        for i, width in enumerate(widths):
            col = spec.style_for(i)
            if header:
                surface.set_font(BODY_FONT, "B", size)
                surface.set_text_color(COLORS["white"])
            else:
                surface.set_font(BODY_FONT, col.font_style, size)
                surface.set_text_color(col.color or COLORS["text"])
            if col.align == "C":
                tx, mode = x + width / 2, "center"
            elif col.align == "R":
                tx, mode = x + width - self.cell_padding, "right"
            else:
                tx, mode = x + self.cell_padding, "left"
            surface.draw_lines(wrapped[i], tx, y + self.cell_padding + ascent, line_h, align=mode)
            x += width

    def _new_page(self) -> float:
        self.surface.add_page()
        if self.on_new_page is not None:
            return self.on_new_page(self.surface)
        return self.top_offset

    def render(self, start_y: float, spec: TableSpec) -> TableResult:
        widths = self.column_widths(spec)
        header_cells = [str(c) for c in spec.columns]
        header_wrapped = self._wrap_row(spec, header_cells, widths, header=True)
        header_h = self._row_height(header_wrapped, spec)
        header_fill = spec.header_fill or COLORS["primary"]

        # Rows taller than an empty continuation page are split between lines.
        room = self.safe_bottom - self.top_offset - header_h - 2 * self.cell_padding
        max_lines = max(int(room // self._line_height(spec)), 1)

        body = []
        for idx, row in enumerate(spec.rows):
            cells = [_cell_text(v) for v in row]
            wrapped = self._wrap_row(spec, cells, widths, header=False)
            for part in _split_row(wrapped, max_lines):
                body.append((idx, part, self._row_height(part, spec)))

        empty_h = self._line_height(spec) + 2 * self.cell_padding
        first_h = body[0][2] if body else empty_h

        y = start_y
        pages = 1
        if y + header_h + first_h > self.safe_bottom:
            # Nothing drawn yet, so the skipped page is not counted.
            y = self._new_page()

        self._draw_row(spec, header_wrapped, widths, y, header_h, header=True, fill=header_fill)
        y += header_h
        header_rows = 1

        if not body:
            self.surface.set_font(BODY_FONT, "I", self._font_size(spec))
            self.surface.set_text_color(COLORS["text_light"])
            ascent = self._font_size(spec) * PT_TO_MM * 0.8
            self.surface.draw_text(
                MESSAGES["no_records"],
                self.surface.geometry.margin_left + self.cell_padding,
                y + self.cell_padding + ascent,
            )
            return TableResult(final_y=y + empty_h, pages=pages, header_rows=header_rows)

        rows_on_page = 0
        for idx, wrapped, height in body:
            if y + height > self.safe_bottom and rows_on_page > 0:
                y = self._new_page()
                pages += 1
                self._draw_row(spec, header_wrapped, widths, y, header_h, header=True, fill=header_fill)
                y += header_h
                header_rows += 1
                rows_on_page = 0
            zebra = COLORS["zebra"] if idx % 2 == 1 else None
            self._draw_row(spec, wrapped, widths, y, height, header=False, fill=zebra)
            y += height
            rows_on_page += 1

        logger.debug("Table with %d rows rendered over %d page(s)", len(spec.rows), pages)
        return TableResult(final_y=y, pages=pages, header_rows=header_rows)
