from typing import Callable, Optional

from .config import BLOCK_GAP, BODY_FONT, COLORS, LABEL_COLUMN_WIDTH, LINE_HEIGHT
from .surface import DrawingSurface


class LayoutCursor:
    """
    Tracks the vertical write position for flowing content and owns the
    page-break decision. ``on_new_page`` draws continuation chrome and
    returns the Y where content resumes.
    """

    def __init__(
        self,
        surface: DrawingSurface,
        y: float,
        safe_bottom: float,
        top_offset: float,
        line_height: float = LINE_HEIGHT,
        block_gap: float = BLOCK_GAP,
        on_new_page: Optional[Callable[[DrawingSurface], float]] = None,
    ):
        self.surface = surface
        self.y = y
        self.safe_bottom = safe_bottom
        self.top_offset = top_offset
        self.line_height = line_height
        self.block_gap = block_gap
        self.on_new_page = on_new_page
        self._fresh_page = False

    @property
    def left(self) -> float:
        return self.surface.geometry.margin_left

    @property
    def content_width(self) -> float:
        return self.surface.geometry.content_width

    def new_page(self) -> None:
        self.surface.add_page()
        if self.on_new_page is not None:
            self.y = self.on_new_page(self.surface)
        else:
            self.y = self.top_offset
        self._fresh_page = True

    def check_break(self, needed: float) -> bool:
        """Start a new page if ``needed`` mm would cross the safe bottom."""
        if self.y + needed <= self.safe_bottom:
            return False
        if self._fresh_page:
            # Taller than an empty page; breaking again would only add blanks.
            return False
        self.new_page()
        return True

    def advance(self, dy: float) -> None:
        self.y += dy
        self._fresh_page = False

    def move_to(self, y: float) -> None:
        """Resume below content drawn outside the cursor (charts, tables, boxes)."""
        self.y = y
        self._fresh_page = False

    def print_labeled_block(self, label: str, text, label_width: float = LABEL_COLUMN_WIDTH) -> None:
        surface = self.surface
        surface.set_font(BODY_FONT, "", 10)
        lines = surface.split_to_width(text if text not in (None, "") else "-", self.content_width - label_width)

        self.check_break(len(lines) * self.line_height)

        surface.set_font(BODY_FONT, "B", 10)
        surface.set_text_color(COLORS["text"])
        surface.draw_text(label, self.left, self.y)

        surface.set_font(BODY_FONT, "", 10)
        for idx, line in enumerate(lines):
            if idx > 0 and self.check_break(self.line_height):
                surface.set_font(BODY_FONT, "", 10)
                surface.set_text_color(COLORS["text"])
            surface.draw_text(line, self.left + label_width, self.y)
            self.advance(self.line_height)
        self.advance(self.block_gap)

    def print_paragraph(
        self,
        text,
        size: float = 10,
        style: str = "",
        color=None,
        indent: float = 0,
        gap: Optional[float] = None,
    ) -> None:
        surface = self.surface
        color = color or COLORS["text"]
        surface.set_font(BODY_FONT, style, size)
        for line in surface.split_to_width(text, self.content_width - indent):
            if self.check_break(self.line_height):
                surface.set_font(BODY_FONT, style, size)
            surface.set_text_color(color)
            surface.draw_text(line, self.left + indent, self.y)
            self.advance(self.line_height)
        self.advance(self.block_gap if gap is None else gap)

    def print_heading(self, text: str, size: float = 12, color=None, spacing: float = 8) -> None:
        # Keep the heading on the same page as at least one following line.
        self.check_break(spacing + self.line_height)
        self.surface.set_font(BODY_FONT, "B", size)
        self.surface.set_text_color(color or COLORS["primary"])
        self.surface.draw_text(text, self.left, self.y)
        self.advance(spacing)

    def print_note(self, text: str) -> None:
        self.print_paragraph(text, style="I", color=COLORS["text_light"])

    def draw_rule(self, gap_after: float = 12, color=None, width: float = 0.3) -> None:
        self.surface.set_draw_color(color or COLORS["rule"])
        self.surface.set_line_width(width)
        self.surface.draw_line(self.left, self.y, self.left + self.content_width, self.y)
        self.advance(gap_after)
