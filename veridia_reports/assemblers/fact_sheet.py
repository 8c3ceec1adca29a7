import logging
from typing import Callable, Optional

from ..config import BODY_FONT, COLORS, FACT_SHEET_FOOTER_RESERVE, MESSAGES
from ..context import PageGeometry, ReportContext
from ..cursor import LayoutCursor
from ..images import fetch_image
from ..models import CultivationGuide, SpeciesRecord, resolve_section
from .base import ReportAssembler

logger = logging.getLogger(__name__)

MARGIN = 16.0
IMAGE_X = 155.0
IMAGE_SIZE = 35.0

ImageFetcher = Callable[[str], Optional[bytes]]


class FactSheetReport(ReportAssembler):
    """
    Single-species fact sheet: taxonomy block beside a featured image, a
    description, then either the cultivation guide or the project's field
    notes depending on who asked for it.
    """

    kind = "fact_sheet"
    filename_prefix = "ficha"
    title = "Fact Sheet"

    def __init__(
        self,
        context: Optional[ReportContext],
        record: SpeciesRecord,
        fetcher: ImageFetcher = fetch_image,
        logo: Optional[bytes] = None,
    ):
        super().__init__(context, logo=logo)
        self.record = record
        self.fetcher = fetcher
        self.section = resolve_section(record, self.context.is_local)
        self.image_loaded = False

    @property
    def filename_stem(self) -> str:
        return self.record.scientific_name

    def geometry(self) -> PageGeometry:
        return PageGeometry(
            orientation=self.orientation,
            margin_left=MARGIN,
            margin_right=MARGIN,
            footer_reserve=FACT_SHEET_FOOTER_RESERVE,
        )

    def compose_body(self, cursor: LayoutCursor) -> None:
        header_end = cursor.y
        # The fetch blocks until it succeeds, fails or times out.
        image = self.fetcher(self.record.image_url) if self.record.image_url else None

        text_bottom = self._draw_identification(cursor, header_end)
        self._draw_image(cursor, image, header_end)

        cursor.move_to(max(header_end + IMAGE_SIZE + 15, text_bottom + 5))
        cursor.draw_rule(gap_after=12, color=COLORS["primary"], width=0.5)

        self._draw_description(cursor)
        self._draw_section(cursor)

    def _draw_identification(self, cursor: LayoutCursor, header_end: float) -> float:
        surface = cursor.surface
        record = self.record
        left = cursor.left
        max_text_width = IMAGE_X - left - 10
        y = header_end + 5

        surface.set_font(BODY_FONT, "B", 11)
        surface.set_text_color(COLORS["text_light"])
        surface.draw_text((record.family_name or "Family not informed").upper(), left, y)
        y += 10

        surface.set_font(BODY_FONT, "BI", 22)
        surface.set_text_color(COLORS["primary"])
        name_lines = surface.split_to_width(record.scientific_name, max_text_width)
        surface.draw_lines(name_lines, left, y, 9)
        y += len(name_lines) * 9 + 2

        if record.popular_name:
            surface.set_font(BODY_FONT, "", 14)
            surface.set_text_color(COLORS["text"])
            popular_lines = surface.split_to_width(f'"{record.popular_name}"', max_text_width)
            surface.draw_lines(popular_lines, left, y, 7)
            y += len(popular_lines) * 7 + 3

        if self.context.is_local and record.location_name:
            surface.set_font(BODY_FONT, "", 9)
            surface.set_text_color(COLORS["text_light"])
            surface.draw_text(f"Project: {record.location_name}", left, header_end + IMAGE_SIZE + 5)
        return y

    def _draw_image(self, cursor: LayoutCursor, image: Optional[bytes], header_end: float) -> None:
        surface = cursor.surface
        y = header_end + 5
        if image is not None and surface.draw_image(image, IMAGE_X, y, IMAGE_SIZE, IMAGE_SIZE):
            self.image_loaded = True
            return
        if self.record.image_url:
            logger.info("Drawing image placeholder for %s", self.record.scientific_name)
        surface.set_draw_color(COLORS["rule"])
        surface.set_fill_color(COLORS["placeholder_fill"])
        surface.set_line_width(0.3)
        surface.draw_rect(IMAGE_X, y, IMAGE_SIZE, IMAGE_SIZE, style="DF", radius=3)
        surface.set_font(BODY_FONT, "I", 8)
        surface.set_text_color(COLORS["text_light"])
        surface.draw_text(MESSAGES["no_image"], IMAGE_X + IMAGE_SIZE / 2, y + IMAGE_SIZE / 2 + 1, align="center")

    def _draw_description(self, cursor: LayoutCursor) -> None:
        record = self.record
        is_local = self.context.is_local
        cursor.check_break(20)
        cursor.print_heading("Local Occurrence Description" if is_local else "Botanical Description")

        text = record.local_description if (is_local and record.local_description) else record.description
        if text:
            cursor.print_paragraph(text, gap=8)
        else:
            cursor.print_note(MESSAGES["no_description"])
            cursor.advance(2)

    def _draw_section(self, cursor: LayoutCursor) -> None:
        section = self.section
        cursor.check_break(25)
        cursor.print_heading(section.title)
        if not section.items:
            empty = MESSAGES["no_cultivation"] if isinstance(section, CultivationGuide) else MESSAGES["no_field_notes"]
            cursor.print_note(empty)
            return
        for label, value in section.items:
            cursor.print_labeled_block(f"{label}:", value)
