import logging
from typing import Optional, Sequence, Tuple

from .config import (
    BODY_FONT,
    COLORS,
    CONFIDENTIAL_LINE,
    CONTINUATION_TOP,
    DATA_SOURCE_LINE,
    FOOTER_RULE_OFFSET,
    FOOTER_TEXT_OFFSET,
    PRODUCT_NAME,
    PRODUCT_TAGLINE,
)
from .context import ChromeSpec
from .surface import DrawingSurface

logger = logging.getLogger(__name__)

HEADER_DIVIDER_Y = 32.0
HEADER_BODY_Y = 42.0
LOGO_BOX = (14.0, 10.0, 18.0, 18.0)
COVER_LOGO_SIZE = 35.0


def draw_header(
    surface: DrawingSurface,
    spec: ChromeSpec,
    compact: bool = False,
    logo: Optional[bytes] = None,
) -> float:
    """
    Draw the branded page header on the current page and return the Y where
    body content may start. The compact variant is used on continuation pages.
    """
    if compact:
        return _draw_compact_header(surface, spec)

    geo = surface.geometry
    text_x = geo.margin_left
    if logo and surface.draw_image(logo, *LOGO_BOX):
        text_x = LOGO_BOX[0] + LOGO_BOX[2] + 6

    surface.set_font(BODY_FONT, "B", 18)
    surface.set_text_color(COLORS["primary"])
    surface.draw_text(PRODUCT_NAME, text_x, 18)
    surface.set_font(BODY_FONT, "", 9)
    surface.set_text_color(COLORS["text_light"])
    surface.draw_text(PRODUCT_TAGLINE, text_x, 24)

    surface.set_font(BODY_FONT, "B", 12)
    surface.set_text_color(COLORS["text"])
    surface.draw_text(spec.title, geo.right_edge, 15, align="right")
    surface.set_font(BODY_FONT, "", 8)
    surface.set_text_color(COLORS["text_light"])
    surface.draw_text(f"Generated by: {spec.generated_by}", geo.right_edge, 21, align="right")
    surface.draw_text(f"Date: {spec.generated_on}", geo.right_edge, 26, align="right")

    surface.set_draw_color(COLORS["primary"])
    surface.set_line_width(0.8)
    surface.draw_line(geo.margin_left, HEADER_DIVIDER_Y, geo.right_edge, HEADER_DIVIDER_Y)

    if spec.subtitle:
        y = HEADER_DIVIDER_Y + 8
        surface.set_font(BODY_FONT, "B", 11)
        surface.set_text_color(COLORS["text"])
        surface.draw_text(spec.subtitle, geo.margin_left, y)
        return y + 8
    return HEADER_BODY_Y


def _draw_compact_header(surface: DrawingSurface, spec: ChromeSpec) -> float:
    geo = surface.geometry
    surface.set_font(BODY_FONT, "B", 10)
    surface.set_text_color(COLORS["primary"])
    surface.draw_text(spec.title, geo.margin_left, 15)
    surface.set_font(BODY_FONT, "", 8)
    surface.set_text_color(COLORS["text_light"])
    surface.draw_text(spec.generated_on, geo.right_edge, 15, align="right")
    surface.set_draw_color(COLORS["primary"])
    surface.set_line_width(0.5)
    surface.draw_line(geo.margin_left, 18, geo.right_edge, 18)
    return CONTINUATION_TOP


def draw_footer(
    surface: DrawingSurface,
    from_page: int = 1,
    text: str = CONFIDENTIAL_LINE,
    rule_offset: float = FOOTER_RULE_OFFSET,
    text_offset: float = FOOTER_TEXT_OFFSET,
) -> None:
    """
    Stamp the footer on every page from ``from_page`` to the last one.
    Must run after all content so "Page i of N" knows N.
    """
    total = surface.page_count
    geo = surface.geometry
    for page in range(max(from_page, 1), total + 1):
        surface.set_page(page)
        surface.set_draw_color(COLORS["rule"])
        surface.set_line_width(0.3)
        surface.draw_line(geo.margin_left, geo.height - rule_offset, geo.right_edge, geo.height - rule_offset)
        surface.set_font(BODY_FONT, "", 8)
        surface.set_text_color(COLORS["text_light"])
        surface.draw_text(text, geo.margin_left, geo.height - text_offset)
        surface.draw_text(f"Page {page} of {total}", geo.right_edge, geo.height - text_offset, align="right")
    logger.debug("Footer applied to pages %d..%d", from_page, total)


def draw_cover(
    surface: DrawingSurface,
    spec: ChromeSpec,
    stats: Sequence[Tuple[str, object]],
    logo: Optional[bytes] = None,
    source_line: str = DATA_SOURCE_LINE,
) -> None:
    """Cover page for dashboard reports: brand block, title and a 2x2 stats grid."""
    geo = surface.geometry
    center = geo.width / 2

    if logo:
        surface.draw_image(logo, center - COVER_LOGO_SIZE / 2, 40, COVER_LOGO_SIZE, COVER_LOGO_SIZE)

    y = 90.0
    surface.set_font(BODY_FONT, "B", 26)
    surface.set_text_color(COLORS["primary"])
    surface.draw_text(PRODUCT_NAME, center, y, align="center")

    y += 12
    surface.set_font(BODY_FONT, "", 14)
    surface.set_text_color(COLORS["text"])
    surface.draw_text(spec.title, center, y, align="center")

    if spec.subtitle:
        y += 8
        surface.set_font(BODY_FONT, "", 12)
        surface.set_text_color(COLORS["text_light"])
        surface.draw_text(spec.subtitle, center, y, align="center")

    y += 10
    surface.set_font(BODY_FONT, "", 10)
    surface.set_text_color(COLORS["text_light"])
    surface.draw_text(f"Generated on: {spec.generated_on}", center, y, align="center")

    y += 40
    for idx, (label, value) in enumerate(stats[:4]):
        col_x = center - 40 if idx % 2 == 0 else center + 40
        row_y = y + (idx // 2) * 25
        surface.set_font(BODY_FONT, "B", 18)
        surface.set_text_color(COLORS["primary"])
        surface.draw_text(str(value), col_x, row_y, align="center")
        surface.set_font(BODY_FONT, "", 9)
        surface.set_text_color(COLORS["text_light"])
        surface.draw_text(label, col_x, row_y + 6, align="center")

    surface.set_font(BODY_FONT, "I", 9)
    surface.set_text_color(COLORS["text_light"])
    surface.draw_text(source_line, center, geo.height - 40, align="center")
    surface.set_font(BODY_FONT, "", 9)
    surface.draw_text(f"Generated by: {spec.generated_by}", center, geo.height - 30, align="center")


def draw_notice_box(surface: DrawingSurface, y: float, message: str) -> float:
    """Grey rounded box with a centered message. Returns the Y below it."""
    geo = surface.geometry
    width = geo.content_width
    surface.set_font(BODY_FONT, "I", 10)
    lines = surface.split_to_width(message, width - 10)
    height = max(20.0, len(lines) * 5 + 10)

    surface.set_fill_color(COLORS["notice_fill"])
    surface.set_draw_color(COLORS["notice_border"])
    surface.set_line_width(0.3)
    surface.draw_rect(geo.margin_left, y, width, height, style="DF", radius=2)

    surface.set_text_color(COLORS["text_light"])
    first_baseline = y + height / 2 + 1 - (len(lines) - 1) * 5 / 2
    surface.draw_lines(lines, geo.margin_left + width / 2, first_baseline, 5, align="center")
    return y + height + 10
