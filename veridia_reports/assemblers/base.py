import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..chrome import draw_footer, draw_header
from ..config import CONFIDENTIAL_LINE, CONTINUATION_TOP, DEFAULT_REPORT_DIR, FOOTER_RULE_OFFSET, FOOTER_TEXT_OFFSET
from ..context import ChromeSpec, PageGeometry, ReportContext
from ..cursor import LayoutCursor
from ..images import LOGO_CACHE
from ..report_store import report_filename, save_report_pdf
from ..surface import DrawingSurface

logger = logging.getLogger(__name__)


@dataclass
class RenderedDocument:
    data: bytes
    page_count: int
    filename: str
    title: str = ""
    kind: str = ""
    generated_at: datetime = field(default_factory=datetime.now)

    def save(self, output_dir: Path = DEFAULT_REPORT_DIR) -> Path:
        return save_report_pdf(self, output_dir)


class ReportAssembler:
    """
    Template for every document type. ``build()`` owns a fresh surface per
    call and runs: optional cover, first-page chrome, body, footer pass.
    Subclasses implement ``compose_body`` and override the other hooks only
    where their layout differs.
    """

    kind = "report"
    filename_prefix = "report"
    title = "Report"
    orientation = "portrait"
    footer_from_page = 1
    footer_text = CONFIDENTIAL_LINE
    footer_rule_offset = FOOTER_RULE_OFFSET
    footer_text_offset = FOOTER_TEXT_OFFSET

    def __init__(self, context: Optional[ReportContext] = None, logo: Optional[bytes] = None):
        self.context = context or ReportContext()
        self._logo = logo
        self._chrome: Optional[ChromeSpec] = None

    # ---- identity
    @property
    def subtitle(self) -> Optional[str]:
        return None

    @property
    def filename_stem(self) -> str:
        return self.title

    def geometry(self) -> PageGeometry:
        return PageGeometry(orientation=self.orientation)

    @property
    def chrome(self) -> ChromeSpec:
        if self._chrome is None:
            self._chrome = self.context.chrome(self.title, self.subtitle)
        return self._chrome

    def logo(self) -> Optional[bytes]:
        if self._logo is not None:
            return self._logo
        return LOGO_CACHE.ensure_loaded()

    # ---- hooks
    def validate(self) -> None:
        """Reject malformed input before any drawing happens."""

    def compose_cover(self, surface: DrawingSurface) -> bool:
        """Draw a cover on the current page. Return True if one was drawn."""
        return False

    def first_page_header(self, surface: DrawingSurface) -> float:
        return draw_header(surface, self.chrome, logo=self.logo())

    def continuation_header(self, surface: DrawingSurface) -> float:
        return draw_header(surface, self.chrome, compact=True)

    def compose_body(self, cursor: LayoutCursor) -> None:
        raise NotImplementedError

    def apply_footer(self, surface: DrawingSurface, from_page: int) -> None:
        draw_footer(
            surface,
            from_page=from_page,
            text=self.footer_text,
            rule_offset=self.footer_rule_offset,
            text_offset=self.footer_text_offset,
        )

    def make_cursor(self, surface: DrawingSurface, y: float) -> LayoutCursor:
        return LayoutCursor(
            surface,
            y=y,
            safe_bottom=surface.geometry.safe_bottom,
            top_offset=CONTINUATION_TOP,
            on_new_page=self.continuation_header,
        )

    # ---- driver
    def build(self) -> RenderedDocument:
        self.validate()
        self._chrome = None
        surface = DrawingSurface(self.geometry())
        surface.set_metadata(self.title, self.chrome.generated_by)

        surface.add_page()
        if self.compose_cover(surface):
            surface.add_page()
            y = self.continuation_header(surface)
        else:
            y = self.first_page_header(surface)

        self.compose_body(self.make_cursor(surface, y))
        self.apply_footer(surface, self.footer_from_page)

        document = RenderedDocument(
            data=surface.output(),
            page_count=surface.page_count,
            filename=report_filename(self.filename_prefix, self.filename_stem),
            title=self.title,
            kind=self.kind,
            generated_at=self.chrome.generated_at,
        )
        logger.info("Built %s report %r: %d page(s)", self.kind, document.filename, document.page_count)
        return document
