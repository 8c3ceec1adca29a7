import logging
from io import BytesIO
from typing import List, Optional, Tuple

from fpdf import FPDF

from .context import PageGeometry
from .errors import ReportInputError

logger = logging.getLogger(__name__)

_ORIENTATION_CODES = {"portrait": "P", "landscape": "L"}


def pdf_safe_text(text) -> str:
    """Core fonts only cover latin-1; anything else becomes '?'."""
    if text is None:
        return ""
    return str(text).replace("\t", " ").encode("latin-1", "replace").decode("latin-1")


class DrawingSurface:
    """
    Page-oriented drawing primitive over a single fpdf2 document.
    Coordinates are millimetres from the top-left corner of the active page;
    text coordinates are baselines.
    """

    def __init__(self, geometry: Optional[PageGeometry] = None):
        self.geometry = geometry or PageGeometry()
        self._pdf = FPDF(
            orientation=_ORIENTATION_CODES[self.geometry.orientation],
            unit="mm",
            format="A4",
        )
        self._pdf.set_auto_page_break(auto=False)
        self._pdf.set_margins(self.geometry.margin_left, 10, self.geometry.margin_right)
        self._font: Optional[Tuple[str, str, float]] = None

    # ---- pages
    def add_page(self) -> int:
        self._pdf.add_page()
        return self._pdf.page

    def set_page(self, number: int) -> None:
        if not 1 <= number <= self.page_count:
            raise ReportInputError(f"Page {number} does not exist (document has {self.page_count})")
        self._pdf.page = number
        if self._font:
            # fpdf2 only writes a font switch when the font changes, so force
            # one into the stream of the page we just jumped to.
            family, style, size = self._font
            self._pdf.set_font("Courier", "", 1)
            self._pdf.set_font(family, style, size)

    @property
    def page_count(self) -> int:
        return self._pdf.pages_count

    @property
    def current_page(self) -> int:
        return self._pdf.page

    # ---- state
    def set_metadata(self, title: str, author: str) -> None:
        self._pdf.set_title(pdf_safe_text(title))
        self._pdf.set_author(pdf_safe_text(author))

    def set_font(self, family: str, style: str = "", size: float = 10) -> None:
        self._font = (family, style, size)
        self._pdf.set_font(family, style, size)

    def set_text_color(self, rgb) -> None:
        self._pdf.set_text_color(*rgb)

    def set_draw_color(self, rgb) -> None:
        self._pdf.set_draw_color(*rgb)

    def set_fill_color(self, rgb) -> None:
        self._pdf.set_fill_color(*rgb)

    def set_line_width(self, width: float) -> None:
        self._pdf.set_line_width(width)

    # ---- text measurement
    def measure_text(self, text) -> float:
        return self._pdf.get_string_width(pdf_safe_text(text))

    def split_to_width(self, text, max_width: float) -> List[str]:
        """
        Greedy word wrap. Words wider than the line are broken between
        characters; a line always holds at least one character, so a
        non-positive width degrades to one character per line.
        """
        if text is None:
            return [""]
        lines: List[str] = []
        for paragraph in pdf_safe_text(text).split("\n"):
            lines.extend(self._wrap_paragraph(paragraph, max_width))
        return lines or [""]

    def _wrap_paragraph(self, text: str, max_w: float) -> List[str]:
        lines: List[str] = []
        current = ""
        for word in text.split(" "):
            if word == "":
                continue
            candidate = word if not current else f"{current} {word}"
            if self.measure_text(candidate) <= max_w:
                current = candidate
                continue

            if current:
                lines.append(current)
                current = ""

            if self.measure_text(word) <= max_w:
                current = word
                continue

            chunk = ""
            for ch in word:
                if not chunk or self.measure_text(chunk + ch) <= max_w:
                    chunk += ch
                else:
                    lines.append(chunk)
                    chunk = ch
            current = chunk

        if current:
            lines.append(current)
        return lines or [""]

    # ---- drawing
    def draw_text(self, text, x: float, y: float, align: str = "left") -> None:
        safe = pdf_safe_text(text)
        if align == "right":
            x -= self.measure_text(safe)
        elif align == "center":
            x -= self.measure_text(safe) / 2
        self._pdf.text(x, y, safe)

    def draw_lines(self, lines: List[str], x: float, y: float, line_height: float, align: str = "left") -> float:
        for idx, line in enumerate(lines):
            self.draw_text(line, x, y + idx * line_height, align=align)
        return y + len(lines) * line_height

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._pdf.line(x1, y1, x2, y2)

    def draw_rect(self, x: float, y: float, w: float, h: float, style: str = "D", radius: float = 0) -> None:
        if radius > 0:
            self._pdf.rect(x, y, w, h, style=style, round_corners=True, corner_radius=radius)
        else:
            self._pdf.rect(x, y, w, h, style=style)

    def draw_image(self, data: Optional[bytes], x: float, y: float, w: float, h: float) -> bool:
        """Embed an encoded raster. Returns False instead of raising on bad data."""
        if not data:
            return False
        try:
            self._pdf.image(BytesIO(data), x=x, y=y, w=w, h=h)
        except Exception as exc:
            logger.warning("Could not embed image (%d bytes): %s", len(data), exc)
            return False
        return True

    def output(self) -> bytes:
        return bytes(self._pdf.output())
