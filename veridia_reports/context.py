from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .config import (
    DATETIME_FORMAT,
    DEFAULT_GENERATOR,
    FOOTER_RESERVE,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    PAGE_SIZES,
)
from .errors import ReportInputError

LOCAL_ROLE = "Gestor de Acervo"


@dataclass(frozen=True)
class PageGeometry:
    """Fixed physical page and margins shared by every page of a document."""

    orientation: str = "portrait"
    margin_left: float = MARGIN_LEFT
    margin_right: float = MARGIN_RIGHT
    footer_reserve: float = FOOTER_RESERVE

    def __post_init__(self):
        if self.orientation not in PAGE_SIZES:
            raise ReportInputError(f"Unknown page orientation: {self.orientation!r}")

    @property
    def width(self) -> float:
        return PAGE_SIZES[self.orientation][0]

    @property
    def height(self) -> float:
        return PAGE_SIZES[self.orientation][1]

    @property
    def safe_bottom(self) -> float:
        return self.height - self.footer_reserve

    @property
    def right_edge(self) -> float:
        return self.width - self.margin_right

    @property
    def content_width(self) -> float:
        return self.width - self.margin_left - self.margin_right


@dataclass(frozen=True)
class ChromeSpec:
    """Immutable header data for one generation call."""

    title: str
    subtitle: Optional[str] = None
    generator_name: Optional[str] = None
    generator_role: Optional[str] = None
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def generated_by(self) -> str:
        return self.generator_name or self.generator_role or DEFAULT_GENERATOR

    @property
    def generated_on(self) -> str:
        return self.generated_at.strftime(DATETIME_FORMAT)


@dataclass(frozen=True)
class ReportContext:
    """
    Who asked for the document and when. Assemblers derive every ChromeSpec
    from this object so all pages carry the same provenance.
    """

    user_name: Optional[str] = None
    user_role: Optional[str] = None
    issued_at: Optional[datetime] = None

    @property
    def is_local(self) -> bool:
        # Collection managers see project-scoped data and field notes.
        return self.user_role == LOCAL_ROLE

    def chrome(self, title: str, subtitle: Optional[str] = None) -> ChromeSpec:
        return ChromeSpec(
            title=title,
            subtitle=subtitle,
            generator_name=self.user_name,
            generator_role=self.user_role,
            generated_at=self.issued_at or datetime.now(),
        )
