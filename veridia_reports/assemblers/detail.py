from typing import Any, Optional, Sequence

from ..config import BODY_FONT, COLORS, LABEL_COLUMN_WIDTH, MESSAGES
from ..context import PageGeometry, ReportContext
from ..cursor import LayoutCursor
from ..errors import ReportInputError
from ..models import ColumnStyle, DetailSection, EntityDetail, TableSpec, first_of
from ..tables import TableRenderer
from .base import ReportAssembler

SECTION_HEADER_SPACE = 18.0


class EntityDetailReport(ReportAssembler):
    """
    One entity: centered name, authorship/source lines, optional labeled
    fields, then one titled table (or "no records" line) per section.
    """

    kind = "detail"
    filename_prefix = "relatorio"

    def __init__(
        self,
        context: Optional[ReportContext],
        title: str,
        entity: EntityDetail,
        sections: Sequence[DetailSection] = (),
        label_width: float = LABEL_COLUMN_WIDTH,
        logo: Optional[bytes] = None,
    ):
        super().__init__(context, logo=logo)
        self.title = title
        self.entity = entity
        self.sections = list(sections)
        self.label_width = label_width

    @property
    def filename_stem(self) -> str:
        return self.entity.name

    def validate(self) -> None:
        content_width = PageGeometry(orientation=self.orientation).content_width
        if self.label_width >= content_width:
            raise ReportInputError(
                f"label_width {self.label_width} leaves no room in a {content_width:.0f} mm column"
            )

    def compose_body(self, cursor: LayoutCursor) -> None:
        surface = cursor.surface
        center = surface.geometry.width / 2
        cursor.advance(10)

        surface.set_font(BODY_FONT, "B", 16)
        name_lines = surface.split_to_width(self.entity.name.upper(), cursor.content_width)
        if cursor.check_break(len(name_lines) * 7):
            surface.set_font(BODY_FONT, "B", 16)
        surface.set_text_color(COLORS["primary"])
        surface.draw_lines(name_lines, center, cursor.y, 7, align="center")
        cursor.advance(len(name_lines) * 7 + 1)

        surface.set_font(BODY_FONT, "I", 11)
        surface.set_text_color(COLORS["text_light"])
        surface.draw_text(self.entity.authorship or "Unknown authorship", center, cursor.y, align="center")
        if self.entity.source:
            cursor.advance(6)
            surface.set_font(BODY_FONT, "", 9)
            surface.draw_text(f"Source: {self.entity.source}", center, cursor.y, align="center")
        cursor.advance(15)

        for label, value in self.entity.fields:
            cursor.print_labeled_block(f"{label}:", value, self.label_width)
        if self.entity.fields:
            cursor.advance(5)

        for section in self.sections:
            self._compose_section(cursor, section)

    def _compose_section(self, cursor: LayoutCursor, section: DetailSection) -> None:
        surface = cursor.surface
        has_rows = len(section.rows) > 0
        if not has_rows and section.hide_when_empty:
            return

        cursor.check_break(SECTION_HEADER_SPACE)
        if section.title:
            surface.set_font(BODY_FONT, "B", 12)
            surface.set_text_color(COLORS["text"])
            surface.draw_text(f"{section.title} ({len(section.rows)})", cursor.left, cursor.y)
            cursor.advance(6)

        if has_rows:
            spec = TableSpec(
                columns=section.columns,
                rows=section.rows,
                column_styles=section.column_styles,
                header_fill=section.header_fill,
            )
            renderer = TableRenderer(
                surface,
                safe_bottom=cursor.safe_bottom,
                top_offset=cursor.top_offset,
                on_new_page=self.continuation_header,
            )
            result = renderer.render(cursor.y, spec)
            cursor.move_to(result.final_y)
            cursor.advance(15)
        else:
            cursor.advance(5)
            cursor.print_note(section.empty_message or MESSAGES["no_records"])
            cursor.advance(12)

    @classmethod
    def for_family(
        cls,
        context: Optional[ReportContext],
        family: Any,
        species: Sequence[Any] = (),
        legacy_names: Sequence[Any] = (),
        logo: Optional[bytes] = None,
    ) -> "EntityDetailReport":
        """Family breakdown: linked species and, when present, former names."""
        family = first_of(family) or {}
        entity = EntityDetail(
            name=_get(family, "familia_nome") or "-",
            authorship=_get(family, "autoria_taxonomica"),
            source=_get(family, "fonte_referencia"),
        )
        species_section = DetailSection(
            title="Linked Species",
            columns=["Scientific Name", "Popular Name"],
            rows=[[_get(s, "nome_cientifico") or "-", _get(s, "nome_popular") or "-"] for s in species],
            column_styles={0: ColumnStyle(width=100, font_style="I")},
            empty_message="No linked species.",
        )
        legacy_section = DetailSection(
            title="Name History",
            columns=["Former Name", "Type", "Source"],
            rows=[
                [_get(n, "nome_legado") or "-", _get(n, "tipo") or "-", _get(n, "fonte") or "-"]
                for n in legacy_names
            ],
            header_fill=COLORS["legacy_header"],
            hide_when_empty=True,
        )
        return cls(context, "Family Detail Report", entity, [species_section, legacy_section], logo=logo)


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)
