from typing import Optional

from ..context import ReportContext
from ..cursor import LayoutCursor
from ..models import TableSpec
from ..tables import TableRenderer
from .base import ReportAssembler


class GenericTableReport(ReportAssembler):
    """Header, one table spanning as many pages as it needs, footer everywhere."""

    kind = "table"
    filename_prefix = "relatorio"

    def __init__(
        self,
        context: Optional[ReportContext],
        title: str,
        table: TableSpec,
        subtitle: Optional[str] = None,
        orientation: str = "portrait",
        logo: Optional[bytes] = None,
    ):
        super().__init__(context, logo=logo)
        self.title = title
        self.table = table
        self._subtitle = subtitle
        self.orientation = orientation
        self.last_result = None

    @property
    def subtitle(self) -> Optional[str]:
        return self._subtitle

    def compose_body(self, cursor: LayoutCursor) -> None:
        renderer = TableRenderer(
            cursor.surface,
            safe_bottom=cursor.safe_bottom,
            top_offset=cursor.top_offset,
            on_new_page=self.continuation_header,
        )
        self.last_result = renderer.render(cursor.y, self.table)
        cursor.move_to(self.last_result.final_y)
