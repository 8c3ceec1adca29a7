"""Shared fixtures: tiny images, sample records, and a network that always fails."""

from datetime import datetime
from io import BytesIO
from urllib.error import URLError

import pytest
from PIL import Image

from veridia_reports import images
from veridia_reports.context import ReportContext
from veridia_reports.images import LOGO_CACHE
from veridia_reports.models import LabelRecord, SpeciesRecord
from veridia_reports.surface import DrawingSurface


@pytest.fixture(autouse=True)
def _isolated_logo(monkeypatch):
    # Keep tests from picking up a logo from the environment or the repo.
    monkeypatch.delenv("VERIDIA_LOGO", raising=False)
    monkeypatch.setattr(images, "resolve_logo_source", lambda *args, **kwargs: "")
    LOGO_CACHE.clear()
    yield
    LOGO_CACHE.clear()


@pytest.fixture
def png_bytes() -> bytes:
    buf = BytesIO()
    Image.new("RGBA", (8, 8), (6, 78, 59, 128)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def no_network(monkeypatch):
    calls = []

    def _fail(req, timeout=None):
        calls.append(getattr(req, "full_url", req))
        raise URLError("network unreachable")

    monkeypatch.setattr(images, "urlopen", _fail)
    return calls


@pytest.fixture
def surface() -> DrawingSurface:
    s = DrawingSurface()
    s.add_page()
    s.set_font("Helvetica", "", 10)
    return s


@pytest.fixture
def context() -> ReportContext:
    return ReportContext(user_name="Ana Souza", user_role="Curador", issued_at=datetime(2024, 5, 17, 9, 30))


@pytest.fixture
def local_context() -> ReportContext:
    return ReportContext(user_name="Rui Lima", user_role="Gestor de Acervo", issued_at=datetime(2024, 5, 17, 9, 30))


@pytest.fixture
def label_record() -> LabelRecord:
    return LabelRecord(
        scientific_name="Mikania glomerata",
        author="Spreng.",
        family="Asteraceae",
        popular_name="Guaco",
        collector="M. Pereira",
        collector_number="1042",
        date="12/03/2024",
        locality="Parque Estadual da Serra do Mar, trilha do Poço",
        coordinates="-23.4512, -45.0711",
        habitat="Borda de mata ombrófila densa",
        morphology="Trepadeira volúvel, folhas opostas",
        notes="Flores brancas perfumadas",
        determinant="J. Ramos",
        determination_date="20/03/2024",
        sequence_number=17,
    )


@pytest.fixture
def species_record() -> SpeciesRecord:
    return SpeciesRecord(
        scientific_name="Mikania glomerata Spreng.",
        popular_name="Guaco",
        family=[{"familia_nome": "Asteraceae"}],
        location={"nome": "Horto Florestal"},
        description="Trepadeira lenhosa nativa da Mata Atlântica.",
        light="Meia sombra",
        water="Regas frequentes",
        local_description="Ocorre na borda da trilha principal.",
        field_notes="Exemplar florido em março.",
        latitude=-23.45,
        longitude=-45.07,
        image_urls=["https://images.example.org/guaco.jpg"],
    )
