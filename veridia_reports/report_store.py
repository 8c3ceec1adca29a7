import json
import logging
import re
from datetime import datetime
from pathlib import Path

from .config import DEFAULT_REPORT_DIR

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9]")


def sanitize_stem(name: str) -> str:
    """
    Replace every character outside [A-Za-z0-9] with '_' and lowercase.
    Accented letters are not folded: "Família" -> "fam_lia".
    """
    return _UNSAFE.sub("_", name or "").lower()


def report_filename(prefix: str, name: str) -> str:
    stem = sanitize_stem(name)
    return f"{prefix}_{stem}.pdf" if stem else f"{prefix}.pdf"


def save_report_pdf(document, report_dir: Path = DEFAULT_REPORT_DIR) -> Path:
    """
    Persist a rendered document and a small metadata sidecar next to it.
    Returns the PDF path.
    """
    report_dir = Path(report_dir)
    report_dir.mkdir(parents=True, exist_ok=True)
    pdf_path = report_dir / document.filename
    meta_path = pdf_path.with_suffix(".json")

    pdf_path.write_bytes(document.data)

    generated_at = getattr(document, "generated_at", None) or datetime.now()
    metadata = {
        "filename": document.filename,
        "kind": getattr(document, "kind", ""),
        "title": getattr(document, "title", ""),
        "page_count": document.page_count,
        "generated_at": generated_at.isoformat(),
        "path": str(pdf_path),
    }
    try:
        meta_path.write_text(json.dumps(metadata, indent=2, ensure_ascii=False), encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        # Metadata failures should not block PDF saving.
        logger.warning("Could not write report metadata %s: %s", meta_path, exc)
    return pdf_path
