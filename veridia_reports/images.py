import base64
import logging
from http.client import HTTPException
from io import BytesIO
from pathlib import Path
from typing import Dict, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import unquote_to_bytes
from urllib.request import Request, urlopen

from PIL import Image, UnidentifiedImageError

from .config import IMAGE_MAX_BYTES, IMAGE_TIMEOUT_S, IMAGE_USER_AGENT, resolve_logo_source

logger = logging.getLogger(__name__)


def _decode_data_url(url: str) -> bytes:
    header, _, payload = url.partition(",")
    if header.endswith(";base64"):
        return base64.b64decode(payload, validate=False)
    return unquote_to_bytes(payload)


def _http_get(url: str, timeout: float) -> Optional[bytes]:
    req = Request(url, headers={"User-Agent": IMAGE_USER_AGENT})
    with urlopen(req, timeout=timeout) as resp:
        status = getattr(resp, "status", 200)
        if not 200 <= status < 300:
            logger.warning("Image request %s returned HTTP %s", url, status)
            return None
        raw = resp.read(IMAGE_MAX_BYTES + 1)
    return raw


def _read_source(source: str, timeout: float) -> Optional[bytes]:
    if source.startswith("data:"):
        return _decode_data_url(source)
    if source.startswith(("http://", "https://")):
        return _http_get(source, timeout)
    path = Path(source)
    if path.is_file():
        return path.read_bytes()
    logger.warning("Image source not found: %s", source)
    return None


def flatten_to_png(raw: bytes) -> bytes:
    """Decode any Pillow-readable raster, paint alpha onto white, re-encode as PNG."""
    with Image.open(BytesIO(raw)) as im:
        im.load()
        if im.mode in ("RGBA", "LA") or (im.mode == "P" and "transparency" in im.info):
            rgba = im.convert("RGBA")
            white_bg = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
            white_bg.alpha_composite(rgba)
            flat = white_bg.convert("RGB")
        else:
            flat = im.convert("RGB")
    buf = BytesIO()
    flat.save(buf, format="PNG")
    return buf.getvalue()


def fetch_image(url: Optional[str], timeout: float = IMAGE_TIMEOUT_S) -> Optional[bytes]:
    """
    Fetch an image and return PNG bytes ready for embedding, or None.
    Accepts http(s) URLs, data: URLs and local paths. Never raises.
    """
    if not url:
        return None
    try:
        raw = _read_source(url, timeout)
    except (HTTPError, URLError, HTTPException, OSError, ValueError) as exc:
        logger.warning("Image fetch failed for %s: %s", url, exc)
        return None
    if not raw:
        return None
    if len(raw) > IMAGE_MAX_BYTES:
        logger.warning("Image %s exceeds %d bytes, skipped", url, IMAGE_MAX_BYTES)
        return None

    try:
        return flatten_to_png(raw)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        logger.warning("Image %s could not be decoded: %s", url[:80], exc)
        return None


class LogoCache:
    """
    Process-wide brand logo, loaded on first use. Concurrent first loads may
    both fetch, but only the first stored value wins. Failures are not stored.
    """

    _KEY = "logo"

    def __init__(self, timeout: float = IMAGE_TIMEOUT_S):
        self.timeout = timeout
        self._store: Dict[str, bytes] = {}

    def ensure_loaded(self, source: Optional[str] = None) -> Optional[bytes]:
        cached = self._store.get(self._KEY)
        if cached is not None:
            return cached
        source = source or resolve_logo_source()
        if not source:
            logger.debug("No logo configured")
            return None
        data = fetch_image(source, timeout=self.timeout)
        if data is None:
            logger.warning("Logo could not be loaded from %s", source)
            return None
        return self._store.setdefault(self._KEY, data)

    @property
    def loaded(self) -> bool:
        return self._KEY in self._store

    def clear(self) -> None:
        self._store.clear()


LOGO_CACHE = LogoCache()
