"""
Media path normalisation and gallery encoding

Stored image paths come in several legacy shapes (relative paths into the
old frontend public folder, doubled "events/events" segments, Windows
separators). Every API response runs them through ``normalize_media_url``
so clients always receive absolute URLs.
"""
import json
import logging
from typing import Iterable, List, Optional, Tuple, Union

from ..config import config

logger = logging.getLogger(__name__)

EMPTY_VALUES = {"", "null", "undefined"}

# Applied in order, by literal substring replacement
LEGACY_REWRITES = [
    ("../frontend/public/", "/"),
    ("../frontend/public", ""),
    ("/frontend/public/", "/"),
    ("/events/events/", "/events/"),
]


def normalize_media_url(path: Optional[str], base_url: Optional[str] = None) -> Optional[str]:
    """
    Turn a stored media path into an absolute URL.

    Returns None for empty values. Absolute http(s) URLs are returned
    unchanged, so normalising twice gives the same result.
    """
    if path is None:
        return None
    if not isinstance(path, str):
        path = str(path)

    cleaned = path.strip()
    if cleaned in EMPTY_VALUES:
        return None
    if cleaned.startswith("http"):
        return cleaned

    cleaned = cleaned.replace("\\", "/")
    for old, new in LEGACY_REWRITES:
        cleaned = cleaned.replace(old, new)

    cleaned = "/" + cleaned.lstrip("/")
    if cleaned == "/":
        return None

    base = (base_url if base_url is not None else config.media_base_url).rstrip("/")
    return f"{base}{cleaned}"


def decode_gallery(value: Union[str, Iterable[str], None]) -> List[str]:
    """
    Read a gallery column into a list of paths.

    Accepts a JSON array string, a comma-joined string or a native list.
    Empty entries are dropped.
    """
    if value is None:
        return []

    if isinstance(value, (list, tuple)):
        items = value
    else:
        text = str(value).strip()
        if not text or text in EMPTY_VALUES:
            return []
        if text.startswith("["):
            try:
                items = json.loads(text)
            except json.JSONDecodeError:
                logger.warning("Gallery value is not valid JSON, falling back to comma split")
                items = text.strip("[]").replace('"', "").split(",")
        else:
            items = text.split(",")

    return [str(item).strip() for item in items if item is not None and str(item).strip()]


def encode_gallery(paths: Iterable[str]) -> str:
    """Serialise gallery paths as a JSON array string"""
    return json.dumps([p for p in paths if p])


def gallery_urls(value: Union[str, Iterable[str], None], base_url: Optional[str] = None) -> List[str]:
    """Decode a gallery column and normalise each entry"""
    urls = (normalize_media_url(path, base_url) for path in decode_gallery(value))
    return [url for url in urls if url]


def storage_key_from_path(path: Optional[str], base_url: Optional[str] = None) -> Optional[str]:
    """
    Map a stored path or public URL back to a storage key under UPLOADS_ROOT.

    "/uploads/artists/1_x/gallery/a.jpg" -> "artists/1_x/gallery/a.jpg".
    Returns None for paths that do not point into the uploads area.
    """
    if not path:
        return None

    text = path.strip()
    base = (base_url if base_url is not None else config.media_base_url).rstrip("/")
    if base and text.startswith(base):
        text = text[len(base):]

    prefix = config.UPLOADS_URL_PREFIX.rstrip("/") + "/"
    text = "/" + text.lstrip("/")
    if not text.startswith(prefix):
        return None

    key = text[len(prefix):]
    if not key or ".." in key.split("/"):
        return None
    return key


def append_gallery(value: Union[str, Iterable[str], None], new_paths: Iterable[str]) -> str:
    """Add stored paths to a gallery column, skipping ones already present"""
    paths = decode_gallery(value)
    for path in new_paths:
        if path and path not in paths:
            paths.append(path)
    return encode_gallery(paths)


def remove_from_gallery(value: Union[str, Iterable[str], None], image: str,
                        base_url: Optional[str] = None) -> Tuple[str, Optional[str]]:
    """
    Remove one image from a gallery column.

    ``image`` may be the stored path or the normalised URL a client was
    given. Returns the re-encoded gallery and the stored path that was
    removed (None when nothing matched).
    """
    target = normalize_media_url(image, base_url)
    paths = decode_gallery(value)
    for path in paths:
        if path == image or normalize_media_url(path, base_url) == target:
            paths.remove(path)
            return encode_gallery(paths), path
    return encode_gallery(paths), None
