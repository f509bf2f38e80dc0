import posixpath
import re
from urllib.parse import unquote, urlparse

from theme_lens.models import SourceKind

_EXTENSION_KIND_MAP = {
    ".liquid": SourceKind.LIQUID,
    ".json": SourceKind.JSON,
}

# Asset templates share the .liquid suffix but are not theme templates.
_ASSET_TEMPLATE_RE = re.compile(r"\.(s?css|js)\.liquid$")


def normalize_location(location: str) -> str:
    """Turn a path or ``file://`` URI into a normalized ``/``-separated path."""
    if location.startswith("file://"):
        parsed = urlparse(location)
        location = unquote(parsed.path)
        # file:///c:/theme -> c:/theme
        if re.match(r"^/[A-Za-z]:/", location):
            location = location[1:]
    location = location.replace("\\", "/")
    normalized = posixpath.normpath(location)
    if normalized == ".":
        return ""
    return normalized


def is_supported(location: str) -> bool:
    return source_kind_for(location) is not None


def source_kind_for(location: str) -> SourceKind | None:
    if _ASSET_TEMPLATE_RE.search(location):
        return None
    return _EXTENSION_KIND_MAP.get(posixpath.splitext(location)[1])


def is_under(location: str, root: str) -> bool:
    root = root.rstrip("/")
    return location == root or location.startswith(root + "/")


def relative_to(location: str, root: str) -> str:
    if not is_under(location, root):
        return location
    return location[len(root.rstrip("/")) :].lstrip("/")


def join(root: str, *parts: str) -> str:
    return normalize_location(posixpath.join(root, *parts))
