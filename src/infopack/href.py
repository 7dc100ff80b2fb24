"""Conversion between xlink:href values and package-relative paths."""

from pathlib import Path, PurePosixPath
from urllib.parse import quote, unquote

_PREFIXES = ("file://./", "file://", "file:")


def encode_href(path: str, encode: bool) -> str:
    """Turn a package-relative path into an href value.

    Args:
        path: '/'-separated package-relative path
        encode: Percent-encode characters outside the unreserved set
    """
    if not encode:
        return path
    return quote(path, safe="/")


def decode_href(href: str, encode: bool) -> str:
    return unquote(href) if encode else href


def relative_path_from_href(href: str | None, encode: bool) -> str | None:
    """Extract a package-relative path from an href.

    Strips ``file:`` style prefixes and a leading ``./``, then decodes.

    Returns:
        The normalized '/'-separated path, or None if the href is empty,
        absolute, or escapes the package root
    """
    if not href:
        return None
    value = href.strip()
    for prefix in _PREFIXES:
        if value.startswith(prefix):
            value = value[len(prefix):]
            break
    value = decode_href(value, encode)
    while value.startswith("./"):
        value = value[2:]

    if not value or value.startswith("/") or "\\" in value:
        return None
    parts = [p for p in PurePosixPath(value).parts if p != "."]
    if not parts or ".." in parts:
        return None
    return "/".join(parts)


def resolve_under(base_path: Path, relative: str) -> Path:
    return base_path.joinpath(*relative.split("/"))


def relative_folders(zone_root: Path, file_path: Path) -> list[str]:
    """Folders between a zone root and a file.

    Returns an empty list when the file does not live under the zone root.
    """
    try:
        relative = file_path.relative_to(zone_root)
    except ValueError:
        return []
    return list(relative.parts[:-1])
