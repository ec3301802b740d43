# tiermedia/common/path/safe.py
from __future__ import annotations

from pathlib import Path, PurePosixPath


def resolve_root(root: Path | str) -> Path:
    """Resolve a storage root directory."""
    return Path(root).expanduser().resolve()


def safe_join(root: Path | str, rel: Path | str) -> Path:
    """
    Join 'root' and a relative storage path safely, ensuring the result stays inside 'root'.
    Raises ValueError if traversal escapes the root.
    """
    r = resolve_root(root)
    p = (r / str(rel).lstrip("/")).resolve()
    try:
        p.relative_to(r)
    except ValueError as exc:
        raise ValueError(f"path {p} escapes root {r}") from exc
    return p


def normalize_object_path(path: str) -> str:
    """
    Canonical form of a bucket object path: forward slashes, no leading slash,
    no '.' segments. '..' segments are rejected.
    """
    raw = (path or "").replace("\\", "/").strip()
    parts = [seg for seg in PurePosixPath(raw).parts if seg not in ("/", ".", "")]
    if any(seg == ".." for seg in parts):
        raise ValueError(f"object path {path!r} contains '..'")
    if not parts:
        raise ValueError("object path is empty")
    return "/".join(parts)
