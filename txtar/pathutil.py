from __future__ import annotations

import os


def norm_path(p: str) -> str:
    """Normalize an archive file name to a canonical forward-slash form.

    Rules:
    - Convert backslashes to slashes
    - Strip surrounding whitespace and leading/trailing slashes
    - Remove empty and '.' segments
    - Reject '..' segments and names that end up empty
    """
    p = p.strip().replace("\\", "/").strip("/")
    parts = [q for q in p.split("/") if q not in ("", ".")]
    for q in parts:
        if q == "..":
            raise ValueError(f"file name may not contain '..': {p!r}")
    if not parts:
        raise ValueError(f"file name does not name a file: {p!r}")
    return "/".join(parts)


def to_archive_name(path: str, start: str) -> str:
    """Archive name for filesystem ``path`` relative to directory ``start``."""
    rel = os.path.relpath(path, start=start)
    return norm_path(rel.replace(os.sep, "/"))


def destination(outdir: str, name: str) -> str:
    """Filesystem path under ``outdir`` for archive file ``name``."""
    return os.path.join(outdir or ".", *norm_path(name).split("/"))
