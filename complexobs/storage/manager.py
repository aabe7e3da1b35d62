# complexobs/storage/manager.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Optional, Tuple

from complexobs.core.config import ComplexObsConfig

log = logging.getLogger(__name__)

# give up probing after this many taken names
MAX_SUFFIX = 100_000


def _ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def get_complex_obs_dir(config: ComplexObsConfig) -> Path:
    """
    Return the configured complex obs directory, creating it if needed.
    """
    d = config.complex_obs_dir
    _ensure_dir(d)
    return d


def make_complex_filename(base: str, ext: str, suffix: Optional[int] = None) -> str:
    """
    "42", "png" -> "42.png"; with suffix 1 -> "42_1.png".
    """
    if suffix is not None:
        base = f"{base}_{suffix}"
    if ext:
        return f"{base}.{ext}"
    return base


def reserve_output_file(target_dir: Path, base: str, ext: str) -> Tuple[Path, BinaryIO]:
    """
    Create a new, empty file in target_dir named after base + ext.
    If the name is taken, append _N suffix until a free name is found.
    The file is created exclusively, so concurrent callers never get the same path.
    Returns (path, open binary handle); the caller owns the handle.
    """
    _ensure_dir(target_dir)
    suffix: Optional[int] = None
    while True:
        candidate = target_dir / make_complex_filename(base, ext, suffix)
        try:
            fh = open(candidate, "xb")
        except FileExistsError:
            log.debug("complex obs file %s exists, probing next name", candidate)
            suffix = 1 if suffix is None else suffix + 1
            if suffix > MAX_SUFFIX:
                raise
            continue
        return candidate, fh


def discard_file(path: Path) -> bool:
    """
    Remove path if it exists. Returns True if a file was removed.
    """
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True
