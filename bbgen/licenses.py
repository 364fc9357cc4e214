"""
licenses.py

Responsibility: Build LIC_FILES_CHKSUM entries for the project's license files.

BitBake verifies these digests itself, so they must be the md5 of the raw
file bytes, lowercase hex.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

# Priority order, not alphabetical.
DEFAULT_LICENSE_FILES: tuple[str, ...] = ("LICENSE", "LICENSE.md", "COPYING", "COPYING.md")


class LicenseFileError(RuntimeError):
    pass


def md5_digest(path: Path) -> str:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise LicenseFileError(f"Could not read license file {path}: {e}") from e
    return hashlib.md5(data).hexdigest()


def collect_license_files(project_dir: str | Path, candidates: tuple[str, ...] = DEFAULT_LICENSE_FILES) -> list[str]:
    """
    Return `file://<name>;md5=<digest>` for each candidate that exists as a
    regular file under project_dir. Missing candidates are skipped.
    """
    root = Path(project_dir)
    entries: list[str] = []
    for name in candidates:
        path = root / name
        if not path.is_file():
            continue
        entries.append(f"file://{name};md5={md5_digest(path)}")
    return entries
