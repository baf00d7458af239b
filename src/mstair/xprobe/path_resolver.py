# File: src/mstair/xprobe/path_resolver.py
"""
Shorten file paths for display and build editor links.

Resolution order for `shorten_path()`:

1. the first configured ``app_root_dirs`` prefix, replaced by its label;
2. the git working tree containing the file, shown as ``<repo-name>/relative``;
3. the path below the part it shares with this package's directory, shown as ``.../rest``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final, NamedTuple

from mstair.xprobe.base import git_helpers
from mstair.xprobe.settings import XProbeSettings
from mstair.xprobe.xlogging import create_logger


__all__ = [
    "FileLink",
    "file_link",
    "shorten_path",
]

LOG = create_logger(__name__)

PACKAGE_DIR: Final[str] = Path(__file__).resolve().parent.as_posix()


class FileLink(NamedTuple):
    url: str | None
    """Editor URL, or None when no link format is configured."""
    label: str
    """Shortened ``path:line`` text."""


def _posix(path: str) -> str:
    return path.replace("\\", "/")


def _shorten_by_app_roots(file: str, app_root_dirs: dict[str, str]) -> str | None:
    for root, label in app_root_dirs.items():
        if not root:
            continue
        root = _posix(root)
        if file.startswith(root):
            return label + file[len(root) :]
    return None


def _shorten_by_git(file: str) -> str | None:
    if file.startswith("<"):
        return None
    base = git_helpers.git_repo_basedir(file)
    if not base:
        return None
    resolved = _posix(str(Path(file).resolve()))
    if not resolved.startswith(base.rstrip("/") + "/"):
        return None
    return f"<{Path(base).name}>/{resolved[len(base.rstrip('/')) + 1 :]}"


def _shorten_by_common_prefix(file: str, anchor: str = PACKAGE_DIR) -> str:
    anchor_parts = _posix(anchor).split("/")
    file_parts = file.split("/")
    shared = 0
    for anchor_part, file_part in zip(anchor_parts, file_parts):
        if anchor_part != file_part:
            break
        shared += 1
    shared = min(shared, len(file_parts) - 1)
    rest = "/".join(file_parts[shared:])
    return f".../{rest}" if shared else rest


def shorten_path(file: str, settings: XProbeSettings) -> str:
    """
    Return a short display form of `file`.

    :param file: Source path as recorded in a frame.
    :param settings: Supplies `app_root_dirs`.
    """
    file = _posix(file)
    shortened = _shorten_by_app_roots(file, settings.app_root_dirs)
    if shortened is not None:
        return shortened
    shortened = _shorten_by_git(file)
    if shortened is not None:
        return shortened
    return _shorten_by_common_prefix(file)


def file_link(file: str, line: int | None, settings: XProbeSettings) -> FileLink:
    """
    Build the display label and optional editor URL for a source location.

    `%f` in `settings.file_link_format` is replaced by the full path and `%l` by the line.
    """
    short = shorten_path(file, settings)
    label = f"{short}:{line}" if line else short
    if not settings.file_link_format or not line:
        return FileLink(None, label)
    url = settings.file_link_format.replace("%f", _posix(file)).replace("%l", str(line))
    return FileLink(url, label)


# End of file: src/mstair/xprobe/path_resolver.py
