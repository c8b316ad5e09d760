"""
Symlink path helpers for dslm.

Symlink behaviour differs by platform:
- POSIX links get relative targets, so a repository and its
  installations can move together.
- Windows links get absolute targets, and links to directories have
  to be removed with rmdir rather than unlink.
"""

import os
import sys
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def is_windows() -> bool:
    """Check whether the host uses Windows symlink semantics."""
    return sys.platform.startswith('win')


def relative_link_target(
    source_dir: PathLike,
    dest_dir: PathLike,
    windows: Optional[bool] = None
) -> str:
    """
    Compute a symlink target for source_dir, as seen from dest_dir.

    On POSIX this is the shortest relative path: one ".." per segment
    of dest_dir below the common prefix, then the remaining segments of
    source_dir. On Windows the resolved absolute path of source_dir is
    returned instead, and such links break if the repository moves.

    Args:
        source_dir: Directory the link should point at
        dest_dir: Directory the link will live in
        windows: Override platform detection

    Returns:
        Target string suitable for os.symlink
    """
    if windows is None:
        windows = is_windows()
    if windows:
        return str(Path(source_dir).resolve())

    source_parts = Path(os.path.abspath(source_dir)).parts
    dest_parts = Path(os.path.abspath(dest_dir)).parts

    common = 0
    for source_part, dest_part in zip(source_parts, dest_parts):
        if source_part != dest_part:
            break
        common += 1

    parts = [os.pardir] * (len(dest_parts) - common) + list(source_parts[common:])
    return os.path.join(*parts) if parts else os.curdir


def link_points_to_dir(link: PathLike) -> bool:
    """Check whether a symlink's target (one hop) is a directory."""
    link = Path(link)
    target = Path(os.readlink(link))
    if not target.is_absolute():
        target = link.parent / target
    return target.is_dir()


def make_link(link: PathLike, target: str) -> None:
    """
    Create a symlink at link pointing at target.

    target may be relative to the link's directory.
    """
    link = Path(link)
    resolved = Path(target) if os.path.isabs(target) else link.parent / target
    link.symlink_to(target, target_is_directory=resolved.is_dir())
    logger.info(f"Linked {link} -> {target}")


def remove_link(link: PathLike, windows: Optional[bool] = None) -> None:
    """
    Remove a symlink without touching what it points at.

    Windows needs rmdir for links to directories; elsewhere a plain
    unlink is enough.
    """
    if windows is None:
        windows = is_windows()

    if windows and link_points_to_dir(link):
        os.rmdir(link)
    else:
        os.unlink(link)
    logger.info(f"Removed link {link}")
