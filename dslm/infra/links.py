"""
Link set inspection for dslm.

There is no record of which links dslm created. They are rediscovered
each time by reading link targets: a link whose target sits in a
directory named like a core ("drupal-7.32") belongs to that core.
"""

import os
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..domain.version import PackageKind, parse_version_entry

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _target_dirname(target: str) -> str:
    """Name of the directory a link target sits in."""
    return os.path.basename(os.path.dirname(target.rstrip('/\\')))


def _target_basename(target: str) -> str:
    return os.path.basename(target.rstrip('/\\'))


def current_links(directory: PathLike) -> List[Tuple[str, str]]:
    """
    List the top-level symlinks of a directory.

    Returns:
        (entry name, link target) pairs in name order. Targets are read
        one hop only, exactly as stored in the link.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []

    links = []
    for name in sorted(os.listdir(directory)):
        full = directory / name
        if full.is_symlink():
            links.append((name, os.readlink(full)))
    return links


def first_link_target(directory: PathLike) -> Optional[str]:
    """Target of the first symlink found in a directory, or None."""
    links = current_links(directory)
    return links[0][1] if links else None


def points_into_core(target: str) -> bool:
    """Check whether a link target lives inside a core directory."""
    return parse_version_entry(_target_dirname(target), PackageKind.CORE) is not None


def links_into_core(directory: PathLike) -> List[str]:
    """Names of the top-level links in a directory that point into a core."""
    return [name for name, target in current_links(directory) if points_into_core(target)]


def first_link_dirname(directory: PathLike) -> Optional[str]:
    """
    Core a directory is linked to.

    Returns:
        Name of the directory holding the target of the first link that
        points into a core, or None
    """
    for _, target in current_links(directory):
        if points_into_core(target):
            return _target_dirname(target)
    return None


def first_link_basename(directory: PathLike) -> Optional[str]:
    """Basename of the first link target in a directory, or None."""
    target = first_link_target(directory)
    return _target_basename(target) if target else None


def link_basename(link: PathLike) -> Optional[str]:
    """Basename of a single link's target, or None if link is not a symlink."""
    link = Path(link)
    if not link.is_symlink():
        return None
    return _target_basename(os.readlink(link))
