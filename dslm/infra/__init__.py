"""
Infrastructure layer for dslm.

Filesystem primitives the switching engine is built on:
- paths: Relative link targets and platform-aware link creation/removal
- links: Inspection of the symlinks an installation holds
"""

from .paths import (
    is_windows,
    relative_link_target,
    make_link,
    remove_link,
)
from .links import (
    current_links,
    first_link_target,
    links_into_core,
    first_link_dirname,
    first_link_basename,
)

__all__ = [
    'is_windows',
    'relative_link_target',
    'make_link',
    'remove_link',
    'current_links',
    'first_link_target',
    'links_into_core',
    'first_link_dirname',
    'first_link_basename',
]
