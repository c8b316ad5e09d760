"""
Domain layer for dslm.

Contains pure domain objects with no I/O or side effects:
- VersionEntry: A repository directory entry recognized as a version
- Catalog: Ordered, bucketed view of one repository collection
- SwitchResult / SiteInfo: Outcomes of switch and inspection operations
"""

from .version import (
    Bucket,
    PackageKind,
    VersionEntry,
    compare_versions,
    extract_major,
    parse_version_entry,
)
from .catalog import Catalog
from .operation import ErrorKind, SiteInfo, SwitchResult, SwitchState

__all__ = [
    'Bucket',
    'PackageKind',
    'VersionEntry',
    'compare_versions',
    'extract_major',
    'parse_version_entry',
    'Catalog',
    'ErrorKind',
    'SiteInfo',
    'SwitchResult',
    'SwitchState',
]
