"""
Version domain objects for dslm.

Directory entries in the repository double as version records:
- Cores: "drupal-7.32", "drupal-7.x-dev", "pressflow-6.22-beta1"
- Distributions: "7.x-3.9", "7.x-3.9-beta1"
- Profiles: "openscholar-7.x-3.9"

parse_version_entry() is the only place a raw name becomes meaningful.
Names that fail to parse are not errors, they are simply not versions.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key
from typing import Any, Dict, List, Optional, Tuple


class PackageKind(Enum):
    """Kinds of versioned packages held by a repository."""
    CORE = "core"
    DISTRIBUTION = "distribution"
    PROFILE = "profile"


class Bucket(Enum):
    """Release maturity groupings of a catalog."""
    ALL = "all"
    RELEASE = "release"
    DEV = "dev"


PRERELEASE_WORDS = ('dev', 'alpha', 'beta', 'rc', 'pl')

_PRE = r'(?:dev|alpha|beta|rc|pl)\d*'

CORE_PATTERN = re.compile(
    rf'^(?P<name>.+?)-(?P<version>\d+(?:\.(?:\d+|x))+(?:-?{_PRE})?)$',
    re.IGNORECASE
)
DIST_PATTERN = re.compile(
    rf'^(?P<version>(?P<major>\d+)\.x-\d+(?:\.(?:\d+|x))*(?:-{_PRE})?)$',
    re.IGNORECASE
)
PROFILE_PATTERN = re.compile(
    rf'^(?P<name>[A-Za-z0-9_]+)-(?P<version>(?P<major>\d+)\.x-\d+(?:\.(?:\d+|x))*(?:-{_PRE})?)$',
    re.IGNORECASE
)
PRERELEASE_PATTERN = re.compile(rf'{_PRE}$', re.IGNORECASE)
MAJOR_PATTERN = re.compile(r'(?:^|-)(\d+)(?:\.|$)')

_PATTERNS = {
    PackageKind.CORE: CORE_PATTERN,
    PackageKind.DISTRIBUTION: DIST_PATTERN,
    PackageKind.PROFILE: PROFILE_PATTERN,
}


@dataclass(frozen=True)
class VersionEntry:
    """
    A directory entry recognized as a versioned package.

    Attributes:
        raw: Directory entry name (e.g., "drupal-7.32")
        name: Logical name before the version ("drupal", a profile's
            machine name, or "" for distributions)
        version: Sortable version token (e.g., "7.32", "7.x-3.9")
        kind: Package kind
        major: Major version component (e.g., "7")
        prerelease: True when the token ends in dev/alpha/beta/rc/pl
    """

    raw: str
    name: str
    version: str
    kind: PackageKind
    major: str
    prerelease: bool = False

    @property
    def bucket(self) -> Bucket:
        return Bucket.DEV if self.prerelease else Bucket.RELEASE

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.raw,
            'logical_name': self.name,
            'version': self.version,
            'kind': self.kind.value,
            'major': self.major,
            'prerelease': self.prerelease,
        }


def is_prerelease(token: str) -> bool:
    """Check whether a version token ends with a pre-release marker."""
    return PRERELEASE_PATTERN.search(token) is not None


def extract_major(text: str) -> Optional[str]:
    """
    Extract the major version from a core name, version or major filter.

    Examples:
        "drupal-7.32" -> "7"
        "7.x-3.9"     -> "7"
        "8"           -> "8"
    """
    if not text:
        return None
    match = MAJOR_PATTERN.search(text)
    return match.group(1) if match else None


def parse_version_entry(name: str, kind: PackageKind) -> Optional[VersionEntry]:
    """
    Parse a directory entry name into a VersionEntry.

    Args:
        name: Directory entry name
        kind: Which naming scheme to apply

    Returns:
        VersionEntry, or None if the name is not a valid entry of that kind
    """
    match = _PATTERNS[kind].match(name)
    if not match:
        return None

    groups = match.groupdict()
    version = groups['version']
    major = groups.get('major') or extract_major(version)

    return VersionEntry(
        raw=name,
        name=groups.get('name') or '',
        version=version,
        kind=kind,
        major=major or '',
        prerelease=is_prerelease(version),
    )


# Component ranks: unknown words < dev < alpha < beta < rc < numbers < pl
_WORD_RANKS = {
    'dev': 1,
    'alpha': 2, 'a': 2,
    'beta': 3, 'b': 3,
    'rc': 4, 'c': 4,
    'pl': 6, 'p': 6,
}
_NUMBER_RANK = 5
# An exhausted side compares like a number lower than any real number
_PADDING = (_NUMBER_RANK, -1)


def normalize_version(token: str, kind: PackageKind = PackageKind.CORE) -> str:
    """Collapse "7.x-3.9" to "7.3.9" for distributions and profiles."""
    if kind == PackageKind.CORE:
        return token
    return token.replace('.x-', '.')


def _components(token: str) -> List[Tuple[int, int]]:
    """Split a version token into ranked components."""
    parts = re.findall(r'\d+|[A-Za-z]+', token)
    components = []
    for part in parts:
        if part.isdigit():
            components.append((_NUMBER_RANK, int(part)))
        else:
            components.append((_WORD_RANKS.get(part.lower(), 0), 0))
    return components


def compare_versions(a: str, b: str, kind: PackageKind = PackageKind.CORE) -> int:
    """
    Compare two version tokens.

    Numeric components compare numerically left to right. A pre-release
    suffix orders below the same numeric prefix without one, so
    "3.9-beta2" < "3.9" < "3.9-pl1".

    Returns:
        -1, 0 or 1
    """
    left = _components(normalize_version(a, kind))
    right = _components(normalize_version(b, kind))

    length = max(len(left), len(right))
    left += [_PADDING] * (length - len(left))
    right += [_PADDING] * (length - len(right))

    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def compare_entries(a: VersionEntry, b: VersionEntry) -> int:
    """Compare two entries of the same kind by version token."""
    return compare_versions(a.version, b.version, a.kind)


version_sort_key = cmp_to_key(compare_entries)


def sort_entries(entries: List[VersionEntry]) -> List[VersionEntry]:
    """Stable sort of entries, lowest version first."""
    return sorted(entries, key=version_sort_key)
