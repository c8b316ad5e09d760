"""
Catalog domain object for dslm.

A Catalog is the ordered view of one repository collection (cores,
dists or profiles). It is rebuilt from a directory listing on every
query and never cached.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .version import Bucket, PackageKind, VersionEntry, parse_version_entry, sort_entries


@dataclass(frozen=True)
class Catalog:
    """
    Ordered grouping of VersionEntry objects of one kind.

    Entries are held lowest version first. Equal version tokens keep
    their input order.

    Example:
        catalog = Catalog.from_names(["drupal-7.32", "drupal-7.9", "notes.txt"], PackageKind.CORE)
        catalog.names()                      # ["drupal-7.9", "drupal-7.32"]
        catalog.latest(Bucket.RELEASE).raw   # "drupal-7.32"
    """

    kind: PackageKind
    entries: Tuple[VersionEntry, ...] = field(default_factory=tuple)

    @classmethod
    def from_names(cls, names: Iterable[str], kind: PackageKind) -> 'Catalog':
        """Parse raw names, silently dropping the ones that are not versions."""
        parsed = []
        for name in names:
            entry = parse_version_entry(name, kind)
            if entry is not None:
                parsed.append(entry)
        return cls(kind=kind, entries=tuple(sort_entries(parsed)))

    @classmethod
    def empty(cls, kind: PackageKind) -> 'Catalog':
        return cls(kind=kind)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __contains__(self, raw_name: object) -> bool:
        return any(entry.raw == raw_name for entry in self.entries)

    def bucket(self, bucket: Bucket = Bucket.ALL) -> List[VersionEntry]:
        """Entries in a bucket, lowest version first."""
        if bucket == Bucket.ALL:
            return list(self.entries)
        return [entry for entry in self.entries if entry.bucket == bucket]

    @property
    def release(self) -> List[VersionEntry]:
        return self.bucket(Bucket.RELEASE)

    @property
    def dev(self) -> List[VersionEntry]:
        return self.bucket(Bucket.DEV)

    def names(self, bucket: Bucket = Bucket.ALL) -> List[str]:
        return [entry.raw for entry in self.bucket(bucket)]

    def latest(self, bucket: Bucket = Bucket.ALL) -> Optional[VersionEntry]:
        """
        Highest entry in a bucket.

        Returns:
            VersionEntry, or None when the bucket is empty
        """
        entries = self.bucket(bucket)
        return entries[-1] if entries else None

    def get(self, raw_name: str) -> Optional[VersionEntry]:
        for entry in self.entries:
            if entry.raw == raw_name:
                return entry
        return None

    def find(self, name: str, version: str) -> Optional[VersionEntry]:
        """Find an entry by logical name and version token."""
        for entry in self.entries:
            if entry.name == name and entry.version == version:
                return entry
        return None

    def filter_major(self, major: Optional[str]) -> 'Catalog':
        """Restrict to entries whose major version matches (no-op for None)."""
        if not major:
            return self
        return Catalog(
            kind=self.kind,
            entries=tuple(entry for entry in self.entries if entry.major == major),
        )

    def filter_name(self, name: str) -> 'Catalog':
        return Catalog(
            kind=self.kind,
            entries=tuple(entry for entry in self.entries if entry.name == name),
        )

    def by_name(self) -> Dict[str, 'Catalog']:
        """Group entries by logical name (used for profiles)."""
        grouped: Dict[str, List[VersionEntry]] = {}
        for entry in self.entries:
            grouped.setdefault(entry.name, []).append(entry)
        return {
            name: Catalog(kind=self.kind, entries=tuple(entries))
            for name, entries in grouped.items()
        }
