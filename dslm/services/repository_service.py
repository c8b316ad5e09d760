"""
Repository service for dslm.

A repository is the root directory holding the versioned packages:

    base/
        cores/      drupal-7.32/, drupal-7.x-dev/, ...
        dists/      7.x-3.9/, 7.x-3.9-beta1/, ...
        profiles/   openscholar-7.x-3.9/, ...

cores/ is required, plus at least one of dists/ or profiles/.
Catalogs are rebuilt from the directory listing on every call.
"""

import os
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from ..domain.catalog import Catalog
from ..domain.version import Bucket, PackageKind, VersionEntry

logger = logging.getLogger(__name__)

CORES_DIR = 'cores'
DISTS_DIR = 'dists'
PROFILES_DIR = 'profiles'

COLLECTIONS = {
    PackageKind.CORE: CORES_DIR,
    PackageKind.DISTRIBUTION: DISTS_DIR,
    PackageKind.PROFILE: PROFILES_DIR,
}


class Repository:
    """
    Validated repository root and its version catalogs.

    An invalid repository keeps a descriptive error and yields empty
    catalogs; nothing else can be done with it.

    Example:
        repo = Repository("/srv/dslm")
        if not repo.valid:
            print(repo.error)
        latest = repo.cores().latest(Bucket.RELEASE)
    """

    def __init__(self, base: Union[str, Path]):
        """
        Initialize Repository.

        Args:
            base: Path to the repository root
        """
        self.base: Optional[Path] = None
        self.error: Optional[str] = None
        self.last_error: str = ''

        validated = self._validate_base(base)
        if validated:
            self.base = validated
        else:
            self.error = (
                f'The base dir "{base}" is invalid. It must contain a {CORES_DIR}/ '
                f'directory and a {DISTS_DIR}/ or {PROFILES_DIR}/ directory.'
            )
            self.last_error = self.error
            logger.warning(self.error)

    @property
    def valid(self) -> bool:
        return self.base is not None

    @staticmethod
    def _validate_base(base: Union[str, Path]) -> Optional[Path]:
        """Return the resolved base if it has the required collections."""
        if not base:
            return None
        path = Path(base).expanduser()
        if not path.is_dir():
            return None
        if not (path / CORES_DIR).is_dir():
            return None
        if not ((path / DISTS_DIR).is_dir() or (path / PROFILES_DIR).is_dir()):
            return None
        return path.resolve()

    def has_collection(self, subdir: str) -> bool:
        return self.valid and (self.base / subdir).is_dir()

    @property
    def has_dists(self) -> bool:
        return self.has_collection(DISTS_DIR)

    @property
    def has_profiles(self) -> bool:
        return self.has_collection(PROFILES_DIR)

    def path_for(self, entry: VersionEntry) -> Path:
        """Absolute path of a catalog entry's directory."""
        return self.base / COLLECTIONS[entry.kind] / entry.raw

    def scan(self, subdir: str, kind: PackageKind) -> Catalog:
        """
        Build the catalog of one collection.

        Entries whose names do not parse are skipped silently. A missing
        or unreadable collection yields an empty catalog and sets
        last_error.

        Args:
            subdir: Collection directory name (cores, dists, profiles)
            kind: How entry names are parsed
        """
        if not self.valid:
            self.last_error = self.error
            return Catalog.empty(kind)

        collection = self.base / subdir
        try:
            names = sorted(os.listdir(collection))
        except OSError as e:
            self.last_error = f"Cannot read {collection}: {e.strerror or e}"
            logger.warning(self.last_error)
            return Catalog.empty(kind)

        return Catalog.from_names(names, kind)

    def cores(self) -> Catalog:
        return self.scan(CORES_DIR, PackageKind.CORE)

    def dists(self) -> Catalog:
        return self.scan(DISTS_DIR, PackageKind.DISTRIBUTION)

    def profiles(self) -> Catalog:
        return self.scan(PROFILES_DIR, PackageKind.PROFILE)

    def catalog(self, kind: PackageKind) -> Catalog:
        return self.scan(COLLECTIONS[kind], kind)

    def latest(self, bucket: Bucket = Bucket.ALL) -> Dict[str, Optional[str]]:
        """Latest core and latest dist, None where a bucket is empty."""
        core = self.cores().latest(bucket)
        dist = self.dists().latest(bucket) if self.has_dists else None
        return {
            'core': core.raw if core else None,
            'dist': dist.raw if dist else None,
        }

    def is_valid_core(self, name: str) -> bool:
        return name in self.cores()

    def is_valid_dist(self, name: str) -> bool:
        return self.has_dists and name in self.dists()

    def is_valid_profile(self, name: str, version: str) -> bool:
        return self.has_profiles and self.profiles().find(name, version) is not None
