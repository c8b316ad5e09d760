"""
dslm - Drupal site link manager.

dslm keeps many Drupal installations on one shared repository of cores
and distributions. An installation is a directory of symlinks into one
core and one distribution; switching versions rewires the links instead
of copying files.

Quick Start:
    from dslm import Repository, SwitchService, Bucket

    repo = Repository("/srv/dslm")
    print(repo.cores().names(Bucket.RELEASE))

    service = SwitchService(repo)
    result = service.switch_core("/var/www/site", "drupal-7.32")
    if not result.success:
        print(service.last_error())

Repository layout:
    cores/      drupal-7.32/, drupal-7.x-dev/
    dists/      7.x-3.9/, 7.x-3.9-beta1/
    profiles/   openscholar-7.x-3.9/
"""

__version__ = "0.3.0"

# Domain objects
from .domain import (
    Bucket,
    PackageKind,
    VersionEntry,
    Catalog,
    ErrorKind,
    SiteInfo,
    SwitchResult,
    SwitchState,
    compare_versions,
    parse_version_entry,
)

# Services
from .services import Repository, SwitchService

# Configuration
from .config import load_config, save_config

__all__ = [
    "__version__",
    "Bucket",
    "PackageKind",
    "VersionEntry",
    "Catalog",
    "ErrorKind",
    "SiteInfo",
    "SwitchResult",
    "SwitchState",
    "compare_versions",
    "parse_version_entry",
    "Repository",
    "SwitchService",
    "load_config",
    "save_config",
]
