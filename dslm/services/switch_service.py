"""
Switch service for dslm.

Rewires an installation directory to a chosen core and extension
package using symlinks:

    site/
        index.php -> ../repo/cores/drupal-7.32/index.php
        includes  -> ../repo/cores/drupal-7.32/includes
        ...
        sites/
            default/        (real, installation-local)
            all -> ../../repo/dists/7.x-3.9
        profiles/           (real, when the repository has profiles/)
            openscholar -> ../../repo/profiles/openscholar-7.x-3.9

Each link is consistent on its own, but a switch as a whole is not
atomic: an interruption between removing the old core links and
creating the new ones leaves the installation without core links until
the switch is re-run.
"""

import os
import json
import shutil
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..config import load_config
from ..domain.catalog import Catalog
from ..domain.operation import ErrorKind, SiteInfo, SwitchResult, SwitchState
from ..domain.version import VersionEntry, extract_major
from ..infra.links import current_links, first_link_dirname, link_basename, links_into_core
from ..infra.paths import make_link, relative_link_target, remove_link
from .repository_service import Repository

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = '.dslm-links.json'

SITES_DIR = 'sites'
SITES_ALL = 'all'
SITES_DEFAULT = 'default'
INSTALL_PROFILES_DIR = 'profiles'

DEFAULT_MARKER_FILES = ['install.php', 'update.php', 'cron.php']
DEFAULT_SETTINGS_TEMPLATE = 'sites/default/default.settings.php'
DEFAULT_FILES_DIR = 'sites/default/files'

# Called with the ordered candidate names and a label ("core", "dist", ...).
# Returns the chosen name, or None to cancel.
Chooser = Callable[[List[str], str], Optional[str]]

PathLike = Union[str, Path]


class SwitchService:
    """
    Service for switching installations between cores and packages.

    Operations never raise for expected failures. They return a
    SwitchResult and record the message, available via last_error().
    The filesystem is left as the last completed step made it.

    Example:
        repo = Repository("/srv/dslm")
        service = SwitchService(repo)

        result = service.switch_core("/var/www/site", "drupal-7.32")
        if result.success:
            service.switch_dist("/var/www/site", major_filter=result.version)
        else:
            print(service.last_error())
    """

    def __init__(
        self,
        repository: Repository,
        config: Optional[Dict[str, Any]] = None,
        chooser: Optional[Chooser] = None
    ):
        """
        Initialize SwitchService.

        Args:
            repository: Repository to take packages from
            config: Configuration dict (loads default if None)
            chooser: Asked to pick a version when none (or an unknown one)
                is requested; without it that is a NO_CANDIDATE failure
        """
        self.repository = repository
        self.config = config if config is not None else load_config()
        self.chooser = chooser
        self.last_result: Optional[SwitchResult] = None
        self._last_error = repository.error or ''

        install_config = self.config.get('installation', {})
        marker_files = install_config.get('marker_files', DEFAULT_MARKER_FILES)
        # DSLM_INSTALLATION_MARKER_FILES arrives as "a.php,b.php"
        if isinstance(marker_files, str):
            marker_files = [marker.strip() for marker in marker_files.split(',') if marker.strip()]
        self.marker_files = marker_files
        self.settings_template = install_config.get('settings_template', DEFAULT_SETTINGS_TEMPLATE)
        self.files_dir = install_config.get('files_dir', DEFAULT_FILES_DIR)
        self.write_manifest = bool(self.config.get('general', {}).get('write_manifest', False))

    def last_error(self) -> str:
        """Message of the last failure; empty once an operation succeeds."""
        return self._last_error

    def is_installation(self, dest_dir: PathLike) -> bool:
        """Check whether a directory holds every installation marker file."""
        dest_dir = Path(dest_dir)
        if not dest_dir.is_dir():
            return False
        return all((dest_dir / marker).exists() for marker in self.marker_files)

    def reserved_names(self) -> List[str]:
        """Core entries that are never linked into an installation."""
        reserved = [SITES_DIR]
        if self.repository.has_profiles:
            reserved.append(INSTALL_PROFILES_DIR)
        return reserved

    def switch_core(
        self,
        dest_dir: Optional[PathLike] = None,
        core: Optional[str] = None,
        force: bool = False
    ) -> SwitchResult:
        """
        Link an installation to a core.

        Every top-level entry of the core except the reserved ones becomes
        a symlink in dest_dir. Links into the previous core are removed
        first. Installation-local directories are created if missing.

        Args:
            dest_dir: Installation directory (defaults to the cwd)
            core: Core to switch to, e.g. "drupal-7.32"
            force: Accept a directory that is not (yet) an installation,
                creating it if needed

        Returns:
            SwitchResult; version is the core actually applied
        """
        dest = self._resolve_dest(dest_dir)
        result = SwitchResult(operation='switch_core', destination=str(dest))
        self.last_result = result

        if not self._check_destination(dest, force, result):
            return self._fail(result)

        entry = self._select(self.repository.cores(), core, 'core', result)
        if entry is None:
            return self._fail(result)
        result.version = entry.raw
        source_dir = self.repository.path_for(entry)

        try:
            reserved = self.reserved_names()
            names = [name for name in sorted(os.listdir(source_dir)) if name not in reserved]
        except OSError as e:
            result.abort(ErrorKind.FILESYSTEM, f"Cannot read core {source_dir}: {e}")
            return self._fail(result)

        stale = links_into_core(dest)
        for name in names:
            path = dest / name
            if name not in stale and os.path.lexists(path):
                kind = 'symlink' if path.is_symlink() else 'file or directory'
                result.abort(
                    ErrorKind.DESTINATION_CONFLICT,
                    f"{path} already exists and is a {kind} not linked to a core"
                )
                return self._fail(result)

        try:
            if not dest.exists():
                dest.mkdir(parents=True)
                result.dirs_created.append(str(dest))
                dest = dest.resolve()

            self._transition(result, SwitchState.REMOVING_STALE_LINKS)
            for name in stale:
                remove_link(dest / name)
                result.links_removed.append(name)

            self._transition(result, SwitchState.CREATING_LINKS)
            target_dir = relative_link_target(source_dir, dest)
            for name in names:
                make_link(dest / name, os.path.join(target_dir, name))
                result.links_created.append(name)

            self._ensure_scaffold(dest, source_dir, result)
        except OSError as e:
            result.abort(ErrorKind.FILESYSTEM, f"Core switch of {dest} failed: {e}")
            return self._fail(result)

        logger.info(f"Switched {dest} to core {entry.raw}")
        return self._finish(result, dest)

    def switch_dist(
        self,
        dest_dir: Optional[PathLike] = None,
        dist: Optional[str] = None,
        force: bool = False,
        major_filter: Optional[str] = None
    ) -> SwitchResult:
        """
        Point an installation's sites/all at a distribution.

        A real sites/all directory is never replaced; the switch aborts
        with DESTINATION_CONFLICT instead.

        Args:
            dest_dir: Installation directory (defaults to the cwd)
            dist: Distribution to switch to, e.g. "7.x-3.9"
            force: Accept a directory that is not (yet) an installation
            major_filter: Only offer distributions of this major version;
                accepts a core name ("drupal-7.32"), a version or "7"

        Returns:
            SwitchResult; version is the distribution actually applied
        """
        dest = self._resolve_dest(dest_dir)
        result = SwitchResult(operation='switch_dist', destination=str(dest))
        self.last_result = result

        if not self._check_destination(dest, force, result):
            return self._fail(result)
        if not self.repository.has_dists:
            result.abort(
                ErrorKind.INVALID_REPOSITORY,
                f"The repository {self.repository.base} has no dists/ directory"
            )
            return self._fail(result)

        sites_dir = dest / SITES_DIR
        link = sites_dir / SITES_ALL
        if os.path.lexists(link) and not link.is_symlink():
            result.abort(
                ErrorKind.DESTINATION_CONFLICT,
                'The sites/all directory already exists and is not a symlink'
            )
            return self._fail(result)

        major = extract_major(major_filter) if major_filter else None
        catalog = self.repository.dists().filter_major(major)
        label = f"dist (major version {major})" if major else 'dist'
        entry = self._select(catalog, dist, label, result)
        if entry is None:
            return self._fail(result)
        result.version = entry.raw

        try:
            if not sites_dir.exists():
                sites_dir.mkdir(parents=True)
                result.dirs_created.append(str(sites_dir))
            sites_dir = sites_dir.resolve()

            self._transition(result, SwitchState.REMOVING_STALE_LINKS)
            if link.is_symlink():
                remove_link(link)
                result.links_removed.append(f"{SITES_DIR}/{SITES_ALL}")

            self._transition(result, SwitchState.CREATING_LINKS)
            make_link(sites_dir / SITES_ALL, relative_link_target(self.repository.path_for(entry), sites_dir))
            result.links_created.append(f"{SITES_DIR}/{SITES_ALL}")
        except OSError as e:
            result.abort(ErrorKind.FILESYSTEM, f"Dist switch of {dest} failed: {e}")
            return self._fail(result)

        logger.info(f"Switched {dest} to dist {entry.raw}")
        return self._finish(result, dest)

    def link_profile(
        self,
        name: str,
        version: Optional[str] = None,
        dest_dir: Optional[PathLike] = None,
        allow_relink: bool = False,
        force: bool = False
    ) -> SwitchResult:
        """
        Link an installation profile into dest_dir/profiles/<name>.

        Args:
            name: Profile machine name, e.g. "openscholar"
            version: Profile version, e.g. "7.x-3.9"
            dest_dir: Installation directory (defaults to the cwd)
            allow_relink: Replace an existing link to another version
            force: Accept a directory that is not (yet) an installation

        Returns:
            SwitchResult; version is the profile entry actually applied
        """
        dest = self._resolve_dest(dest_dir)
        result = SwitchResult(operation='link_profile', destination=str(dest))
        self.last_result = result

        if not self._check_destination(dest, force, result):
            return self._fail(result)
        if not self.repository.has_profiles:
            result.abort(
                ErrorKind.INVALID_REPOSITORY,
                f"The repository {self.repository.base} has no profiles/ directory"
            )
            return self._fail(result)

        profiles_dir = dest / INSTALL_PROFILES_DIR
        link = profiles_dir / name
        if os.path.lexists(link) and not link.is_symlink():
            result.abort(
                ErrorKind.DESTINATION_CONFLICT,
                f"{link} already exists and is not a symlink"
            )
            return self._fail(result)

        catalog = self.repository.profiles().filter_name(name)
        requested = f"{name}-{version}" if version else None
        entry = self._select(catalog, requested, f"{name} profile", result)
        if entry is None:
            return self._fail(result)
        result.version = entry.raw

        if link.is_symlink() and not allow_relink:
            result.abort(
                ErrorKind.ALREADY_LINKED,
                f"Profile {name} is already linked to {link_basename(link)}"
            )
            return self._fail(result)

        try:
            if not profiles_dir.exists():
                profiles_dir.mkdir(parents=True)
                result.dirs_created.append(str(profiles_dir))
            profiles_dir = profiles_dir.resolve()

            self._transition(result, SwitchState.REMOVING_STALE_LINKS)
            if link.is_symlink():
                remove_link(link)
                result.links_removed.append(f"{INSTALL_PROFILES_DIR}/{name}")

            self._transition(result, SwitchState.CREATING_LINKS)
            make_link(profiles_dir / name, relative_link_target(self.repository.path_for(entry), profiles_dir))
            result.links_created.append(f"{INSTALL_PROFILES_DIR}/{name}")
        except OSError as e:
            result.abort(ErrorKind.FILESYSTEM, f"Linking profile {name} in {dest} failed: {e}")
            return self._fail(result)

        logger.info(f"Linked profile {entry.raw} into {dest}")
        return self._finish(result, dest)

    def new_site(
        self,
        dest_dir: PathLike,
        core: Optional[str] = None,
        dist: Optional[str] = None,
        force: bool = False
    ) -> SwitchResult:
        """
        Create a new installation: a core switch followed by a dist switch
        restricted to the core's major version.

        Args:
            dest_dir: Directory to create
            core: Core to use
            dist: Distribution to use (ignored without a dists/ collection)
            force: Proceed even if dest_dir already exists
        """
        dest = Path(dest_dir).expanduser()
        result = SwitchResult(operation='new_site', destination=str(dest))

        if os.path.lexists(dest) and not force:
            self.last_result = result
            result.abort(ErrorKind.INVALID_DESTINATION, f"The directory {dest} already exists")
            return self._fail(result)

        core_result = self.switch_core(dest, core, force=True)
        self._absorb(result, core_result)
        result.version = core_result.version
        result.metadata['core'] = core_result.version
        if core_result.success and self.repository.has_dists:
            dist_result = self.switch_dist(dest, dist, force=True, major_filter=core_result.version)
            self._absorb(result, dist_result)
            result.metadata['dist'] = dist_result.version

        self.last_result = result
        if result.state == SwitchState.ABORTED:
            return self._fail(result)
        result.destination = core_result.destination
        result.state = SwitchState.DONE
        self._last_error = ''
        return result

    def site_info(self, dest_dir: Optional[PathLike] = None) -> Optional[SiteInfo]:
        """
        Report what an installation is linked to.

        Returns:
            SiteInfo, or None (see last_error()) if dest_dir is not a linked
            installation
        """
        dest = self._resolve_dest(dest_dir)
        if not self.is_installation(dest):
            self._last_error = f"{dest} isn't a Drupal directory"
            return None

        core = first_link_dirname(dest)
        dist = link_basename(dest / SITES_DIR / SITES_ALL)
        profiles = {}
        if self.repository.has_profiles:
            profiles = {
                name: os.path.basename(target.rstrip('/\\'))
                for name, target in current_links(dest / INSTALL_PROFILES_DIR)
            }

        if not core or not (dist or profiles):
            self._last_error = 'Invalid symlinked site'
            return None

        return SiteInfo(destination=str(dest), core=core, dist=dist, profiles=profiles)

    def _resolve_dest(self, dest_dir: Optional[PathLike]) -> Path:
        dest = Path(dest_dir).expanduser() if dest_dir else Path.cwd()
        return dest.resolve() if dest.exists() else dest.absolute()

    def _check_destination(self, dest: Path, force: bool, result: SwitchResult) -> bool:
        """Repository and destination preconditions shared by every switch."""
        if not self.repository.valid:
            result.abort(ErrorKind.INVALID_REPOSITORY, self.repository.error)
            return False
        if os.path.lexists(dest) and not dest.is_dir():
            result.abort(ErrorKind.INVALID_DESTINATION, f"{dest} is not a directory")
            return False
        if not force and not self.is_installation(dest):
            result.abort(ErrorKind.INVALID_DESTINATION, f"Invalid Drupal directory: {dest}")
            return False
        return True

    def _select(
        self,
        catalog: Catalog,
        requested: Optional[str],
        label: str,
        result: SwitchResult
    ) -> Optional[VersionEntry]:
        """
        Resolve the requested version against a catalog.

        Falls back to the chooser when nothing (or an unknown version) was
        requested. Aborts result and returns None when no entry results.
        """
        if requested:
            entry = catalog.get(requested)
            if entry is not None:
                return entry
            logger.warning(f"{requested} is not an available {label}")

        candidates = catalog.names()
        if not candidates:
            result.abort(ErrorKind.NO_CANDIDATE, f"No {label} available in the repository")
            return None
        if self.chooser is None:
            message = f"Invalid {label}: {requested}" if requested else f"No {label} specified"
            result.abort(ErrorKind.NO_CANDIDATE, message)
            return None

        choice = self.chooser(candidates, label)
        if choice is None:
            result.abort(ErrorKind.CANCELLED, f"No {label} chosen, cancelled")
            return None

        entry = catalog.get(choice)
        if entry is None:
            result.abort(ErrorKind.NO_CANDIDATE, f"Invalid {label}: {choice}")
        return entry

    def _ensure_scaffold(self, dest: Path, core_dir: Path, result: SwitchResult) -> None:
        """Create missing installation-local directories and settings template."""
        dirs = [dest / SITES_DIR / SITES_DEFAULT, dest / self.files_dir]
        if not self.repository.has_dists:
            dirs.append(dest / SITES_DIR / SITES_ALL)
        if self.repository.has_profiles:
            dirs.append(dest / INSTALL_PROFILES_DIR)

        for path in dirs:
            if not os.path.lexists(path):
                path.mkdir(parents=True)
                result.dirs_created.append(str(path.relative_to(dest)))

        template = core_dir / self.settings_template
        copy = dest / self.settings_template
        if template.is_file() and not os.path.lexists(copy):
            copy.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(template, copy)
            result.files_copied.append(self.settings_template)

    def _transition(self, result: SwitchResult, state: SwitchState) -> None:
        logger.debug(f"{result.operation} {result.destination}: {result.state.value} -> {state.value}")
        result.state = state

    def _absorb(self, result: SwitchResult, step: SwitchResult) -> None:
        """Fold a sub-operation's outcome into a combined result."""
        result.links_removed.extend(step.links_removed)
        result.links_created.extend(step.links_created)
        result.dirs_created.extend(step.dirs_created)
        result.files_copied.extend(step.files_copied)
        if not step.success and result.state != SwitchState.ABORTED:
            result.abort(step.error_kind, step.error)
            result.aborted_in = step.aborted_in

    def _fail(self, result: SwitchResult) -> SwitchResult:
        self._last_error = result.error or ''
        if result.error_kind == ErrorKind.CANCELLED:
            logger.info(result.error)
        else:
            logger.warning(f"{result.operation} aborted: {result.error}")
        return result

    def _finish(self, result: SwitchResult, dest: Path) -> SwitchResult:
        self._transition(result, SwitchState.DONE)
        self._last_error = ''
        if self.write_manifest:
            self._write_manifest(dest)
        return result

    def _write_manifest(self, dest: Path) -> None:
        """Record what the installation is linked to, for auditing only."""
        from .. import __version__

        profiles = {}
        if self.repository.has_profiles:
            profiles = {
                name: os.path.basename(target.rstrip('/\\'))
                for name, target in current_links(dest / INSTALL_PROFILES_DIR)
            }
        manifest = {
            "updated_at": datetime.now().isoformat(),
            "base": str(self.repository.base),
            "core": first_link_dirname(dest),
            "dist": link_basename(dest / SITES_DIR / SITES_ALL),
            "profiles": profiles,
            "dslm_version": __version__,
        }
        try:
            (dest / MANIFEST_FILENAME).write_text(json.dumps(manifest, indent=2))
        except OSError as e:
            logger.error(f"Failed to write manifest in {dest}: {e}")
