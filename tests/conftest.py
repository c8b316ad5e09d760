"""
Shared fixtures: real repositories and installations built under tmp_path.
"""

import os
from pathlib import Path

import pytest

from dslm.services.repository_service import Repository
from dslm.services.switch_service import SwitchService

CORE_FILES = ['index.php', 'install.php', 'update.php', 'cron.php', 'README.txt']
CORE_DIRS = ['includes', 'modules', 'profiles', 'themes']
SETTINGS_TEMPLATE = "<?php\n// default settings for {core}\n"


def make_core(base: Path, name: str, extra_files=()) -> Path:
    """Create cores/<name> laid out like a Drupal core."""
    core = base / 'cores' / name
    core.mkdir(parents=True)
    for filename in list(CORE_FILES) + list(extra_files):
        (core / filename).write_text(f"{name}:{filename}\n")
    for dirname in CORE_DIRS:
        (core / dirname).mkdir()
        (core / dirname / 'placeholder.txt').write_text(name)
    (core / 'sites' / 'default').mkdir(parents=True)
    (core / 'sites' / 'all').mkdir()
    (core / 'sites' / 'default' / 'default.settings.php').write_text(SETTINGS_TEMPLATE.format(core=name))
    return core


def make_package(base: Path, collection: str, name: str) -> Path:
    """Create dists/<name> or profiles/<name> with a little content."""
    package = base / collection / name
    (package / 'modules').mkdir(parents=True)
    (package / 'README.txt').write_text(name)
    return package


def link_snapshot(directory: Path) -> dict:
    """Map of top-level link name -> stored link target."""
    return {
        name: os.readlink(directory / name)
        for name in sorted(os.listdir(directory))
        if (directory / name).is_symlink()
    }


@pytest.fixture
def repo_base(tmp_path):
    """Repository with cores/ and dists/, plus entries that are not versions."""
    base = tmp_path / 'repo'
    for core in ['drupal-7.32', 'drupal-7.x-dev', 'drupal-6.28']:
        make_core(base, core)
    for dist in ['7.x-3.9', '7.x-3.9-beta1', '6.x-2.0']:
        make_package(base, 'dists', dist)

    (base / 'cores' / 'notes.txt').write_text('not a core')
    (base / 'cores' / 'drupal').mkdir()
    (base / 'dists' / 'latest').mkdir()
    return base


@pytest.fixture
def repository(repo_base):
    return Repository(repo_base)


@pytest.fixture
def service(repository):
    return SwitchService(repository, config={})


@pytest.fixture
def profile_base(tmp_path):
    """Repository with cores/ and profiles/ but no dists/."""
    base = tmp_path / 'profile-repo'
    make_core(base, 'drupal-7.32')
    for profile in ['openscholar-7.x-3.9', 'openscholar-7.x-3.10', 'commons-7.x-3.1']:
        make_package(base, 'profiles', profile)
    return base


@pytest.fixture
def profile_repository(profile_base):
    return Repository(profile_base)


@pytest.fixture
def profile_service(profile_repository):
    return SwitchService(profile_repository, config={})


@pytest.fixture
def site(tmp_path):
    """Path for an installation that does not exist yet."""
    return tmp_path / 'www' / 'site'
