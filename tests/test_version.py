"""
Tests for version parsing and ordering.
"""

import random

import pytest

from dslm.domain.version import (
    Bucket,
    PackageKind,
    VersionEntry,
    compare_versions,
    extract_major,
    is_prerelease,
    normalize_version,
    parse_version_entry,
    sort_entries,
)


class TestParseCore:
    """Tests for core name parsing."""

    @pytest.mark.parametrize("name,logical,version", [
        ("drupal-7.32", "drupal", "7.32"),
        ("drupal-7.x-dev", "drupal", "7.x-dev"),
        ("drupal-8.0.0-rc2", "drupal", "8.0.0-rc2"),
        ("pressflow-6.22-beta1", "pressflow", "6.22-beta1"),
        ("my-fork-7.10", "my-fork", "7.10"),
    ])
    def test_valid_core_names(self, name, logical, version):
        """Test that core names split into logical name and version."""
        entry = parse_version_entry(name, PackageKind.CORE)

        assert entry is not None
        assert entry.kind == PackageKind.CORE
        assert entry.raw == name
        assert entry.name == logical
        assert entry.version == version

    @pytest.mark.parametrize("name", [
        "drupal",
        "drupal-",
        "drupal-latest",
        "drupal-x.1",
        "-7.32",
        "notes.txt",
        "README",
        "",
    ])
    def test_invalid_core_names(self, name):
        """Test that names without a dash-delimited version are rejected."""
        assert parse_version_entry(name, PackageKind.CORE) is None

    def test_core_major(self):
        """Test major version extraction for cores."""
        assert parse_version_entry("drupal-7.32", PackageKind.CORE).major == "7"
        assert parse_version_entry("drupal-10.1.2", PackageKind.CORE).major == "10"

    def test_prerelease_flag(self):
        """Test pre-release detection on core tokens."""
        assert parse_version_entry("drupal-7.x-dev", PackageKind.CORE).prerelease is True
        assert parse_version_entry("drupal-8.0.0-RC2", PackageKind.CORE).prerelease is True
        assert parse_version_entry("drupal-7.32", PackageKind.CORE).prerelease is False


class TestParseDistAndProfile:
    """Tests for distribution and profile name parsing."""

    def test_distribution(self):
        """Test parsing a release distribution."""
        entry = parse_version_entry("7.x-3.9", PackageKind.DISTRIBUTION)

        assert entry.kind == PackageKind.DISTRIBUTION
        assert entry.version == "7.x-3.9"
        assert entry.major == "7"
        assert entry.name == ""
        assert entry.bucket == Bucket.RELEASE

    def test_distribution_prerelease(self):
        """Test parsing a pre-release distribution."""
        entry = parse_version_entry("7.x-3.9-beta1", PackageKind.DISTRIBUTION)

        assert entry.prerelease is True
        assert entry.bucket == Bucket.DEV

    @pytest.mark.parametrize("name", ["drupal-7.32", "7.3", "7.x-", "x.x-3.9", "latest"])
    def test_invalid_distribution(self, name):
        """Test names that are not distributions."""
        assert parse_version_entry(name, PackageKind.DISTRIBUTION) is None

    def test_profile(self):
        """Test that profiles capture machine name and version separately."""
        entry = parse_version_entry("openscholar-7.x-3.9", PackageKind.PROFILE)

        assert entry.kind == PackageKind.PROFILE
        assert entry.name == "openscholar"
        assert entry.version == "7.x-3.9"
        assert entry.major == "7"

    @pytest.mark.parametrize("name", ["openscholar", "openscholar-3.9", "7.x-3.9", "open-scholar-7.x-3.9"])
    def test_invalid_profile(self, name):
        """Test names that are not profiles."""
        assert parse_version_entry(name, PackageKind.PROFILE) is None

    def test_to_dict(self):
        """Test serialization for JSONL output."""
        entry = parse_version_entry("openscholar-7.x-3.9", PackageKind.PROFILE)

        assert entry.to_dict() == {
            'name': 'openscholar-7.x-3.9',
            'logical_name': 'openscholar',
            'version': '7.x-3.9',
            'kind': 'profile',
            'major': '7',
            'prerelease': False,
        }


class TestHelpers:
    """Tests for small version helpers."""

    @pytest.mark.parametrize("text,major", [
        ("drupal-7.32", "7"),
        ("7.x-3.9", "7"),
        ("8", "8"),
        ("pressflow6-6.22", "6"),
        ("drupal", None),
        ("", None),
    ])
    def test_extract_major(self, text, major):
        assert extract_major(text) == major

    def test_is_prerelease_vocabulary(self):
        """Test the pre-release vocabulary, anchored at the end."""
        for token in ["7.x-dev", "3.9-alpha2", "3.9-beta1", "3.9-rc1", "3.9-pl3", "3.9-BETA"]:
            assert is_prerelease(token), token
        for token in ["7.32", "7.x-3.9", "3.9-beta1.1"]:
            assert not is_prerelease(token), token

    def test_normalize_only_packages(self):
        """Test that only dist/profile tokens collapse '.x-'."""
        assert normalize_version("7.x-3.9", PackageKind.DISTRIBUTION) == "7.3.9"
        assert normalize_version("7.x-dev", PackageKind.CORE) == "7.x-dev"


class TestCompareVersions:
    """Tests for version precedence."""

    def test_numeric_precedence(self):
        """Test 7.9 < 7.10 < 7.32."""
        assert compare_versions("7.9", "7.10") == -1
        assert compare_versions("7.10", "7.32") == -1
        assert compare_versions("7.32", "7.9") == 1

    def test_prerelease_below_release(self):
        """Test that a pre-release orders below its release."""
        assert compare_versions("7.32-beta1", "7.32") == -1
        assert compare_versions("3.9-beta2", "3.9") == -1
        assert compare_versions("3.9-rc1", "3.9-beta2") == 1
        assert compare_versions("3.9-alpha1", "3.9-beta1") == -1
        assert compare_versions("3.9-dev", "3.9-alpha1") == -1

    def test_patch_level_above_release(self):
        """Test that pl sorts after the plain release."""
        assert compare_versions("3.9-pl1", "3.9") == 1

    def test_dev_branch_below_releases(self):
        """Test that 7.x-dev orders below numbered 7 releases."""
        assert compare_versions("7.x-dev", "7.32") == -1
        assert compare_versions("7.x-dev", "6.28") == 1

    def test_equal(self):
        assert compare_versions("7.32", "7.32") == 0

    def test_distribution_tokens(self):
        """Test '.x-' normalization for distributions."""
        kind = PackageKind.DISTRIBUTION
        assert compare_versions("7.x-3.9", "7.x-3.10", kind) == -1
        assert compare_versions("7.x-3.9-beta1", "7.x-3.9", kind) == -1
        assert compare_versions("6.x-2.0", "7.x-1.0", kind) == -1


class TestSortEntries:
    """Tests for sorting entries."""

    def _entries(self, names, kind=PackageKind.CORE):
        return [parse_version_entry(name, kind) for name in names]

    def test_sort_is_idempotent(self):
        """Test that sorting a sorted list yields the same list."""
        names = ["drupal-7.32", "drupal-6.28", "drupal-7.9", "drupal-7.32-beta1", "drupal-7.10"]
        entries = self._entries(names)
        random.Random(7).shuffle(entries)

        once = sort_entries(entries)
        twice = sort_entries(once)

        assert [e.raw for e in once] == [
            "drupal-6.28", "drupal-7.9", "drupal-7.10", "drupal-7.32-beta1", "drupal-7.32"
        ]
        assert once == twice

    def test_ties_keep_input_order(self):
        """Test that equal version tokens keep their relative order."""
        entries = self._entries(["pressflow-7.32", "drupal-7.32", "acquia-7.32"])

        assert [e.raw for e in sort_entries(entries)] == ["pressflow-7.32", "drupal-7.32", "acquia-7.32"]

    def test_entries_are_immutable(self):
        """Test that entries are frozen value objects."""
        entry = parse_version_entry("drupal-7.32", PackageKind.CORE)

        with pytest.raises(AttributeError):
            entry.version = "7.33"
        assert isinstance(entry, VersionEntry)
