"""
Tests for the Catalog domain object.
"""

from dslm.domain.catalog import Catalog
from dslm.domain.version import Bucket, PackageKind


CORE_NAMES = ["drupal-7.x-dev", "notes.txt", "drupal-7.32", "drupal", "drupal-6.28", "drupal-7.9"]


class TestCatalogFromNames:
    """Tests for building catalogs from directory listings."""

    def test_invalid_names_are_dropped(self):
        """Test that entries which fail to parse are silently excluded."""
        catalog = Catalog.from_names(CORE_NAMES, PackageKind.CORE)

        assert len(catalog) == 4
        assert "notes.txt" not in catalog
        assert "drupal" not in catalog

    def test_entries_are_ordered(self):
        """Test ordering lowest version first."""
        catalog = Catalog.from_names(CORE_NAMES, PackageKind.CORE)

        assert catalog.names() == ["drupal-6.28", "drupal-7.x-dev", "drupal-7.9", "drupal-7.32"]

    def test_buckets(self):
        """Test release and dev buckets."""
        catalog = Catalog.from_names(CORE_NAMES, PackageKind.CORE)

        assert catalog.names(Bucket.RELEASE) == ["drupal-6.28", "drupal-7.9", "drupal-7.32"]
        assert catalog.names(Bucket.DEV) == ["drupal-7.x-dev"]
        assert [e.raw for e in catalog.release] == catalog.names(Bucket.RELEASE)
        assert [e.raw for e in catalog.dev] == ["drupal-7.x-dev"]

    def test_empty(self):
        catalog = Catalog.from_names([], PackageKind.DISTRIBUTION)

        assert len(catalog) == 0
        assert catalog.names() == []


class TestCatalogQueries:
    """Tests for catalog lookups."""

    def test_latest_per_bucket(self):
        """Test latest release and latest dev."""
        catalog = Catalog.from_names(["drupal-7.32", "drupal-7.x-dev"], PackageKind.CORE)

        assert catalog.latest(Bucket.RELEASE).raw == "drupal-7.32"
        assert catalog.latest(Bucket.DEV).raw == "drupal-7.x-dev"
        assert catalog.latest().raw == "drupal-7.32"

    def test_latest_of_empty_bucket_is_none(self):
        """Test that an empty bucket has no latest entry."""
        catalog = Catalog.from_names(["drupal-7.32"], PackageKind.CORE)

        assert catalog.latest(Bucket.DEV) is None
        assert Catalog.empty(PackageKind.CORE).latest() is None

    def test_get_and_contains(self):
        catalog = Catalog.from_names(["7.x-3.9", "7.x-3.9-beta1"], PackageKind.DISTRIBUTION)

        assert catalog.get("7.x-3.9").prerelease is False
        assert catalog.get("7.x-4.0") is None
        assert "7.x-3.9-beta1" in catalog

    def test_filter_major(self):
        """Test restricting a catalog to one major version."""
        catalog = Catalog.from_names(["6.x-2.0", "7.x-3.9", "7.x-3.10"], PackageKind.DISTRIBUTION)

        assert catalog.filter_major("7").names() == ["7.x-3.9", "7.x-3.10"]
        assert catalog.filter_major("8").names() == []
        assert catalog.filter_major(None) is catalog

    def test_profiles_grouped_by_name(self):
        """Test grouping profiles by logical name."""
        catalog = Catalog.from_names(
            ["openscholar-7.x-3.10", "commons-7.x-3.1", "openscholar-7.x-3.9"],
            PackageKind.PROFILE
        )

        grouped = catalog.by_name()

        assert sorted(grouped) == ["commons", "openscholar"]
        assert grouped["openscholar"].names() == ["openscholar-7.x-3.9", "openscholar-7.x-3.10"]
        assert catalog.filter_name("commons").names() == ["commons-7.x-3.1"]

    def test_find_by_name_and_version(self):
        catalog = Catalog.from_names(["openscholar-7.x-3.9"], PackageKind.PROFILE)

        assert catalog.find("openscholar", "7.x-3.9").raw == "openscholar-7.x-3.9"
        assert catalog.find("openscholar", "7.x-3.10") is None
