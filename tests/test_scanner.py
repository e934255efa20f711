"""
Tests for BundleScanner - directory scans and per-bundle resilience.
"""

import pytest
from pathlib import Path
from unittest.mock import patch

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from catalog.scanner import BundleScanner
from common.exceptions import BundleNotFound, CatalogDirectoryError
from conftest import SAMPLE_INFO, mark_encrypted


class TestBundleScanner:
    """Tests for BundleScanner."""

    def test_empty_directory(self, bundle_dir):
        assert BundleScanner(bundle_dir).scan() == []

    def test_scan_sorted_by_file_name(self, make_ipa):
        make_ipa("com.acme.Zebra.ipa")
        make_ipa("com.acme.Alpha.ipa")
        make_ipa("com.acme.Middle.ipa")

        names = [app.file_name for app in BundleScanner(make_ipa("com.acme.Beta.ipa").parent).scan()]
        assert names == [
            "com.acme.Alpha.ipa",
            "com.acme.Beta.ipa",
            "com.acme.Middle.ipa",
            "com.acme.Zebra.ipa",
        ]

    def test_corrupt_archive_skipped(self, make_ipa, corrupt_ipa, caplog):
        make_ipa("com.acme.One.ipa")
        make_ipa("com.acme.Two.ipa", info=None)

        apps = BundleScanner(corrupt_ipa.parent).scan()

        assert [app.file_name for app in apps] == ["com.acme.One.ipa", "com.acme.Two.ipa"]
        assert "com.acme.Broken.ipa" in caplog.text

    @pytest.mark.parametrize("entry", ["Payload/Widget.app/Info.plist", "iTunesArtwork"])
    def test_encrypted_entry_skipped(self, make_ipa, entry, caplog):
        make_ipa("com.acme.Good.ipa")
        locked = mark_encrypted(make_ipa("com.acme.Locked.ipa"), entry)

        apps = BundleScanner(locked.parent).scan()

        assert [app.file_name for app in apps] == ["com.acme.Good.ipa"]
        assert "com.acme.Locked.ipa" in caplog.text

    def test_unusual_versions_listed(self, make_ipa, bundle_dir):
        make_ipa("com.acme.Good.ipa")
        make_ipa("com.acme.Nul.ipa", info=dict(SAMPLE_INFO, CFBundleVersion="1\x002"),
                 binary_plist=True)
        make_ipa("com.acme.Long.ipa", info=dict(SAMPLE_INFO, CFBundleVersion="7" * 400))

        names = [app.file_name for app in BundleScanner(bundle_dir).scan()]
        assert names == ["com.acme.Good.ipa", "com.acme.Long.ipa", "com.acme.Nul.ipa"]

    def test_only_bundle_extensions(self, make_ipa, bundle_dir):
        make_ipa("com.acme.Widget.ipa")
        (bundle_dir / "notes.txt").write_text("hello")
        (bundle_dir / "subdir.ipa").mkdir()

        apps = BundleScanner(bundle_dir).scan()
        assert [app.file_name for app in apps] == ["com.acme.Widget.ipa"]

    def test_icon_cache_files_not_listed(self, make_ipa, bundle_dir):
        make_ipa("com.acme.Widget.ipa")
        BundleScanner(bundle_dir).scan()
        assert (bundle_dir / "com.acme.Widget.ipa.42.png").exists()

        apps = BundleScanner(bundle_dir).scan()
        assert len(apps) == 1

    def test_extension_match_ignores_case(self, make_ipa, bundle_dir):
        make_ipa("com.acme.Upper.IPA")
        assert len(BundleScanner(bundle_dir).scan()) == 1

    def test_custom_extensions(self, make_ipa, bundle_dir):
        make_ipa("com.acme.Widget.ipa")
        make_ipa("com.acme.Other.zip")
        apps = BundleScanner(bundle_dir, extensions=[".zip"]).scan()
        assert [app.file_name for app in apps] == ["com.acme.Other.zip"]

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(CatalogDirectoryError):
            BundleScanner(tmp_path / "nope").scan()

    def test_unstatable_entry_skipped(self, make_ipa, bundle_dir):
        make_ipa("com.acme.Widget.ipa")
        with patch.object(Path, "is_file", side_effect=OSError("gone")):
            assert BundleScanner(bundle_dir).candidates() == []

    def test_find(self, make_ipa, bundle_dir):
        make_ipa("com.acme.Widget.ipa")
        app = BundleScanner(bundle_dir).find("com.acme.Widget.ipa")
        assert app.display_name == "Widget"

    def test_find_missing(self, bundle_dir):
        with pytest.raises(BundleNotFound):
            BundleScanner(bundle_dir).find("com.acme.Missing.ipa")

    def test_find_rejects_path_components(self, make_ipa, bundle_dir):
        make_ipa("com.acme.Widget.ipa")
        with pytest.raises(BundleNotFound):
            BundleScanner(bundle_dir).find("../ipas/com.acme.Widget.ipa")

    def test_rescans_from_scratch(self, make_ipa, bundle_dir):
        scanner = BundleScanner(bundle_dir)
        make_ipa("com.acme.One.ipa")
        first = scanner.scan()
        make_ipa("com.acme.Two.ipa")
        second = scanner.scan()

        assert len(first) == 1
        assert len(second) == 2
        assert first[0] is not second[0]
