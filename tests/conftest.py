"""
Pytest configuration and shared fixtures for app catalog tests.

Provides builders for bundle archives with and without metadata and artwork.
"""

import plistlib
import zipfile
import pytest
from pathlib import Path
from typing import Callable, Dict, Optional
import sys

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


ARTWORK_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00fake-artwork" * 64

SAMPLE_INFO = {
    "CFBundleExecutable": "Widget",
    "CFBundleIdentifier": "com.acme.widget",
    "CFBundleVersion": "42",
    "CFBundleShortVersionString": "1.4.2",
    "CFBundleName": "Widget",
}


def build_ipa(
    path: Path,
    info: Optional[Dict] = None,
    artwork: Optional[bytes] = ARTWORK_BYTES,
    info_bytes: Optional[bytes] = None,
    binary_plist: bool = False,
    extra_entries: Optional[Dict[str, bytes]] = None,
) -> Path:
    """Write a bundle archive laid out like an .ipa file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("Payload/Widget.app/", b"")
        for name, data in (extra_entries or {}).items():
            zf.writestr(name, data)
        if info_bytes is not None:
            zf.writestr("Payload/Widget.app/Info.plist", info_bytes)
        elif info is not None:
            fmt = plistlib.FMT_BINARY if binary_plist else plistlib.FMT_XML
            zf.writestr("Payload/Widget.app/Info.plist", plistlib.dumps(info, fmt=fmt))
        if artwork is not None:
            zf.writestr("iTunesArtwork", artwork)
    return path


def mark_encrypted(path: Path, entry_name: str) -> Path:
    """Set the encryption flag on one entry's central directory record."""
    data = bytearray(path.read_bytes())
    target = entry_name.encode("utf-8")
    position = data.find(b"PK\x01\x02")
    while position != -1:
        name_length = int.from_bytes(data[position + 28:position + 30], "little")
        if data[position + 46:position + 46 + name_length] == target:
            data[position + 8] |= 0x01
            path.write_bytes(bytes(data))
            return path
        position = data.find(b"PK\x01\x02", position + 4)
    raise ValueError(f"{entry_name} not in {path}")


# ============ Bundle Fixtures ============

@pytest.fixture
def bundle_dir(tmp_path: Path) -> Path:
    """Provide an empty catalog directory."""
    directory = tmp_path / "ipas"
    directory.mkdir()
    return directory


@pytest.fixture
def make_ipa(bundle_dir: Path) -> Callable[..., Path]:
    """Factory building archives inside bundle_dir."""
    def factory(name: str = "com.acme.Widget.ipa", **kwargs) -> Path:
        kwargs.setdefault("info", dict(SAMPLE_INFO))
        return build_ipa(bundle_dir / name, **kwargs)
    return factory


@pytest.fixture
def full_ipa(make_ipa) -> Path:
    """Archive with metadata and artwork."""
    return make_ipa()


@pytest.fixture
def corrupt_ipa(bundle_dir: Path) -> Path:
    """A file with a bundle extension that is not a zip archive."""
    path = bundle_dir / "com.acme.Broken.ipa"
    path.write_bytes(b"this is not a zip archive")
    return path


def leftover_scratch(directory: Path):
    """Scratch directories remaining in directory."""
    return [p for p in directory.iterdir() if "_extracted" in p.name]


# ============ Marker Configuration ============

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "unit: fast unit tests with no external deps"
    )
    config.addinivalue_line(
        "markers", "integration: tests that start a real HTTP server"
    )
