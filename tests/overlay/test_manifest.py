"""Tests for AndroidManifest.xml synthesis."""
from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from overlaykit.core.exceptions import OverlayIOError
from overlaykit.core.overlay import MANIFEST_FILENAME, ManifestGenerator, PlatformProfile

ANDROID = "{http://schemas.android.com/apk/res/android}"

SAMSUNG_PIE = PlatformProfile(vendor="samsung", sdk_int=28)


def _child_tags(root: ET.Element) -> list[str]:
    return [child.tag for child in root]


def _permissions(root: ET.Element) -> list[str]:
    return [el.get("android:name") for el in root.findall("uses-permission")]


def test_generic_manifest_structure(spec_builder, manifest_config):
    spec = spec_builder().build()
    root = ManifestGenerator(PlatformProfile(), manifest_config).build_tree(spec)

    assert root.tag == "manifest"
    assert root.get("package") == "com.example.overlay.settings"
    assert root.get("xmlns:android") == "http://schemas.android.com/apk/res/android"
    assert _child_tags(root) == ["overlay", "uses-permission", "application"]
    assert root.find("overlay").get("android:targetPackage") == "com.android.settings"
    assert _permissions(root) == ["projekt.substratum.theme.permission.OVERLAY"]

    app = root.find("application")
    assert app.get("android:allowBackup") == "false"
    assert app.get("android:hasCode") == "false"


def test_metadata_keeps_order_and_timestamp_comes_last(spec_builder, manifest_config):
    builder = spec_builder()
    builder.metadata = {"theme_name": "Dusk", "theme_version": "3", "author": "someone"}
    root = ManifestGenerator(PlatformProfile(), manifest_config).build_tree(builder.build())

    entries = [(m.get("android:name"), m.get("android:value")) for m in root.find("application")]
    assert entries == [
        ("theme_name", "Dusk"),
        ("theme_version", "3"),
        ("author", "someone"),
        ("overlaykit.INSTALL_TIMESTAMP", "1700000000000"),
    ]


def test_version_and_label_are_optional(spec_builder, manifest_config):
    gen = ManifestGenerator(PlatformProfile(), manifest_config)
    plain = gen.build_tree(spec_builder().build())
    assert plain.get("android:versionCode") is None
    assert plain.find("application").get("android:label") is None

    builder = spec_builder()
    builder.version_code = 7
    builder.version_name = "1.2"
    builder.label = "Settings accent"
    full = gen.build_tree(builder.build())
    assert full.get("android:versionCode") == "7"
    assert full.get("android:versionName") == "1.2"
    assert full.find("application").get("android:label") == "Settings accent"


def test_samsung_requests_vendor_permission_first(spec_builder, manifest_config):
    root = ManifestGenerator(SAMSUNG_PIE, manifest_config).build_tree(spec_builder().build())

    assert _permissions(root) == [
        "com.samsung.android.permission.SAMSUNG_OVERLAY_COMPONENT",
        "projekt.substratum.theme.permission.OVERLAY",
    ]


@pytest.mark.parametrize("target", ["com.sec.android.app.music", "com.sec.android.app.voicenote"])
def test_samsung_exempt_targets_skip_vendor_permission(spec_builder, manifest_config, target):
    gen = ManifestGenerator(SAMSUNG_PIE, manifest_config)
    root = gen.build_tree(spec_builder(target=target).build())

    assert not gen.needs_vendor_permission(target)
    assert _permissions(root) == ["projekt.substratum.theme.permission.OVERLAY"]


def test_non_samsung_never_requests_vendor_permission(spec_builder, manifest_config):
    gen = ManifestGenerator(PlatformProfile(vendor="generic", sdk_int=30), manifest_config)
    assert not gen.needs_vendor_permission("com.android.settings")


@pytest.mark.parametrize(
    "profile, expected",
    [
        (PlatformProfile(vendor="samsung", sdk_int=29, synergy=True), True),
        (PlatformProfile(vendor="samsung", sdk_int=31, synergy=True), True),
        (PlatformProfile(vendor="samsung", sdk_int=28, synergy=True), False),
        (PlatformProfile(vendor="samsung", sdk_int=30, synergy=False), False),
    ],
)
def test_uses_sdk_only_for_synergy_on_q_and_later(spec_builder, manifest_config, profile, expected):
    root = ManifestGenerator(profile, manifest_config).build_tree(spec_builder().build())

    uses_sdk = root.find("uses-sdk")
    assert (uses_sdk is not None) is expected
    if expected:
        assert uses_sdk.get("android:targetSdkVersion") == str(profile.sdk_int)
        # uses-sdk sits between the overlay element and the permissions.
        assert _child_tags(root)[:2] == ["overlay", "uses-sdk"]


def test_generated_document_parses_with_android_namespace(spec_builder, manifest_config):
    builder = spec_builder()
    builder.metadata = {"theme_name": "Dusk"}
    text = ManifestGenerator(SAMSUNG_PIE, manifest_config).generate(builder.build())

    assert text.startswith('<?xml version="1.0" encoding="utf-8"?>\n')
    root = ET.fromstring(text.encode("utf-8"))
    assert root.find("overlay").get(f"{ANDROID}targetPackage") == "com.android.settings"
    names = [m.get(f"{ANDROID}name") for m in root.iter("meta-data")]
    assert names == ["theme_name", "overlaykit.INSTALL_TIMESTAMP"]


def test_exempt_list_comes_from_config(spec_builder):
    from overlaykit.core.config.domains import ManifestConfig

    cfg = ManifestConfig(config={"manifest": {"vendor_exempt_targets": ["com.android.settings"]}})
    gen = ManifestGenerator(SAMSUNG_PIE, cfg)
    assert not gen.needs_vendor_permission("com.android.settings")
    assert gen.needs_vendor_permission("com.sec.android.app.music")


def test_write_places_manifest_in_work_dir(tmp_path, spec_builder, manifest_config):
    path = ManifestGenerator(PlatformProfile(), manifest_config).write(spec_builder().build(), tmp_path)

    assert path == tmp_path / MANIFEST_FILENAME
    assert "com.example.overlay.settings" in path.read_text(encoding="utf-8")


def test_write_failure_raises_overlay_io_error(tmp_path, spec_builder, manifest_config):
    not_a_dir = tmp_path / "file"
    not_a_dir.write_text("x", encoding="utf-8")

    with pytest.raises(OverlayIOError, match="Failed to write overlay manifest"):
        ManifestGenerator(PlatformProfile(), manifest_config).write(spec_builder().build(), not_a_dir)
