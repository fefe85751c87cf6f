"""Tests for domain configuration accessors and preferences."""
from __future__ import annotations

from pathlib import Path

from overlaykit.core.config.domains import (
    LoggingConfig,
    ManifestConfig,
    PathsConfig,
    SigningConfig,
    TimeoutsConfig,
    ToolsConfig,
)
from overlaykit.core.preferences import FORCE_NEW_COMPILER, ConfigPreferences, DictPreferences


def test_domain_configs_read_layered_config(write_project_config, tmp_path):
    write_project_config(
        "overrides",
        {
            "tools": {"build_tools_dir": "/opt/sdk/build-tools/34.0.0"},
            "paths": {"overlay_output_dir": str(tmp_path / "out"), "work_root": str(tmp_path / "work")},
            "logging": {"level": "DEBUG"},
        },
    )

    assert ToolsConfig().build_tools_dir == "/opt/sdk/build-tools/34.0.0"
    assert PathsConfig().overlay_output_dir == tmp_path / "out"
    assert PathsConfig().work_root == tmp_path / "work"
    assert LoggingConfig().level == "DEBUG"
    assert LoggingConfig().file is None


def test_explicit_config_bypasses_loading():
    cfg = ToolsConfig(config={"tools": {"aapt": "aapt2"}})

    assert cfg.aapt == "aapt2"
    assert cfg.zipalign == "zipalign"


def test_timeout_zero_disables():
    assert TimeoutsConfig(config={"timeouts": {"tool_seconds": 0}}).tool_seconds is None
    assert TimeoutsConfig(config={"timeouts": {"tool_seconds": None}}).tool_seconds is None
    assert TimeoutsConfig(config={"timeouts": {"tool_seconds": 12}}).tool_seconds == 12.0


def test_signing_is_configured():
    assert not SigningConfig(config={"signing": {"key": "k.pk8"}}).is_configured
    assert SigningConfig(config={"signing": {"key": "k.pk8", "cert": "c.pem"}}).is_configured
    assert SigningConfig(config={"signing": {"keystore": "ks.jks"}}).is_configured
    assert not SigningConfig(config={"signing": {"keystore": "  "}}).is_configured


def test_manifest_defaults():
    cfg = ManifestConfig(config={})

    assert cfg.android_namespace == "http://schemas.android.com/apk/res/android"
    assert cfg.vendor_exempt_targets == ("com.sec.android.app.music", "com.sec.android.app.voicenote")


def test_logging_file_expands_user(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))

    cfg = LoggingConfig(config={"logging": {"file": "~/logs/overlaykit.log", "level": "info"}})

    assert cfg.file == tmp_path / "logs" / "overlaykit.log"
    assert cfg.level == "INFO"


def test_config_preferences(write_project_config, monkeypatch):
    assert ConfigPreferences().get_boolean(FORCE_NEW_COMPILER) is False

    monkeypatch.setenv("OVERLAYKIT_preferences__force_new_compiler", "true")

    assert ConfigPreferences().get_boolean(FORCE_NEW_COMPILER) is True


def test_dict_preferences():
    prefs = DictPreferences()
    assert prefs.get_boolean("missing", default=True) is True

    prefs.set(FORCE_NEW_COMPILER, "yes")

    assert prefs.get_boolean(FORCE_NEW_COMPILER) is True
