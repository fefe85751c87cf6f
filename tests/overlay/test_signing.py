"""Tests for the apksigner wrapper."""
from __future__ import annotations

from pathlib import Path

from overlaykit.core.config.domains import SigningConfig
from overlaykit.core.overlay import ApkSigner


def _aligned(tmp_path) -> Path:
    path = tmp_path / "app-unsigned-aligned.apk"
    path.write_bytes(b"aligned")
    return path


def test_key_and_cert_arguments(tmp_path, build_tools, fake_invoker, signing_config):
    signer = ApkSigner(build_tools, fake_invoker, signing_config)

    args = signer.build_args(Path("in.apk"), Path("out.apk.part"))

    assert args == [
        "sign",
        "--key", "/keys/overlay.pk8",
        "--cert", "/keys/overlay.x509.pem",
        "--out", "out.apk.part",
        "in.apk",
    ]


def test_keystore_arguments(build_tools, fake_invoker):
    cfg = SigningConfig(
        config={"signing": {"keystore": "/keys/overlay.jks", "key_alias": "overlay", "keystore_password": "secret"}}
    )

    args = ApkSigner(build_tools, fake_invoker, cfg).build_args(Path("in.apk"), Path("out.apk.part"))

    assert args == [
        "sign",
        "--ks", "/keys/overlay.jks",
        "--ks-key-alias", "overlay",
        "--ks-pass", "pass:secret",
        "--out", "out.apk.part",
        "in.apk",
    ]


def test_sign_publishes_final_file_without_leftovers(tmp_path, build_tools, fake_invoker, signing_config):
    src = _aligned(tmp_path)
    dest = tmp_path / "app.apk"

    assert ApkSigner(build_tools, fake_invoker, signing_config).sign(src, dest)

    assert dest.read_bytes() == b"apksigner output"
    assert not (tmp_path / "app.apk.part").exists()
    assert fake_invoker.calls_for("apksigner")[0][-3:] == ["--out", str(tmp_path / "app.apk.part"), str(src)]


def test_failed_signing_leaves_previous_file_untouched(tmp_path, build_tools, fake_invoker, signing_config):
    src = _aligned(tmp_path)
    dest = tmp_path / "app.apk"
    dest.write_bytes(b"previous build")
    fake_invoker.script_stderr("apksigner", ["Failed to load signer"])

    assert not ApkSigner(build_tools, fake_invoker, signing_config).sign(src, dest)

    assert dest.read_bytes() == b"previous build"
    assert not (tmp_path / "app.apk.part").exists()


def test_unconfigured_signer_refuses_without_running_tool(tmp_path, build_tools, fake_invoker):
    signer = ApkSigner(build_tools, fake_invoker, SigningConfig(config={"signing": {}}))

    assert not signer.sign(_aligned(tmp_path), tmp_path / "app.apk")
    assert fake_invoker.calls == []
