"""End-to-end tests for OverlayPipeline with a fake toolchain."""
from __future__ import annotations

from pathlib import Path

import pytest

from overlaykit.core.exceptions import PipelineStateError
from overlaykit.core.overlay import ApkSigner, Failure, OverlayPipeline, PlatformProfile, Success
from overlaykit.core.overlay.compile import ERR_NO_RESOURCES, LEGACY_MARKER
from overlaykit.core.overlay.pipeline import ERR_WORK_DIR
from overlaykit.core.overlay.postprocess import ERR_SIGN
from overlaykit.core.overlay.tools import BuildTools
from overlaykit.core.preferences import DictPreferences
from overlaykit.core.utils.subprocess import SubprocessToolInvoker


@pytest.fixture
def work_root(tmp_path) -> Path:
    return tmp_path / "work"


@pytest.fixture
def make_pipeline(build_tools, fake_invoker, manifest_config, signing_config, work_root):
    def _make(spec, **overrides):
        kwargs = dict(
            tools=build_tools,
            invoker=fake_invoker,
            preferences=DictPreferences(),
            profile=PlatformProfile(),
            manifest_config=manifest_config,
            signer=ApkSigner(build_tools, fake_invoker, signing_config),
            work_root=work_root,
        )
        kwargs.update(overrides)
        return OverlayPipeline(spec, **kwargs)

    return _make


def test_successful_build_publishes_only_the_signed_package(make_pipeline, fake_invoker, spec_builder, work_root):
    spec = spec_builder().build()

    result = make_pipeline(spec).exec()

    assert result == Success(str(spec.signed_path))
    assert Path(result.path).is_file()
    assert sorted(p.name for p in Path(spec.out_dir).iterdir()) == ["com.example.overlay.settings.apk"]
    assert [exe for exe, _ in fake_invoker.calls] == ["aapt", "zipalign", "apksigner"]
    assert list(work_root.iterdir()) == []


def test_compiler_sees_generated_manifest(make_pipeline, fake_invoker, spec_builder):
    make_pipeline(spec_builder().build()).exec()

    (manifest,) = fake_invoker.manifests
    assert 'android:targetPackage="com.android.settings"' in manifest
    assert "overlaykit.INSTALL_TIMESTAMP" in manifest


def test_work_dir_is_removed_on_failure(make_pipeline, fake_invoker, spec_builder, work_root):
    fake_invoker.script_stderr("aapt", ["error: something broke"])
    pipeline = make_pipeline(spec_builder().build())

    result = pipeline.exec()

    assert result == Failure("error: something broke")
    assert pipeline.work_dir is not None
    assert not pipeline.work_dir.exists()
    assert list(work_root.iterdir()) == []


def test_legacy_retry_end_to_end(make_pipeline, fake_invoker, spec_builder):
    fake_invoker.script_stderr("aapt", [f"W: {LEGACY_MARKER}"], [])

    result = make_pipeline(spec_builder().build()).exec()

    assert result.ok
    assert len(fake_invoker.calls_for("aapt")) == 2


def test_empty_resources_fail_with_no_subprocess(tmp_path, make_pipeline, fake_invoker):
    from overlaykit.core.overlay import OverlaySpecBuilder

    spec = OverlaySpecBuilder("com.example.o", "com.android.settings", out_dir=tmp_path / "out").build()

    result = make_pipeline(spec).exec()

    assert result == Failure(ERR_NO_RESOURCES)
    assert fake_invoker.calls == []


def test_missing_tool_becomes_failure(make_pipeline, fake_invoker, spec_builder, work_root):
    fake_invoker.missing.add("zipalign")
    spec = spec_builder().build()

    result = make_pipeline(spec).exec()

    assert isinstance(result, Failure)
    assert "zipalign" in result.message
    assert not spec.unsigned_path.exists()
    assert list(work_root.iterdir()) == []


def test_exec_runs_only_once(make_pipeline, spec_builder):
    pipeline = make_pipeline(spec_builder().build())
    pipeline.exec()

    with pytest.raises(PipelineStateError):
        pipeline.exec()


def test_unusable_work_root_is_a_failure(tmp_path, make_pipeline, fake_invoker, spec_builder):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    result = make_pipeline(spec_builder().build(), work_root=blocker).exec()

    assert result == Failure(ERR_WORK_DIR)
    assert fake_invoker.calls == []


def test_independent_pipelines_use_distinct_work_dirs(make_pipeline, spec_builder):
    first = make_pipeline(spec_builder("com.example.one").build())
    second = make_pipeline(spec_builder("com.example.two").build())

    assert first.exec().ok
    assert second.exec().ok
    assert first.work_dir != second.work_dir


@pytest.mark.parametrize("broken", ["under_a_file", "garbage_bytes"])
def test_unrunnable_compiler_becomes_failure(tmp_path, make_pipeline, spec_builder, work_root, broken):
    if broken == "under_a_file":
        blocker = tmp_path / "sdk"
        blocker.write_text("not a directory", encoding="utf-8")
        aapt = blocker / "aapt"
    else:
        aapt = tmp_path / "aapt"
        aapt.write_bytes(b"\x00\x01\x02 not a program")
        aapt.chmod(0o755)
    tools = BuildTools(aapt=str(aapt), framework_res=str(tmp_path / "framework-res.apk"))
    invoker = SubprocessToolInvoker(use_config_timeout=False)
    spec = spec_builder().build()

    result = make_pipeline(spec, tools=tools, invoker=invoker).exec()

    assert isinstance(result, Failure)
    assert str(aapt) in result.message
    assert list(work_root.iterdir()) == []


def test_unpublishable_destination_becomes_sign_failure(make_pipeline, fake_invoker, spec_builder):
    spec = spec_builder().build()
    Path(spec.signed_path).mkdir(parents=True)

    result = make_pipeline(spec).exec()

    assert result == Failure(ERR_SIGN)
    assert [exe for exe, _ in fake_invoker.calls] == ["aapt", "zipalign", "apksigner"]
    assert sorted(p.name for p in Path(spec.out_dir).iterdir()) == [Path(spec.signed_path).name]
