import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'overlaykit' and tests/ importable for helpers.
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from overlaykit.core.backend import reset_backend_slot_for_tests
from overlaykit.core.config import clear_all_caches
from overlaykit.core.config.domains import ManifestConfig, SigningConfig
from overlaykit.core.overlay import BuildTools, OverlaySpecBuilder
from overlaykit.core.stdlib_logging import reset_stdlib_logging_for_tests
from helpers.fake_tools import FakeInvoker


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Ensure config caches, the backend slot and logging are fresh for each test."""
    clear_all_caches()
    reset_backend_slot_for_tests()
    yield
    clear_all_caches()
    reset_backend_slot_for_tests()
    reset_stdlib_logging_for_tests()


@pytest.fixture
def isolated_project_env(tmp_path, monkeypatch):
    """
    Isolated project root for tests.

    Config resolves ``.overlaykit/`` inside ``tmp_path`` and the user config
    directory points at an empty folder, so a developer's own settings never
    leak into a test run.
    """
    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.setenv("OVERLAYKIT_PROJECT_ROOT", str(root))
    monkeypatch.setenv("OVERLAYKIT_paths__user_config_dir", str(tmp_path / "user-config"))
    monkeypatch.delenv("OVERLAYKIT_paths__project_config_dir", raising=False)
    monkeypatch.chdir(root)
    clear_all_caches()
    return root


@pytest.fixture
def write_project_config(isolated_project_env):
    """Write ``<root>/.overlaykit/config/<name>.yaml`` and drop cached config."""
    import yaml

    def _write(name: str, data: dict) -> Path:
        path = isolated_project_env / ".overlaykit" / "config" / f"{name}.yaml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        clear_all_caches()
        return path

    return _write


@pytest.fixture
def fake_invoker() -> FakeInvoker:
    return FakeInvoker()


@pytest.fixture
def build_tools(tmp_path) -> BuildTools:
    framework = tmp_path / "framework-res.apk"
    framework.write_bytes(b"framework")
    return BuildTools(
        aapt="aapt",
        zipalign="zipalign",
        apksigner="apksigner",
        framework_res=str(framework),
    )


@pytest.fixture
def manifest_config() -> ManifestConfig:
    return ManifestConfig(config={})


@pytest.fixture
def signing_config() -> SigningConfig:
    return SigningConfig(config={"signing": {"key": "/keys/overlay.pk8", "cert": "/keys/overlay.x509.pem"}})


@pytest.fixture
def spec_builder(tmp_path):
    """Builder with one existing resource dir and an output dir under tmp_path."""
    res = tmp_path / "res"
    (res / "values").mkdir(parents=True)
    (res / "values" / "colors.xml").write_text("<resources/>", encoding="utf-8")

    def _make(package: str = "com.example.overlay.settings", target: str = "com.android.settings"):
        return OverlaySpecBuilder(
            package,
            target,
            1700000000000,
            out_dir=tmp_path / "out",
        ).add_resource_dir(res)

    return _make
