from __future__ import annotations

import pytest

from overlaykit.core.exceptions import (
    OverlayIOError,
    OverlayKitError,
    OverlaySpecError,
    ToolExecutionError,
    ToolNotFoundError,
)
from overlaykit.core.overlay import Failure, Success


def test_error_payload_includes_context():
    err = ToolNotFoundError("Tool not found: aapt", argv=["aapt", "p"])

    assert err.to_json_error() == {
        "message": "Tool not found: aapt",
        "code": "ToolNotFoundError",
        "context": {"argv": ["aapt", "p"]},
    }


@pytest.mark.parametrize(
    "exc, builtin",
    [
        (OverlaySpecError("bad"), ValueError),
        (OverlayIOError("disk"), OSError),
        (ToolExecutionError("boom"), RuntimeError),
    ],
)
def test_errors_keep_builtin_bases(exc, builtin):
    assert isinstance(exc, OverlayKitError)
    assert isinstance(exc, builtin)


def test_result_variants():
    assert Success("/out/app.apk").ok
    assert not Failure("nope").ok
    assert Failure("nope") != Success("nope")
