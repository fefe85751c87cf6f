from __future__ import annotations

from overlaykit.core.utils.merge import deep_merge, merge_arrays


def test_deep_merge_is_recursive_and_pure():
    base = {"tools": {"aapt": "aapt", "zipalign": "zipalign"}, "n": 1}
    override = {"tools": {"aapt": "aapt2"}}

    merged = deep_merge(base, override)

    assert merged == {"tools": {"aapt": "aapt2", "zipalign": "zipalign"}, "n": 1}
    assert base["tools"]["aapt"] == "aapt"


def test_merge_arrays_modes():
    assert merge_arrays(["a"], ["b"]) == ["b"]
    assert merge_arrays(["a"], ["+", "b"]) == ["a", "b"]
    assert merge_arrays(["a"], ["="]) == []
