import json

import pytest

from release_kit.manifest import (
    ManifestError,
    load_manifest,
    update_manifest,
    workspaces_disabled,
)


KNOWN = ["@saltcorn/data", "@saltcorn/markup", "@saltcorn/cli"]


def _write(path, data) -> None:
    path.write_text(json.dumps(data, indent=4))


def test_update_manifest_rewrites_known_dependencies_only(tmp_path) -> None:
    _write(
        tmp_path / "package.json",
        {
            "name": "@saltcorn/server",
            "version": "1.0.0",
            "dependencies": {"@saltcorn/data": "1.0.0", "express": "^4.18.2"},
            "devDependencies": {"@saltcorn/markup": "1.0.0", "jest": "^29"},
            "optionalDependencies": {"@saltcorn/cli": "1.0.0"},
        },
    )

    rewritten = update_manifest(str(tmp_path), "2.0.0", KNOWN)

    data = load_manifest(str(tmp_path / "package.json"))
    assert data["version"] == "2.0.0"
    assert data["dependencies"] == {"@saltcorn/data": "2.0.0", "express": "^4.18.2"}
    assert data["devDependencies"] == {"@saltcorn/markup": "2.0.0", "jest": "^29"}
    assert data["optionalDependencies"] == {"@saltcorn/cli": "2.0.0"}
    assert rewritten == KNOWN


def test_update_manifest_is_idempotent(tmp_path) -> None:
    _write(
        tmp_path / "package.json",
        {"name": "x", "version": "0.1.0", "dependencies": {"@saltcorn/data": "0.1.0"}},
    )

    update_manifest(str(tmp_path), "0.2.0", KNOWN)
    first = (tmp_path / "package.json").read_bytes()
    update_manifest(str(tmp_path), "0.2.0", KNOWN)
    second = (tmp_path / "package.json").read_bytes()

    assert first == second
    # 2칸 들여쓰기, 키 순서 유지
    assert first.decode("utf-8").startswith('{\n  "name": "x",\n  "version": "0.2.0"')


def test_manifest_without_dependency_sections_only_changes_version(tmp_path) -> None:
    _write(tmp_path / "package.json", {"name": "plain", "version": "1.0.0", "private": True})

    rewritten = update_manifest(str(tmp_path), "3.0.0", KNOWN)

    assert rewritten == []
    assert load_manifest(str(tmp_path / "package.json")) == {
        "name": "plain",
        "version": "3.0.0",
        "private": True,
    }


def test_malformed_manifest_raises(tmp_path) -> None:
    (tmp_path / "package.json").write_text("{ not json")

    with pytest.raises(ManifestError):
        update_manifest(str(tmp_path), "1.0.0", KNOWN)


def test_missing_manifest_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        update_manifest(str(tmp_path), "1.0.0", KNOWN)


def test_workspaces_disabled_restores_root_manifest(tmp_path) -> None:
    root = tmp_path / "package.json"
    _write(root, {"name": "monorepo", "workspaces": ["packages/*"], "private": True})

    with pytest.raises(RuntimeError):
        with workspaces_disabled(str(root)):
            assert "workspaces" not in load_manifest(str(root))
            raise RuntimeError("npm update failed")

    assert load_manifest(str(root))["workspaces"] == ["packages/*"]


def test_known_dependency_with_empty_or_null_value_is_rewritten(tmp_path) -> None:
    _write(
        tmp_path / "package.json",
        {
            "name": "@saltcorn/server",
            "version": "1.0.0",
            "dependencies": {"@saltcorn/data": "", "left-pad": ""},
            "devDependencies": {"@saltcorn/markup": None},
        },
    )

    rewritten = update_manifest(str(tmp_path), "2.0.0", KNOWN)

    data = load_manifest(str(tmp_path / "package.json"))
    assert data["dependencies"] == {"@saltcorn/data": "2.0.0", "left-pad": ""}
    assert data["devDependencies"] == {"@saltcorn/markup": "2.0.0"}
    assert rewritten == ["@saltcorn/data", "@saltcorn/markup"]
