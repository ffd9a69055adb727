from typing import Any, Dict

import pytest
from click.testing import CliRunner

from release_kit import cli


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    # CliRunner 의 임시 stdout 에 로깅 핸들러가 묶이지 않도록 한다.
    monkeypatch.setattr(cli, "setup_logging", lambda verbosity: None)


def test_plan_prints_registry(tmp_path) -> None:
    result = CliRunner().invoke(cli.main, ["-C", str(tmp_path), "plan", "3.1.0", "-t", "beta"])

    assert result.exit_code == 0, result.output
    assert "# Release plan" in result.output
    assert "- @saltcorn/random-tests (saltcorn-random-tests): VERSION ONLY" in result.output
    assert "[next, beta]" in result.output


def test_release_passes_arguments_and_prints_hints(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    seen: Dict[str, Any] = {}

    def fake_run_release(cfg, version, extra_tag=None, confirm=None):
        seen.update(cfg=cfg, version=version, extra_tag=extra_tag, confirm=confirm)
        return "# Release summary", False

    monkeypatch.setattr(cli, "run_release", fake_run_release)

    result = CliRunner().invoke(
        cli.main, ["-C", str(tmp_path), "release", "3.1.0", "-t", "beta", "--yes", "--strict"]
    )

    assert result.exit_code == 0, result.output
    assert seen["version"] == "3.1.0"
    assert seen["extra_tag"] == "beta"
    assert seen["confirm"] is None
    assert seen["cfg"].strict is True
    assert "rm -rf packages/saltcorn-cli/node_modules" in result.output


def test_release_exits_non_zero_on_failures(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "run_release", lambda *a, **kw: ("# Release summary", True))

    result = CliRunner().invoke(cli.main, ["-C", str(tmp_path), "release", "3.1.0", "-y"])

    assert result.exit_code == 1
    assert "# Release summary" in result.output
    assert "Now run" not in result.output


def test_release_without_yes_uses_prompt(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run_release(cfg, version, extra_tag=None, confirm=None):
        assert confirm is not None
        return ("ok" if confirm("go?") else "declined"), False

    monkeypatch.setattr(cli, "run_release", fake_run_release)

    result = CliRunner().invoke(cli.main, ["-C", str(tmp_path), "release", "3.1.0"], input="n\n")

    assert result.exit_code == 0
    assert "declined" in result.output
