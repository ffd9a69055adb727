from typing import List

import pytest

from release_kit import npm
from release_kit.subprocess_utils import RunResult


@pytest.fixture
def calls(monkeypatch: pytest.MonkeyPatch) -> List[tuple]:
    recorded: List[tuple] = []

    def fake_run(cmd, *, cwd=None, env=None, timeout=None, stream_output=True):  # noqa: ARG001
        recorded.append((list(cmd), cwd))
        return RunResult(cmd=tuple(cmd), returncode=0, cwd=cwd)

    monkeypatch.setattr(npm, "run_command", fake_run)
    monkeypatch.setattr(npm.time, "sleep", lambda _s: None)
    return recorded


def test_build_tag_list() -> None:
    assert npm.build_tag_list(None) == []
    assert npm.build_tag_list([], None) == []
    assert npm.build_tag_list("next") == ["next"]
    assert npm.build_tag_list(["next"], "beta") == ["next", "beta"]
    assert npm.build_tag_list(None, "beta") == ["beta"]


def test_publish_without_tags_has_no_tag_argument(calls) -> None:
    results = npm.publish("@saltcorn/data", "packages/saltcorn-data", "2.0.0", [])

    assert len(results) == 1
    assert calls == [(["npm", "publish", "--access=public"], "packages/saltcorn-data")]


def test_publish_applies_extra_tag_as_dist_tag(calls) -> None:
    npm.publish(
        "@saltcorn/cli",
        "packages/saltcorn-cli",
        "2.0.0",
        ["next"],
        extra_tag="beta",
    )

    assert [c[0] for c in calls] == [
        ["npm", "publish", "--access=public", "--tag", "next"],
        ["npm", "dist-tag", "add", "@saltcorn/cli@2.0.0", "beta"],
    ]
    assert all(cwd == "packages/saltcorn-cli" for _, cwd in calls)


def test_publish_waits_between_tags(monkeypatch: pytest.MonkeyPatch, calls) -> None:
    sleeps: List[float] = []
    monkeypatch.setattr(npm.time, "sleep", sleeps.append)

    npm.publish("@saltcorn/data", "d", "1.0.0", ["a", "b", "c"], tag_delay=1.5)

    assert sleeps == [1.5, 1.5]
    assert len(calls) == 3


def test_publish_does_not_raise_on_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_run(cmd, **_kwargs):
        return RunResult(cmd=tuple(cmd), returncode=1, stderr="E403")

    monkeypatch.setattr(npm, "run_command", failing_run)

    results = npm.publish("@saltcorn/data", "d", "1.0.0")

    assert [r.ok for r in results] == [False]
