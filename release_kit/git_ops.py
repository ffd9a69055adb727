"""
git_ops
-------

릴리스 전 동기화(pull/브랜치 확인)와 릴리스 후 커밋/태그/푸시.
"""

from __future__ import annotations

from typing import Optional

from .logging_utils import get_logger
from .subprocess_utils import RunResult, run_command


logger = get_logger(__name__)


def tag_name(version: str) -> str:
    return "v" + version


def pull(cwd: str) -> RunResult:
    return run_command(["git", "pull"], cwd=cwd)


def current_branch(cwd: str) -> tuple[RunResult, Optional[str]]:
    result = run_command(
        ["git", "rev-parse", "--abbrev-ref", "HEAD"], cwd=cwd, stream_output=False
    )
    branch = result.stdout.strip() if result.ok else None
    return result, branch or None


def show_summary(cwd: str) -> RunResult:
    return run_command(["git", "show", "--summary"], cwd=cwd)


def commit_all(cwd: str, version: str) -> RunResult:
    return run_command(["git", "commit", "-am", tag_name(version)], cwd=cwd)


def create_tag(cwd: str, version: str) -> RunResult:
    tag = tag_name(version)
    return run_command(["git", "tag", "-a", tag, "-m", tag], cwd=cwd)


def push_tag(cwd: str, version: str, remote: str = "origin") -> RunResult:
    return run_command(["git", "push", remote, tag_name(version)], cwd=cwd)


def push(cwd: str) -> RunResult:
    return run_command(["git", "push"], cwd=cwd)
