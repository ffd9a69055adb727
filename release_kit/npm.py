"""
npm
---

의존성 설치, TypeScript 컴파일, 패키지 배포(publish / dist-tag)를 담당하는 모듈.
"""

from __future__ import annotations

import time
from typing import List, Optional, Sequence, Union

import click

from .logging_utils import get_logger
from .subprocess_utils import RunResult, run_command


logger = get_logger(__name__)


def _npm(args: Sequence[str], cwd: str, timeout: Optional[float] = None) -> RunResult:
    return run_command(["npm", *args], cwd=cwd, timeout=timeout)


def install(cwd: str, *, timeout: Optional[float] = None) -> RunResult:
    return _npm(["install"], cwd, timeout)


def compile_sources(cwd: str, *, timeout: Optional[float] = None) -> RunResult:
    return _npm(["run", "tsc"], cwd, timeout)


def update_legacy_peer_deps(cwd: str, *, timeout: Optional[float] = None) -> RunResult:
    return _npm(["update", "--legacy-peer-deps"], cwd, timeout)


def build_tag_list(
    tags: Union[None, str, Sequence[str]], extra_tag: Optional[str] = None
) -> List[str]:
    """
    배포 태그 목록을 만든다. 첫 번째는 publish --tag 로,
    나머지는 dist-tag add 로 적용된다.
    """
    if not tags:
        result: List[str] = []
    elif isinstance(tags, str):
        result = [tags]
    else:
        result = list(tags)
    if extra_tag:
        result.append(extra_tag)
    return result


def publish(
    name: str,
    package_dir: str,
    version: str,
    tags: Union[None, str, Sequence[str]] = None,
    *,
    extra_tag: Optional[str] = None,
    access: str = "public",
    tag_delay: float = 3.0,
    timeout: Optional[float] = None,
) -> List[RunResult]:
    """
    package_dir 에서 npm publish 를 실행하고, 추가 태그를 dist-tag 로 붙인다.

    실패해도 예외를 던지지 않는다. 결과 판단은 호출하는 쪽에서 한다.
    """
    tag_list = build_tag_list(tags, extra_tag)
    first_tag = tag_list[0] if tag_list else None

    cmd = ["publish", f"--access={access}"]
    if first_tag:
        cmd += ["--tag", first_tag]
    click.echo(f"{package_dir}$ npm {' '.join(cmd)}")

    results = [_npm(cmd, package_dir, timeout)]

    for tag in tag_list[1:]:
        time.sleep(tag_delay)
        spec = f"{name}@{version}"
        click.echo(f"{package_dir}$ npm dist-tag add {spec} {tag}")
        results.append(_npm(["dist-tag", "add", spec, tag], package_dir, timeout))

    return results
