"""
subprocess_utils
----------------

git / npm 등 외부 명령 실행 공통 유틸.

종료 코드는 예외로 바꾸지 않고 RunResult 로 돌려준다.
실패 시 중단할지 계속할지는 호출하는 쪽(오케스트레이터)이 단계별로 결정한다.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from textwrap import shorten
from typing import Mapping, Sequence

from .logging_utils import get_logger


logger = get_logger(__name__)


class CommandError(RuntimeError):
    """명령 자체를 실행할 수 없는 경우(미설치, 타임아웃)."""


@dataclass(frozen=True)
class RunResult:
    cmd: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    cwd: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def describe(self) -> str:
        where = f" (cwd={self.cwd})" if self.cwd else ""
        return f"{' '.join(self.cmd)}{where} -> exit={self.returncode}"


def run_command(
    cmd: Sequence[str],
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
    stream_output: bool = True,
) -> RunResult:
    """
    subprocess 실행 공통 유틸.

    - stream_output=True : stdin/stdout/stderr 를 그대로 터미널에 연결한다.
      (npm publish 의 OTP 입력 등 대화형 프롬프트도 그대로 동작)
    - stream_output=False: stdout/stderr 를 캡처해서 RunResult 에 담는다.

    종료 코드가 0 이 아니어도 예외를 던지지 않는다.
    """
    logger.info("명령 실행: %s%s", " ".join(cmd), f" (cwd={cwd})" if cwd else "")

    try:
        result = subprocess.run(  # noqa: S603
            list(cmd),
            cwd=cwd,
            env=dict(env) if env is not None else None,
            timeout=timeout,
            capture_output=not stream_output,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise CommandError(
            f"필요한 명령을 찾을 수 없습니다: {cmd[0]} (git/npm 이 설치되어 있는지 확인하세요)"
        ) from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(
            f"명령 실행이 {timeout}초 안에 끝나지 않았습니다: {' '.join(cmd)}"
        ) from e

    stdout = result.stdout or ""
    stderr = result.stderr or ""
    if stdout:
        logger.debug("명령 stdout: %s", shorten(stdout.strip(), width=2000))
    if stderr:
        logger.debug("명령 stderr: %s", shorten(stderr.strip(), width=2000))

    if result.returncode != 0:
        detail = ""
        if stderr.strip():
            detail = "\nstderr:\n" + shorten(stderr.strip(), width=2000)
        logger.warning(
            "명령 실행 실패: %s (exit=%s)%s", " ".join(cmd), result.returncode, detail
        )

    return RunResult(
        cmd=tuple(cmd),
        returncode=result.returncode,
        stdout=stdout,
        stderr=stderr,
        cwd=cwd,
    )
