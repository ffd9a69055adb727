"""
deploy_files
------------

Dockerfile.release 등 배포용 파일에 고정된 CLI 설치 버전을 갱신한다.

    RUN npm install -g @saltcorn/cli@1.0.0 --unsafe
                                    ^^^^^ 이 부분만 교체
"""

from __future__ import annotations

import os
import re
from typing import Pattern

from .logging_utils import get_logger


logger = get_logger(__name__)

UNSAFE_SUFFIX = " --unsafe"


def build_pattern(token: str = "cli") -> Pattern[str]:
    # "." 은 줄바꿈과 매칭되지 않으므로 한 줄 안에서만 찾는다.
    return re.compile(re.escape(token) + r"@.*" + re.escape(UNSAFE_SUFFIX))


def replace_pinned_version(text: str, version: str, token: str = "cli") -> tuple[str, bool]:
    pattern = build_pattern(token)
    replacement = f"{token}@{version}{UNSAFE_SUFFIX}"
    new_text, count = pattern.subn(lambda _m: replacement, text, count=1)
    return new_text, count > 0


def update_deploy_file(path: str, version: str, token: str = "cli") -> bool:
    """
    path 의 "<token>@<version> --unsafe" 를 새 버전으로 바꾼다.

    패턴이 없으면 내용은 그대로 다시 쓰고 경고만 남긴다.
    파일이 없으면 건너뛴다.

    Returns:
        패턴을 찾아 교체했는지 여부
    """
    if not os.path.exists(path):
        logger.warning("배포 파일이 없어 건너뜁니다: %s", path)
        return False

    with open(path, "r", encoding="utf-8", newline="") as f:
        text = f.read()

    new_text, found = replace_pinned_version(text, version, token)

    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(new_text)

    if found:
        logger.info("배포 파일 버전 갱신: %s -> %s", path, version)
    else:
        logger.warning("배포 파일에서 '%s@... --unsafe' 패턴을 찾지 못했습니다: %s", token, path)
    return found
