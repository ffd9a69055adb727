from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from .registry import DEFAULT_REGISTRY, PackageRegistry


ENV_FILES_DEFAULT_ORDER = [".env", ".env.release"]

DEFAULT_DEPLOY_FILES = ["Dockerfile.release", "Dockerfile.mobile.release"]


def load_env_files(base_dir: str = ".",
                   files: Optional[List[str]] = None) -> None:
    """
    주어진 디렉토리에서 .env 계열 파일을 순서대로 로드한다.
    후순위 파일이 같은 키를 덮어쓴다.
    """
    order = files or ENV_FILES_DEFAULT_ORDER
    for name in order:
        path = os.path.join(base_dir, name)
        if os.path.exists(path):
            load_dotenv(path, override=True)


def _get_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "y"}


def _get_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} 값이 숫자가 아닙니다: {raw!r}") from e
    if value < 0:
        raise ValueError(f"{name} 값은 0 이상이어야 합니다: {raw!r}")
    return value


def _get_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    return [p.strip() for p in raw.split(",") if p.strip()]


@dataclass
class ReleaseConfig:
    base_dir: str = "."
    packages_dir: str = "packages"
    root_manifest: str = "package.json"

    registry: PackageRegistry = DEFAULT_REGISTRY

    # Dockerfile 내 "<token>@<version> --unsafe" 패턴
    deploy_files: List[str] = field(default_factory=lambda: list(DEFAULT_DEPLOY_FILES))
    deploy_token: str = "cli"

    npm_access: str = "public"
    cli_tag: str = "next"
    git_remote: str = "origin"

    # 고정 대기 시간 (레지스트리 rate limit 회피용)
    publish_delay: float = 3.0
    tag_delay: float = 3.0
    settle_delay: float = 5.0

    command_timeout: Optional[float] = None

    # True 면 어떤 명령이든 실패하는 즉시 중단
    strict: bool = False

    def path(self, *parts: str) -> str:
        return os.path.join(self.base_dir, *parts)

    def package_path(self, directory: str) -> str:
        return self.path(self.packages_dir, directory)

    @classmethod
    def from_env(cls, base_dir: str = ".") -> "ReleaseConfig":
        timeout = _get_float("RELEASE_COMMAND_TIMEOUT_SECONDS", None)
        return cls(
            base_dir=base_dir,
            packages_dir=os.getenv("RELEASE_PACKAGES_DIR", "packages"),
            root_manifest=os.getenv("RELEASE_ROOT_MANIFEST", "package.json"),
            deploy_files=_get_list("RELEASE_DEPLOY_FILES", DEFAULT_DEPLOY_FILES),
            deploy_token=os.getenv("RELEASE_DEPLOY_TOKEN", "cli"),
            npm_access=os.getenv("RELEASE_NPM_ACCESS", "public"),
            cli_tag=os.getenv("RELEASE_CLI_TAG", "next"),
            git_remote=os.getenv("RELEASE_GIT_REMOTE", "origin"),
            publish_delay=_get_float("RELEASE_PUBLISH_DELAY_SECONDS", 3.0) or 0.0,
            tag_delay=_get_float("RELEASE_TAG_DELAY_SECONDS", 3.0) or 0.0,
            settle_delay=_get_float("RELEASE_SETTLE_DELAY_SECONDS", 5.0) or 0.0,
            command_timeout=timeout,
            strict=_get_bool("RELEASE_STRICT", False),
        )
