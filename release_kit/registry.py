"""
registry
--------

릴리스 대상 패키지 목록(패키지명 -> 디렉토리, 배포 여부).

목록은 실행 중에 바뀌지 않는 불변 테이블이며, ReleaseConfig 에 실려
오케스트레이터로 명시적으로 전달된다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Tuple


@dataclass(frozen=True)
class PackageEntry:
    name: str
    directory: str
    publishable: bool = False


@dataclass(frozen=True)
class PackageRegistry:
    # 배포 순서 = 선언 순서 (의존되는 쪽이 먼저)
    packages: Tuple[PackageEntry, ...]
    cli: PackageEntry = field(
        default_factory=lambda: PackageEntry("@saltcorn/cli", "saltcorn-cli", True)
    )

    def __iter__(self) -> Iterator[PackageEntry]:
        return iter(self.packages)

    def __len__(self) -> int:
        return len(self.packages)

    def publishable(self) -> list[PackageEntry]:
        return [p for p in self.packages if p.publishable]

    def known_names(self) -> list[str]:
        """의존성 갱신 대상이 되는 이름 목록 (CLI 패키지 포함)."""
        names = [p.name for p in self.packages]
        if self.cli.name not in names:
            names.append(self.cli.name)
        return names


DEFAULT_REGISTRY = PackageRegistry(
    packages=(
        PackageEntry("@saltcorn/db-common", "db-common", True),
        PackageEntry("@saltcorn/common-code", "common-code", True),
        PackageEntry("@saltcorn/plugins-loader", "plugins-loader", True),
        PackageEntry("@saltcorn/sqlite", "sqlite", True),
        PackageEntry("@saltcorn/sqlite-mobile", "sqlite-mobile", True),
        PackageEntry("@saltcorn/postgres", "postgres", True),
        PackageEntry("@saltcorn/types", "saltcorn-types", True),
        PackageEntry("@saltcorn/builder", "saltcorn-builder", True),
        PackageEntry("@saltcorn/filemanager", "filemanager", True),
        PackageEntry("@saltcorn/data", "saltcorn-data", True),
        PackageEntry("@saltcorn/admin-models", "saltcorn-admin-models", True),
        PackageEntry("@saltcorn/random-tests", "saltcorn-random-tests", False),
        PackageEntry("@saltcorn/server", "server", True),
        PackageEntry("@saltcorn/base-plugin", "saltcorn-base-plugin", True),
        PackageEntry("@saltcorn/markup", "saltcorn-markup", True),
        PackageEntry("@saltcorn/mobile-app", "saltcorn-mobile-app", True),
        PackageEntry("@saltcorn/mobile-builder", "saltcorn-mobile-builder", True),
        PackageEntry("@saltcorn/sbadmin2", "saltcorn-sbadmin2", True),
    ),
    cli=PackageEntry("@saltcorn/cli", "saltcorn-cli", True),
)
