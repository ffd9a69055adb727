"""
manifest
--------

package.json 의 version / 내부 의존성 버전을 릴리스 버전으로 갱신하는 모듈.
"""

from __future__ import annotations

import json
import os
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List

from .logging_utils import get_logger


logger = get_logger(__name__)

MANIFEST_NAME = "package.json"

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "optionalDependencies")


class ManifestError(ValueError):
    """package.json 을 JSON 객체로 읽을 수 없는 경우."""


def load_manifest(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        raw = f.read()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ManifestError(f"매니페스트 JSON 파싱 실패: {path}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(f"매니페스트 최상위 값이 객체가 아닙니다: {path}")
    return data


def dump_manifest(data: Dict[str, Any]) -> str:
    # JSON.stringify(json, null, 2) 와 같은 모양 (끝 줄바꿈 없음)
    return json.dumps(data, indent=2, ensure_ascii=False)


def write_manifest(path: str, data: Dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(dump_manifest(data))


def update_dependencies(manifest: Dict[str, Any], name: str, version: str) -> bool:
    """
    dependencies / devDependencies / optionalDependencies 중
    name 이 키로 존재하는 곳의 버전을 (값이 비어 있어도) version 으로 덮어쓴다.
    """
    changed = False
    for section in DEPENDENCY_SECTIONS:
        deps = manifest.get(section)
        if isinstance(deps, dict) and name in deps:
            deps[name] = version
            changed = True
    return changed


def update_manifest(package_dir: str, version: str, known_names: Iterable[str]) -> List[str]:
    """
    package_dir/package.json 의 version 을 바꾸고, known_names 에 해당하는
    내부 의존성 버전을 모두 version 으로 맞춘 뒤 다시 쓴다.

    같은 version 으로 여러 번 실행해도 결과 파일은 동일하다.

    Returns:
        버전이 갱신된 의존성 이름 목록
    """
    path = os.path.join(package_dir, MANIFEST_NAME)
    manifest = load_manifest(path)
    manifest["version"] = version

    rewritten = [name for name in known_names if update_dependencies(manifest, name, version)]

    write_manifest(path, manifest)
    logger.info("매니페스트 갱신: %s -> %s (의존성 %d개)", path, version, len(rewritten))
    if rewritten:
        logger.debug("갱신된 의존성: %s", ", ".join(rewritten))
    return rewritten


@contextmanager
def workspaces_disabled(root_manifest_path: str) -> Iterator[Dict[str, Any]]:
    """
    루트 package.json 에서 workspaces 필드를 잠시 제거한다.
    블록을 벗어나면(예외 포함) 원래 내용으로 되돌린다.
    """
    original = load_manifest(root_manifest_path)
    stripped = {k: v for k, v in original.items() if k != "workspaces"}
    write_manifest(root_manifest_path, stripped)
    logger.info("루트 매니페스트 workspaces 비활성화: %s", root_manifest_path)
    try:
        yield stripped
    finally:
        write_manifest(root_manifest_path, original)
        logger.info("루트 매니페스트 복원: %s", root_manifest_path)
