from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .config import ReleaseConfig
from .logging_utils import get_logger
from .manifest import update_manifest, workspaces_disabled
from .subprocess_utils import RunResult
from . import deploy_files, git_ops, npm


logger = get_logger(__name__)

# 실행 순서대로 나열
ALL_STAGES: List[str] = [
    "sync",
    "inspect",
    "confirm",
    "build",
    "publish_libs",
    "publish_cli",
    "deploy_files",
    "finalize",
]

# 이 단계에서 명령이 실패하면 이후 단계를 진행하지 않는다.
ABORT_ON_FAILURE = {"sync", "build"}

POST_RELEASE_HINTS = [
    "rm -rf {packages_dir}/{cli_dir}/node_modules",
    "rm -rf node_modules",
]


class ReleaseAborted(Exception):
    """운영자가 확인 단계에서 릴리스를 취소한 경우."""


class _StageFailed(Exception):
    pass


@dataclass
class _Release:
    cfg: ReleaseConfig
    version: str
    extra_tag: Optional[str]
    confirm: Optional[Callable[[str], bool]]
    branch: Optional[str] = None
    results: Dict[str, List[RunResult]] = field(default_factory=dict)

    def record(self, stage: str, *results: RunResult) -> None:
        self.results.setdefault(stage, []).extend(results)
        if self.cfg.strict and any(not r.ok for r in results):
            raise _StageFailed(stage)

    def failed_commands(self, stage: str) -> List[RunResult]:
        return [r for r in self.results.get(stage, []) if not r.ok]


def _stage_sync(rel: _Release) -> None:
    rel.record("sync", git_ops.pull(rel.cfg.base_dir))


def _stage_inspect(rel: _Release) -> None:
    result, branch = git_ops.current_branch(rel.cfg.base_dir)
    rel.branch = branch
    logger.info("현재 브랜치: %s", branch or "(확인 불가)")
    rel.record("inspect", result, git_ops.show_summary(rel.cfg.base_dir))


def _stage_confirm(rel: _Release) -> None:
    if rel.confirm is None:
        logger.info("확인 단계를 건너뜁니다 (--yes)")
        return
    message = f"{rel.branch or '(unknown)'} 브랜치에서 v{rel.version} 릴리스를 시작할까요?"
    if not rel.confirm(message):
        raise ReleaseAborted("운영자가 릴리스를 취소했습니다.")


def _stage_build(rel: _Release) -> None:
    cfg = rel.cfg
    timeout = cfg.command_timeout
    steps = [
        lambda: npm.install(cfg.base_dir, timeout=timeout),
        lambda: npm.compile_sources(cfg.base_dir, timeout=timeout),
        lambda: npm.install(cfg.package_path(cfg.registry.cli.directory), timeout=timeout),
    ]
    # 앞 단계가 실패하면 나머지 빌드 명령은 실행하지 않는다.
    for step in steps:
        rel.record("build", step())
        if rel.failed_commands("build"):
            return


def _stage_publish_libs(rel: _Release) -> None:
    cfg = rel.cfg
    known = cfg.registry.known_names()
    for entry in cfg.registry:
        package_dir = cfg.package_path(entry.directory)
        update_manifest(package_dir, rel.version, known)
        if not entry.publishable:
            logger.info("배포 대상이 아니므로 publish 를 건너뜁니다: %s", entry.name)
            continue
        rel.record(
            "publish_libs",
            *npm.publish(
                entry.name,
                package_dir,
                rel.version,
                extra_tag=rel.extra_tag,
                access=cfg.npm_access,
                tag_delay=cfg.tag_delay,
                timeout=cfg.command_timeout,
            ),
        )
        time.sleep(cfg.publish_delay)
    time.sleep(cfg.settle_delay)


def _stage_publish_cli(rel: _Release) -> None:
    cfg = rel.cfg
    cli = cfg.registry.cli
    cli_dir = cfg.package_path(cli.directory)
    update_manifest(cli_dir, rel.version, cfg.registry.known_names())

    with workspaces_disabled(cfg.path(cfg.root_manifest)):
        rel.record(
            "publish_cli",
            npm.update_legacy_peer_deps(cli_dir, timeout=cfg.command_timeout),
        )
        rel.record("publish_cli", npm.install(cfg.base_dir, timeout=cfg.command_timeout))
        rel.record(
            "publish_cli",
            *npm.publish(
                cli.name,
                cli_dir,
                rel.version,
                cfg.cli_tag or None,
                extra_tag=rel.extra_tag,
                access=cfg.npm_access,
                tag_delay=cfg.tag_delay,
                timeout=cfg.command_timeout,
            ),
        )


def _stage_deploy_files(rel: _Release) -> None:
    for name in rel.cfg.deploy_files:
        deploy_files.update_deploy_file(rel.cfg.path(name), rel.version, rel.cfg.deploy_token)


def _stage_finalize(rel: _Release) -> None:
    cwd = rel.cfg.base_dir
    rel.record("finalize", git_ops.commit_all(cwd, rel.version))
    rel.record("finalize", git_ops.create_tag(cwd, rel.version))
    rel.record("finalize", git_ops.push_tag(cwd, rel.version, rel.cfg.git_remote))
    rel.record("finalize", git_ops.push(cwd))


_STAGE_FUNCS: Dict[str, Callable[[_Release], None]] = {
    "sync": _stage_sync,
    "inspect": _stage_inspect,
    "confirm": _stage_confirm,
    "build": _stage_build,
    "publish_libs": _stage_publish_libs,
    "publish_cli": _stage_publish_cli,
    "deploy_files": _stage_deploy_files,
    "finalize": _stage_finalize,
}


def post_release_hints(cfg: ReleaseConfig) -> List[str]:
    return [
        h.format(packages_dir=cfg.packages_dir, cli_dir=cfg.registry.cli.directory)
        for h in POST_RELEASE_HINTS
    ]


def plan_release(cfg: ReleaseConfig, version: str, extra_tag: Optional[str] = None) -> str:
    """
    릴리스에서 다룰 패키지와 설정을 요약 텍스트로 리턴한다.
    외부 명령은 실행하지 않는다.
    """
    lines: List[str] = []
    lines.append("# Release plan")
    lines.append(f"- version: {version}")
    lines.append(f"- git tag: {git_ops.tag_name(version)}")
    lines.append(f"- extra dist-tag: {extra_tag or '(none)'}")
    lines.append("")

    lines.append("## Config summary")
    lines.append(f"- base_dir: {cfg.base_dir}")
    lines.append(f"- packages_dir: {cfg.packages_dir}")
    lines.append(f"- root_manifest: {cfg.root_manifest}")
    lines.append(f"- npm_access: {cfg.npm_access}")
    lines.append(f"- git_remote: {cfg.git_remote}")
    lines.append(f"- deploy_files: {', '.join(cfg.deploy_files) or '(none)'}")
    lines.append(f"- strict: {cfg.strict}")
    lines.append("")

    lines.append("## Packages")
    for entry in cfg.registry:
        status = "PUBLISH" if entry.publishable else "VERSION ONLY"
        lines.append(f"- {entry.name} ({entry.directory}): {status}")
    cli = cfg.registry.cli
    cli_tags = npm.build_tag_list(cfg.cli_tag or None, extra_tag)
    lines.append(f"- {cli.name} ({cli.directory}): PUBLISH [{', '.join(cli_tags)}]")

    return "\n".join(lines)


def run_release(
    cfg: ReleaseConfig,
    version: str,
    extra_tag: Optional[str] = None,
    confirm: Optional[Callable[[str], bool]] = None,
) -> tuple[str, bool]:
    """
    단계별로 릴리스를 진행한다.

    confirm 이 None 이면 확인 없이 바로 진행한다.

    Returns:
        summary: 사람이 읽기 좋은 텍스트 요약
        has_failures: 실패하거나 중단된 단계가 있는지 여부
    """
    rel = _Release(cfg=cfg, version=version, extra_tag=extra_tag, confirm=confirm)

    executed: List[str] = []
    skipped: List[str] = []
    failed: List[str] = []
    aborted_reason: Optional[str] = None

    logger.info(
        "릴리스 시작: v%s (패키지 %d개, 배포 대상 %d개 + CLI)",
        version,
        len(cfg.registry),
        len(cfg.registry.publishable()),
    )

    for name in ALL_STAGES:
        if aborted_reason is not None:
            skipped.append(name)
            continue

        logger.info("단계 실행: %s", name)

        try:
            _STAGE_FUNCS[name](rel)
        except ReleaseAborted as e:
            failed.append(name)
            aborted_reason = str(e)
            logger.warning("%s", e)
            continue
        except _StageFailed:
            failed.append(name)
            aborted_reason = f"{name} 단계에서 명령이 실패했습니다 (strict)."
            logger.error("%s", aborted_reason)
            continue
        except Exception:  # noqa: BLE001
            failed.append(name)
            aborted_reason = f"{name} 단계에서 예외가 발생했습니다."
            logger.exception("단계 실행 실패: %s", name)
            continue

        if rel.failed_commands(name):
            failed.append(name)
            if name in ABORT_ON_FAILURE:
                aborted_reason = f"{name} 단계에서 명령이 실패했습니다."
                logger.error("%s", aborted_reason)
            continue

        executed.append(name)

    lines: List[str] = []
    lines.append("# Release summary")
    lines.append(f"- version: {version}")
    lines.append(f"- branch: {rel.branch or '(unknown)'}")
    if aborted_reason:
        lines.append(f"- aborted: {aborted_reason}")
    lines.append("")

    for title, items in (
        ("Executed stages", executed),
        ("Skipped stages", skipped),
        ("Failed stages", failed),
    ):
        lines.append(f"## {title}")
        if items:
            for s in items:
                lines.append(f"- {s}")
        else:
            lines.append("- (none)")
        lines.append("")

    lines.append("## Failed commands")
    failed_cmds = [r for stage in ALL_STAGES for r in rel.failed_commands(stage)]
    if failed_cmds:
        for r in failed_cmds:
            lines.append(f"- {r.describe()}")
    else:
        lines.append("- (none)")

    summary = "\n".join(lines)
    return summary, bool(failed)
