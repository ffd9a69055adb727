import sys
from typing import Optional

import click

from .config import load_env_files, ReleaseConfig
from .logging_utils import setup_logging, get_logger
from .orchestrator import plan_release, post_release_hints, run_release


logger = get_logger(__name__)


@click.group()
@click.option(
    "-C",
    "--chdir",
    "chdir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=".",
    help="모노레포 루트 디렉토리 (기본: 현재 디렉토리)",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="로그 레벨을 DEBUG로 올립니다.",
)
@click.pass_context
def main(ctx: click.Context, chdir: str, verbose: int) -> None:
    """모노레포 npm 패키지 릴리스용 CLI"""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["chdir"] = chdir
    ctx.obj["verbose"] = verbose


def _load_config_from_ctx(ctx: click.Context) -> ReleaseConfig:
    base_dir: str = ctx.obj["chdir"]
    load_env_files(base_dir)
    cfg = ReleaseConfig.from_env(base_dir)
    logger.debug("Config loaded: %s", cfg)
    return cfg


def _confirm(message: str) -> bool:
    return click.confirm(message, default=False)


@main.command()
@click.argument("version")
@click.option("-t", "--tag", "tag", type=str, default=None, help="추가로 붙일 npm dist-tag")
@click.pass_context
def plan(ctx: click.Context, version: str, tag: Optional[str]) -> None:
    """릴리스 대상 패키지와 설정을 요약해서 출력 (외부 명령은 실행하지 않음)"""
    try:
        cfg = _load_config_from_ctx(ctx)
    except Exception as e:  # noqa: BLE001
        click.echo(f"[ERROR] 설정 로드 실패: {e}", err=True)
        sys.exit(1)

    click.echo(plan_release(cfg, version, extra_tag=tag))


@main.command()
@click.argument("version")
@click.option("-t", "--tag", "tag", type=str, default=None, help="추가로 붙일 npm dist-tag")
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="확인 프롬프트 없이 바로 진행합니다.")
@click.option("--strict", is_flag=True, help="명령이 하나라도 실패하면 즉시 중단합니다.")
@click.pass_context
def release(
    ctx: click.Context,
    version: str,
    tag: Optional[str],
    assume_yes: bool,
    strict: bool,
) -> None:
    """새 버전을 릴리스한다 (pull, 빌드, npm 배포, Dockerfile 갱신, 커밋/태그/푸시)"""
    try:
        cfg = _load_config_from_ctx(ctx)
    except Exception as e:  # noqa: BLE001
        click.echo(f"[ERROR] 설정 로드 실패: {e}", err=True)
        sys.exit(1)

    if strict:
        cfg.strict = True

    try:
        summary, has_failures = run_release(
            cfg,
            version,
            extra_tag=tag,
            confirm=None if assume_yes else _confirm,
        )
    except Exception as e:  # noqa: BLE001
        logger.exception("릴리스 중 오류 발생")
        click.echo(f"[ERROR] 릴리스 실패: {e}", err=True)
        sys.exit(1)

    click.echo(summary)

    if has_failures:
        sys.exit(1)

    click.echo("\nNow run:\n")
    for hint in post_release_hints(cfg):
        click.echo(f"  {hint}\n")
