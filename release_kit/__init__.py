"""
release_kit
-----------

모노레포 릴리스 자동화 CLI 패키지.
git pull 부터 버전 갱신, 빌드, npm 배포, Dockerfile 버전 갱신,
커밋/태그/푸시까지 한 번에 수행하는 것을 목표로 한다.
"""

__all__ = [
    "cli",
    "config",
    "deploy_files",
    "git_ops",
    "manifest",
    "npm",
    "orchestrator",
    "registry",
]
