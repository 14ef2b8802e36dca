from __future__ import annotations

import os
import subprocess
from functools import cache
from importlib import metadata
from pathlib import Path

DIST_NAME = "cellwork"
ENV_VERSION = "CELLWORK_VERSION"


@cache
def get_app_version() -> str:
    """Resolve the version stamped into saved documents.

    Order: environment override, installed distribution metadata, git, "dev".
    """
    env_version = os.getenv(ENV_VERSION, "").strip()
    if env_version:
        return env_version

    try:
        dist_version = metadata.version(DIST_NAME).strip()
    except metadata.PackageNotFoundError:
        dist_version = ""
    if dist_version:
        return dist_version

    return _version_from_git() or "dev"


def _version_from_git() -> str | None:
    repo_root = _find_repo_root(Path(__file__).resolve())
    if not repo_root:
        return None

    def _run_git(*args: str) -> str | None:
        try:
            output = subprocess.check_output(
                ["git", *args],
                cwd=repo_root,
                stderr=subprocess.DEVNULL,
                text=True,
            )
        except (OSError, subprocess.CalledProcessError):
            return None
        return output.strip() or None

    if tag := _run_git("describe", "--tags", "--abbrev=0"):
        return tag
    if count := _run_git("rev-list", "--count", "HEAD"):
        return f"v0.{count}"
    return None


def _find_repo_root(path: Path) -> Path | None:
    return next((parent for parent in path.parents if (parent / ".git").exists()), None)
