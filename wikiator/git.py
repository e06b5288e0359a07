"""Thin wrappers around the ``git`` executable.

These helpers provision a wiki checkout (``git clone``), list the files staged
in a project (``git diff --cached``), publish wiki changes (``add``/``commit``/
``push``), and install the pre-commit hook that runs ``wikiator sync`` before
every commit. Each command runs through :func:`run_git`, which raises
:class:`GitCommandError` with git's stderr when the command fails.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import typing as typ
from pathlib import Path

from ._constants import HOOK_COMMAND_TEMPLATE, HOOK_RELATIVE_PATH, HOOK_SHEBANG

logger = logging.getLogger(__name__)

_HOOK_FILE_MODE = 0o755


class GitCommandError(RuntimeError):
    """Raised when a git invocation exits non-zero or git is unavailable."""

    def __init__(self, args: typ.Sequence[str], stderr: str = "") -> None:
        self.args_list = list(args)
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"git {' '.join(self.args_list)} failed{detail}")


def run_git(
    args: list[str], *, cwd: Path | None = None
) -> subprocess.CompletedProcess[str]:
    """Invoke git with ``args`` (optionally via ``-C cwd``) and capture output."""
    exe = shutil.which("git") or "git"
    cmd = [exe]
    if cwd is not None:
        cmd += ["-C", str(cwd)]
    cmd += args
    try:
        return subprocess.run(  # noqa: S603
            cmd,
            check=True,
            text=True,
            capture_output=True,
        )
    except subprocess.CalledProcessError as exc:
        raise GitCommandError(args, exc.stderr or "") from exc
    except FileNotFoundError as exc:
        raise GitCommandError(args, "git executable not found") from exc


def clone_wiki(repo: str, destination: Path) -> Path:
    """Clone ``repo`` into ``destination`` and return the checkout path."""
    logger.info("cloning wiki repository %s into %s", repo, destination)
    run_git(["clone", repo, str(destination)])
    return destination


def staged_files(project_dir: Path) -> list[Path]:
    """Return absolute paths of files added, modified, or copied in the index.

    Deleted and renamed-away files are excluded so every returned path can be
    opened. ``--relative`` keeps names relative to ``project_dir`` even when it
    is a subdirectory of the working tree.
    """
    result = run_git(
        ["diff", "--cached", "--name-only", "--relative", "--diff-filter=AMC"],
        cwd=project_dir,
    )
    names = [line.strip() for line in result.stdout.splitlines()]
    paths = [project_dir / name for name in names if name]
    logger.info("found %d staged file(s) in %s", len(paths), project_dir)
    return paths


def has_changes(repo_dir: Path) -> bool:
    """Return ``True`` when the working tree at ``repo_dir`` has pending changes."""
    result = run_git(["status", "--porcelain"], cwd=repo_dir)
    return bool(result.stdout.strip())


def publish_wiki(
    repo_dir: Path, *, message: str, remote: str = "origin", branch: str = "master"
) -> bool:
    """Commit everything in ``repo_dir`` and push it.

    Returns
    -------
    bool
        ``False`` when there was nothing to commit, ``True`` after a push.
    """
    if not has_changes(repo_dir):
        logger.info("wiki checkout %s has no changes; skipping push", repo_dir)
        return False
    run_git(["add", "."], cwd=repo_dir)
    run_git(["commit", "-m", message], cwd=repo_dir)
    run_git(["push", remote, branch], cwd=repo_dir)
    logger.info("pushed wiki changes to %s/%s", remote, branch)
    return True


def install_hook(project_dir: Path) -> Path:
    """Add ``wikiator sync`` to the project's pre-commit hook.

    The hook is created with a shebang when missing; an existing hook is
    extended rather than replaced. When the existing hook ends with an
    ``exit`` statement the command goes just before it so it still runs.
    Installing twice is a no-op.

    Raises
    ------
    FileNotFoundError
        If ``project_dir`` is not the root of a git working tree.
    """
    git_dir = project_dir / ".git"
    if not git_dir.is_dir():
        msg = f"{project_dir} is not a git repository (no .git directory)"
        raise FileNotFoundError(msg)

    hook_path = project_dir / HOOK_RELATIVE_PATH
    hook_path.parent.mkdir(parents=True, exist_ok=True)
    command = HOOK_COMMAND_TEMPLATE.format(project_dir=shlex.quote(str(project_dir)))

    existing = hook_path.read_text(encoding="utf-8") if hook_path.exists() else ""
    if command not in existing.splitlines():
        lines = existing.splitlines() or [HOOK_SHEBANG]
        lines.insert(_hook_insert_index(lines), command)
        hook_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    os.chmod(hook_path, _HOOK_FILE_MODE)
    return hook_path


def _hook_insert_index(lines: list[str]) -> int:
    """Return where to add a command so a trailing ``exit`` cannot skip it."""
    for index in range(len(lines) - 1, -1, -1):
        stripped = lines[index].strip()
        if not stripped:
            continue
        if stripped == "exit" or stripped.startswith("exit "):
            return index
        break
    return len(lines)


__all__ = [
    "GitCommandError",
    "clone_wiki",
    "has_changes",
    "install_hook",
    "publish_wiki",
    "run_git",
    "staged_files",
]
