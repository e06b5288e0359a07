"""Cyclopts CLI entrypoint for publishing tagged source blocks to a code wiki.

The ``wikiator`` console script scans source files for ``wiki/...`` tagged
blocks, writes each one as a page in a wiki checkout, appends a sidebar link,
and pushes the result. ``wikiator sync`` looks only at files staged for the
next commit (this is what the pre-commit hook runs), ``wikiator scan`` walks a
whole directory tree, and ``wikiator setup`` installs the hook.

Examples
--------
Install the pre-commit hook in a project:

>>> from wikiator.cli import app
>>> app(["setup", "path/to/project"])  # doctest: +SKIP

Publish every tagged file under ``src`` into an existing checkout without
pushing:

>>> app(["scan", "src", "--wiki-dir", "../wiki", "--no-push"])  # doctest: +SKIP
"""

from __future__ import annotations

import collections.abc as cabc
import contextlib
import logging
import os
import shutil
import tempfile
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import (
    DEFAULT_CONFIG_PATH,
    WikiatorConfig,
    load_config,
    resolve_config,
    save_config,
)
from .context import WikiContext
from .git import clone_wiki, install_hook, publish_wiki, staged_files
from .pipeline import RunReport, WikiPublisher, walk_files
from .sidebar import SidebarUpdater

app = App(name="wikiator", config=cyclopts.config.Env("WIKIATOR_", command=False))  # type: ignore[unknown-argument]

WikiDirOption = typ.Annotated[
    Path | None,
    Parameter(help="Use an existing wiki checkout instead of cloning the repo"),
]
PushOption = typ.Annotated[
    bool, Parameter(help="Commit and push the wiki checkout after publishing")
]
RebuildOption = typ.Annotated[
    bool, Parameter(help="Regenerate the sidebar from the pages on disk afterwards")
]
RepoOption = typ.Annotated[
    str | None, Parameter(help="Wiki repository URL to clone and push to")
]
BranchOption = typ.Annotated[str | None, Parameter(help="Wiki branch to push")]
ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to wikiator config (TOML)")
]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


@contextlib.contextmanager
def _wiki_checkout(
    wiki_dir: Path | None, settings: WikiatorConfig
) -> cabc.Iterator[Path]:
    """Yield ``wiki_dir`` or a temporary clone of the configured repository."""
    if wiki_dir is not None:
        yield wiki_dir
        return
    repo = settings.require_repo()
    workspace = Path(tempfile.mkdtemp(prefix="wikiator-"))
    try:
        yield clone_wiki(repo, workspace / "wiki")
    finally:
        shutil.rmtree(workspace, ignore_errors=True)


def _build_context(wiki_root: Path, settings: WikiatorConfig) -> WikiContext:
    return WikiContext(
        wiki_root=wiki_root,
        pages_dir=settings.pages_dir,
        sidebar_file=settings.sidebar_file,
    )


def _publish(
    files: cabc.Sequence[Path],
    *,
    settings: WikiatorConfig,
    wiki_dir: Path | None,
    push: bool,
    rebuild_sidebar: bool,
) -> RunReport:
    """Publish ``files`` into a wiki checkout and optionally push it."""
    with _wiki_checkout(wiki_dir, settings) as wiki_root:
        context = _build_context(wiki_root, settings)
        report = WikiPublisher(context).process_files(files)
        for outcome in report.published:
            print(f"wrote {outcome.page.relative_url}")
        if rebuild_sidebar:
            entries = SidebarUpdater(context).rebuild()
            print(f"rebuilt {context.sidebar_file} with {len(entries)} page(s)")
        if push:
            publish_wiki(
                wiki_root,
                message=settings.commit_message,
                remote=settings.remote,
                branch=settings.branch,
            )
    return report


def _finish(report: RunReport) -> None:
    """Print a summary and exit non-zero when any file failed."""
    failures = report.failures
    print(
        f"{len(report.published)} page(s) published, "
        f"{len(failures)} file(s) skipped"
    )
    for outcome in failures:
        print(f"skipped {_format_path(outcome.path)}: {outcome.message}")
    if failures:
        raise SystemExit(1)


@app.command(help="Publish wiki blocks from files staged in a git project.")
def sync(
    project_dir: typ.Annotated[Path, Parameter(help="Project working tree")],
    *,
    wiki_dir: WikiDirOption = None,
    push: PushOption = True,
    rebuild_sidebar: RebuildOption = False,
    repo: RepoOption = None,
    branch: BranchOption = None,
    config: ConfigOption = DEFAULT_CONFIG_PATH,
) -> None:
    """Publish tagged blocks from the files staged for the next commit.

    Parameters
    ----------
    project_dir : Path
        Root of the git working tree whose index is inspected.
    wiki_dir : Path or None, optional
        Existing wiki checkout; when ``None`` the configured repo is cloned
        into a temporary directory that is removed afterwards.
    push : bool, optional
        Commit and push the wiki checkout once pages are written.
    rebuild_sidebar : bool, optional
        Regenerate the sidebar from the pages on disk after publishing.
    repo, branch : str or None, optional
        Override the configured wiki repository and branch.
    config : Path, optional
        Location of the TOML configuration file.

    Raises
    ------
    SystemExit
        With status 1 when any file was skipped.
    """
    settings = resolve_config(config_path=config, repo=repo, branch=branch)
    files = staged_files(project_dir)
    report = _publish(
        files,
        settings=settings,
        wiki_dir=wiki_dir,
        push=push,
        rebuild_sidebar=rebuild_sidebar,
    )
    _finish(report)


@app.command(help="Publish wiki blocks from every file under a directory.")
def scan(
    project_dir: typ.Annotated[Path, Parameter(help="Directory to walk")],
    *,
    wiki_dir: WikiDirOption = None,
    push: PushOption = True,
    rebuild_sidebar: RebuildOption = False,
    repo: RepoOption = None,
    branch: BranchOption = None,
    config: ConfigOption = DEFAULT_CONFIG_PATH,
) -> None:
    """Walk ``project_dir`` recursively and publish every tagged block found."""
    settings = resolve_config(config_path=config, repo=repo, branch=branch)
    files = walk_files(project_dir)
    report = _publish(
        files,
        settings=settings,
        wiki_dir=wiki_dir,
        push=push,
        rebuild_sidebar=rebuild_sidebar,
    )
    _finish(report)


@app.command(help="Install the wikiator pre-commit hook in a git project.")
def setup(
    project_dir: typ.Annotated[Path, Parameter(help="Project working tree")],
) -> None:
    """Link wikiator to ``project_dir`` by extending its pre-commit hook."""
    hook_path = install_hook(project_dir.resolve())
    print(f"wikiator linked to {project_dir} ({_format_path(hook_path)})")


@app.command(name="rebuild-sidebar", help="Regenerate the sidebar of a wiki checkout.")
def rebuild_sidebar_command(
    wiki_dir: typ.Annotated[Path, Parameter(help="Wiki checkout root")],
    *,
    config: ConfigOption = DEFAULT_CONFIG_PATH,
) -> None:
    """List every page under the checkout exactly once in its sidebar."""
    settings = load_config(config)
    context = _build_context(wiki_dir, settings)
    entries = SidebarUpdater(context).rebuild()
    print(f"wrote {_format_path(context.sidebar_path)} ({len(entries)} page(s))")


@app.command(help="Store the wiki repository and publishing defaults.")
def configure(
    *,
    repo: RepoOption = None,
    branch: BranchOption = None,
    remote: typ.Annotated[str | None, Parameter(help="Git remote to push to")] = None,
    commit_message: typ.Annotated[
        str | None, Parameter(help="Commit message for wiki updates")
    ] = None,
    config: ConfigOption = DEFAULT_CONFIG_PATH,
) -> None:
    """Merge the given options into the config file, keeping other values."""
    current = load_config(config)
    updated = WikiatorConfig(
        repo=repo or current.repo,
        branch=branch or current.branch,
        remote=remote or current.remote,
        commit_message=commit_message or current.commit_message,
        pages_dir=current.pages_dir,
        sidebar_file=current.sidebar_file,
    )
    save_config(updated, path=config)
    print(f"wrote {_format_path(config)}")


def main() -> None:
    """Configure logging and invoke the Cyclopts app behind ``wikiator``."""
    logging.basicConfig(
        level=os.getenv("WIKIATOR_LOG_LEVEL", "INFO").upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
