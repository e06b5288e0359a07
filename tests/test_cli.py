"""Tests for the ``wikiator`` CLI commands."""

from __future__ import annotations

import typing as typ

import pytest

from wikiator import cli
from wikiator.config import ConfigError, load_config

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("WIKIATOR_REPO", "WIKIATOR_BRANCH", "WIKIATOR_REMOTE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "pkg").mkdir(parents=True)
    (root / "pkg" / "router.go").write_text(
        "// wiki/go/http/routing\nfunc Route() {}\n// end-wiki\n", encoding="utf-8"
    )
    (root / "main.go").write_text("package main\n", encoding="utf-8")
    return root


def test_scan_publishes_into_existing_checkout(
    tmp_path: Path, project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    wiki = tmp_path / "wiki"
    wiki.mkdir()
    cli.scan(project, wiki_dir=wiki, push=False, config=tmp_path / "absent.toml")

    pages = list((wiki / "pages" / "go" / "http").glob("routing-*.md"))
    assert len(pages) == 1
    out = capsys.readouterr().out
    assert "wrote /pages/go/http/routing-" in out
    assert "1 page(s) published, 0 file(s) skipped" in out
    assert (wiki / "_sidebar.md").read_text(encoding="utf-8").startswith("- [routing](")


def test_scan_exits_non_zero_on_malformed_tag(
    tmp_path: Path, project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (project / "bad.go").write_text("// wiki/go\n", encoding="utf-8")
    wiki = tmp_path / "wiki"
    wiki.mkdir()
    with pytest.raises(SystemExit) as excinfo:
        cli.scan(project, wiki_dir=wiki, push=False, config=tmp_path / "absent.toml")
    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert "1 page(s) published, 1 file(s) skipped" in out
    assert "bad.go" in out


def test_sync_clones_publishes_and_cleans_up(
    tmp_path: Path, project: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    checkouts: list[Path] = []
    pushed: list[dict[str, object]] = []

    def fake_clone(repo: str, destination: Path) -> Path:
        destination.mkdir(parents=True)
        checkouts.append(destination)
        return destination

    def fake_publish(repo_dir: Path, **kwargs: object) -> bool:
        pushed.append({"repo_dir": repo_dir, **kwargs})
        assert list((repo_dir / "pages").rglob("*.md")), "expected pages before push"
        return True

    monkeypatch.setattr(cli, "staged_files", lambda root: [root / "pkg" / "router.go"])
    monkeypatch.setattr(cli, "clone_wiki", fake_clone)
    monkeypatch.setattr(cli, "publish_wiki", fake_publish)

    cli.sync(
        project,
        repo="git@example.invalid:wiki.git",
        branch="main",
        config=tmp_path / "absent.toml",
    )

    assert pushed == [
        {
            "repo_dir": checkouts[0],
            "message": "Update code wiki",
            "remote": "origin",
            "branch": "main",
        }
    ]
    assert not checkouts[0].exists(), "expected temporary clone to be removed"


def test_sync_without_repo_fails_before_cloning(
    tmp_path: Path, project: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(cli, "staged_files", lambda root: [])
    with pytest.raises(ConfigError):
        cli.sync(project, config=tmp_path / "absent.toml")


def test_setup_installs_hook(
    tmp_path: Path, project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (project / ".git").mkdir()
    cli.setup(project)
    hook = project / ".git" / "hooks" / "pre-commit"
    assert "wikiator sync" in hook.read_text(encoding="utf-8")
    assert "wikiator linked to" in capsys.readouterr().out


def test_configure_merges_into_config(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    cli.configure(repo="git@example.invalid:wiki.git", config=path)
    cli.configure(branch="main", config=path)
    stored = load_config(path)
    assert stored.repo == "git@example.invalid:wiki.git"
    assert stored.branch == "main"


def test_rebuild_sidebar_command(tmp_path: Path) -> None:
    wiki = tmp_path / "wiki"
    (wiki / "pages" / "go").mkdir(parents=True)
    (wiki / "pages" / "go" / "routing-abc.md").write_text("# Routing\n", encoding="utf-8")
    (wiki / "_sidebar.md").write_text(
        "- [routing](/pages/go/routing-abc.md)\n" * 2, encoding="utf-8"
    )
    cli.rebuild_sidebar_command(wiki, config=tmp_path / "absent.toml")
    assert (wiki / "_sidebar.md").read_text(encoding="utf-8") == (
        "- [routing](/pages/go/routing-abc.md)\n"
    )
