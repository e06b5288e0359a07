"""Tests for loading, resolving, and saving ``config.toml``."""

from __future__ import annotations

import os
import typing as typ

import pytest

from wikiator.config import (
    ConfigError,
    WikiatorConfig,
    load_config,
    resolve_config,
    save_config,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("WIKIATOR_REPO", "WIKIATOR_BRANCH", "WIKIATOR_REMOTE"):
        monkeypatch.delenv(name, raising=False)


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(
        """
# personal wiki settings
[wiki]
repo = "git@github.com:example/example.github.io.git"
branch = "main"
""".strip()
        + "\n",
        encoding="utf-8",
    )
    return path


def test_missing_config_yields_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.toml")
    assert config == WikiatorConfig()
    assert config.branch == "master"
    assert config.sidebar_file == "_sidebar.md"


def test_load_config_reads_wiki_table(tmp_path: Path) -> None:
    config = load_config(_write_config(tmp_path))
    assert config.repo == "git@github.com:example/example.github.io.git"
    assert config.branch == "main"
    assert config.remote == "origin"


def test_load_config_rejects_non_string_values(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[wiki]\nbranch = 3\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="branch"):
        load_config(path)


def test_load_config_reports_parse_errors(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[wiki\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_resolve_prefers_arguments_then_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = _write_config(tmp_path)
    monkeypatch.setenv("WIKIATOR_BRANCH", "env-branch")
    resolved = resolve_config(config_path=path, repo="git@example.invalid:cli.git")
    assert resolved.repo == "git@example.invalid:cli.git"
    assert resolved.branch == "env-branch"


def test_require_repo_raises_when_unset() -> None:
    with pytest.raises(ConfigError, match="No wiki repository"):
        WikiatorConfig().require_repo()


def test_save_config_round_trip_preserves_comments(tmp_path: Path) -> None:
    path = _write_config(tmp_path)
    config = load_config(path)
    config.commit_message = "docs: refresh wiki"
    save_config(config, path=path)

    text = path.read_text(encoding="utf-8")
    assert "# personal wiki settings" in text
    assert load_config(path).commit_message == "docs: refresh wiki"
    assert os.stat(path).st_mode & 0o777 == 0o600


def test_save_config_creates_file(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.toml"
    save_config(WikiatorConfig(repo="git@example.invalid:wiki.git"), path=path)
    assert load_config(path).repo == "git@example.invalid:wiki.git"
