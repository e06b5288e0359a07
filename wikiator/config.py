"""Load and persist wikiator settings stored in ``config.toml``.

Settings live under a ``[wiki]`` table in ``~/.config/wikiator/config.toml``
(override the location with ``WIKIATOR_CONFIG_FILE``). The file is parsed and
written with ``tomlkit`` so hand-written comments and ordering survive
:func:`save_config`. Values resolve in this order: explicit arguments,
environment variables, the config file, then built-in defaults.

Example
-------
>>> from pathlib import Path
>>> from wikiator.config import resolve_config
>>> cfg = resolve_config(config_path=Path("/nonexistent.toml"), repo="git@host:wiki.git")
>>> cfg.branch
'master'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import os
import typing as typ
from pathlib import Path

import tomlkit

from ._constants import PAGES_DIRNAME, SIDEBAR_FILENAME

DEFAULT_CONFIG_PATH = Path(
    os.getenv(
        "WIKIATOR_CONFIG_FILE",
        Path.home() / ".config" / "wikiator" / "config.toml",
    )
)

_CONFIG_FILE_MODE = 0o600
_WIKI_TABLE = "wiki"


class ConfigError(ValueError):
    """Raised when configuration is unreadable or missing a required value."""


@dc.dataclass(slots=True)
class WikiatorConfig:
    """Resolved settings for cloning and publishing the wiki repository."""

    repo: str | None = None
    branch: str = "master"
    remote: str = "origin"
    commit_message: str = "Update code wiki"
    pages_dir: str = PAGES_DIRNAME
    sidebar_file: str = SIDEBAR_FILENAME

    @classmethod
    def from_mapping(
        cls, data: typ.Mapping[str, typ.Any], *, path: Path | None = None
    ) -> WikiatorConfig:
        base = cls()
        values: dict[str, typ.Any] = {}
        for field in dc.fields(cls):
            value = data.get(field.name, getattr(base, field.name))
            if value is not None and not isinstance(value, str):
                location = f" in {path}" if path else ""
                msg = f"Expected a string for '{field.name}'{location}, got {value!r}"
                raise ConfigError(msg)
            values[field.name] = value
        return cls(**values)

    def require_repo(self) -> str:
        """Return the wiki repository URL or raise when none is configured."""
        if not self.repo:
            msg = (
                "No wiki repository configured. Pass --repo, set WIKIATOR_REPO, "
                "or run 'wikiator configure --repo <url>'."
            )
            raise ConfigError(msg)
        return self.repo


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> WikiatorConfig:
    """Read ``path`` and return its ``[wiki]`` settings, or defaults if absent."""
    if not path.exists():
        return WikiatorConfig()
    try:
        doc = tomlkit.parse(path.read_text(encoding="utf-8"))
    except tomlkit.exceptions.ParseError as exc:
        msg = f"Unable to parse config TOML at {path}"
        raise ConfigError(msg) from exc
    table = doc.get(_WIKI_TABLE)
    if table is None:
        table = {}
    if not isinstance(table, cabc.Mapping):
        msg = f"Expected a [{_WIKI_TABLE}] table in {path}"
        raise ConfigError(msg)
    data = {k: v for k, v in table.items()}
    return WikiatorConfig.from_mapping(data, path=path)


def save_config(config: WikiatorConfig, *, path: Path = DEFAULT_CONFIG_PATH) -> None:
    """Persist ``config`` into ``path`` preserving existing formatting."""
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        doc = tomlkit.parse(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        doc = tomlkit.document()
    except tomlkit.exceptions.ParseError as exc:
        msg = f"Unable to parse config TOML at {path}"
        raise ConfigError(msg) from exc

    wiki_table = doc.get(_WIKI_TABLE)
    if not isinstance(wiki_table, tomlkit.items.Table):
        wiki_table = tomlkit.table()

    for field in dc.fields(config):
        value = getattr(config, field.name)
        if value is None:
            wiki_table.pop(field.name, None)
        else:
            wiki_table[field.name] = value

    doc[_WIKI_TABLE] = wiki_table
    path.write_text(tomlkit.dumps(doc), encoding="utf-8")
    os.chmod(path, _CONFIG_FILE_MODE)


def resolve_config(
    *,
    config_path: Path = DEFAULT_CONFIG_PATH,
    repo: str | None = None,
    branch: str | None = None,
    remote: str | None = None,
    commit_message: str | None = None,
) -> WikiatorConfig:
    """Merge CLI arguments, environment, and ``config.toml`` content."""
    stored = load_config(config_path)
    return WikiatorConfig(
        repo=repo or os.getenv("WIKIATOR_REPO") or stored.repo,
        branch=branch or os.getenv("WIKIATOR_BRANCH") or stored.branch,
        remote=remote or os.getenv("WIKIATOR_REMOTE") or stored.remote,
        commit_message=commit_message or stored.commit_message,
        pages_dir=stored.pages_dir,
        sidebar_file=stored.sidebar_file,
    )


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "WikiatorConfig",
    "load_config",
    "resolve_config",
    "save_config",
]
