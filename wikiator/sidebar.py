"""Maintain the wiki's ``_sidebar.md`` index of generated pages.

Runs append one markdown link per generated page and never rewrite existing
entries, so processing the same file twice lists it twice. :meth:`SidebarUpdater.rebuild`
regenerates the page links from what is actually on disk for checkouts that
need tidying.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ

from ._constants import PAGE_EXTENSION, SIDEBAR_LINE_TEMPLATE, SUFFIX_PATTERN

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .context import WikiContext
    from .pages import WikiPage

logger = logging.getLogger(__name__)

_LINK_PATTERN = re.compile(r"^\s*-\s+\[(?P<label>[^\]]*)\]\((?P<url>[^)]*)\)\s*$")


@dc.dataclass(frozen=True, slots=True)
class SidebarEntry:
    """A single sidebar link."""

    label: str
    relative_url: str

    @classmethod
    def for_page(cls, page: WikiPage) -> SidebarEntry:
        return cls(label=page.placement.description, relative_url=page.relative_url)

    def render(self) -> str:
        return SIDEBAR_LINE_TEMPLATE.format(label=self.label, url=self.relative_url)


def _label_from_filename(path: Path) -> str:
    """Return the tag description encoded in a generated page filename."""
    return SUFFIX_PATTERN.sub("", path.stem)


class SidebarUpdater:
    """Append to, or rebuild, the sidebar file of a wiki checkout."""

    def __init__(self, context: WikiContext) -> None:
        self.context = context

    @property
    def path(self) -> Path:
        return self.context.sidebar_path

    def append(self, entry: SidebarEntry) -> None:
        """Append ``entry`` as one line, creating the sidebar if needed.

        The line is written with a single call so a failure never leaves a
        half-written entry behind. ``OSError`` propagates to the caller.
        """
        line = entry.render() + "\n"
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(line)
        logger.debug("sidebar entry added: %s", line.rstrip())

    def page_entries(self) -> list[SidebarEntry]:
        """Return an entry for every page file under the pages directory."""
        pages_root = self.context.pages_root
        if not pages_root.is_dir():
            return []
        entries = [
            SidebarEntry(
                label=_label_from_filename(path),
                relative_url=self.context.relative_url(path),
            )
            for path in pages_root.rglob(f"*{PAGE_EXTENSION}")
            if path.is_file()
        ]
        return sorted(entries, key=lambda entry: entry.relative_url)

    def rebuild(self) -> list[SidebarEntry]:
        """Rewrite the sidebar so each page on disk is listed exactly once.

        Lines that do not link into the pages directory (hand-written
        navigation, headings) are kept in their original order ahead of the
        regenerated page links.

        Returns
        -------
        list[SidebarEntry]
            The page entries written to the sidebar.
        """
        pages_url = f"{self.context.pages_dir}/"
        preserved: list[str] = []
        if self.path.exists():
            for line in self.path.read_text(encoding="utf-8").splitlines():
                link = _LINK_PATTERN.match(line)
                if link and link.group("url").lstrip("/").startswith(pages_url):
                    continue
                preserved.append(line)
        entries = self.page_entries()
        lines = preserved + [entry.render() for entry in entries]
        self.path.write_text("\n".join(lines) + "\n" if lines else "", encoding="utf-8")
        return entries


__all__ = ["SidebarEntry", "SidebarUpdater"]
