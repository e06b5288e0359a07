"""Drive the scan → parse → write → sidebar pipeline over a batch of files.

:class:`WikiPublisher` processes files one at a time against a single
:class:`~wikiator.context.WikiContext`. Each file yields a :class:`FileOutcome`
instead of raising, so an unreadable file or a malformed tag is reported and
the batch carries on. Only a run of consecutive page-write failures, which
points at an unwritable wiki checkout, aborts the batch.

Example
-------
>>> from pathlib import Path
>>> from wikiator.context import WikiContext
>>> from wikiator.pipeline import WikiPublisher, walk_files
>>> publisher = WikiPublisher(WikiContext(Path("/tmp/wiki")))  # doctest: +SKIP
>>> report = publisher.process_files(walk_files(Path("src")))  # doctest: +SKIP
>>> [outcome.page.relative_url for outcome in report.published]  # doctest: +SKIP
['/pages/go/routing-qzx.md']
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import os
import typing as typ
from pathlib import Path

from .pages import PageWriteError, WikiPage, WikiPageWriter
from .scanner import scan_file
from .sidebar import SidebarEntry, SidebarUpdater
from .tags import MalformedTagError, parse_tag

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .context import WikiContext

logger = logging.getLogger(__name__)

_SKIPPED_DIRS = frozenset({".git"})


class OutcomeStatus(enum.Enum):
    """How processing a single source file ended."""

    NO_TAG = "no-tag"
    PUBLISHED = "published"
    SIDEBAR_FAILED = "sidebar-failed"
    MALFORMED_TAG = "malformed-tag"
    UNREADABLE = "unreadable"
    WRITE_FAILED = "write-failed"

    @property
    def is_failure(self) -> bool:
        return self in {
            OutcomeStatus.MALFORMED_TAG,
            OutcomeStatus.UNREADABLE,
            OutcomeStatus.WRITE_FAILED,
        }


@dc.dataclass(slots=True)
class FileOutcome:
    """Result of processing one source file."""

    path: Path
    status: OutcomeStatus
    page: WikiPage | None = None
    message: str | None = None


@dc.dataclass(slots=True)
class RunReport:
    """Ordered outcomes for every file a run touched."""

    outcomes: list[FileOutcome] = dc.field(default_factory=list)

    @property
    def published(self) -> list[FileOutcome]:
        """Outcomes that produced a page, with or without a sidebar entry."""
        return [outcome for outcome in self.outcomes if outcome.page is not None]

    @property
    def failures(self) -> list[FileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status.is_failure]

    @property
    def ok(self) -> bool:
        return not self.failures


def walk_files(root: Path) -> list[Path]:
    """Return every regular file below ``root`` in a stable order.

    ``.git`` directories are skipped. A ``root`` that is itself a file is
    returned as the only entry. Dangling symlinks, sockets and FIFOs are left
    out; a symlink to a regular file is kept.
    """
    if root.is_file():
        return [root]
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in _SKIPPED_DIRS)
        candidates = (Path(dirpath) / name for name in sorted(filenames))
        found.extend(path for path in candidates if path.is_file())
    return found


class WikiPublisher:
    """Turn tagged source files into wiki pages and sidebar entries."""

    def __init__(self, context: WikiContext) -> None:
        self.context = context
        self.writer = WikiPageWriter(context)
        self.sidebar = SidebarUpdater(context)
        self._consecutive_write_failures = 0

    def process_file(self, path: Path) -> FileOutcome:
        """Publish the tagged block in ``path``, if any.

        Raises
        ------
        PageWriteError
            Only when page writes have failed ``max_write_failures`` times in a
            row; isolated failures are returned as ``WRITE_FAILED`` outcomes.
        """
        try:
            block = scan_file(path)
        except OSError as exc:
            logger.warning("skipping unreadable file %s: %s", path, exc)
            return FileOutcome(path, OutcomeStatus.UNREADABLE, message=str(exc))

        if not block:
            return FileOutcome(path, OutcomeStatus.NO_TAG)

        try:
            placement = parse_tag(block.tag_line)
        except MalformedTagError as exc:
            logger.warning("skipping %s: %s", path, exc)
            return FileOutcome(path, OutcomeStatus.MALFORMED_TAG, message=str(exc))

        try:
            page = self.writer.write(placement, block.lines)
        except PageWriteError as exc:
            self._consecutive_write_failures += 1
            if self._consecutive_write_failures >= self.context.max_write_failures:
                raise
            logger.warning("could not write page for %s: %s", path, exc)
            return FileOutcome(path, OutcomeStatus.WRITE_FAILED, message=str(exc))
        self._consecutive_write_failures = 0

        try:
            self.sidebar.append(SidebarEntry.for_page(page))
        except OSError as exc:
            logger.warning(
                "page %s written but sidebar update failed: %s", page.relative_url, exc
            )
            return FileOutcome(
                path, OutcomeStatus.SIDEBAR_FAILED, page=page, message=str(exc)
            )
        return FileOutcome(path, OutcomeStatus.PUBLISHED, page=page)

    def process_files(self, paths: cabc.Iterable[Path]) -> RunReport:
        """Process ``paths`` in order and collect their outcomes."""
        report = RunReport()
        for path in paths:
            report.outcomes.append(self.process_file(path))
        return report


__all__ = [
    "FileOutcome",
    "OutcomeStatus",
    "RunReport",
    "WikiPublisher",
    "walk_files",
]
