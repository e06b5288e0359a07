"""Run-scoped settings threaded through the scanner, writers, and orchestrator."""

from __future__ import annotations

import dataclasses as dc
import random
from pathlib import Path

from ._constants import PAGES_DIRNAME, SIDEBAR_FILENAME


@dc.dataclass(slots=True)
class WikiContext:
    """Describe the wiki checkout a run writes into.

    Attributes
    ----------
    wiki_root : Path
        Filesystem root of the wiki checkout.
    pages_dir : str
        Directory below ``wiki_root`` that holds generated pages.
    sidebar_file : str
        Sidebar filename relative to ``wiki_root``.
    rng : random.Random
        Source of page filename suffixes; seed it for reproducible names.
    max_write_failures : int
        Consecutive page-write failures tolerated before the run aborts.
    """

    wiki_root: Path
    pages_dir: str = PAGES_DIRNAME
    sidebar_file: str = SIDEBAR_FILENAME
    rng: random.Random = dc.field(default_factory=random.Random)
    max_write_failures: int = 3

    @property
    def pages_root(self) -> Path:
        return self.wiki_root / self.pages_dir

    @property
    def sidebar_path(self) -> Path:
        return self.wiki_root / self.sidebar_file

    def relative_url(self, path: Path) -> str:
        """Return ``path`` relative to the wiki root as a ``/``-prefixed URL."""
        relative = path.relative_to(self.wiki_root)
        return "/" + relative.as_posix()


__all__ = ["WikiContext"]
