r"""Render tagged blocks into wiki pages and write them under ``pages/``.

Every page is a level-one heading derived from the tag description followed by
the captured lines inside a fenced code block whose language hint is the tag
category. Filenames carry a three-letter random suffix so repeated runs never
overwrite an existing page.

Example
-------
>>> from wikiator.pages import render_page
>>> from wikiator.tags import PlacementInfo
>>> render_page(PlacementInfo("go", None, "routing"), ["wiki/go/routing", "func Foo() {}"])
'# Routing\n\n```go\nfunc Foo() {}\n```\n'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from ._constants import PAGE_EXTENSION, SUFFIX_ALPHABET, SUFFIX_LENGTH

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import random
    from pathlib import Path

    from .context import WikiContext
    from .tags import PlacementInfo

logger = logging.getLogger(__name__)

_MAX_NAME_ATTEMPTS = 16


class PageWriteError(RuntimeError):
    """Raised when a wiki page cannot be created or written."""


@dc.dataclass(frozen=True, slots=True)
class WikiPage:
    """A page written into the wiki checkout."""

    path: Path
    relative_url: str
    placement: PlacementInfo


def heading_for(description: str) -> str:
    """Return the page heading for a tag description.

    Hyphens become spaces and the first letter of every word is upper-cased;
    the rest of each word is left untouched.

    >>> heading_for("request-routing")
    'Request Routing'
    """
    words = description.replace("-", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def render_page(placement: PlacementInfo, lines: cabc.Sequence[str]) -> str:
    """Render a tagged block as markdown.

    The first entry of ``lines`` is the begin-tag line and is replaced by the
    opening fence; a closing fence is appended after the remaining lines.
    """
    rendered = [
        f"# {heading_for(placement.description)}",
        "",
        f"```{placement.category}",
        *lines[1:],
        "```",
    ]
    return "\n".join(rendered) + "\n"


def random_suffix(rng: random.Random) -> str:
    """Return ``SUFFIX_LENGTH`` random lowercase letters."""
    return "".join(rng.choices(SUFFIX_ALPHABET, k=SUFFIX_LENGTH))


class WikiPageWriter:
    """Create page files beneath the context's ``pages/`` directory."""

    def __init__(self, context: WikiContext) -> None:
        self.context = context

    def target_path(self, placement: PlacementInfo) -> Path:
        """Return a fresh candidate path for ``placement`` (not yet created)."""
        category_dir = self.context.pages_root / placement.category
        suffix = random_suffix(self.context.rng)
        return category_dir / f"{placement.subpath}-{suffix}{PAGE_EXTENSION}"

    def write(self, placement: PlacementInfo, lines: cabc.Sequence[str]) -> WikiPage:
        """Write ``lines`` as a new page and return where it landed.

        Parameters
        ----------
        placement : PlacementInfo
            Parsed begin-tag describing the page location and title.
        lines : Sequence[str]
            Tagged block, begin-tag line first.

        Returns
        -------
        WikiPage
            The created file and its wiki-relative URL.

        Raises
        ------
        PageWriteError
            If the directory or file cannot be created, or the write fails.
            A partially written file is removed before raising.
        """
        content = render_page(placement, lines)
        for _ in range(_MAX_NAME_ATTEMPTS):
            path = self.target_path(placement)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                msg = f"Unable to create page directory {path.parent}: {exc}"
                raise PageWriteError(msg) from exc
            try:
                handle = path.open("x", encoding="utf-8")
            except FileExistsError:
                logger.debug("page name %s already taken, drawing a new suffix", path)
                continue
            except OSError as exc:
                msg = f"Unable to create page {path}: {exc}"
                raise PageWriteError(msg) from exc
            try:
                with handle:
                    handle.write(content)
            except OSError as exc:
                path.unlink(missing_ok=True)
                msg = f"Unable to write page {path}: {exc}"
                raise PageWriteError(msg) from exc
            return WikiPage(
                path=path,
                relative_url=self.context.relative_url(path),
                placement=placement,
            )
        msg = (
            f"No free filename for '{placement.subpath}' after "
            f"{_MAX_NAME_ATTEMPTS} attempts"
        )
        raise PageWriteError(msg)


__all__ = ["PageWriteError", "WikiPage", "WikiPageWriter", "heading_for", "render_page"]
