r"""Extract the wiki-tagged block from a source file.

The scanner walks a file line by line looking for a begin-tag (``wiki/`` followed
by a path token) and collects every line up to, but excluding, the first
``end-wiki`` marker. A missing end marker captures through end of file. Only the
first tagged region in a file is honoured.

Example
-------
>>> from wikiator.scanner import scan_lines
>>> block = scan_lines(["pkg main", "// wiki/go/routing", "func Foo() {}", "// end-wiki"])
>>> block.lines
['// wiki/go/routing', 'func Foo() {}']
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from ._constants import BEGIN_TAG_PATTERN, END_TAG_PATTERN

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


class ScanState(enum.Enum):
    """Position of the scanner relative to the tagged region."""

    OUTSIDE = "outside"
    INSIDE = "inside"
    DONE = "done"


@dc.dataclass(slots=True)
class TaggedBlock:
    """Lines captured from a single tagged region.

    Attributes
    ----------
    lines : list[str]
        Captured lines without trailing newlines. The first entry is the
        begin-tag line itself; the list is empty when no tag was found.
    closed : bool
        ``True`` when an ``end-wiki`` marker terminated the block, ``False``
        when the capture ran to end of input.
    """

    lines: list[str] = dc.field(default_factory=list)
    closed: bool = False

    @property
    def tag_line(self) -> str | None:
        """Return the begin-tag line, or ``None`` for an empty block."""
        return self.lines[0] if self.lines else None

    def __bool__(self) -> bool:
        return bool(self.lines)


def scan_lines(lines: cabc.Iterable[str]) -> TaggedBlock:
    """Run the tag state machine over ``lines`` and return the captured block.

    Parameters
    ----------
    lines : Iterable[str]
        Source lines; trailing ``\n``/``\r\n`` are stripped before matching.

    Returns
    -------
    TaggedBlock
        The first tagged region, or an empty block when no begin-tag appears.
    """
    block = TaggedBlock()
    state = ScanState.OUTSIDE
    for raw in lines:
        line = raw.rstrip("\r\n")
        if state is ScanState.OUTSIDE:
            if BEGIN_TAG_PATTERN.search(line):
                state = ScanState.INSIDE
                block.lines.append(line)
            continue
        if END_TAG_PATTERN.search(line):
            state = ScanState.DONE
            block.closed = True
            break
        block.lines.append(line)
    return block


def scan_file(path: Path) -> TaggedBlock:
    """Scan the file at ``path`` for its tagged block.

    Undecodable bytes are replaced so binary files simply yield an empty block.
    ``OSError`` raised while opening or reading propagates to the caller.
    """
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        return scan_lines(handle)


__all__ = ["ScanState", "TaggedBlock", "scan_file", "scan_lines"]
