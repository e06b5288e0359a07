"""Parse begin-tag lines into page placement metadata.

A begin-tag looks like ``wiki/<category>[/<module>]/<description>`` and may sit
anywhere inside a line, typically within a comment. The category doubles as the
fenced-code language hint, the optional module becomes a subdirectory, and the
description names the page.

Example
-------
>>> from wikiator.tags import parse_tag
>>> parse_tag("// wiki/go/http/routing")
PlacementInfo(category='go', module='http', description='routing')
"""

from __future__ import annotations

import dataclasses as dc

from ._constants import BEGIN_TAG_PATTERN

_RELATIVE_SEGMENTS = frozenset({".", ".."})


class MalformedTagError(ValueError):
    """Raised when a begin-tag does not have two or three path segments."""

    def __init__(self, line: str, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed wiki tag {line.strip()!r}: {reason}")


@dc.dataclass(frozen=True, slots=True)
class PlacementInfo:
    """Where a page lives inside the wiki and how it is titled."""

    category: str
    module: str | None
    description: str

    @property
    def subpath(self) -> str:
        """Return ``<module>/<description>`` or just ``<description>``."""
        if self.module:
            return f"{self.module}/{self.description}"
        return self.description


def parse_tag(line: str) -> PlacementInfo:
    """Return the :class:`PlacementInfo` encoded in a begin-tag line.

    Parameters
    ----------
    line : str
        Raw line containing the ``wiki/`` prefix.

    Returns
    -------
    PlacementInfo
        Category, optional module, and description taken from the path token.

    Raises
    ------
    MalformedTagError
        If the line carries no path token, the token does not split into two
        or three segments, or any segment is empty, ``.`` or ``..``.
    """
    found = BEGIN_TAG_PATTERN.search(line)
    if found is None:
        raise MalformedTagError(line, "no 'wiki/<path>' token found")

    segments = found.group("path").split("/")
    if any(not segment for segment in segments):
        raise MalformedTagError(line, "empty path segment")
    if any(segment in _RELATIVE_SEGMENTS for segment in segments):
        raise MalformedTagError(line, "relative path segment")

    match segments:
        case [category, description]:
            return PlacementInfo(category=category, module=None, description=description)
        case [category, module, description]:
            return PlacementInfo(
                category=category, module=module, description=description
            )
        case _:
            msg = f"expected 2 or 3 path segments, got {len(segments)}"
            raise MalformedTagError(line, msg)


__all__ = ["MalformedTagError", "PlacementInfo", "parse_tag"]
