"""Publish tagged source comments as pages in a code wiki.

This package exposes the CLI entry points used by the ``wikiator`` console
script and the pre-commit hook it installs, plus the building blocks behind
them: the tag scanner, tag parser, page writer, and sidebar updater.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that configures logging and invokes the app.

Examples
--------
>>> from wikiator import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
