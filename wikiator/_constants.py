"""Common literal values used across wikiator.

These constants keep tag patterns, wiki filenames, and hook text centralized
so the scanner, writers, and tests can import the same values without
drifting. Intended for internal use within the wikiator package.

Examples
--------
>>> from wikiator import _constants
>>> _constants.BEGIN_TAG_PATTERN.search("// wiki/go/routing").group("path")
'go/routing'
>>> _constants.SIDEBAR_LINE_TEMPLATE.format(label="routing", url="/pages/go/x.md")
'- [routing](/pages/go/x.md)'
"""

import re
import string

END_TAG = "end-wiki"
BEGIN_TAG_PATTERN = re.compile(r"wiki/(?P<path>\S+)")
END_TAG_PATTERN = re.compile(re.escape(END_TAG))

PAGES_DIRNAME = "pages"
SIDEBAR_FILENAME = "_sidebar.md"
SIDEBAR_LINE_TEMPLATE = "- [{label}]({url})"

SUFFIX_ALPHABET = string.ascii_lowercase
SUFFIX_LENGTH = 3
SUFFIX_PATTERN = re.compile(r"-[a-z]{3}$")
PAGE_EXTENSION = ".md"

HOOK_RELATIVE_PATH = ".git/hooks/pre-commit"
HOOK_SHEBANG = "#!/bin/sh"
HOOK_COMMAND_TEMPLATE = "wikiator sync {project_dir} || true"
