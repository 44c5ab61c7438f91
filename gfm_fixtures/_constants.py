"""Common literal values used across gfm_fixtures.

These constants keep slot names, environment variable names, and the
GitHub-rendered markers in one place so intake, the orchestrator, the
extractor, and tests agree on them.

Examples
--------
>>> from gfm_fixtures import _constants
>>> _constants.SLOT_FILENAME_TEMPLATE.format(index=3)
'slot-3.md'
>>> bool(_constants.SLOT_FILENAME_PATTERN.match(" slot-12.md "))
True
"""

import re

SLOT_NAME_TEMPLATE = "slot-{index}"
SLOT_FILENAME_TEMPLATE = SLOT_NAME_TEMPLATE + ".md"
SLOT_FILENAME_PATTERN = re.compile(r"^\s*slot-(\d+)\.md\s*$")
PLACEHOLDER_CONTENT = "."

TOKEN_ENV_VARS = ("GH_TOKEN", "GITHUB_TOKEN")
FORCE_ENV_VAR = "UPDATE"

MARKDOWN_LANGUAGE = "Markdown"
OUTPUT_SUFFIX = ".html"
OFFLINE_SEGMENT = "offline"
COMMENT_SEGMENT = "comment"
