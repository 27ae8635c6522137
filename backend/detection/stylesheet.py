"""Theme header parsing for a theme's style.css."""

import re
from typing import Any, Dict

HEADER_WINDOW = 2000
UNKNOWN_CHILD_THEME = "Unknown Child Theme"

HEADER_BLOCK = re.compile(r'/\*(.*?)\*/', re.S)

# Anchored on the label so "Author URI:" never feeds "author" and "Theme URI:" never feeds "name".
FIELD_PATTERNS = {
    "name": re.compile(r'^[\s*#@]*Theme Name:[ \t]*(.+)$', re.I | re.M),
    "author": re.compile(r'^[\s*#@]*Author:[ \t]*(.+)$', re.I | re.M),
    "version": re.compile(r'^[\s*#@]*Version:[ \t]*(.+)$', re.I | re.M),
    "description": re.compile(r'^[\s*#@]*Description:[ \t]*(.+)$', re.I | re.M),
    "uri": re.compile(r'^[\s*#@]*Theme URI:[ \t]*(.+)$', re.I | re.M),
    "template": re.compile(r'^[\s*#@]*Template:[ \t]*(.+)$', re.I | re.M),
}


def extract_theme_header(css: str) -> Dict[str, Any]:
    """Return the header fields found in the first comment block; ``{}`` if there is none."""
    m = HEADER_BLOCK.search(css[:HEADER_WINDOW])
    if not m:
        return {}
    header = m.group(1)

    info: Dict[str, Any] = {}
    for field, pattern in FIELD_PATTERNS.items():
        found = pattern.search(header)
        if not found:
            continue
        value = found.group(1).strip()
        if not value:
            continue
        if field == "template":
            info["child_theme"] = {
                "name": info.get("name", UNKNOWN_CHILD_THEME),
                "parent": value,
            }
        else:
            info[field] = value
    return info
