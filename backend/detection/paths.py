"""Plugin and theme directory references in raw markup."""

import re
from collections import Counter
from typing import List

MAX_PLUGINS = 10
MAX_THEMES = 5

PLUGIN_PATTERN = re.compile(r'wp-content/plugins/([^/\'"?\s]+)', re.I)
THEME_PATTERN = re.compile(r'/wp-content/themes/([^/\'"?\s]+)', re.I)

IGNORED_PLUGIN_SEGMENTS = {"index.php", "readme.txt"}
IGNORED_THEME_SEGMENTS = {"plugins", "uploads", "cache", "mu-plugins", "index.php"}


def scan_plugins(body: str) -> List[str]:
    plugins: List[str] = []
    for m in PLUGIN_PATTERN.finditer(body):
        slug = m.group(1)
        if slug.lower() in IGNORED_PLUGIN_SEGMENTS or slug in plugins:
            continue
        plugins.append(slug)
        if len(plugins) >= MAX_PLUGINS:
            break
    return plugins


def theme_reference_counts(body: str) -> Counter:
    """How often each theme directory is referenced, in order of first reference."""
    counts: Counter = Counter()
    for m in THEME_PATTERN.finditer(body):
        slug = m.group(1)
        if slug.lower() not in IGNORED_THEME_SEGMENTS:
            counts[slug] += 1
    return counts


def scan_themes(body: str) -> List[str]:
    return list(theme_reference_counts(body))[:MAX_THEMES]
