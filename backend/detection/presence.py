"""WordPress presence check: high-confidence markers in the page markup."""

import re
from typing import List, Optional

WORDPRESS_INDICATORS = ["/wp-content/", "wp-includes", "wp-json", "wp_head"]

GENERATOR_PATTERN = re.compile(r'<meta[^>]+generator[^>]+WordPress\s*([\d.]+)?', re.I)


def matched_indicators(body: str) -> List[str]:
    found = [ind for ind in WORDPRESS_INDICATORS if ind in body]
    if GENERATOR_PATTERN.search(body):
        found.append("generator")
    return found


def is_wordpress(body: str) -> bool:
    return bool(matched_indicators(body))


def wordpress_version(body: str) -> Optional[str]:
    """Version from the generator meta tag, if the site still exposes it."""
    m = GENERATOR_PATTERN.search(body)
    if m and m.group(1):
        return m.group(1).rstrip(".")
    return None
