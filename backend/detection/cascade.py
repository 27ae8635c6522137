"""Theme detection cascade: independent methods tried in priority order until one names the theme."""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence
from urllib.parse import urljoin

from detection import paths
from detection.stylesheet import extract_theme_header

logger = logging.getLogger(__name__)

STYLE_CSS_LINK = re.compile(r'href\s*=\s*[\'"]([^\'"]*?/wp-content/themes/([^/\'"]+)/style\.css[^\'"]*)[\'"]', re.I)
ANY_THEME_CSS_LINK = re.compile(r'href\s*=\s*[\'"]([^\'"]*?/wp-content/themes/([^/\'"]+)/[^\'"]*?\.css[^\'"]*)[\'"]', re.I)
BODY_THEME_CLASS = re.compile(r'<body[^>]*?\bclass\s*=\s*[\'"]?[^\'">]*?\btheme-([^\'"\s>]+)', re.I)


@dataclass
class Match:
    name: str
    theme_url: Optional[str] = None
    fetch_details: bool = False


@dataclass(frozen=True)
class DetectionMethod:
    label: str
    detect: Callable[[str, str], Optional[Match]]


@dataclass
class CascadeResult:
    fields: Dict[str, Any] = field(default_factory=dict)
    methods: List[str] = field(default_factory=list)
    # set when a stylesheet could enrich the result but fetching it was deferred
    stylesheet_url: Optional[str] = None

    @property
    def name(self) -> Optional[str]:
        return self.fields.get("name")

    @property
    def detection_method(self) -> str:
        return ", ".join(self.methods)


def _absolute(site_url: str, href: str) -> str:
    return urljoin(site_url.rstrip("/") + "/", href)


def direct_stylesheet(site_url: str, body: str) -> Optional[Match]:
    m = STYLE_CSS_LINK.search(body)
    if not m:
        return None
    return Match(name=m.group(2), theme_url=_absolute(site_url, m.group(1)), fetch_details=True)


def path_frequency(site_url: str, body: str) -> Optional[Match]:
    counts = paths.theme_reference_counts(body)
    if not counts:
        return None
    # most_common is stable, so ties go to the first referenced theme
    name = counts.most_common(1)[0][0]
    return Match(name=name, theme_url=f"{site_url.rstrip('/')}/wp-content/themes/{name}/style.css")


def any_theme_stylesheet(site_url: str, body: str) -> Optional[Match]:
    m = ANY_THEME_CSS_LINK.search(body)
    if not m:
        return None
    return Match(name=m.group(2), theme_url=_absolute(site_url, m.group(1)))


def body_class(site_url: str, body: str) -> Optional[Match]:
    m = BODY_THEME_CLASS.search(body)
    if not m:
        return None
    return Match(name=m.group(1))


DEFAULT_METHODS = [
    DetectionMethod("Direct CSS", direct_stylesheet),
    DetectionMethod("Path Analysis", path_frequency),
    DetectionMethod("CSS Pattern", any_theme_stylesheet),
    DetectionMethod("Body Class", body_class),
]


def merge_details(fields: Dict[str, Any], details: Dict[str, Any]) -> None:
    """Merge stylesheet header fields. The slug stays the name; the header's name becomes display_name."""
    details = dict(details)
    header_name = details.pop("name", None)
    if header_name:
        fields["display_name"] = header_name
    fields.update(details)


class DetectionCascade:
    def __init__(self, fetcher, methods: Sequence[DetectionMethod] = DEFAULT_METHODS):
        self.fetcher = fetcher
        self.methods = list(methods)

    async def run(self, site_url: str, body: str, fetch_details: bool = True) -> CascadeResult:
        """Apply the methods in order, stopping at the first one that names a theme.

        With ``fetch_details`` the matched stylesheet is fetched and its header
        merged before returning. Without it the stylesheet URL is left on the
        result for the caller to enrich later.
        """
        result = CascadeResult()
        for method in self.methods:
            match = method.detect(site_url, body)
            if match is None:
                continue
            logger.debug("%s matched theme %r on %s", method.label, match.name, site_url)
            result.methods.append(method.label)
            result.fields["name"] = match.name
            if match.theme_url:
                result.fields["theme_url"] = match.theme_url
            if match.fetch_details and match.theme_url:
                if fetch_details:
                    merge_details(result.fields, await self.fetch_details(match.theme_url))
                else:
                    result.stylesheet_url = match.theme_url
            break
        return result

    async def fetch_details(self, stylesheet_url: str) -> Dict[str, Any]:
        """Header fields of the stylesheet, or ``{}`` if it can't be fetched."""
        try:
            css = await self.fetcher.fetch_text(stylesheet_url)
        except Exception as e:
            logger.debug("Could not fetch theme stylesheet %s: %s", stylesheet_url, e)
            return {}
        return extract_theme_header(css)
