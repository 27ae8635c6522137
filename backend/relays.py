"""Relay endpoints: third-party services that fetch a page server-side and hand its body back."""

import json
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import quote

RELAY_MODES = ("direct", "json")


@dataclass(frozen=True)
class Relay:
    name: str
    template: str  # must contain "{url}"
    mode: str = "direct"  # direct: body is the page, json: body is an envelope
    timeout: float = 15.0
    encode: bool = True
    payload_field: str = "contents"

    def build_url(self, target: str) -> str:
        value = quote(target, safe="") if self.encode else target
        return self.template.replace("{url}", value)


DEFAULT_RELAYS = [
    Relay("corsproxy.io", "https://corsproxy.io/?{url}", mode="direct", timeout=15.0),
    Relay("allorigins", "https://api.allorigins.win/get?url={url}", mode="json", timeout=12.0),
    Relay("thingproxy", "https://thingproxy.freeboard.io/fetch/{url}", mode="json", timeout=12.0),
    Relay("cors.bridged.cc", "https://cors.bridged.cc/{url}", mode="direct", timeout=15.0, encode=False),
    Relay("cors.eu.org", "https://cors.eu.org/{url}", mode="direct", timeout=15.0, encode=False),
]


def load_relays(raw: Optional[str]) -> List[Relay]:
    """Parse a JSON relay list (as found in WPTD_RELAYS). Empty or missing means the defaults."""
    if not raw or not raw.strip():
        return list(DEFAULT_RELAYS)
    try:
        items = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"WPTD_RELAYS is not valid JSON: {e}") from e
    if not isinstance(items, list):
        raise ValueError("WPTD_RELAYS must be a JSON list of relay objects")

    relays = []
    for i, item in enumerate(items):
        if not isinstance(item, dict) or "template" not in item:
            raise ValueError(f"WPTD_RELAYS[{i}] must be an object with a 'template' key")
        if "{url}" not in item["template"]:
            raise ValueError(f"WPTD_RELAYS[{i}] template has no {{url}} placeholder")
        mode = item.get("mode", "direct")
        if mode not in RELAY_MODES:
            raise ValueError(f"WPTD_RELAYS[{i}] has unknown mode {mode!r}")
        encode = item.get("encode", True)
        if not isinstance(encode, bool):
            raise ValueError(f"WPTD_RELAYS[{i}] encode must be true or false, got {encode!r}")
        timeout = item.get("timeout", 15)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValueError(f"WPTD_RELAYS[{i}] timeout must be a positive number, got {timeout!r}")
        relays.append(Relay(
            name=item.get("name", f"relay-{i + 1}"),
            template=item["template"],
            mode=mode,
            timeout=float(timeout),
            encode=encode,
            payload_field=item.get("payload_field", "contents"),
        ))
    return relays
