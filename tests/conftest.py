import pytest

from fetcher import FetchError


class FakeFetcher:
    """Serves canned pages by URL.

    A page may be a string, an exception to raise, or a list consumed one
    item per call (the last item repeats).
    """

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.calls = []

    async def fetch_text(self, url):
        self.calls.append(url)
        value = self.pages.get(url)
        if isinstance(value, list):
            value = value.pop(0) if len(value) > 1 else value[0]
        if value is None:
            raise FetchError(f"no page for {url}", "network")
        if isinstance(value, BaseException):
            raise value
        return value

    def count(self, url):
        return self.calls.count(url)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def fake_fetcher():
    return FakeFetcher


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def no_sleep():
    delays = []

    async def sleep(seconds):
        delays.append(seconds)

    sleep.delays = delays
    return sleep


THEME_HTML = """<!DOCTYPE html>
<html lang="en-US">
<head>
<link rel="stylesheet" id="twenty-style-css" href="https://example.com/wp-content/themes/twentytwentyone/style.css?ver=1.6" media="all" />
</head>
<body class="home blog">
<p>Hello world</p>
</body>
</html>
"""

THEME_CSS = """/*
Theme Name: Twenty Twenty-One
Theme URI: https://wordpress.org/themes/twentytwentyone/
Author: the WordPress team
Author URI: https://wordpress.org/
Description: Twenty Twenty-One is a blank canvas for your ideas.
Version: 1.6
*/

body { margin: 0; }
"""


@pytest.fixture
def theme_html():
    return THEME_HTML


@pytest.fixture
def theme_css():
    return THEME_CSS
