from detection.paths import MAX_PLUGINS, scan_plugins, scan_themes, theme_reference_counts


def test_plugins_deduplicated():
    html = '<script src="/wp-content/plugins/contact-form-7/includes/js/index.js"></script>' * 20
    assert scan_plugins(html) == ["contact-form-7"]


def test_plugins_first_occurrence_order():
    html = (
        "/wp-content/plugins/woocommerce/assets/a.css "
        "/wp-content/plugins/elementor/b.js?ver=3 "
        "/wp-content/plugins/woocommerce/c.js"
    )
    assert scan_plugins(html) == ["woocommerce", "elementor"]


def test_plugins_capped():
    html = " ".join(f"/wp-content/plugins/plugin-{i}/x.js" for i in range(25))
    plugins = scan_plugins(html)
    assert len(plugins) == MAX_PLUGINS == 10
    assert plugins[0] == "plugin-0"


def test_plugins_skip_placeholders():
    html = "/wp-content/plugins/index.php /wp-content/plugins/readme.txt /wp-content/plugins/akismet/a.js"
    assert scan_plugins(html) == ["akismet"]


def test_plugin_segment_stops_at_query_and_quote():
    html = "<link href='/wp-content/plugins/jetpack?ver=1'><a href=\"/wp-content/plugins/yoast\">"
    assert scan_plugins(html) == ["jetpack", "yoast"]


def test_theme_counts_and_exclusions():
    html = (
        "/wp-content/themes/astra/a.css /wp-content/themes/uploads/x "
        "/wp-content/themes/kadence/b.js /wp-content/themes/astra/c.js "
        "/wp-content/themes/mu-plugins/y /wp-content/themes/cache/z"
    )
    counts = theme_reference_counts(html)
    assert dict(counts) == {"astra": 2, "kadence": 1}
    assert scan_themes(html) == ["astra", "kadence"]


def test_themes_capped():
    html = " ".join(f"/wp-content/themes/t{i}/style.css" for i in range(8))
    assert scan_themes(html) == ["t0", "t1", "t2", "t3", "t4"]


def test_nothing_found():
    assert scan_plugins("<html></html>") == []
    assert scan_themes("<html></html>") == []
