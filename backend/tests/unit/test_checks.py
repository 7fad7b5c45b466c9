"""
Unit tests for the on-page (synchronous) check units.
"""
import pytest

from fixtures.sample_pages import MIXED_CONTENT_PAGE_HTML, NO_IMAGES_PAGE_HTML
from seo_audit.services.checks import headings, images, meta, performance, security, social, technical
from seo_audit.services.scoring.models import Category, Priority, Status


def page(head: str = "", body: str = "") -> str:
    return f"<!DOCTYPE html><html><head>{head}</head><body>{body}</body></html>"


class TestMetaChecks:
    """Title, description and social meta tags."""

    @pytest.mark.parametrize("length,status,priority", [
        (9, Status.NEUTRAL, Priority.MEDIUM),
        (10, Status.PASS, Priority.LOW),
        (100, Status.PASS, Priority.LOW),
        (101, Status.NEUTRAL, Priority.MEDIUM),
    ])
    def test_title_length_bounds(self, make_context, length, status, priority):
        ctx = make_context(page(head=f"<title>{'a' * length}</title>"))

        result = meta.check_meta_title(ctx)

        assert result.status == status
        assert result.priority == priority
        assert result.details["length"] == length

    def test_missing_title(self, minimal_context):
        result = meta.check_meta_title(minimal_context)

        assert result.status == Status.WARNING
        assert result.priority == Priority.HIGH
        assert result.category == Category.META
        assert result.recommendation

    def test_title_whitespace_is_trimmed(self, make_context):
        ctx = make_context(page(head="<title>   Short   </title>"))

        assert meta.check_meta_title(ctx).details["length"] == 5

    @pytest.mark.parametrize("length,status,priority", [
        (49, Status.NEUTRAL, Priority.MEDIUM),
        (50, Status.PASS, Priority.LOW),
        (150, Status.PASS, Priority.MEDIUM),
        (500, Status.PASS, Priority.MEDIUM),
        (501, Status.NEUTRAL, Priority.MEDIUM),
    ])
    def test_description_length_bounds(self, make_context, length, status, priority):
        ctx = make_context(page(head=f'<meta name="description" content="{"d" * length}">'))

        result = meta.check_meta_description(ctx)

        assert result.status == status
        assert result.priority == priority

    def test_missing_description(self, minimal_context):
        result = meta.check_meta_description(minimal_context)

        assert result.status == Status.WARNING
        assert result.priority == Priority.HIGH

    def test_open_graph_requires_title_and_image(self, make_context):
        ctx = make_context(page(head='<meta property="og:title" content="T">'))

        result = meta.check_open_graph(ctx)

        assert result.status == Status.NEUTRAL
        assert result.details["og_tag_count"] == 1

    def test_meta_keywords_always_neutral(self, make_context):
        ctx = make_context(page(head='<meta name="keywords" content="seo, audit">'))

        assert meta.check_meta_keywords(ctx).status == Status.NEUTRAL

    def test_related_keywords(self, make_context):
        found = meta.check_related_keywords(make_context(page(body="<p>Local SEO for small shops</p>")))
        missing = meta.check_related_keywords(make_context(page(body="<p>Cats and dogs</p>")))

        assert found.status == Status.PASS
        assert found.details["keywords"] == ["local seo"]
        assert missing.status == Status.NEUTRAL


class TestHeadingChecks:
    """H1 / H2 / hierarchy."""

    @pytest.mark.parametrize("count,status,priority", [
        (0, Status.ERROR, Priority.HIGH),
        (1, Status.PASS, Priority.LOW),
        (2, Status.WARNING, Priority.LOW),
    ])
    def test_h1_count(self, make_context, count, status, priority):
        ctx = make_context(page(body="<h1>Heading</h1>" * count))

        result = headings.check_h1(ctx)

        assert result.status == status
        assert result.priority == priority
        assert result.category == Category.HEADINGS

    def test_missing_h2(self, make_context):
        result = headings.check_h2(make_context(page(body="<h1>Only</h1>")))

        assert result.status == Status.NEUTRAL
        assert result.priority == Priority.MEDIUM

    def test_hierarchy_distribution(self, make_context):
        ctx = make_context(page(body="<h1>a</h1><h2>b</h2><h2>c</h2><h3>d</h3>"))

        result = headings.check_heading_hierarchy(ctx)

        assert result.status == Status.NEUTRAL
        assert result.description == "Heading distribution: H1(1), H2(2), H3(1)"


class TestImageChecks:
    """Alt text, srcset, formats and titles."""

    def test_alt_not_applicable_without_images(self, make_context):
        assert images.check_image_alt(make_context(NO_IMAGES_PAGE_HTML)) is None

    def test_alt_within_tolerance(self, make_context):
        imgs = '<img src="x.png" alt="x">' * 9 + '<img src="y.png">'

        result = images.check_image_alt(make_context(page(body=imgs)))

        assert result.status == Status.PASS
        assert result.details["missing"] == 1

    def test_alt_beyond_tolerance(self, make_context):
        imgs = '<img src="x.png" alt="x">' * 8 + '<img src="y.png"><img src="z.png" alt="  ">'

        result = images.check_image_alt(make_context(page(body=imgs)))

        assert result.status == Status.WARNING
        assert result.priority == Priority.HIGH
        assert result.details["missing"] == 2
        assert result.details["missing_sources"] == ["y.png", "z.png"]
        assert result.description == 'This webpage is using "img" tags with empty or missing "alt" attribute!'

    def test_responsive_threshold_is_exclusive(self, make_context):
        one_of_five = '<img src="a.png" srcset="a2.png 2x">' + '<img src="b.png">' * 4
        two_of_five = '<img src="a.png" srcset="a2.png 2x">' * 2 + '<img src="b.png">' * 3

        low = images.check_responsive_images(make_context(page(body=one_of_five)))
        high = images.check_responsive_images(make_context(page(body=two_of_five)))

        assert low.status == Status.NEUTRAL
        assert low.priority == Priority.HIGH
        assert high.status == Status.PASS

    def test_responsive_share_rounds_half_up(self, make_context):
        # 41 of 200 is 20.5%, reported as 21%
        body = '<img src="a.png" srcset="a2.png 2x">' * 41 + '<img src="b.png">' * 159

        result = images.check_responsive_images(make_context(page(body=body)))

        assert result.details["percent"] == 21
        assert result.status == Status.PASS

    def test_responsive_not_applicable_without_images(self, make_context):
        assert images.check_responsive_images(make_context(NO_IMAGES_PAGE_HTML)) is None

    def test_modern_formats(self, make_context):
        ctx = make_context(page(body='<img src="/photo.AVIF">'))

        assert images.check_modern_formats(ctx).status == Status.PASS

    def test_image_titles_majority(self, make_context):
        ctx = make_context(page(body='<img src="a.png" title="a"><img src="b.png">'))

        # Exactly half is not a majority
        assert images.check_image_titles(ctx).status == Status.NEUTRAL


class TestPerformanceChecks:
    """Markup-derived performance hints."""

    def test_page_size_bands(self, make_context):
        medium = make_context(page(body="a" * 300 * 1024))
        heavy = make_context(page(body="a" * 1100 * 1024))

        assert performance.check_page_size(medium).status == Status.NEUTRAL
        heavy_result = performance.check_page_size(heavy)
        assert heavy_result.status == Status.WARNING
        assert heavy_result.priority == Priority.MEDIUM

    def test_page_size_not_rounded_to_whole_kb(self, make_context):
        just_under = performance.check_page_size(make_context("a" * int(199.6 * 1024)))
        at_limit = performance.check_page_size(make_context("a" * 200 * 1024))

        assert just_under.status == Status.PASS
        assert just_under.details["size_kb"] == 199.6
        assert at_limit.status == Status.NEUTRAL

    def test_http_requests_over_limit(self, make_context):
        ctx = make_context(page(body='<img src="a.png">' * 120))

        result = performance.check_http_requests(ctx)

        assert result.status == Status.WARNING
        assert result.priority == Priority.LOW
        assert result.details["total"] == 120

    def test_minification_without_resources(self, make_context):
        assert performance.check_minification(make_context(page())).status == Status.NEUTRAL

    def test_render_blocking(self, make_context):
        head = "<script src='a.js'></script>" * 4 + "<link rel='stylesheet' href='a.css'>"

        result = performance.check_render_blocking(make_context(page(head=head)))

        assert result.status == Status.WARNING
        assert result.details == {"scripts": 4, "stylesheets": 1}

    def test_deferred_scripts_do_not_block(self, make_context):
        head = "<script src='a.js' defer></script>" * 4 + "<script src='b.js' async></script>" * 4

        assert performance.check_render_blocking(make_context(page(head=head))).status == Status.PASS

    def test_missing_compression(self, make_context):
        result = performance.check_compression(make_context(page()))

        assert result.status == Status.WARNING
        assert result.priority == Priority.HIGH

    def test_image_metadata_vacuous_without_images(self, make_context):
        assert performance.check_image_metadata(make_context(NO_IMAGES_PAGE_HTML)).status == Status.PASS

    def test_image_metadata_with_jpeg(self, make_context):
        ctx = make_context(page(body='<img src="a.webp"><img src="b.jpg">'))

        assert performance.check_image_metadata(ctx).status == Status.NEUTRAL

    def test_large_dom(self, make_context):
        result = performance.check_dom_size(make_context(page(body="<span></span>" * 1500)))

        assert result.status == Status.NEUTRAL
        assert result.priority == Priority.MEDIUM


class TestSecurityChecks:
    """URL scheme, mixed content and response headers."""

    def test_http_url_fails_https(self, make_context):
        result = security.check_https(make_context(page(), url="http://example.com/"))

        assert result.status == Status.WARNING
        assert result.priority == Priority.HIGH
        assert result.category == Category.SECURITY

    def test_mixed_content_not_applicable_over_http(self, make_context):
        ctx = make_context(MIXED_CONTENT_PAGE_HTML, url="http://example.com/")

        assert security.check_mixed_content(ctx) is None

    def test_mixed_content_detected(self, make_context):
        result = security.check_mixed_content(make_context(MIXED_CONTENT_PAGE_HTML))

        assert result.status == Status.WARNING
        assert result.priority == Priority.HIGH
        assert result.details["count"] == 3

    def test_deprecated_tags(self, make_context):
        result = security.check_deprecated_html(make_context(page(body="<center><font>old</font></center>")))

        assert result.status == Status.WARNING
        assert result.details == {"center": 1, "font": 1}

    def test_plaintext_email(self, make_context):
        result = security.check_plaintext_emails(make_context(page(body="<p>Mail info@example.com</p>")))

        assert result.status == Status.NEUTRAL
        assert result.details["count"] == 1

    @pytest.mark.parametrize("server,status", [
        ("nginx", Status.PASS),
        ("Apache/2.4.41 (Ubuntu)", Status.WARNING),
        ("", Status.PASS),
    ])
    def test_server_signature(self, make_context, server, status):
        ctx = make_context(page(), headers={"Server": server})

        assert security.check_server_signature(ctx).status == status

    def test_header_keys_are_case_insensitive(self, make_context):
        ctx = make_context(page(), headers={"X-FRAME-OPTIONS": "deny", "x-content-type-options": "NoSniff"})

        assert security.check_frame_options(ctx).status == Status.PASS
        assert security.check_content_type_options(ctx).status == Status.PASS

    def test_missing_hsts(self, make_context):
        result = security.check_hsts(make_context(page()))

        assert result.status == Status.WARNING
        assert result.priority == Priority.MEDIUM


class TestTechnicalChecks:
    """Document setup, structure, URL and links."""

    def test_shortcut_icon_counts_as_favicon(self, make_context):
        ctx = make_context(page(head='<link rel="shortcut icon" href="/favicon.ico">'))

        assert technical.check_favicon(ctx).status == Status.PASS

    def test_http_equiv_charset(self, make_context):
        ctx = make_context(page(head='<meta http-equiv="content-type" content="text/html; charset=utf-8">'))

        assert technical.check_charset(ctx).status == Status.PASS

    def test_missing_charset_is_high_priority(self, minimal_context):
        result = technical.check_charset(minimal_context)

        assert result.status == Status.WARNING
        assert result.priority == Priority.HIGH

    def test_missing_doctype(self, minimal_context):
        result = technical.check_doctype(minimal_context)

        assert result.status == Status.WARNING
        assert result.priority == Priority.MEDIUM

    def test_viewport_missing(self, minimal_context):
        assert technical.check_viewport(minimal_context).priority == Priority.HIGH
        assert technical.check_mobile_friendly(minimal_context).status == Status.WARNING

    def test_viewport_without_initial_scale(self, make_context):
        ctx = make_context(page(head='<meta name="viewport" content="width=device-width">'))

        assert technical.check_viewport(ctx).status == Status.PASS
        assert technical.check_mobile_friendly(ctx).status == Status.WARNING

    def test_robots_meta_is_informational(self, make_context):
        result = technical.check_robots_meta(make_context(page(head='<meta name="robots" content="noindex">')))

        assert result.status == Status.NEUTRAL
        assert "noindex" in result.description

    def test_nested_tables_and_frames(self, make_context):
        ctx = make_context(page(body="<table><tr><td><table></table></td></tr></table>"))

        assert technical.check_nested_tables(ctx).status == Status.WARNING
        assert technical.check_frames(ctx).status == Status.PASS

    def test_url_shape(self, make_context):
        long_url = "https://example.com/" + "a" * 80
        ctx = make_context(page(), url=long_url + "_b")

        assert technical.check_url_length(ctx).status == Status.WARNING
        assert technical.check_url_underscores(ctx).status == Status.WARNING

    @pytest.mark.parametrize("href", ["", "#", "javascript:void(0)"])
    def test_broken_links(self, make_context, href):
        result = technical.check_broken_links(make_context(page(body=f'<a href="{href}">x</a>')))

        assert result.status == Status.WARNING
        assert result.priority == Priority.MEDIUM

    def test_internal_and_external_links(self, make_context):
        body = (
            '<a href="/a">a</a>'
            '<a href="https://example.com/b">b</a>'
            '<a href="https://other.com/" rel="nofollow noopener">c</a>'
            '<a href="https://another.org/">d</a>'
        )
        ctx = make_context(page(body=body))

        internal = technical.check_internal_links(ctx)
        external = technical.check_external_links(ctx)

        assert internal.details["internal"] == 2
        assert external.status == Status.NEUTRAL
        assert external.details == {"external": 2, "nofollow": 1}

    def test_invalid_json_ld(self, make_context):
        ctx = make_context(page(head='<script type="application/ld+json">{not json</script>'))

        result = technical.check_json_ld(ctx)

        assert result.status == Status.WARNING
        assert result.details["invalid"] == 1

    def test_json_ld_graph(self, make_context):
        ctx = make_context(page(head='<script type="application/ld+json">{"@graph": []}</script>'))

        result = technical.check_json_ld(ctx)

        assert result.status == Status.PASS
        assert result.details["types"] == ["Multiple types (Graph)"]

    def test_no_json_ld(self, minimal_context):
        result = technical.check_json_ld(minimal_context)

        assert result.status == Status.NEUTRAL
        assert result.priority == Priority.MEDIUM

    def test_small_inline_touch_targets(self, make_context):
        ctx = make_context(page(body='<button style="font-size: 12px">Go</button><a style="font-size:18px">ok</a>'))

        result = technical.check_touch_elements(ctx)

        assert result.status == Status.NEUTRAL
        assert result.details["small_elements"] == 1

    def test_font_readability_not_applicable_for_empty_document(self, make_context):
        assert technical.check_font_readability(make_context("")) is None

    def test_detects_libraries(self, perfect_context):
        assert technical.check_js_libraries(perfect_context).details["libraries"] == ["jQuery"]
        assert technical.check_css_frameworks(perfect_context).details["frameworks"] == ["Bootstrap"]


class TestSocialChecks:
    """Analytics tags, Twitter cards and profile links."""

    def test_social_profiles_one_result_each(self, perfect_context):
        results = social.check_social_profiles(perfect_context)

        assert [r.name for r in results] == [
            "LinkedIn Connectivity",
            "Instagram Connectivity",
            "YouTube Connectivity",
            "Pinterest Connectivity",
        ]
        assert [r.status for r in results] == [Status.PASS, Status.NEUTRAL, Status.PASS, Status.NEUTRAL]
        assert all(r.category == Category.SOCIAL for r in results)

    def test_universal_analytics(self, make_context):
        ctx = make_context(page(head="<script>ga('create', 'UA-12345-1', 'auto');</script>"))

        result = social.check_google_analytics(ctx)

        assert result.status == Status.PASS
        assert result.details["versions"] == ["Universal Analytics"]

    def test_facebook_pixel(self, make_context):
        ctx = make_context(page(head="<script>fbq('init', '123');</script>"))

        assert social.check_facebook_pixel(ctx).status == Status.PASS

    def test_tag_manager_noscript(self, make_context):
        body = '<noscript><iframe src="https://www.googletagmanager.com/ns.html?id=GTM-X"></iframe></noscript>'

        assert social.check_tag_manager(make_context(page(body=body))).status == Status.PASS

    def test_incomplete_twitter_card(self, make_context):
        ctx = make_context(page(head='<meta name="twitter:card" content="summary">'))

        assert social.check_twitter_cards(ctx).status == Status.NEUTRAL


@pytest.mark.parametrize("unit", [
    meta.check_meta_title,
    meta.check_meta_description,
    meta.check_open_graph,
    meta.check_related_keywords,
    headings.check_h1,
    headings.check_h2,
    images.check_image_alt,
    images.check_responsive_images,
    images.check_modern_formats,
    images.check_image_titles,
    performance.check_http_requests,
    performance.check_minification,
    performance.check_page_size,
    performance.check_inline_css,
    performance.check_compression,
    performance.check_dom_size,
    performance.check_cdn_usage,
    performance.check_image_metadata,
    performance.check_browser_caching,
    performance.check_render_blocking,
    security.check_https,
    security.check_mixed_content,
    security.check_deprecated_html,
    security.check_plaintext_emails,
    security.check_server_signature,
    security.check_hsts,
    security.check_content_type_options,
    security.check_frame_options,
    technical.check_viewport,
    technical.check_language,
    technical.check_favicon,
    technical.check_canonical,
    technical.check_charset,
    technical.check_doctype,
    technical.check_breadcrumbs,
    technical.check_json_ld,
    technical.check_mobile_friendly,
    technical.check_internal_links,
    technical.check_broken_links,
    social.check_google_analytics,
    social.check_twitter_cards,
], ids=lambda unit: unit.name)
def test_optimized_page_passes(perfect_context, unit):
    """The well-optimized sample page passes every check it should."""
    result = unit(perfect_context)

    assert result.status == Status.PASS, result.description
    assert result.name == unit.name
