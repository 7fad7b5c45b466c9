"""
Check registry - every check the default audit runs, in report order.

Results are reported in this order regardless of which network checks
finish first. Add a check by appending it here.
"""
from seo_audit.services.checks import (
    crawl_files,
    headings,
    images,
    meta,
    performance,
    security,
    server,
    social,
    technical,
)
from seo_audit.services.checks.base import CheckUnit

DEFAULT_CHECKS: tuple[CheckUnit, ...] = (
    # Meta
    meta.check_meta_title,
    meta.check_meta_description,
    meta.check_open_graph,
    meta.check_meta_keywords,
    # Headings
    headings.check_h1,
    headings.check_h2,
    headings.check_heading_hierarchy,
    # Images
    images.check_image_alt,
    images.check_responsive_images,
    images.check_modern_formats,
    # Performance
    performance.check_http_requests,
    performance.check_minification,
    performance.check_page_size,
    performance.check_inline_css,
    # Security
    server.check_ssl_certificate,
    security.check_https,
    security.check_mixed_content,
    security.check_deprecated_html,
    security.check_plaintext_emails,
    # Server
    server.check_ip_canonicalization,
    server.check_spf_record,
    server.check_ads_txt,
    server.check_custom_404,
    server.check_url_canonicalization,
    # Technical
    technical.check_viewport,
    technical.check_language,
    technical.check_favicon,
    technical.check_canonical,
    technical.check_robots_meta,
    # Crawl files
    crawl_files.check_sitemap,
    crawl_files.check_robots_txt,
    # Analytics
    social.check_google_analytics,
    social.check_facebook_pixel,
    social.check_tag_manager,
    # Structured data
    technical.check_json_ld,
    technical.check_microdata,
    # Mobile
    technical.check_mobile_friendly,
    technical.check_touch_elements,
    technical.check_font_readability,
    # Social
    social.check_twitter_cards,
    # Links
    technical.check_internal_links,
    technical.check_external_links,
    technical.check_broken_links,
    # Response headers
    performance.check_compression,
    security.check_server_signature,
    security.check_hsts,
    security.check_content_type_options,
    security.check_frame_options,
    # Content structure
    technical.check_charset,
    technical.check_doctype,
    technical.check_nested_tables,
    technical.check_frames,
    technical.check_text_ratio,
    technical.check_url_length,
    technical.check_url_underscores,
    technical.check_breadcrumbs,
    images.check_image_titles,
    technical.check_js_libraries,
    technical.check_css_frameworks,
    # Social profiles
    social.check_social_profiles,
    # Extra performance
    performance.check_dom_size,
    performance.check_cdn_usage,
    performance.check_image_metadata,
    performance.check_browser_caching,
    performance.check_render_blocking,
    # Keywords
    meta.check_related_keywords,
)
