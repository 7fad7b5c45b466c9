"""
Document Parser - Tolerant, read-only view over a fetched HTML page.

Wraps BeautifulSoup (``html.parser`` backend) so malformed markup is repaired
best-effort and queries for missing nodes yield empty results instead of
raising.
"""
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction

from seo_audit.logger import logger

# Strings under these tags are not page copy
NON_VISIBLE_TAGS = frozenset({"script", "style", "noscript", "template"})

_SKIPPED_STRING_TYPES = (Comment, Declaration, Doctype, ProcessingInstruction)


class ParsedDocument:
    """Queryable document. Query methods never mutate the underlying tree."""

    def __init__(self, html: str, base_url: str = ""):
        self.raw_html = html or ""
        self.base_url = base_url
        try:
            self._soup = BeautifulSoup(self.raw_html, "html.parser")
        except Exception as e:
            # html.parser can still choke on pathological declarations
            logger.warning(f"HTML parse failed, using empty document: {e}")
            self._soup = BeautifulSoup("", "html.parser")

    # --- Element queries ---

    def select(self, selector: str) -> list[Tag]:
        """All elements matching a CSS selector; [] for an invalid selector."""
        try:
            return self._soup.select(selector)
        except Exception as e:
            logger.debug(f"Invalid selector {selector!r}: {e}")
            return []

    def select_one(self, selector: str) -> Optional[Tag]:
        matches = self.select(selector)
        return matches[0] if matches else None

    def count(self, selector: str) -> int:
        return len(self.select(selector))

    def exists(self, selector: str) -> bool:
        return self.select_one(selector) is not None

    def attr(self, selector: str, name: str) -> Optional[str]:
        """Attribute of the first matching element, or None."""
        element = self.select_one(selector)
        if element is None:
            return None
        value = element.get(name)
        if isinstance(value, list):
            # Multi-valued attributes (rel, class) come back as lists
            return " ".join(value)
        return value

    def resolve(self, href: str) -> str:
        """Absolute form of a (possibly relative) URL, like DOM ``.href``."""
        return urljoin(self.base_url, href) if self.base_url else href

    # --- Document-level properties ---

    @property
    def root(self) -> Tag:
        return self._soup.find("html") or self._soup

    @property
    def head(self) -> Optional[Tag]:
        return self._soup.find("head")

    @property
    def body(self) -> Optional[Tag]:
        """The <body> element; the whole document when the tag was omitted."""
        body = self._soup.find("body")
        if body is not None:
            return body
        return self._soup if self.element_count else None

    @property
    def html_lang(self) -> Optional[str]:
        html_tag = self._soup.find("html")
        if html_tag is None:
            return None
        return html_tag.get("lang") or None

    @property
    def doctype(self) -> Optional[str]:
        """Name of the doctype declaration (``"html"`` for HTML5)."""
        for node in self._soup.contents:
            if isinstance(node, Doctype):
                parts = str(node).split()
                # html.parser only strips an upper-case "DOCTYPE " prefix
                if parts and parts[0].lower() == "doctype":
                    parts = parts[1:]
                return parts[0].lower() if parts else ""
        return None

    @property
    def element_count(self) -> int:
        return len(self._soup.find_all(True))

    @property
    def inner_html_length(self) -> int:
        html_tag = self._soup.find("html")
        if html_tag is None:
            return len(str(self._soup))
        return sum(len(str(child)) for child in html_tag.contents)

    # --- Text extraction ---

    def _strings(self, root: Tag, visible_only: bool):
        for node in root.descendants:
            if not isinstance(node, NavigableString) or isinstance(node, _SKIPPED_STRING_TYPES):
                continue
            if visible_only and any(p.name in NON_VISIBLE_TAGS for p in node.parents):
                continue
            yield str(node)

    def text_content(self) -> str:
        """Raw text of the body, script and style bodies included."""
        body = self.body
        return "".join(self._strings(body, visible_only=False)) if body is not None else ""

    def visible_text(self) -> str:
        """Body text with scripts and styles stripped, whitespace collapsed."""
        body = self.body
        if body is None:
            return ""
        return " ".join(" ".join(self._strings(body, visible_only=True)).split())

    def word_count(self) -> int:
        return len(self.visible_text().split())


def parse(html: str, base_url: str = "") -> ParsedDocument:
    """Parse HTML into a ParsedDocument. Never raises on malformed input."""
    return ParsedDocument(html, base_url)
