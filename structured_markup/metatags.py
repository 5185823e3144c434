"""
Flat scanners for standard <meta>/<link> tags and Dublin Core.

A single linear pass over the matching elements each; no recursion, no
item model.  First occurrence wins for single-valued fields unless noted.
"""

import re
from typing import Optional

from bs4 import BeautifulSoup

from .dom import attr_tokens, get_attr, select, text_content
from .schemas import AlternateLink, DublinCore, FeedLink, MetaTags, RobotsDirective
from .urls import resolve

CHARSET_PATTERN = re.compile(r'charset\s*=\s*["\']?([^\s"\';]+)', re.IGNORECASE)

FEED_TYPES = ("application/rss+xml", "application/atom+xml", "application/feed+json")

# meta name → MetaTags field for plain string values
_SIMPLE_META_FIELDS = {
    "description": "description",
    "author": "author",
    "generator": "generator",
    "viewport": "viewport",
    "theme-color": "theme_color",
    "application-name": "application_name",
    "referrer": "referrer",
}

# rel token → MetaTags field; first link wins
_LINK_FIELDS = {
    "canonical": "canonical",
    "shortlink": "shortlink",
    "icon": "icon",
    "apple-touch-icon": "apple_touch_icon",
    "manifest": "manifest",
    "prev": "prev",
    "next": "next",
}

_DC_LIST_FIELDS = ("subject", "contributor")
_DC_FIELDS = {
    "title", "creator", "description", "publisher", "date", "type", "format",
    "identifier", "source", "language", "relation", "coverage", "rights",
}


def scan_meta(soup: BeautifulSoup, base_url: Optional[str] = None) -> MetaTags:
    """Extract <title>, <meta name>, charset, language and <link rel> values."""
    meta = MetaTags()

    titles = select(soup, "title")
    if titles:
        meta.title = text_content(titles[0]) or None

    for elem in select(soup, "meta[charset]"):
        meta.charset = get_attr(elem, "charset").strip() or None
        break
    if meta.charset is None:
        for elem in select(soup, "meta[http-equiv][content]"):
            if get_attr(elem, "http-equiv").strip().lower() != "content-type":
                continue
            match = CHARSET_PATTERN.search(get_attr(elem, "content"))
            if match:
                meta.charset = match.group(1)
                break

    for elem in select(soup, "html[lang]"):
        meta.language = get_attr(elem, "lang").strip() or None
        break

    for elem in select(soup, "meta[name][content]"):
        name = get_attr(elem, "name").strip().lower()
        content = get_attr(elem, "content").strip()
        if not content:
            continue

        if name in _SIMPLE_META_FIELDS:
            field = _SIMPLE_META_FIELDS[name]
            if getattr(meta, field) is None:
                setattr(meta, field, content)
        elif name == "keywords":
            meta.keywords = [k.strip() for k in content.split(",") if k.strip()]
        elif name == "robots":
            meta.robots = RobotsDirective.parse(content)
        elif name == "googlebot":
            meta.googlebot = RobotsDirective.parse(content)

    for elem in select(soup, "link[rel][href]"):
        href = get_attr(elem, "href").strip()
        if not href:
            continue
        url = resolve(href, base_url)
        rels = [r.lower() for r in attr_tokens(elem, "rel")]

        for rel in rels:
            field = _LINK_FIELDS.get(rel)
            if field and getattr(meta, field) is None:
                setattr(meta, field, url)
        if "shortcut" in rels and "icon" in rels and meta.icon is None:
            meta.icon = url

        if "alternate" in rels:
            link_type = (get_attr(elem, "type") or "").strip().lower()
            title = get_attr(elem, "title")
            if link_type in FEED_TYPES:
                meta.feeds.append(FeedLink(href=url, type=link_type, title=title))
            elif "oembed" not in link_type:
                meta.alternate.append(AlternateLink(
                    href=url,
                    hreflang=get_attr(elem, "hreflang"),
                    type=link_type or None,
                    title=title
                ))

    return meta


def scan_dublin_core(soup: BeautifulSoup) -> DublinCore:
    """Extract DC.* / dcterms.* meta names (prefix matched case-insensitively)."""
    dc = DublinCore()

    for elem in select(soup, "meta[name][content]"):
        name = get_attr(elem, "name").strip().lower()
        content = get_attr(elem, "content").strip()
        if not content:
            continue

        if name.startswith("dc."):
            field = name[len("dc."):]
        elif name.startswith("dcterms."):
            field = name[len("dcterms."):]
        else:
            continue

        if field in _DC_LIST_FIELDS:
            values = [v.strip() for v in re.split(r'[,;]', content) if v.strip()]
            setattr(dc, field, values)
        elif field in _DC_FIELDS:
            setattr(dc, field, content)

    return dc
