"""
Link-relation scanners: rel-* links and oEmbed endpoint discovery.
"""

from typing import Optional

from bs4 import BeautifulSoup

from .dom import attr_tokens, get_attr, select
from .schemas import OEmbedDiscovery, OEmbedEndpoint
from .urls import resolve


def scan_rel_links(soup: BeautifulSoup, base_url: Optional[str] = None) -> dict[str, list[str]]:
    """
    Map each rel token found on <link>/<a> to its resolved URLs.

    Tokens are lowercased; URLs keep document order and are listed once
    per token.
    """
    rel_links: dict[str, list[str]] = {}

    for elem in select(soup, "link[rel][href], a[rel][href]"):
        href = get_attr(elem, "href").strip()
        if not href:
            continue
        url = resolve(href, base_url)
        for rel in attr_tokens(elem, "rel"):
            urls = rel_links.setdefault(rel.lower(), [])
            if url not in urls:
                urls.append(url)

    return rel_links


def scan_oembed(soup: BeautifulSoup, base_url: Optional[str] = None) -> OEmbedDiscovery:
    """Find <link rel="alternate" type="...oembed..."> discovery links."""
    discovery = OEmbedDiscovery()

    for elem in select(soup, "link[rel][href][type]"):
        rels = [r.lower() for r in attr_tokens(elem, "rel")]
        link_type = get_attr(elem, "type").strip().lower()
        if "alternate" not in rels or "oembed" not in link_type:
            continue

        href = get_attr(elem, "href").strip()
        if not href:
            continue

        if "xml" in link_type:
            endpoint = OEmbedEndpoint(href=resolve(href, base_url), format="xml", title=get_attr(elem, "title"))
            discovery.xml_endpoints.append(endpoint)
        else:
            endpoint = OEmbedEndpoint(href=resolve(href, base_url), format="json", title=get_attr(elem, "title"))
            discovery.json_endpoints.append(endpoint)

    return discovery
