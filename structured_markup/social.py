"""
Open Graph and Twitter Card scanners.

Open Graph structured properties (og:image:width, og:video:type, ...) attach
to the most recent og:image / og:video / og:audio, the same way the protocol
describes arrays.  Twitter Cards can fall back to Open Graph for title,
description and image.
"""

from typing import Optional

from bs4 import BeautifulSoup

from .dom import get_attr, select
from .schemas import OgArticle, OgMedia, OpenGraph, TwitterCard, TwitterPlayer
from .urls import resolve

_MEDIA_LISTS = {"image": "images", "video": "videos", "audio": "audios"}


def _as_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


def _meta_pairs(soup: BeautifulSoup, key_attr: str):
    """(key, content) for every <meta> with the key attribute and non-blank content."""
    for elem in select(soup, f"meta[{key_attr}][content]"):
        key = get_attr(elem, key_attr).strip()
        content = get_attr(elem, "content").strip()
        if key and content:
            yield key, content


def scan_opengraph(soup: BeautifulSoup, base_url: Optional[str] = None) -> OpenGraph:
    og = OpenGraph()
    article = OgArticle()
    has_article = False

    for prop, content in _meta_pairs(soup, "property"):
        prop = prop.lower()

        if prop.startswith("article:"):
            has_article = True
            field = prop[len("article:"):]
            if field == "author":
                article.authors.append(content)
            elif field == "tag":
                article.tags.append(content)
            elif field in ("published_time", "modified_time", "expiration_time", "section"):
                setattr(article, field, content)
            continue

        if prop == "fb:app_id":
            og.fb_app_id = content
            continue

        if not prop.startswith("og:"):
            continue
        prop = prop[len("og:"):]

        media_kind, _, sub = prop.partition(":")
        if media_kind in _MEDIA_LISTS:
            entries = getattr(og, _MEDIA_LISTS[media_kind])
            if not sub or sub == "url":
                url = resolve(content, base_url)
                entries.append(OgMedia(url=url))
                if media_kind == "image" and og.image is None:
                    og.image = url
            elif entries:
                _apply_media_property(entries[-1], sub, content, base_url)
            continue

        if prop == "url":
            og.url = resolve(content, base_url)
        elif prop == "locale:alternate":
            og.locale_alternate.append(content)
        elif prop in ("title", "type", "description", "site_name", "locale", "determiner"):
            setattr(og, prop, content)

    if has_article:
        og.article = article
    return og


def _apply_media_property(media: OgMedia, sub: str, content: str, base_url: Optional[str]) -> None:
    if sub == "secure_url":
        media.secure_url = resolve(content, base_url)
    elif sub in ("width", "height"):
        setattr(media, sub, _as_int(content))
    elif sub in ("type", "alt"):
        setattr(media, sub, content)


def scan_twitter(soup: BeautifulSoup, base_url: Optional[str] = None,
                 fallback: Optional[OpenGraph] = None) -> TwitterCard:
    """
    Extract twitter:* meta names.

    Some sites publish twitter:* with property= instead of name=; both are read,
    name= first.  If fallback is given, missing title/description/image are
    taken from Open Graph.
    """
    card = TwitterCard()
    player_url = None
    player = {}

    pairs = list(_meta_pairs(soup, "name")) + list(_meta_pairs(soup, "property"))
    for name, content in pairs:
        name = name.lower()
        if not name.startswith("twitter:"):
            continue
        prop = name[len("twitter:"):]

        if prop in ("image", "image:src"):
            if card.image is None:
                card.image = resolve(content, base_url)
        elif prop == "image:alt":
            card.image_alt = card.image_alt or content
        elif prop == "site:id":
            card.site_id = card.site_id or content
        elif prop == "creator:id":
            card.creator_id = card.creator_id or content
        elif prop == "player":
            player_url = player_url or resolve(content, base_url)
        elif prop in ("player:width", "player:height"):
            player.setdefault(prop[len("player:"):], _as_int(content))
        elif prop == "player:stream":
            player.setdefault("stream", resolve(content, base_url))
        elif prop in ("card", "site", "creator", "title", "description"):
            if getattr(card, prop) is None:
                setattr(card, prop, content)

    if player_url:
        card.player = TwitterPlayer(url=player_url, **player)

    if fallback is not None:
        card.title = card.title or fallback.title
        card.description = card.description or fallback.description
        card.image = card.image or fallback.image

    return card
