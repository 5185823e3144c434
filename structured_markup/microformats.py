"""
Microformats2 interpreter.

Finds items by class-name convention and extracts their properties:

  h-*   root class; starts an item; several h-* classes make one item with
        several types
  p-*   plain text          → TextValue
  u-*   reference           → UrlValue (resolved against the base URL)
  dt-*  date/time           → DateTimeValue (verbatim)
  e-*   embedded markup     → TextValue carrying the inner HTML

Nested roots are owned by the nearest enclosing item: with a property class
they become an ItemValue under that property, without one they are emitted
as separate top-level items (there is no "children" field).  Legacy
microformats1 classes (vcard, hentry, fn, dtstart, ...) are mapped through
fixed alias tables when an element carries no h-* class.
"""

import re
from enum import Enum
from types import MappingProxyType
from typing import Optional

from bs4 import BeautifulSoup, Tag

from .dom import (
    child_elements, class_tokens, get_attr, has_attr, inner_html, tag_name, text_content, unique_tokens,
)
from .schemas import DateTimeValue, Item, ItemValue, TextValue, UrlValue
from .urls import resolve
from .logger import get_module_logger

logger = get_module_logger("microformats")

ROOT_CLASS = re.compile(r'^h-(?:[a-z0-9]+-)?[a-z]+(?:-[a-z]+)*$')
PROPERTY_CLASS = re.compile(r'^(p|u|dt|e)-((?:[a-z0-9]+-)?[a-z]+(?:-[a-z]+)*)$')


class PropertyKind(Enum):
    """The four property prefix families."""
    TEXT = "p"
    URL = "u"
    DATETIME = "dt"
    EMBEDDED = "e"


# Legacy root class → modern root type
LEGACY_ROOTS = MappingProxyType({
    "vcard": "h-card",
    "hentry": "h-entry",
    "hfeed": "h-feed",
    "vevent": "h-event",
    "hreview": "h-review",
    "hrecipe": "h-recipe",
    "hproduct": "h-product",
    "adr": "h-adr",
    "geo": "h-geo",
})

_ADR_PROPERTIES = {
    "post-office-box": "p-post-office-box",
    "extended-address": "p-extended-address",
    "street-address": "p-street-address",
    "locality": "p-locality",
    "region": "p-region",
    "postal-code": "p-postal-code",
    "country-name": "p-country-name",
}

# Modern root type → {legacy property class: modern property class}.
# Only consulted inside items that were recognized through LEGACY_ROOTS.
LEGACY_PROPERTIES = MappingProxyType({
    "h-card": MappingProxyType({
        "fn": "p-name",
        "honorific-prefix": "p-honorific-prefix",
        "given-name": "p-given-name",
        "additional-name": "p-additional-name",
        "family-name": "p-family-name",
        "honorific-suffix": "p-honorific-suffix",
        "nickname": "p-nickname",
        "email": "u-email",
        "logo": "u-logo",
        "photo": "u-photo",
        "url": "u-url",
        "uid": "u-uid",
        "category": "p-category",
        "adr": "p-adr",
        "label": "p-label",
        "geo": "p-geo",
        "latitude": "p-latitude",
        "longitude": "p-longitude",
        "tel": "p-tel",
        "note": "p-note",
        "bday": "dt-bday",
        "key": "u-key",
        "org": "p-org",
        "organization-name": "p-organization-name",
        "organization-unit": "p-organization-unit",
        "title": "p-job-title",
        "role": "p-role",
        **_ADR_PROPERTIES,
    }),
    "h-entry": MappingProxyType({
        "entry-title": "p-name",
        "entry-summary": "p-summary",
        "entry-content": "e-content",
        "published": "dt-published",
        "updated": "dt-updated",
        "author": "p-author",
        "category": "p-category",
        "geo": "p-geo",
        "latitude": "p-latitude",
        "longitude": "p-longitude",
    }),
    "h-feed": MappingProxyType({
        "author": "p-author",
        "photo": "u-photo",
        "url": "u-url",
        "category": "p-category",
    }),
    "h-event": MappingProxyType({
        "summary": "p-name",
        "dtstart": "dt-start",
        "dtend": "dt-end",
        "duration": "dt-duration",
        "description": "p-description",
        "url": "u-url",
        "category": "p-category",
        "location": "p-location",
        "geo": "p-location",
        "attendee": "p-attendee",
        "contact": "p-contact",
        "organizer": "p-organizer",
    }),
    "h-review": MappingProxyType({
        "summary": "p-name",
        "item": "p-item",
        "reviewer": "p-author",
        "dtreviewed": "dt-published",
        "rating": "p-rating",
        "best": "p-best",
        "worst": "p-worst",
        "description": "e-content",
        "category": "p-category",
    }),
    "h-recipe": MappingProxyType({
        "fn": "p-name",
        "ingredient": "p-ingredient",
        "yield": "p-yield",
        "instructions": "e-instructions",
        "duration": "dt-duration",
        "photo": "u-photo",
        "summary": "p-summary",
        "author": "p-author",
        "nutrition": "p-nutrition",
        "category": "p-category",
    }),
    "h-product": MappingProxyType({
        "fn": "p-name",
        "photo": "u-photo",
        "brand": "p-brand",
        "category": "p-category",
        "description": "p-description",
        "identifier": "u-identifier",
        "url": "u-url",
        "review": "p-review",
        "price": "p-price",
    }),
    "h-adr": MappingProxyType(dict(_ADR_PROPERTIES)),
    "h-geo": MappingProxyType({
        "latitude": "p-latitude",
        "longitude": "p-longitude",
        "altitude": "p-altitude",
    }),
})

# (tag, attribute) pairs holding a u-* property's natural reference, in priority order
URL_ATTRIBUTES = (
    ("a", "href"), ("area", "href"), ("link", "href"),
    ("img", "src"), ("audio", "src"), ("video", "src"), ("source", "src"),
    ("iframe", "src"), ("embed", "src"), ("track", "src"),
    ("video", "poster"), ("object", "data"),
)


def root_types(elem: Tag) -> tuple[list[str], bool]:
    """
    Root types declared on an element.

    Returns:
        (types, is_legacy); types is empty when the element isn't a root
    """
    tokens = class_tokens(elem)
    types = unique_tokens(t for t in tokens if ROOT_CLASS.match(t))
    if types:
        return types, False
    legacy = unique_tokens(LEGACY_ROOTS[t] for t in tokens if t in LEGACY_ROOTS)
    return legacy, bool(legacy)


def property_classes(elem: Tag, aliases: Optional[MappingProxyType] = None) -> list[tuple[PropertyKind, str]]:
    """
    Property (kind, name) pairs declared on an element, in class order.

    With aliases (inside a legacy item) only the legacy table applies.
    """
    found = []
    for token in class_tokens(elem):
        if aliases is not None:
            token = aliases.get(token)
            if token is None:
                continue
        match = PROPERTY_CLASS.match(token)
        if match:
            pair = (PropertyKind(match.group(1)), match.group(2))
            if pair not in found:
                found.append(pair)
    return found


class _ScanState:
    """What explicit extraction found for one item; drives implied properties."""

    def __init__(self):
        self.text_or_embedded = False
        self.url = False
        self.nested = False


class MicroformatsParser:
    """Extracts Microformats2 items from a parsed document."""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = base_url

    def parse(self, soup: BeautifulSoup) -> dict[str, list[Item]]:
        """
        Extract every top-level item.

        Returns:
            Mapping of root type → items in document order.  An item with
            several types is listed under each of them.
        """
        items: list[Item] = []
        self._find_roots(soup, items)

        result: dict[str, list[Item]] = {}
        for item in items:
            for type_name in item.types:
                result.setdefault(type_name, []).append(item)

        logger.debug(f"Found {len(items)} microformat items")
        return result

    def _find_roots(self, node: Tag, found: list) -> None:
        for child in child_elements(node):
            types, legacy = root_types(child)
            if not types:
                self._find_roots(child, found)
                continue
            orphans: list[Item] = []
            found.append(self._parse_item(child, types, legacy, orphans))
            found.extend(orphans)

    def _parse_item(self, elem: Tag, types: list[str], legacy: bool, orphans: list) -> Item:
        item = Item(types=types)
        aliases = self._aliases_for(types) if legacy else None
        state = _ScanState()

        self._scan(elem, item, aliases, orphans, state)

        # Backcompat roots never get implied properties
        if not legacy:
            self._apply_implied(elem, item, state)

        logger.debug(f"Parsed {'/'.join(types)} with {len(item.properties)} properties")
        return item

    @staticmethod
    def _aliases_for(types: list[str]) -> MappingProxyType:
        merged = {}
        for type_name in types:
            merged.update(LEGACY_PROPERTIES.get(type_name, {}))
        return MappingProxyType(merged)

    def _scan(self, elem: Tag, item: Item, aliases, orphans: list, state: _ScanState) -> None:
        """Depth-first property scan; nested roots are not descended into."""
        for child in child_elements(elem):
            props = property_classes(child, aliases)
            types, legacy = root_types(child)

            if types:
                state.nested = True
                if props:
                    nested = self._parse_item(child, types, legacy, orphans)
                    for _, name in props:
                        item.add(name, ItemValue(value=nested))
                else:
                    inner: list[Item] = []
                    orphans.append(self._parse_item(child, types, legacy, inner))
                    orphans.extend(inner)
                continue

            for kind, name in props:
                item.add(name, self._property_value(child, kind))
                if kind in (PropertyKind.TEXT, PropertyKind.EMBEDDED):
                    state.text_or_embedded = True
                elif kind is PropertyKind.URL:
                    state.url = True

            self._scan(child, item, aliases, orphans, state)

    # --- Property values ---

    def _property_value(self, elem: Tag, kind: PropertyKind):
        if kind is PropertyKind.TEXT:
            return TextValue(value=self._text_value(elem))
        if kind is PropertyKind.URL:
            return UrlValue(value=self._url_value(elem))
        if kind is PropertyKind.DATETIME:
            return DateTimeValue(value=self._datetime_value(elem))
        return TextValue(value=inner_html(elem))

    def _text_value(self, elem: Tag) -> str:
        parts = _value_class_parts(elem, _text_part)
        if parts:
            return "".join(parts)
        tag = tag_name(elem)
        if tag in ("abbr", "link") and has_attr(elem, "title"):
            return get_attr(elem, "title")
        if tag in ("data", "input") and has_attr(elem, "value"):
            return get_attr(elem, "value")
        if tag in ("img", "area") and has_attr(elem, "alt"):
            return get_attr(elem, "alt")
        return text_content(elem)

    def _url_value(self, elem: Tag) -> str:
        tag = tag_name(elem)
        for url_tag, attr in URL_ATTRIBUTES:
            if tag == url_tag and has_attr(elem, attr):
                return resolve(get_attr(elem, attr), self.base_url)
        parts = _value_class_parts(elem, _text_part)
        if parts:
            raw = "".join(parts)
        elif tag == "abbr" and has_attr(elem, "title"):
            raw = get_attr(elem, "title")
        elif tag in ("data", "input") and has_attr(elem, "value"):
            raw = get_attr(elem, "value")
        else:
            raw = text_content(elem)
        return resolve(raw, self.base_url) if raw else raw

    def _datetime_value(self, elem: Tag) -> str:
        parts = _value_class_parts(elem, _datetime_part)
        if parts:
            return " ".join(parts)
        return _datetime_part(elem)

    # --- Implied properties ---

    def _apply_implied(self, elem: Tag, item: Item, state: _ScanState) -> None:
        """Fill name/photo/url from the root element when nothing explicit was found."""
        if state.nested:
            return

        if "name" not in item.properties and not state.text_or_embedded:
            item.add("name", TextValue(value=_implied_name(elem)))

        if state.url:
            return

        if "photo" not in item.properties:
            photo = _implied_photo(elem)
            if photo is not None:
                item.add("photo", UrlValue(value=resolve(photo, self.base_url)))

        if "url" not in item.properties:
            url = _implied_url(elem)
            if url is not None:
                item.add("url", UrlValue(value=resolve(url, self.base_url)))


def _value_class_parts(elem: Tag, read) -> list[str]:
    """
    Value-class pattern: collect `.value` / `.value-title` descendants,
    not looking inside nested roots or other property elements.
    """
    parts = []
    for child in child_elements(elem):
        tokens = class_tokens(child)
        if root_types(child)[0]:
            continue
        if "value-title" in tokens:
            parts.append(get_attr(child, "title") or "")
        elif "value" in tokens:
            parts.append(read(child))
        elif not property_classes(child):
            parts.extend(_value_class_parts(child, read))
    return parts


def _text_part(elem: Tag) -> str:
    tag = tag_name(elem)
    if tag in ("img", "area") and has_attr(elem, "alt"):
        return get_attr(elem, "alt")
    if tag == "data" and has_attr(elem, "value"):
        return get_attr(elem, "value")
    if tag == "abbr" and has_attr(elem, "title"):
        return get_attr(elem, "title")
    return text_content(elem)


def _datetime_part(elem: Tag) -> str:
    tag = tag_name(elem)
    if tag in ("time", "ins", "del") and has_attr(elem, "datetime"):
        return get_attr(elem, "datetime")
    if tag == "abbr" and has_attr(elem, "title"):
        return get_attr(elem, "title")
    if tag in ("data", "input") and has_attr(elem, "value"):
        return get_attr(elem, "value")
    return text_content(elem)


def _only_child(elem: Tag, tags: Optional[tuple] = None) -> Optional[Tag]:
    """
    The single child element (of one of the given tags, if any are given),
    provided it isn't itself a microformat root.
    """
    children = child_elements(elem)
    if tags is not None:
        children = [c for c in children if tag_name(c) in tags]
    if len(children) != 1 or root_types(children[0])[0]:
        return None
    return children[0]


def _descend_candidates(elem: Tag, tags: Optional[tuple] = None) -> list[Tag]:
    """The root itself, its only child, and that child's only child."""
    candidates = [elem]
    child = _only_child(elem)
    if child is not None:
        if tags is None or tag_name(child) in tags:
            candidates.append(child)
        grandchild = _only_child(child)
        if grandchild is not None and (tags is None or tag_name(grandchild) in tags):
            candidates.append(grandchild)
    if tags is not None:
        typed_child = _only_child(elem, tags)
        if typed_child is not None and typed_child not in candidates:
            candidates.insert(1, typed_child)
    return candidates


def _implied_name(elem: Tag) -> str:
    for candidate in _descend_candidates(elem):
        tag = tag_name(candidate)
        if tag in ("img", "area"):
            alt = get_attr(candidate, "alt")
            if alt and alt.strip():
                return alt.strip()
        elif tag == "abbr":
            title = get_attr(candidate, "title")
            if title and title.strip():
                return title.strip()
    return text_content(elem)


def _implied_photo(elem: Tag) -> Optional[str]:
    for candidate in _descend_candidates(elem, ("img", "object")):
        tag = tag_name(candidate)
        if tag == "img" and has_attr(candidate, "src"):
            return get_attr(candidate, "src")
        if tag == "object" and has_attr(candidate, "data"):
            return get_attr(candidate, "data")
    return None


def _implied_url(elem: Tag) -> Optional[str]:
    for candidate in _descend_candidates(elem, ("a", "area")):
        if tag_name(candidate) in ("a", "area") and has_attr(candidate, "href"):
            return get_attr(candidate, "href")
    return None
