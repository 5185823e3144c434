"""
HTML Microdata interpreter.

  itemscope  starts an item
  itemtype   whitespace-separated type URIs, used as-is
  itemprop   property name(s) of the element within the nearest enclosing scope
  itemref    ids of elements elsewhere in the document whose itemprops also
             belong to the item

The id index used for itemref is built once per document before the walk.
Referenced elements are scanned after the item's own subtree, in itemref
order, and every element contributes to an item at most once.
"""

from types import MappingProxyType
from typing import Optional

from bs4 import BeautifulSoup, Tag

from .dom import attr_tokens, child_elements, get_attr, has_attr, select, tag_name, text_content, unique_tokens
from .schemas import DateTimeValue, Item, ItemValue, TextValue, UrlValue
from .urls import resolve
from .logger import get_module_logger

logger = get_module_logger("microdata")

# Elements whose itemprop value is a URL, and the attribute holding it
URL_PROPERTY_ATTRIBUTES = MappingProxyType({
    "a": "href",
    "area": "href",
    "link": "href",
    "audio": "src",
    "embed": "src",
    "iframe": "src",
    "img": "src",
    "source": "src",
    "track": "src",
    "video": "src",
    "object": "data",
})


def build_id_index(soup: BeautifulSoup) -> dict[str, Tag]:
    """Map id → element; with duplicate ids the first element wins."""
    index: dict[str, Tag] = {}
    for elem in select(soup, "[id]"):
        elem_id = get_attr(elem, "id")
        if elem_id and elem_id not in index:
            index[elem_id] = elem
    return index


def is_top_level(elem: Tag) -> bool:
    """An itemscope without itemprop, or with itemprop but no enclosing itemscope."""
    if not has_attr(elem, "itemprop"):
        return True
    return not any(has_attr(parent, "itemscope") for parent in elem.parents if isinstance(parent, Tag))


class MicrodataParser:
    """Extracts Microdata items from a parsed document."""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = base_url

    def parse(self, soup: BeautifulSoup) -> list[Item]:
        index = build_id_index(soup)
        items = []
        for elem in select(soup, "[itemscope]"):
            if is_top_level(elem):
                items.append(self._extract_item(elem, index, ()))
        logger.debug(f"Found {len(items)} microdata items")
        return items

    def _extract_item(self, scope: Tag, index: dict, in_progress: tuple) -> Item:
        item = Item(types=unique_tokens(attr_tokens(scope, "itemtype")))
        # Scopes currently being extracted up the call chain; itemref loops stop here
        in_progress = in_progress + (id(scope),)
        seen = {id(scope)}

        for child in child_elements(scope):
            self._collect(child, item, index, in_progress, seen)

        for ref_id in unique_tokens(attr_tokens(scope, "itemref")):
            target = index.get(ref_id)
            if target is None:
                logger.debug(f"itemref '{ref_id}' matches no element")
                continue
            self._collect(target, item, index, in_progress, seen)

        return item

    def _collect(self, elem: Tag, item: Item, index: dict, in_progress: tuple, seen: set) -> None:
        if id(elem) in seen:
            return
        seen.add(id(elem))

        names = attr_tokens(elem, "itemprop")

        if has_attr(elem, "itemscope"):
            # A nested scope owns everything below it
            if names and id(elem) not in in_progress:
                nested = self._extract_item(elem, index, in_progress)
                for name in names:
                    item.add(name, ItemValue(value=nested))
            return

        if names:
            value = self._property_value(elem)
            if value is not None:
                for name in names:
                    item.add(name, value)

        for child in child_elements(elem):
            self._collect(child, item, index, in_progress, seen)

    def _property_value(self, elem: Tag):
        """Value of a non-scope itemprop element, chosen by tag name."""
        tag = tag_name(elem)

        if tag == "meta":
            content = get_attr(elem, "content")
            return TextValue(value=content) if content is not None else None

        url_attr = URL_PROPERTY_ATTRIBUTES.get(tag)
        if url_attr is not None:
            reference = get_attr(elem, url_attr)
            if reference is None:
                return None
            return UrlValue(value=resolve(reference, self.base_url))

        if tag in ("data", "meter"):
            value = get_attr(elem, "value")
            return TextValue(value=value) if value is not None else None

        if tag == "time":
            moment = get_attr(elem, "datetime")
            if moment is None:
                moment = text_content(elem)
            return DateTimeValue(value=moment) if moment else None

        return TextValue(value=text_content(elem))
