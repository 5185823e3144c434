"""
Thin DOM facility over BeautifulSoup.

Every extractor talks to the parsed tree through these helpers, so the three
interpreters see the same tree shape regardless of the tree builder chosen:

  parse_document  : validate caller input, parse it (never raises on bad markup)
  select          : CSS selection via soupsieve
  get_attr        : attribute access; multi-valued attributes (class, rel)
                    are joined back into one space-separated string
  text_content / inner_html / class_tokens / child_elements
"""

from typing import Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from .exceptions import InputError
from .logger import get_module_logger

logger = get_module_logger("dom")

Document = Union[str, bytes]

# Elements whose content is never rendered as text
NON_RENDERED_TAGS = frozenset({"script", "style", "template"})


def ensure_text(html: Document) -> str:
    """
    Turn caller input into a str, or raise InputError.

    This is the only place an extraction call fails outright: a None
    document, a non-text object, or bytes/str that aren't valid UTF-8.
    """
    if html is None:
        raise InputError("Document is None", received_type="NoneType")

    if isinstance(html, (bytes, bytearray)):
        try:
            return bytes(html).decode("utf-8")
        except UnicodeDecodeError as e:
            raise InputError(
                f"Document is not valid UTF-8: {e}",
                received_type=type(html).__name__,
                details={"position": e.start}
            ) from e

    if not isinstance(html, str):
        raise InputError(
            f"Expected HTML text, got {type(html).__name__}",
            received_type=type(html).__name__
        )

    # Lone surrogates can sneak in through bindings; they have no UTF-8 form
    try:
        html.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InputError(
            f"Document is not valid UTF-8: {e.reason}",
            received_type="str",
            details={"position": e.start}
        ) from e

    return html


def parse_document(html: Document, parser: str = "html5lib") -> BeautifulSoup:
    """
    Parse HTML into a tree.

    Malformed markup is handed to the tree builder as-is; html5lib (the
    default) recovers the same way a browser does.

    Raises:
        InputError: if the input isn't a usable document
    """
    text = ensure_text(html)
    soup = BeautifulSoup(text, parser)
    logger.debug(f"Parsed {len(text)} chars with {parser}")
    return soup


def select(node: Tag, selector: str) -> list[Tag]:
    """Select elements under node by CSS selector, in document order."""
    return node.select(selector)


def get_attr(elem: Tag, name: str) -> Optional[str]:
    """
    Get an attribute value, or None if absent.

    Tree builders lowercase attribute names, so lookups are case-insensitive
    as long as callers pass lowercase names.
    """
    value = elem.get(name.lower())
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return value


def has_attr(elem: Tag, name: str) -> bool:
    return elem.has_attr(name.lower())


def attr_tokens(elem: Tag, name: str) -> list[str]:
    """Whitespace-separated tokens of an attribute (empty list if absent)."""
    value = get_attr(elem, name)
    return value.split() if value else []


def class_tokens(elem: Tag) -> list[str]:
    return attr_tokens(elem, "class")


def text_content(elem: Tag) -> str:
    """The element's rendered text, trimmed; script/style/template source is left out."""
    return _rendered_text(elem).strip()


def _rendered_text(elem: Tag) -> str:
    texts = []
    for child in elem.children:
        if isinstance(child, PreformattedString):
            continue  # Comments, CDATA, doctypes
        if isinstance(child, NavigableString):
            texts.append(str(child))
        elif isinstance(child, Tag) and tag_name(child) not in NON_RENDERED_TAGS:
            texts.append(_rendered_text(child))
    return "".join(texts)


def inner_html(elem: Tag) -> str:
    """Raw inner markup of the element, verbatim."""
    return elem.decode_contents()


def child_elements(elem: Tag) -> list[Tag]:
    """Direct element children (text and comment nodes skipped)."""
    return [child for child in elem.children if isinstance(child, Tag)]


def tag_name(elem: Tag) -> str:
    return (elem.name or "").lower()


def unique_tokens(values) -> list[str]:
    """Ordered de-duplication; the first occurrence wins."""
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen
