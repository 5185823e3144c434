"""
RDFa interpreter.

Walks the tree once, depth-first, carrying an explicit RdfaContext
(vocab, prefixes, base) from parent to child:

  vocab="..."      sets the default namespace for bare terms (empty clears it)
  prefix="p: URI"  adds CURIE prefix bindings (xmlns:p="URI" is honoured too)
  typeof="..."     starts a new item; subject = about, else resource,
                   else a blank node (_:b0, _:b1, ... per call)
  property="..."   adds a value to the nearest enclosing item; with typeof
                   on the same element the new item is that value

Nothing here raises for odd markup: unknown prefixes stay literal and a
property with no enclosing item is ignored.
"""

from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional

from bs4 import BeautifulSoup, Tag

from .dom import attr_tokens, child_elements, get_attr, text_content, unique_tokens
from .schemas import Item, ItemValue, TextValue, UrlValue
from .urls import resolve
from .logger import get_module_logger

logger = get_module_logger("rdfa")

DEFAULT_PREFIXES = MappingProxyType({
    "schema": "https://schema.org/",
    "foaf": "http://xmlns.com/foaf/0.1/",
    "dc": "http://purl.org/dc/terms/",
    "og": "http://ogp.me/ns#",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
})

# Attributes whose value is a reference, in priority order
REFERENCE_ATTRIBUTES = ("resource", "href", "src")


def parse_prefix_attr(value: str) -> dict[str, str]:
    """
    Parse a prefix attribute: "p1: URI1 p2: URI2".

    Prefix names are lowercased; a dangling "p:" without a URI is dropped,
    and "_" (reserved for blank nodes) can't be rebound.
    """
    declared = {}
    tokens = value.split()
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.endswith(":") and len(token) > 1 and i + 1 < len(tokens):
            name = token[:-1].lower()
            if name != "_":
                declared[name] = tokens[i + 1]
            i += 2
        else:
            i += 1
    return declared


class RdfaContext(NamedTuple):
    """Evaluation context inherited from the parent element."""
    vocab: Optional[str]
    prefixes: Mapping[str, str]
    base: Optional[str]

    def derive(self, elem: Tag) -> "RdfaContext":
        """Context for elem: its own vocab/prefix overrides applied on top of ours."""
        vocab = self.vocab
        raw_vocab = get_attr(elem, "vocab")
        if raw_vocab is not None:
            vocab = raw_vocab.strip() or None

        declared = {}
        for name, value in elem.attrs.items():
            if name.startswith("xmlns:") and isinstance(value, str) and value.strip():
                declared[name[len("xmlns:"):].lower()] = value.strip()
        raw_prefix = get_attr(elem, "prefix")
        if raw_prefix:
            declared.update(parse_prefix_attr(raw_prefix))

        prefixes = self.prefixes
        if declared:
            prefixes = MappingProxyType({**self.prefixes, **declared})

        if vocab == self.vocab and prefixes is self.prefixes:
            return self
        return self._replace(vocab=vocab, prefixes=prefixes)

    def expand_curie(self, token: str) -> Optional[str]:
        """Expand prefix:suffix if the prefix is known, else None."""
        prefix, sep, reference = token.partition(":")
        if not sep or reference.startswith("//"):
            return None
        namespace = self.prefixes.get(prefix.lower())
        if namespace is None:
            return None
        return namespace + reference

    def expand(self, token: str) -> str:
        """
        Expand a term or CURIE.

        Known prefix → namespace + suffix; anything else with a colon
        (absolute IRIs, unknown prefixes, blank nodes) stays as written;
        a bare term gets the vocab prepended when one is in scope.
        """
        if ":" in token:
            expanded = self.expand_curie(token)
            return token if expanded is None else expanded
        if self.vocab:
            return self.vocab + token
        return token


class _Walk:
    """Per-call walk state: the item forest and the blank-node counter."""

    def __init__(self):
        self.items: list[Item] = []
        self._next_blank = 0

    def blank_node(self) -> str:
        token = f"_:b{self._next_blank}"
        self._next_blank += 1
        return token


class RdfaParser:
    """Extracts RDFa items from a parsed document."""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = base_url

    def parse(self, soup: BeautifulSoup) -> list[Item]:
        """
        Extract every item that isn't a property value of another item.

        Returns:
            Items in document order
        """
        walk = _Walk()
        context = RdfaContext(vocab=None, prefixes=DEFAULT_PREFIXES, base=self.base_url)
        for child in child_elements(soup):
            self._visit(child, context, None, walk)
        logger.debug(f"Found {len(walk.items)} RDFa items")
        return walk.items

    def _visit(self, elem: Tag, parent_context: RdfaContext,
               current: Optional[Item], walk: _Walk) -> None:
        context = parent_context.derive(elem)
        properties = [context.expand(t) for t in attr_tokens(elem, "property")]
        types = unique_tokens(context.expand(t) for t in attr_tokens(elem, "typeof"))

        if types:
            item = Item(types=types, subject=self._subject(elem, context, walk))
            if current is not None and properties:
                for name in properties:
                    current.add(name, ItemValue(value=item))
            else:
                walk.items.append(item)
            current = item
        elif current is not None and properties:
            value = self._property_value(elem, context)
            for name in properties:
                current.add(name, value)

        for child in child_elements(elem):
            self._visit(child, context, current, walk)

    def _subject(self, elem: Tag, context: RdfaContext, walk: _Walk) -> str:
        for attr in ("about", "resource"):
            reference = get_attr(elem, attr)
            if reference is not None and reference.strip():
                return self._resolve_reference(reference, context)
        return walk.blank_node()

    def _resolve_reference(self, reference: str, context: RdfaContext) -> str:
        """Resolve an about/resource/href/src value (safe CURIEs and CURIEs allowed)."""
        reference = reference.strip()
        if reference.startswith("[") and reference.endswith("]"):
            inner = reference[1:-1].strip()
            expanded = context.expand_curie(inner)
            return inner if expanded is None else expanded
        if reference.startswith("_:"):
            return reference
        expanded = context.expand_curie(reference)
        if expanded is not None:
            return expanded
        return resolve(reference, context.base)

    def _property_value(self, elem: Tag, context: RdfaContext):
        raw_datatype = get_attr(elem, "datatype")
        datatype = context.expand(raw_datatype.strip()) if raw_datatype and raw_datatype.strip() else None

        # content always wins, whatever the element is
        content = get_attr(elem, "content")
        if content is not None:
            return TextValue(value=content, datatype=datatype)

        for attr in REFERENCE_ATTRIBUTES:
            reference = get_attr(elem, attr)
            if reference is not None:
                return UrlValue(value=self._resolve_reference(reference, context))

        return TextValue(value=text_content(elem), datatype=datatype)
