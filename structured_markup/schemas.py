"""
Pydantic schemas shared by every extractor.

Item / PropertyValue: the generic item model all three tree interpreters
  (Microformats2, RDFa, Microdata) populate.
MetaTags, OpenGraph, TwitterCard, ...: the flat-scan records.
ExtractionResult: the aggregate record returned by extract_all().

Data flow:
  HTML → dom.parse_document → interpreters / flat scanners → models below
  → output.to_plain() or model_dump_json() for callers across a boundary
"""

from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

XSD = "http://www.w3.org/2001/XMLSchema#"

_XSD_INTEGERS = {
    "integer", "int", "long", "short", "byte", "nonNegativeInteger",
    "positiveInteger", "negativeInteger", "nonPositiveInteger",
    "unsignedInt", "unsignedLong", "unsignedShort", "unsignedByte",
}


# --- Property values: a closed set of variants, discriminated by "kind" ---

class TextValue(BaseModel):
    """Plain extracted text (or raw inner markup for mf2 e-* properties)."""
    kind: Literal["text"] = "text"
    value: str
    datatype: Optional[str] = None   # Expanded RDFa datatype URI, advisory only

    def typed(self) -> Any:
        """
        Convert the literal according to its XSD datatype.

        Only numeric and boolean XSD types are converted; everything else
        (including literals that don't parse) comes back as the string.
        """
        if not self.datatype or not self.datatype.startswith(XSD):
            return self.value
        local = self.datatype[len(XSD):]
        text = self.value.strip()
        try:
            if local in _XSD_INTEGERS:
                return int(text)
            if local == "decimal":
                return Decimal(text)
            if local in ("double", "float"):
                return float(text)
        except (ValueError, InvalidOperation):
            return self.value
        if local == "boolean" and text in ("true", "1", "false", "0"):
            return text in ("true", "1")
        return self.value


class UrlValue(BaseModel):
    """A reference, already resolved against the document base."""
    kind: Literal["url"] = "url"
    value: str


class DateTimeValue(BaseModel):
    """A date/time literal, preserved verbatim."""
    kind: Literal["datetime"] = "datetime"
    value: str


class ItemValue(BaseModel):
    """A nested item."""
    kind: Literal["item"] = "item"
    value: "Item"


PropertyValue = Annotated[
    Union[TextValue, UrlValue, DateTimeValue, ItemValue],
    Field(discriminator="kind"),
]


class Item(BaseModel):
    """
    One extracted structured record.

    types are fixed when the root element is classified.  properties keep
    insertion order and accumulate values under a repeated name rather than
    overwriting.  subject is only set by the RDFa interpreter.
    """
    types: list[str] = Field(default_factory=list)
    properties: dict[str, list[PropertyValue]] = Field(default_factory=dict)
    subject: Optional[str] = None

    def add(self, name: str, value: PropertyValue) -> None:
        """Append a value under a property name."""
        self.properties.setdefault(name, []).append(value)

    def get(self, name: str) -> list:
        """All values of a property (empty list when absent)."""
        return self.properties.get(name, [])

    def first(self, name: str) -> Optional[Union[str, "Item"]]:
        """Unwrapped first value of a property, or None."""
        values = self.properties.get(name)
        if not values:
            return None
        return values[0].value

    def has_type(self, type_name: str) -> bool:
        return type_name in self.types


ItemValue.model_rebuild()
Item.model_rebuild()


# --- Flat-scan records ---

class RobotsDirective(BaseModel):
    """Parsed robots / googlebot meta directives."""
    index: bool = True
    follow: bool = True
    directives: list[str] = Field(default_factory=list)

    @classmethod
    def parse(cls, content: str) -> "RobotsDirective":
        tokens = [t.strip().lower() for t in content.split(",") if t.strip()]
        directive = cls(directives=tokens)
        if "noindex" in tokens or "none" in tokens:
            directive.index = False
        if "nofollow" in tokens or "none" in tokens:
            directive.follow = False
        return directive


class AlternateLink(BaseModel):
    href: str
    hreflang: Optional[str] = None
    type: Optional[str] = None
    title: Optional[str] = None


class FeedLink(BaseModel):
    href: str
    type: str
    title: Optional[str] = None


class MetaTags(BaseModel):
    """Standard <title>, <meta name=...> and <link rel=...> values."""
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)
    author: Optional[str] = None
    generator: Optional[str] = None
    viewport: Optional[str] = None
    theme_color: Optional[str] = None
    application_name: Optional[str] = None
    referrer: Optional[str] = None
    robots: Optional[RobotsDirective] = None
    googlebot: Optional[RobotsDirective] = None
    charset: Optional[str] = None
    language: Optional[str] = None
    canonical: Optional[str] = None
    shortlink: Optional[str] = None
    icon: Optional[str] = None
    apple_touch_icon: Optional[str] = None
    manifest: Optional[str] = None
    prev: Optional[str] = None
    next: Optional[str] = None
    alternate: list[AlternateLink] = Field(default_factory=list)
    feeds: list[FeedLink] = Field(default_factory=list)


class OgMedia(BaseModel):
    """One og:image / og:video / og:audio entry with its structured properties."""
    url: str
    secure_url: Optional[str] = None
    type: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    alt: Optional[str] = None


class OgArticle(BaseModel):
    published_time: Optional[str] = None
    modified_time: Optional[str] = None
    expiration_time: Optional[str] = None
    section: Optional[str] = None
    authors: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class OpenGraph(BaseModel):
    title: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    image: Optional[str] = None           # First og:image, for convenience
    description: Optional[str] = None
    site_name: Optional[str] = None
    locale: Optional[str] = None
    locale_alternate: list[str] = Field(default_factory=list)
    determiner: Optional[str] = None
    fb_app_id: Optional[str] = None
    images: list[OgMedia] = Field(default_factory=list)
    videos: list[OgMedia] = Field(default_factory=list)
    audios: list[OgMedia] = Field(default_factory=list)
    article: Optional[OgArticle] = None


class TwitterPlayer(BaseModel):
    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    stream: Optional[str] = None


class TwitterCard(BaseModel):
    card: Optional[str] = None
    site: Optional[str] = None
    site_id: Optional[str] = None
    creator: Optional[str] = None
    creator_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    image_alt: Optional[str] = None
    player: Optional[TwitterPlayer] = None


class DublinCore(BaseModel):
    title: Optional[str] = None
    creator: Optional[str] = None
    subject: list[str] = Field(default_factory=list)
    description: Optional[str] = None
    publisher: Optional[str] = None
    contributor: list[str] = Field(default_factory=list)
    date: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    identifier: Optional[str] = None
    source: Optional[str] = None
    language: Optional[str] = None
    relation: Optional[str] = None
    coverage: Optional[str] = None
    rights: Optional[str] = None


class OEmbedEndpoint(BaseModel):
    href: str
    format: Literal["json", "xml"] = "json"
    title: Optional[str] = None


class OEmbedDiscovery(BaseModel):
    json_endpoints: list[OEmbedEndpoint] = Field(default_factory=list)
    xml_endpoints: list[OEmbedEndpoint] = Field(default_factory=list)


class ManifestImage(BaseModel):
    """An icon or screenshot entry of a Web App Manifest."""
    src: str
    sizes: Optional[str] = None
    type: Optional[str] = None
    purpose: Optional[str] = None


class ManifestShortcut(BaseModel):
    name: str
    url: str
    short_name: Optional[str] = None
    description: Optional[str] = None
    icons: list[ManifestImage] = Field(default_factory=list)


class WebAppManifest(BaseModel):
    name: Optional[str] = None
    short_name: Optional[str] = None
    description: Optional[str] = None
    start_url: Optional[str] = None
    scope: Optional[str] = None
    display: Optional[str] = None
    orientation: Optional[str] = None
    theme_color: Optional[str] = None
    background_color: Optional[str] = None
    lang: Optional[str] = None
    dir: Optional[str] = None
    categories: list[str] = Field(default_factory=list)
    icons: list[ManifestImage] = Field(default_factory=list)
    screenshots: list[ManifestImage] = Field(default_factory=list)
    shortcuts: list[ManifestShortcut] = Field(default_factory=list)


class ManifestDiscovery(BaseModel):
    """Where the manifest lives, and its parsed content if the caller supplied it."""
    href: Optional[str] = None
    manifest: Optional[WebAppManifest] = None


# --- Aggregate output ---

class ExtractionResult(BaseModel):
    """Everything extract_all() found in one document."""
    microformats: dict[str, list[Item]] = Field(default_factory=dict)
    rdfa: list[Item] = Field(default_factory=list)
    microdata: list[Item] = Field(default_factory=list)
    meta: MetaTags = Field(default_factory=MetaTags)
    opengraph: OpenGraph = Field(default_factory=OpenGraph)
    twitter: TwitterCard = Field(default_factory=TwitterCard)
    jsonld: list[dict[str, Any]] = Field(default_factory=list)
    dublin_core: DublinCore = Field(default_factory=DublinCore)
    rel_links: dict[str, list[str]] = Field(default_factory=dict)
    oembed: OEmbedDiscovery = Field(default_factory=OEmbedDiscovery)
    manifest: ManifestDiscovery = Field(default_factory=ManifestDiscovery)
    warnings: list[str] = Field(default_factory=list)  # Non-fatal issues encountered during extraction
