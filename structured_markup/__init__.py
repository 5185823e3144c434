"""
Structured Markup Extractor

Pulls machine-readable data embedded in HTML into one item model.
- Microformats2 (with legacy microformats aliases)
- RDFa (vocab / prefix / CURIE context, blank nodes)
- Microdata (itemscope / itemprop / itemref)
- Flat scanners: meta tags, Open Graph, Twitter Cards, JSON-LD,
  Dublin Core, rel links, oEmbed and Web App Manifest discovery

Public API surface:
  Orchestrator    : StructuredDataExtractor and the extract_* functions
  Data models     : Item, the PropertyValue variants, ExtractionResult
  Configuration   : ExtractorSettings
  Error types     : StructuredMarkupError, InputError (fatal), ManifestError
  Output          : to_plain() for the compact {"type", "properties"} shape
"""

# --- Orchestrator and convenience functions ---
from .main import (
    StructuredDataExtractor,
    extract_all,
    extract_dublin_core,
    extract_jsonld,
    extract_manifest,
    extract_meta,
    extract_microdata,
    extract_microformats,
    extract_oembed,
    extract_opengraph,
    extract_rdfa,
    extract_rel_links,
    extract_twitter,
    parse_manifest,
)

# --- Data models ---
from .schemas import (
    DateTimeValue,
    ExtractionResult,
    Item,
    ItemValue,
    TextValue,
    UrlValue,
)

# --- Configuration ---
from .config import ExtractorSettings

# --- Exceptions (callers should catch these for error handling) ---
from .exceptions import InputError, ManifestError, StructuredMarkupError

# --- Helpers ---
from .output import to_plain
from .urls import resolve

__version__ = "0.1.0"
__all__ = [
    "StructuredDataExtractor",
    "extract_all",
    "extract_microformats",
    "extract_rdfa",
    "extract_microdata",
    "extract_meta",
    "extract_opengraph",
    "extract_twitter",
    "extract_jsonld",
    "extract_dublin_core",
    "extract_rel_links",
    "extract_oembed",
    "extract_manifest",
    "parse_manifest",
    "Item",
    "TextValue",
    "UrlValue",
    "DateTimeValue",
    "ItemValue",
    "ExtractionResult",
    "ExtractorSettings",
    "StructuredMarkupError",
    "InputError",
    "ManifestError",
    "to_plain",
    "resolve",
]
