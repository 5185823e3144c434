"""
Main orchestrator for the structured-markup extractors.

Validates the caller's document, parses it once, and hands the same tree to
each extractor:

  Microformats2 / RDFa / Microdata  → tree interpreters producing Items
  meta / Open Graph / Twitter / JSON-LD / Dublin Core / rel / oEmbed /
  manifest                          → flat scanners producing records

The interpreters share nothing with each other; extract_all() just runs them
side by side and collects the results into one ExtractionResult.
"""

from pathlib import Path
from typing import Any, Callable, Optional, Union

from bs4 import BeautifulSoup

from .config import ExtractorSettings
from .dom import Document, parse_document
from .jsonld import scan_jsonld
from .links import scan_oembed, scan_rel_links
from .logger import get_module_logger, setup_logger
from .manifest import parse_manifest as _parse_manifest
from .manifest import scan_manifest_link
from .metatags import scan_dublin_core, scan_meta
from .microdata import MicrodataParser
from .microformats import MicroformatsParser
from .rdfa import RdfaParser
from .schemas import (
    DublinCore,
    ExtractionResult,
    Item,
    ManifestDiscovery,
    MetaTags,
    OEmbedDiscovery,
    OpenGraph,
    TwitterCard,
    WebAppManifest,
)
from .social import scan_opengraph, scan_twitter
from .urls import resolve as _resolve

logger = get_module_logger("main")


class StructuredDataExtractor:
    """
    Entry point for every extraction.

    Each extract_* call parses the document once and is independent of every
    other call; an extractor instance holds nothing but its settings.
    """

    def __init__(self, settings: Optional[ExtractorSettings] = None):
        if settings is not None:
            setup_logger(level=settings.log_level, log_file=settings.log_file)
        self.settings = settings or ExtractorSettings()

        logger.debug(f"StructuredDataExtractor initialized (parser={self.settings.parser})")

    def _parse(self, html: Document) -> BeautifulSoup:
        return parse_document(html, self.settings.parser)

    def resolve(self, candidate: str, base_url: Optional[str] = None) -> str:
        """Resolve a URL reference against a base (best-effort, never raises)."""
        return _resolve(candidate, base_url)

    # --- Tree interpreters ---

    def extract_microformats(self, html: Document, base_url: Optional[str] = None) -> dict[str, list[Item]]:
        """
        Extract Microformats2 items.

        Returns:
            Mapping of root type → top-level items of that type
        """
        return MicroformatsParser(base_url).parse(self._parse(html))

    def extract_rdfa(self, html: Document, base_url: Optional[str] = None) -> list[Item]:
        """Extract top-level RDFa items in document order."""
        return RdfaParser(base_url).parse(self._parse(html))

    def extract_microdata(self, html: Document, base_url: Optional[str] = None) -> list[Item]:
        """Extract top-level Microdata items in document order."""
        return MicrodataParser(base_url).parse(self._parse(html))

    # --- Flat scanners ---

    def extract_meta(self, html: Document, base_url: Optional[str] = None) -> MetaTags:
        return scan_meta(self._parse(html), base_url)

    def extract_opengraph(self, html: Document, base_url: Optional[str] = None) -> OpenGraph:
        return scan_opengraph(self._parse(html), base_url)

    def extract_twitter(self, html: Document, base_url: Optional[str] = None) -> TwitterCard:
        soup = self._parse(html)
        fallback = scan_opengraph(soup, base_url) if self.settings.twitter_fallback else None
        return scan_twitter(soup, base_url, fallback=fallback)

    def extract_jsonld(self, html: Document) -> list[dict[str, Any]]:
        return scan_jsonld(self._parse(html))

    def extract_dublin_core(self, html: Document) -> DublinCore:
        return scan_dublin_core(self._parse(html))

    def extract_rel_links(self, html: Document, base_url: Optional[str] = None) -> dict[str, list[str]]:
        return scan_rel_links(self._parse(html), base_url)

    def extract_oembed(self, html: Document, base_url: Optional[str] = None) -> OEmbedDiscovery:
        return scan_oembed(self._parse(html), base_url)

    def extract_manifest(
        self,
        html: Document,
        base_url: Optional[str] = None,
        manifest_json: Optional[str] = None
    ) -> ManifestDiscovery:
        """
        Locate the document's Web App Manifest.

        If the caller already fetched the manifest, pass its JSON as
        manifest_json and it is parsed relative to the discovered href.

        Raises:
            ManifestError: if manifest_json is supplied but can't be parsed
        """
        discovery = scan_manifest_link(self._parse(html), base_url)
        if manifest_json is not None:
            discovery.manifest = _parse_manifest(manifest_json, discovery.href or base_url)
        return discovery

    def parse_manifest(self, json_text: str, base_url: Optional[str] = None) -> WebAppManifest:
        return _parse_manifest(json_text, base_url)

    # --- Everything ---

    def extract_all(self, html: Document, base_url: Optional[str] = None) -> ExtractionResult:
        """
        Run every extractor over one parse of the document.

        A flat scanner that fails is logged and recorded in result.warnings;
        the remaining formats are still extracted.

        Raises:
            InputError: if the input isn't a usable document
        """
        soup = self._parse(html)
        result = ExtractionResult()

        logger.info("Starting extraction")

        result.microformats = MicroformatsParser(base_url).parse(soup)
        result.rdfa = RdfaParser(base_url).parse(soup)
        result.microdata = MicrodataParser(base_url).parse(soup)

        self._run(result, "meta", lambda: scan_meta(soup, base_url))
        self._run(result, "opengraph", lambda: scan_opengraph(soup, base_url))
        fallback = result.opengraph if self.settings.twitter_fallback else None
        self._run(result, "twitter", lambda: scan_twitter(soup, base_url, fallback=fallback))
        self._run(result, "jsonld", lambda: scan_jsonld(soup, warnings=result.warnings))
        self._run(result, "dublin_core", lambda: scan_dublin_core(soup))
        self._run(result, "rel_links", lambda: scan_rel_links(soup, base_url))
        self._run(result, "oembed", lambda: scan_oembed(soup, base_url))
        self._run(result, "manifest", lambda: scan_manifest_link(soup, base_url))

        mf_count = sum(len(items) for items in result.microformats.values())
        logger.info(
            f"Complete: {mf_count} microformats, {len(result.rdfa)} RDFa, "
            f"{len(result.microdata)} microdata items, {len(result.jsonld)} JSON-LD objects"
        )
        if result.warnings:
            logger.info(f"Extraction finished with {len(result.warnings)} warnings")
        return result

    @staticmethod
    def _run(result: ExtractionResult, field: str, scan: Callable[[], Any]) -> None:
        """Store one flat scanner's output on the result, or a warning if it failed."""
        try:
            setattr(result, field, scan())
        except Exception as e:
            logger.warning(f"{field} extraction failed: {e}")
            result.warnings.append(f"{field} extraction failed: {e}")

    def extract_file(self, file_path: Union[str, Path], base_url: Optional[str] = None) -> ExtractionResult:
        """Run extract_all() over an HTML file read as UTF-8 bytes."""
        return self.extract_all(Path(file_path).read_bytes(), base_url)


def extract_microformats(html: Document, base_url: Optional[str] = None) -> dict[str, list[Item]]:
    """Convenience function to extract Microformats2 items."""
    return StructuredDataExtractor().extract_microformats(html, base_url)


def extract_rdfa(html: Document, base_url: Optional[str] = None) -> list[Item]:
    """Convenience function to extract RDFa items."""
    return StructuredDataExtractor().extract_rdfa(html, base_url)


def extract_microdata(html: Document, base_url: Optional[str] = None) -> list[Item]:
    """Convenience function to extract Microdata items."""
    return StructuredDataExtractor().extract_microdata(html, base_url)


def extract_all(html: Document, base_url: Optional[str] = None) -> ExtractionResult:
    """Convenience function to run every extractor."""
    return StructuredDataExtractor().extract_all(html, base_url)


def extract_meta(html: Document, base_url: Optional[str] = None) -> MetaTags:
    return StructuredDataExtractor().extract_meta(html, base_url)


def extract_opengraph(html: Document, base_url: Optional[str] = None) -> OpenGraph:
    return StructuredDataExtractor().extract_opengraph(html, base_url)


def extract_twitter(html: Document, base_url: Optional[str] = None) -> TwitterCard:
    return StructuredDataExtractor().extract_twitter(html, base_url)


def extract_jsonld(html: Document) -> list[dict[str, Any]]:
    return StructuredDataExtractor().extract_jsonld(html)


def extract_dublin_core(html: Document) -> DublinCore:
    return StructuredDataExtractor().extract_dublin_core(html)


def extract_rel_links(html: Document, base_url: Optional[str] = None) -> dict[str, list[str]]:
    return StructuredDataExtractor().extract_rel_links(html, base_url)


def extract_oembed(html: Document, base_url: Optional[str] = None) -> OEmbedDiscovery:
    return StructuredDataExtractor().extract_oembed(html, base_url)


def extract_manifest(
    html: Document,
    base_url: Optional[str] = None,
    manifest_json: Optional[str] = None
) -> ManifestDiscovery:
    return StructuredDataExtractor().extract_manifest(html, base_url, manifest_json)


def parse_manifest(json_text: str, base_url: Optional[str] = None) -> WebAppManifest:
    """Convenience function to parse a Web App Manifest blob."""
    return _parse_manifest(json_text, base_url)
