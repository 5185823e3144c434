"""
Web App Manifest discovery and parsing.

The document only says where the manifest lives (<link rel="manifest">).
Fetching it is the caller's business; if they hand the JSON back to
parse_manifest() its URLs are resolved against the manifest's own location.
"""

import json
from typing import Any, Optional

from bs4 import BeautifulSoup

from .dom import attr_tokens, get_attr, select
from .exceptions import ManifestError
from .logger import get_module_logger
from .schemas import ManifestDiscovery, ManifestImage, ManifestShortcut, WebAppManifest
from .urls import resolve

logger = get_module_logger("manifest")

_STRING_FIELDS = (
    "name", "short_name", "description", "display", "orientation",
    "theme_color", "background_color", "lang", "dir",
)


def scan_manifest_link(soup: BeautifulSoup, base_url: Optional[str] = None) -> ManifestDiscovery:
    """Locate the first <link rel="manifest">."""
    for elem in select(soup, "link[rel][href]"):
        if "manifest" not in (r.lower() for r in attr_tokens(elem, "rel")):
            continue
        href = get_attr(elem, "href").strip()
        if href:
            return ManifestDiscovery(href=resolve(href, base_url))
    return ManifestDiscovery()


def parse_manifest(json_text: str, base_url: Optional[str] = None) -> WebAppManifest:
    """
    Parse a Web App Manifest JSON blob.

    Args:
        json_text: Manifest content as fetched by the caller
        base_url: URL of the manifest itself; start_url, scope and image
                  sources are resolved against it

    Returns:
        WebAppManifest

    Raises:
        ManifestError: if the blob isn't JSON or isn't a JSON object
    """
    try:
        data = json.loads(json_text)
    except (TypeError, json.JSONDecodeError) as e:
        raise ManifestError(
            f"Manifest is not valid JSON: {e}",
            details={"base_url": base_url}
        ) from e

    if not isinstance(data, dict):
        raise ManifestError(
            f"Manifest must be a JSON object, got {type(data).__name__}",
            details={"base_url": base_url}
        )

    manifest = WebAppManifest()
    for field in _STRING_FIELDS:
        value = data.get(field)
        if isinstance(value, str):
            setattr(manifest, field, value)

    for field in ("start_url", "scope"):
        value = data.get(field)
        if isinstance(value, str):
            setattr(manifest, field, resolve(value, base_url))

    categories = data.get("categories")
    if isinstance(categories, list):
        manifest.categories = [c for c in categories if isinstance(c, str)]

    manifest.icons = _images(data.get("icons"), base_url)
    manifest.screenshots = _images(data.get("screenshots"), base_url)

    shortcuts = data.get("shortcuts")
    if isinstance(shortcuts, list):
        for entry in shortcuts:
            if not isinstance(entry, dict):
                continue
            name, url = entry.get("name"), entry.get("url")
            if not isinstance(name, str) or not isinstance(url, str):
                logger.debug("Skipping manifest shortcut without name/url")
                continue
            manifest.shortcuts.append(ManifestShortcut(
                name=name,
                url=resolve(url, base_url),
                short_name=_string(entry.get("short_name")),
                description=_string(entry.get("description")),
                icons=_images(entry.get("icons"), base_url)
            ))

    logger.debug(f"Parsed manifest '{manifest.name}' with {len(manifest.icons)} icons")
    return manifest


def _string(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _images(entries: Any, base_url: Optional[str]) -> list[ManifestImage]:
    images = []
    if not isinstance(entries, list):
        return images
    for entry in entries:
        if not isinstance(entry, dict) or not isinstance(entry.get("src"), str):
            continue
        images.append(ManifestImage(
            src=resolve(entry["src"], base_url),
            sizes=_string(entry.get("sizes")),
            type=_string(entry.get("type")),
            purpose=_string(entry.get("purpose"))
        ))
    return images
