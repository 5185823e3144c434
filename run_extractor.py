#!/usr/bin/env python3
"""
CLI script to run the structured-markup extractors.

Reads HTML files and prints (or saves) everything found in them as JSON:
Microformats2, RDFa and Microdata items plus the flat-scan records.

  python run_extractor.py page.html --base-url https://example.com/page
  python run_extractor.py *.html --format rdfa --plain -o out.json

Settings come from STRUCTURED_MARKUP_* environment variables (a .env file
in the working directory is loaded first).
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from structured_markup.config import ExtractorSettings
from structured_markup.main import StructuredDataExtractor
from structured_markup.output import to_plain
from structured_markup.exceptions import StructuredMarkupError

FORMATS = ("all", "microformats", "rdfa", "microdata")


def extract(extractor: StructuredDataExtractor, html: bytes, fmt: str, base_url, plain: bool):
    """Run one format over a document and return JSON-ready data."""
    if fmt == "microformats":
        found = extractor.extract_microformats(html, base_url)
    elif fmt == "rdfa":
        found = extractor.extract_rdfa(html, base_url)
    elif fmt == "microdata":
        found = extractor.extract_microdata(html, base_url)
    else:
        found = extractor.extract_all(html, base_url)

    if plain:
        return to_plain(found)
    if isinstance(found, list):
        return [item.model_dump(mode="json") for item in found]
    if isinstance(found, dict):
        return {t: [item.model_dump(mode="json") for item in items] for t, items in found.items()}
    return found.model_dump(mode="json")


def main():
    parser = argparse.ArgumentParser(description="Extract structured markup from HTML files")
    parser.add_argument("files", nargs="+", help="HTML files to process")
    parser.add_argument("--base-url", "-b", help="Base URL for resolving relative references")
    parser.add_argument("--format", "-f", choices=FORMATS, default="all", help="Which format to extract")
    parser.add_argument("--plain", action="store_true", help="Compact {type, properties} output")
    parser.add_argument("--output", "-o", help="Output JSON file")
    args = parser.parse_args()

    extractor = StructuredDataExtractor(ExtractorSettings.from_env())
    results = []

    for filepath in args.files:
        path = Path(filepath)
        print(f"Extracting: {path.name}", file=sys.stderr)

        try:
            data = extract(extractor, path.read_bytes(), args.format, args.base_url, args.plain)
            results.append({
                "file": path.name,
                "status": "success",
                "data": data
            })
            print("  ✓ done", file=sys.stderr)

        except (OSError, StructuredMarkupError) as e:
            results.append({
                "file": path.name,
                "status": "error",
                "error": str(e)
            })
            print(f"  ✗ Error: {e}", file=sys.stderr)

    # ensure_ascii=False preserves unicode characters in the JSON
    output = json.dumps(results, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"\nSaved to: {args.output}", file=sys.stderr)
    else:
        print(output)


if __name__ == "__main__":
    main()
