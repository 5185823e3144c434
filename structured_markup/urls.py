"""
URL resolution against an optional document base.

resolve() is best-effort: it never raises, and whenever it can't do better it
hands back the candidate it was given.
"""

import re
from typing import Optional
from urllib.parse import urljoin, urlsplit

# RFC 3986 scheme: ALPHA *( ALPHA / DIGIT / "+" / "-" / "." ) ":"
SCHEME_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*:')


def has_scheme(reference: str) -> bool:
    """True if the reference is already fully qualified (e.g. https:, mailto:)."""
    return bool(SCHEME_PATTERN.match(reference))


def resolve(candidate: str, base: Optional[str] = None) -> str:
    """
    Resolve a candidate reference against a base URL.

    Args:
        candidate: URL reference as found in the markup
        base: Document base URL, if known

    Returns:
        The absolute URL, or the candidate unchanged when there's no base,
        the candidate is already absolute, or either side can't be parsed.
        Surrounding whitespace is only dropped when a join actually happens.
    """
    reference = candidate.strip()
    if not base or not base.strip() or has_scheme(reference):
        return candidate

    base = base.strip()
    # A base without a scheme (e.g. "not-a-url") can't anchor anything
    if not has_scheme(base):
        return candidate

    try:
        # urlsplit raises ValueError on things like malformed IPv6 hosts
        urlsplit(base)
        urlsplit(reference)
        return urljoin(base, reference)
    except ValueError:
        return candidate
