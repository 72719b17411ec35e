"""Registrable-domain helpers shared by the scanners."""

from __future__ import annotations

from urllib.parse import urlsplit

import tldextract

# Bundled public suffix snapshot only: no network access at import or call time
_extract = tldextract.TLDExtract(suffix_list_urls=(), include_psl_private_domains=True)


def main_domain(url: str) -> str:
    """Registrable domain of *url* without its public suffix.

    ``https://www.google.co.uk/search?q=x`` gives ``"google"`` and
    ``https://search.brave.com/`` gives ``"brave"``.  Unparseable input gives
    an empty string.
    """
    try:
        host = urlsplit(url).hostname if "//" in url else url
    except ValueError:
        return ""
    if not host:
        return ""
    return _extract(host).domain
