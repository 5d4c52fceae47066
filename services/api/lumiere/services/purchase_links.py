from __future__ import annotations

from urllib.parse import quote, urlparse

from lumiere.schemas.styling import Recommendation

PLACEHOLDER_DOMAIN_MARKER = "example.com"

# Checked in order; the first platform whose key is a substring of the
# recommendation's platform name wins.
PLATFORM_SEARCH_TEMPLATES: tuple[tuple[str, str], ...] = (
    ("ajio", "https://www.ajio.com/search/?text={query}"),
    ("myntra", "https://www.myntra.com/search?q={query}"),
    ("amazon", "https://www.amazon.in/s?k={query}"),
    ("flipkart", "https://www.flipkart.com/search?q={query}"),
)
FALLBACK_SEARCH_TEMPLATE = "https://www.google.com/search?q={query}+buy+online"

# encodeURIComponent leaves these unescaped.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_query(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def is_usable_purchase_url(url: str | None) -> bool:
    if not url:
        return False
    candidate = url.strip()
    if not candidate.lower().startswith("https://"):
        return False
    if PLACEHOLDER_DOMAIN_MARKER in candidate.lower():
        return False
    return bool(urlparse(candidate).netloc)


def search_url_for(platform: str | None, name: str, category: str) -> str:
    query = encode_query(f"{name} {category}")
    if PLACEHOLDER_DOMAIN_MARKER in query.lower():
        query = query.replace(".", "%2E")
    platform_key = (platform or "").lower()
    for key, template in PLATFORM_SEARCH_TEMPLATES:
        if key in platform_key:
            return template.format(query=query)
    return FALLBACK_SEARCH_TEMPLATE.format(query=query)


def repair_url(recommendation: Recommendation) -> str:
    if is_usable_purchase_url(recommendation.purchase_url):
        return recommendation.purchase_url.strip()
    return search_url_for(recommendation.platform, recommendation.name, recommendation.category)
