from typing import Optional
from urllib.parse import urljoin, urlsplit

from extruct.utils import parse_html
from lxml import etree
from lxml.html import HtmlElement
from w3lib.url import safe_url_string

from src.core.scraper.schemas.extracted_product import ProductRecord
from src.core.utils.currency_normalizer import detect_currency
from src.core.utils.logger import get_logger
from src.core.utils.price_normalizer import to_number_or_none
from src.strategies.base import pick_first
from src.strategies.json_ld import JsonLDExtractor, StructuredFields
from src.strategies.meta_tags import MetaTagExtractor, MetaFields

logger = get_logger(__name__)

# Schemes that are only meaningful with a host part
HIERARCHICAL_SCHEMES = ("http", "https")

structured_extractor = JsonLDExtractor()
fallback_extractor = MetaTagExtractor()


def parse_document(html: Optional[str]) -> Optional[HtmlElement]:
    """
    Parse raw HTML into an lxml tree.

    Args:
        html: Page markup as text; may be empty or broken

    Returns:
        Root element of the page, or None if there is nothing usable to parse
    """
    if not html or not html.strip():
        return None

    try:
        tree = parse_html(html.encode("utf-8", errors="replace"), encoding="utf-8")
    except (etree.LxmlError, ValueError) as exc:
        logger.debug("Could not parse HTML document", extra={"error": str(exc)})
        return None

    return tree if isinstance(tree, HtmlElement) else None


def resolve_url(base_url: Optional[str], reference: Optional[str]) -> str:
    """
    Resolve a possibly relative reference against the page URL.

    Args:
        base_url: Final URL of the page (after redirects and rendering)
        reference: Absolute or relative URL found on the page

    Returns:
        The absolute, percent-escaped URL, or "" if the reference is empty or
        cannot be turned into a valid absolute URL
    """
    if not reference:
        return ""

    try:
        resolved = urljoin(base_url or "", reference)
        parts = urlsplit(resolved)
        if not parts.scheme:
            return ""
        if parts.scheme in HIERARCHICAL_SCHEMES and not parts.hostname:
            return ""
        return safe_url_string(resolved)
    except ValueError as exc:
        logger.debug(
            "Could not resolve URL",
            extra={"base_url": base_url, "reference": reference, "error": str(exc)},
        )
        return ""


def merge_fields(
    structured: StructuredFields, fallback: MetaFields, base_url: Optional[str]
) -> ProductRecord:
    """
    Combine structured-data fields with the meta tag fallback.

    Structured data wins field by field; the fallback only fills gaps. When no
    currency is declared anywhere, it is guessed from the raw fallback price
    text (e.g. "$19.99").

    Args:
        structured: Fields from JSON-LD
        fallback: Raw strings from meta tags and microdata
        base_url: Final page URL used to absolutize the image

    Returns:
        The merged ProductRecord
    """
    price = structured.price
    if price is None:
        price = to_number_or_none(fallback.price)

    currency = (
        structured.currency
        or pick_first(fallback.currency)
        or detect_currency(fallback.price)
    )

    return ProductRecord(
        title=pick_first(structured.title, fallback.title),
        image_url=resolve_url(base_url, pick_first(structured.image_url, fallback.image)),
        price=price,
        currency=currency or None,
    )


def extract(html: Optional[str], base_url: Optional[str]) -> ProductRecord:
    """
    Extract a best-effort product record from a rendered page.

    Pure function: the same (html, base_url) always gives the same record, and
    broken markup or broken JSON-LD only ever leads to emptier fields.

    Args:
        html: Final HTML of the page
        base_url: Final URL of the page

    Returns:
        ProductRecord, possibly with every field empty
    """
    tree = parse_document(html)

    record = merge_fields(
        structured_extractor.extract(tree),
        fallback_extractor.extract(tree),
        base_url,
    )

    logger.debug(
        "Extracted product record",
        extra={"base_url": base_url, "record": record.to_payload()},
    )
    return record
