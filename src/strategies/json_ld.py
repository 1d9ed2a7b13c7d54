import json
from dataclasses import asdict, dataclass, replace
from typing import Optional, Dict, Any, List

from lxml.html import HtmlElement

from .base import BaseExtractor
from ..core.utils.logger import get_logger
from ..core.utils.price_normalizer import to_number_or_none

logger = get_logger(__name__)

JSON_LD_XPATH = '//script[@type="application/ld+json"]'

# Keys whose values hold further entities; they are unwrapped after their parent
CONTAINER_KEYS = ("@graph", "graph", "mainEntity", "itemListElement", "offers")

# Price keys of an offer, in order of preference
OFFER_PRICE_KEYS = ("price", "lowPrice", "highPrice")


@dataclass(frozen=True)
class StructuredFields:
    """Product fields read from JSON-LD, filled in candidate order."""

    title: str = ""
    image_url: str = ""
    price: Optional[float] = None
    currency: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.title and self.image_url and self.price is not None)


def flatten_json_ld(node: Any) -> List[Dict[str, Any]]:
    """
    Flatten a parsed JSON-LD document into an ordered list of candidate entities.

    Arrays are unwrapped into their elements, scalars are dropped, and every
    object is listed before the entities nested under its @graph/graph,
    mainEntity, itemListElement and offers keys.

    Args:
        node: Any value produced by ``json.loads``

    Returns:
        All objects found, in document (pre-)order

    Examples:
        Input: {"@graph": [{"@type": "WebPage"}, {"@type": "Product"}]}
        Output: [{"@graph": [...]}, {"@type": "WebPage"}, {"@type": "Product"}]
    """
    found: List[Dict[str, Any]] = []

    if isinstance(node, list):
        for el in node:
            found.extend(flatten_json_ld(el))
    elif isinstance(node, dict):
        found.append(node)
        for key in CONTAINER_KEYS:
            child = node.get(key)
            if child:
                found.extend(flatten_json_ld(child))

    return found


class JsonLDExtractor(BaseExtractor):
    """
    Extractor for JSON-LD structured data blocks.

    Every ``application/ld+json`` script on the page contributes candidates;
    Product entities take precedence over everything else when present.
    """

    name = "json-ld"

    def extract(self, tree: Optional[HtmlElement]) -> StructuredFields:
        """
        Read title, image, price and currency from the page's JSON-LD.

        Args:
            tree: Parsed page, or None

        Returns:
            StructuredFields; fields that no candidate provides stay empty/None
        """
        if tree is None:
            return StructuredFields()

        candidates = self.find_candidates(tree)

        fields = StructuredFields()
        for node in candidates:
            fields = self._absorb(fields, node)
            if fields.is_complete:
                break

        logger.debug(
            "JSON-LD extraction finished",
            extra={"candidates": len(candidates), "fields": asdict(fields)},
        )
        return fields

    def find_candidates(self, tree: HtmlElement) -> List[Dict[str, Any]]:
        """Flatten all blocks on the page and keep only Products when there are any."""
        nodes: List[Dict[str, Any]] = []
        for document in self._parse_blocks(tree):
            try:
                nodes.extend(flatten_json_ld(document))
            except RecursionError:
                logger.debug("Skipping JSON-LD block nested too deeply")

        products = [n for n in nodes if self._is_product_item(n)]
        return products or nodes

    def _parse_blocks(self, tree: HtmlElement) -> List[Any]:
        """Decode every JSON-LD script in document order, skipping malformed ones."""
        documents = []
        for index, script in enumerate(tree.xpath(JSON_LD_XPATH)):
            payload = script.xpath("string()")
            try:
                documents.append(json.loads(payload))
            except (ValueError, RecursionError) as exc:
                logger.debug(
                    "Skipping malformed JSON-LD block",
                    extra={"block": index, "error": str(exc)},
                )
        return documents

    def _absorb(self, fields: StructuredFields, node: Dict[str, Any]) -> StructuredFields:
        """Fill the fields that are still empty from one candidate; earlier candidates win."""
        changes: Dict[str, Any] = {}

        if not fields.title:
            title = self._get_text(node, "name")
            if title:
                changes["title"] = title

        if not fields.image_url:
            image = self._get_first_string(node, "image")
            if image:
                changes["image_url"] = image

        if fields.price is None:
            offer = self._normalize_offers(node.get("offers"))
            if offer:
                changes["price"] = to_number_or_none(self._offer_price(offer))
                currency = self._get_text(offer, "priceCurrency")
                if currency and fields.currency is None:
                    changes["currency"] = currency

        return replace(fields, **changes) if changes else fields

    def _offer_price(self, offer: Dict[str, Any]) -> Any:
        """Return the first of price/lowPrice/highPrice that is present (null counts as missing)."""
        for key in OFFER_PRICE_KEYS:
            value = offer.get(key)
            if value is not None:
                return value
        return None
