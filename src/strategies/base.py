from typing import Optional, List, Dict, Any
from abc import ABC, abstractmethod

from lxml.html import HtmlElement

PRODUCT_TYPE = "product"


def pick_first(*values: Any) -> str:
    """
    Return the first value that is non-empty after trimming.

    Args:
        *values: Candidate values in priority order; None counts as empty

    Returns:
        The trimmed winner, or "" if every candidate is empty
    """
    for value in values:
        text = ("" if value is None else str(value)).strip()
        if text:
            return text
    return ""


class BaseExtractor(ABC):
    """
    Abstract base class for the extractors that read one parsed HTML document.

    Provides the shape-checking helpers used to read arbitrary structured data
    without assuming a fixed schema: anything that does not have the expected
    shape is treated as absent instead of raising.
    """

    name: str = "base"

    @abstractmethod
    def extract(self, tree: Optional[HtmlElement]) -> Any:
        """
        Extract raw product fields from a parsed document.

        Args:
            tree: Root element of the parsed page, or None if the page could not be parsed

        Returns:
            The extractor's field container; empty when nothing was found

        Raises:
            NotImplementedError: Must be implemented by subclasses
        """
        raise NotImplementedError

    def _safe_get(self, data: Any, key: str) -> Any:
        """Get ``data[key]`` when data is a dictionary, else None."""
        return data.get(key) if isinstance(data, dict) else None

    def _get_text(self, data: Any, key: str) -> str:
        """
        Get a trimmed string property, treating non-strings as missing.

        Args:
            data: Dictionary containing the property
            key: Property key to retrieve

        Returns:
            The trimmed string, or "" if the value is missing or not a string
        """
        value = self._safe_get(data, key)
        return value.strip() if isinstance(value, str) else ""

    def _get_first_string(self, data: Any, key: str) -> str:
        """
        Get a property that may be a single string or a list of strings.

        Only the first list element is considered; if it is not a string the
        property counts as missing.

        Returns:
            The trimmed first string, or "" if none
        """
        value = self._safe_get(data, key)
        if isinstance(value, list):
            value = value[0] if value else None
        return value.strip() if isinstance(value, str) else ""

    def _normalize_offers(self, offers: Any) -> Dict[str, Any]:
        """
        Normalize offers data to a single offer dictionary.

        Handles:
        - Single dict
        - List of dicts (returns first)

        Args:
            offers: Offers data (can be dict, list, or other)

        Returns:
            Dictionary containing offer information, empty dict if invalid
        """
        if isinstance(offers, dict):
            return offers

        if isinstance(offers, list) and offers and isinstance(offers[0], dict):
            return offers[0]

        return {}

    def _extract_types(self, item: Any) -> List[str]:
        """
        Extract the ``@type`` strings of a data item.

        Handles a single string ("Product") or a list of strings; anything else
        is ignored.

        Returns:
            A list of trimmed, non-empty type strings
        """
        raw = self._safe_get(item, "@type")
        if isinstance(raw, str):
            raw = [raw]
        if not isinstance(raw, list):
            return []

        return [t.strip() for t in raw if isinstance(t, str) and t.strip()]

    def _is_product_item(self, item: Any) -> bool:
        """Return True if the given item's type discriminator is 'Product', in any casing."""
        return any(t.lower() == PRODUCT_TYPE for t in self._extract_types(item))
