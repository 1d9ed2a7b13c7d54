from dataclasses import dataclass
from typing import Optional, Tuple, List

from lxml.html import HtmlElement

from .base import BaseExtractor, pick_first

# (field, xpath, attribute). Attribute None means "text of the element".
# Only the first element matching an xpath is consulted. Order is priority.
META_SOURCES: Tuple[Tuple[str, str, Optional[str]], ...] = (
    ("title", '//meta[@property="og:title"]', "content"),
    ("title", '//meta[@name="twitter:title"]', "content"),
    ("title", "//title", None),
    ("image", '//meta[@property="og:image"]', "content"),
    ("image", '//meta[@name="twitter:image"]', "content"),
    ("price", '//meta[@property="product:price:amount"]', "content"),
    ("price", '//meta[@name="product:price:amount"]', "content"),
    ("price", '//*[@itemprop="price"]', "content"),
    ("price", '//*[@itemprop="price"]', None),
    ("currency", '//meta[@property="product:price:currency"]', "content"),
    ("currency", '//meta[@name="product:price:currency"]', "content"),
    ("currency", '//*[@itemprop="priceCurrency"]', "content"),
    ("currency", '//*[@itemprop="priceCurrency"]', None),
)


@dataclass(frozen=True)
class MetaFields:
    """Raw, trimmed strings read from meta tags and microdata; "" when absent."""

    title: str = ""
    image: str = ""
    price: str = ""
    currency: str = ""


class MetaTagExtractor(BaseExtractor):
    """
    Fallback extractor for OpenGraph, Twitter Card, product: meta tags,
    microdata itemprop attributes and the document title.
    """

    name = "meta-tags"

    def extract(self, tree: Optional[HtmlElement]) -> MetaFields:
        if tree is None:
            return MetaFields()

        return MetaFields(
            title=self._read_field(tree, "title"),
            image=self._read_field(tree, "image"),
            price=self._read_field(tree, "price"),
            currency=self._read_field(tree, "currency"),
        )

    def _read_field(self, tree: HtmlElement, field: str) -> str:
        values = [
            self._read_source(tree, xpath, attribute)
            for name, xpath, attribute in META_SOURCES
            if name == field
        ]
        return pick_first(*values)

    def _read_source(
        self, tree: HtmlElement, xpath: str, attribute: Optional[str]
    ) -> str:
        matches: List[HtmlElement] = tree.xpath(xpath)
        if not matches:
            return ""

        element = matches[0]
        if attribute is None:
            return element.text_content()
        return element.get(attribute, "")
