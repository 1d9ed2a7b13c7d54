from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ProductRecord(BaseModel):
    """Best-effort product data extracted from a single rendered page.

    Every field is independently optional: an empty title never prevents a
    price from being reported, and vice versa.
    """

    title: str = Field("", description="Product title, empty when none was found.")
    image_url: str = Field(
        "",
        alias="imageUrl",
        description="Absolute URL of the primary product image, or empty.",
    )
    price: Optional[float] = Field(None, description="Numeric price, if any.")
    currency: Optional[str] = Field(
        None, description="ISO 4217 currency code (e.g. 'EUR', 'USD', 'GBP')."
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    def to_payload(self) -> dict:
        """Return the record in the camelCase shape used on the wire."""
        return self.model_dump(by_alias=True)
