"""
Listing models - raw scraped records and the canonical listing representation.
"""
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SkipValidation


# Raw record as returned by the scraping actor. Any key may be missing and
# values are not trusted; known fields are read explicitly by the normalizer.
RawListing = dict[str, Any]

Number = Union[int, float]


class DerivedAttributes(BaseModel):
    """Attributes computed from the listing rather than read from it."""
    model_config = ConfigDict(populate_by_name=True)

    price_per_m2: Optional[Number] = Field(default=None, alias="pricePerM2")
    size_m2: Optional[Number] = Field(default=None, alias="sizeM2")
    layout_label: Optional[str] = Field(
        default=None,
        alias="layoutLabel",
        description="Layout as written in the listing, e.g. '2+kk'",
    )


class CanonicalListing(BaseModel):
    """
    Normalized listing with consistent field names.
    This is the internal representation used throughout the pipeline
    and the shape returned to API clients.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    url: str
    location: Optional[str] = None
    price: Optional[Number] = None
    size_m2: Optional[Number] = Field(default=None, alias="sizeM2")
    rooms: Optional[int] = None
    images: Optional[list[str]] = None
    description: Optional[str] = None

    # Reference to original data, kept as the same object
    raw: SkipValidation[RawListing] = Field(default_factory=dict)

    derived: DerivedAttributes = Field(default_factory=DerivedAttributes)

    # Filled in by the score merger
    ai_score: Optional[float] = Field(default=None, ge=0, le=100, alias="aiScore")
    ai_reason: Optional[str] = Field(default=None, alias="aiReason")
    ai_highlights: Optional[list[str]] = Field(default=None, alias="aiHighlights")

    def to_public_dict(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys and unset optionals left out."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def scoring_view(self) -> dict[str, Any]:
        """The subset of fields the scoring model is shown."""
        return {
            "title": self.title,
            "price": self.price,
            "sizeM2": self.size_m2,
            "rooms": self.rooms,
            "location": self.location,
            "derived": self.derived.model_dump(mode="json", by_alias=True, exclude_none=True),
            "description": self.description,
        }
