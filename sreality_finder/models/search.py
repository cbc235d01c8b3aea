"""
Search request models - incoming payload and the normalized parameter set.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .listing import CanonicalListing


class NormalizedSearchParams(BaseModel):
    """Search parameters after trimming, as used by the scraper and the filter."""
    model_config = ConfigDict(populate_by_name=True)

    city: str = Field(min_length=1)
    price_max: Optional[int] = Field(default=None, gt=0, alias="priceMax")
    price_m2_max: Optional[int] = Field(default=None, gt=0, alias="priceM2Max")
    rooms_from: Optional[int] = Field(default=None, gt=0, alias="roomsFrom")
    keywords: list[str] = Field(default_factory=list)


class SearchPayload(BaseModel):
    """
    Body of a search request.

    Numbers and flags are strict: "5" is rejected for roomsFrom,
    as is 2.5.
    """
    model_config = ConfigDict(populate_by_name=True)

    city: str = Field(min_length=2, strict=True)
    price_max: Optional[int] = Field(default=None, gt=0, strict=True, alias="priceMax")
    price_m2_max: Optional[int] = Field(default=None, gt=0, strict=True, alias="priceM2Max")
    rooms_from: Optional[int] = Field(default=None, gt=0, strict=True, alias="roomsFrom")
    keywords: Optional[list[str]] = None
    ai_scoring: Optional[bool] = Field(default=None, strict=True, alias="aiScoring")

    @field_validator("city")
    @classmethod
    def city_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("city must not be blank")
        return v

    @field_validator("keywords")
    @classmethod
    def trim_keywords(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        """Trim each keyword; a keyword that is empty after trimming is invalid."""
        if v is None:
            return None
        trimmed = [keyword.strip() for keyword in v]
        if any(not keyword for keyword in trimmed):
            raise ValueError("keywords must not contain empty strings")
        return trimmed

    def normalize(self) -> NormalizedSearchParams:
        """Build the parameter set passed to the scraper and the filter."""
        return NormalizedSearchParams(
            city=self.city.strip(),
            price_max=self.price_max,
            price_m2_max=self.price_m2_max,
            rooms_from=self.rooms_from,
            keywords=[k.strip() for k in (self.keywords or []) if k.strip()],
        )

    def to_record(self) -> dict:
        """Payload as stored with the search record."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SearchResponse(BaseModel):
    """Result of a completed search."""
    model_config = ConfigDict(populate_by_name=True)

    search_id: str = Field(alias="searchId")
    results: list[CanonicalListing] = Field(default_factory=list)

    def to_public_dict(self) -> dict:
        return {
            "searchId": self.search_id,
            "results": [item.to_public_dict() for item in self.results],
        }
