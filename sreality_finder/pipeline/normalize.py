"""
Listing normalization - turn raw scraped records into CanonicalListing models.

Sreality listings are inconsistent: size, price and layout are often only
present in the free text. Explicit fields win; otherwise the values are pulled
out of the title and description with the Czech conventions the scraper
produces ("55 m2", "4 500 000 Kč", "2+kk").
"""
import base64
import logging
import math
import re
import uuid
from typing import Any, Optional

from ..models.listing import CanonicalListing, DerivedAttributes, Number, RawListing


logger = logging.getLogger(__name__)


DEFAULT_TITLE = "Bez názvu"
DEFAULT_URL = "#"

SIZE_PATTERN = re.compile(r"(\d+(\.\d+)?)\s?(m2|m²)", re.IGNORECASE)

# Applied to text with all whitespace removed. No thousands separators other
# than spaces are understood: "4.500.000" yields 500.
PRICE_PATTERN = re.compile(r"(\d{2,})\s?(Kc|CZK)?", re.IGNORECASE)

ROOM_PATTERNS = [
    re.compile(r"(\d+)\s*\+?\s*kk", re.IGNORECASE),
    re.compile(r"(\d+)\s*kk", re.IGNORECASE),
]

LAYOUT_PATTERN = re.compile(r"\d+\s*\+\s*kk|\d+\s*kk", re.IGNORECASE)


def _as_number(value: Any) -> Optional[Number]:
    """Return value if it is a real number (bools excluded)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return None


def _as_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _parse_int(digits: str) -> Optional[int]:
    """int() of a digit run; None past the interpreter's digit limit."""
    try:
        return int(digits)
    except ValueError:
        return None


def _first_match(pattern: re.Pattern, *texts: Optional[str]) -> Optional[re.Match]:
    """Search each text in order and return the first match."""
    for text in texts:
        if not text:
            continue
        match = pattern.search(text)
        if match:
            return match
    return None


def create_listing_id(raw: RawListing) -> str:
    """
    Stable id for a raw listing.

    Uses the source id, then a base64 encoding of the URL. Listings with
    neither get a random UUID, which differs on every normalization.

    Deduplication keys on the URL first, so two records sharing a source id
    but not a URL both survive it and end up with the same id.
    """
    listing_id = raw.get("id")
    if listing_id is not None and listing_id != "":
        return str(listing_id)

    url = raw.get("url")
    if url:
        return base64.b64encode(str(url).encode("utf-8")).decode("ascii")

    return str(uuid.uuid4())


def parse_size(*texts: Optional[str]) -> Optional[float]:
    """Floor area in m² from the first '<number> m2' found."""
    match = _first_match(SIZE_PATTERN, *texts)
    if not match:
        return None
    size = float(match.group(1))
    return size if math.isfinite(size) else None


def parse_price(text: Optional[str]) -> Optional[int]:
    """First run of two or more digits once whitespace is removed."""
    if not text:
        return None
    match = PRICE_PATTERN.search(re.sub(r"\s", "", text))
    return _parse_int(match.group(1)) if match else None


def parse_rooms(*texts: Optional[str]) -> Optional[int]:
    """Room count from an 'N+kk' or 'Nkk' layout."""
    for text in texts:
        if not text:
            continue
        for pattern in ROOM_PATTERNS:
            match = pattern.search(text)
            if match:
                return _parse_int(match.group(1))
    return None


def derive_layout_label(*texts: Optional[str]) -> Optional[str]:
    """Layout exactly as written, e.g. '2+kk' or '3 + kk'."""
    match = _first_match(LAYOUT_PATTERN, *texts)
    return match.group(0) if match else None


def compute_price_per_m2(price: Optional[Number], size: Optional[Number]) -> Optional[int]:
    """
    Price per m² rounded half up; None unless both values are known and size > 0.

    Also None when the ratio does not fit a float.
    """
    if price is None or size is None or size <= 0:
        return None
    try:
        return math.floor(price / size + 0.5)
    except OverflowError:
        return None


def normalize_listing(raw: RawListing) -> CanonicalListing:
    """
    Convert a raw scraped record to a CanonicalListing.

    Never raises on bad data: anything missing or malformed is left unset.
    """
    title = _as_text(raw.get("title"))
    description = _as_text(raw.get("description"))

    size = _as_number(raw.get("size"))
    if size is None:
        size = _as_number(raw.get("area"))
    if size is None:
        size = parse_size(title, description)

    price = _as_number(raw.get("price"))
    if price is None:
        price = parse_price(description)

    rooms_value = _as_number(raw.get("rooms"))
    rooms = int(rooms_value) if rooms_value is not None else parse_rooms(title, description)

    images = raw.get("images")
    if isinstance(images, list):
        images = [image for image in images if isinstance(image, str)]
    else:
        images = None

    return CanonicalListing(
        id=create_listing_id(raw),
        title=title if title is not None else DEFAULT_TITLE,
        url=_as_text(raw.get("url")) or DEFAULT_URL,
        location=_as_text(raw.get("locality")),
        price=price,
        size_m2=size,
        rooms=rooms,
        images=images,
        description=description,
        raw=raw,
        derived=DerivedAttributes(
            price_per_m2=compute_price_per_m2(price, size),
            size_m2=size,
            layout_label=derive_layout_label(title, description),
        ),
    )


def normalize_listings(raw_items: list[RawListing]) -> list[CanonicalListing]:
    """
    Normalize a list of raw records.
    """
    return [normalize_listing(item) for item in raw_items]
