"""
Catalog expansion.

Turns a small hand-written product catalog into enough rows for a realistic
feed: ``make_at_least`` clones base products with small price and date
variations, and ``map_to_products`` normalises the result into ``Product``
rows, attributing most of them to the demo seller.
"""

from __future__ import annotations

import math
import random
import re
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from qwiksale.core.database.entities.products import Product
from qwiksale.core.database.utils import utc_now

PLACEHOLDER_IMAGE = "/placeholder/default.jpg"

BRANDS = [
    "Samsung", "Apple", "Tecno", "HP", "Dell", "Toyota", "Nissan",
    "LG", "Sony", "Generic", "Local", "Chicco", "Coleman",
    "Yamaha", "Pioneer", "Nike", "Adidas",
]

DEFAULT_SELLER_NAME = "Private Seller"
DEFAULT_SELLER_LOCATION = "Nairobi"
DEFAULT_SELLER_PHONE = "254700000000"
DEFAULT_MEMBER_SINCE = "2024"
DEFAULT_SELLER_RATING = 4.5
DEFAULT_SELLER_SALES = 1

BRAND_NEW = "brand new"
PRE_OWNED = "pre-owned"
_BRAND_NEW_ALIASES = {"brand new", "brand-new", "brand_new"}


class RawSeller(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    member_since: Optional[str] = None
    rating: Optional[float] = None
    sales: Optional[int] = None


class RawProduct(BaseModel):
    """Product as written in the seed catalog (camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: Optional[Union[str, int]] = None
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    brand: Optional[str] = None
    condition: Optional[str] = None
    price: Optional[Union[float, str]] = None
    image: Optional[str] = None
    gallery: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    negotiable: Optional[bool] = None
    created_at: Optional[datetime] = None
    featured: Optional[bool] = None

    seller: Optional[RawSeller] = None
    seller_name: Optional[str] = None
    seller_phone: Optional[str] = None
    seller_location: Optional[str] = None
    seller_member_since: Optional[str] = None
    seller_rating: Optional[float] = None
    seller_sales: Optional[int] = None

    def seller_field(self, name: str) -> Any:
        """Flat ``seller_*`` value, falling back to the nested seller object."""
        value = getattr(self, f"seller_{name}")
        if value is None and self.seller is not None:
            value = getattr(self.seller, name)
        return value


def round_half_up(number: float) -> int:
    """Round to the nearest integer with halves going up, so 2.5 is 3 and -2.5 is -2."""
    return math.floor(number + 0.5)


def to_price(value: Any) -> Optional[int]:
    """Whole non-negative price, or None when missing or not numeric."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return max(0, round_half_up(number))


def normalize_phone(value: Optional[str]) -> Optional[str]:
    """Normalise a Kenyan mobile number to ``2547XXXXXXXX``; anything else is None."""
    if not value:
        return None
    digits = re.sub(r"\D+", "", str(value))
    if re.fullmatch(r"07\d{8}", digits):
        digits = "254" + digits[1:]
    if not re.fullmatch(r"2547\d{8}", digits):
        return None
    return digits


def random_created_at(days_back: int = 45, now: Optional[datetime] = None, rng: Optional[random.Random] = None) -> datetime:
    now = now or utc_now()
    rng = rng or random
    return now - timedelta(milliseconds=rng.randrange(days_back * 24 * 60 * 60 * 1000))


def as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def clone_price(price: Optional[int], bump: float) -> Optional[int]:
    if price is None:
        return None
    return max(0, price + round_half_up(price * bump))


def normalize_condition(value: Optional[str]) -> str:
    if value and value.strip().lower() in _BRAND_NEW_ALIASES:
        return BRAND_NEW
    return PRE_OWNED


def make_at_least(
    seed: Sequence[RawProduct],
    min_count: int,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> List[RawProduct]:
    """
    Clone base products until at least ``min_count`` rows exist.

    Clone ``i`` copies ``seed[i % len(seed)]`` with a ``• Batch n`` name
    suffix, a price moved by -9% to +9%, placeholder media, seller defaults
    and a random creation time in the last 45 days. Only two in three clones
    of a featured product stay featured.

    Args:
        seed: Base catalog
        min_count: Minimum number of rows to return
        now: Reference time for creation dates
        rng: Random source for creation dates

    Returns:
        The base rows followed by the clones
    """
    out = list(seed)
    if len(out) >= min_count or not seed:
        return out

    i = 0
    while len(out) < min_count:
        base = seed[i % len(seed)]
        bump = ((i % 7) - 3) * 0.03
        rating = base.seller_field("rating")
        sales = base.seller_field("sales")
        out.append(
            base.model_copy(
                update={
                    "id": None,
                    "name": f"{base.name} • Batch {i // len(seed) + 1}",
                    "price": clone_price(to_price(base.price), bump),
                    "brand": base.brand or BRANDS[i % len(BRANDS)],
                    "created_at": random_created_at(now=now, rng=rng),
                    "image": base.image or PLACEHOLDER_IMAGE,
                    "gallery": list(base.gallery) if base.gallery else [PLACEHOLDER_IMAGE],
                    "seller_name": base.seller_field("name") or DEFAULT_SELLER_NAME,
                    "seller_phone": normalize_phone(base.seller_field("phone") or DEFAULT_SELLER_PHONE),
                    "seller_location": base.seller_field("location") or DEFAULT_SELLER_LOCATION,
                    "seller_member_since": base.seller_field("member_since") or DEFAULT_MEMBER_SINCE,
                    "seller_rating": rating if rating is not None else DEFAULT_SELLER_RATING,
                    "seller_sales": sales if sales is not None else DEFAULT_SELLER_SALES,
                    "featured": bool(base.featured and i % 3 != 0),
                }
            )
        )
        i += 1
    return out


def map_to_products(
    rows: Sequence[RawProduct],
    demo_seller_id: Optional[str] = None,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> List[Product]:
    """
    Build ``Product`` rows from catalog entries.

    When a demo seller is given, every row except each fifth one is
    attributed to it and its seller snapshot is left for the seller's
    profile to fill in.

    Args:
        rows: Catalog entries, usually the output of ``make_at_least``
        demo_seller_id: Id of the demo seller account
        now: Reference time for missing creation dates
        rng: Random source for missing creation dates

    Returns:
        Unsaved product rows
    """
    products: List[Product] = []
    for idx, raw in enumerate(rows):
        use_demo = bool(demo_seller_id) and idx % 5 != 0
        rating = raw.seller_field("rating")
        sales = raw.seller_field("sales")

        def _default(value: Any, fallback: Any) -> Any:
            if value is not None:
                return value
            return None if use_demo else fallback

        products.append(
            Product(
                name=str(raw.name),
                description=raw.description,
                category=raw.category or "Misc",
                subcategory=raw.subcategory or "General",
                brand=raw.brand,
                condition=normalize_condition(raw.condition),
                price=to_price(raw.price),
                image=raw.image,
                gallery=[str(g) for g in raw.gallery],
                location=raw.location or raw.seller_field("location"),
                negotiable=bool(raw.negotiable),
                created_at=as_naive_utc(raw.created_at) if raw.created_at else random_created_at(now=now, rng=rng),
                featured=raw.featured if raw.featured is not None else idx % 9 == 0,
                seller_name=_default(raw.seller_field("name"), DEFAULT_SELLER_NAME),
                seller_phone=None if use_demo else normalize_phone(raw.seller_field("phone")),
                seller_location=_default(raw.seller_field("location"), DEFAULT_SELLER_LOCATION),
                seller_member_since=_default(raw.seller_field("member_since"), DEFAULT_MEMBER_SINCE),
                seller_rating=_default(rating, DEFAULT_SELLER_RATING),
                seller_sales=_default(sales, DEFAULT_SELLER_SALES),
                seller_id=demo_seller_id if use_demo else None,
            )
        )
    return products
