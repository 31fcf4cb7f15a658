"""Seed catalog loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from qwiksale.core.logging_config import get_logger

from .expansion import RawProduct

logger = get_logger(__name__)

DEFAULT_SOURCE = Path(__file__).parent / "data" / "products.json"


class SeedDataError(Exception):
    """The seed catalog is missing or malformed."""


def load_seed(source: Optional[str] = None) -> List[RawProduct]:
    """
    Read the base product catalog.

    The file holds either a JSON array of products or an object with a
    ``products`` array. Without ``source`` the catalog bundled with the
    package is used.

    Raises:
        SeedDataError: if the file is missing, unreadable or not a product list
    """
    path = Path(source).expanduser().resolve() if source else DEFAULT_SOURCE
    if not path.is_file():
        raise SeedDataError(f"Could not find products data at {path}. Set SEED_SOURCE to a products JSON file.")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise SeedDataError(f"Failed to read seed catalog {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("products")
    if not isinstance(data, list):
        raise SeedDataError(f"Seed catalog {path} must be a list or an object with a 'products' list")

    try:
        products = [RawProduct.model_validate(item) for item in data]
    except ValidationError as e:
        raise SeedDataError(f"Invalid product in seed catalog {path}: {e}") from e

    logger.info(f"Loaded {len(products)} base products from {path}")
    return products
