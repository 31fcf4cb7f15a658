"""
Response header helpers.

Admin and moderation responses must never be cached; public catalog
responses may be cached at the edge for a short time.
"""

from typing import Dict

from fastapi import Response

NO_STORE_HEADERS: Dict[str, str] = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "Vary": "Authorization, Cookie, Accept-Encoding",
}

PUBLIC_CACHE_CONTROL = "public, s-maxage=60, stale-while-revalidate=30"


def apply_no_store(response: Response) -> None:
    for name, value in NO_STORE_HEADERS.items():
        response.headers[name] = value


def apply_public_cache(response: Response) -> None:
    response.headers["Cache-Control"] = PUBLIC_CACHE_CONTROL
    response.headers["Vary"] = "Accept-Encoding"
