"""
Seed Runner.

Entry point of ``qwiksale-seed``. With no ``SEED_*`` switch set it does
nothing, which makes it safe to run on every deploy. Switches:

- ``SEED_PURGE_DEMO``: delete the demo seller and obvious demo listings
- ``SEED_RESET`` + ``SEED_RESET_ALL``: wipe marketplace tables
- ``SEED_DEMO``: create two demo sellers with one product and one service
- ``SEED_CATALOG``: load the product catalog, expand it to ``SEED_MIN`` rows
  and insert it (``SEED_RESET`` clears products first)

In production (``QWIKSALE_ENV=production``) every modifying run is refused
unless ``SEED_ALLOW_PROD=1``.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Dict, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from qwiksale.core.database.entities.favorites import Favorite
from qwiksale.core.database.entities.payments import Payment
from qwiksale.core.database.entities.products import Product
from qwiksale.core.database.entities.services import Service
from qwiksale.core.database.entities.support import Report, SupportTicket
from qwiksale.core.database.entities.users import User
from qwiksale.core.database.repositories import SqlRepoBundle, build_sql_repos_from_session
from qwiksale.core.database.utils import utc_now
from qwiksale.core.logging_config import get_logger, setup_logging
from qwiksale.core.models.domain.enums import ListingStatus, RateType, Role, SubscriptionTier

from .expansion import PLACEHOLDER_IMAGE, make_at_least, map_to_products
from .loader import load_seed
from .settings import SeedSettings

logger = get_logger(__name__)

BATCH_SIZE = 250
FAVORITES_FOR_DEMO_SELLER = 2

SERVICE_SELLER_EMAIL = "pro@qwiksale.test"


class SeedRefusedError(Exception):
    """A modifying seed run was requested in production without SEED_ALLOW_PROD."""


# ----------------------------------------------------------------------
# Cleanup
# ----------------------------------------------------------------------


async def _delete_listing_dependents(repos: SqlRepoBundle, product_ids) -> int:
    """Remove favorites and payments pointing at the given products."""
    deleted = await repos.favorites.delete_where(Favorite.product_id.in_(product_ids))
    deleted += await repos.payments.delete_where(Payment.product_id.in_(product_ids))
    return deleted


async def purge_demo(repos: SqlRepoBundle, demo_email: str) -> Dict[str, Optional[object]]:
    """
    Delete the demo seller with everything it owns, plus leftover clones.

    Returns:
        Per-table deletion counts
    """
    result: Dict[str, Optional[object]] = {
        "demoUserId": None,
        "productsDeleted": 0,
        "servicesDeleted": 0,
        "favoritesDeleted": 0,
        "ticketsDeleted": 0,
        "reportsDeleted": 0,
        "paymentsDeleted": 0,
        "userDeleted": 0,
    }
    services_available = await repos.services.is_available()

    demo_user = await repos.users.get_by_email(demo_email)
    if demo_user is not None:
        user_id = demo_user.id
        result["demoUserId"] = user_id

        owned = select(Product.id).where(Product.seller_id == user_id)
        result["favoritesDeleted"] += await repos.favorites.delete_where(
            or_(Favorite.user_id == user_id, Favorite.product_id.in_(owned))
        )
        result["paymentsDeleted"] += await repos.payments.delete_where(
            or_(Payment.user_id == user_id, Payment.product_id.in_(owned))
        )
        result["productsDeleted"] += await repos.products.delete_where(Product.seller_id == user_id)
        if services_available:
            result["servicesDeleted"] += await repos.services.delete_where(Service.seller_id == user_id)
        result["ticketsDeleted"] += await repos.support_tickets.delete_where(SupportTicket.reporter_id == user_id)
        result["reportsDeleted"] += await repos.reports.delete_where(Report.user_id == user_id)
        result["userDeleted"] += await repos.users.delete_where(User.id == user_id)

    # Clones and anonymous catalog rows from earlier catalog seeds
    leftovers = or_(Product.name.contains("• Batch"), Product.seller_name == "Private Seller")
    await _delete_listing_dependents(repos, select(Product.id).where(leftovers))
    result["productsDeleted"] += await repos.products.delete_where(leftovers)

    return result


async def reset_all(repos: SqlRepoBundle) -> Dict[str, int]:
    """Delete every marketplace row. Users and carriers are kept."""
    result = {
        "favoritesDeleted": await repos.favorites.delete_where(),
        "ticketsDeleted": await repos.support_tickets.delete_where(),
        "reportsDeleted": await repos.reports.delete_where(),
        "paymentsDeleted": await repos.payments.delete_where(),
        "productsDeleted": await repos.products.delete_where(),
        "servicesDeleted": 0,
    }
    if await repos.services.is_available():
        result["servicesDeleted"] = await repos.services.delete_where()
    return result


async def reset_catalog(repos: SqlRepoBundle) -> Dict[str, int]:
    """Clear products along with their favorites and payments."""
    return {
        "favoritesDeleted": await repos.favorites.delete_where(),
        "paymentsDeleted": await repos.payments.delete_where(),
        "productsDeleted": await repos.products.delete_where(),
    }


# ----------------------------------------------------------------------
# Demo data
# ----------------------------------------------------------------------


async def ensure_user(repos: SqlRepoBundle, *, username: str, email: str, name: str) -> User:
    """Return the user with ``email``, creating a verified demo account if missing."""
    user = await repos.users.get_by_email(email)
    if user is not None:
        return user
    return await repos.users.create(
        User(
            email=email,
            username=username,
            name=name,
            verified=True,
            location="Nairobi",
            rating=4.8,
            sales=123,
            subscription=SubscriptionTier.BASIC.value,
            role=Role.USER.value,
        )
    )


async def ensure_product_for(repos: SqlRepoBundle, user: User) -> Product:
    existing = await repos.products.list_by_seller(user.id)
    if existing:
        return existing[0]
    now = utc_now()
    return await repos.products.create(
        Product(
            name="Samsung Galaxy A14",
            description="Gently used, great condition.",
            category="Electronics",
            subcategory="Phones & Tablets",
            brand="Samsung",
            condition="pre-owned",
            price=13500,
            image=PLACEHOLDER_IMAGE,
            gallery=[PLACEHOLDER_IMAGE],
            location="Nairobi",
            negotiable=False,
            status=ListingStatus.ACTIVE.value,
            featured=True,
            seller_id=user.id,
            seller_name="Demo Seller",
            seller_location="Nairobi",
            seller_member_since=str(now.year - 1),
            seller_rating=4.8,
            seller_sales=123,
        )
    )


async def ensure_service_for(repos: SqlRepoBundle, user: User) -> Optional[Service]:
    """Create the demo plumbing service; skipped when the services table is missing."""
    if not await repos.services.is_available():
        logger.warning("Services table not found; skipping demo service")
        return None
    existing = await repos.services.list_by_seller(user.id)
    if existing:
        return existing[0]
    now = utc_now()
    return await repos.services.create(
        Service(
            name="Professional Plumbing",
            description="Leak fixes, installations, and emergency callouts.",
            category="Home Services",
            subcategory="Plumbing",
            price=1500,
            rate_type=RateType.fixed.value,
            image=PLACEHOLDER_IMAGE,
            gallery=[PLACEHOLDER_IMAGE],
            location="Nairobi",
            status=ListingStatus.ACTIVE.value,
            featured=True,
            seller_id=user.id,
            seller_name="Pro Plumber",
            seller_location="Nairobi",
            seller_member_since=str(now.year - 2),
            seller_rating=4.9,
            seller_sales=210,
        )
    )


async def populate_demo(repos: SqlRepoBundle, settings: SeedSettings) -> None:
    """Two sellers so store pages and the mixed feed have something to show."""
    demo_seller = await ensure_user(repos, username="demo-seller", email=settings.demo_user_email, name="Demo Seller")
    service_seller = await ensure_user(repos, username="pro-plumber", email=SERVICE_SELLER_EMAIL, name="Pro Plumber")
    await ensure_product_for(repos, demo_seller)
    await ensure_service_for(repos, service_seller)
    logger.info("Demo populate complete")


# ----------------------------------------------------------------------
# Catalog
# ----------------------------------------------------------------------


async def upsert_demo_seller(repos: SqlRepoBundle, settings: SeedSettings) -> User:
    user = await repos.users.get_by_email(settings.demo_user_email)
    if user is None:
        return await repos.users.create(
            User(email=settings.demo_user_email, name=settings.demo_user_name, subscription=SubscriptionTier.GOLD.value)
        )
    user.name = settings.demo_user_name
    user.subscription = SubscriptionTier.GOLD.value
    return await repos.users.update(user)


async def seed_catalog(repos: SqlRepoBundle, settings: SeedSettings) -> int:
    """
    Insert the expanded product catalog.

    Returns:
        Number of products inserted
    """
    seller = await upsert_demo_seller(repos, settings)
    logger.info(f"Demo seller: {seller.email} ({seller.id})")

    base = load_seed(settings.source)
    expanded = make_at_least(base, settings.min_products)
    logger.info(f"Using {len(expanded)} products after expansion (min={settings.min_products})")
    rows = map_to_products(expanded, demo_seller_id=seller.id)

    if settings.reset:
        logger.warning(f"Resetting catalog: {await reset_catalog(repos)}")

    created = 0
    for start in range(0, len(rows), BATCH_SIZE):
        batch = rows[start : start + BATCH_SIZE]
        created += await repos.products.create_many(batch)
        logger.info(f"  batch {start // BATCH_SIZE + 1}: +{len(batch)}")

    for product in await repos.products.newest(FAVORITES_FOR_DEMO_SELLER):
        already = await repos.favorites.list(filters={"user_id": seller.id, "product_id": product.id})
        if not already:
            await repos.favorites.create(Favorite(user_id=seller.id, product_id=product.id))

    logger.info(f"Catalog seed complete. Inserted: {created}. Total in DB: {await repos.products.count()}")
    return created


# ----------------------------------------------------------------------
# Runner
# ----------------------------------------------------------------------


async def run(settings: SeedSettings, session: AsyncSession) -> List[str]:
    """
    Execute the requested seed operations in order.

    Args:
        settings: Seed switches
        session: Session bound to the target database

    Returns:
        Names of the operations performed (empty for a no-op run)

    Raises:
        SeedRefusedError: for a modifying run in production without SEED_ALLOW_PROD
    """
    if not settings.modifies_data:
        if settings.reset:
            logger.info("SEED_RESET=1 without SEED_RESET_ALL or SEED_CATALOG: nothing to reset.")
        logger.info(
            "No-op. Set SEED_DEMO=1 or SEED_CATALOG=1 to add data, "
            "SEED_RESET=1 with SEED_RESET_ALL=1 or SEED_PURGE_DEMO=1 to modify it."
        )
        return []

    if settings.is_production and not settings.allow_prod:
        raise SeedRefusedError("Refusing to modify data in production. Set SEED_ALLOW_PROD=1 to proceed.")

    repos = build_sql_repos_from_session(session=session)
    performed: List[str] = []

    if settings.purge_demo:
        logger.info(f"Purge summary: {await purge_demo(repos, settings.demo_user_email)}")
        performed.append("purge_demo")

    if settings.reset and settings.reset_all:
        logger.warning(f"SEED_RESET_ALL=1, reset summary: {await reset_all(repos)}")
        performed.append("reset_all")

    if settings.demo:
        await populate_demo(repos, settings)
        performed.append("demo")

    if settings.catalog:
        await seed_catalog(repos, settings)
        performed.append("catalog")

    services = await repos.services.count() if await repos.services.is_available() else 0
    logger.info(f"Totals -> products: {await repos.products.count()}, services: {services}")
    return performed


async def _main(settings: SeedSettings) -> None:
    from qwiksale.core.database import async_session_maker, engine, init_db

    try:
        await init_db()
        async with async_session_maker() as session:
            await run(settings, session)
    finally:
        await engine.dispose()


def main() -> None:
    """Console entry point."""
    setup_logging()
    try:
        asyncio.run(_main(SeedSettings()))
    except Exception as e:
        logger.error(f"Seed failed: {e}", exc_info=True)
        sys.exit(1)
    logger.info("Seed: complete.")
