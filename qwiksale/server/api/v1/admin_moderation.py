"""
Listing Moderation Endpoints.

Feature toggles for products and services.
"""

from typing import Optional

from fastapi import APIRouter, Body, HTTPException, Query, Response, status

from qwiksale.core.logging_config import get_logger
from qwiksale.core.models.domain.enums import ListingKind, ListingStatus
from qwiksale.core.models.io.listings import (
    FeatureToggleRequest,
    FeatureToggleResult,
    ServiceFeatureToggleRequest,
)
from qwiksale.core.monitoring import log_admin_action
from qwiksale.server.responses import NO_STORE_HEADERS, apply_no_store
from qwiksale.server.services.audit import record_audit
from qwiksale.server.services.catalog import parse_bool
from qwiksale.server.services.deps import AdminDep, ReposDep

logger = get_logger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found", headers=NO_STORE_HEADERS)


@router.patch(
    "/products/{product_id}/feature",
    response_model=FeatureToggleResult,
    summary="Feature Product",
    description="Set or clear the featured flag on a product.",
    response_description="The product's featured state after the change.",
    responses={404: {"description": "Product not found"}, 422: {"description": "featured is not a boolean"}},
)
async def feature_product(
    product_id: str, body: FeatureToggleRequest, response: Response, repos: ReposDep, admin: AdminDep
) -> FeatureToggleResult:
    apply_no_store(response)

    product = await repos.products.get_by_id(product_id)
    if product is None:
        raise _not_found()

    no_change = bool(product.featured) == body.featured
    if not no_change:
        product = await repos.products.set_featured(product, body.featured)
        log_admin_action("product.feature", actor=admin.user_id, target=product.id, featured=body.featured)

    return FeatureToggleResult(
        id=product.id,
        kind=ListingKind.product,
        featured=bool(product.featured),
        status=product.status,
        no_change=no_change,
        updated_at=product.updated_at,
    )


@router.patch(
    "/services/{service_id}/feature",
    response_model=FeatureToggleResult,
    summary="Feature Service",
    description=(
        "Set or clear the featured flag on a service. featured and force may be sent in the body or the "
        "query string. Only ACTIVE services can be toggled unless force is true."
    ),
    response_description="The service's featured state after the change.",
    responses={
        400: {"description": "featured missing or not a boolean"},
        404: {"description": "Service not found"},
        409: {"description": "Service is not ACTIVE and force was not set"},
    },
)
async def feature_service(
    service_id: str,
    response: Response,
    repos: ReposDep,
    admin: AdminDep,
    body: Optional[ServiceFeatureToggleRequest] = Body(default=None),
    featured: Optional[str] = Query(default=None),
    force: Optional[str] = Query(default=None),
) -> FeatureToggleResult:
    """
    Toggle a service's featured flag.

    Values in the body take precedence over the query string. The change is
    recorded in the audit log.
    """
    apply_no_store(response)

    want = body.featured if body and body.featured is not None else parse_bool(featured)
    if want is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="featured must be a boolean", headers=NO_STORE_HEADERS
        )
    forced = bool(body.force) if body and body.force is not None else parse_bool(force) is True

    if not await repos.services.is_available():
        logger.warning("Services table not found; cannot toggle service feature")
        raise _not_found()

    service = await repos.services.get_by_id(service_id)
    if service is None:
        raise _not_found()

    if service.status != ListingStatus.ACTIVE.value and not forced:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Only ACTIVE services can be toggled. Pass force:true to override.",
            headers=NO_STORE_HEADERS,
        )

    no_change = bool(service.featured) == want
    if no_change:
        return FeatureToggleResult(
            id=service.id,
            kind=ListingKind.service,
            featured=want,
            status=service.status,
            no_change=True,
            updated_at=service.updated_at,
        )

    service = await repos.services.set_featured(service, want)
    result = FeatureToggleResult(
        id=service.id,
        kind=ListingKind.service,
        featured=bool(service.featured),
        status=service.status,
        updated_at=service.updated_at,
    )

    await record_audit(
        repos,
        "SERVICE_FEATURE_TOGGLE",
        admin.user_id,
        service.seller_id,
        {"serviceId": service_id, "featured": want, "force": forced},
    )

    log_admin_action("service.feature", actor=admin.user_id, target=service_id, featured=want, force=forced)
    return result
