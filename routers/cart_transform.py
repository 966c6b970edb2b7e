"""
Cart transform endpoint
Receives a cart snapshot from the storefront host and returns the lineExpand
operations for every bundle line it contains.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from schemas.cart_transform_schemas import CartTransformRunInput, CartTransformRunResult
from services.bundle_expander import cart_transform_run

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart-transform", tags=["Cart Transform"])


@router.post("/run", response_model=CartTransformRunResult)
def run_cart_transform(payload: CartTransformRunInput, request: Request) -> CartTransformRunResult:
    """
    The host posts the full cart (lines, merchandise, bundle metafields and
    the presentment currency rate) and applies whatever operations come back.
    """
    request_id = getattr(request.state, "request_id", "-")
    result = cart_transform_run(payload)
    logger.info(
        "[cart_transform] rid=%s lines=%d operations=%d rate=%s",
        request_id,
        len(payload.cart.lines),
        len(result.operations),
        payload.presentment_currency_rate,
    )
    return result
