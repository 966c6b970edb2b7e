"""
Bundle Expander
Rewrites bundle cart lines into their component items.

A bundle is a product variant whose product carries a `bundledComponentData`
metafield: JSON text describing the items the bundle stands for, each with a
per-unit price in the shop's reference currency. Every such line becomes a
lineExpand operation; all other lines are left alone.

Malformed configuration never fails the cart. The offending line is logged
and skipped, and the remaining lines are still evaluated.
"""
from typing import List, Optional, Union
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import json
import logging

from pydantic import ValidationError

import settings
from schemas.cart_transform_schemas import (
    NO_CHANGES,
    BundleComponent,
    BundleComponentList,
    CartLine,
    CartOperation,
    CartTransformRunInput,
    CartTransformRunResult,
    ExpandedCartItem,
    LineExpandOperation,
    ProductVariant,
)

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def fixed_price_per_unit(price: Union[Decimal, int, float, str],
                         presentment_currency_rate: Union[Decimal, int, float, str]) -> str:
    """
    Convert a reference-currency price to a presentment amount string ("11.00").

    Raises decimal.InvalidOperation when the converted amount needs more than
    26 integer digits (28-digit default context at two places).
    """
    converted = Decimal(str(price)) * Decimal(str(presentment_currency_rate))
    # + 0 turns -0.00 into 0.00
    amount = converted.quantize(TWO_PLACES, rounding=ROUND_HALF_UP) + 0
    return format(amount, "f")


def parse_bundle_components(raw_value: str, strict_zero_quantity: bool = False) -> Optional[List[BundleComponent]]:
    """
    Parse the bundle metafield value.

    Returns None when the text is not valid JSON, is not an array, or an
    entry does not match the component schema. An empty array is returned
    as an empty list; callers decide what that means.
    """
    try:
        parsed = json.loads(raw_value, parse_float=Decimal)
    except (TypeError, ValueError) as exc:
        logger.warning("Bundle configuration is not valid JSON: %s", exc)
        return None

    if not isinstance(parsed, list):
        logger.warning("Bundle configuration is %s, expected a JSON array", type(parsed).__name__)
        return None

    try:
        components = BundleComponentList.validate_python(parsed)
    except ValidationError as exc:
        logger.warning("Bundle configuration failed validation: %s", exc.errors(include_url=False))
        return None

    if strict_zero_quantity and any(component.quantity == 0 for component in components):
        logger.warning("Bundle configuration has a component with quantity 0")
        return None

    return components


def build_expanded_item(component: BundleComponent, presentment_currency_rate: Decimal) -> ExpandedCartItem:
    return ExpandedCartItem(
        merchandise_id=component.id,
        quantity=component.quantity or 1,
        price={
            "adjustment": {
                "fixedPricePerUnit": {
                    "amount": fixed_price_per_unit(component.price, presentment_currency_rate),
                },
            },
        },
    )


def optionally_build_expand_operation(
    cart_line: CartLine,
    presentment_currency_rate: Decimal,
    strict_zero_quantity: bool = False,
) -> Optional[LineExpandOperation]:
    """
    Build the lineExpand operation for a bundle line, or None if the line
    is not an expandable bundle.
    """
    merchandise = cart_line.merchandise
    if not isinstance(merchandise, ProductVariant):
        return None

    product = merchandise.product
    if product is None or product.bundled_component_data is None:
        return None

    raw_value = product.bundled_component_data.value
    if not raw_value:
        return None

    components = parse_bundle_components(raw_value, strict_zero_quantity=strict_zero_quantity)
    if components is None:
        logger.warning("Skipping cart line %s: unreadable bundle configuration", cart_line.id)
        return None

    if not components:
        logger.debug("Cart line %s is a bundle with no components", cart_line.id)
        return None

    try:
        expanded_cart_items = tuple(
            build_expanded_item(component, presentment_currency_rate)
            for component in components
        )
    except InvalidOperation:
        logger.warning("Skipping cart line %s: bundle price out of range", cart_line.id)
        return None
    if not expanded_cart_items:
        return None

    return LineExpandOperation(
        cart_line_id=cart_line.id,
        expanded_cart_items=expanded_cart_items,
    )


def cart_transform_run(
    run_input: CartTransformRunInput,
    strict_zero_quantity: Optional[bool] = None,
) -> CartTransformRunResult:
    """Expand every bundle line in the cart, preserving cart order."""
    if strict_zero_quantity is None:
        strict_zero_quantity = settings.CART_TRANSFORM_STRICT_ZERO_QUANTITY

    operations: List[CartOperation] = []
    for cart_line in run_input.cart.lines:
        expand_operation = optionally_build_expand_operation(
            cart_line,
            run_input.presentment_currency_rate,
            strict_zero_quantity=strict_zero_quantity,
        )
        if expand_operation is not None:
            operations.append(CartOperation(line_expand=expand_operation))

    logger.debug(
        "Cart transform evaluated %d lines, expanded %d",
        len(run_input.cart.lines),
        len(operations),
    )

    if not operations:
        return NO_CHANGES
    return CartTransformRunResult(operations=tuple(operations))
