"""
Cart Transform Schemas
======================

Wire structures exchanged with the host when a cart is evaluated for
bundle expansion.

INPUT (cart snapshot posted by the host):
-----------------------------------------
{
    "cart": {
        "lines": [
            {
                "id": "gid://shopify/CartLine/1",
                "quantity": 1,
                "merchandise": {
                    "__typename": "ProductVariant",
                    "id": "gid://shopify/ProductVariant/10",
                    "product": {
                        "id": "gid://shopify/Product/20",
                        "bundledComponentData": {"value": "[...]"}
                    }
                }
            }
        ]
    },
    "presentmentCurrencyRate": "1.0"
}

BUNDLE METAFIELD (bundledComponentData.value, JSON text):
---------------------------------------------------------
[
    {"id": "gid://shopify/ProductVariant/99", "quantity": 2, "price": 10},
    {"id": "gid://shopify/ProductVariant/98", "price": 4.5}
]

OUTPUT (operations the host applies to the live cart):
------------------------------------------------------
{
    "operations": [
        {
            "lineExpand": {
                "cartLineId": "gid://shopify/CartLine/1",
                "expandedCartItems": [
                    {
                        "merchandiseId": "gid://shopify/ProductVariant/99",
                        "quantity": 2,
                        "price": {"adjustment": {"fixedPricePerUnit": {"amount": "11.00"}}}
                    }
                ]
            }
        }
    ]
}

All models are frozen; a snapshot is never mutated while it is evaluated.
"""

from decimal import Decimal
from typing import Annotated, Any, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter

PRODUCT_VARIANT_TYPENAME = "ProductVariant"

WIRE_CONFIG = ConfigDict(frozen=True, populate_by_name=True)


# =============================================================================
# INPUT
# =============================================================================

class Metafield(BaseModel):
    """Product metafield holding the serialized bundle configuration."""

    model_config = WIRE_CONFIG

    value: Optional[str] = None


class Product(BaseModel):
    model_config = WIRE_CONFIG

    id: Optional[str] = None
    bundled_component_data: Optional[Metafield] = Field(None, alias="bundledComponentData")


class ProductVariant(BaseModel):
    """Merchandise that is a variant of a catalog product."""

    model_config = WIRE_CONFIG

    typename: Literal["ProductVariant"] = Field(PRODUCT_VARIANT_TYPENAME, alias="__typename")
    id: Optional[str] = None
    product: Optional[Product] = None


class OtherMerchandise(BaseModel):
    """Any merchandise kind other than a product variant (e.g. CustomProduct)."""

    model_config = WIRE_CONFIG

    typename: Optional[str] = Field(None, alias="__typename")


def merchandise_tag(value: Any) -> str:
    """Route ProductVariant payloads to ProductVariant, everything else to the catch-all."""
    if isinstance(value, dict):
        typename = value.get("__typename", value.get("typename"))
    else:
        typename = getattr(value, "typename", None)
    return "variant" if typename == PRODUCT_VARIANT_TYPENAME else "other"


Merchandise = Annotated[
    Union[
        Annotated[ProductVariant, Tag("variant")],
        Annotated[OtherMerchandise, Tag("other")],
    ],
    Discriminator(merchandise_tag),
]


class CartLine(BaseModel):
    model_config = WIRE_CONFIG

    id: str
    quantity: Optional[int] = None
    merchandise: Merchandise


class Cart(BaseModel):
    model_config = WIRE_CONFIG

    lines: Tuple[CartLine, ...] = ()


class CartTransformRunInput(BaseModel):
    """Complete cart snapshot for one evaluation pass."""

    model_config = WIRE_CONFIG

    cart: Cart
    presentment_currency_rate: Decimal = Field(..., alias="presentmentCurrencyRate", gt=0)


# =============================================================================
# BUNDLE METAFIELD
# =============================================================================

class BundleComponent(BaseModel):
    """One entry of a bundle configuration.

    quantity: optional; absent, null and 0 all expand as 1 unless strict
              zero handling is enabled.
    price:    per-unit price in the shop's reference currency.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    quantity: Optional[int] = Field(None, ge=0)
    price: Decimal = Field(..., ge=0, allow_inf_nan=False)


BundleComponentList = TypeAdapter(List[BundleComponent])


# =============================================================================
# OUTPUT
# =============================================================================

class FixedPricePerUnit(BaseModel):
    model_config = WIRE_CONFIG

    amount: str


class PriceAdjustment(BaseModel):
    model_config = WIRE_CONFIG

    fixed_price_per_unit: FixedPricePerUnit = Field(..., alias="fixedPricePerUnit")


class ExpandedItemPrice(BaseModel):
    model_config = WIRE_CONFIG

    adjustment: PriceAdjustment


class ExpandedCartItem(BaseModel):
    model_config = WIRE_CONFIG

    merchandise_id: str = Field(..., alias="merchandiseId")
    quantity: int
    price: ExpandedItemPrice

    @property
    def amount(self) -> str:
        """Shortcut to the fixed per-unit amount."""
        return self.price.adjustment.fixed_price_per_unit.amount


class LineExpandOperation(BaseModel):
    """Replace one bundle cart line with its component items."""

    model_config = WIRE_CONFIG

    cart_line_id: str = Field(..., alias="cartLineId")
    expanded_cart_items: Tuple[ExpandedCartItem, ...] = Field(..., alias="expandedCartItems")


class CartOperation(BaseModel):
    model_config = WIRE_CONFIG

    line_expand: LineExpandOperation = Field(..., alias="lineExpand")


class CartTransformRunResult(BaseModel):
    model_config = WIRE_CONFIG

    operations: Tuple[CartOperation, ...] = ()


# Shared result for every evaluation that expands nothing.
NO_CHANGES = CartTransformRunResult(operations=())
