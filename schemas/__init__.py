"""
Cart Transform Schemas Package
Provides the wire structures for cart snapshots, bundle metafields and
cart transform results.
"""

from .cart_transform_schemas import (
    # Input schemas
    CartTransformRunInput,
    Cart,
    CartLine,
    Merchandise,
    ProductVariant,
    OtherMerchandise,
    Product,
    Metafield,

    # Bundle metafield schemas
    BundleComponent,
    BundleComponentList,

    # Output schemas
    CartTransformRunResult,
    CartOperation,
    LineExpandOperation,
    ExpandedCartItem,
    ExpandedItemPrice,
    PriceAdjustment,
    FixedPricePerUnit,

    # Constants
    NO_CHANGES,
    PRODUCT_VARIANT_TYPENAME,
)
