"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A product was added to the catalogue with its price normalized."""

    __version__ = 1

    product_id = Identifier(required=True)
    sku = String(required=True)
    title = String(required=True)
    input_currency = String(required=True)
    price_bdt = Float(required=True)
    price_usd = Float(required=True)
    price_cny = Float(required=True)
    minimum_order_quantity = Integer()
    created_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductRatesUpdated:
    """The product's conversion rates changed and its prices were re-derived."""

    __version__ = 1

    product_id = Identifier(required=True)
    usd_to_bdt = Float(required=True)
    cny_to_bdt = Float(required=True)
    price_bdt = Float(required=True)
    updated_at = DateTime(required=True)


@storefront.event(part_of="Product")
class QuantityPricingSet:
    """The product's quantity-tier list was replaced."""

    __version__ = 1

    product_id = Identifier(required=True)
    ranges = Text(required=True)  # JSON: list of {min_quantity, max_quantity, price}
    updated_at = DateTime(required=True)
