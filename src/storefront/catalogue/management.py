"""Product management — commands and handlers for catalogue pricing."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.shared.money import ConversionRates


@storefront.command(part_of="Product")
class CreateProduct:
    sku = String(required=True, max_length=50)
    title = String(required=True, max_length=200)
    input_currency = String(max_length=3, default="CNY")
    price = Float(required=True, min_value=0.0)
    expense = Float(default=0.0, min_value=0.0)
    usd_to_bdt = Float()
    cny_to_bdt = Float()
    minimum_order_quantity = Integer(default=1, min_value=1)
    quantity_ranges = Text()  # JSON: list of {min_quantity, max_quantity, price}


@storefront.command(part_of="Product")
class UpdateCurrencyRates:
    product_id = Identifier(required=True)
    usd_to_bdt = Float(required=True)
    cny_to_bdt = Float(required=True)


@storefront.command(part_of="Product")
class SetQuantityPricing:
    product_id = Identifier(required=True)
    ranges = Text(required=True)  # JSON: list of {min_quantity, max_quantity, price}


def _load_json_list(value):
    if not value:
        return []
    return json.loads(value) if isinstance(value, str) else value


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        rates = ConversionRates.default()
        if command.usd_to_bdt or command.cny_to_bdt:
            rates = ConversionRates(
                usd_to_bdt=command.usd_to_bdt or rates.usd_to_bdt,
                cny_to_bdt=command.cny_to_bdt or rates.cny_to_bdt,
            )

        product = Product.create(
            sku=command.sku,
            title=command.title,
            price=command.price,
            input_currency=command.input_currency or "CNY",
            expense=command.expense or 0.0,
            rates=rates,
            minimum_order_quantity=command.minimum_order_quantity or 1,
            quantity_ranges=_load_json_list(command.quantity_ranges),
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateCurrencyRates)
    def update_currency_rates(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_currency_rates(
            usd_to_bdt=command.usd_to_bdt,
            cny_to_bdt=command.cny_to_bdt,
        )
        repo.add(product)

    @handle(SetQuantityPricing)
    def set_quantity_pricing(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_quantity_pricing(_load_json_list(command.ranges))
        repo.add(product)
