"""Product aggregate: the shop's catalogue entry and its sellable variants.

Products are maintained by the catalogue tooling outside this service.
Checkout and cart code only read them, through the catalogue port.
"""

from protean.fields import Float, HasMany, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.entity(part_of="Product")
class ProductVariant:
    sku = String(required=True, max_length=50)
    price = Float(required=True, min_value=0.0)
    stock_qty = Integer(min_value=0, default=0)


@marketplace.aggregate
class Product:
    shop_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    category = String(max_length=100)
    description = Text()
    image_url = String(max_length=1000)
    variants = HasMany(ProductVariant)

    @property
    def default_variant(self):
        return self.variants[0] if self.variants else None
