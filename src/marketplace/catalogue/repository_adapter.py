"""Catalogue adapter backed by the marketplace's own Product records."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.catalogue.port import CatalogPort, VariantInfo
from marketplace.catalogue.product import Product


class RepositoryCatalog(CatalogPort):
    def get_variant(self, shop_id: str, product_id: str) -> VariantInfo:
        product = current_domain.repository_for(Product).get(product_id)
        if str(product.shop_id) != str(shop_id) or product.default_variant is None:
            raise ObjectNotFoundError(f"Shop {shop_id} has no product {product_id}")

        variant = product.default_variant
        return VariantInfo(
            product_id=str(product.id),
            name=product.name,
            price=variant.price,
            stock_qty=variant.stock_qty,
            image_url=product.image_url,
        )
