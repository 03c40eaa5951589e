"""Catalogue port: the read-only view of products that the cart relies on."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class VariantInfo:
    """Price and stock of a product's sellable variant at the time of lookup."""

    product_id: str
    name: str
    price: float
    stock_qty: int
    image_url: str | None = None


class CatalogPort(ABC):
    """Abstract catalogue interface."""

    @abstractmethod
    def get_variant(self, shop_id: str, product_id: str) -> VariantInfo:
        """Return the variant a customer buys when adding ``product_id``.

        Raises ObjectNotFoundError when the shop does not sell the product.
        """
        ...
