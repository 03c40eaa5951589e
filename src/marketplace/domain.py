"""Marketplace bounded context: shops, customers, carts, orders and banners.

Every aggregate that takes part in a cross-entity workflow lives in this one
domain, so that a single unit of work can span all the records a workflow
touches (cart and order at checkout, shop and owner at registration).
"""

import os

from protean.domain import Domain

from marketplace.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
marketplace = Domain(name="marketplace")


def load_secret_key(domain, environ=os.environ):
    """Take the signing key from ``SHOPSY_SECRET_KEY``; domain.toml carries none."""
    key = environ.get("SHOPSY_SECRET_KEY")
    if key:
        domain.config["secret_key"] = key


load_secret_key(marketplace)
