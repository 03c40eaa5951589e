"""Marketplace domain API package."""

from marketplace.api.routes import banner_router, cart_router, order_router, shop_router, user_router

__all__ = ["user_router", "shop_router", "cart_router", "order_router", "banner_router"]
