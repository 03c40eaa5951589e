"""Pydantic request/response schemas for the Marketplace API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class RegisterUserRequest(BaseModel):
    name: str
    email: str
    phone: str | None = None
    delivery_address: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ayesha Khan",
                    "email": "ayesha@example.com",
                    "phone": "+923001234567",
                    "delivery_address": "House 12, Street 4, Lahore",
                }
            ]
        }
    }


class ChangeUserRoleRequest(BaseModel):
    role: str
    shop_id: str | None = None


class UpdateContactDetailsRequest(BaseModel):
    phone: str | None = None
    delivery_address: str | None = None


class ConnectionRequest(BaseModel):
    shop_name: str | None = None


class ResolveConnectionRequest(BaseModel):
    approve: bool


# ---------------------------------------------------------------------------
# Shops
# ---------------------------------------------------------------------------
class RegisterShopRequest(BaseModel):
    name: str
    owner_id: str
    shop_type: str = "physical"
    currency: str | None = None
    delivery_charge: float | None = Field(default=None, ge=0)
    tax_rate: float = Field(default=0.0, ge=0)


class UpdateShopSettingsRequest(BaseModel):
    name: str | None = None
    shop_type: str | None = None
    currency: str | None = None
    delivery_charge: float | None = Field(default=None, ge=0)
    tax_rate: float | None = Field(default=None, ge=0)


class ChangeShopStatusRequest(BaseModel):
    status: str


# ---------------------------------------------------------------------------
# Cart & checkout
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    shop_id: str
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(BaseModel):
    new_quantity: int = Field(ge=1)


class PlaceOrderRequest(BaseModel):
    shop_id: str | None = None
    item_ids: list[str] | None = None
    payment_method: str = "Cash on Delivery"
    delivery_address: str | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class SetStatusRequest(BaseModel):
    new_status: str


# ---------------------------------------------------------------------------
# Banners
# ---------------------------------------------------------------------------
class UpsertBannerRequest(BaseModel):
    title: str | None = None
    subtitle: str | None = None
    image_url: str | None = None
    target_url: str | None = None
    make_active: bool = False


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class UserIdResponse(BaseModel):
    user_id: str


class ShopIdResponse(BaseModel):
    shop_id: str


class ItemIdResponse(BaseModel):
    item_id: str


class OrderIdResponse(BaseModel):
    order_id: str


class BannerIdResponse(BaseModel):
    banner_id: str


class ShopSummaryResponse(BaseModel):
    shop_id: str
    paid_revenue: float
    outstanding: float
    recent_orders: int
    orders_by_status: dict[str, int]


class CustomerStatementResponse(BaseModel):
    shop_id: str
    customer_id: str
    order_count: int
    total_billed: float
    total_paid: float
    balance: float


class PendingRequestSchema(BaseModel):
    customer_id: str
    name: str
    email: str
    requested_at: datetime | None = None
