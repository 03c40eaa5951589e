"""FastAPI routes for the Marketplace domain."""

import json

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.access.principal import Principal, require_shop_staff
from marketplace.account.connections import LeaveShop, RequestConnection, ResolveConnection
from marketplace.account.registration import ChangeUserRole, RegisterUser, UpdateContactDetails
from marketplace.api.dependencies import bearer_token, current_principal
from marketplace.api.schemas import (
    AddToCartRequest,
    BannerIdResponse,
    ChangeShopStatusRequest,
    ChangeUserRoleRequest,
    ConnectionRequest,
    CustomerStatementResponse,
    ItemIdResponse,
    OrderIdResponse,
    PendingRequestSchema,
    PlaceOrderRequest,
    RegisterShopRequest,
    RegisterUserRequest,
    ResolveConnectionRequest,
    SetStatusRequest,
    ShopIdResponse,
    ShopSummaryResponse,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdateContactDetailsRequest,
    UpdateShopSettingsRequest,
    UpsertBannerRequest,
    UserIdResponse,
)
from marketplace.banner.banner import Banner
from marketplace.banner.management import DeleteBanner, UpsertBanner
from marketplace.cart.cart import Cart
from marketplace.cart.checkout import PlaceOrder
from marketplace.cart.items import AddToCart, RemoveCartItem, UpdateCartQuantity
from marketplace.dispatch import execute
from marketplace.order.order import Order
from marketplace.order.status import SetOrderStatus, SetPaymentStatus
from marketplace.reports.dashboard import customer_statement, order_history, pending_requests, shop_summary
from marketplace.shop.management import ChangeShopStatus, RegisterShop, UpdateShopSettings

# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.post("", status_code=201, response_model=UserIdResponse)
async def register_user(body: RegisterUserRequest) -> UserIdResponse:
    command = RegisterUser(
        name=body.name,
        email=body.email,
        phone=body.phone,
        delivery_address=body.delivery_address,
    )
    result = execute(command)
    return UserIdResponse(user_id=result)


@user_router.put("/me/contact", response_model=StatusResponse)
async def update_contact_details(
    body: UpdateContactDetailsRequest, token: str = Depends(bearer_token)
) -> StatusResponse:
    execute(UpdateContactDetails(actor_id=token, phone=body.phone, delivery_address=body.delivery_address))
    return StatusResponse()


@user_router.get("/me/orders")
async def list_my_orders(shop_id: str, principal: Principal = Depends(current_principal)):
    return order_history(principal, shop_id)


@user_router.put("/{user_id}/role", response_model=StatusResponse)
async def change_user_role(
    user_id: str, body: ChangeUserRoleRequest, token: str = Depends(bearer_token)
) -> StatusResponse:
    execute(ChangeUserRole(actor_id=token, user_id=user_id, role=body.role, shop_id=body.shop_id))
    return StatusResponse()


@user_router.post("/me/connections/{shop_id}", status_code=201, response_model=StatusResponse)
async def request_connection(
    shop_id: str, body: ConnectionRequest, token: str = Depends(bearer_token)
) -> StatusResponse:
    execute(RequestConnection(actor_id=token, shop_id=shop_id, shop_name=body.shop_name))
    return StatusResponse()


@user_router.delete("/me/connections/{shop_id}", response_model=StatusResponse)
async def leave_shop(shop_id: str, token: str = Depends(bearer_token)) -> StatusResponse:
    execute(LeaveShop(actor_id=token, shop_id=shop_id))
    return StatusResponse()


# ---------------------------------------------------------------------------
# Shop Router
# ---------------------------------------------------------------------------
shop_router = APIRouter(prefix="/shops", tags=["shops"])


@shop_router.post("", status_code=201, response_model=ShopIdResponse)
async def register_shop(body: RegisterShopRequest, token: str = Depends(bearer_token)) -> ShopIdResponse:
    command = RegisterShop(
        actor_id=token,
        name=body.name,
        owner_id=body.owner_id,
        shop_type=body.shop_type,
        currency=body.currency,
        delivery_charge=body.delivery_charge,
        tax_rate=body.tax_rate,
    )
    result = execute(command)
    return ShopIdResponse(shop_id=result)


@shop_router.put("/{shop_id}", response_model=StatusResponse)
async def update_shop_settings(
    shop_id: str, body: UpdateShopSettingsRequest, token: str = Depends(bearer_token)
) -> StatusResponse:
    command = UpdateShopSettings(
        actor_id=token,
        shop_id=shop_id,
        name=body.name,
        shop_type=body.shop_type,
        currency=body.currency,
        delivery_charge=body.delivery_charge,
        tax_rate=body.tax_rate,
    )
    execute(command)
    return StatusResponse()


@shop_router.put("/{shop_id}/status", response_model=StatusResponse)
async def change_shop_status(
    shop_id: str, body: ChangeShopStatusRequest, token: str = Depends(bearer_token)
) -> StatusResponse:
    execute(ChangeShopStatus(actor_id=token, shop_id=shop_id, status=body.status))
    return StatusResponse()


@shop_router.get("/{shop_id}/requests", response_model=list[PendingRequestSchema])
async def list_pending_requests(shop_id: str, principal: Principal = Depends(current_principal)):
    return pending_requests(principal, shop_id)


@shop_router.put("/{shop_id}/requests/{customer_id}", response_model=StatusResponse)
async def resolve_connection(
    shop_id: str, customer_id: str, body: ResolveConnectionRequest, token: str = Depends(bearer_token)
) -> StatusResponse:
    execute(ResolveConnection(actor_id=token, customer_id=customer_id, shop_id=shop_id, approve=body.approve))
    return StatusResponse()


@shop_router.get("/{shop_id}/summary", response_model=ShopSummaryResponse)
async def get_shop_summary(shop_id: str, principal: Principal = Depends(current_principal)):
    return shop_summary(principal, shop_id)


@shop_router.get("/{shop_id}/customers/{customer_id}/statement", response_model=CustomerStatementResponse)
async def get_customer_statement(shop_id: str, customer_id: str, principal: Principal = Depends(current_principal)):
    return customer_statement(principal, shop_id, customer_id)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("")
async def get_cart(principal: Principal = Depends(current_principal)):
    try:
        cart = current_domain.repository_for(Cart).get(principal.user_id)
    except ObjectNotFoundError:
        cart = Cart.create(principal.user_id)
    return cart.to_dict()


@cart_router.post("/items", status_code=201, response_model=ItemIdResponse)
async def add_cart_item(body: AddToCartRequest, token: str = Depends(bearer_token)) -> ItemIdResponse:
    command = AddToCart(
        actor_id=token,
        shop_id=body.shop_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    result = execute(command)
    return ItemIdResponse(item_id=result)


@cart_router.put("/items/{item_id}", response_model=StatusResponse)
async def update_cart_quantity(
    item_id: str, body: UpdateCartQuantityRequest, token: str = Depends(bearer_token)
) -> StatusResponse:
    execute(UpdateCartQuantity(actor_id=token, item_id=item_id, new_quantity=body.new_quantity))
    return StatusResponse()


@cart_router.delete("/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(item_id: str, token: str = Depends(bearer_token)) -> StatusResponse:
    execute(RemoveCartItem(actor_id=token, item_id=item_id))
    return StatusResponse()


@cart_router.post("/checkout", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest, token: str = Depends(bearer_token)) -> OrderIdResponse:
    command = PlaceOrder(
        actor_id=token,
        shop_id=body.shop_id,
        item_ids=json.dumps(body.item_ids) if body.item_ids is not None else None,
        payment_method=body.payment_method,
        delivery_address=body.delivery_address,
    )
    result = execute(command)
    return OrderIdResponse(order_id=result)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/shops/{shop_id}/orders", tags=["orders"])


@order_router.get("")
async def list_orders(shop_id: str, principal: Principal = Depends(current_principal)):
    require_shop_staff(principal, shop_id, "list shop orders")
    orders = current_domain.repository_for(Order).for_shop(shop_id)
    return [order.to_dict() for order in orders]


@order_router.get("/{order_id}")
async def get_order(shop_id: str, order_id: str, principal: Principal = Depends(current_principal)):
    order = current_domain.repository_for(Order).get_for_shop(shop_id, order_id)
    if str(order.customer_id) != principal.user_id:
        require_shop_staff(principal, shop_id, "view shop orders")
    return order.to_dict()


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def set_order_status(
    shop_id: str, order_id: str, body: SetStatusRequest, token: str = Depends(bearer_token)
) -> StatusResponse:
    execute(SetOrderStatus(actor_id=token, shop_id=shop_id, order_id=order_id, new_status=body.new_status))
    return StatusResponse()


@order_router.put("/{order_id}/payment", response_model=StatusResponse)
async def set_payment_status(
    shop_id: str, order_id: str, body: SetStatusRequest, token: str = Depends(bearer_token)
) -> StatusResponse:
    execute(SetPaymentStatus(actor_id=token, shop_id=shop_id, order_id=order_id, new_status=body.new_status))
    return StatusResponse()


# ---------------------------------------------------------------------------
# Banner Router
# ---------------------------------------------------------------------------
banner_router = APIRouter(prefix="/banners", tags=["banners"])


@banner_router.get("")
async def list_banners():
    banners = current_domain.repository_for(Banner).all_banners()
    return [banner.to_dict() for banner in banners]


@banner_router.post("", status_code=201, response_model=BannerIdResponse)
async def create_banner(body: UpsertBannerRequest, token: str = Depends(bearer_token)) -> BannerIdResponse:
    command = UpsertBanner(
        actor_id=token,
        title=body.title,
        subtitle=body.subtitle,
        image_url=body.image_url,
        target_url=body.target_url,
        make_active=body.make_active,
    )
    result = execute(command)
    return BannerIdResponse(banner_id=result)


@banner_router.put("/{banner_id}", response_model=BannerIdResponse)
async def update_banner(
    banner_id: str, body: UpsertBannerRequest, token: str = Depends(bearer_token)
) -> BannerIdResponse:
    command = UpsertBanner(
        actor_id=token,
        banner_id=banner_id,
        title=body.title,
        subtitle=body.subtitle,
        image_url=body.image_url,
        target_url=body.target_url,
        make_active=body.make_active,
    )
    result = execute(command)
    return BannerIdResponse(banner_id=result)


@banner_router.delete("/{banner_id}", response_model=StatusResponse)
async def delete_banner(banner_id: str, token: str = Depends(bearer_token)) -> StatusResponse:
    execute(DeleteBanner(actor_id=token, banner_id=banner_id))
    return StatusResponse()
