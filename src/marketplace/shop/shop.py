"""Shop aggregate: a tenant on the platform and its financial defaults."""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String

from marketplace.domain import marketplace
from marketplace.shop.events import ShopRegistered, ShopSettingsUpdated, ShopStatusChanged


class ShopType(Enum):
    ONLINE = "online"  # Visible to every customer
    PHYSICAL = "physical"  # Customers need an active connection


class ShopStatus(Enum):
    ACTIVE = "active"
    PENDING = "pending"
    BLOCKED = "blocked"


def _parse(enum_cls, value, field_name):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError({field_name: [f"Unknown {field_name}: {value}"]}) from None


@marketplace.aggregate
class Shop:
    name = String(required=True, max_length=255)
    shop_type = String(choices=ShopType, default=ShopType.PHYSICAL.value)
    owner_id = Identifier(required=True)
    currency = String(max_length=10, default="PKR")
    delivery_charge = Float(min_value=0.0, default=0.0)
    tax_rate = Float(min_value=0.0, default=0.0)
    status = String(choices=ShopStatus, default=ShopStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, name, owner_id, shop_type, currency, delivery_charge, tax_rate=0.0):
        now = datetime.now(UTC)
        shop_type = _parse(ShopType, shop_type, "shop_type")

        shop = cls(
            id=f"SHOP-{uuid4().hex[:8].upper()}",
            name=name,
            shop_type=shop_type.value,
            owner_id=owner_id,
            currency=currency,
            delivery_charge=delivery_charge,
            tax_rate=tax_rate,
            status=ShopStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        shop.raise_(
            ShopRegistered(
                shop_id=str(shop.id),
                name=name,
                shop_type=shop.shop_type,
                owner_id=str(owner_id),
                currency=currency,
                delivery_charge=delivery_charge,
                tax_rate=tax_rate,
                registered_at=now,
            )
        )
        return shop

    @property
    def is_open(self):
        return self.status == ShopStatus.ACTIVE.value

    @property
    def requires_connection(self):
        return self.shop_type == ShopType.PHYSICAL.value

    def tax_on(self, subtotal):
        """Tax due on ``subtotal`` at the shop's rate, which is a percentage."""
        return round(subtotal * (self.tax_rate or 0.0) / 100, 2)

    def update_settings(self, name=None, shop_type=None, currency=None, delivery_charge=None, tax_rate=None):
        """Change any subset of the shop's name, type and financial defaults."""
        if name is not None:
            self.name = name
        if shop_type is not None:
            self.shop_type = _parse(ShopType, shop_type, "shop_type").value
        if currency is not None:
            self.currency = currency
        if delivery_charge is not None:
            self.delivery_charge = delivery_charge
        if tax_rate is not None:
            self.tax_rate = tax_rate
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ShopSettingsUpdated(
                shop_id=str(self.id),
                name=self.name,
                shop_type=self.shop_type,
                currency=self.currency,
                delivery_charge=self.delivery_charge,
                tax_rate=self.tax_rate,
            )
        )

    def change_status(self, status):
        new_status = _parse(ShopStatus, status, "status")
        previous_status = self.status
        if new_status.value == previous_status:
            return

        self.status = new_status.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ShopStatusChanged(
                shop_id=str(self.id),
                previous_status=previous_status,
                new_status=new_status.value,
            )
        )
