"""Repository for the Shop aggregate."""

from marketplace.domain import marketplace
from marketplace.shop.shop import Shop


@marketplace.repository(part_of=Shop)
class ShopRepository:
    def owned_by(self, user_id: str) -> list[Shop]:
        return self._dao.query.filter(owner_id=str(user_id)).all().items
