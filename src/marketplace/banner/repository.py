"""Repository for the Banner aggregate."""

from marketplace.banner.banner import Banner
from marketplace.domain import marketplace


@marketplace.repository(part_of=Banner)
class BannerRepository:
    def active(self) -> list[Banner]:
        return self._dao.query.filter(is_active=True).all().items

    def all_banners(self) -> list[Banner]:
        return self._dao.query.order_by("-created_at").all().items
