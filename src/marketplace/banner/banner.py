"""Banner aggregate: a promotional banner shown on the customer home page.

At most one banner is active across the platform. Activation of one banner
and deactivation of the others happen in the handler that owns the unit of
work; the aggregate only flips its own flag.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, String

from marketplace.banner.events import BannerActivated, BannerDeactivated, BannerSaved
from marketplace.domain import marketplace


@marketplace.aggregate
class Banner:
    title = String(required=True, max_length=255)
    subtitle = String(max_length=500)
    image_url = String(max_length=1000)
    target_url = String(max_length=1000)
    is_active = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, title, subtitle=None, image_url=None, target_url=None):
        now = datetime.now(UTC)
        banner = cls(
            title=title,
            subtitle=subtitle,
            image_url=image_url,
            target_url=target_url,
            is_active=False,
            created_at=now,
            updated_at=now,
        )
        banner.raise_(BannerSaved(banner_id=str(banner.id), title=title))
        return banner

    def edit(self, title=None, subtitle=None, image_url=None, target_url=None):
        if title is not None:
            self.title = title
        if subtitle is not None:
            self.subtitle = subtitle
        if image_url is not None:
            self.image_url = image_url
        if target_url is not None:
            self.target_url = target_url
        self.updated_at = datetime.now(UTC)
        self.raise_(BannerSaved(banner_id=str(self.id), title=self.title))

    def activate(self):
        if self.is_active:
            return
        self.is_active = True
        self.updated_at = datetime.now(UTC)
        self.raise_(BannerActivated(banner_id=str(self.id)))

    def deactivate(self):
        if not self.is_active:
            return
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(BannerDeactivated(banner_id=str(self.id)))
