"""Banner management: commands and handler.

Every upsert writes the banner's active flag. Activating a banner
deactivates every other active banner in the same unit of work. The other
banners are looked up by that unit of work, not taken from a list the
caller read earlier, so a banner activated between the caller's read and
this commit is still switched off.
"""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from marketplace.access.principal import require_admin, resolve_principal
from marketplace.banner.banner import Banner
from marketplace.domain import marketplace

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Banner")
class UpsertBanner:
    """Create a banner, or edit the one named by ``banner_id``."""

    actor_id = Identifier(required=True)
    banner_id = Identifier()
    title = String(max_length=255)
    subtitle = String(max_length=500)
    image_url = String(max_length=1000)
    target_url = String(max_length=1000)
    make_active = Boolean(default=False)


@marketplace.command(part_of="Banner")
class DeleteBanner:
    actor_id = Identifier(required=True)
    banner_id = Identifier(required=True)


@marketplace.command_handler(part_of=Banner)
class BannerManagementHandler:
    @handle(UpsertBanner)
    def upsert_banner(self, command):
        principal = resolve_principal(command.actor_id)
        require_admin(principal, "manage banners")

        repo = current_domain.repository_for(Banner)
        if command.banner_id:
            banner = repo.get(command.banner_id)
            banner.edit(
                title=command.title,
                subtitle=command.subtitle,
                image_url=command.image_url,
                target_url=command.target_url,
            )
        else:
            banner = Banner.create(
                title=command.title,
                subtitle=command.subtitle,
                image_url=command.image_url,
                target_url=command.target_url,
            )

        if command.make_active:
            for other in repo.active():
                if str(other.id) != str(banner.id):
                    other.deactivate()
                    repo.add(other)
            banner.activate()
        else:
            banner.deactivate()

        repo.add(banner)
        logger.info("Banner saved", banner_id=str(banner.id), is_active=banner.is_active)
        return str(banner.id)

    @handle(DeleteBanner)
    def delete_banner(self, command):
        principal = resolve_principal(command.actor_id)
        require_admin(principal, "delete banners")

        repo = current_domain.repository_for(Banner)
        banner = repo.get(command.banner_id)
        repo._dao.delete(banner)
        logger.info("Banner deleted", banner_id=str(banner.id))
