"""Domain events for the Banner aggregate."""

from protean.fields import Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Banner")
class BannerSaved:
    __version__ = 1

    banner_id = Identifier(required=True)
    title = String(required=True)


@marketplace.event(part_of="Banner")
class BannerActivated:
    """The banner became the one shown platform-wide."""

    __version__ = 1

    banner_id = Identifier(required=True)


@marketplace.event(part_of="Banner")
class BannerDeactivated:
    __version__ = 1

    banner_id = Identifier(required=True)
