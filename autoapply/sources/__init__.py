import threading

from .base import ApplyAction, ListingSource
from .dashboard import DashboardListingSource
from .apply_form import DashboardApplyAction, DryRunApplyAction

from autoapply.config import Settings
from autoapply.log import get_logger

log = get_logger(__name__)

__all__ = [
    "ApplyAction", "ListingSource", "DashboardListingSource",
    "DashboardApplyAction", "DryRunApplyAction",
    "get_listing_source", "get_apply_action",
]


def get_listing_source(settings: Settings, stop: threading.Event | None = None) -> ListingSource:
    log.info("Listing source: %s (%d card selectors)", settings.requests_url, len(settings.card_selectors))
    return DashboardListingSource(settings.requests_url, settings.card_selectors, stop=stop)


def get_apply_action(dry_run: bool) -> ApplyAction:
    if dry_run:
        log.info("DRY_RUN enabled: applications are logged, not submitted")
        return DryRunApplyAction()
    return DashboardApplyAction()
