import logging

from repricer.reconciler import ProductReconciler
from repricer.results import SyncSummary
from repricer.transforms import deduplicate, transform_offer, validate_offer

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    def __init__(self, client):
        self.client = client

    def run(self, tenant):
        logger.info("Syncing products for user %s", tenant.user_id)

        raw_offers = self.client.fetch_offers()
        raw_offers = deduplicate(raw_offers)

        summary = SyncSummary()
        offers = []
        for raw in raw_offers:
            is_valid, reason = validate_offer(raw)
            if not is_valid:
                logger.warning("Skipping invalid offer: %s", reason)
                summary.skipped_invalid += 1
                continue
            offers.append(transform_offer(raw))

        ProductReconciler(tenant).reconcile(offers, summary)

        logger.info("Sync complete: %s", summary.as_dict())
        return summary
