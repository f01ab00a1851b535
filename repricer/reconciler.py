import logging

from django.db import DatabaseError, transaction
from django.db.models import Q
from django.utils import timezone

from repricer.exceptions import PersistenceError
from repricer.models import BuyBoxStatus, PriceHistory, Product
from repricer.results import CREATED, UPDATED, ItemResult, SyncSummary

logger = logging.getLogger(__name__)

SYNC_REASON = 'Takealot sync'


class ProductReconciler:
    """Merges remote offer state into one tenant's product records."""

    def __init__(self, tenant):
        self.tenant = tenant

    def find_existing(self, offer):
        match = Q(sku=offer.sku)
        if offer.offer_id:
            match |= Q(takealot_offer_id=offer.offer_id)
        return (
            Product.objects
            .filter(user_id=self.tenant.user_id)
            .filter(match)
            .order_by('-is_active', 'pk')
            .first()
        )

    def reconcile(self, offers, summary=None):
        summary = summary if summary is not None else SyncSummary()

        for offer in offers:
            try:
                with transaction.atomic():
                    result = self.reconcile_one(offer)
            except DatabaseError as exc:
                error = PersistenceError(f"Failed to store {offer.sku}: {exc}")
                logger.error("%s", error)
                result = ItemResult.failed(offer.sku, error)
            summary.add(result)

        logger.info(
            "Reconciled %d offers for %s: %d created, %d updated, %d failed",
            len(summary.results), self.tenant.user_id, summary.created, summary.updated, summary.failed,
        )
        return summary

    def reconcile_one(self, offer):
        now = timezone.now()
        existing = self.find_existing(offer)

        if existing is None:
            Product.objects.create(
                user_id=self.tenant.user_id,
                sku=offer.sku,
                title=offer.title,
                current_price=offer.price,
                cost_price=offer.cost_price,
                stock_quantity=offer.stock,
                takealot_offer_id=offer.offer_id,
                last_synced_at=now,
                image_url=offer.image_url,
                buy_box_status=offer.buy_box_status or BuyBoxStatus.UNKNOWN,
                is_active=True,
            )
            logger.debug("Created %s", offer.sku)
            return ItemResult.ok(offer.sku, CREATED, new_price=offer.price)

        old_price = existing.current_price
        if old_price != offer.price:
            PriceHistory.objects.create(
                product=existing,
                old_price=old_price,
                new_price=offer.price,
                reason=SYNC_REASON,
            )
            logger.info("Price change for %s: %s -> %s", offer.sku, old_price, offer.price)

        existing.title = offer.title
        existing.current_price = offer.price
        existing.stock_quantity = offer.stock
        existing.takealot_offer_id = offer.offer_id or existing.takealot_offer_id
        existing.last_synced_at = now
        existing.image_url = offer.image_url or existing.image_url
        existing.buy_box_status = offer.buy_box_status or existing.buy_box_status
        if offer.cost_price is not None:
            existing.cost_price = offer.cost_price
        existing.save()

        logger.debug("Updated %s", offer.sku)
        return ItemResult.ok(offer.sku, UPDATED, old_price=old_price, new_price=offer.price)
