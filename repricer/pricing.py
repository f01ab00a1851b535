import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from repricer.exceptions import (
    InvalidPayloadError,
    MissingOfferIdError,
    NotFoundError,
    PersistenceError,
    UpstreamError,
)
from repricer.models import PriceHistory, Product
from repricer.results import PUSHED, ItemResult, PushSummary
from repricer.transforms import parse_price

logger = logging.getLogger(__name__)

REPRICE_REASON = 'Repricing rule applied'


class PricePusher:
    """Pushes new prices to Takealot one product at a time.

    Items are independent: a failure is recorded against that item and the
    batch carries on. Nothing already pushed is rolled back.
    """

    def __init__(self, client, tenant):
        self.client = client
        self.tenant = tenant

    def push(self, updates):
        if not updates:
            raise InvalidPayloadError("No price updates provided")

        logger.info("Updating %d prices for user %s", len(updates), self.tenant.user_id)

        summary = PushSummary()
        for update in updates:
            summary.add(self.push_one(update))

        logger.info("Price update complete: %d/%d succeeded", summary.succeeded, summary.total)
        return summary

    def load_product(self, product_id):
        try:
            product = Product.objects.filter(pk=product_id, user_id=self.tenant.user_id).first()
        except (ValueError, ValidationError):
            product = None
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def push_one(self, update):
        if not isinstance(update, dict):
            return ItemResult.failed(None, "Invalid price update")

        product_id = update.get('product_id')
        try:
            new_price = parse_price(update.get('new_price'), 'new price')
            product = self.load_product(product_id)
            if not product.takealot_offer_id:
                raise MissingOfferIdError("No Takealot offer ID")
            self.client.patch_price(product.takealot_offer_id, new_price)
        except (InvalidPayloadError, NotFoundError, UpstreamError) as exc:
            logger.error("Error updating product %s: %s", product_id, exc)
            return ItemResult.failed(product_id, exc)

        old_price = product.current_price
        try:
            with transaction.atomic():
                if old_price != new_price:
                    PriceHistory.objects.create(
                        product=product,
                        old_price=old_price,
                        new_price=new_price,
                        reason=REPRICE_REASON,
                    )
                product.current_price = new_price
                product.last_repriced_at = timezone.now()
                product.save(update_fields=['current_price', 'last_repriced_at', 'updated_at'])
        except DatabaseError as exc:
            error = PersistenceError(f"Price pushed but not stored locally: {exc}")
            logger.error("Error updating product %s: %s", product_id, error)
            return ItemResult.failed(product_id, error)

        logger.info("Updated price for product %s: %s -> %s", product.pk, old_price, new_price)
        return ItemResult.ok(product_id, PUSHED, old_price=old_price, new_price=new_price)
