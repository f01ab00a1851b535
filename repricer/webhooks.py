import hashlib
import hmac
import json
import logging

from django.db import transaction
from django.utils import timezone

from repricer.exceptions import AuthError, InvalidPayloadError
from repricer.models import PriceHistory, Product, WebhookEvent
from repricer.transforms import normalize_buy_box, parse_price, parse_stock

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = 'X-Takealot-Signature'


def compute_signature(secret, body):
    return hmac.new(secret.encode('utf-8'), body, hashlib.sha256).hexdigest()


def verify_signature(secret, body, signature):
    if not signature:
        return False
    expected = compute_signature(secret, body).encode('ascii')
    return hmac.compare_digest(expected, signature.strip().lower().encode('utf-8'))


def parse_payload(body):
    try:
        payload = json.loads(body)
    except ValueError:
        raise InvalidPayloadError("Webhook body is not valid JSON") from None
    if not isinstance(payload, dict):
        raise InvalidPayloadError("Webhook payload must be a JSON object")
    return payload


class WebhookIngestor:
    """Applies a single Takealot push notification to the matching product.

    The raw event is persisted before any lookup so that every delivery that
    passed the signature check is auditable, whether or not it matched.
    """

    def __init__(self, secret=''):
        self.secret = secret

    def check_signature(self, body, signature):
        if not self.secret:
            return False
        if not verify_signature(self.secret, body, signature):
            logger.error("Invalid webhook signature")
            raise AuthError("Invalid signature")
        return True

    def ingest(self, body, signature):
        verified = self.check_signature(body, signature)
        payload = parse_payload(body)

        event = WebhookEvent.objects.create(
            event_type=str(payload.get('event_type') or 'unknown'),
            payload=payload,
            signature_verified=verified,
        )
        logger.info("Received webhook %s (event %s)", event.event_type, event.pk)

        product = self.find_product(payload)
        if product is None:
            logger.info("Product not found for webhook event %s", event.pk)
            return {'success': True, 'updated': False}

        with transaction.atomic():
            self.apply(product, payload, event.event_type)
            event.product = product
            event.user_id = product.user_id
            event.processed = True
            event.processed_at = timezone.now()
            event.save(update_fields=['product', 'user_id', 'processed', 'processed_at'])

        logger.info("Product %s updated from webhook event %s", product.sku, event.pk)
        return {'success': True, 'updated': True}

    def find_product(self, payload):
        offer_id = payload.get('offer_id')
        sku = payload.get('sku')
        has_offer_id = offer_id not in (None, '')
        has_sku = sku not in (None, '')
        if not has_offer_id and not has_sku:
            raise InvalidPayloadError("No offer_id or SKU provided")

        products = Product.objects.order_by('-is_active', 'pk')
        if has_offer_id:
            product = products.filter(takealot_offer_id=str(offer_id)).first()
            if product is not None:
                return product
        if has_sku:
            return products.filter(sku=str(sku)).first()
        return None

    def apply(self, product, payload, event_type):
        update_fields = ['last_synced_at', 'updated_at']
        product.last_synced_at = timezone.now()

        if payload.get('price') is not None:
            new_price = parse_price(payload['price'])
            if product.current_price != new_price:
                PriceHistory.objects.create(
                    product=product,
                    old_price=product.current_price,
                    new_price=new_price,
                    reason=f"Takealot webhook: {event_type}",
                )
                logger.info("Price change for %s: %s -> %s", product.sku, product.current_price, new_price)
            product.current_price = new_price
            update_fields.append('current_price')

        if payload.get('stock') is not None:
            product.stock_quantity = parse_stock(payload['stock'])
            update_fields.append('stock_quantity')

        buy_box = normalize_buy_box(payload.get('buy_box_winner'), payload.get('buy_box_status'))
        if buy_box is not None:
            product.buy_box_status = buy_box
            update_fields.append('buy_box_status')

        product.save(update_fields=update_fields)
