import logging
import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from repricer.exceptions import InvalidPayloadError
from repricer.models import BuyBoxStatus

logger = logging.getLogger(__name__)

OFFER_ENVELOPE_KEYS = ('offers', 'data', 'results')
SPLIT_STOCK_KEYS = ('leadtime_stock', 'warehouse_stock')
CENTS = Decimal('0.01')
# Largest value the 12-digit, 2-place price columns can hold
MAX_PRICE = Decimal('9999999999.99')


@dataclass(frozen=True)
class RemoteOffer:
    offer_id: str | None
    sku: str
    title: str
    price: Decimal
    stock: int
    image_url: str | None = None
    buy_box_status: str | None = None
    cost_price: Decimal | None = None


@dataclass(frozen=True)
class RecognizedShape:
    offers: list
    envelope: str
    total_results: int | None = None


@dataclass(frozen=True)
class UnrecognizedShape:
    type_name: str
    keys: tuple = ()


def parse_offers_response(body):
    """Normalize an offers listing body into a tagged shape."""
    if isinstance(body, list):
        return RecognizedShape(offers=body, envelope='list')

    if isinstance(body, dict):
        for key in OFFER_ENVELOPE_KEYS:
            offers = body.get(key)
            if isinstance(offers, list):
                total = body.get('total_results')
                if not isinstance(total, int) or isinstance(total, bool):
                    total = None
                return RecognizedShape(offers=offers, envelope=key, total_results=total)
        return UnrecognizedShape(type_name='dict', keys=tuple(sorted(body.keys())))

    return UnrecognizedShape(type_name=type(body).__name__)


def parse_price(value, field='price'):
    if value is None:
        raise InvalidPayloadError(f"null {field}")
    if isinstance(value, bool):
        raise InvalidPayloadError(f"non-numeric {field}")
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise InvalidPayloadError(f"non-numeric {field}") from None
    if not price.is_finite():
        raise InvalidPayloadError(f"non-numeric {field}")
    if price < 0:
        raise InvalidPayloadError(f"negative {field} ({value})")
    if price > MAX_PRICE:
        raise InvalidPayloadError(f"{field} out of range ({value})")
    return price.quantize(CENTS)


def parse_stock(value):
    if isinstance(value, bool):
        raise InvalidPayloadError("non-numeric stock")
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidPayloadError("non-numeric stock")
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            raise InvalidPayloadError("non-numeric stock") from None
    raise InvalidPayloadError("non-numeric stock")


def _quantity(value):
    # Takealot reports stock either as a plain count or per warehouse.
    if isinstance(value, bool):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, list):
        total = 0
        for entry in value:
            if isinstance(entry, dict):
                entry = entry.get('quantity_available', entry.get('quantity'))
            total += _quantity(entry)
        return total
    return 0


def total_stock(raw):
    if any(key in raw for key in SPLIT_STOCK_KEYS):
        return sum(_quantity(raw.get(key)) for key in SPLIT_STOCK_KEYS)
    return _quantity(raw.get('stock'))


def normalize_buy_box(winner=None, status=None):
    """Returns a BuyBoxStatus value, or None when the remote says nothing."""
    if isinstance(winner, bool):
        return BuyBoxStatus.WON if winner else BuyBoxStatus.LOST
    if status is None:
        return None
    status = str(status).strip().lower()
    if status in BuyBoxStatus.values:
        return BuyBoxStatus(status)
    return BuyBoxStatus.UNKNOWN


def _remote_price(raw):
    if 'selling_price' in raw:
        return raw['selling_price']
    return raw.get('price')


def validate_offer(raw):
    """Returns (is_valid, reason)."""
    if not isinstance(raw, dict):
        return False, "offer is not an object"

    sku = raw.get('sku')
    if not sku:
        return False, f"offer {raw.get('offer_id')}: missing SKU"

    try:
        parse_price(_remote_price(raw))
    except InvalidPayloadError as exc:
        return False, f"{sku}: {exc}"

    return True, ""


def _optional_price(value, field):
    if value is None:
        return None
    try:
        return parse_price(value, field)
    except InvalidPayloadError as exc:
        logger.warning("Ignoring %s", exc)
        return None


def transform_offer(raw):
    offer_id = raw.get('offer_id')

    return RemoteOffer(
        offer_id=str(offer_id) if offer_id not in (None, '') else None,
        sku=str(raw['sku']),
        title=raw.get('title') or '',
        price=parse_price(_remote_price(raw)),
        stock=total_stock(raw),
        image_url=raw.get('image_url') or None,
        buy_box_status=normalize_buy_box(raw.get('buy_box_winner'), raw.get('buy_box_status')),
        cost_price=_optional_price(raw.get('cost_price'), 'cost price'),
    )


def deduplicate(offers):
    """Keeps the last occurrence per offer id, falling back to SKU."""
    seen = {}
    for index, offer in enumerate(offers):
        key = ('unkeyed', index)
        if isinstance(offer, dict):
            if offer.get('offer_id') not in (None, ''):
                key = ('offer', str(offer['offer_id']))
            elif offer.get('sku') not in (None, ''):
                key = ('sku', str(offer['sku']))
        seen[key] = offer
    return list(seen.values())
