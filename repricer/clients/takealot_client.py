import logging
from decimal import Decimal

import requests
from django.conf import settings

from repricer.exceptions import ConfigurationError, UpstreamError
from repricer.transforms import RecognizedShape, parse_offers_response

from .base import BaseClient

logger = logging.getLogger(__name__)

TAKEALOT_BASE_URL = getattr(settings, 'TAKEALOT_API_BASE_URL', 'https://seller-api.takealot.com')
PAGE_SIZE = getattr(settings, 'TAKEALOT_PAGE_SIZE', 100)
REQUEST_TIMEOUT = getattr(settings, 'TAKEALOT_REQUEST_TIMEOUT', 30.0)


def _json_price(price):
    price = Decimal(str(price))
    if price == price.to_integral_value():
        return int(price)
    return float(price)


class TakealotClient(BaseClient):
    def __init__(self, api_key=None):
        self.api_key = api_key if api_key is not None else getattr(settings, 'TAKEALOT_API_KEY', '')
        if not self.api_key:
            raise ConfigurationError("TAKEALOT_API_KEY not configured")
        self.session = self.make_session()

    def make_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            'Authorization': f'Key {self.api_key}',
            'Content-Type': 'application/json',
        })
        return session

    def _request(self, method, url, **kwargs):
        try:
            response = self.session.request(method, url, timeout=REQUEST_TIMEOUT, **kwargs)
        except requests.RequestException as exc:
            logger.error("Takealot %s %s failed: %s", method, url, exc)
            raise UpstreamError(None, str(exc)) from exc

        if not response.ok:
            logger.error("Takealot API error %s for %s %s: %s", response.status_code, method, url, response.text)
            raise UpstreamError(response.status_code, response.text)
        return response

    def fetch_offers(self) -> list[dict]:
        url = f"{TAKEALOT_BASE_URL}/v2/offers"
        offers = []
        page_number = 1

        while True:
            response = self._request('GET', url, params={'page_number': page_number, 'page_size': PAGE_SIZE})
            try:
                body = response.json()
            except ValueError:
                raise UpstreamError(response.status_code, "Offers response is not JSON") from None

            shape = parse_offers_response(body)
            if not isinstance(shape, RecognizedShape):
                logger.error("Unrecognized offers response (%s, keys=%s)", shape.type_name, shape.keys)
                raise UpstreamError(response.status_code, "Unrecognized offers response shape")

            offers.extend(shape.offers)
            logger.debug("Fetched page %d (%d offers, envelope=%s)", page_number, len(shape.offers), shape.envelope)

            if shape.total_results is None or not shape.offers or len(offers) >= shape.total_results:
                break
            page_number += 1

        logger.info("Fetched %d offers from Takealot", len(offers))
        return offers

    def patch_price(self, offer_id, price) -> dict:
        url = f"{TAKEALOT_BASE_URL}/v2/offers/offer/{offer_id}"
        response = self._request('PATCH', url, json={'selling_price': _json_price(price)})
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}
