import json
import logging

from django.conf import settings
from django.db import DatabaseError
from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from repricer.auth import resolve_tenant
from repricer.clients import get_client
from repricer.exceptions import AuthError, InvalidPayloadError, PersistenceError, RepricerError
from repricer.pricing import PricePusher
from repricer.sync import SyncOrchestrator
from repricer.webhooks import SIGNATURE_HEADER, WebhookIngestor

logger = logging.getLogger(__name__)

ALLOWED_HEADERS = 'authorization, x-client-info, apikey, content-type, x-takealot-signature'


def _with_cors(response):
    response['Access-Control-Allow-Origin'] = getattr(settings, 'CORS_ALLOW_ORIGIN', '*')
    response['Access-Control-Allow-Headers'] = ALLOWED_HEADERS
    return response


def _json(data, status=200):
    return _with_cors(JsonResponse(data, status=status))


def _error(exc):
    if isinstance(exc, AuthError):
        status = 401
    elif isinstance(exc, InvalidPayloadError):
        status = 400
    else:
        status = 500
    return _json({'error': str(exc)}, status=status)


def _preflight():
    return _with_cors(HttpResponse())


def _load_json(request):
    try:
        return json.loads(request.body or b'null')
    except ValueError:
        raise InvalidPayloadError("Request body is not valid JSON") from None


def _run(label, operation):
    try:
        return _json(operation())
    except RepricerError as exc:
        logger.error("Error %s: %s", label, exc)
        return _error(exc)
    except DatabaseError as exc:
        logger.error("Error %s: %s", label, exc)
        return _error(PersistenceError("Failed to store changes"))
    except Exception:
        logger.exception("Unexpected error %s", label)
        return _json({'error': 'Internal error'}, status=500)


@csrf_exempt
@require_http_methods(['POST', 'OPTIONS'])
def sync_takealot_products(request):
    if request.method == 'OPTIONS':
        return _preflight()

    def operation():
        tenant = resolve_tenant(request)
        return SyncOrchestrator(client=get_client()).run(tenant).as_dict()

    return _run("syncing products", operation)


@csrf_exempt
@require_http_methods(['POST', 'OPTIONS'])
def takealot_webhook(request):
    if request.method == 'OPTIONS':
        return _preflight()

    ingestor = WebhookIngestor(secret=getattr(settings, 'TAKEALOT_WEBHOOK_SECRET', ''))
    return _run(
        "processing webhook",
        lambda: ingestor.ingest(request.body, request.headers.get(SIGNATURE_HEADER)),
    )


@csrf_exempt
@require_http_methods(['POST', 'OPTIONS'])
def update_takealot_prices(request):
    if request.method == 'OPTIONS':
        return _preflight()

    def operation():
        tenant = resolve_tenant(request)
        payload = _load_json(request)
        updates = payload.get('updates') if isinstance(payload, dict) else None
        if updates is not None and not isinstance(updates, list):
            raise InvalidPayloadError("updates must be a list")
        return PricePusher(client=get_client(), tenant=tenant).push(updates).as_dict()

    return _run("updating prices", operation)
