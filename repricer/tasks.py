import logging

from celery import shared_task
from django.conf import settings

from repricer.auth import TenantContext
from repricer.clients import get_client
from repricer.exceptions import ConfigurationError
from repricer.sync import SyncOrchestrator

logger = logging.getLogger(__name__)


@shared_task
def sync_tenant_products(user_id=None):
    user_id = user_id or getattr(settings, 'REPRICER_DEFAULT_TENANT_ID', '')
    if not user_id:
        raise ConfigurationError("REPRICER_DEFAULT_TENANT_ID not configured")

    summary = SyncOrchestrator(client=get_client()).run(TenantContext(user_id=user_id))
    return summary.as_dict()
