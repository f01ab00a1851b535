import logging
from dataclasses import dataclass

import requests
from django.conf import settings

from repricer.exceptions import AuthError, ConfigurationError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10


@dataclass(frozen=True)
class TenantContext:
    user_id: str


class IdentityClient:
    """Resolves bearer tokens against the identity provider's user endpoint."""

    def __init__(self, base_url=None, api_key=None):
        self.base_url = base_url if base_url is not None else getattr(settings, 'IDENTITY_PROVIDER_URL', '')
        self.api_key = api_key if api_key is not None else getattr(settings, 'IDENTITY_PROVIDER_API_KEY', '')
        if not self.base_url:
            raise ConfigurationError("IDENTITY_PROVIDER_URL not configured")

    def get_user(self, token) -> dict:
        headers = {'Authorization': f'Bearer {token}'}
        if self.api_key:
            headers['apikey'] = self.api_key

        try:
            response = requests.get(
                f"{self.base_url.rstrip('/')}/auth/v1/user", headers=headers, timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            logger.error("Identity provider unreachable: %s", exc)
            raise AuthError("Invalid user token") from exc

        if not response.ok:
            logger.warning("Identity provider rejected token (%s)", response.status_code)
            raise AuthError("Invalid user token")

        try:
            user = response.json()
        except ValueError:
            raise AuthError("Invalid user token") from None
        if not isinstance(user, dict) or not user.get('id'):
            raise AuthError("Invalid user token")
        return user


def resolve_tenant(request, identity_client=None):
    default_tenant = getattr(settings, 'REPRICER_DEFAULT_TENANT_ID', '')
    if default_tenant:
        return TenantContext(user_id=default_tenant)

    header = request.headers.get('Authorization')
    if not header:
        raise AuthError("No authorization header")

    token = header.removeprefix('Bearer ').strip()
    if not token:
        raise AuthError("Invalid user token")

    identity_client = identity_client or IdentityClient()
    user = identity_client.get_user(token)
    return TenantContext(user_id=str(user['id']))
