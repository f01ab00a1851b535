from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True

TAKEALOT_API_BASE_URL = 'https://seller-api.takealot.test'
TAKEALOT_API_KEY = 'test-takealot-key'
TAKEALOT_PAGE_SIZE = 100
TAKEALOT_WEBHOOK_SECRET = ''
TAKEALOT_CLIENT_CLASS = 'repricer.clients.takealot_client.TakealotClient'

IDENTITY_PROVIDER_URL = 'https://auth.example.test'
IDENTITY_PROVIDER_API_KEY = 'test-anon-key'

REPRICER_DEFAULT_TENANT_ID = ''
