from pathlib import Path

from environs import Env

env = Env()
env.read_env(recurse=False)

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = env.str('SECRET_KEY', 'django-insecure-4v2q#r7l0w!x9k$takealot-repricer-dev-only-key')

DEBUG = env.bool('DEBUG', False)

ALLOWED_HOSTS = env.list('ALLOWED_HOSTS', [])

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'repricer',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'core.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'core.wsgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOG_LEVEL = env.str('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'repricer': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}

# Celery
CELERY_BROKER_URL = env.str('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_RESULT_BACKEND = CELERY_BROKER_URL
CELERY_BEAT_SCHEDULE = {
    'sync-takealot-offers-every-30-min': {
        'task': 'repricer.tasks.sync_tenant_products',
        'schedule': 1800,
    },
}

# Takealot seller API
TAKEALOT_API_BASE_URL = env.str('TAKEALOT_API_BASE_URL', 'https://seller-api.takealot.com')
TAKEALOT_API_KEY = env.str('TAKEALOT_API_KEY', '')
TAKEALOT_PAGE_SIZE = env.int('TAKEALOT_PAGE_SIZE', 100)
TAKEALOT_REQUEST_TIMEOUT = env.float('TAKEALOT_REQUEST_TIMEOUT', 30.0)
TAKEALOT_WEBHOOK_SECRET = env.str('TAKEALOT_WEBHOOK_SECRET', '')

# Client provider, swap via env or override in prod.py
TAKEALOT_CLIENT_CLASS = env.str('TAKEALOT_CLIENT_CLASS', 'repricer.clients.takealot_client.TakealotClient')

# Identity provider resolving bearer tokens to tenants
IDENTITY_PROVIDER_URL = env.str('IDENTITY_PROVIDER_URL', '')
IDENTITY_PROVIDER_API_KEY = env.str('IDENTITY_PROVIDER_API_KEY', '')

# Single-tenant deployments pin every request to this user id
REPRICER_DEFAULT_TENANT_ID = env.str('REPRICER_DEFAULT_TENANT_ID', '')

CORS_ALLOW_ORIGIN = env.str('CORS_ALLOW_ORIGIN', '*')
