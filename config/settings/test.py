"""
Test settings for the Traverum booking backend.

SQLite in memory, local-memory cache and email, and eager Celery so the
suite needs no external services.
"""

import os

os.environ.setdefault('SECRET_KEY', 'test-secret-key')

from .base import *  # noqa

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

APP_URL = 'https://book.test'
TOKEN_SECRET = 'test-token-secret'
CRON_SECRET = 'test-cron-secret'
STRIPE_SECRET_KEY = 'sk_test_dummy'
STRIPE_WEBHOOK_SECRET = 'whsec_test_dummy'
RECAPTCHA_SECRET_KEY = 'recaptcha-test-secret'


CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

LOGGING['root']['level'] = 'CRITICAL'
