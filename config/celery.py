"""
Celery configuration for the Traverum booking backend.

Runs outgoing email and the periodic booking maintenance jobs: expiring
unanswered requests and unpaid approvals, asking suppliers whether
yesterday's experiences happened and auto-completing past bookings.
"""

import os
from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

app = Celery('traverum')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django app configs.
app.autodiscover_tasks()

app.conf.beat_schedule = {
    'expire-pending-reservations': {
        'task': 'apps.reservations.tasks.expire_pending_reservations',
        'schedule': crontab(minute='*/15'),
        'options': {'queue': 'critical'},
    },
    'expire-unpaid-reservations': {
        'task': 'apps.reservations.tasks.expire_unpaid_reservations',
        'schedule': crontab(minute='*/15'),
        'options': {'queue': 'critical'},
    },
    'send-completion-checks': {
        'task': 'apps.reservations.tasks.send_completion_checks',
        'schedule': crontab(hour=9, minute=0),
        'options': {'queue': 'emails'},
    },
    # Transfers supplier payouts for experiences 7+ days in the past
    'auto-complete-reservations': {
        'task': 'apps.reservations.tasks.auto_complete_reservations',
        'schedule': crontab(hour=6, minute=0),
        'options': {'queue': 'payments'},
    },
}

app.conf.task_routes = {
    'apps.reservations.tasks.send_reservation_email': {'queue': 'emails'},
    'apps.reservations.tasks.expire_pending_reservations': {'queue': 'critical'},
    'apps.reservations.tasks.expire_unpaid_reservations': {'queue': 'critical'},
    'apps.reservations.tasks.auto_complete_reservations': {'queue': 'payments'},
    'apps.reservations.tasks.send_completion_checks': {'queue': 'emails'},
}

app.conf.update(
    enable_utc=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    result_expires=3600,
    task_default_queue='default',
)
