"""
HTTP triggers for the maintenance jobs, for schedulers that call URLs
instead of running Celery beat.
"""

import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from core.authentication import CronSecretAuthentication
from core.permissions import HasCronSecret
from apps.reservations import services

logger = logging.getLogger(__name__)


class CronJobView(APIView):
    authentication_classes = [CronSecretAuthentication]
    permission_classes = [HasCronSecret]
    http_method_names = ['get', 'post', 'options']

    def run_job(self):
        raise NotImplementedError("Subclasses must implement run_job")

    def post(self, request):
        result = self.run_job()
        logger.info(f"⏱️ [CRON] {self.__class__.__name__}: {result}")
        return Response({'success': True, **result})

    def get(self, request):
        return self.post(request)


class ExpirePendingView(CronJobView):
    def run_job(self):
        return {'expired': services.expire_pending()}


class ExpireUnpaidView(CronJobView):
    def run_job(self):
        return {'expired': services.expire_unpaid()}


class AutoCompleteView(CronJobView):
    def run_job(self):
        return services.auto_complete()


class CompletionCheckView(CronJobView):
    def run_job(self):
        return {'sent': services.completion_check()}
