from django.urls import path

from .views import AutoCompleteView, CompletionCheckView, ExpirePendingView, ExpireUnpaidView

urlpatterns = [
    path('expire-pending/', ExpirePendingView.as_view(), name='cron-expire-pending'),
    path('expire-unpaid/', ExpireUnpaidView.as_view(), name='cron-expire-unpaid'),
    path('auto-complete/', AutoCompleteView.as_view(), name='cron-auto-complete'),
    path('completion-check/', CompletionCheckView.as_view(), name='cron-completion-check'),
]
