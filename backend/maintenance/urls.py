from django.urls import path
from .views import (
    maintenance_log_list_create, maintenance_log_detail, maintenance_log_end,
    downtime_reasons, downtime_summary_view,
)

urlpatterns = [
    path('maintenance-logs/', maintenance_log_list_create, name='maintenance-log-list-create'),
    path('maintenance-logs/<int:pk>/', maintenance_log_detail, name='maintenance-log-detail'),
    path('maintenance-logs/<int:pk>/end/', maintenance_log_end, name='maintenance-log-end'),
    path('maintenance/downtime-reasons/', downtime_reasons, name='downtime-reasons'),
    path('maintenance/downtime-summary/', downtime_summary_view, name='downtime-summary'),
]
