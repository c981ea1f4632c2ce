from django.urls import path
from .views import (
    work_order_list_create, work_order_detail, work_order_batches, work_order_execution_records,
    batch_detail, machine_list_create, machine_detail,
    production_log_list_create, production_log_latest,
)

urlpatterns = [
    # Work order endpoints
    path('work-orders/', work_order_list_create, name='work-order-list-create'),
    path('work-orders/<int:pk>/', work_order_detail, name='work-order-detail'),
    path('work-orders/<int:pk>/batches/', work_order_batches, name='work-order-batches'),
    path('work-orders/<int:pk>/execution-records/', work_order_execution_records, name='work-order-execution-records'),
    path('batches/<int:pk>/', batch_detail, name='batch-detail'),

    # Machine endpoints
    path('machines/', machine_list_create, name='machine-list-create'),
    path('machines/<int:pk>/', machine_detail, name='machine-detail'),

    # Production log endpoints
    path('production-logs/', production_log_list_create, name='production-log-list-create'),
    path('production-logs/latest/', production_log_latest, name='production-log-latest'),
]
