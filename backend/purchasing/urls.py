from django.urls import path
from .views import rpo_list_create, rpo_detail, reconciliation_list, reconciliation_resolve

urlpatterns = [
    path('raw-purchase-orders/', rpo_list_create, name='rpo-list-create'),
    path('raw-purchase-orders/<int:pk>/', rpo_detail, name='rpo-detail'),
    path('reconciliations/', reconciliation_list, name='reconciliation-list'),
    path('reconciliations/<int:pk>/resolve/', reconciliation_resolve, name='reconciliation-resolve'),
]
