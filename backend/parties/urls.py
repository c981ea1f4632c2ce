from django.urls import path
from .views import (
    customer_list_create, customer_detail,
    supplier_list_create, supplier_detail,
    external_partner_list_create, external_partner_detail,
)

urlpatterns = [
    # Customer endpoints
    path('customers/', customer_list_create, name='customer-list-create'),
    path('customers/<int:pk>/', customer_detail, name='customer-detail'),

    # Supplier endpoints
    path('suppliers/', supplier_list_create, name='supplier-list-create'),
    path('suppliers/<int:pk>/', supplier_detail, name='supplier-detail'),

    # External partner endpoints
    path('external-partners/', external_partner_list_create, name='external-partner-list-create'),
    path('external-partners/<int:pk>/', external_partner_detail, name='external-partner-detail'),
]
