from django.urls import path
from . import views

urlpatterns = [
    path('invoices/', views.invoice_list_create, name='invoice-list-create'),
    path('invoices/mark-overdue/', views.invoice_mark_overdue, name='invoice-mark-overdue'),
    path('invoices/<int:pk>/', views.invoice_detail, name='invoice-detail'),
    path('invoices/<int:pk>/issue/', views.invoice_issue, name='invoice-issue'),
    path('invoices/<int:pk>/void/', views.invoice_void, name='invoice-void'),
    path('payments/', views.payment_list_create, name='payment-list-create'),
    path('receipts/', views.receipt_list_create, name='receipt-list-create'),
    path('receipts/<int:pk>/', views.receipt_detail, name='receipt-detail'),
    path('receipts/<int:pk>/open-invoices/', views.receipt_open_invoices, name='receipt-open-invoices'),
    path('receipts/<int:pk>/allocate/', views.receipt_allocate, name='receipt-allocate'),
    path('receipts/<int:pk>/auto-allocate/', views.receipt_auto_allocate, name='receipt-auto-allocate'),
    path('receipts/<int:pk>/allocations/<int:allocation_id>/', views.receipt_allocation_delete, name='receipt-allocation-delete'),
    path('receipts/<int:pk>/cancel/', views.receipt_cancel, name='receipt-cancel'),
    path('supplier-payments/', views.supplier_payment_list_create, name='supplier-payment-list-create'),
    path('tds-records/', views.tds_record_list, name='tds-record-list'),
    path('tds-records/<int:pk>/status/', views.tds_record_status, name='tds-record-status'),
]
