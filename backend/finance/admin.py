from django.contrib import admin
from .models import Invoice, InvoiceItem, Payment, CustomerReceipt, ReceiptAllocation, SupplierPayment, TDSRecord


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0
    readonly_fields = ['amount', 'gst_amount', 'total_line']


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_no', 'customer', 'invoice_date', 'due_date', 'total_amount', 'balance_amount', 'status']
    list_filter = ['status', 'recovery_stage', 'currency']
    search_fields = ['invoice_no', 'customer__customer_name']
    readonly_fields = ['subtotal', 'gst_amount', 'total_amount', 'paid_amount', 'balance_amount']
    inlines = [InvoiceItemInline, PaymentInline]


class ReceiptAllocationInline(admin.TabularInline):
    model = ReceiptAllocation
    extra = 0


@admin.register(CustomerReceipt)
class CustomerReceiptAdmin(admin.ModelAdmin):
    list_display = ['receipt_no', 'customer', 'receipt_date', 'total_amount', 'unallocated_amount', 'status']
    list_filter = ['status', 'method']
    search_fields = ['receipt_no', 'customer__customer_name', 'reference']
    inlines = [ReceiptAllocationInline]


@admin.register(SupplierPayment)
class SupplierPaymentAdmin(admin.ModelAdmin):
    list_display = ['supplier', 'payment_date', 'amount', 'tds_amount', 'method']
    search_fields = ['supplier__name', 'reference_no']


@admin.register(TDSRecord)
class TDSRecordAdmin(admin.ModelAdmin):
    list_display = ['record_type', 'pan_number', 'entity_type', 'gross_amount', 'tds_amount',
                    'financial_year', 'quarter', 'status']
    list_filter = ['record_type', 'status', 'financial_year', 'quarter']
