from django.contrib import admin
from .models import Customer, Supplier, ExternalPartner


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['customer_name', 'party_code', 'pan_number', 'is_export_customer', 'country', 'is_active']
    list_filter = ['is_active', 'is_export_customer', 'country']
    search_fields = ['customer_name', 'party_code', 'pan_number']
    ordering = ['customer_name']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'pan_number', 'phone', 'email', 'is_active']
    list_filter = ['is_active', 'created_at']
    search_fields = ['name', 'code', 'email', 'pan_number']
    ordering = ['name']


@admin.register(ExternalPartner)
class ExternalPartnerAdmin(admin.ModelAdmin):
    list_display = ['name', 'process_type', 'phone', 'is_active']
    list_filter = ['is_active', 'process_type']
    search_fields = ['name', 'process_type']
    ordering = ['name']
