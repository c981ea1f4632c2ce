from django.contrib import admin
from .models import RawPurchaseOrder, RawPOReceipt, RawPOReconciliation


class RawPOReceiptInline(admin.TabularInline):
    model = RawPOReceipt
    extra = 0
    readonly_fields = ['created_at']


@admin.register(RawPurchaseOrder)
class RawPurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['rpo_no', 'supplier', 'material_grade', 'qty_ordered_kg', 'rate_per_kg', 'status', 'created_at']
    list_filter = ['status', 'supplier']
    search_fields = ['rpo_no', 'material_grade', 'supplier__name']
    inlines = [RawPOReceiptInline]
    readonly_fields = ['created_at', 'updated_at']


@admin.register(RawPOReconciliation)
class RawPOReconciliationAdmin(admin.ModelAdmin):
    list_display = ['rpo', 'reason', 'qty_delta_kg', 'amount_delta', 'resolution', 'resolved_by', 'resolved_at']
    list_filter = ['reason', 'resolution']
    search_fields = ['rpo__rpo_no']
