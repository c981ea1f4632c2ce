from django.contrib import admin
from .models import GateEntry, WOExternalMove


@admin.register(GateEntry)
class GateEntryAdmin(admin.ModelAdmin):
    list_display = ['gate_entry_no', 'direction', 'material_type', 'net_weight_kg', 'estimated_pcs',
                    'work_order', 'qc_status', 'entry_date']
    list_filter = ['direction', 'material_type', 'qc_status']
    search_fields = ['gate_entry_no', 'challan_no', 'heat_no', 'vehicle_no', 'supplier_name']
    readonly_fields = ['gate_entry_no', 'entry_date', 'created_at']


@admin.register(WOExternalMove)
class WOExternalMoveAdmin(admin.ModelAdmin):
    list_display = ['work_order', 'process_type', 'partner', 'challan_no', 'status',
                    'quantity_sent', 'quantity_returned', 'dispatch_date', 'expected_return_date']
    list_filter = ['status', 'process_type']
    search_fields = ['work_order__wo_number', 'challan_no']
