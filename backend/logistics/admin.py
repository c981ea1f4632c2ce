from django.contrib import admin
from .models import Carton, Pallet, Shipment, ShipmentPallet, ScanEvent, Dispatch, DispatchNote


@admin.register(Pallet)
class PalletAdmin(admin.ModelAdmin):
    list_display = ['pallet_id', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['pallet_id']


@admin.register(Carton)
class CartonAdmin(admin.ModelAdmin):
    list_display = ['carton_id', 'work_order', 'quantity', 'status', 'pallet']
    list_filter = ['status']
    search_fields = ['carton_id', 'work_order__wo_number']


class ShipmentPalletInline(admin.TabularInline):
    model = ShipmentPallet
    extra = 0


@admin.register(Shipment)
class ShipmentAdmin(admin.ModelAdmin):
    list_display = ['ship_id', 'customer', 'incoterm', 'status', 'ship_date']
    list_filter = ['status', 'incoterm']
    search_fields = ['ship_id', 'customer__customer_name']
    inlines = [ShipmentPalletInline]


@admin.register(ScanEvent)
class ScanEventAdmin(admin.ModelAdmin):
    list_display = ['entity_type', 'entity_id', 'from_stage', 'to_stage', 'user', 'created_at']
    list_filter = ['entity_type', 'to_stage']
    search_fields = ['entity_id']


@admin.register(Dispatch)
class DispatchAdmin(admin.ModelAdmin):
    list_display = ['work_order', 'batch', 'quantity', 'shipment', 'dispatched_by', 'dispatched_at']
    search_fields = ['work_order__wo_number']


@admin.register(DispatchNote)
class DispatchNoteAdmin(admin.ModelAdmin):
    list_display = ['dispatch_note_no', 'work_order', 'dispatched_qty', 'gate_entry_no', 'dispatch_date']
    search_fields = ['dispatch_note_no', 'gate_entry_no', 'work_order__wo_number']
