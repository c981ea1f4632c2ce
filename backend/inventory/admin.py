from django.contrib import admin
from .models import MaterialLot, InventoryLot, FinishedGoodsStock


@admin.register(MaterialLot)
class MaterialLotAdmin(admin.ModelAdmin):
    list_display = ['lot_id', 'heat_no', 'material_grade', 'supplier', 'net_weight', 'qc_status', 'status', 'gate_entry_no']
    list_filter = ['qc_status', 'status']
    search_fields = ['lot_id', 'heat_no', 'gate_entry_no']


@admin.register(InventoryLot)
class InventoryLotAdmin(admin.ModelAdmin):
    list_display = ['lot_id', 'material_grade', 'heat_no', 'qty_kg', 'cost_rate', 'source', 'received_date']
    list_filter = ['source', 'received_date']
    search_fields = ['lot_id', 'heat_no', 'material_grade']


@admin.register(FinishedGoodsStock)
class FinishedGoodsStockAdmin(admin.ModelAdmin):
    list_display = ['item_code', 'customer', 'work_order', 'quantity_available', 'quantity_reserved', 'source_type']
    list_filter = ['source_type']
    search_fields = ['item_code']
