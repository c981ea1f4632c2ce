from django.contrib import admin
from .models import Machine, WorkOrder, ProductionBatch, DailyProductionLog, ExecutionRecord


class ProductionBatchInline(admin.TabularInline):
    model = ProductionBatch
    extra = 0
    fields = ['batch_number', 'quantity', 'current_location', 'current_process', 'qc_approved_qty', 'dispatched_qty']


@admin.register(WorkOrder)
class WorkOrderAdmin(admin.ModelAdmin):
    list_display = ['wo_number', 'customer', 'item_code', 'quantity', 'status', 'current_stage', 'dispatch_allowed']
    list_filter = ['status', 'current_stage', 'quality_released', 'dispatch_allowed']
    search_fields = ['wo_number', 'item_code', 'customer__customer_name']
    ordering = ['-created_at']
    inlines = [ProductionBatchInline]
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Machine)
class MachineAdmin(admin.ModelAdmin):
    list_display = ['machine_id', 'name', 'location', 'status']
    list_filter = ['status']
    search_fields = ['machine_id', 'name']


@admin.register(DailyProductionLog)
class DailyProductionLogAdmin(admin.ModelAdmin):
    list_display = ['work_order', 'machine', 'log_date', 'actual_quantity', 'ok_quantity', 'total_rejection_quantity']
    list_filter = ['log_date', 'machine']
    search_fields = ['work_order__wo_number']
    readonly_fields = ['total_rejection_quantity', 'ok_quantity', 'created_at']


@admin.register(ExecutionRecord)
class ExecutionRecordAdmin(admin.ModelAdmin):
    list_display = ['work_order', 'process_type', 'direction', 'quantity', 'unit', 'related_gate_entry_no', 'created_at']
    list_filter = ['process_type', 'direction']
    search_fields = ['work_order__wo_number', 'related_gate_entry_no']
