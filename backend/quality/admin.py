from django.contrib import admin
from .models import DimensionTolerance, HourlyQCCheck, QCRecord, QCFinalReport


@admin.register(DimensionTolerance)
class DimensionToleranceAdmin(admin.ModelAdmin):
    list_display = ['item_code', 'operation', 'created_by', 'created_at']
    list_filter = ['operation']
    search_fields = ['item_code']


@admin.register(HourlyQCCheck)
class HourlyQCCheckAdmin(admin.ModelAdmin):
    list_display = ['work_order', 'machine', 'operation', 'status', 'operator', 'check_datetime']
    list_filter = ['status', 'operation']
    search_fields = ['work_order__wo_number']
    readonly_fields = ['check_datetime']


@admin.register(QCRecord)
class QCRecordAdmin(admin.ModelAdmin):
    list_display = ['qc_id', 'work_order', 'qc_type', 'result', 'inspected_by', 'qc_date']
    list_filter = ['qc_type', 'result']
    search_fields = ['qc_id', 'work_order__wo_number']


@admin.register(QCFinalReport)
class QCFinalReportAdmin(admin.ModelAdmin):
    list_display = ['work_order', 'generated_by', 'created_at']
    search_fields = ['work_order__wo_number']
