from django.contrib import admin
from .models import MaintenanceLog


@admin.register(MaintenanceLog)
class MaintenanceLogAdmin(admin.ModelAdmin):
    list_display = ['machine', 'downtime_reason', 'start_time', 'end_time', 'logged_by']
    list_filter = ['downtime_reason', 'machine']
    search_fields = ['machine__machine_id', 'machine__name', 'remarks']
