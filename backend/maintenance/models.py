from django.db import models
from backend.core.models import User
from backend.production.models import Machine
from .downtime import DOWNTIME_REASON_CHOICES, get_category


class MaintenanceLog(models.Model):
    """Machine downtime / maintenance window"""
    machine = models.ForeignKey(Machine, on_delete=models.CASCADE, related_name='maintenance_logs')
    downtime_reason = models.CharField(max_length=100, choices=DOWNTIME_REASON_CHOICES)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField(null=True, blank=True)
    logged_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='maintenance_logs')
    remarks = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.machine.machine_id} {self.downtime_reason} {self.start_time:%Y-%m-%d %H:%M}"

    @property
    def category(self):
        return get_category(self.downtime_reason)

    @property
    def is_open(self):
        return self.end_time is None

    def duration_minutes(self, until=None):
        """Minutes of downtime; open logs run until `until`"""
        end = self.end_time or until
        if not end:
            return 0
        return max(0, int((end - self.start_time).total_seconds() // 60))

    class Meta:
        db_table = 'maintenance_logs'
        ordering = ['-start_time']
        indexes = [
            models.Index(fields=['machine', 'start_time'], name='idx_maint_machine_start'),
        ]
