from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Extended user model with additional fields"""
    full_name = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def get_display_name(self):
        return self.full_name or self.get_full_name() or self.username

    class Meta:
        db_table = 'users'


class Setting(models.Model):
    """System settings"""
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField()
    description = models.TextField(blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.key

    class Meta:
        db_table = 'settings'


class AuditLog(models.Model):
    """Audit log for critical operations"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('gate_in_raw_material', 'Gate In - Raw Material'),
        ('gate_in_external_process', 'Gate In - External Process'),
        ('gate_in_finished_goods', 'Gate In - Finished Goods'),
        ('gate_in_scrap', 'Gate In - Scrap'),
        ('gate_in_other', 'Gate In - Other'),
        ('gate_out_raw_material', 'Gate Out - Raw Material'),
        ('gate_out_external_process', 'Gate Out - External Process'),
        ('gate_out_finished_goods', 'Gate Out - Finished Goods'),
        ('gate_out_scrap', 'Gate Out - Scrap'),
        ('gate_out_other', 'Gate Out - Other'),
        ('reconciliation_resolve', 'RPO Reconciliation Resolved'),
        ('material_qc_update', 'Material QC Updated'),
        ('FINAL_QC_RELEASE', 'Final QC Release'),
        ('FINAL_QC_BLOCK', 'Final QC Block'),
        ('FINAL_QC_ADMIN_WAIVER', 'Final QC Admin Waiver'),
        ('shipment_create', 'Shipment Created'),
        ('dispatch_create', 'Dispatch Created'),
        ('dispatch_delete', 'Dispatch Reversed'),
        ('maintenance_start', 'Maintenance Started'),
        ('maintenance_end', 'Maintenance Ended'),
        ('invoice_create', 'Invoice Created'),
        ('invoice_issue', 'Invoice Issued'),
        ('invoice_void', 'Invoice Void'),
        ('invoices_mark_overdue', 'Invoices Marked Overdue'),
        ('payment_create', 'Payment Recorded'),
        ('receipt_create', 'Receipt Created'),
        ('receipt_cancel', 'Receipt Cancelled'),
        ('receipt_allocate', 'Receipt Allocated'),
        ('receipt_auto_allocate', 'Receipt Auto-Allocated'),
        ('allocation_remove', 'Allocation Removed'),
        ('supplier_payment_create', 'Supplier Payment Recorded'),
        ('tds_status_update', 'TDS Status Updated'),
        ('password_reset', 'Password Reset'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., work order number, invoice number)")
    object_reference = models.CharField(max_length=255, blank=True, null=True, help_text="Reference identifier (e.g., gate entry number, receipt number)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='idx_audit_created'),
            models.Index(fields=['action'], name='idx_audit_action'),
            models.Index(fields=['model_name'], name='idx_audit_model'),
            models.Index(fields=['object_reference'], name='idx_audit_reference'),
        ]
