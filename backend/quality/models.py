from django.db import models
from backend.core.models import User
from backend.inventory.models import MaterialLot
from backend.production.models import Machine, WorkOrder, ProductionBatch

OPERATION_CHOICES = [
    ('A', 'Operation A'),
    ('B', 'Operation B'),
    ('C', 'Operation C'),
    ('D', 'Operation D'),
]

# Binary (go/no-go) checks recorded on an hourly QC check
BINARY_CHECKS = ['thread', 'visual', 'plating', 'plating_thickness']

BINARY_STATUS_CHOICES = [
    ('ok', 'OK'),
    ('not_ok', 'Not OK'),
    ('na', 'N/A'),
]


class DimensionTolerance(models.Model):
    """
    Dimension limits for an item operation.
    dimensions: {"<id>": {"name": str, "min": number, "max": number, "unit": str}}
    The newest row for an item/operation is the one in force.
    """
    item_code = models.CharField(max_length=100)
    operation = models.CharField(max_length=1, choices=OPERATION_CHOICES)
    dimensions = models.JSONField(default=dict)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='dimension_tolerances')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.item_code} / {self.operation}"

    class Meta:
        db_table = 'dimension_tolerances'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['item_code', 'operation'], name='idx_tolerance_item_op'),
        ]


class HourlyQCCheck(models.Model):
    """In-process dimensional and binary check taken at the machine"""
    STATUS_CHOICES = [
        ('pass', 'Pass'),
        ('fail', 'Fail'),
    ]

    work_order = models.ForeignKey(WorkOrder, on_delete=models.CASCADE, related_name='hourly_qc_checks')
    machine = models.ForeignKey(Machine, on_delete=models.PROTECT, related_name='hourly_qc_checks')
    operator = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='hourly_qc_checks')
    operation = models.CharField(max_length=1, choices=OPERATION_CHOICES, default='A')
    dimensions = models.JSONField(default=dict)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES)
    out_of_tolerance_dimensions = models.JSONField(null=True, blank=True)
    thread_applicable = models.BooleanField(default=False)
    thread_status = models.CharField(max_length=10, choices=BINARY_STATUS_CHOICES, null=True, blank=True)
    visual_applicable = models.BooleanField(default=False)
    visual_status = models.CharField(max_length=10, choices=BINARY_STATUS_CHOICES, null=True, blank=True)
    plating_applicable = models.BooleanField(default=False)
    plating_status = models.CharField(max_length=10, choices=BINARY_STATUS_CHOICES, null=True, blank=True)
    plating_thickness_applicable = models.BooleanField(default=False)
    plating_thickness_status = models.CharField(max_length=10, choices=BINARY_STATUS_CHOICES, null=True, blank=True)
    remarks = models.TextField(blank=True, null=True)
    check_datetime = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.work_order.wo_number} {self.operation} {self.status}"

    class Meta:
        db_table = 'hourly_qc_checks'
        ordering = ['-check_datetime']
        indexes = [
            models.Index(fields=['work_order', 'check_datetime'], name='idx_hourly_qc_wo_time'),
        ]


class QCRecord(models.Model):
    """QC gate record (incoming, first piece, post external, final, ...)"""
    QC_TYPE_CHOICES = [
        ('incoming', 'Incoming Material QC'),
        ('first_piece', 'First Piece QC'),
        ('in_process', 'In-Process QC'),
        ('post_external', 'Post External Process QC'),
        ('final', 'Final QC'),
    ]
    RESULT_CHOICES = [
        ('pending', 'Pending'),
        ('pass', 'Pass'),
        ('fail', 'Fail'),
        ('waived', 'Waived'),
    ]

    qc_id = models.CharField(max_length=100, unique=True)
    work_order = models.ForeignKey(WorkOrder, on_delete=models.CASCADE, null=True, blank=True, related_name='qc_records')
    batch = models.ForeignKey(ProductionBatch, on_delete=models.SET_NULL, null=True, blank=True, related_name='qc_records')
    material_lot = models.ForeignKey(MaterialLot, on_delete=models.SET_NULL, null=True, blank=True, related_name='qc_records')
    qc_type = models.CharField(max_length=20, choices=QC_TYPE_CHOICES)
    result = models.CharField(max_length=10, choices=RESULT_CHOICES, default='pending')
    remarks = models.TextField(blank=True)
    inspected_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='qc_records')
    qc_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.qc_id} ({self.qc_type}: {self.result})"

    class Meta:
        db_table = 'qc_records'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['work_order', 'qc_type'], name='idx_qcrecord_wo_type'),
        ]


class QCFinalReport(models.Model):
    """Final inspection report recorded against a work order"""
    work_order = models.ForeignKey(WorkOrder, on_delete=models.CASCADE, related_name='final_qc_reports')
    report_file = models.CharField(max_length=500, blank=True)
    remarks = models.TextField(blank=True)
    generated_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='final_qc_reports')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Final QC report {self.work_order.wo_number}"

    class Meta:
        db_table = 'qc_final_reports'
        ordering = ['-created_at']
