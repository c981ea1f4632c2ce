from django.db import models
from decimal import Decimal
from backend.core.models import User
from backend.parties.models import Customer, ExternalPartner

# Rejection columns on the daily production log, with their report labels
REJECTION_FIELDS = [
    ('rejection_dimension', 'Dimension'),
    ('rejection_scratch', 'Scratch'),
    ('rejection_dent', 'Dent'),
    ('rejection_tool_mark', 'Tool Mark'),
    ('rejection_forging_mark', 'Forging Mark'),
    ('rejection_lining', 'Lining'),
    ('rejection_face_not_ok', 'Face Not OK'),
    ('rejection_material_not_ok', 'Material Not OK'),
    ('rejection_setting', 'Setting'),
    ('rejection_previous_setup_fault', 'Previous Setup Fault'),
]


class Machine(models.Model):
    """CNC / production machines"""
    STATUS_CHOICES = [
        ('idle', 'Idle'),
        ('running', 'Running'),
        ('maintenance', 'Maintenance'),
        ('down', 'Down'),
    ]

    machine_id = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=200)
    location = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='idle')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.machine_id} - {self.name}"

    class Meta:
        db_table = 'machines'
        ordering = ['machine_id']


class WorkOrder(models.Model):
    """Manufacturing work order"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('in_progress', 'In Progress'),
        ('qc', 'QC'),
        ('packing', 'Packing'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]
    EXTERNAL_STATUS_CHOICES = [
        ('sent', 'Sent'),
        ('partial', 'Partially Returned'),
    ]

    wo_number = models.CharField(max_length=50, unique=True)
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, null=True, blank=True, related_name='work_orders')
    item_code = models.CharField(max_length=100)
    quantity = models.PositiveIntegerField(default=0)
    due_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    current_stage = models.CharField(max_length=50, default='production')
    qty_dispatched = models.PositiveIntegerField(default=0)
    qty_external_wip = models.PositiveIntegerField(default=0)
    external_status = models.CharField(max_length=20, choices=EXTERNAL_STATUS_CHOICES, null=True, blank=True)
    external_process_type = models.CharField(max_length=100, null=True, blank=True)
    material_location = models.CharField(max_length=200, default='Factory')
    quality_released = models.BooleanField(default=False)
    final_qc_result = models.CharField(max_length=20, null=True, blank=True)
    qc_final_status = models.CharField(max_length=20, null=True, blank=True)
    qc_final_remarks = models.TextField(blank=True)
    sampling_plan_reference = models.CharField(max_length=100, blank=True)
    quality_released_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='released_work_orders')
    quality_released_at = models.DateTimeField(null=True, blank=True)
    dispatch_allowed = models.BooleanField(default=False)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='work_orders')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.wo_number

    @property
    def customer_name(self):
        return self.customer.customer_name if self.customer else None

    class Meta:
        db_table = 'work_orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_wo_status'),
            models.Index(fields=['item_code'], name='idx_wo_item_code'),
        ]


class ProductionBatch(models.Model):
    """A batch of a work order moving through the floor and external partners"""
    LOCATION_CHOICES = [
        ('factory', 'Factory'),
        ('transit', 'In Transit'),
        ('external_partner', 'External Partner'),
    ]

    work_order = models.ForeignKey(WorkOrder, on_delete=models.CASCADE, related_name='batches')
    batch_number = models.PositiveIntegerField(default=1)
    quantity = models.PositiveIntegerField(default=0)
    current_location = models.CharField(max_length=20, choices=LOCATION_CHOICES, default='factory')
    current_process = models.CharField(max_length=50, default='production')
    external_partner = models.ForeignKey(ExternalPartner, on_delete=models.SET_NULL, null=True, blank=True, related_name='batches')
    external_process_type = models.CharField(max_length=100, null=True, blank=True)
    qc_approved_qty = models.PositiveIntegerField(default=0)
    dispatched_qty = models.PositiveIntegerField(default=0)
    started_at = models.DateTimeField(auto_now_add=True)
    ended_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"{self.work_order.wo_number} / B{self.batch_number}"

    @property
    def available_to_dispatch(self):
        return max(0, self.qc_approved_qty - self.dispatched_qty)

    class Meta:
        db_table = 'production_batches'
        ordering = ['work_order', 'batch_number']
        unique_together = [['work_order', 'batch_number']]


class DailyProductionLog(models.Model):
    """Per-shift production count for a work order on a machine"""
    work_order = models.ForeignKey(WorkOrder, on_delete=models.CASCADE, related_name='production_logs')
    machine = models.ForeignKey(Machine, on_delete=models.SET_NULL, null=True, blank=True, related_name='production_logs')
    log_date = models.DateField()
    shift = models.CharField(max_length=20, blank=True)
    operation = models.CharField(max_length=5, blank=True)
    operator = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='production_logs')
    actual_quantity = models.PositiveIntegerField(default=0)
    rework_quantity = models.PositiveIntegerField(default=0)
    total_rejection_quantity = models.PositiveIntegerField(default=0)
    ok_quantity = models.PositiveIntegerField(default=0)
    rejection_dimension = models.PositiveIntegerField(default=0)
    rejection_scratch = models.PositiveIntegerField(default=0)
    rejection_dent = models.PositiveIntegerField(default=0)
    rejection_tool_mark = models.PositiveIntegerField(default=0)
    rejection_forging_mark = models.PositiveIntegerField(default=0)
    rejection_lining = models.PositiveIntegerField(default=0)
    rejection_face_not_ok = models.PositiveIntegerField(default=0)
    rejection_material_not_ok = models.PositiveIntegerField(default=0)
    rejection_setting = models.PositiveIntegerField(default=0)
    rejection_previous_setup_fault = models.PositiveIntegerField(default=0)
    remarks = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def save(self, *args, **kwargs):
        # Totals are always derived from the breakdown
        self.total_rejection_quantity = sum(getattr(self, field) or 0 for field, _ in REJECTION_FIELDS)
        self.ok_quantity = max(0, (self.actual_quantity or 0) - self.total_rejection_quantity - (self.rework_quantity or 0))
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.work_order.wo_number} {self.log_date}"

    class Meta:
        db_table = 'daily_production_logs'
        ordering = ['-log_date', '-created_at']
        indexes = [
            models.Index(fields=['work_order', 'machine'], name='idx_prodlog_wo_machine'),
        ]


class ExecutionRecord(models.Model):
    """Material movement recorded against a work order (raw material in, scrap out, ...)"""
    DIRECTION_CHOICES = [
        ('IN', 'In'),
        ('OUT', 'Out'),
    ]

    work_order = models.ForeignKey(WorkOrder, on_delete=models.CASCADE, related_name='execution_records')
    process_type = models.CharField(max_length=50)
    quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    unit = models.CharField(max_length=10, default='kg')
    direction = models.CharField(max_length=3, choices=DIRECTION_CHOICES)
    related_gate_entry_no = models.CharField(max_length=50, blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='execution_records')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.work_order.wo_number} {self.process_type} {self.direction} {self.quantity}{self.unit}"

    class Meta:
        db_table = 'execution_records'
        ordering = ['-created_at']
