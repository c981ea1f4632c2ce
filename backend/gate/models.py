from django.db import models
from decimal import Decimal
from backend.core.models import User
from backend.parties.models import Customer, Supplier, ExternalPartner
from backend.production.models import WorkOrder
from backend.purchasing.models import RawPurchaseOrder
from backend.inventory.models import MaterialLot, InventoryLot

# Days an external partner gets before a sent lot is expected back
EXTERNAL_RETURN_DAYS = 7

# Moves due back within this many days are reported alongside overdue ones
RETURN_REMINDER_DAYS = 2

OPEN_MOVE_STATUSES = ['sent', 'partial']


class WOExternalMove(models.Model):
    """Material of a work order sent out to an external partner for processing"""
    STATUS_CHOICES = [
        ('sent', 'Sent'),
        ('partial', 'Partially Returned'),
        ('completed', 'Completed'),
    ]

    work_order = models.ForeignKey(WorkOrder, on_delete=models.CASCADE, related_name='external_moves')
    process_type = models.CharField(max_length=100)
    partner = models.ForeignKey(ExternalPartner, on_delete=models.SET_NULL, null=True, blank=True, related_name='external_moves')
    challan_no = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='sent')
    quantity_sent = models.PositiveIntegerField(default=0)
    quantity_returned = models.PositiveIntegerField(default=0)
    weight_sent_kg = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    weight_returned_kg = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    dispatch_date = models.DateField()
    expected_return_date = models.DateField(null=True, blank=True)
    returned_date = models.DateField(null=True, blank=True)
    remarks = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='external_moves')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.work_order.wo_number} {self.process_type} ({self.status})"

    @property
    def quantity_pending(self):
        return max(0, self.quantity_sent - self.quantity_returned)

    def days_overdue(self, as_of):
        if self.status not in OPEN_MOVE_STATUSES or not self.expected_return_date:
            return 0
        return max(0, (as_of - self.expected_return_date).days)

    class Meta:
        db_table = 'wo_external_moves'
        ordering = ['dispatch_date', 'created_at']
        indexes = [
            models.Index(fields=['work_order', 'process_type', 'status'], name='idx_extmove_wo_process'),
        ]


class GateEntry(models.Model):
    """One physical movement of material through the factory gate"""
    DIRECTION_CHOICES = [
        ('IN', 'In'),
        ('OUT', 'Out'),
    ]
    MATERIAL_TYPE_CHOICES = [
        ('raw_material', 'Raw Material'),
        ('external_process', 'External Process'),
        ('finished_goods', 'Finished Goods'),
        ('scrap', 'Scrap'),
        ('other', 'Other'),
    ]
    QC_STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('not_required', 'Not Required'),
    ]

    gate_entry_no = models.CharField(max_length=50, unique=True)
    direction = models.CharField(max_length=3, choices=DIRECTION_CHOICES)
    material_type = models.CharField(max_length=20, choices=MATERIAL_TYPE_CHOICES)
    entry_date = models.DateTimeField(auto_now_add=True)

    # Weights
    gross_weight_kg = models.DecimalField(max_digits=12, decimal_places=3)
    tare_weight_kg = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    net_weight_kg = models.DecimalField(max_digits=12, decimal_places=3)
    packaging = models.JSONField(default=list, blank=True)
    packaging_count = models.PositiveIntegerField(default=0)
    estimated_pcs = models.PositiveIntegerField(null=True, blank=True)
    avg_weight_per_pc = models.DecimalField(max_digits=12, decimal_places=6, null=True, blank=True)
    pcs_sample_count = models.PositiveIntegerField(null=True, blank=True)
    pcs_sample_weight = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)

    # Material
    item_name = models.CharField(max_length=200, blank=True)
    rod_section_size = models.CharField(max_length=100, blank=True)
    material_grade = models.CharField(max_length=100, blank=True)
    alloy = models.CharField(max_length=100, blank=True)
    heat_no = models.CharField(max_length=100, blank=True)
    tc_number = models.CharField(max_length=100, blank=True)

    # Parties and documents
    supplier = models.ForeignKey(Supplier, on_delete=models.SET_NULL, null=True, blank=True, related_name='gate_entries')
    supplier_name = models.CharField(max_length=200, blank=True)
    party_code = models.CharField(max_length=50, blank=True)
    partner = models.ForeignKey(ExternalPartner, on_delete=models.SET_NULL, null=True, blank=True, related_name='gate_entries')
    process_type = models.CharField(max_length=100, blank=True)
    work_order = models.ForeignKey(WorkOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='gate_entries')
    rpo = models.ForeignKey(RawPurchaseOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='gate_entries')
    customer = models.ForeignKey(Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name='gate_entries')
    challan_no = models.CharField(max_length=100, blank=True)
    dc_number = models.CharField(max_length=100, blank=True)
    vehicle_no = models.CharField(max_length=50, blank=True)
    transporter = models.CharField(max_length=200, blank=True)

    # Documents created from this entry
    material_lot = models.ForeignKey(MaterialLot, on_delete=models.SET_NULL, null=True, blank=True, related_name='gate_entries')
    inventory_lot = models.ForeignKey(InventoryLot, on_delete=models.SET_NULL, null=True, blank=True, related_name='gate_entries')
    external_move = models.ForeignKey(WOExternalMove, on_delete=models.SET_NULL, null=True, blank=True, related_name='gate_entries')

    qc_required = models.BooleanField(default=False)
    qc_status = models.CharField(max_length=20, choices=QC_STATUS_CHOICES, default='not_required')
    status = models.CharField(max_length=20, default='completed')
    remarks = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='gate_entries')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.gate_entry_no} {self.direction} {self.material_type}"

    class Meta:
        db_table = 'gate_register'
        ordering = ['-entry_date']
        indexes = [
            models.Index(fields=['direction', 'material_type'], name='idx_gate_dir_type'),
            models.Index(fields=['entry_date'], name='idx_gate_entry_date'),
        ]
