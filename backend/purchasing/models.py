from django.db import models
from django.db.models import Sum
from decimal import Decimal
from backend.core.models import User
from backend.parties.models import Supplier
from backend.production.models import WorkOrder

# Receipts within this many kg of the ordered quantity close the RPO without a reconciliation
RECONCILIATION_TOLERANCE_KG = Decimal('0.1')


class RawPurchaseOrder(models.Model):
    """Raw material purchase order (RPO)"""
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('approved', 'Approved'),
        ('part_received', 'Partially Received'),
        ('closed', 'Closed'),
        ('cancelled', 'Cancelled'),
    ]

    rpo_no = models.CharField(max_length=50, unique=True)
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='raw_purchase_orders')
    work_order = models.ForeignKey(WorkOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='raw_purchase_orders')
    material_grade = models.CharField(max_length=100)
    qty_ordered_kg = models.DecimalField(max_digits=12, decimal_places=3)
    rate_per_kg = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    expected_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='raw_purchase_orders')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.rpo_no

    @property
    def received_qty_kg(self):
        total = self.receipts.aggregate(total=Sum('qty_received_kg'))['total']
        return total or Decimal('0.000')

    class Meta:
        db_table = 'raw_purchase_orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_rpo_status'),
            models.Index(fields=['supplier', 'status'], name='idx_rpo_supplier_status'),
        ]


class RawPOReceipt(models.Model):
    """Quantity received against an RPO at the gate"""
    rpo = models.ForeignKey(RawPurchaseOrder, on_delete=models.CASCADE, related_name='receipts')
    gate_entry_no = models.CharField(max_length=50, blank=True)
    qty_received_kg = models.DecimalField(max_digits=12, decimal_places=3)
    received_date = models.DateField()
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.rpo.rpo_no} +{self.qty_received_kg}kg"

    class Meta:
        db_table = 'raw_po_receipts'
        ordering = ['-received_date', '-created_at']


class RawPOReconciliation(models.Model):
    """Short or excess supply found when an RPO closes, pending commercial resolution"""
    REASON_CHOICES = [
        ('short_supply', 'Short Supply'),
        ('excess_supply', 'Excess Supply'),
    ]
    RESOLUTION_CHOICES = [
        ('pending', 'Pending'),
        ('credit_note', 'Credit Note'),
        ('debit_note', 'Debit Note'),
        ('accepted', 'Accepted'),
    ]

    rpo = models.ForeignKey(RawPurchaseOrder, on_delete=models.CASCADE, related_name='reconciliations')
    reason = models.CharField(max_length=20, choices=REASON_CHOICES)
    qty_delta_kg = models.DecimalField(max_digits=12, decimal_places=3)
    rate_per_kg = models.DecimalField(max_digits=12, decimal_places=2)
    amount_delta = models.DecimalField(max_digits=14, decimal_places=2)
    resolution = models.CharField(max_length=20, choices=RESOLUTION_CHOICES, default='pending')
    resolved_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='resolved_reconciliations')
    resolved_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.rpo.rpo_no} {self.reason} {self.qty_delta_kg}kg"

    class Meta:
        db_table = 'raw_po_reconciliations'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['resolution'], name='idx_rpo_recon_resolution'),
        ]
