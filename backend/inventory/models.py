from django.db import models
from decimal import Decimal
from backend.core.models import User
from backend.parties.models import Customer, Supplier
from backend.production.models import WorkOrder, ProductionBatch
from backend.purchasing.models import RawPurchaseOrder


class MaterialLot(models.Model):
    """Raw material lot (one per heat) received at the gate"""
    QC_STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
        ('not_required', 'Not Required'),
    ]
    STATUS_CHOICES = [
        ('received', 'Received'),
        ('issued', 'Issued'),
        ('consumed', 'Consumed'),
    ]

    lot_id = models.CharField(max_length=100, unique=True)
    heat_no = models.CharField(max_length=100, blank=True)
    material_grade = models.CharField(max_length=100, blank=True)
    alloy = models.CharField(max_length=100, blank=True)
    supplier = models.ForeignKey(Supplier, on_delete=models.SET_NULL, null=True, blank=True, related_name='material_lots')
    gross_weight = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    net_weight = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    qc_status = models.CharField(max_length=20, choices=QC_STATUS_CHOICES, default='pending')
    qc_remarks = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='received')
    gate_entry_no = models.CharField(max_length=50, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.lot_id

    class Meta:
        db_table = 'material_lots'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['qc_status'], name='idx_matlot_qc_status'),
            models.Index(fields=['heat_no'], name='idx_matlot_heat_no'),
        ]


class InventoryLot(models.Model):
    """Costed stock lot of raw material in kg"""
    SOURCE_CHOICES = [
        ('rpo', 'Raw Purchase Order'),
        ('adhoc', 'Ad-hoc Receipt'),
        ('external_return', 'External Process Return'),
    ]

    lot_id = models.CharField(max_length=100, unique=True)
    material_grade = models.CharField(max_length=100, blank=True)
    heat_no = models.CharField(max_length=100, blank=True)
    qty_kg = models.DecimalField(max_digits=12, decimal_places=3)
    cost_rate = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    rpo = models.ForeignKey(RawPurchaseOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='inventory_lots')
    work_order = models.ForeignKey(WorkOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='inventory_lots')
    supplier = models.ForeignKey(Supplier, on_delete=models.SET_NULL, null=True, blank=True, related_name='inventory_lots')
    source = models.CharField(max_length=20, choices=SOURCE_CHOICES, default='adhoc')
    received_date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.lot_id} ({self.qty_kg}kg)"

    @property
    def value(self):
        return (self.qty_kg * self.cost_rate).quantize(Decimal('0.01'))

    class Meta:
        db_table = 'inventory_lots'
        ordering = ['-received_date', '-created_at']
        indexes = [
            models.Index(fields=['material_grade'], name='idx_invlot_grade'),
            models.Index(fields=['source'], name='idx_invlot_source'),
        ]


class FinishedGoodsStock(models.Model):
    """Packed finished goods held in stock (overproduction, customer returns, ...)"""
    SOURCE_CHOICES = [
        ('overproduction', 'Overproduction'),
        ('customer_return', 'Customer Return'),
        ('rework_recovery', 'Rework Recovery'),
    ]

    item_code = models.CharField(max_length=100)
    customer = models.ForeignKey(Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name='finished_goods')
    work_order = models.ForeignKey(WorkOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='finished_goods')
    production_batch = models.ForeignKey(ProductionBatch, on_delete=models.SET_NULL, null=True, blank=True, related_name='finished_goods')
    quantity_available = models.PositiveIntegerField(default=0)
    quantity_reserved = models.PositiveIntegerField(default=0)
    source_type = models.CharField(max_length=20, choices=SOURCE_CHOICES, default='overproduction')
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='finished_goods')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.item_code}: {self.quantity_available}"

    class Meta:
        db_table = 'finished_goods_inventory'
        ordering = ['item_code', '-created_at']
        indexes = [
            models.Index(fields=['item_code'], name='idx_fg_item_code'),
        ]
