from django.db import models
from backend.core.models import User
from backend.parties.models import Customer
from backend.production.models import WorkOrder, ProductionBatch


class Pallet(models.Model):
    """Pallet of packed cartons"""
    STATUS_CHOICES = [
        ('open', 'Open'),
        ('ready_for_dispatch', 'Ready for Dispatch'),
        ('dispatched', 'Dispatched'),
    ]

    pallet_id = models.CharField(max_length=100, unique=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='open')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.pallet_id

    class Meta:
        db_table = 'pallets'
        ordering = ['-created_at']


class Carton(models.Model):
    """Packed carton of a work order"""
    STATUS_CHOICES = [
        ('packed', 'Packed'),
        ('ready_for_dispatch', 'Ready for Dispatch'),
        ('dispatched', 'Dispatched'),
    ]

    carton_id = models.CharField(max_length=100, unique=True)
    work_order = models.ForeignKey(WorkOrder, on_delete=models.CASCADE, related_name='cartons')
    quantity = models.PositiveIntegerField(default=0)
    net_weight = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True)
    gross_weight = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='packed')
    pallet = models.ForeignKey(Pallet, on_delete=models.SET_NULL, null=True, blank=True, related_name='cartons')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.carton_id

    class Meta:
        db_table = 'cartons'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['work_order', 'status'], name='idx_carton_wo_status'),
        ]


class Shipment(models.Model):
    """Outbound shipment to a customer"""
    STATUS_CHOICES = [
        ('created', 'Created'),
        ('in_transit', 'In Transit'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    ship_id = models.CharField(max_length=100, unique=True)
    customer = models.ForeignKey(Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name='shipments')
    incoterm = models.CharField(max_length=10, default='EXW')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='created')
    ship_date = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='shipments')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.ship_id

    class Meta:
        db_table = 'shipments'
        ordering = ['-created_at']


class ShipmentPallet(models.Model):
    shipment = models.ForeignKey(Shipment, on_delete=models.CASCADE, related_name='shipment_pallets')
    pallet = models.ForeignKey(Pallet, on_delete=models.CASCADE, related_name='shipment_pallets')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'shipment_pallets'
        unique_together = [['shipment', 'pallet']]


class ScanEvent(models.Model):
    """Stage transition of a carton, pallet or shipment"""
    entity_type = models.CharField(max_length=20)
    entity_id = models.CharField(max_length=100)
    from_stage = models.CharField(max_length=50, blank=True, null=True)
    to_stage = models.CharField(max_length=50)
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='scan_events')
    remarks = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.entity_type} {self.entity_id} -> {self.to_stage}"

    class Meta:
        db_table = 'scan_events'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['entity_type', 'entity_id'], name='idx_scan_entity'),
        ]


class Dispatch(models.Model):
    """Quantity dispatched from a QC-approved production batch"""
    work_order = models.ForeignKey(WorkOrder, on_delete=models.CASCADE, related_name='dispatches')
    batch = models.ForeignKey(ProductionBatch, on_delete=models.PROTECT, related_name='dispatches')
    quantity = models.PositiveIntegerField()
    shipment = models.ForeignKey(Shipment, on_delete=models.SET_NULL, null=True, blank=True, related_name='dispatches')
    remarks = models.TextField(blank=True)
    dispatched_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='dispatches')
    dispatched_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.work_order.wo_number} x{self.quantity}"

    class Meta:
        db_table = 'dispatches'
        ordering = ['-dispatched_at']


class DispatchNote(models.Model):
    """Delivery note raised when finished goods leave through the gate"""
    dispatch_note_no = models.CharField(max_length=100, unique=True)
    work_order = models.ForeignKey(WorkOrder, on_delete=models.CASCADE, related_name='dispatch_notes')
    dispatched_qty = models.PositiveIntegerField()
    gate_entry_no = models.CharField(max_length=50, blank=True)
    dispatch_date = models.DateField()
    remarks = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='dispatch_notes')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.dispatch_note_no

    class Meta:
        db_table = 'dispatch_notes'
        ordering = ['-created_at']
