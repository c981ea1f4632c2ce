from django.db import models
from decimal import Decimal, ROUND_HALF_UP
from backend.core.models import User
from backend.parties.models import Customer, Supplier
from backend.production.models import WorkOrder

DEFAULT_GST_PERCENT = Decimal('18.00')

PAYMENT_METHOD_CHOICES = [
    ('bank_transfer', 'Bank Transfer'),
    ('cheque', 'Cheque'),
    ('cash', 'Cash'),
    ('upi', 'UPI'),
    ('card', 'Card'),
    ('other', 'Other'),
]


class Invoice(models.Model):
    """Customer tax invoice"""
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('issued', 'Issued'),
        ('part_paid', 'Partially Paid'),
        ('paid', 'Paid'),
        ('overdue', 'Overdue'),
        ('void', 'Void'),
    ]
    RECOVERY_STAGE_CHOICES = [
        ('none', 'None'),
        ('friendly', 'Friendly Reminder'),
        ('firm', 'Firm Reminder'),
        ('final_notice', 'Final Notice'),
        ('hold_shipments', 'Hold Shipments'),
        ('legal', 'Legal'),
    ]

    invoice_no = models.CharField(max_length=50, unique=True)
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='invoices')
    work_order = models.ForeignKey(WorkOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='invoices')
    invoice_date = models.DateField()
    due_date = models.DateField()
    currency = models.CharField(max_length=3, default='INR')
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    gst_percent = models.DecimalField(max_digits=5, decimal_places=2, default=DEFAULT_GST_PERCENT)
    gst_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    paid_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    balance_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    expected_payment_date = models.DateField(null=True, blank=True)
    recovery_stage = models.CharField(max_length=20, choices=RECOVERY_STAGE_CHOICES, default='none')
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='invoices')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    voided_at = models.DateTimeField(null=True, blank=True)
    voided_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='voided_invoices')

    def __str__(self):
        return self.invoice_no

    class Meta:
        db_table = 'invoices'
        ordering = ['-invoice_date', '-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_invoice_status'),
            models.Index(fields=['customer', 'status'], name='idx_invoice_customer_status'),
            models.Index(fields=['due_date'], name='idx_invoice_due_date'),
        ]


class InvoiceItem(models.Model):
    """Invoice line"""
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name='items')
    item_code = models.CharField(max_length=100, blank=True)
    description = models.CharField(max_length=500)
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    rate = models.DecimalField(max_digits=12, decimal_places=2)
    amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    gst_percent = models.DecimalField(max_digits=5, decimal_places=2, default=DEFAULT_GST_PERCENT)
    gst_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_line = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    def save(self, *args, **kwargs):
        self.amount = (self.quantity * self.rate).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        self.gst_amount = (self.amount * self.gst_percent / Decimal('100')).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        self.total_line = self.amount + self.gst_amount
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'invoice_items'
        ordering = ['id']


class Payment(models.Model):
    """Payment received directly against one invoice"""
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name='payments')
    payment_date = models.DateField()
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='bank_transfer')
    reference = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='payments')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payments'
        ordering = ['-payment_date', '-created_at']
        indexes = [
            models.Index(fields=['payment_date'], name='idx_payment_date'),
        ]


class CustomerReceipt(models.Model):
    """Money received from a customer, allocated to invoices afterwards"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('partially_allocated', 'Partially Allocated'),
        ('fully_allocated', 'Fully Allocated'),
        ('cancelled', 'Cancelled'),
    ]

    receipt_no = models.CharField(max_length=50, unique=True)
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='receipts')
    receipt_date = models.DateField()
    currency = models.CharField(max_length=3, default='INR')
    total_amount = models.DecimalField(max_digits=14, decimal_places=2)
    allocated_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    unallocated_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    tds_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='bank_transfer')
    reference = models.CharField(max_length=200, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='customer_receipts')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.receipt_no

    class Meta:
        db_table = 'customer_receipts'
        ordering = ['-receipt_date', '-created_at']
        indexes = [
            models.Index(fields=['customer', 'status'], name='idx_receipt_customer_status'),
        ]


class ReceiptAllocation(models.Model):
    """Part of a receipt applied to an invoice"""
    receipt = models.ForeignKey(CustomerReceipt, on_delete=models.CASCADE, related_name='allocations')
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name='allocations')
    allocated_amount = models.DecimalField(max_digits=14, decimal_places=2)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='receipt_allocations')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.receipt.receipt_no} -> {self.invoice.invoice_no}: {self.allocated_amount}"

    class Meta:
        db_table = 'receipt_allocations'
        ordering = ['created_at']
        unique_together = [['receipt', 'invoice']]


class SupplierPayment(models.Model):
    """Payment made to a supplier"""
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='payments')
    payment_date = models.DateField()
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='bank_transfer')
    reference_no = models.CharField(max_length=200, blank=True)
    tds_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='supplier_payments')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'supplier_payments'
        ordering = ['-payment_date', '-created_at']


class TDSRecord(models.Model):
    """Tax deducted at source on a receipt (receivable) or a supplier payment (payable)"""
    RECORD_TYPE_CHOICES = [
        ('receivable', 'Receivable'),
        ('payable', 'Payable'),
    ]
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('filed', 'Filed'),
        ('paid', 'Paid'),
    ]

    record_type = models.CharField(max_length=20, choices=RECORD_TYPE_CHOICES)
    customer = models.ForeignKey(Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name='tds_records')
    receipt = models.ForeignKey(CustomerReceipt, on_delete=models.SET_NULL, null=True, blank=True, related_name='tds_records')
    invoice = models.ForeignKey(Invoice, on_delete=models.SET_NULL, null=True, blank=True, related_name='tds_records')
    supplier = models.ForeignKey(Supplier, on_delete=models.SET_NULL, null=True, blank=True, related_name='tds_records')
    supplier_payment = models.ForeignKey(SupplierPayment, on_delete=models.SET_NULL, null=True, blank=True, related_name='tds_records')
    pan_number = models.CharField(max_length=10, blank=True)
    entity_type = models.CharField(max_length=50, blank=True)
    tds_rate = models.DecimalField(max_digits=5, decimal_places=2)
    gross_amount = models.DecimalField(max_digits=14, decimal_places=2)
    tds_amount = models.DecimalField(max_digits=14, decimal_places=2)
    net_amount = models.DecimalField(max_digits=14, decimal_places=2)
    financial_year = models.CharField(max_length=9)
    quarter = models.CharField(max_length=2)
    transaction_date = models.DateField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='tds_records')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.record_type} TDS {self.tds_amount} ({self.financial_year} {self.quarter})"

    class Meta:
        db_table = 'tds_records'
        ordering = ['-transaction_date', '-created_at']
        indexes = [
            models.Index(fields=['financial_year', 'quarter'], name='idx_tds_fy_quarter'),
            models.Index(fields=['record_type', 'status'], name='idx_tds_type_status'),
        ]
