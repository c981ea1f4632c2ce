from decimal import Decimal
from rest_framework import serializers
from backend.parties.models import Customer
from backend.production.models import WorkOrder
from .models import Invoice, InvoiceItem, Payment, CustomerReceipt, ReceiptAllocation, SupplierPayment, TDSRecord


class InvoiceItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceItem
        fields = ['id', 'item_code', 'description', 'quantity', 'rate', 'amount', 'gst_percent', 'gst_amount', 'total_line']
        read_only_fields = ['amount', 'gst_amount', 'total_line']
        extra_kwargs = {'gst_percent': {'required': False}}

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantity must be greater than zero')
        return value

    def validate_rate(self, value):
        if value < 0:
            raise serializers.ValidationError('Rate cannot be negative')
        return value


class PaymentSerializer(serializers.ModelSerializer):
    invoice_no = serializers.CharField(source='invoice.invoice_no', read_only=True)
    customer_name = serializers.CharField(source='invoice.customer.customer_name', read_only=True)

    class Meta:
        model = Payment
        fields = ['id', 'invoice', 'invoice_no', 'customer_name', 'payment_date', 'amount', 'method',
                  'reference', 'notes', 'created_by', 'created_at']
        read_only_fields = ['created_by', 'created_at']
        extra_kwargs = {'payment_date': {'required': False}}


class ReceiptAllocationSerializer(serializers.ModelSerializer):
    invoice_no = serializers.CharField(source='invoice.invoice_no', read_only=True)
    receipt_no = serializers.CharField(source='receipt.receipt_no', read_only=True)

    class Meta:
        model = ReceiptAllocation
        fields = ['id', 'receipt', 'receipt_no', 'invoice', 'invoice_no', 'allocated_amount', 'created_at']
        read_only_fields = fields


class InvoiceSerializer(serializers.ModelSerializer):
    items = InvoiceItemSerializer(many=True, read_only=True)
    payments = PaymentSerializer(many=True, read_only=True)
    allocations = ReceiptAllocationSerializer(many=True, read_only=True)
    customer_name = serializers.CharField(source='customer.customer_name', read_only=True)
    wo_number = serializers.CharField(source='work_order.wo_number', read_only=True)

    class Meta:
        model = Invoice
        fields = [
            'id', 'invoice_no', 'customer', 'customer_name', 'work_order', 'wo_number',
            'invoice_date', 'due_date', 'currency', 'subtotal', 'gst_percent', 'gst_amount',
            'total_amount', 'paid_amount', 'balance_amount', 'status', 'expected_payment_date',
            'recovery_stage', 'notes', 'created_by', 'created_at', 'updated_at', 'voided_at',
            'items', 'payments', 'allocations',
        ]
        read_only_fields = [
            'invoice_no', 'subtotal', 'gst_amount', 'total_amount', 'paid_amount', 'balance_amount',
            'status', 'created_by', 'created_at', 'updated_at', 'voided_at',
        ]


class InvoiceListSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.customer_name', read_only=True)

    class Meta:
        model = Invoice
        fields = ['id', 'invoice_no', 'customer', 'customer_name', 'invoice_date', 'due_date', 'currency',
                  'total_amount', 'paid_amount', 'balance_amount', 'status', 'recovery_stage']


class InvoiceCreateSerializer(serializers.Serializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all())
    work_order = serializers.PrimaryKeyRelatedField(queryset=WorkOrder.objects.all(), required=False, allow_null=True)
    invoice_no = serializers.CharField(required=False, allow_blank=True)
    invoice_date = serializers.DateField(required=False)
    due_date = serializers.DateField(required=False)
    currency = serializers.CharField(required=False, max_length=3)
    gst_percent = serializers.DecimalField(max_digits=5, decimal_places=2, required=False,
                                           min_value=Decimal('0'), max_value=Decimal('100'))
    expected_payment_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    items = InvoiceItemSerializer(many=True)

    def validate_invoice_no(self, value):
        if value and Invoice.objects.filter(invoice_no=value).exists():
            raise serializers.ValidationError(f'Invoice number {value} already exists')
        return value

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('An invoice needs at least one item')
        return value

    def validate(self, attrs):
        invoice_date = attrs.get('invoice_date')
        due_date = attrs.get('due_date')
        if invoice_date and due_date and due_date < invoice_date:
            raise serializers.ValidationError({'due_date': 'Due date cannot be before the invoice date'})
        return attrs


class InvoiceUpdateSerializer(serializers.ModelSerializer):
    """Follow-up fields that may change after issue"""
    class Meta:
        model = Invoice
        fields = ['expected_payment_date', 'recovery_stage', 'notes', 'due_date']


class CustomerReceiptSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.customer_name', read_only=True)
    allocations = ReceiptAllocationSerializer(many=True, read_only=True)

    class Meta:
        model = CustomerReceipt
        fields = ['id', 'receipt_no', 'customer', 'customer_name', 'receipt_date', 'currency', 'total_amount',
                  'allocated_amount', 'unallocated_amount', 'tds_amount', 'method', 'reference', 'status',
                  'notes', 'allocations', 'created_by', 'created_at', 'updated_at']
        read_only_fields = ['allocated_amount', 'unallocated_amount', 'tds_amount', 'status',
                            'created_by', 'created_at', 'updated_at']
        extra_kwargs = {
            'receipt_no': {'required': False},
            'receipt_date': {'required': False},
        }

    def validate_total_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Receipt amount must be greater than zero')
        return value


class AllocationLineSerializer(serializers.Serializer):
    invoice = serializers.PrimaryKeyRelatedField(queryset=Invoice.objects.all())
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class AllocateSerializer(serializers.Serializer):
    allocations = AllocationLineSerializer(many=True)


class SupplierPaymentSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)

    class Meta:
        model = SupplierPayment
        fields = ['id', 'supplier', 'supplier_name', 'payment_date', 'amount', 'method', 'reference_no',
                  'tds_amount', 'notes', 'created_by', 'created_at']
        read_only_fields = ['tds_amount', 'created_by', 'created_at']
        extra_kwargs = {'payment_date': {'required': False}}

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Payment amount must be greater than zero')
        return value


class TDSRecordSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.customer_name', read_only=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    receipt_no = serializers.CharField(source='receipt.receipt_no', read_only=True)

    class Meta:
        model = TDSRecord
        fields = ['id', 'record_type', 'customer', 'customer_name', 'receipt', 'receipt_no', 'invoice',
                  'supplier', 'supplier_name', 'supplier_payment', 'pan_number', 'entity_type', 'tds_rate',
                  'gross_amount', 'tds_amount', 'net_amount', 'financial_year', 'quarter',
                  'transaction_date', 'status', 'created_at', 'updated_at']
        read_only_fields = fields


class TDSStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['pending', 'filed', 'paid'])


class VoidSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True)
